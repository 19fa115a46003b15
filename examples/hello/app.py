"""Hello World -- the simplest kiln example.

Render a template from a string with a variable binding.
No templates directory needed.

Run:
    python app.py
"""

from kiln import render_template_string

TEMPLATE = "Hello, {{ name }}!"

output = render_template_string(TEMPLATE, {"name": "World"})


def main() -> None:
    print(output)
    print()

    # Same template, different bindings
    for name in ["Kiln", "Python"]:
        print(render_template_string(TEMPLATE, {"name": name}))


if __name__ == "__main__":
    main()
