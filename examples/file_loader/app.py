"""File-based templates -- the most common real-world pattern.

Loads templates from disk through an Environment, demonstrates template
inheritance (extends/block) and includes. Both pages share base.html and
the nav partial, which are read from disk once.

Run:
    python app.py
"""

from pathlib import Path

from kiln import Environment

templates_dir = Path(__file__).parent / "templates"
env = Environment(template_root=templates_dir)

home_output = env.render(
    "home.html",
    {
        "site_name": "My Site",
        "title": "Welcome",
        "message": "This is a kiln-powered site with template inheritance.",
    },
)

about_output = env.render(
    "about.html",
    {
        "site_name": "My Site",
        "description": "Built with kiln, a small server-side template engine.",
    },
)


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)
    print()
    print(f"Cached: {', '.join(env.cache.keys())}")


if __name__ == "__main__":
    main()
