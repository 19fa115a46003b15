"""Custom functions -- extending kiln with template helpers.

Demonstrates registering functions on the Environment (item assignment and
the @env.functions.register() decorator) and passing one-off functions to
a single render. Functions receive their arguments as a list of strings.

Run:
    python app.py
"""

from pathlib import Path

from kiln import Environment

templates_dir = Path(__file__).parent / "templates"
env = Environment(template_root=templates_dir)


def money(args: list[str]) -> str:
    """Format an amount as currency; the optional second argument is the symbol."""
    amount = float(args[0])
    currency = args[1] if len(args) > 1 else "$"
    return f"{currency}{amount:,.2f}"


env.functions["money"] = money


@env.functions.register("count")
def pluralize(args: list[str]) -> str:
    """Render "1 item" / "3 items"."""
    n, singular = int(args[0]), args[1]
    return f"{n} {singular if n == 1 else singular + 's'}"


output = env.render("invoice.html", {"customer": "Ada", "total": 1234.56, "item_count": 3})

shouted = env.render(
    "invoice.html",
    {"customer": "Ada", "total": 5, "item_count": 1},
    functions={"money": lambda args: "FREE"},
)


def main() -> None:
    print(output)
    print(shouted)


if __name__ == "__main__":
    main()
