from __future__ import annotations

from pathlib import Path

import pytest

from kiln import Environment, FileSystemLoader

SECTION_COUNT = 50

TEMPLATES = {
    "minimal.html": "Hello, {{ name }}!",
    "base.html": (
        "<html><head>{% block head %}<title>{{ title }}</title>{% endblock %}</head>\n"
        '<body>{% include "nav.html" %}\n'
        "{% block content %}{% endblock %}\n"
        '{% include "footer.html" %}</body></html>'
    ),
    "nav.html": '<nav><a href="/">{{ site }}</a></nav>',
    "footer.html": "<footer>{{ site }}</footer>",
    "page.html": (
        '{% extends "base.html" %}\n'
        "{% block content %}\n"
        + "".join(
            f'<section id="s{i}"><h2>{{{{ title }}}}</h2>{{{{ upper(body) }}}}</section>\n'
            for i in range(SECTION_COUNT)
        )
        + "{% endblock %}"
    ),
}

CONTEXT = {"name": "Benchmark", "title": "Home", "site": "kiln", "body": "lorem ipsum"}


def upper(args: list[str]) -> str:
    return args[0].upper()


FUNCTIONS = {"upper": upper}


@pytest.fixture(scope="session")
def template_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    root = tmp_path_factory.mktemp("templates")
    for name, source in TEMPLATES.items():
        (root / name).write_text(source, encoding="utf-8")
    return root


@pytest.fixture(scope="session")
def kiln_env(template_dir: Path) -> Environment:
    """Warm, cache-backed environment; every template already loaded."""
    env = Environment(loader=FileSystemLoader(template_dir), functions=FUNCTIONS)
    for name in TEMPLATES:
        env.get_source(name)
    return env


@pytest.fixture(scope="session")
def context() -> dict[str, str]:
    return CONTEXT
