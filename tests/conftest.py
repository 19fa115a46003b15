"""Pytest configuration and fixtures for Kiln tests."""

from collections import Counter

import pytest

from kiln import DictLoader, Environment
from kiln.environment import terminal

TEMPLATES = {
    "base.html": (
        "<html>"
        "<head>{% block head %}<title>Site</title>{% endblock %}</head>"
        "<body>{% block body %}default body{% endblock %}</body>"
        "</html>"
    ),
    "child.html": '{% extends "base.html" %}{% block body %}Hello {{ name }}{% endblock %}',
    "partial.html": "<p>Partial content</p>",
    "nested.html": '<div>{% include "partial.html" %}</div>',
    "page.html": '{% include "partial.html" %}<h1>{{ title }}</h1>',
}


class CountingLoader(DictLoader):
    """DictLoader that records every read, for cache assertions."""

    __slots__ = ("reads",)

    def __init__(self, mapping: dict[str, str]):
        super().__init__(mapping)
        self.reads: Counter[str] = Counter()

    def get_source(self, name: str) -> tuple[str, None]:
        self.reads[name] += 1
        return super().get_source(name)


@pytest.fixture(autouse=True)
def _plain_messages(monkeypatch):
    """Error messages are asserted as plain text."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def loader() -> CountingLoader:
    """A counting in-memory loader over the shared test templates."""
    return CountingLoader(dict(TEMPLATES))


@pytest.fixture
def env(loader: CountingLoader) -> Environment:
    """A cache-backed Environment over the counting loader."""
    return Environment(loader=loader)


@pytest.fixture
def template_root(tmp_path):
    """A template root directory on disk holding the shared test templates."""
    root = tmp_path / "templates"
    root.mkdir()
    for name, source in TEMPLATES.items():
        (root / name).write_text(source, encoding="utf-8")
    return root
