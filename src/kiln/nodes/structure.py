"""Directive matches found in a template document."""

from __future__ import annotations

from dataclasses import dataclass

from kiln.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Span(Node):
    """A matched region ``[col_offset, end)`` of the working document."""

    end: int


@dataclass(frozen=True, slots=True)
class Expression(Span):
    """Expression marker: {{ body }}"""

    body: str


@dataclass(frozen=True, slots=True)
class Include(Span):
    """File inclusion: {% include "partial.html" %}"""

    template: str


@dataclass(frozen=True, slots=True)
class Extends(Span):
    """Template inheritance: {% extends "base.html" %} plus the child body.

    The span runs from the directive to the end of the document.
    """

    template: str
    body: str


@dataclass(frozen=True, slots=True)
class Block(Span):
    """Named block: {% block name %}...{% endblock %}"""

    name: str
    content: str
