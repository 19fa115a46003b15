"""Directive patterns for Kiln.

The four textual markers a template is authored with:

    {{ expr }}                         expression
    {% include "partial.html" %}       include
    {% extends "base.html" %}          extends (captures the rest of the document)
    {% block name %}...{% endblock %}  block

Patterns are compiled once per ``DirectivePatterns`` instance and handed to
the renderer explicitly. The compiled objects are immutable and safe to
share between threads.

"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from kiln.environment.exceptions import InternalTemplateError
from kiln.nodes import Block, Expression, Extends, Include

# Exactly one space pads each side of an expression body. The body is
# non-greedy and single-line, so "{{ a }} {{ b }}" holds two expressions.
EXPRESSION = r"\{\{ (?P<body>.*?) \}\}"

INCLUDE = r'\{% include "(?P<filename>[^"\n]*)" %\}'

EXTENDS = r'\{% extends "(?P<filename>[^"\n]*)" %\}(?P<body>.*)'

# One newline right after the opening tag and one right before the closing
# tag belong to the markup, not the content. Blocks do not nest.
BLOCK = r"\{% block (?P<name>\S+) %\}\n?(?P<content>.*?)\n?\{% endblock %\}"


@dataclass(frozen=True, slots=True)
class DirectivePatterns:
    """Compiled directive patterns plus typed finders over them.

    Example:
        >>> patterns = DirectivePatterns.compile()
        >>> [e.body for e in patterns.expressions("{{ a }} and {{ b }}")]
        ['a', 'b']

    """

    expression: re.Pattern[str]
    include: re.Pattern[str]
    extends: re.Pattern[str]
    block: re.Pattern[str]

    @classmethod
    def compile(
        cls,
        *,
        expression: str = EXPRESSION,
        include: str = INCLUDE,
        extends: str = EXTENDS,
        block: str = BLOCK,
    ) -> DirectivePatterns:
        """Compile the directive patterns.

        Custom sources must keep the named groups of the defaults:
        ``body`` (expression), ``filename`` (include, extends), ``body``
        (extends), ``name`` and ``content`` (block).

        Raises:
            InternalTemplateError: If a pattern source does not compile
        """
        return cls(
            expression=_compile("expression", expression, 0),
            include=_compile("include", include, 0),
            extends=_compile("extends", extends, re.DOTALL),
            block=_compile("block", block, re.DOTALL),
        )

    def expressions(self, source: str) -> Iterator[Expression]:
        for m in self.expression.finditer(source):
            yield Expression(col_offset=m.start(), end=m.end(), body=m["body"])

    def includes(self, source: str) -> Iterator[Include]:
        for m in self.include.finditer(source):
            yield Include(col_offset=m.start(), end=m.end(), template=m["filename"])

    def blocks(self, source: str) -> Iterator[Block]:
        for m in self.block.finditer(source):
            yield Block(col_offset=m.start(), end=m.end(), name=m["name"], content=m["content"])

    def find_extends(self, source: str) -> Extends | None:
        """Return the leftmost extends directive, or None."""
        m = self.extends.search(source)
        if m is None:
            return None
        return Extends(col_offset=m.start(), end=m.end(), template=m["filename"], body=m["body"])


def _compile(name: str, source: str, flags: int) -> re.Pattern[str]:
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise InternalTemplateError(name, str(e)) from e
