"""Kiln Renderer: expands a template document into its final string.

Pipeline, fixed order, no interleaving:

    source
      │ 1. inheritance   {% extends %} → parent with child blocks spliced in
      │ 2. inclusion     {% include %} → raw file content
      │ 3. substitution  {{ expr }}    → variable value / function result
      ▼
    rendered string

Each stage scans the output of the previous one. Text spliced in by a stage
is not re-scanned by that stage: an included file's own ``{% include %}``
is left as written, and a variable whose value contains ``{{ x }}`` is
emitted verbatim.

StringBuilder Pattern:
Every stage collects ``[text, replacement, text, ...]`` in a list and joins
once, O(n) in the document size.

Thread-Safety:
A Renderer holds only immutable patterns, a loader and an optional cache.
Without a cache it is safe to share freely. With a cache, callers hold
``cache.lock()`` around ``render()`` (``Environment`` does this).

"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from kiln.environment.exceptions import UndefinedError, UndefinedFunctionError
from kiln.nodes import Call, Expression, Span
from kiln.parser import parse_expression
from kiln.render_context import get_render_context, render_context

if TYPE_CHECKING:
    from kiln.environment.loaders import Loader
    from kiln.environment.registry import TemplateFunction
    from kiln.patterns import DirectivePatterns
    from kiln.template.cache import TemplateCache

logger = logging.getLogger(__name__)


def splice(source: str, replacements: Iterable[tuple[Span, str]]) -> str:
    """Replace non-overlapping, ordered spans of ``source``.

    ``replacements`` is consumed lazily, so an error raised while computing
    one replacement aborts the whole splice.
    """
    buf: list[str] = []
    _append = buf.append
    pos = 0
    for span, text in replacements:
        _append(source[pos : span.col_offset])
        _append(text)
        pos = span.end
    _append(source[pos:])
    return "".join(buf)


class Renderer:
    """Runs the three render stages against one loader.

    Attributes:
        patterns: Compiled directive patterns
        loader: Source of parent and included templates
        cache: Optional shared cache; when set, every file read goes through it

    Example:
        >>> renderer = Renderer(DirectivePatterns.compile(), DictLoader({"nav.html": "<nav/>"}))
        >>> renderer.render('{% include "nav.html" %}{{ title }}', {"title": "Home"})
        '<nav/>Home'

    """

    __slots__ = ("cache", "loader", "patterns")

    def __init__(
        self,
        patterns: DirectivePatterns,
        loader: Loader,
        cache: TemplateCache | None = None,
    ):
        self.patterns = patterns
        self.loader = loader
        self.cache = cache

    def load(self, name: str) -> str:
        """Read a template through the cache when there is one."""
        ctx = get_render_context()
        if ctx is not None:
            ctx.record_load(name)
        if self.cache is not None:
            return self.cache.get(name)
        source, _ = self.loader.get_source(name)
        return source

    def render(
        self,
        source: str,
        variables: Mapping[str, Any],
        functions: Mapping[str, TemplateFunction] | None = None,
        *,
        name: str | None = None,
    ) -> str:
        """Render ``source`` to a string.

        Args:
            source: Template text
            variables: Variable bindings; values are rendered with ``str()``
            functions: Callables available to ``{{ func(...) }}``; None means
                any call fails
            name: Template name for error messages

        Raises:
            TemplateNotFoundError: A parent or included template is missing
            TemplateLoadError: A parent or included template cannot be read
            TemplateSyntaxError: An expression is malformed
            UndefinedError: A variable is not bound
            UndefinedFunctionError: A called function is not registered
        """
        with render_context(name, cached=self.cache is not None) as ctx:
            ctx.stage = "inheritance"
            rendered = self.resolve_inheritance(source)
            ctx.stage = "include"
            rendered = self.resolve_includes(rendered)
            ctx.stage = "substitute"
            rendered = self.substitute(rendered, variables, functions)
            logger.debug(
                f"Rendered {name or '<string>'}: {len(rendered)} chars, loaded {ctx.loaded}"
            )
        return rendered

    # ─────────────────────────────────────────────────────────────────────
    # Stage 1: inheritance
    # ─────────────────────────────────────────────────────────────────────

    def resolve_inheritance(self, source: str) -> str:
        """Replace ``{% extends %}`` and the child body with the resolved parent.

        Text before the directive is kept, with its own blocks reduced to
        their content. The child's block directives override same-named
        parent blocks; other parent blocks keep their own content. Without
        an extends directive, the template's own blocks are reduced to
        their content.
        """
        extends = self.patterns.find_extends(source)
        if extends is None:
            return self.resolve_blocks(source, {})

        parent = self.load(extends.template)
        overrides = {block.name: block.content for block in self.patterns.blocks(extends.body)}
        logger.debug(f"Extending {extends.template} with blocks {sorted(overrides)}")
        prefix = self.resolve_blocks(source[: extends.col_offset], {})
        return prefix + self.resolve_blocks(parent, overrides)

    def resolve_blocks(self, source: str, overrides: Mapping[str, str]) -> str:
        return splice(
            source,
            (
                (block, overrides.get(block.name, block.content))
                for block in self.patterns.blocks(source)
            ),
        )

    # ─────────────────────────────────────────────────────────────────────
    # Stage 2: inclusion
    # ─────────────────────────────────────────────────────────────────────

    def resolve_includes(self, source: str) -> str:
        """Splice each included file's raw content over its directive."""
        return splice(
            source,
            ((include, self.load(include.template)) for include in self.patterns.includes(source)),
        )

    # ─────────────────────────────────────────────────────────────────────
    # Stage 3: expression substitution
    # ─────────────────────────────────────────────────────────────────────

    def substitute(
        self,
        source: str,
        variables: Mapping[str, Any],
        functions: Mapping[str, TemplateFunction] | None = None,
    ) -> str:
        """Replace every ``{{ expr }}`` in one pass."""
        return splice(
            source,
            (
                (expr, self.evaluate(expr, variables, functions))
                for expr in self.patterns.expressions(source)
            ),
        )

    def evaluate(
        self,
        expr: Expression,
        variables: Mapping[str, Any],
        functions: Mapping[str, TemplateFunction] | None = None,
    ) -> str:
        ctx = get_render_context()
        template = ctx.template_name if ctx else None
        node = parse_expression(expr.body, variables, template=template)

        if isinstance(node, Call):
            func = functions.get(node.func) if functions is not None else None
            if func is None:
                raise UndefinedFunctionError(
                    node.func,
                    template,
                    available_names=functions.keys() if functions is not None else None,
                    expression=expr.body,
                )
            return str(func(list(node.args)))

        try:
            return str(variables[node.name])
        except KeyError:
            raise UndefinedError(
                node.name,
                template,
                available_names=variables.keys(),
                expression=expr.body,
            ) from None
