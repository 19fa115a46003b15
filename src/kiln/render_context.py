"""Kiln RenderContext: per-render state kept out of the variable bindings.

Error sites deep in the pipeline (the expression parser, loaders reached
through the cache) read the current template name from here instead of
having it threaded through every call.

Thread Safety:
    ContextVars are per-thread, so concurrent renders each see their own
    RenderContext.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field


@dataclass
class RenderContext:
    """Per-render state.

    Attributes:
        template_name: Name of the template being rendered (None for strings)
        stage: Pipeline stage in progress: "inheritance", "include" or "substitute"
        loaded: Names of the parent and included templates, in load order
        cached: Whether this render goes through the shared template cache
    """

    template_name: str | None = None
    stage: str | None = None
    loaded: list[str] = field(default_factory=list)
    cached: bool = False

    def record_load(self, name: str) -> None:
        self.loaded.append(name)


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "kiln_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None if not in render)."""
    return _render_context.get()


def current_template_name() -> str | None:
    ctx = _render_context.get()
    return ctx.template_name if ctx else None


@contextmanager
def render_context(
    template_name: str | None = None,
    *,
    cached: bool = False,
) -> Iterator[RenderContext]:
    """Make a fresh RenderContext current for the duration of the block.

    The previous context is restored on exit, so nested renders (a template
    function that itself renders) keep their own state.

    Example:
        with render_context(template_name="page.html") as ctx:
            html = renderer.render(source, variables)
            # ctx.loaded lists the parent and includes that were read
    """
    ctx = RenderContext(template_name=template_name, cached=cached)
    token = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
