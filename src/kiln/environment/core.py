"""Kiln Environment: the long-lived engine object.

An Environment is built once at server startup and shared by every request
handler. It owns:

- the compiled directive patterns
- the loader scoped to the template root
- the shared ``TemplateCache``
- environment-wide template functions

Two ways to render:

Cache-backed (``Environment.render`` / ``Environment.render_string``):
    Template files are read once per Environment and reused. The cache lock
    is held for the whole render, so cached renders run one at a time.

Stateless (``render_template`` / ``render_template_string``):
    Each call compiles its own patterns and loader and reads files
    directly. Nothing is shared, so calls need no coordination.

Example:
    >>> from kiln import Environment
    >>> env = Environment(template_root="templates/")
    >>> env.functions["upper"] = lambda args: args[0].upper()
    >>> env.render("index.html", {"user": "ada"})

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from kiln.environment.loaders import FileSystemLoader, Loader
from kiln.environment.registry import FunctionRegistry, TemplateFunction
from kiln.patterns import DirectivePatterns
from kiln.template import Renderer, TemplateCache

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_ROOT = "templates"


class Environment:
    """Central configuration and cache-backed rendering.

    Args:
        loader: Template source. Defaults to
            ``FileSystemLoader(template_root, encoding)``.
        template_root: Directory templates are read from when no loader is given
        encoding: File encoding for the default loader
        functions: Initial environment-wide template functions
        patterns: Pre-compiled directive patterns (compiled here if omitted)

    Attributes:
        loader: The template loader
        patterns: Compiled directive patterns
        cache: Shared ``TemplateCache`` in front of ``loader``
        functions: ``FunctionRegistry`` of environment-wide functions

    Thread-Safety:
        Safe to share between request threads. Per-call functions are
        layered over the registry snapshot taken at the start of a render;
        registering functions later does not affect renders in flight.

    """

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        template_root: str | Path = DEFAULT_TEMPLATE_ROOT,
        encoding: str = "utf-8",
        functions: Mapping[str, TemplateFunction] | None = None,
        patterns: DirectivePatterns | None = None,
    ):
        self.loader: Loader = (
            loader if loader is not None else FileSystemLoader(template_root, encoding)
        )
        self.patterns = patterns if patterns is not None else DirectivePatterns.compile()
        self.cache = TemplateCache(self.loader)
        self._functions: dict[str, TemplateFunction] = dict(functions or {})
        self.functions = FunctionRegistry(self)
        self._renderer = Renderer(self.patterns, self.loader, self.cache)
        logger.debug(f"Environment ready with loader {type(self.loader).__name__}")

    def get_source(self, name: str) -> str:
        """Return a template's source, loading it into the cache if needed."""
        with self.cache.lock():
            return self.cache.get(name)

    def render(
        self,
        name: str,
        variables: Mapping[str, Any] | None = None,
        functions: Mapping[str, TemplateFunction] | None = None,
    ) -> str:
        """Render the named template through the shared cache.

        Raises:
            TemplateError: Any subclass; see ``Renderer.render``
        """
        with self.cache.lock():
            source = self.cache.get(name)
            return self._renderer.render(
                source, variables or {}, self._merge_functions(functions), name=name
            )

    def render_string(
        self,
        source: str,
        variables: Mapping[str, Any] | None = None,
        functions: Mapping[str, TemplateFunction] | None = None,
        *,
        name: str | None = None,
    ) -> str:
        """Render template text; parents and includes go through the cache."""
        with self.cache.lock():
            return self._renderer.render(
                source, variables or {}, self._merge_functions(functions), name=name
            )

    def _merge_functions(
        self, functions: Mapping[str, TemplateFunction] | None
    ) -> Mapping[str, TemplateFunction] | None:
        registered = self.functions.snapshot()
        if functions is None:
            return registered or None
        if not registered:
            return functions
        return {**registered, **functions}

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__} "
            f"cached={len(self.cache)} functions={len(self.functions)}>"
        )


def _stateless_renderer(
    loader: Loader | None, template_root: str | Path, encoding: str
) -> Renderer:
    if loader is None:
        loader = FileSystemLoader(template_root, encoding)
    return Renderer(DirectivePatterns.compile(), loader)


def render_template_string(
    template: str,
    variables: Mapping[str, Any],
    functions: Mapping[str, TemplateFunction] | None = None,
    *,
    template_root: str | Path = DEFAULT_TEMPLATE_ROOT,
    encoding: str = "utf-8",
    loader: Loader | None = None,
) -> str:
    """Render template text without any shared state.

    Parents and includes are read directly from ``template_root`` (or
    ``loader``) on every call.

    Example:
        >>> render_template_string("Hello, {{ name }}!", {"name": "World"})
        'Hello, World!'
    """
    renderer = _stateless_renderer(loader, template_root, encoding)
    return renderer.render(template, variables, functions)


def render_template(
    file: str,
    variables: Mapping[str, Any],
    functions: Mapping[str, TemplateFunction] | None = None,
    *,
    template_root: str | Path = DEFAULT_TEMPLATE_ROOT,
    encoding: str = "utf-8",
    loader: Loader | None = None,
) -> str:
    """Render a template file without any shared state.

    Raises:
        TemplateNotFoundError: If ``file`` does not exist under the root
        TemplateLoadError: If ``file`` cannot be read
    """
    renderer = _stateless_renderer(loader, template_root, encoding)
    source, _ = renderer.loader.get_source(file)
    return renderer.render(source, variables, functions, name=file)
