"""Kiln environment: configuration, loaders, functions and errors.

Re-exports the public API so callers can write
``from kiln.environment import Environment, UndefinedError``.
"""

from kiln.environment.core import (
    DEFAULT_TEMPLATE_ROOT,
    Environment,
    render_template,
    render_template_string,
)
from kiln.environment.exceptions import (
    ErrorCode,
    InternalTemplateError,
    TemplateError,
    TemplateLoadError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UndefinedError,
    UndefinedFunctionError,
)
from kiln.environment.loaders import DictLoader, FileSystemLoader, FunctionLoader, Loader
from kiln.environment.registry import FunctionRegistry, TemplateFunction

__all__ = [
    "DEFAULT_TEMPLATE_ROOT",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "FunctionRegistry",
    "InternalTemplateError",
    "Loader",
    "TemplateError",
    "TemplateFunction",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "UndefinedError",
    "UndefinedFunctionError",
    "render_template",
    "render_template_string",
]
