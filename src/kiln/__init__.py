"""Kiln: a small server-side template engine.

Expands a template document against variables and functions, with
single-parent inheritance, file inclusion and a shared template cache.

Quickstart:
    >>> from kiln import render_template_string
    >>> render_template_string("Hello, {{ name }}!", {"name": "World"})
    'Hello, World!'

File-based templates with caching:
    >>> from kiln import Environment
    >>> env = Environment(template_root="templates/")
    >>> env.render("index.html", {"title": "Home"})

Syntax:
    {{ name }}                          variable
    {{ func("literal", name) }}         function call, args passed as a list
    {% include "partial.html" %}        splice a file in verbatim
    {% extends "base.html" %}           inherit from a parent template
    {% block name %}...{% endblock %}   named block a child can override

Pipeline:
1. **Inheritance**: ``{% extends %}`` is replaced by the parent, with the
   child's blocks spliced over the parent's
2. **Inclusion**: ``{% include %}`` directives are replaced by file content
3. **Substitution**: every ``{{ }}`` becomes a variable value or function result

Strict Lookups:
Undefined variables raise ``UndefinedError`` and unknown functions raise
``UndefinedFunctionError``; neither ever renders as an empty string.

"""

from kiln.environment import (
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    InternalTemplateError,
    TemplateError,
    TemplateLoadError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UndefinedError,
    UndefinedFunctionError,
    render_template,
    render_template_string,
)
from kiln.nodes import Call, Name
from kiln.parser import parse_expression
from kiln.patterns import DirectivePatterns
from kiln.render_context import RenderContext, get_render_context, render_context
from kiln.template import Renderer, TemplateCache

__version__ = "0.1.0"

__all__ = [
    "Call",
    "DictLoader",
    "DirectivePatterns",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "InternalTemplateError",
    "Name",
    "RenderContext",
    "Renderer",
    "TemplateCache",
    "TemplateError",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "UndefinedError",
    "UndefinedFunctionError",
    "__version__",
    "get_render_context",
    "parse_expression",
    "render_context",
    "render_template",
    "render_template_string",
]
