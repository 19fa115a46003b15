"""Exceptions for the Kiln template engine.

Exception Hierarchy:
TemplateError (base)
├── InternalTemplateError     # A directive pattern could not be compiled
├── TemplateNotFoundError     # Template file not found by the loader
├── TemplateLoadError         # Template found but could not be read
├── TemplateSyntaxError       # Malformed {{ ... }} expression
├── UndefinedError            # Undefined variable
└── UndefinedFunctionError    # Undefined function, or no functions given

Every render stage fails fast: the first error is raised unchanged to the
caller and no partial output is produced.

Example:
    ```
    KLN-RUN-001: Undefined variable 'titl' in article.html
      Expression: {{ titl }}
      Hint: Did you mean 'title'?
    ```

"""

from __future__ import annotations

from collections.abc import Iterable
from difflib import get_close_matches
from enum import Enum

from kiln.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes for Kiln template errors.

    Format: KLN-{CATEGORY}-{NUMBER}
    Categories: INT (engine internals), PAR (expression parser),
    RUN (substitution), TPL (template loading)
    """

    # Engine internals (KLN-INT-xxx)
    INVALID_PATTERN = "KLN-INT-001"

    # Expression parser (KLN-PAR-xxx)
    CALL_WITHOUT_NAME = "KLN-PAR-001"
    UNCLOSED_PARENTHESES = "KLN-PAR-002"
    UNCLOSED_STRING = "KLN-PAR-003"
    UNEXPECTED_CHARACTER = "KLN-PAR-004"
    UNEXPECTED_SPACE = "KLN-PAR-005"

    # Substitution (KLN-RUN-xxx)
    UNDEFINED_VARIABLE = "KLN-RUN-001"
    UNDEFINED_FUNCTION = "KLN-RUN-002"

    # Template loading (KLN-TPL-xxx)
    TEMPLATE_NOT_FOUND = "KLN-TPL-001"
    TEMPLATE_LOAD_FAILED = "KLN-TPL-002"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "INT": "internal",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


def _did_you_mean(name: str, candidates: Iterable[str] | None) -> str | None:
    if not candidates:
        return None
    matches = get_close_matches(name, sorted(candidates), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _location(template: str | None) -> str:
    return terminal.location(template or "<template>")


class TemplateError(Exception):
    """Base exception for all Kiln template errors.

    Catch this to handle any render failure in one place, e.g. to build an
    error page:

        >>> try:
        ...     body = env.render("index.html", {"user": name})
        ... except TemplateError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: ErrorCode identifying the kind of failure.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a single-header terminal diagnostic."""
        return terminal.format_error_header(self.code.value if self.code else None, str(self))


class InternalTemplateError(TemplateError):
    """A directive pattern could not be compiled.

    Only reachable when custom pattern sources are handed to
    ``DirectivePatterns.compile()``; the built-in patterns always compile.
    """

    code: ErrorCode | None = ErrorCode.INVALID_PATTERN

    def __init__(self, pattern_name: str, reason: str):
        self.pattern_name = pattern_name
        self.reason = reason
        super().__init__(f"Could not compile the {pattern_name} pattern: {reason}")


class TemplateNotFoundError(TemplateError):
    """Template not found by the configured loader.

    Raised for the initial template, a parent named by ``{% extends %}``,
    or a file named by ``{% include %}``.

    Example:
            >>> env.render("nonexistent.html", {})
        TemplateNotFoundError: Template 'nonexistent.html' not found in: templates

    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateLoadError(TemplateError):
    """Template exists but could not be read (permissions, encoding, I/O)."""

    code: ErrorCode | None = ErrorCode.TEMPLATE_LOAD_FAILED

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Could not read template '{name}': {reason}")


class TemplateSyntaxError(TemplateError):
    """Malformed expression inside ``{{ ... }}``.

    When ``expression`` and ``col_offset`` are known, the message includes
    the expression with a caret under the offending character:

        Syntax Error: Unclosed parentheses
          --> page.html
           |
           | {{ foo( }}
           |         ^
    """

    code: ErrorCode | None = ErrorCode.UNEXPECTED_CHARACTER

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        col_offset: int | None = None,
        template: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.expression = expression
        self.col_offset = col_offset
        self.template = template
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        header = f"Syntax Error: {self.message}\n  --> {self.template or '<template>'}"
        if self.expression is None:
            return header
        # 3 == len("{{ "), so the caret lines up with the expression body
        snippet = f"\n   |\n   | {{{{ {self.expression} }}}}"
        if self.col_offset is not None:
            snippet += f"\n   | {' ' * (self.col_offset + 3)}^"
        return header + snippet

    def format_compact(self) -> str:
        """Format syntax error as structured terminal diagnostic."""
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  --> {_location(self.template)}",
        ]
        if self.expression is not None:
            parts.append(f"  Expression: {{{{ {self.expression} }}}}")
        return "\n".join(parts)


class UndefinedError(TemplateError):
    """An expression or function argument names an unbound variable.

    Undefined variables never render as an empty string.

    If ``available_names`` is provided, a "Did you mean?" suggestion is
    included when a close match exists.

    Example:
            >>> render_template_string("{{ undefined_var }}", {})
        UndefinedError: Undefined variable 'undefined_var' in <template>

    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        template: str | None = None,
        available_names: Iterable[str] | None = None,
        expression: str | None = None,
    ):
        self.name = name
        self.template = template or "<template>"
        self.expression = expression
        self.suggestion = _did_you_mean(name, available_names)
        super().__init__(self._format_message())

    def _format_message(self, colored: bool = False) -> str:
        where = _location(self.template) if colored else self.template
        msg = f"Undefined variable '{self.name}' in {where}"
        if self.suggestion:
            match = terminal.suggestion(self.suggestion) if colored else self.suggestion
            msg += f". Did you mean '{match}'?"
        return msg

    def format_compact(self) -> str:
        """Format undefined variable error as structured terminal diagnostic."""
        parts = [
            terminal.format_error_header(
                self.code.value if self.code else None, self._format_message(colored=True)
            )
        ]
        if self.expression is not None:
            parts.append(f"  Expression: {{{{ {self.expression} }}}}")
        parts.append(
            f"  {terminal.hint('Hint:')} pass '{self.name}' in the variables given to render()"
        )
        return "\n".join(parts)


class UndefinedFunctionError(TemplateError):
    """A call names a function that is not registered.

    Also raised when a template calls any function and no function
    registry was supplied at all.
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_FUNCTION

    def __init__(
        self,
        name: str,
        template: str | None = None,
        available_names: Iterable[str] | None = None,
        expression: str | None = None,
    ):
        self.name = name
        self.template = template or "<template>"
        self.expression = expression
        self.suggestion = _did_you_mean(name, available_names)
        self.no_registry = available_names is None
        super().__init__(self._format_message())

    def _format_message(self, colored: bool = False) -> str:
        where = _location(self.template) if colored else self.template
        msg = f"Undefined function '{self.name}' in {where}"
        if self.no_registry:
            msg += " (no functions were registered)"
        elif self.suggestion:
            match = terminal.suggestion(self.suggestion) if colored else self.suggestion
            msg += f". Did you mean '{match}'?"
        return msg

    def format_compact(self) -> str:
        """Format undefined function error as structured terminal diagnostic."""
        parts = [
            terminal.format_error_header(
                self.code.value if self.code else None, self._format_message(colored=True)
            )
        ]
        if self.expression is not None:
            parts.append(f"  Expression: {{{{ {self.expression} }}}}")
        return "\n".join(parts)
