"""Expression parsing for Kiln.

Turns the text between ``{{ `` and `` }}`` into a node:

    user                      -> Name("user")
    greet()                   -> Call("greet", [])
    greet("Hello", user)      -> Call("greet", ["Hello", <value of user>])

Grammar (informal):
    expr      := name | name "(" [arg ("," arg)*] ")" <ignored>
    arg       := string | identifier
    string    := '"' <any char except '"'>* '"'
    identifier:= <any char except ',' ')' ' '>+

Spaces and commas between arguments are skipped. A string literal must be
followed directly by ``,`` or ``)``. An identifier ends at ``,`` or ``)``
and may not contain or be followed by a space.

Identifier arguments are looked up while parsing, so a function only ever
receives literal and already-resolved values.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from kiln.environment.exceptions import ErrorCode, TemplateSyntaxError, UndefinedError
from kiln.nodes import Call, Expr, Name
from kiln.render_context import current_template_name


class ExpressionParser:
    """Single left-to-right scan over an expression body, no backtracking.

    One instance parses one expression; the cursor lives on the instance,
    so parsers are cheap to create and never shared between threads.

    Example:
        >>> ExpressionParser('shout("hi", who)', {"who": "you"}).parse()
        Call(col_offset=0, func='shout', args=('hi', 'you'))

    """

    __slots__ = ("_pos", "_source", "_template", "_variables")

    def __init__(
        self,
        source: str,
        variables: Mapping[str, Any],
        template: str | None = None,
    ):
        self._source = source
        self._variables = variables
        self._template = template
        self._pos = 0

    @property
    def _current(self) -> str | None:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return None

    def _advance(self) -> str | None:
        char = self._current
        if char is not None:
            self._pos += 1
        return char

    def _error(self, message: str, code: ErrorCode, col_offset: int) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            expression=self._source,
            col_offset=col_offset,
            template=self._template,
            code=code,
        )

    def _unclosed_parentheses(self) -> TemplateSyntaxError:
        return self._error(
            "Unclosed parentheses", ErrorCode.UNCLOSED_PARENTHESES, len(self._source)
        )

    def parse(self) -> Expr:
        """Parse the whole expression body.

        Raises:
            TemplateSyntaxError: If the call syntax is malformed
            UndefinedError: If an identifier argument is not bound
        """
        name: list[str] = []
        while (char := self._advance()) is not None:
            if char == "(":
                if not name:
                    raise self._error(
                        "Function call with no name", ErrorCode.CALL_WITHOUT_NAME, self._pos - 1
                    )
                return Call(col_offset=0, func="".join(name), args=tuple(self._parse_arguments()))
            if char == ")":
                # A stray ")" ends the scan; the text is not a call
                break
            name.append(char)
        return Name(col_offset=0, name=self._source)

    def _parse_arguments(self) -> list[str]:
        args: list[str] = []
        while True:
            char = self._advance()
            if char is None:
                raise self._unclosed_parentheses()
            if char == ")":
                return args
            if char in ", ":
                continue
            if char == '"':
                args.append(self._parse_string())
                follow = self._advance()
                if follow is None:
                    raise self._unclosed_parentheses()
                if follow == ")":
                    return args
                if follow != ",":
                    raise self._error(
                        f'Expected comma or closing parentheses, got "{follow}"',
                        ErrorCode.UNEXPECTED_CHARACTER,
                        self._pos - 1,
                    )
                continue
            value, terminator = self._parse_identifier(char)
            args.append(value)
            if terminator == ")":
                return args

    def _parse_string(self) -> str:
        """Read a string literal; the opening quote is already consumed."""
        start = self._pos - 1
        chars: list[str] = []
        while (char := self._advance()) != '"':
            if char is None:
                raise self._error("Unclosed string literal", ErrorCode.UNCLOSED_STRING, start)
            chars.append(char)
        return "".join(chars)

    def _parse_identifier(self, first: str) -> tuple[str, str]:
        """Read a variable argument and resolve it.

        Returns:
            (bound value, terminator) where terminator is "," or ")"
        """
        chars = [first]
        while True:
            char = self._advance()
            if char is None:
                raise self._unclosed_parentheses()
            if char in ",)":
                break
            if char == " ":
                raise self._error(
                    f"Unexpected space in argument '{''.join(chars)}'",
                    ErrorCode.UNEXPECTED_SPACE,
                    self._pos - 1,
                )
            chars.append(char)

        name = "".join(chars)
        try:
            value = self._variables[name]
        except KeyError:
            raise UndefinedError(
                name,
                self._template,
                available_names=self._variables.keys(),
                expression=self._source,
            ) from None
        return str(value), char


def parse_expression(
    source: str,
    variables: Mapping[str, Any],
    *,
    template: str | None = None,
) -> Expr:
    """Parse an expression body against the given variable bindings.

    ``template`` names the template in error messages; it defaults to the
    template of the render in progress.
    """
    if template is None:
        template = current_template_name()
    return ExpressionParser(source, variables, template).parse()
