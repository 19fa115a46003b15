"""Kiln expression parser.

Parses the body of a ``{{ ... }}`` marker into a ``Name`` or ``Call`` node.
"""

from kiln.parser.expression import ExpressionParser, parse_expression

__all__ = ["ExpressionParser", "parse_expression"]
