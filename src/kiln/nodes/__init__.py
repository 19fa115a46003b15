"""Kiln nodes.

Immutable dataclasses describing parsed expressions and matched directives.
"""

from kiln.nodes.base import Node
from kiln.nodes.expressions import Call, Expr, Name
from kiln.nodes.structure import Block, Expression, Extends, Include, Span

__all__ = [
    "Block",
    "Call",
    "Expr",
    "Expression",
    "Extends",
    "Include",
    "Name",
    "Node",
    "Span",
]
