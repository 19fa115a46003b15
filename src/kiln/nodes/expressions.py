"""Expression nodes: the meaning of the text inside ``{{ ... }}``."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from kiln.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Name(Node):
    """Bare variable reference: {{ user }}"""

    name: str


@dataclass(frozen=True, slots=True)
class Call(Node):
    """Function call: {{ greet("Hello", user) }}

    ``args`` hold resolved values: string literals as written, variable
    arguments already replaced by their bound values.
    """

    func: str
    args: Sequence[str] = ()


Expr = Name | Call
