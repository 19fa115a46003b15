"""Base node class for Kiln nodes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all nodes.

    ``col_offset`` is the 0-based position of the node in the text it was
    read from: the expression body for expression nodes, the working
    document for directive nodes. Nodes are immutable for thread-safety.

    """

    col_offset: int
