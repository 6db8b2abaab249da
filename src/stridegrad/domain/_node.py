"""
Computation-graph node vocabulary.

This module defines the closed set of operator kinds a graph node can take
(`OpKind`) and the lightweight handle type (`NodeRef`) used to reference
nodes stored in a graph's arena.

Design notes
------------
- Node behavior is selected by `OpKind` rather than by subclassing. The
  infrastructure layer registers exactly one forward and one backward
  implementation per kind and verifies at import time that none is missing.
- `NodeRef` is a value object: it carries the owning graph's identifier and
  the node's position in that graph's arena. It never points at node storage
  directly, so a handle cannot dangle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OpKind(str, Enum):
    """Operator kind of a computation-graph node."""

    LEAF = "leaf"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MATMUL = "matmul"
    RELU = "relu"
    SIGMOID = "sigmoid"

    @property
    def arity(self) -> int:
        """Number of input nodes an operator of this kind consumes."""
        if self is OpKind.LEAF:
            return 0
        if self in (OpKind.RELU, OpKind.SIGMOID):
            return 1
        return 2


@dataclass(frozen=True)
class NodeRef:
    """
    Handle to a node owned by a `Graph`.

    Attributes
    ----------
    graph_id : int
        Identifier of the graph whose arena holds the node.
    index : int
        Position of the node in the arena (its creation order).
    """

    graph_id: int
    index: int

    def __repr__(self) -> str:
        return f"NodeRef(graph={self.graph_id}, index={self.index})"
