"""
Computation graph: node arena, builder, and execution.

A `Graph` owns every node it creates in an append-only arena and hands out
`NodeRef` handles (graph id + arena index) for wiring nodes together. Since a
handle can only refer to a node that already exists, creation order is always
a valid topological order of the dependency DAG, and cycles cannot be built.

There is no process-wide "current graph": nodes are created through the
builder methods of an explicit `Graph` instance, so independent graphs can
coexist freely.

Execution
---------
- `forward()` evaluates nodes in creation order and returns the output value
  (the last node created).
- `backward()` seeds the output gradient with ones and walks nodes in reverse
  creation order, each node pushing its own accumulated gradient into its
  inputs.
- `zero_grad()` resets gradients of nodes flagged `requires_grad`. Without it,
  gradients keep accumulating across backward passes.

A failing pass raises immediately; values/gradients already updated in that
pass are not rolled back.
"""

from __future__ import annotations

import itertools
from typing import Iterator, Optional

from ...domain._errors import GraphError
from ...domain._node import NodeRef, OpKind
from ...domain._tensor import IStridedTensor
from ._node import Node
from . import _ops  # noqa: F401  (registers Node.forward/backward control paths)

_graph_ids = itertools.count()


class Graph:
    """
    Arena-owning computation graph.

    Typical usage::

        g = Graph()
        x = g.leaf(StridedTensor([1.0, 2.0], (1, 2)))
        w = g.parameter(StridedTensor([3.0, 4.0], (2, 1)))
        y = g.sigmoid(g.matmul(x, w))
        g.forward()
        g.backward()
        g.grad(w)

    Notes
    -----
    Leaves keep the tensor object they were given. Optimizer updates write
    into that tensor's storage, so the caller observes trained values through
    its own reference.
    """

    def __init__(self) -> None:
        self._id: int = next(_graph_ids)
        self._nodes: list[Node] = []

    # ------------------------------------------------------------------
    # Arena
    # ------------------------------------------------------------------
    @property
    def id(self) -> int:
        return self._id

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, ref: object) -> bool:
        return (
            isinstance(ref, NodeRef)
            and ref.graph_id == self._id
            and 0 <= ref.index < len(self._nodes)
        )

    def _resolve(self, ref: NodeRef) -> Node:
        if not isinstance(ref, NodeRef):
            raise GraphError(f"expected a NodeRef, got {type(ref).__name__}")
        if ref.graph_id != self._id:
            raise GraphError(f"{ref!r} belongs to another graph (this is graph {self._id})")
        if not 0 <= ref.index < len(self._nodes):
            raise GraphError(f"{ref!r} is out of range for a graph of {len(self._nodes)} nodes")
        return self._nodes[ref.index]

    def _register(self, node: Node) -> NodeRef:
        self._nodes.append(node)
        return NodeRef(self._id, len(self._nodes) - 1)

    def node(self, ref: NodeRef) -> Node:
        """Return the node a handle refers to."""
        return self._resolve(ref)

    def refs(self) -> list[NodeRef]:
        """Return handles to every node in creation order."""
        return [NodeRef(self._id, i) for i in range(len(self._nodes))]

    @property
    def output(self) -> Optional[NodeRef]:
        """Handle of the last node created (the value `forward` returns)."""
        if not self._nodes:
            return None
        return NodeRef(self._id, len(self._nodes) - 1)

    def value(self, ref: NodeRef) -> Optional[IStridedTensor]:
        return self._resolve(ref).value

    def grad(self, ref: NodeRef) -> Optional[IStridedTensor]:
        return self._resolve(ref).grad

    def set_value(self, ref: NodeRef, tensor: IStridedTensor) -> None:
        """
        Feed a new value to a leaf.

        If the shape changes, the leaf's gradient is discarded so it is
        re-materialized with the new shape.

        Raises
        ------
        GraphError
            If `ref` is not a leaf of this graph.
        TypeError
            If `tensor` is not a strided tensor.
        """
        if not isinstance(tensor, IStridedTensor):
            raise TypeError(f"set_value expects a strided tensor, got {type(tensor).__name__}")
        node = self._resolve(ref)
        if not node.is_leaf:
            raise GraphError(f"set_value() only applies to leaves, got {node.kind.value}")
        if node.value is not None and node.value.shape != tensor.shape:
            node.grad = None
        node.value = tensor

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------
    def leaf(
        self,
        tensor: IStridedTensor,
        requires_grad: bool = False,
        name: Optional[str] = None,
    ) -> NodeRef:
        """
        Create a leaf holding `tensor`.

        Parameters
        ----------
        tensor : IStridedTensor
            Initial value.
        requires_grad : bool, optional
            If True the leaf is a trainable parameter: it is returned by
            `parameters()` and its gradient is reset by `zero_grad()`.
        name : Optional[str], optional
            Debug label.
        """
        if not isinstance(tensor, IStridedTensor):
            raise TypeError(f"leaf expects a strided tensor, got {type(tensor).__name__}")
        node = Node(OpKind.LEAF, (), bool(requires_grad), value=tensor, name=name)
        if node.requires_grad:
            node.grad = tensor.zeros_like()
        return self._register(node)

    def parameter(self, tensor: IStridedTensor, name: Optional[str] = None) -> NodeRef:
        """Create a trainable leaf (``leaf(tensor, requires_grad=True)``)."""
        return self.leaf(tensor, requires_grad=True, name=name)

    def _op(self, kind: OpKind, *inputs: NodeRef, name: Optional[str] = None) -> NodeRef:
        if len(inputs) != kind.arity:
            raise GraphError(
                f"{kind.value} takes {kind.arity} input(s), got {len(inputs)}"
            )
        for ref in inputs:
            self._resolve(ref)
        return self._register(Node(kind, tuple(inputs), True, name=name))

    def add(self, a: NodeRef, b: NodeRef, name: Optional[str] = None) -> NodeRef:
        return self._op(OpKind.ADD, a, b, name=name)

    def sub(self, a: NodeRef, b: NodeRef, name: Optional[str] = None) -> NodeRef:
        return self._op(OpKind.SUB, a, b, name=name)

    def mul(self, a: NodeRef, b: NodeRef, name: Optional[str] = None) -> NodeRef:
        return self._op(OpKind.MUL, a, b, name=name)

    def div(self, a: NodeRef, b: NodeRef, name: Optional[str] = None) -> NodeRef:
        return self._op(OpKind.DIV, a, b, name=name)

    def matmul(self, a: NodeRef, b: NodeRef, name: Optional[str] = None) -> NodeRef:
        return self._op(OpKind.MATMUL, a, b, name=name)

    def relu(self, x: NodeRef, name: Optional[str] = None) -> NodeRef:
        return self._op(OpKind.RELU, x, name=name)

    def sigmoid(self, x: NodeRef, name: Optional[str] = None) -> NodeRef:
        return self._op(OpKind.SIGMOID, x, name=name)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def forward(self) -> IStridedTensor:
        """
        Evaluate every node in creation order.

        Returns
        -------
        IStridedTensor
            The value of the last node.

        Raises
        ------
        GraphError
            If the graph is empty or a leaf has no value.
        ShapeError, DimensionError, DivisionByZeroError
            Propagated unchanged from the first failing node.
        """
        if not self._nodes:
            raise GraphError("forward() on an empty graph")
        for node in self._nodes:
            node.forward(self._nodes)
        return self._nodes[-1].value

    def backward(self) -> None:
        """
        Propagate gradients from the output to every node.

        The output gradient is overwritten with ones shaped like its value;
        every other gradient is accumulated into. Does nothing on an empty
        graph.

        Raises
        ------
        GraphError
            If the output has no value (forward has not run).
        """
        if not self._nodes:
            return
        out = self._nodes[-1]
        if out.value is None:
            raise GraphError("backward() called before forward()")
        out.grad = out.value.ones_like()

        for node in reversed(self._nodes):
            node.backward(self._nodes, node.ensure_grad())

    def zero_grad(self) -> None:
        """
        Reset the gradient of every `requires_grad` node to zeros.

        Nodes without the flag, and nodes that have no value yet, are left
        untouched.
        """
        for node in self._nodes:
            if node.requires_grad and node.value is not None:
                node.grad = node.value.zeros_like()

    def parameters(self) -> list[Node]:
        """Return trainable leaves (``requires_grad`` and no inputs) in creation order."""
        return [n for n in self._nodes if n.is_parameter]

    def __repr__(self) -> str:
        return f"Graph(id={self._id}, nodes={len(self._nodes)})"
