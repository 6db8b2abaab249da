"""
Per-operator forward/backward implementations for graph nodes.

Each function below is registered as the control path of `Node.forward` or
`Node.backward` for exactly one `OpKind`. Dispatch happens on ``node.kind``.
At import time the module verifies that every `OpKind` member has both a
forward and a backward implementation, so adding a kind without its rules
fails immediately rather than at the first backward pass.

Gradient rules (``g`` is the node's own accumulated gradient)
-------------------------------------------------------------
ADD      ga += g;            gb += g
SUB      ga += g;            gb -= g
MUL      ga += g * b;        gb += g * a
DIV      ga += g / b;        gb -= g * a / (b * b)
MATMUL   ga += g @ b^T;      gb += a^T @ g
RELU     gx += g * (x > 0)
SIGMOID  gx += g * y * (1 - y)

Contributions are always added to the input's existing gradient, never
written over it, so a node consumed several times receives the sum.
"""

from __future__ import annotations

from typing import Sequence

from ...domain._errors import GraphError
from ...domain._node import OpKind
from ...domain._tensor import IStridedTensor
from ...domain.utils._control_path import create_path_builder
from ._node import Node

# Control-path manager that dispatches Node methods based on `node.kind`
node_control_path_manager = create_path_builder("kind")


def _input_values(node: Node, arena: Sequence[Node]) -> list[IStridedTensor]:
    values = []
    for parent in node.input_nodes(arena):
        if parent.value is None:
            raise GraphError(
                f"input {parent.label} of node {node.label} has no value"
            )
        values.append(parent.value)
    return values


def _accumulate(parent: Node, contribution: IStridedTensor) -> None:
    parent.grad = parent.ensure_grad() + contribution


# ----------------------------
# Leaf
# ----------------------------
@node_control_path_manager(Node, Node.forward, OpKind.LEAF)
def leaf_forward(node: Node, arena: Sequence[Node]) -> None:
    if node.value is None:
        raise GraphError(f"leaf {node.label} has no value; feed one with set_value()")


@node_control_path_manager(Node, Node.backward, OpKind.LEAF)
def leaf_backward(node: Node, arena: Sequence[Node], upstream: IStridedTensor) -> None:
    pass


# ----------------------------
# Elementwise binary
# ----------------------------
@node_control_path_manager(Node, Node.forward, OpKind.ADD)
def add_forward(node: Node, arena: Sequence[Node]) -> None:
    a, b = _input_values(node, arena)
    node.value = a + b


@node_control_path_manager(Node, Node.backward, OpKind.ADD)
def add_backward(node: Node, arena: Sequence[Node], upstream: IStridedTensor) -> None:
    pa, pb = node.input_nodes(arena)
    _accumulate(pa, upstream)
    _accumulate(pb, upstream)


@node_control_path_manager(Node, Node.forward, OpKind.SUB)
def sub_forward(node: Node, arena: Sequence[Node]) -> None:
    a, b = _input_values(node, arena)
    node.value = a - b


@node_control_path_manager(Node, Node.backward, OpKind.SUB)
def sub_backward(node: Node, arena: Sequence[Node], upstream: IStridedTensor) -> None:
    pa, pb = node.input_nodes(arena)
    _accumulate(pa, upstream)
    _accumulate(pb, -upstream)


@node_control_path_manager(Node, Node.forward, OpKind.MUL)
def mul_forward(node: Node, arena: Sequence[Node]) -> None:
    a, b = _input_values(node, arena)
    node.value = a * b


@node_control_path_manager(Node, Node.backward, OpKind.MUL)
def mul_backward(node: Node, arena: Sequence[Node], upstream: IStridedTensor) -> None:
    pa, pb = node.input_nodes(arena)
    a, b = pa.value, pb.value
    _accumulate(pa, upstream * b)
    _accumulate(pb, upstream * a)


@node_control_path_manager(Node, Node.forward, OpKind.DIV)
def div_forward(node: Node, arena: Sequence[Node]) -> None:
    a, b = _input_values(node, arena)
    node.value = a / b


@node_control_path_manager(Node, Node.backward, OpKind.DIV)
def div_backward(node: Node, arena: Sequence[Node], upstream: IStridedTensor) -> None:
    pa, pb = node.input_nodes(arena)
    a, b = pa.value, pb.value
    _accumulate(pa, upstream / b)
    _accumulate(pb, -(upstream * a / (b * b)))


# ----------------------------
# Matrix product
# ----------------------------
@node_control_path_manager(Node, Node.forward, OpKind.MATMUL)
def matmul_forward(node: Node, arena: Sequence[Node]) -> None:
    a, b = _input_values(node, arena)
    node.value = a.matmul(b)


@node_control_path_manager(Node, Node.backward, OpKind.MATMUL)
def matmul_backward(
    node: Node, arena: Sequence[Node], upstream: IStridedTensor
) -> None:
    pa, pb = node.input_nodes(arena)
    a, b = pa.value, pb.value
    # transpose() swaps the last two axes, so the same rule covers batched operands
    _accumulate(pa, upstream.matmul(b.transpose()))
    _accumulate(pb, a.transpose().matmul(upstream))


# ----------------------------
# Activations
# ----------------------------
@node_control_path_manager(Node, Node.forward, OpKind.RELU)
def relu_forward(node: Node, arena: Sequence[Node]) -> None:
    (x,) = _input_values(node, arena)
    node.value = x.relu()


@node_control_path_manager(Node, Node.backward, OpKind.RELU)
def relu_backward(node: Node, arena: Sequence[Node], upstream: IStridedTensor) -> None:
    (px,) = node.input_nodes(arena)
    _accumulate(px, upstream * (px.value > 0))


@node_control_path_manager(Node, Node.forward, OpKind.SIGMOID)
def sigmoid_forward(node: Node, arena: Sequence[Node]) -> None:
    (x,) = _input_values(node, arena)
    node.value = x.sigmoid()


@node_control_path_manager(Node, Node.backward, OpKind.SIGMOID)
def sigmoid_backward(
    node: Node, arena: Sequence[Node], upstream: IStridedTensor
) -> None:
    (px,) = node.input_nodes(arena)
    y = node.value
    _accumulate(px, upstream * y * (1 - y))


def _check_exhaustive() -> None:
    for method in (Node.forward, Node.backward):
        missing = node_control_path_manager.missing_paths(Node, method, OpKind)
        if missing:
            raise NotImplementedError(
                f"Node.{method.__name__} has no implementation for "
                f"{[k.value for k in missing]}"
            )


_check_exhaustive()
