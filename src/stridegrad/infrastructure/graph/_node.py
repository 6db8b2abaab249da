"""
Computation-graph node record.

A `Node` is a plain record owned by a `Graph` arena. Its behavior is selected
by `kind` (an `OpKind`): `forward` and `backward` are installed as dispatching
wrappers by the control-path registrations in `_ops`, one implementation per
operator kind.

Lifecycle
---------
Created (value/grad empty, except leaves which carry their value)
-> forward-computed (value populated)
-> backward-computed (grad accumulated into every input)
-> parameter values mutated by an optimizer.

Gradients accumulate across backward passes until the graph's `zero_grad`
resets them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ...domain._errors import GraphError
from ...domain._node import NodeRef, OpKind
from ...domain._tensor import IStridedTensor


@dataclass(eq=False)
class Node:
    """
    Single operation in a computation graph.

    Attributes
    ----------
    kind : OpKind
        Operator kind; selects the forward/backward implementation.
    inputs : tuple[NodeRef, ...]
        Handles of the parent nodes, in operand order (empty for leaves).
    requires_grad : bool
        Whether `zero_grad` resets this node's gradient. Leaves with this flag
        are trainable parameters; operator nodes always carry it.
    value : Optional[IStridedTensor]
        Result of the most recent forward pass (leaves: the fed tensor).
    grad : Optional[IStridedTensor]
        Accumulated gradient, materialized lazily as zeros.
    name : Optional[str]
        Optional label for debugging.
    """

    kind: OpKind
    inputs: tuple[NodeRef, ...] = ()
    requires_grad: bool = True
    value: Optional[IStridedTensor] = None
    grad: Optional[IStridedTensor] = None
    name: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.inputs

    @property
    def is_parameter(self) -> bool:
        """True for trainable leaves."""
        return self.requires_grad and not self.inputs

    def ensure_grad(self) -> IStridedTensor:
        """
        Return the gradient, materializing it as zeros shaped like `value` if absent.

        Raises
        ------
        GraphError
            If the node has no value yet (forward has not reached it).
        """
        if self.grad is None:
            if self.value is None:
                raise GraphError(
                    f"node {self.label} has no value; run forward() before backward()"
                )
            self.grad = self.value.zeros_like()
        return self.grad

    def input_nodes(self, arena: Sequence["Node"]) -> list["Node"]:
        """Resolve `inputs` against the owning graph's arena."""
        return [arena[ref.index] for ref in self.inputs]

    @property
    def label(self) -> str:
        return self.name if self.name is not None else self.kind.value

    # Replaced by dispatching wrappers in `_ops`.
    def forward(self, arena: Sequence["Node"]) -> None:
        """Compute `value` from the values of the input nodes."""
        raise NotImplementedError(self.kind)

    def backward(self, arena: Sequence["Node"], upstream: IStridedTensor) -> None:
        """Accumulate `upstream`'s contribution into each input node's gradient."""
        raise NotImplementedError(self.kind)

    def __repr__(self) -> str:
        shape = None if self.value is None else self.value.shape
        return (
            f"Node(kind={self.kind.value}, name={self.name!r}, "
            f"inputs={[r.index for r in self.inputs]}, "
            f"requires_grad={self.requires_grad}, shape={shape})"
        )
