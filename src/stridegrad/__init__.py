"""
stridegrad: a minimal reverse-mode autodiff engine over strided tensors.

Public surface
--------------
- ``StridedTensor``  dense N-d array stored as a flat buffer plus strides
- ``Graph``          arena-owning computation graph and node builder
- ``Node``, ``NodeRef``, ``OpKind``  graph node record, handle, operator kinds
- ``SGD``            gradient-descent optimizer
- error types        ``ShapeError``, ``DimensionError``, ``BatchMismatchError``,
                     ``DivisionByZeroError``, ``TensorIndexError``,
                     ``DomainError``, ``GraphError``
"""

from .domain._errors import (
    BatchMismatchError,
    DimensionError,
    DivisionByZeroError,
    DomainError,
    GraphError,
    ShapeError,
    TensorIndexError,
)
from .domain._node import NodeRef, OpKind
from .infrastructure.tensor import StridedTensor
from .infrastructure.graph import Graph, Node
from .infrastructure.optimizers import SGD

__version__ = "0.1.0"

__all__ = [
    "BatchMismatchError",
    "DimensionError",
    "DivisionByZeroError",
    "DomainError",
    "GraphError",
    "Graph",
    "Node",
    "NodeRef",
    "OpKind",
    "SGD",
    "ShapeError",
    "StridedTensor",
    "TensorIndexError",
]
