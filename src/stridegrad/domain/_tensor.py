"""
Strided tensor interface definitions.

This module defines the domain-level interface for strided tensor objects
using structural typing. The interface captures the backend-agnostic surface
that computation-graph nodes and optimizers rely on: shape/stride metadata,
element access, view-producing structural ops, and elementwise/matrix algebra.

Notes
-----
The NumPy-backed `StridedTensor` in the infrastructure layer is currently the
only implementation. Graph code types against this protocol so that the
node/optimizer layer does not import NumPy.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, Union, runtime_checkable

Number = Union[int, float]


@runtime_checkable
class IStridedTensor(Protocol):
    """
    Strided tensor interface.

    An `IStridedTensor` is a dense N-dimensional array stored as a flat
    buffer plus per-axis strides. Structural operations such as `transpose`
    may return views that share storage with their source; arithmetic always
    materializes a new tensor.
    """

    # ---------------------------------------------------------------------
    # Layout metadata
    # ---------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """Return the per-axis extents."""
        ...

    @property
    def strides(self) -> tuple[int, ...]:
        """Return the per-axis element strides into the flat buffer."""
        ...

    @property
    def ndim(self) -> int:
        """Return the number of axes."""
        ...

    def numel(self) -> int:
        """Return the total number of logical elements."""
        ...

    def is_contiguous(self) -> bool:
        """Return True if strides are row-major for the current shape."""
        ...

    # ---------------------------------------------------------------------
    # Element access
    # ---------------------------------------------------------------------
    def at(self, index: Sequence[int]) -> Any:
        """
        Checked element read.

        Raises
        ------
        TensorIndexError
            If the index rank differs from `ndim` or any component is out of
            bounds.
        """
        ...

    def set_at(self, index: Sequence[int], value: Number) -> None:
        """Checked element write. Raises like `at`."""
        ...

    # ---------------------------------------------------------------------
    # Structure
    # ---------------------------------------------------------------------
    def reshape(self, new_shape: Sequence[int]) -> "IStridedTensor":
        """Return a tensor with the same elements in row-major order and a new shape."""
        ...

    def transpose(self, axis_a: int = -2, axis_b: int = -1) -> "IStridedTensor":
        """Return a view with two axes swapped."""
        ...

    def squeeze(self, axis: int = -1) -> "IStridedTensor":
        """Drop unit-length axes."""
        ...

    # ---------------------------------------------------------------------
    # Algebra
    # ---------------------------------------------------------------------
    def __add__(self, other: Union["IStridedTensor", Number]) -> "IStridedTensor": ...

    def __sub__(self, other: Union["IStridedTensor", Number]) -> "IStridedTensor": ...

    def __mul__(self, other: Union["IStridedTensor", Number]) -> "IStridedTensor": ...

    def __truediv__(
        self, other: Union["IStridedTensor", Number]
    ) -> "IStridedTensor": ...

    def __isub__(self, other: Union["IStridedTensor", Number]) -> "IStridedTensor": ...

    def matmul(self, other: "IStridedTensor") -> "IStridedTensor":
        """Matrix product for rank-2 or batched rank-3 operands."""
        ...

    def relu(self) -> "IStridedTensor": ...

    def sigmoid(self) -> "IStridedTensor": ...

    # ---------------------------------------------------------------------
    # Construction helpers used by the graph layer
    # ---------------------------------------------------------------------
    def zeros_like(self) -> "IStridedTensor":
        """Return a zero-filled contiguous tensor with this shape and dtype."""
        ...

    def ones_like(self) -> "IStridedTensor":
        """Return a one-filled contiguous tensor with this shape and dtype."""
        ...
