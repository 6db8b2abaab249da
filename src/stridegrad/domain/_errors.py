"""
Tensor- and graph-related exceptions for stridegrad.

This module defines the structured error taxonomy raised by strided tensor
operations and by computation-graph execution. Each exception keeps the
offending values (shapes, axes, indices) as attributes so callers can react
programmatically instead of parsing messages.

All errors are raised synchronously at the failure site and are never caught
internally. Operations either fully materialize their result or raise and
leave their operands untouched.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


def _fmt_shape(shape: Optional[Sequence[int]]) -> str:
    return "None" if shape is None else str(tuple(shape))


class ShapeError(ValueError):
    """
    Raised when tensor shapes are incompatible with an operation.

    Typical causes are elementwise operations between tensors whose shapes
    differ (no broadcasting is performed), flat data whose length does not
    match the requested shape, and reshapes that change the element count.

    Attributes
    ----------
    op : str
        Name of the operation that failed (e.g., "add", "reshape").
    expected : Optional[tuple[int, ...]]
        The shape (or element count wrapped in a 1-tuple) the operation required.
    actual : Optional[tuple[int, ...]]
        The shape (or element count) that was supplied.
    """

    def __init__(
        self,
        op: str,
        expected: Optional[Sequence[int]] = None,
        actual: Optional[Sequence[int]] = None,
        detail: str = "",
    ) -> None:
        """
        Initialize the ShapeError.

        Parameters
        ----------
        op : str
            The operation name.
        expected : Optional[Sequence[int]], optional
            Shape required by the operation.
        actual : Optional[Sequence[int]], optional
            Shape that was supplied.
        detail : str, optional
            Extra human-readable context appended to the message.
        """
        msg = (
            f"{op}: shape mismatch, expected {_fmt_shape(expected)} "
            f"but got {_fmt_shape(actual)}"
        )
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.op = op
        self.expected = None if expected is None else tuple(expected)
        self.actual = None if actual is None else tuple(actual)


class DimensionError(ValueError):
    """
    Raised on rank or axis violations.

    Used by `transpose` (rank < 2, axis out of range), `squeeze` (targeted
    axis is not unit length), `dim`, and `matmul` (unsupported ranks or
    mismatched inner dimensions).

    Attributes
    ----------
    op : str
        Name of the operation that failed.
    shape : Optional[tuple[int, ...]]
        Shape of the tensor the operation was applied to.
    axis : Optional[int]
        Offending axis, when a single axis is involved.
    """

    def __init__(
        self,
        op: str,
        message: str,
        *,
        shape: Optional[Sequence[int]] = None,
        axis: Optional[int] = None,
    ) -> None:
        super().__init__(f"{op}: {message}")
        self.op = op
        self.shape = None if shape is None else tuple(shape)
        self.axis = axis


class BatchMismatchError(DimensionError):
    """
    Raised when batched (rank-3) matmul operands disagree on batch size.

    Attributes
    ----------
    batch_a : int
        Leading dimension of the left operand.
    batch_b : int
        Leading dimension of the right operand.
    """

    def __init__(self, batch_a: int, batch_b: int) -> None:
        super().__init__(
            "matmul",
            f"batch size mismatch: {batch_a} vs {batch_b}",
        )
        self.batch_a = batch_a
        self.batch_b = batch_b


class DivisionByZeroError(ZeroDivisionError):
    """
    Raised when an elementwise or scalar divisor contains zero.

    Division never produces inf/NaN silently; the check runs before any
    output is allocated.

    Attributes
    ----------
    op : str
        Name of the operation ("truediv" or "rtruediv").
    zero_count : int
        Number of zero-valued divisor elements (1 for a scalar divisor).
    """

    def __init__(self, op: str, zero_count: int = 1) -> None:
        super().__init__(f"{op}: division by zero ({zero_count} zero divisor(s))")
        self.op = op
        self.zero_count = zero_count


class TensorIndexError(IndexError):
    """
    Raised by checked element access when an index is invalid.

    Attributes
    ----------
    index : tuple[int, ...]
        The index that was requested.
    shape : tuple[int, ...]
        Shape of the tensor being indexed.
    """

    def __init__(self, index: Sequence[Any], shape: Sequence[int]) -> None:
        index_t = tuple(index)
        shape_t = tuple(shape)
        if len(index_t) != len(shape_t):
            reason = f"index has {len(index_t)} component(s) but tensor has rank {len(shape_t)}"
        else:
            reason = "index out of bounds"
        super().__init__(f"{reason}: index={index_t} shape={shape_t}")
        self.index = index_t
        self.shape = shape_t


class DomainError(ValueError):
    """
    Raised when an elementwise function is applied outside its domain.

    Currently raised by `sqrt` when any input element is negative.
    """

    def __init__(self, op: str, count: int) -> None:
        super().__init__(f"{op}: {count} element(s) outside the function domain")
        self.op = op
        self.count = count


class GraphError(RuntimeError):
    """
    Raised on invalid computation-graph usage.

    Examples include passing a node handle that belongs to another graph,
    running `forward` on an empty graph, calling `backward` before the
    output has a value, or asking an optimizer without a bound graph to
    clear gradients.
    """
