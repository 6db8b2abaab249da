"""
Pure shape and stride arithmetic shared by tensor implementations.

Strides here are measured in *elements*, not bytes. Backends that need byte
strides (e.g., NumPy's `as_strided`) scale them by the element size.
"""

from __future__ import annotations

from typing import Sequence

from .._errors import DimensionError, ShapeError


def normalize_shape(shape: Sequence[int], op: str = "shape") -> tuple[int, ...]:
    """
    Validate a shape descriptor and return it as a tuple of ints.

    Parameters
    ----------
    shape : Sequence[int]
        Per-axis extents. An int is accepted as a rank-1 shape.
    op : str, optional
        Operation name used in error messages.

    Returns
    -------
    tuple[int, ...]
        The validated shape.

    Raises
    ------
    ShapeError
        If any extent is negative.
    """
    if isinstance(shape, int):
        shape = (shape,)
    out = tuple(int(s) for s in shape)
    if any(s < 0 for s in out):
        raise ShapeError(op, actual=out, detail="extents must be non-negative")
    return out


def numel_of(shape: Sequence[int]) -> int:
    """Return the product of `shape` (1 for the empty shape)."""
    n = 1
    for s in shape:
        n *= s
    return n


def row_major_strides(shape: Sequence[int]) -> tuple[int, ...]:
    """
    Compute row-major element strides for `shape`.

    ``strides[i] = prod(shape[i+1:])``, so the last axis always has stride 1.
    """
    strides = [0] * len(shape)
    acc = 1
    for i in range(len(shape) - 1, -1, -1):
        strides[i] = acc
        acc *= shape[i]
    return tuple(strides)


def offset_of(index: Sequence[int], strides: Sequence[int]) -> int:
    """Return ``sum(index[i] * strides[i])`` without any bounds checking."""
    ofs = 0
    for i, s in zip(index, strides):
        ofs += i * s
    return ofs


def index_in_bounds(index: Sequence[int], shape: Sequence[int]) -> bool:
    """Return True if `index` has the same rank as `shape` and lies within it."""
    if len(index) != len(shape):
        return False
    return all(0 <= i < s for i, s in zip(index, shape))


def normalize_axis(axis: int, ndim: int, op: str) -> int:
    """
    Map a possibly negative axis into ``[0, ndim)``.

    Raises
    ------
    DimensionError
        If the axis is out of range for a tensor of rank `ndim`.
    """
    ax = axis + ndim if axis < 0 else axis
    if ax < 0 or ax >= ndim:
        raise DimensionError(
            op, f"axis {axis} out of range for rank {ndim}", axis=axis
        )
    return ax
