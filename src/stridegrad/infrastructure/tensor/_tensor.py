"""
Concrete strided tensor implementation (NumPy storage).

This module provides `StridedTensor`, the concrete implementation of the
domain-level `IStridedTensor` protocol. A tensor owns (or shares, when it is
a view) a flat one-dimensional NumPy buffer and interprets it through an
explicit shape and per-axis element strides.

Design notes
------------
- Fresh tensors are row-major: ``strides[i] = prod(shape[i+1:])``.
- Views (e.g., `transpose`) reuse the source's buffer object and only
  substitute shape/strides. All reads therefore go through the tensor's own
  strides; no code may assume contiguity of an arbitrary tensor.
- Kernels operate on a strided NumPy view of the buffer obtained with
  `numpy.lib.stride_tricks.as_strided`, so elementwise and matrix operations
  are correct for views without first copying them.
- Operation families live in mixins under `mixins/`; this module holds the
  storage, construction and element-access core.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Union

import numpy as np
from numpy.lib.stride_tricks import as_strided

from ...domain._errors import ShapeError, TensorIndexError
from ...domain._tensor import IStridedTensor
from ...domain.utils._shape import (
    index_in_bounds,
    normalize_axis,
    normalize_shape,
    numel_of,
    offset_of,
    row_major_strides,
)
from .mixins import (
    TensorMixinArithmetic,
    TensorMixinComparison,
    TensorMixinMatmul,
    TensorMixinStructure,
    TensorMixinUnary,
)

Number = Union[int, float]
IndexLike = Union[int, Sequence[int]]


def _as_index(index: IndexLike) -> tuple[int, ...]:
    if isinstance(index, (int, np.integer)):
        return (int(index),)
    return tuple(int(i) for i in index)


class StridedTensor(
    TensorMixinArithmetic,
    TensorMixinComparison,
    TensorMixinStructure,
    TensorMixinMatmul,
    TensorMixinUnary,
    IStridedTensor,
):
    """
    Dense N-dimensional array stored as a flat buffer plus strides.

    Parameters
    ----------
    data : Optional[array-like], optional
        Flat element values in row-major order. Nested array-likes are
        flattened. If omitted, the tensor is zero-filled.
    shape : Optional[Sequence[int]], optional
        Per-axis extents. Defaults to ``(len(data),)`` when `data` is given.
        Required when `data` is omitted.
    dtype : optional
        Element dtype. When omitted, NumPy infers it from `data`; zero-filled
        tensors default to ``float32``.

    Raises
    ------
    ShapeError
        If ``prod(shape) != len(data)`` or an extent is negative.

    Notes
    -----
    A rank-0 tensor (``shape == ()``) stores exactly one element.
    """

    def __init__(
        self,
        data: Optional[Any] = None,
        shape: Optional[Sequence[int]] = None,
        *,
        dtype: Optional[Any] = None,
    ) -> None:
        if data is None:
            if shape is None:
                raise ShapeError("construct", detail="shape is required without data")
            shp = normalize_shape(shape, "construct")
            buf = np.zeros(numel_of(shp), dtype=np.float32 if dtype is None else dtype)
        else:
            buf = np.array(data, dtype=dtype).reshape(-1)
            shp = (
                (buf.size,) if shape is None else normalize_shape(shape, "construct")
            )
            if numel_of(shp) != buf.size:
                raise ShapeError(
                    "construct",
                    expected=(numel_of(shp),),
                    actual=(buf.size,),
                    detail=f"flat data does not fill shape {shp}",
                )

        self._buffer: np.ndarray = buf
        self._shape: tuple[int, ...] = shp
        self._strides: tuple[int, ...] = row_major_strides(shp)

    # ------------------------------------------------------------------
    # Internal construction
    # ------------------------------------------------------------------
    @classmethod
    def _from_storage(
        cls,
        buffer: np.ndarray,
        shape: tuple[int, ...],
        strides: tuple[int, ...],
    ) -> "StridedTensor":
        """
        Construct a view over an existing flat buffer (no copy).

        This bypasses `__init__`; the caller guarantees that every in-bounds
        index maps to a valid buffer position.
        """
        obj = cls.__new__(cls)
        obj._buffer = buffer
        obj._shape = tuple(shape)
        obj._strides = tuple(strides)
        return obj

    @classmethod
    def _from_array(cls, arr: np.ndarray) -> "StridedTensor":
        """Materialize a NumPy result into a fresh row-major tensor."""
        arr = np.asarray(arr)
        shape = tuple(int(s) for s in arr.shape)
        buf = np.ascontiguousarray(arr).reshape(-1)
        return cls._from_storage(buf, shape, row_major_strides(shape))

    def _as_ndarray(self, *, writeable: bool = False) -> np.ndarray:
        """
        Return a NumPy view of the logical layout (no copy).

        Parameters
        ----------
        writeable : bool, optional
            Whether writes through the returned view should reach storage.
        """
        itemsize = self._buffer.itemsize
        return as_strided(
            self._buffer,
            shape=self._shape,
            strides=tuple(s * itemsize for s in self._strides),
            writeable=writeable,
        )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def zeros(cls, shape: Sequence[int], dtype: Any = np.float32) -> "StridedTensor":
        """Return a zero-filled tensor of the given shape."""
        return cls(shape=shape, dtype=dtype)

    @classmethod
    def ones(cls, shape: Sequence[int], dtype: Any = np.float32) -> "StridedTensor":
        """Return a one-filled tensor of the given shape."""
        return cls.full(shape, 1, dtype=dtype)

    @classmethod
    def full(
        cls, shape: Sequence[int], value: Number, dtype: Any = np.float32
    ) -> "StridedTensor":
        """Return a tensor of the given shape with every element set to `value`."""
        out = cls(shape=shape, dtype=dtype)
        out._buffer.fill(value)
        return out

    @classmethod
    def from_numpy(cls, arr: Any) -> "StridedTensor":
        """
        Copy an array-like into a new row-major tensor.

        The NumPy shape and dtype are preserved; the result never aliases
        `arr`.
        """
        return cls._from_array(np.array(arr, copy=True))

    def zeros_like(self) -> "StridedTensor":
        """Return a zero-filled contiguous tensor with this shape and dtype."""
        return type(self).zeros(self._shape, dtype=self.dtype)

    def ones_like(self) -> "StridedTensor":
        """Return a one-filled contiguous tensor with this shape and dtype."""
        return type(self).ones(self._shape, dtype=self.dtype)

    # ------------------------------------------------------------------
    # Layout metadata
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """Return the per-axis extents."""
        return self._shape

    @property
    def strides(self) -> tuple[int, ...]:
        """Return the per-axis element strides into the flat buffer."""
        return self._strides

    @property
    def dtype(self) -> np.dtype:
        """Return the element dtype."""
        return self._buffer.dtype

    @property
    def ndim(self) -> int:
        """Return the number of axes."""
        return len(self._shape)

    def numel(self) -> int:
        """Return the number of logical elements (1 for rank 0)."""
        return numel_of(self._shape)

    def dim(self, axis: int) -> int:
        """
        Return the extent of one axis.

        Raises
        ------
        DimensionError
            If `axis` is out of range (negative values count from the end).
        """
        return self._shape[normalize_axis(axis, self.ndim, "dim")]

    def is_contiguous(self) -> bool:
        """
        Return True if the tensor is laid out row-major in its buffer.

        Unit-length axes are ignored because their stride never contributes
        to an offset.
        """
        expected = row_major_strides(self._shape)
        return all(
            n == 1 or s == e for n, s, e in zip(self._shape, self._strides, expected)
        )

    def shares_storage(self, other: "StridedTensor") -> bool:
        """Return True if `other` reads from the same flat buffer object."""
        return self._buffer is other._buffer

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def offset(self, index: IndexLike) -> int:
        """Return ``sum(index[i] * strides[i])`` with no bounds checking."""
        return offset_of(_as_index(index), self._strides)

    def at(self, index: IndexLike) -> Any:
        """
        Checked element read.

        Parameters
        ----------
        index : int or Sequence[int]
            One component per axis. An int is accepted for rank-1 tensors.

        Returns
        -------
        Any
            The element as a Python scalar.

        Raises
        ------
        TensorIndexError
            If the index rank differs from `ndim` or any component lies
            outside ``[0, shape[i])``.
        """
        idx = _as_index(index)
        if not index_in_bounds(idx, self._shape):
            raise TensorIndexError(idx, self._shape)
        return self._buffer[offset_of(idx, self._strides)].item()

    def set_at(self, index: IndexLike, value: Number) -> None:
        """Checked element write. Raises `TensorIndexError` like `at`."""
        idx = _as_index(index)
        if not index_in_bounds(idx, self._shape):
            raise TensorIndexError(idx, self._shape)
        self._buffer[offset_of(idx, self._strides)] = value

    def __getitem__(self, index: IndexLike) -> Any:
        # Unchecked: out-of-range components address arbitrary elements.
        return self._buffer[offset_of(_as_index(index), self._strides)].item()

    def __setitem__(self, index: IndexLike, value: Number) -> None:
        self._buffer[offset_of(_as_index(index), self._strides)] = value

    # ------------------------------------------------------------------
    # Host interop and in-place writes
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """Return a fresh contiguous ndarray holding the logical elements."""
        return np.array(self._as_ndarray(), copy=True)

    def tolist(self) -> Any:
        """Return the elements as (nested) Python lists."""
        return self._as_ndarray().tolist()

    def item(self) -> Any:
        """
        Return the single element of a one-element tensor.

        Raises
        ------
        ShapeError
            If the tensor does not hold exactly one element.
        """
        if self.numel() != 1:
            raise ShapeError("item", expected=(1,), actual=(self.numel(),))
        return self._as_ndarray().reshape(-1)[0].item()

    def copy_from(self, other: Union["StridedTensor", np.ndarray]) -> None:
        """
        Overwrite this tensor's elements in place.

        Writes go through this tensor's strides, so copying into a view
        updates the storage it shares with its source.

        Raises
        ------
        ShapeError
            If shapes differ.
        """
        src = other._as_ndarray() if isinstance(other, StridedTensor) else np.asarray(other)
        if tuple(src.shape) != self._shape:
            raise ShapeError("copy_from", expected=self._shape, actual=src.shape)
        self._as_ndarray(writeable=True)[...] = src

    def fill(self, value: Number) -> None:
        """Set every element to `value` in place."""
        self._as_ndarray(writeable=True)[...] = value

    def clone(self) -> "StridedTensor":
        """Return a materialized row-major copy that shares nothing with self."""
        return type(self)._from_array(self.to_numpy())

    # ------------------------------------------------------------------
    # Comparison and predicates
    # ------------------------------------------------------------------
    def equals(self, other: "StridedTensor") -> bool:
        """Return True if shapes match and all elements are exactly equal."""
        if self._shape != other.shape:
            return False
        return bool(np.array_equal(self._as_ndarray(), other._as_ndarray()))

    def allclose(
        self, other: "StridedTensor", rtol: float = 1e-5, atol: float = 1e-8
    ) -> bool:
        """Return True if shapes match and elements agree within tolerance."""
        if self._shape != other.shape:
            return False
        return bool(
            np.allclose(self._as_ndarray(), other._as_ndarray(), rtol=rtol, atol=atol)
        )

    def all(self, predicate: Optional[Callable[[Any], bool]] = None) -> bool:
        """Return True if `predicate` holds for every element (truthiness by default)."""
        if predicate is None:
            return bool(np.all(self._as_ndarray()))
        return all(predicate(v) for v in self._as_ndarray().reshape(-1).tolist())

    def any(self, predicate: Optional[Callable[[Any], bool]] = None) -> bool:
        """Return True if `predicate` holds for at least one element."""
        if predicate is None:
            return bool(np.any(self._as_ndarray()))
        return any(predicate(v) for v in self._as_ndarray().reshape(-1).tolist())

    def __repr__(self) -> str:
        return (
            f"StridedTensor(shape={self._shape}, strides={self._strides}, "
            f"dtype={self.dtype}, data={self.tolist()})"
        )
