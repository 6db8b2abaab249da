"""
Structural (shape-changing) operations for strided tensors.

This module defines :class:`TensorMixinStructure`, which implements reshape,
transpose, squeeze and contiguous materialization.

View semantics
--------------
- `transpose` is always an O(1) view: shape and strides are swapped at two
  axes, the buffer is left untouched.
- `squeeze` is always a view: dropping unit-length axes never changes any
  element's offset.
- `reshape` is a view when the source is contiguous. A non-contiguous source
  (e.g., a transpose) is materialized row-major first, because reinterpreting
  its buffer with fresh row-major strides would reorder elements.
"""

from __future__ import annotations

from abc import ABC
from typing import Sequence, Union

from ....domain._errors import DimensionError, ShapeError
from ....domain.utils._shape import (
    normalize_axis,
    normalize_shape,
    numel_of,
    row_major_strides,
)


class TensorMixinStructure(ABC):
    """
    Reshape / transpose / squeeze for the concrete strided tensor.

    Notes
    -----
    Methods construct results through the host class's ``_from_storage``
    (views) and ``_from_array`` (materializations) so this mixin never
    imports the concrete tensor class.
    """

    def contiguous(self):
        """
        Return a row-major tensor with the same logical elements.

        Returns ``self`` when the tensor is already contiguous; otherwise a
        freshly materialized copy.
        """
        if self.is_contiguous():
            return self
        return type(self)._from_array(self._as_ndarray())

    def reshape(self, new_shape: Union[int, Sequence[int]]):
        """
        Return a tensor with a new shape and the same row-major element order.

        Parameters
        ----------
        new_shape : int or Sequence[int]
            Requested shape. Its element count must equal ``numel()``.

        Returns
        -------
        StridedTensor
            A view sharing storage when ``self`` is contiguous, otherwise a
            reshaped materialized copy.

        Raises
        ------
        ShapeError
            If the element count changes or an extent is negative.
        """
        shape = normalize_shape(new_shape, "reshape")
        if numel_of(shape) != self.numel():
            raise ShapeError(
                "reshape",
                expected=(self.numel(),),
                actual=(numel_of(shape),),
                detail=f"cannot reshape {self.shape} into {shape}",
            )
        src = self.contiguous()
        return type(self)._from_storage(src._buffer, shape, row_major_strides(shape))

    def transpose(self, axis_a: int = -2, axis_b: int = -1):
        """
        Swap two axes without moving data.

        Parameters
        ----------
        axis_a, axis_b : int, optional
            Axes to swap. Negative values count from the end. Defaults swap
            the last two axes.

        Returns
        -------
        StridedTensor
            A view sharing this tensor's buffer. It is generally not
            contiguous; always index it through its own strides.

        Raises
        ------
        DimensionError
            If ``ndim < 2`` or an axis is out of range.
        """
        if self.ndim < 2:
            raise DimensionError(
                "transpose", f"requires rank >= 2, got rank {self.ndim}", shape=self.shape
            )
        a = normalize_axis(axis_a, self.ndim, "transpose")
        b = normalize_axis(axis_b, self.ndim, "transpose")

        shape = list(self.shape)
        strides = list(self.strides)
        shape[a], shape[b] = shape[b], shape[a]
        strides[a], strides[b] = strides[b], strides[a]
        return type(self)._from_storage(self._buffer, tuple(shape), tuple(strides))

    @property
    def T(self):
        """Shorthand for ``transpose()`` (last two axes)."""
        return self.transpose()

    def squeeze(self, axis: int = -1):
        """
        Drop unit-length axes.

        Parameters
        ----------
        axis : int, optional
            ``-1`` (default) drops every axis of length 1. Any other value
            drops only that axis; values below ``-1`` count from the end.

        Returns
        -------
        StridedTensor
            A view over the same storage. If no axes remain, the result has
            shape ``(1,)`` rather than being rank 0.

        Raises
        ------
        DimensionError
            If the targeted axis is out of range or its length is not 1.
        """
        if axis == -1:
            keep = [i for i, n in enumerate(self.shape) if n != 1]
        else:
            ax = normalize_axis(axis, self.ndim, "squeeze")
            if self.shape[ax] != 1:
                raise DimensionError(
                    "squeeze",
                    f"axis {axis} has length {self.shape[ax]}, expected 1",
                    shape=self.shape,
                    axis=axis,
                )
            keep = [i for i in range(self.ndim) if i != ax]

        shape = tuple(self.shape[i] for i in keep)
        strides = tuple(self.strides[i] for i in keep)
        if not shape:
            shape, strides = (1,), (1,)
        return type(self)._from_storage(self._buffer, shape, strides)

    def flatten(self):
        """Return a rank-1 tensor of all elements in row-major order."""
        return self.reshape((self.numel(),))
