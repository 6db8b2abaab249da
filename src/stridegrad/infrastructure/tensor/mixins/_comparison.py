"""
Elementwise comparison operators for strided tensors.

Comparisons return *numeric* masks (1 where the relation holds, 0 elsewhere)
in the receiver's dtype rather than boolean arrays, so a mask can be fed
straight back into arithmetic, e.g. ``grad * (x > 0)`` for the ReLU
derivative.

Tensor operands must match shapes exactly (`ShapeError` otherwise); scalar
operands are compared against every element.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Callable

import numpy as np

from ....domain._errors import ShapeError

_SCALAR_TYPES = (int, float, np.integer, np.floating)


class TensorMixinComparison(ABC):
    """Elementwise ``> < >= <=`` returning 0/1 masks."""

    def _compare(self, other: Any, op: str, fn: Callable[[np.ndarray, Any], np.ndarray]):
        if isinstance(other, TensorMixinComparison):
            if other.shape != self.shape:
                raise ShapeError(op, expected=self.shape, actual=other.shape)
            rhs = other._as_ndarray()
        elif isinstance(other, _SCALAR_TYPES):
            rhs = other
        else:
            return NotImplemented
        mask = fn(self._as_ndarray(), rhs).astype(self.dtype)
        return type(self)._from_array(mask)

    def __gt__(self, other):
        return self._compare(other, "gt", np.greater)

    def __lt__(self, other):
        return self._compare(other, "lt", np.less)

    def __ge__(self, other):
        return self._compare(other, "ge", np.greater_equal)

    def __le__(self, other):
        return self._compare(other, "le", np.less_equal)
