"""
Arithmetic mixin implementing elementwise StridedTensor operators.

This module defines :class:`TensorMixinArithmetic`, which implements the
elementwise operators ``+ - * /`` for tensor/tensor and tensor/scalar
operands, their reflected scalar forms, and in-place subtraction.

Semantics
---------
- Tensor/tensor operands must have exactly equal shapes. Broadcasting is not
  performed; a mismatch raises `ShapeError`.
- Division checks the divisor for zeros *before* computing and raises
  `DivisionByZeroError` instead of producing inf/NaN.
- Results are freshly materialized row-major tensors; operands are never
  modified (except by ``-=``, which writes back into the receiver).

The host class must provide ``shape``, ``_as_ndarray()``, ``copy_from()`` and
the ``_from_array`` classmethod.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Callable, Union

import numpy as np

from ....domain._errors import DivisionByZeroError, ShapeError

Number = Union[int, float]
"""Scalar types accepted by tensor arithmetic operators."""

_SCALAR_TYPES = (int, float, np.integer, np.floating)


class TensorMixinArithmetic(ABC):
    """
    Elementwise arithmetic for strided tensors.

    Notes
    -----
    Every public operator funnels through `_elementwise`, which resolves the
    right-hand operand into a NumPy view (tensor) or passes it through
    (scalar), enforces the shape contract, and materializes the result.
    """

    def _rhs_operand(self, other: Any, op: str) -> Any:
        """
        Resolve the right-hand operand for an elementwise op.

        Returns
        -------
        Any
            A strided ndarray view for tensor operands, the scalar itself for
            scalar operands, or ``NotImplemented`` for anything else.

        Raises
        ------
        ShapeError
            If `other` is a tensor whose shape differs from ``self.shape``.
        """
        if isinstance(other, TensorMixinArithmetic):
            if other.shape != self.shape:
                raise ShapeError(op, expected=self.shape, actual=other.shape)
            return other._as_ndarray()
        if isinstance(other, _SCALAR_TYPES):
            return other
        return NotImplemented

    def _elementwise(
        self,
        other: Any,
        op: str,
        fn: Callable[[np.ndarray, Any], np.ndarray],
    ):
        rhs = self._rhs_operand(other, op)
        if rhs is NotImplemented:
            return NotImplemented
        return type(self)._from_array(fn(self._as_ndarray(), rhs))

    # ----------------------------
    # Addition
    # ----------------------------
    def __add__(self, other: Union["TensorMixinArithmetic", Number]):
        """
        Elementwise addition.

        Notes
        -----
        Backward rule: ``d(a + b)/da = 1``, ``d(a + b)/db = 1``.
        """
        return self._elementwise(other, "add", np.add)

    def __radd__(self, other: Number):
        """Right-hand addition to support ``scalar + tensor``."""
        return self.__add__(other)

    # ----------------------------
    # Subtraction
    # ----------------------------
    def __sub__(self, other: Union["TensorMixinArithmetic", Number]):
        """
        Elementwise subtraction.

        Notes
        -----
        Backward rule: ``d(a - b)/da = 1``, ``d(a - b)/db = -1``.
        """
        return self._elementwise(other, "sub", np.subtract)

    def __rsub__(self, other: Number):
        """Right-hand subtraction to support ``scalar - tensor``."""
        return self._elementwise(other, "rsub", lambda a, b: np.subtract(b, a))

    def __isub__(self, other: Union["TensorMixinArithmetic", Number]):
        """
        In-place subtraction.

        The difference is computed out of place and then written back into
        this tensor's storage, so every view sharing that storage observes
        the update. Optimizers rely on this to mutate parameter values.

        Raises
        ------
        TypeError
            If the difference cannot be stored in this tensor's dtype without
            changing kind (e.g., a float result into an integer tensor).
        """
        out = self.__sub__(other)
        if out is NotImplemented:
            return NotImplemented
        if not np.can_cast(out.dtype, self.dtype, "same_kind"):
            raise TypeError(
                f"isub: cannot store a {out.dtype} result in a {self.dtype} tensor in place"
            )
        self.copy_from(out)
        return self

    # ----------------------------
    # Multiplication
    # ----------------------------
    def __mul__(self, other: Union["TensorMixinArithmetic", Number]):
        """
        Elementwise multiplication.

        Notes
        -----
        Backward rule: ``d(a * b)/da = b``, ``d(a * b)/db = a``.
        """
        return self._elementwise(other, "mul", np.multiply)

    def __rmul__(self, other: Number):
        """Right-hand multiplication to support ``scalar * tensor``."""
        return self.__mul__(other)

    # ----------------------------
    # True division
    # ----------------------------
    def __truediv__(self, other: Union["TensorMixinArithmetic", Number]):
        """
        Elementwise true division.

        Raises
        ------
        DivisionByZeroError
            If the divisor (tensor element or scalar) equals zero.

        Notes
        -----
        Backward rule: ``d(a / b)/da = 1 / b``, ``d(a / b)/db = -a / b^2``.
        """
        rhs = self._rhs_operand(other, "truediv")
        if rhs is NotImplemented:
            return NotImplemented
        zeros = int(np.count_nonzero(np.asarray(rhs) == 0))
        if zeros:
            raise DivisionByZeroError("truediv", zeros)
        return type(self)._from_array(np.true_divide(self._as_ndarray(), rhs))

    def __rtruediv__(self, other: Number):
        """
        Right-hand true division to support ``scalar / tensor``.

        Raises
        ------
        DivisionByZeroError
            If any element of this tensor equals zero.
        """
        if not isinstance(other, _SCALAR_TYPES):
            return NotImplemented
        arr = self._as_ndarray()
        zeros = int(np.count_nonzero(arr == 0))
        if zeros:
            raise DivisionByZeroError("rtruediv", zeros)
        return type(self)._from_array(np.true_divide(other, arr))

    # Named aliases used by code that prefers method calls over operators.
    def add(self, other):
        return self + other

    def sub(self, other):
        return self - other

    def mul(self, other):
        return self * other

    def div(self, other):
        return self / other
