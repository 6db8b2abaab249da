"""
Elementwise unary functions for strided tensors.

Every function materializes a new row-major tensor and leaves its input
unchanged. No numerical-stability hardening is applied (e.g., `exp` and
`sigmoid` use the textbook formulas).
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Callable, Optional

import numpy as np

from ....domain._errors import DomainError


class TensorMixinUnary(ABC):
    """Elementwise unary operations for the concrete strided tensor."""

    def _unary(self, fn: Callable[[np.ndarray], np.ndarray]):
        return type(self)._from_array(fn(self._as_ndarray()))

    def __neg__(self):
        """Elementwise negation."""
        return self._unary(np.negative)

    def relu(self):
        """
        Rectified linear unit: ``max(0, x)`` elementwise.

        The input dtype is preserved.
        """
        return self._unary(lambda a: np.maximum(a, a.dtype.type(0)))

    def sigmoid(self):
        """
        Logistic sigmoid: ``1 / (1 + exp(-x))`` elementwise.

        Notes
        -----
        Backward rule: ``d(sigmoid)/dx = sigmoid(x) * (1 - sigmoid(x))``.
        """
        return self._unary(lambda a: 1.0 / (1.0 + np.exp(-a)))

    def exp(self):
        """Elementwise exponential."""
        return self._unary(np.exp)

    def sqrt(self):
        """
        Elementwise square root.

        Raises
        ------
        DomainError
            If any element is negative. The check runs before any output is
            allocated, so no NaN is ever produced silently.
        """
        arr = self._as_ndarray()
        negatives = int(np.count_nonzero(arr < 0))
        if negatives:
            raise DomainError("sqrt", negatives)
        return type(self)._from_array(np.sqrt(arr))

    def map(self, fn: Callable[[Any], Any], dtype: Optional[Any] = None):
        """
        Apply a Python callable to every element.

        Parameters
        ----------
        fn : Callable[[Any], Any]
            Function applied to each element (received as a Python scalar).
        dtype : optional
            Result dtype. When omitted, NumPy infers it from the results
            (an empty tensor keeps its own dtype).

        Returns
        -------
        StridedTensor
            New tensor with the same shape as ``self``.
        """
        values = [fn(v) for v in self._as_ndarray().reshape(-1).tolist()]
        if values:
            flat = np.asarray(values, dtype=dtype)
        else:
            flat = np.zeros(0, dtype=self.dtype if dtype is None else dtype)
        return type(self)._from_array(flat.reshape(self.shape))
