"""
Matrix multiplication for strided tensors.

Supported operand combinations:

- rank 2 @ rank 2: ``(m, k) @ (k, n) -> (m, n)``
- rank 3 @ rank 3: ``(b, m, k) @ (b, k, n) -> (b, m, n)``, each batch slice
  multiplied independently with the 2-D rule.

Any other rank combination raises `DimensionError`. Operands may be
non-contiguous views (e.g., transposes); kernels read them through their
strides.
"""

from __future__ import annotations

from abc import ABC

import numpy as np

from ....domain._errors import BatchMismatchError, DimensionError


class TensorMixinMatmul(ABC):
    """Matrix-product operations for the concrete strided tensor."""

    def _check_operand(self, other) -> None:
        if not isinstance(other, TensorMixinMatmul):
            raise TypeError(
                f"matmul expects a strided tensor operand, got {type(other).__name__}"
            )

    def matmul2d(self, other):
        """
        Multiply two rank-2 tensors.

        Computes ``C[i, j] = sum_p A[i, p] * B[p, j]`` in ``O(m*k*n)``.

        Raises
        ------
        DimensionError
            If either operand is not rank 2 or ``A.shape[1] != B.shape[0]``.
        """
        self._check_operand(other)
        if self.ndim != 2 or other.ndim != 2:
            raise DimensionError(
                "matmul2d",
                f"expected two rank-2 operands, got ranks {self.ndim} and {other.ndim}",
                shape=self.shape,
            )
        if self.shape[1] != other.shape[0]:
            raise DimensionError(
                "matmul2d",
                f"inner dimensions differ: {self.shape} @ {other.shape}",
                shape=self.shape,
            )
        return type(self)._from_array(np.matmul(self._as_ndarray(), other._as_ndarray()))

    def matmul(self, other):
        """
        Matrix product for rank-2 or batched rank-3 operands.

        Raises
        ------
        DimensionError
            For unsupported rank combinations or mismatched inner dimensions.
        BatchMismatchError
            If rank-3 operands disagree on the leading (batch) dimension.
        """
        self._check_operand(other)
        if self.ndim == 2 and other.ndim == 2:
            return self.matmul2d(other)

        if self.ndim == 3 and other.ndim == 3:
            if self.shape[0] != other.shape[0]:
                raise BatchMismatchError(self.shape[0], other.shape[0])
            if self.shape[2] != other.shape[1]:
                raise DimensionError(
                    "matmul",
                    f"inner dimensions differ: {self.shape} @ {other.shape}",
                    shape=self.shape,
                )
            # np.matmul treats the leading axis as a stack of independent 2-D products
            return type(self)._from_array(
                np.matmul(self._as_ndarray(), other._as_ndarray())
            )

        raise DimensionError(
            "matmul",
            f"unsupported operand ranks {self.ndim} and {other.ndim} "
            f"(expected 2 and 2, or 3 and 3)",
            shape=self.shape,
        )

    def __matmul__(self, other):
        if not isinstance(other, TensorMixinMatmul):
            return NotImplemented
        return self.matmul(other)
