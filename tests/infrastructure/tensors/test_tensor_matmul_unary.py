from unittest import TestCase
import unittest

import numpy as np

from stridegrad.domain._errors import BatchMismatchError, DimensionError, DomainError
from stridegrad.infrastructure.tensor import StridedTensor


class TestMatmul(TestCase):
    def test_2d_product(self):
        a = StridedTensor([1, 2, 3, 4], (2, 2))
        b = StridedTensor([5, 6, 7, 8], (2, 2))
        self.assertEqual(a.matmul(b).tolist(), [[19, 22], [43, 50]])
        self.assertEqual((a @ b).tolist(), [[19, 22], [43, 50]])

    def test_rectangular_product_matches_numpy(self):
        rng = np.random.default_rng(0)
        a_np = rng.standard_normal((3, 4)).astype(np.float32)
        b_np = rng.standard_normal((4, 2)).astype(np.float32)
        out = StridedTensor.from_numpy(a_np).matmul2d(StridedTensor.from_numpy(b_np))
        self.assertEqual(out.shape, (3, 2))
        np.testing.assert_allclose(out.to_numpy(), a_np @ b_np, rtol=1e-5, atol=1e-6)

    def test_transposed_operand(self):
        a_np = np.arange(6, dtype=np.float32).reshape(2, 3)
        a = StridedTensor.from_numpy(a_np)
        out = a.T.matmul(a)
        np.testing.assert_allclose(out.to_numpy(), a_np.T @ a_np)

    def test_batched_product(self):
        rng = np.random.default_rng(1)
        a_np = rng.standard_normal((2, 3, 4)).astype(np.float32)
        b_np = rng.standard_normal((2, 4, 5)).astype(np.float32)
        out = StridedTensor.from_numpy(a_np).matmul(StridedTensor.from_numpy(b_np))
        self.assertEqual(out.shape, (2, 3, 5))
        for i in range(2):
            np.testing.assert_allclose(
                out.to_numpy()[i], a_np[i] @ b_np[i], rtol=1e-5, atol=1e-5
            )

    def test_batch_mismatch(self):
        a = StridedTensor.zeros((2, 3, 4))
        b = StridedTensor.zeros((3, 4, 5))
        with self.assertRaises(BatchMismatchError) as cm:
            a.matmul(b)
        self.assertEqual((cm.exception.batch_a, cm.exception.batch_b), (2, 3))

    def test_inner_dimension_mismatch(self):
        with self.assertRaises(DimensionError):
            StridedTensor.zeros((2, 3)).matmul(StridedTensor.zeros((2, 3)))
        with self.assertRaises(DimensionError):
            StridedTensor.zeros((2, 2, 3)).matmul(StridedTensor.zeros((2, 2, 3)))

    def test_unsupported_ranks(self):
        with self.assertRaises(DimensionError):
            StridedTensor.zeros((3,)).matmul(StridedTensor.zeros((3, 1)))
        with self.assertRaises(DimensionError):
            StridedTensor.zeros((2, 2, 2)).matmul(StridedTensor.zeros((2, 2)))
        with self.assertRaises(DimensionError):
            StridedTensor.zeros((2, 3, 4)).matmul2d(StridedTensor.zeros((4, 2)))

    def test_non_tensor_operand(self):
        with self.assertRaises(TypeError):
            StridedTensor.zeros((2, 2)).matmul([[1, 0], [0, 1]])


class TestUnary(TestCase):
    def test_relu_preserves_dtype(self):
        x = StridedTensor([-2, 0, 3])
        r = x.relu()
        self.assertEqual(r.tolist(), [0, 0, 3])
        self.assertEqual(r.dtype, x.dtype)

    def test_sigmoid(self):
        x = StridedTensor([0.0, 2.0, -2.0], dtype=np.float64)
        expected = 1.0 / (1.0 + np.exp(-np.array([0.0, 2.0, -2.0])))
        np.testing.assert_allclose(x.sigmoid().to_numpy(), expected)
        self.assertEqual(x.sigmoid().at(0), 0.5)

    def test_exp_and_neg(self):
        x = StridedTensor([0.0, 1.0], dtype=np.float64)
        np.testing.assert_allclose(x.exp().to_numpy(), [1.0, np.e])
        self.assertEqual((-x).tolist(), [-0.0, -1.0])

    def test_sqrt(self):
        x = StridedTensor([0.0, 4.0, 9.0])
        self.assertEqual(x.sqrt().tolist(), [0.0, 2.0, 3.0])

    def test_sqrt_negative_raises(self):
        with self.assertRaises(DomainError) as cm:
            StridedTensor([4.0, -1.0, -9.0]).sqrt()
        self.assertEqual(cm.exception.count, 2)

    def test_map(self):
        x = StridedTensor([1, 2, 3, 4], (2, 2))
        out = x.map(lambda v: v * 10)
        self.assertEqual(out.shape, (2, 2))
        self.assertEqual(out.tolist(), [[10, 20], [30, 40]])
        self.assertEqual(x.map(float, dtype=np.float32).dtype, np.float32)

    def test_unary_on_view_keeps_logical_order(self):
        x = StridedTensor([-1.0, 2.0, -3.0, 4.0], (2, 2))
        r = x.T.relu()
        self.assertEqual(r.tolist(), [[0.0, 0.0], [2.0, 4.0]])


if __name__ == "__main__":
    unittest.main()
