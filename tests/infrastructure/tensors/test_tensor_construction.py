from unittest import TestCase
import unittest

import numpy as np

from stridegrad.domain._errors import DimensionError, ShapeError, TensorIndexError
from stridegrad.domain._tensor import IStridedTensor
from stridegrad.infrastructure.tensor import StridedTensor


class TestTensorConstruction(TestCase):
    def test_flat_data_and_shape(self):
        t = StridedTensor([1, 2, 3, 4, 5, 6], (2, 3))
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.strides, (3, 1))
        self.assertEqual(t.ndim, 2)
        self.assertEqual(t.numel(), 6)
        self.assertTrue(t.is_contiguous())

    def test_shape_defaults_to_rank_one(self):
        t = StridedTensor([1.0, 2.0, 3.0])
        self.assertEqual(t.shape, (3,))

    def test_data_length_mismatch_raises(self):
        with self.assertRaises(ShapeError) as cm:
            StridedTensor([1, 2, 3], (2, 2))
        self.assertEqual(cm.exception.expected, (4,))
        self.assertEqual(cm.exception.actual, (3,))

    def test_negative_extent_raises(self):
        with self.assertRaises(ShapeError):
            StridedTensor(shape=(2, -3))

    def test_shape_only_is_zero_filled_float32(self):
        t = StridedTensor(shape=(2, 3))
        self.assertEqual(t.dtype, np.float32)
        np.testing.assert_array_equal(t.to_numpy(), np.zeros((2, 3), dtype=np.float32))

    def test_missing_shape_and_data_raises(self):
        with self.assertRaises(ShapeError):
            StridedTensor()

    def test_rank_zero_holds_one_element(self):
        t = StridedTensor([7.5], ())
        self.assertEqual(t.shape, ())
        self.assertEqual(t.numel(), 1)
        self.assertEqual(t.at(()), 7.5)
        self.assertEqual(t.item(), 7.5)

    def test_dtype_is_inferred_or_forced(self):
        self.assertTrue(np.issubdtype(StridedTensor([1, 2]).dtype, np.integer))
        self.assertEqual(StridedTensor([1, 2], dtype=np.float64).dtype, np.float64)

    def test_factories(self):
        np.testing.assert_array_equal(StridedTensor.ones((2,)).to_numpy(), [1.0, 1.0])
        np.testing.assert_array_equal(
            StridedTensor.full((2, 2), 3.0).to_numpy(), np.full((2, 2), 3.0)
        )
        src = np.arange(6, dtype=np.float64).reshape(2, 3)
        t = StridedTensor.from_numpy(src)
        src[0, 0] = 100.0
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.at((0, 0)), 0.0)
        self.assertEqual(t.dtype, np.float64)

    def test_like_factories_follow_shape_and_dtype(self):
        t = StridedTensor([1, 2, 3, 4], (2, 2), dtype=np.float64)
        z = t.zeros_like()
        o = t.ones_like()
        self.assertEqual(z.shape, (2, 2))
        self.assertEqual(z.dtype, np.float64)
        self.assertTrue(z.all(lambda v: v == 0))
        self.assertTrue(o.all(lambda v: v == 1))

    def test_satisfies_protocol(self):
        self.assertIsInstance(StridedTensor([1.0]), IStridedTensor)

    def test_dim(self):
        t = StridedTensor(shape=(2, 3, 4))
        self.assertEqual(t.dim(0), 2)
        self.assertEqual(t.dim(-1), 4)
        with self.assertRaises(DimensionError):
            t.dim(3)


class TestTensorElementAccess(TestCase):
    def setUp(self) -> None:
        self.t = StridedTensor([1, 2, 3, 4, 5, 6], (2, 3))

    def test_checked_read(self):
        self.assertEqual(self.t.at((0, 0)), 1)
        self.assertEqual(self.t.at((1, 2)), 6)
        self.assertEqual(self.t.at([1, 0]), 4)

    def test_checked_read_rank_mismatch(self):
        with self.assertRaises(TensorIndexError) as cm:
            self.t.at((1,))
        self.assertEqual(cm.exception.shape, (2, 3))

    def test_checked_read_out_of_bounds(self):
        for idx in [(2, 0), (0, 3), (-1, 0)]:
            with self.assertRaises(TensorIndexError):
                self.t.at(idx)

    def test_checked_write(self):
        self.t.set_at((1, 1), 50)
        self.assertEqual(self.t.at((1, 1)), 50)
        with self.assertRaises(TensorIndexError):
            self.t.set_at((0, 5), 1)

    def test_unchecked_operator(self):
        self.assertEqual(self.t[1, 2], 6)
        self.t[0, 1] = 20
        self.assertEqual(self.t.at((0, 1)), 20)

    def test_rank_one_int_index(self):
        v = StridedTensor([10, 20, 30])
        self.assertEqual(v.at(2), 30)
        self.assertEqual(v[1], 20)

    def test_offset(self):
        self.assertEqual(self.t.offset((1, 2)), 5)


class TestTensorInterop(TestCase):
    def test_to_numpy_is_a_copy(self):
        t = StridedTensor([1.0, 2.0], (2,))
        arr = t.to_numpy()
        arr[0] = 99.0
        self.assertEqual(t.at(0), 1.0)

    def test_tolist(self):
        t = StridedTensor([1, 2, 3, 4], (2, 2))
        self.assertEqual(t.tolist(), [[1, 2], [3, 4]])

    def test_item_requires_single_element(self):
        with self.assertRaises(ShapeError):
            StridedTensor([1, 2]).item()

    def test_copy_from_and_fill(self):
        t = StridedTensor.zeros((2, 2))
        t.copy_from(StridedTensor([1.0, 2.0, 3.0, 4.0], (2, 2)))
        self.assertEqual(t.tolist(), [[1.0, 2.0], [3.0, 4.0]])
        t.fill(5.0)
        self.assertTrue(t.all(lambda v: v == 5.0))
        with self.assertRaises(ShapeError):
            t.copy_from(StridedTensor.zeros((4,)))

    def test_clone_does_not_share_storage(self):
        t = StridedTensor([1.0, 2.0, 3.0, 4.0], (2, 2))
        c = t.clone()
        self.assertFalse(c.shares_storage(t))
        c.set_at((0, 0), -1.0)
        self.assertEqual(t.at((0, 0)), 1.0)

    def test_equals_and_allclose(self):
        a = StridedTensor([1.0, 2.0], (2,))
        self.assertTrue(a.equals(StridedTensor([1.0, 2.0], (2,))))
        self.assertFalse(a.equals(StridedTensor([1.0, 2.0], (1, 2))))
        self.assertTrue(a.allclose(StridedTensor([1.0, 2.0 + 1e-9], (2,))))
        self.assertFalse(a.allclose(StridedTensor([1.0, 2.1], (2,))))

    def test_predicates(self):
        t = StridedTensor([-1, 0, 2])
        self.assertTrue(t.any(lambda v: v > 1))
        self.assertFalse(t.all(lambda v: v > 0))
        self.assertFalse(t.all())
        self.assertTrue(t.any())

    def test_repr_mentions_layout(self):
        r = repr(StridedTensor([1, 2], (1, 2)))
        self.assertIn("shape=(1, 2)", r)
        self.assertIn("strides=(2, 1)", r)


if __name__ == "__main__":
    unittest.main()
