import unittest

from stridegrad.domain._errors import (
    BatchMismatchError,
    DimensionError,
    DivisionByZeroError,
    ShapeError,
    TensorIndexError,
)
from stridegrad.domain.utils._shape import (
    index_in_bounds,
    normalize_axis,
    normalize_shape,
    numel_of,
    offset_of,
    row_major_strides,
)


class TestShapeHelpers(unittest.TestCase):
    def test_row_major_strides(self):
        self.assertEqual(row_major_strides((2, 3, 4)), (12, 4, 1))
        self.assertEqual(row_major_strides((5,)), (1,))
        self.assertEqual(row_major_strides(()), ())

    def test_numel_of_empty_shape_is_one(self):
        self.assertEqual(numel_of(()), 1)
        self.assertEqual(numel_of((2, 0, 3)), 0)
        self.assertEqual(numel_of((2, 3)), 6)

    def test_offset_of(self):
        self.assertEqual(offset_of((1, 2, 3), (12, 4, 1)), 23)
        self.assertEqual(offset_of((), ()), 0)

    def test_index_in_bounds(self):
        self.assertTrue(index_in_bounds((1, 2), (2, 3)))
        self.assertFalse(index_in_bounds((2, 0), (2, 3)))
        self.assertFalse(index_in_bounds((-1, 0), (2, 3)))
        self.assertFalse(index_in_bounds((0,), (2, 3)))

    def test_normalize_shape(self):
        self.assertEqual(normalize_shape([2, 3]), (2, 3))
        self.assertEqual(normalize_shape(4), (4,))
        with self.assertRaises(ShapeError):
            normalize_shape((2, -1))

    def test_normalize_axis(self):
        self.assertEqual(normalize_axis(-1, 3, "op"), 2)
        self.assertEqual(normalize_axis(0, 3, "op"), 0)
        with self.assertRaises(DimensionError):
            normalize_axis(3, 3, "op")
        with self.assertRaises(DimensionError):
            normalize_axis(-4, 3, "op")


class TestErrorContext(unittest.TestCase):
    def test_shape_error_carries_shapes(self):
        err = ShapeError("add", expected=(2, 2), actual=[2, 3])
        self.assertEqual(err.op, "add")
        self.assertEqual(err.expected, (2, 2))
        self.assertEqual(err.actual, (2, 3))
        self.assertIsInstance(err, ValueError)
        self.assertIn("(2, 3)", str(err))

    def test_batch_mismatch_is_dimension_error(self):
        err = BatchMismatchError(2, 3)
        self.assertIsInstance(err, DimensionError)
        self.assertEqual((err.batch_a, err.batch_b), (2, 3))

    def test_index_error_reason(self):
        err = TensorIndexError((0,), (2, 2))
        self.assertIsInstance(err, IndexError)
        self.assertIn("rank", str(err))
        err = TensorIndexError((5, 0), (2, 2))
        self.assertIn("out of bounds", str(err))

    def test_division_error_is_zero_division(self):
        err = DivisionByZeroError("truediv", 3)
        self.assertIsInstance(err, ZeroDivisionError)
        self.assertEqual(err.zero_count, 3)


if __name__ == "__main__":
    unittest.main()
