"""Tests for the core.py module."""

import unittest

import numpy as np

from mldecomp.core import NArray, contract, diag_t, fresh_names, product
from mldecomp.utils import IndexNameError


class TestNArray(unittest.TestCase):
    """Test cases for the NArray class."""

    def setUp(self):
        """Set up test fixture."""
        self.tensor_3d = NArray(
            np.array(
                [
                    [[1, 13], [4, 16], [7, 19], [10, 22]],
                    [[2, 14], [5, 17], [8, 20], [11, 23]],
                    [[3, 15], [6, 18], [9, 21], [12, 24]],
                ]
            ),
            ["i", "j", "k"],
        )

    def test_init(self):
        """Test names, sizes and default names."""
        self.assertEqual(self.tensor_3d.names, ("i", "j", "k"))
        self.assertEqual(self.tensor_3d.sizes, [3, 4, 2])
        self.assertEqual(self.tensor_3d.order, 3)
        self.assertEqual(self.tensor_3d.size_of("j"), 4)
        self.assertEqual(NArray(np.zeros((2, 3))).names, ("1", "2"))

    def test_invalid_names(self):
        with self.assertRaises(IndexNameError):
            NArray(np.zeros((2, 2)), ["a", "a"])
        with self.assertRaises(IndexNameError):
            NArray(np.zeros((2, 2)), ["a"])
        with self.assertRaises(IndexNameError):
            self.tensor_3d.size_of("z")

    def test_immutable(self):
        """Data is read-only and not shared with the input."""
        source = np.ones((2, 2))
        arr = NArray(source, ["a", "b"])
        source[0, 0] = 5.0
        self.assertEqual(arr.data[0, 0], 1.0)
        with self.assertRaises(ValueError):
            arr.data[0, 0] = 3.0

    def test_fibers(self):
        """Rows follow the named index, columns the others in row-major order."""
        mode_i = self.tensor_3d.fibers("i")
        self.assertEqual(mode_i.shape, (3, 8))
        self.assertTrue(np.array_equal(mode_i[0], [1, 13, 4, 16, 7, 19, 10, 22]))

        mode_j = self.tensor_3d.fibers("j")
        self.assertEqual(mode_j.shape, (4, 6))
        self.assertTrue(np.array_equal(mode_j[0], [1, 13, 2, 14, 3, 15]))

        mode_k = self.tensor_3d.fibers("k")
        self.assertEqual(mode_k.shape, (2, 12))
        self.assertTrue(np.array_equal(mode_k[0], [1, 4, 7, 10, 2, 5, 8, 11, 3, 6, 9, 12]))

    def test_rename_and_transpose(self):
        renamed = self.tensor_3d.rename({"j": "x"})
        self.assertEqual(renamed.names, ("i", "x", "k"))
        raw = self.tensor_3d.rename_raw(["a", "b", "c"])
        self.assertEqual(raw.names, ("a", "b", "c"))

        transposed = self.tensor_3d.transpose(["k", "i", "j"])
        self.assertEqual(transposed.shape, (2, 3, 4))
        self.assertTrue(transposed.allclose(self.tensor_3d))
        with self.assertRaises(IndexNameError):
            self.tensor_3d.transpose(["i", "j"])

    def test_parts_and_on_index(self):
        parts = self.tensor_3d.parts("k")
        self.assertEqual(len(parts), 2)
        self.assertEqual(parts[1].names, ("i", "j"))
        self.assertEqual(parts[1].data[0, 0], 13)

        reversed_k = self.tensor_3d.on_index(lambda ps: ps[::-1], "k")
        self.assertEqual(reversed_k.names, ("i", "j", "k"))
        self.assertEqual(reversed_k.data[0, 0, 0], 13)

        emptied = self.tensor_3d.on_index(lambda ps: [], "j")
        self.assertEqual(emptied.shape, (3, 0, 2))

    def test_take_and_cycle(self):
        arr = NArray(np.arange(3), ["r"])
        self.assertTrue(np.array_equal(arr.take("r", 2).coords, [0, 1]))
        self.assertTrue(np.array_equal(arr.take("r", 5).coords, [0, 1, 2]))
        self.assertTrue(np.array_equal(arr.cycle_take("r", 5).coords, [0, 1, 2, 0, 1]))

    def test_scale_index(self):
        arr = NArray(np.ones((2, 3)), ["a", "b"])
        scaled = arr.scale_index("a", [2.0, 3.0])
        self.assertTrue(np.array_equal(scaled.data, [[2, 2, 2], [3, 3, 3]]))
        with self.assertRaises(IndexNameError):
            arr.scale_index("b", [1.0])

    def test_frob(self):
        arr = NArray([[3.0, 0.0], [0.0, 4.0]], ["a", "b"])
        self.assertAlmostEqual(arr.frob(), 5.0)

    def test_arithmetic(self):
        a = NArray(np.arange(6).reshape(2, 3), ["a", "b"])
        b = a.transpose(["b", "a"])
        self.assertTrue(np.array_equal((a - b).data, np.zeros((2, 3))))
        self.assertTrue(np.array_equal((a + b).data, 2 * a.data))
        self.assertTrue(np.array_equal((2 * a).data, a.data * 2))
        self.assertTrue(np.array_equal((-a).data, -a.data))


class TestContraction(unittest.TestCase):
    """Test cases for contraction and array constructors."""

    def setUp(self):
        np.random.seed(42)
        self.a = np.random.rand(3, 4)
        self.b = np.random.rand(4, 5)

    def test_matrix_product(self):
        c = contract(NArray(self.a, ["i", "j"]), NArray(self.b, ["j", "k"]))
        self.assertEqual(c.names, ("i", "k"))
        self.assertTrue(np.allclose(c.data, self.a @ self.b))

        # Position of the shared index does not matter
        c2 = NArray(self.a, ["i", "j"]) * NArray(self.b.T, ["k", "j"])
        self.assertTrue(c2.allclose(c))

    def test_outer_product(self):
        c = contract(NArray([1.0, 2.0], ["i"]), NArray([1.0, 0.0, 3.0], ["j"]))
        self.assertEqual(c.shape, (2, 3))
        self.assertTrue(np.array_equal(c.data, [[1, 0, 3], [2, 0, 6]]))

    def test_full_contraction(self):
        c = contract(NArray(self.a, ["i", "j"]), NArray(self.a, ["i", "j"]))
        self.assertEqual(c.order, 0)
        self.assertAlmostEqual(float(c.data), np.sum(self.a**2))

    def test_size_mismatch(self):
        with self.assertRaises(IndexNameError):
            contract(NArray(self.a, ["i", "j"]), NArray(self.a, ["j", "k"]))

    def test_product(self):
        c = np.random.rand(5, 2)
        p = product([NArray(self.a, ["i", "j"]), NArray(self.b, ["j", "k"]), NArray(c, ["k", "l"])])
        self.assertTrue(np.allclose(p.data, self.a @ self.b @ c))
        with self.assertRaises(ValueError):
            product([])

    def test_diag_t(self):
        d = diag_t([1.0, 2.0], 3, ["x", "y", "z"])
        self.assertEqual(d.shape, (2, 2, 2))
        self.assertEqual(d.data[1, 1, 1], 2.0)
        self.assertEqual(d.data[0, 1, 0], 0.0)
        self.assertEqual(d.data.sum(), 3.0)

    def test_fresh_names(self):
        self.assertEqual(fresh_names(3, ["1", "3"]), ["2", "4", "5"])
        names = fresh_names(4, ["1", "2", "3", "4", "5", "6", "7", "8"])
        self.assertEqual(names, ["9", "10", "11", "12"])
        self.assertEqual(fresh_names(2, ["x1"], prefix="x"), ["x2", "x3"])

    def test_list_array(self):
        arr = NArray.list_array([2, 3], range(6), ["a", "b"])
        self.assertTrue(np.array_equal(arr.data, [[0, 1, 2], [3, 4, 5]]))


if __name__ == "__main__":
    unittest.main()
