"""Core classes for named-index multilinear algebra.

Arrays carry one string name per axis. Contraction sums over the axes two
arrays share by name, so the position of an axis never matters for the
algebra, only its name.
"""

from functools import reduce
from numbers import Number

import numpy as np

from mldecomp.utils import IndexNameError


def _check_names(names, ndim):
    names = tuple(str(name) for name in names)
    if len(names) != ndim:
        raise IndexNameError(f"Expected {ndim} index names, got {len(names)}: {names}")
    if len(set(names)) != len(names):
        raise IndexNameError(f"Repeated index names: {names}")
    return names


class NArray:
    """Dense real array with named axes.

    Instances are immutable: the data is copied on construction and marked
    read-only, and every operation returns a new array.

    Attributes:
        data (ndarray): Read-only values, one axis per name
        names (tuple): Index names in axis order
    """

    def __init__(self, data, names=None):
        """Initialize an NArray.

        Args:
            data (array_like): Values of the array
            names (iterable, optional): One distinct name per axis. Defaults
                to "1", "2", ... in axis order.
        """
        data = np.array(data, dtype=float)
        if names is None:
            names = [str(idx + 1) for idx in range(data.ndim)]
        self._names = _check_names(names, data.ndim)
        data.flags.writeable = False
        self._data = data

    @classmethod
    def from_matrix(cls, matrix, names=None):
        """Build a two-index array from a matrix."""
        matrix = np.asarray(matrix, dtype=float)
        if matrix.ndim != 2:
            raise ValueError(f"Expected a matrix, got an array of shape {matrix.shape}")
        return cls(matrix, names)

    @classmethod
    def list_array(cls, shape, values, names=None):
        """Build an array of the given shape from a flat row-major list."""
        return cls(np.asarray(values, dtype=float).reshape(shape), names)

    @property
    def data(self):
        return self._data

    @property
    def names(self):
        return self._names

    @property
    def shape(self):
        return self._data.shape

    @property
    def sizes(self):
        return list(self._data.shape)

    @property
    def order(self):
        return self._data.ndim

    @property
    def coords(self):
        """Values flattened in row-major order."""
        return self._data.ravel()

    def axis(self, name):
        """Position of the axis with the given name."""
        try:
            return self._names.index(name)
        except ValueError:
            raise IndexNameError(f"Index {name!r} not found in {self._names}") from None

    def size_of(self, name):
        return self._data.shape[self.axis(name)]

    def rename(self, mapping):
        """Rename indices with an {old: new} mapping; other names are kept."""
        return NArray(self._data, [mapping.get(name, name) for name in self._names])

    def rename_raw(self, names):
        """Relabel the axes positionally."""
        return NArray(self._data, names)

    def transpose(self, names):
        """Reorder the axes to follow the given name order."""
        names = tuple(names)
        if sorted(names) != sorted(self._names):
            raise IndexNameError(f"Cannot transpose {self._names} to {names}")
        return NArray(self._data.transpose([self.axis(name) for name in names]), names)

    def fibers(self, name):
        """Flatten into a matrix with one row per value of the named index.

        Columns run over every combination of the remaining indices in
        row-major order.

        Args:
            name (str): Index that labels the rows

        Returns:
            ndarray: Matrix of shape (size_of(name), product of other sizes)
        """
        ax = self.axis(name)
        return np.moveaxis(self._data, ax, 0).reshape(self._data.shape[ax], -1)

    def parts(self, name):
        """Slices of the array, one per value of the named index."""
        ax = self.axis(name)
        rest = self._names[:ax] + self._names[ax + 1:]
        return [NArray(np.take(self._data, idx, axis=ax), rest) for idx in range(self.shape[ax])]

    def on_index(self, fn, name):
        """Apply a function to the list of parts along an index and restack.

        Args:
            fn (callable): Maps a list of parts to a new list of parts with the
                same remaining names and sizes
            name (str): Index to operate along

        Returns:
            NArray: Array whose named index has length len(fn(parts))
        """
        ax = self.axis(name)
        rest = self._names[:ax] + self._names[ax + 1:]
        new_parts = list(fn(self.parts(name)))
        if not new_parts:
            shape = list(self.shape)
            shape[ax] = 0
            return NArray(np.zeros(shape), self._names)
        stacked = np.stack([part.transpose(rest).data for part in new_parts], axis=ax)
        return NArray(stacked, self._names)

    def take(self, name, n):
        """Keep the first n entries along an index."""
        ax = self.axis(name)
        return NArray(np.take(self._data, np.arange(min(n, self.shape[ax])), axis=ax), self._names)

    def cycle_take(self, name, n):
        """Take n entries along an index, cycling through it when n is larger."""
        ax = self.axis(name)
        size = self.shape[ax]
        if size == 0 and n > 0:
            raise ValueError(f"Cannot cycle through the empty index {name!r}")
        return NArray(np.take(self._data, np.arange(n) % max(size, 1), axis=ax), self._names)

    def scale_index(self, name, values):
        """Multiply every part along an index by the matching scalar."""
        ax = self.axis(name)
        values = np.asarray(values, dtype=float).ravel()
        if values.size != self.shape[ax]:
            raise IndexNameError(
                f"Index {name!r} has size {self.shape[ax]}, got {values.size} scale factors"
            )
        shape = [1] * self.order
        shape[ax] = values.size
        return NArray(self._data * values.reshape(shape), self._names)

    def frob(self):
        """Frobenius norm."""
        return float(np.linalg.norm(self.coords))

    def aligned(self, other):
        """Data of another array with the same indices, in this array's axis order."""
        other = other.transpose(self._names)
        if other.shape != self.shape:
            raise IndexNameError(f"Index sizes differ: {self.shape} and {other.shape}")
        return other.data

    def allclose(self, other, rtol=1e-05, atol=1e-08):
        return bool(np.allclose(self._data, self.aligned(other), rtol=rtol, atol=atol))

    def __add__(self, other):
        return NArray(self._data + self.aligned(other), self._names)

    def __sub__(self, other):
        return NArray(self._data - self.aligned(other), self._names)

    def __neg__(self):
        return NArray(-self._data, self._names)

    def __mul__(self, other):
        if isinstance(other, Number):
            return NArray(self._data * other, self._names)
        return contract(self, other)

    def __rmul__(self, other):
        if isinstance(other, Number):
            return NArray(self._data * other, self._names)
        return NotImplemented

    def __repr__(self):
        dims = ", ".join(f"{name}:{size}" for name, size in zip(self._names, self.shape))
        return f"NArray([{dims}])"


def contract(a, b):
    """Contract two arrays over every index name they share.

    The result carries the names of ``a`` that are not shared, followed by the
    names of ``b`` that are not shared.

    Args:
        a (NArray): Left operand
        b (NArray): Right operand

    Returns:
        NArray: Contracted array

    Raises:
        IndexNameError: If a shared index has different sizes in a and b
    """
    shared = [name for name in a.names if name in b.names]
    for name in shared:
        if a.size_of(name) != b.size_of(name):
            raise IndexNameError(
                f"Index {name!r} has size {a.size_of(name)} and {b.size_of(name)}"
            )
    result = [name for name in a.names if name not in shared]
    result += [name for name in b.names if name not in shared]

    labels = {name: idx for idx, name in enumerate(dict.fromkeys(a.names + b.names))}
    data = np.einsum(
        a.data,
        [labels[name] for name in a.names],
        b.data,
        [labels[name] for name in b.names],
        [labels[name] for name in result],
        optimize=True,
    )
    return NArray(data, result)


def product(arrays):
    """Contract a non-empty list of arrays from left to right."""
    arrays = list(arrays)
    if not arrays:
        raise ValueError("Cannot contract an empty list of arrays")
    return reduce(contract, arrays)


def diag_t(values, order, names=None):
    """Array of the given order with values on its generalized diagonal.

    Args:
        values (array_like): Diagonal entries; their count is the size of every index
        order (int): Number of indices
        names (iterable, optional): Index names

    Returns:
        NArray: Diagonal array
    """
    values = np.asarray(values, dtype=float).ravel()
    k = values.size
    data = np.zeros([k] * order)
    if order == 0:
        data = np.asarray(values.prod() if k else 0.0)
    else:
        data[(np.arange(k),) * order] = values
    return NArray(data, names)


def fresh_names(n, taken, prefix=""):
    """Allocate n index names that avoid every name in use.

    Candidates are prefix + "1", prefix + "2", ... in order.

    Args:
        n (int): Number of names
        taken (iterable): Names already in use
        prefix (str): Prefix of the generated names

    Returns:
        list: n distinct names disjoint from taken
    """
    taken = set(taken)
    names = []
    counter = 0
    while len(names) < n:
        counter += 1
        candidate = f"{prefix}{counter}"
        if candidate not in taken:
            names.append(candidate)
    return names
