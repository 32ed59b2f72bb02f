"""Utility functions for multilinear decompositions."""

from itertools import islice

import numpy as np


class DecompositionError(Exception):
    """Base class for errors raised by the decomposition routines."""

    def __init__(self, value):
        self.value = value

    def __str__(self):
        return repr(self.value)


class EmptyFactorsError(DecompositionError):
    """Exception raised when a factor list that must hold a core is empty."""


class IndexNameError(DecompositionError, ValueError):
    """Exception raised for missing, repeated or mismatched index names."""


class UnreachableAccuracyError(DecompositionError):
    """Exception raised when no admissible CP rank reaches the target error.

    Attributes:
        max_rank (int): Largest rank that was tried
        best_error (float): Smallest final error obtained over all ranks
    """

    def __init__(self, value, max_rank=None, best_error=None):
        super().__init__(value)
        self.max_rank = max_rank
        self.best_error = best_error


def default_rank_tol():
    """Relative tolerance used to estimate numerical ranks.

    Returns:
        float: Square root of the double precision machine epsilon
    """
    return float(np.sqrt(np.finfo(float).eps))


def ranksv(tol, bound, singular_values):
    """Numerical rank from a list of singular values.

    A singular value counts when its magnitude exceeds
    ``tol * bound * max(|s|)``.

    Args:
        tol (float): Relative tolerance
        bound (int): Largest dimension of the matrix the values come from
        singular_values (array_like): Singular values, in any order

    Returns:
        int: Number of numerically nonzero singular values
    """
    s = np.abs(np.asarray(singular_values, dtype=float)).ravel()
    if s.size == 0:
        return 0
    largest = s.max()
    if largest == 0:
        return 0
    return int(np.sum(s > tol * bound * largest))


def eig_sh(m):
    """Eigen-decomposition of a symmetric matrix, largest eigenvalue first.

    Args:
        m (ndarray): Symmetric matrix

    Returns:
        tuple: (eigenvalues, eigenvectors) with eigenvectors as columns
    """
    vals, vecs = np.linalg.eigh(m)
    return vals[::-1], vecs[:, ::-1]


def takes(counts, values):
    """Split consecutive blocks of the given lengths off an iterable.

    Args:
        counts (list): Length of each block
        values (iterable): Source of values, possibly infinite

    Returns:
        list: One list per block

    Raises:
        ValueError: If the iterable is exhausted before all blocks are filled
    """
    it = iter(values)
    blocks = []
    for count in counts:
        block = list(islice(it, count))
        if len(block) < count:
            raise ValueError(
                f"Value stream exhausted: needed {count} values, got {len(block)}"
            )
        blocks.append(block)
    return blocks


def random_stream(seed, low=-1.0, high=1.0, chunk=1024):
    """Infinite reproducible stream of uniform pseudorandom numbers.

    Args:
        seed (int): Seed of the generator
        low (float): Lower bound of the interval
        high (float): Upper bound of the interval
        chunk (int): Number of values drawn from the generator at a time

    Yields:
        float: Values uniform on [low, high)
    """
    rng = np.random.default_rng(seed)
    while True:
        yield from rng.uniform(low, high, size=chunk).tolist()
