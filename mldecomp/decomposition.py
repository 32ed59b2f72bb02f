"""Multilinear singular value decomposition (HOSVD / Tucker's method)."""

from multiprocessing.pool import ThreadPool

import numpy as np

from mldecomp.core import NArray, fresh_names, product
from mldecomp.utils import default_rank_tol, eig_sh, ranksv


def mode_svd(m, rtol=None):
    """Left singular vectors and numerical rank of a flattened array.

    The eigenproblem of the smaller Gram matrix is solved: ``m @ m.T`` when
    the matrix is wide, ``m.T @ m`` otherwise, in which case the left
    singular vectors are recovered as ``m @ v @ pinv(diag(s))``.

    Args:
        m (ndarray): Matrix
        rtol (float, optional): Relative tolerance for the rank estimate.
            Defaults to the square root of the machine epsilon.

    Returns:
        tuple: (u, rank, s) with singular values s in decreasing order and the
            matching left singular vectors as the columns of u
    """
    if rtol is None:
        rtol = default_rank_tol()
    rows, cols = m.shape
    if rows < cols:
        s2, u = eig_sh(m @ m.T)
        s = np.sqrt(np.abs(s2))
    else:
        s2, v = eig_sh(m.T @ m)
        s = np.sqrt(np.abs(s2))
        u = m @ v @ np.linalg.pinv(np.diag(s))
    rank = ranksv(rtol, max(rows, cols), s)
    return u, rank, s


def mode_svds(tensor, rtol=None, n_jobs=None):
    """Run mode_svd on the flattening of every index, in index order.

    Args:
        tensor (NArray): Input array
        rtol (float, optional): Relative tolerance for the rank estimates
        n_jobs (int, optional): Number of threads. Modes are processed
            sequentially when None or 1.

    Returns:
        list: One (u, rank, s) tuple per index
    """
    flats = [tensor.fibers(name) for name in tensor.names]
    if n_jobs is None or n_jobs <= 1 or len(flats) <= 1:
        return [mode_svd(m, rtol) for m in flats]
    with ThreadPool(min(n_jobs, len(flats))) as pool:
        return pool.map(lambda m: mode_svd(m, rtol), flats)


def hosvd_full(tensor, rtol=None, n_jobs=None):
    """Full (untruncated) higher-order singular value decomposition.

    Args:
        tensor (NArray): Input array
        rtol (float, optional): Relative tolerance for the rank estimates
        n_jobs (int, optional): Number of threads used for the modes

    Returns:
        tuple: (factors, rank_info). ``factors`` is [core, R_1, ..., R_n], where
            the core is indexed by fresh names d_1..d_n and R_i by [d_i, name_i],
            so that product(factors) reproduces the tensor. ``rank_info`` holds
            (rank, singular_values) for every index.
    """
    svds = mode_svds(tensor, rtol=rtol, n_jobs=n_jobs)
    rotations = [u for u, _, _ in svds]
    rank_info = [(rank, s) for _, rank, s in svds]

    names = list(tensor.names)
    dummies = fresh_names(len(names), names)
    axes = [[dummy, name] for dummy, name in zip(dummies, names)]

    core = product(
        [tensor.rename_raw(dummies)]
        + [NArray.from_matrix(u, ax) for u, ax in zip(rotations, axes)]
    )
    core = core.transpose(names).rename_raw(dummies)
    factors = [core] + [NArray.from_matrix(u.T, ax) for u, ax in zip(rotations, axes)]
    return factors, rank_info


def hosvd(tensor, rtol=None, n_jobs=None):
    """Higher-order singular value decomposition truncated to the mode ranks.

    Use hosvd_full to get the complete rotations and the singular values of
    every mode.

    Args:
        tensor (NArray): Input array
        rtol (float, optional): Relative tolerance for the rank estimates
        n_jobs (int, optional): Number of threads used for the modes

    Returns:
        list: [core, R_1, ..., R_n] with product(result) equal to the tensor
    """
    factors, rank_info = hosvd_full(tensor, rtol=rtol, n_jobs=n_jobs)
    return truncate_factors([rank for rank, _ in rank_info], factors)


def truncate_factors(sizes, factors):
    """Keep the leading components of a [core, R_1, ..., R_n] decomposition.

    Args:
        sizes (list): Number of components to keep for every index of the core
        factors (list): Core followed by one rotation per index

    Returns:
        list: Truncated core and rotations
    """
    if not factors:
        return []
    core, rotations = factors[0], factors[1:]
    sizes = [int(size) for size in sizes]
    if len(sizes) != core.order:
        raise ValueError(f"Expected {core.order} sizes, got {len(sizes)}")
    if any(size < 0 for size in sizes):
        raise ValueError(f"Sizes must be non-negative, got {sizes}")

    for name, size in zip(core.names, sizes):
        core = core.take(name, size)
    return [core] + [r.take(r.names[0], size) for r, size in zip(rotations, sizes)]
