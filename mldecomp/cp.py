"""CANDECOMP/PARAFAC decomposition by alternating least squares.

A CP model of rank k is a list [core, F_1, ..., F_n]: a diagonal core of
size k along every index and one factor per mode, indexed by
[rank index, mode index]. Models of increasing rank are fitted until the
relative reconstruction error is below the requested accuracy.

Typical usage, with hosvd-based or pseudorandom initialization::

    factors = cp_svd(t, delta=0.01, epsilon=1e-6)
    factors = cp_random(seed, t, delta=0.1, epsilon=0.1)
"""

from functools import reduce
from warnings import warn

import numpy as np

from mldecomp.als import default_parameters, ml_solve
from mldecomp.core import NArray, diag_t, fresh_names
from mldecomp.decomposition import hosvd_full
from mldecomp.utils import (
    EmptyFactorsError,
    IndexNameError,
    UnreachableAccuracyError,
    random_stream,
    takes,
)


def _check_rank(k):
    if int(k) != k or k < 1:
        raise ValueError(f"Rank must be a positive integer, got {k}")
    return int(k)


def cp_init_svd(hos, k):
    """CP starting point from a full hosvd decomposition.

    Every mode takes the k leading rotation components, cycling through them
    when k exceeds the number available.

    Args:
        hos (list): [core, R_1, ..., R_n] as returned by hosvd_full
        k (int): Rank

    Returns:
        list: [diagonal core, F_1, ..., F_n]
    """
    k = _check_rank(k)
    core, rotations = hos[0], hos[1:]
    factors = []
    for rot in rotations:
        rank_name = rot.names[0]
        if k > rot.size_of(rank_name):
            warn(
                f"Rank {k} exceeds the {rot.size_of(rank_name)} components of mode "
                f"{rot.names[1]!r}; cycling through them."
            )
        factors.append(rot.cycle_take(rank_name, k))
    return [diag_t(np.ones(k), core.order, core.names)] + factors


def cp_init_seq(values, tensor, k):
    """CP starting point filled from a sequence of numbers.

    Mode i consumes k * size_i values, read row-major into a [k, size_i]
    factor.

    Args:
        values (iterable): Source of values, possibly infinite
        tensor (NArray): Array to decompose
        k (int): Rank

    Returns:
        list: [diagonal core, F_1, ..., F_n]
    """
    k = _check_rank(k)
    names = list(tensor.names)
    dummies = fresh_names(len(names), names)
    blocks = takes([k * size for size in tensor.sizes], values)
    factors = [
        NArray.list_array([k, size], block, [dummy, name])
        for block, dummy, name, size in zip(blocks, dummies, names, tensor.sizes)
    ]
    return [diag_t(np.ones(k), len(names), dummies)] + factors


def cp_init_random(seed, tensor, k):
    """Pseudorandom CP starting point, uniform on [-1, 1].

    The same seed always gives the same starting point.
    """
    return cp_init_seq(random_stream(seed), tensor, k)


def unit_rows(factors):
    """Normalize the components of every factor and fold the scales into the core.

    For every factor after the core, each part along its first (rank) index
    is scaled to unit Frobenius norm and the core is multiplied along the same
    index by the removed norm. The contraction of the list is unchanged.

    Args:
        factors (list): [core, F_1, ..., F_n]

    Returns:
        list: [core', F_1', ..., F_n']

    Raises:
        EmptyFactorsError: If the list is empty
    """
    if not factors:
        raise EmptyFactorsError("unit_rows needs at least a core")
    core, rest = factors[0], factors[1:]
    normalized = []
    for f in rest:
        rank_name = f.names[0]
        if rank_name not in core.names:
            raise IndexNameError(f"Index {rank_name!r} of {f!r} is not an index of the core")
        scales = np.array([part.frob() for part in f.parts(rank_name)])
        inverse = np.divide(1.0, scales, out=np.zeros_like(scales), where=scales > 0)
        normalized.append(f.scale_index(rank_name, inverse))
        core = core.scale_index(rank_name, scales)
    return [core] + normalized


def cp_run(s0, params, tensor):
    """Basic CP optimization for a given starting point.

    The core of the starting point is held fixed while the factors are
    refined, and the result is normalized with unit_rows.

    Args:
        s0 (list): Starting point [core, F_1, ..., F_n]
        params (ALSParam): Optimization parameters
        tensor (NArray): Array to decompose

    Returns:
        tuple: (factors, errors) where errors is the relative error after
            every iteration, oldest first
    """
    if not s0:
        raise EmptyFactorsError("cp_run needs a starting point")
    sol, errs = ml_solve(params, [s0[0]], s0[1:], tensor)
    return unit_rows([s0[0]] + sol), errs


def max_cp_rank(tensor):
    """Upper bound on the CP rank: product of the sizes over the largest one."""
    sizes = tensor.sizes
    if not sizes:
        return 1
    return max(1, reduce(lambda a, b: a * b, sizes, 1) // max(sizes))


def cp_auto_info(finit, params, tensor, max_rank=None, verbose=False):
    """Search for the smallest rank whose CP fit reaches the target accuracy.

    Ranks 1, 2, ... are tried in order. A rank is accepted when the last
    error of its history is below ``params.epsilon``.

    Args:
        finit (callable): Maps a rank to a starting point
        params (ALSParam): Optimization parameters
        tensor (NArray): Array to decompose
        max_rank (int, optional): Largest rank to try. Defaults to max_cp_rank.
        verbose (bool): Print the error reached at every rank

    Returns:
        tuple: (factors, errors, rank)

    Raises:
        UnreachableAccuracyError: If no rank up to max_rank reaches epsilon
    """
    if max_rank is None:
        max_rank = max_cp_rank(tensor)
    best_error = np.inf
    for rank in range(1, max_rank + 1):
        factors, errs = cp_run(finit(rank), params, tensor)
        if verbose:
            print(f"rank {rank}: relative error {errs[-1]:.3e} after {len(errs)} iterations")
        if errs[-1] < params.epsilon:
            return factors, errs, rank
        best_error = min(best_error, errs[-1])
    raise UnreachableAccuracyError(
        f"No CP rank up to {max_rank} reaches relative error {params.epsilon} "
        f"(best {best_error:.3e})",
        max_rank=max_rank,
        best_error=best_error,
    )


def cp_auto(finit, params, tensor, max_rank=None, verbose=False):
    """CP decomposition of the smallest rank that reaches the target accuracy.

    See cp_auto_info for the arguments.

    Returns:
        list: [core, F_1, ..., F_n] with unit-norm factor components
    """
    return cp_auto_info(finit, params, tensor, max_rank=max_rank, verbose=verbose)[0]


def cp_rank(tensor, k, params=None):
    """Rank-k CP fit started from the hosvd of the tensor."""
    if params is None:
        params = default_parameters()
    return cp_run(cp_init_svd(hosvd_full(tensor)[0], k), params, tensor)


def cp_svd(tensor, delta, epsilon, **kwargs):
    """cp_auto with hosvd-based initialization."""
    hos = hosvd_full(tensor)[0]
    params = default_parameters().replace(delta=delta, epsilon=epsilon)
    return cp_auto(lambda k: cp_init_svd(hos, k), params, tensor, **kwargs)


def cp_random(seed, tensor, delta, epsilon, **kwargs):
    """cp_auto with pseudorandom initialization from a seed."""
    params = default_parameters().replace(delta=delta, epsilon=epsilon)
    return cp_auto(lambda k: cp_init_random(seed, tensor, k), params, tensor, **kwargs)
