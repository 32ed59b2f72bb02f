"""Alternating least squares for multilinear models.

The model is the contraction of a list of fixed arrays and a list of unknown
arrays. Every unknown enters the contraction linearly, so each one can be
solved for exactly with the others held fixed; sweeping over all of them
repeatedly decreases the reconstruction error monotonically.
"""

from dataclasses import dataclass, replace
from warnings import warn

import numpy as np

from mldecomp.core import NArray, product
from mldecomp.utils import IndexNameError


@dataclass(frozen=True)
class ALSParam:
    """Optimization parameters.

    Attributes:
        n_max (int): Maximum number of iterations
        epsilon (float): Target relative reconstruction error; the fit is
            accepted once the error is below it
        delta (float): Minimum relative error decrease per iteration; the
            optimization stops when an iteration improves less
    """

    n_max: int = 20
    epsilon: float = 1e-3
    delta: float = 1e-2

    def __post_init__(self):
        if int(self.n_max) != self.n_max or self.n_max < 1:
            raise ValueError(f"n_max must be a positive integer, got {self.n_max}")
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if not self.delta >= 0:
            raise ValueError(f"delta must be non-negative, got {self.delta}")

    def replace(self, **changes):
        """Copy of the parameters with some fields changed."""
        return replace(self, **changes)


def default_parameters():
    """ALSParam(n_max=20, epsilon=1e-3, delta=1e-2)."""
    return ALSParam()


def relative_error(model, target):
    """Frobenius norm of (target - model) relative to the norm of target."""
    err = (target - model).frob()
    norm = target.frob()
    return err / norm if norm > 0 else err


def solve_factor(others, x, target):
    """Least-squares update of one unknown with the rest of the model fixed.

    Indices of ``x`` are either contracted with ``others`` or appear in the
    target; they are split accordingly to set up a linear system.

    Args:
        others (NArray): Contraction of every other array in the model
        x (NArray): Current value of the unknown, used for its index layout
        target (NArray): Array to approximate

    Returns:
        NArray: Updated unknown with the same indices as x
    """
    inner = [name for name in x.names if name in others.names]
    outer = [name for name in x.names if name not in others.names]
    missing = [name for name in outer if name not in target.names]
    if missing:
        raise IndexNameError(f"Indices {missing} of the unknown appear nowhere in the model")
    rest = [name for name in others.names if name not in inner]
    if sorted(outer + rest) != sorted(target.names):
        raise IndexNameError(
            f"Model indices {sorted(outer + rest)} do not match target {list(target.names)}"
        )

    inner_sizes = [others.size_of(name) for name in inner]
    outer_sizes = [target.size_of(name) for name in outer]
    rest_sizes = [others.size_of(name) for name in rest]
    n_inner = int(np.prod(inner_sizes))
    n_outer = int(np.prod(outer_sizes))
    n_rest = int(np.prod(rest_sizes))

    a = others.transpose(inner + rest).data.reshape(n_inner, n_rest)
    b = target.transpose(outer + rest).data.reshape(n_outer, n_rest)
    sol, _, _, _ = np.linalg.lstsq(a.T, b.T, rcond=None)
    return NArray(sol.reshape(inner_sizes + outer_sizes), inner + outer).transpose(x.names)


def ml_solve(params, fixed, x0s, target):
    """Alternating least squares solution of product(fixed + xs) ~ target.

    One iteration updates every unknown in order. After each iteration the
    relative reconstruction error is recorded, and the optimization stops when
    it falls below ``params.epsilon``, when it improved by less than the
    fraction ``params.delta`` over the previous iteration, or after
    ``params.n_max`` iterations.

    Args:
        params (ALSParam): Optimization parameters
        fixed (list): Arrays of the model that are not optimized
        x0s (list): Starting values of the unknowns
        target (NArray): Array to approximate

    Returns:
        tuple: (xs, errors) with the unknowns after the last iteration and the
            relative error of every completed iteration, oldest first
    """
    fixed = list(fixed)
    xs = list(x0s)
    errors = []
    for _ in range(params.n_max):
        for idx in range(len(xs)):
            others = _contract_all(fixed + xs[:idx] + xs[idx + 1:])
            xs[idx] = solve_factor(others, xs[idx], target)
        err = relative_error(_contract_all(fixed + xs), target)
        errors.append(err)
        if err < params.epsilon:
            break
        if len(errors) > 1 and _improvement(errors[-2], err) < params.delta:
            break
    else:
        warn(
            f"ALS stopped after n_max={params.n_max} iterations with relative error {errors[-1]:.3e}",
            RuntimeWarning,
        )
    return xs, errors


def _contract_all(arrays):
    if not arrays:
        return NArray(1.0, [])
    return product(arrays)


def _improvement(previous, current):
    if previous <= 0:
        return 0.0
    return (previous - current) / previous
