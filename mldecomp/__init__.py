"""Mldecomp.

Mldecomp is a package for multilinear (HOSVD) and CP decompositions of
arrays with named indices.
"""

__version__ = "0.1.0"

from mldecomp.als import ALSParam, default_parameters, ml_solve
from mldecomp.core import NArray, contract, diag_t, fresh_names, product
from mldecomp.cp import (
    cp_auto,
    cp_auto_info,
    cp_init_random,
    cp_init_seq,
    cp_init_svd,
    cp_random,
    cp_rank,
    cp_run,
    cp_svd,
    max_cp_rank,
    unit_rows,
)
from mldecomp.decomposition import hosvd, hosvd_full, mode_svd, truncate_factors
from mldecomp.utils import (
    DecompositionError,
    EmptyFactorsError,
    IndexNameError,
    UnreachableAccuracyError,
    ranksv,
)

__all__ = [
    "NArray",
    "contract",
    "product",
    "diag_t",
    "fresh_names",
    "hosvd",
    "hosvd_full",
    "mode_svd",
    "truncate_factors",
    "ALSParam",
    "default_parameters",
    "ml_solve",
    "cp_auto",
    "cp_auto_info",
    "cp_run",
    "cp_rank",
    "cp_svd",
    "cp_random",
    "cp_init_svd",
    "cp_init_seq",
    "cp_init_random",
    "max_cp_rank",
    "unit_rows",
    "ranksv",
    "DecompositionError",
    "EmptyFactorsError",
    "IndexNameError",
    "UnreachableAccuracyError",
]
