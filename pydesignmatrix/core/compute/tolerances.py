"""
Numerical tolerances.

Two kinds live here:
- the rank-determination rule shared by the QR and SVD kernels;
- tolerance tiers for comparing computed results (used by the test suite).
"""

from dataclasses import dataclass

import numpy as np


# A diagonal entry of R (or a singular value) counts towards the rank when it
# exceeds RANK_TOL_FACTOR * max(n, p) * eps * (largest entry). With the
# factor at 1.0 this is the LAPACK/NumPy matrix_rank default.
RANK_TOL_FACTOR = 1.0

# A fit counts as exact when RSS <= (PERFECT_FIT_FACTOR * max(n, p) * eps * ||y||)^2,
# i.e. the residuals are at rounding level relative to the response.
PERFECT_FIT_FACTOR = 10.0


def rank_tolerance(n: int, p: int, scale: float, dtype=np.float64) -> float:
    """
    Absolute threshold below which a pivot or singular value is treated as zero.

    Args:
        n: Number of rows
        p: Number of columns
        scale: Largest |R_jj| or largest singular value
        dtype: Floating type whose machine epsilon is used
    """
    return RANK_TOL_FACTOR * max(n, p) * np.finfo(dtype).eps * scale


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Double precision, well-conditioned: agreement to near machine precision
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, well-conditioned problems',
)

# Double precision, ill-conditioned problems (cond > 1e4)
CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)

# Condition number beyond which results are compared with the relaxed tier
ILL_CONDITIONED_THRESHOLD = 1e4


def select_tolerance(condition_number: float) -> ToleranceTier:
    """Select the comparison tier for a design with the given condition number."""
    if condition_number > ILL_CONDITIONED_THRESHOLD:
        return CPU_FP64_ILL_CONDITIONED
    return CPU_FP64
