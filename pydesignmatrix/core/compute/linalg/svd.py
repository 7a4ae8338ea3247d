"""
Singular value decomposition for least squares.

Slower than QR but gives the condition number for free and a direct view of
the null space when X is rank-deficient.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydesignmatrix.core.compute.tolerances import rank_tolerance


# Null-space loadings above this magnitude mark a column as involved in a
# linear dependency.
NULL_SPACE_LOADING_TOL = 1e-8


@dataclass(frozen=True)
class SVDResult:
    """
    Result of the thin SVD X = U diag(s) Vt.

    Attributes:
        U: Left singular vectors (n x p)
        s: Singular values, descending (p,)
        Vt: Right singular vectors, transposed (p x p)
        rank: Number of singular values above tol
        tol: Absolute tolerance used for the rank decision
    """
    U: NDArray[np.floating[Any]]
    s: NDArray[np.floating[Any]]
    Vt: NDArray[np.floating[Any]]
    rank: int
    tol: float

    @property
    def condition_number(self) -> float:
        """Ratio of largest to smallest singular value (inf if singular)."""
        if len(self.s) == 0 or self.s[-1] == 0:
            return float('inf')
        return float(self.s[0] / self.s[-1])

    @property
    def aliased(self) -> tuple[int, ...]:
        """Column indices carrying weight in the numerical null space."""
        if self.rank == len(self.s):
            return ()
        null_space = np.abs(self.Vt[self.rank:])
        involved = np.where(np.max(null_space, axis=0) > NULL_SPACE_LOADING_TOL)[0]
        return tuple(int(j) for j in involved)


def svd_cpu(X: NDArray[np.floating[Any]]) -> SVDResult:
    """
    Thin SVD using LAPACK (via NumPy).

    Args:
        X: Matrix to decompose (n x p), n >= p

    Returns:
        SVDResult with singular vectors, values and numerical rank
    """
    n, p = X.shape
    U, s, Vt = np.linalg.svd(X, full_matrices=False)

    if len(s) > 0 and s[0] > 0:
        tol = rank_tolerance(n, p, s[0], X.dtype)
        rank = int(np.sum(s > tol))
    else:
        tol = 0.0
        rank = 0

    return SVDResult(U=U, s=s, Vt=Vt, rank=rank, tol=float(tol))


def svd_solve_cpu(
    decomposition: SVDResult,
    y: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Least squares coefficients from a full-rank SVD: β = V diag(1/s) U'y.
    """
    p = len(decomposition.s)
    if decomposition.rank < p:
        raise ValueError(
            f"svd_solve_cpu requires full column rank, got rank={decomposition.rank} < {p}"
        )
    return decomposition.Vt.T @ ((decomposition.U.T @ y) / decomposition.s)


def svd_unscaled_covariance(decomposition: SVDResult) -> NDArray[np.floating[Any]]:
    """(X'X)⁻¹ = V diag(1/s²) V' from a full-rank SVD."""
    V = decomposition.Vt.T
    return (V / decomposition.s ** 2) @ decomposition.Vt
