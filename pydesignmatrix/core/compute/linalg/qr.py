"""
QR decomposition with column pivoting.

Householder QR via LAPACK (scipy.linalg.qr with pivoting=True), the same
factorization R's lm() relies on. Pivoting moves dependent columns to the
end, so rank deficiency shows up as trailing near-zero diagonal entries of R
and the offending columns can be named.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import qr, solve_triangular

from pydesignmatrix.core.compute.tolerances import rank_tolerance


@dataclass(frozen=True)
class QRResult:
    """
    Result of a pivoted QR decomposition X[:, pivot] = Q R.

    Attributes:
        Q: Orthonormal columns (n x p), economic mode
        R: Upper triangular matrix (p x p)
        pivot: Column permutation (0-indexed)
        rank: Numerical rank determined from the R diagonal
        tol: Absolute tolerance used for the rank decision
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    pivot: NDArray[np.intp]
    rank: int
    tol: float

    @property
    def aliased(self) -> tuple[int, ...]:
        """Original column indices that fell below the rank tolerance."""
        return tuple(int(j) for j in self.pivot[self.rank:])


def qr_cpu(X: NDArray[np.floating[Any]]) -> QRResult:
    """
    Pivoted QR decomposition using LAPACK.

    Args:
        X: Matrix to decompose (n x p), n >= p

    Returns:
        QRResult with Q, R, pivot and numerical rank
    """
    n, p = X.shape
    Q, R, pivot = qr(X, mode='economic', pivoting=True)

    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R[0] > 0:
        tol = rank_tolerance(n, p, diag_R[0], X.dtype)
        rank = int(np.sum(diag_R > tol))
    else:
        tol = 0.0
        rank = 0

    return QRResult(Q=Q, R=R, pivot=pivot, rank=rank, tol=float(tol))


def qr_solve_cpu(
    decomposition: QRResult,
    y: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Least squares coefficients from a full-rank pivoted QR.

    Solves R b = Q'y by back substitution and undoes the pivoting:
        X P = Q R  =>  β[P] = R⁻¹ Q'y

    Args:
        decomposition: Full-rank QR of the design matrix
        y: Response vector (n,)

    Returns:
        Coefficient vector β (p,) in the original column order
    """
    p = decomposition.R.shape[1]
    if decomposition.rank < p:
        raise ValueError(
            f"qr_solve_cpu requires full column rank, got rank={decomposition.rank} < {p}"
        )

    Qty = decomposition.Q.T @ y
    beta_pivoted = solve_triangular(decomposition.R, Qty, lower=False)

    beta = np.empty(p, dtype=np.float64)
    beta[decomposition.pivot] = beta_pivoted
    return beta


def qr_unscaled_covariance(decomposition: QRResult) -> NDArray[np.floating[Any]]:
    """
    (X'X)⁻¹ from a full-rank pivoted QR, without forming X'X.

    (X P)'(X P) = R'R, so (X'X)⁻¹ = P R⁻¹ R⁻ᵀ P'. R⁻¹ comes from a
    triangular solve against the identity.
    """
    p = decomposition.R.shape[1]
    R_inv = solve_triangular(decomposition.R, np.eye(p), lower=False)
    cov_pivoted = R_inv @ R_inv.T

    cov = np.empty((p, p), dtype=np.float64)
    pivot = decomposition.pivot
    cov[np.ix_(pivot, pivot)] = cov_pivoted
    return cov
