"""
Steps shared by the CPU backends once coefficients are known.
"""

import warnings
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pydesignmatrix.core.compute.tolerances import PERFECT_FIT_FACTOR
from pydesignmatrix.core.exceptions import CollinearPredictorsError
from pydesignmatrix.regression.design import RegressionDesign
from pydesignmatrix.regression.solution import LinearParams


def raise_if_rank_deficient(
    design: RegressionDesign,
    rank: int,
    aliased: tuple[int, ...],
) -> None:
    """
    Raise CollinearPredictorsError naming the dependent columns.

    Raises:
        CollinearPredictorsError: If rank < p
    """
    if rank >= design.p:
        return
    names = tuple(design.column_names[j] for j in aliased)
    raise CollinearPredictorsError(
        f"Design matrix is rank-deficient: rank={rank}, expected={design.p}. "
        f"Columns {list(names)} are linear combinations of the others "
        f"(perfect multicollinearity).",
        rank=rank,
        expected_rank=design.p,
        aliased=names,
    )


def linear_params(
    design: RegressionDesign,
    coefficients: NDArray[np.floating[Any]],
    unscaled_covariance: NDArray[np.floating[Any]],
    rank: int,
) -> tuple[LinearParams, tuple[str, ...]]:
    """
    Residuals, variance estimate, standard errors, t statistics and p-values.

    σ̂² = e'e / (n - p); SE_j = sqrt(σ̂² [(X'X)⁻¹]_jj); t_j = β_j / SE_j;
    p_j = 2 P(T_{n-p} > |t_j|). A standard error of exactly zero gives NaN
    t and p.

    Returns:
        (LinearParams, warnings)
    """
    X, y = design.X, design.y
    n, p = design.n, design.p
    df_residual = n - rank
    notes: list[str] = []

    fitted_values = X @ coefficients
    residuals = y - fitted_values
    rss = float(residuals @ residuals)

    # Residuals at rounding level mean an exact fit; treat RSS as zero so the
    # standard errors come out exactly zero rather than as noise.
    if rss <= (PERFECT_FIT_FACTOR * max(n, p) * np.finfo(np.float64).eps * np.linalg.norm(y)) ** 2:
        rss = 0.0
        notes.append("essentially perfect fit: residual variance is zero")

    if design.has_intercept:
        tss = float(np.sum((y - np.mean(y)) ** 2))
    else:
        tss = float(y @ y)

    sigma_squared = rss / df_residual
    variances = sigma_squared * np.diag(unscaled_covariance)
    standard_errors = np.sqrt(np.clip(variances, 0.0, None))

    zero_se = standard_errors == 0.0
    with np.errstate(divide='ignore', invalid='ignore'):
        t_statistics = np.where(zero_se, np.nan, coefficients / standard_errors)
    p_values = np.where(
        zero_se,
        np.nan,
        2.0 * stats.t.sf(np.abs(t_statistics), df_residual),
    )

    if np.any(zero_se):
        zero_names = [design.column_names[j] for j in np.flatnonzero(zero_se)]
        message = f"zero standard error for {zero_names}: t statistics and p-values are undefined"
        notes.append(message)
        warnings.warn(message, RuntimeWarning, stacklevel=3)

    params = LinearParams(
        coefficients=coefficients,
        residuals=residuals,
        fitted_values=fitted_values,
        standard_errors=standard_errors,
        t_statistics=t_statistics,
        p_values=p_values,
        unscaled_covariance=unscaled_covariance,
        sigma_squared=float(sigma_squared),
        rss=rss,
        tss=tss,
        rank=rank,
        df_residual=df_residual,
    )
    return params, tuple(notes)
