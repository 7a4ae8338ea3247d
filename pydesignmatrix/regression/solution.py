"""
Regression solution types.

Contains the parameter payload computed by backends and the user-facing
solution wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats

from pydesignmatrix.core.exceptions import ValidationError
from pydesignmatrix.core.frame import ModelFrame
from pydesignmatrix.core.result import Result
from pydesignmatrix.core.validation import check_2d, check_array, check_finite

if TYPE_CHECKING:
    import pandas as pd
    from pydesignmatrix.regression.design import RegressionDesign


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for linear regression.

    This is the immutable data computed by backends. t statistics and
    p-values are NaN for coefficients whose standard error is exactly zero.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]]
    t_statistics: NDArray[np.floating[Any]]
    p_values: NDArray[np.floating[Any]]
    unscaled_covariance: NDArray[np.floating[Any]]  # (X'X)⁻¹
    sigma_squared: float
    rss: float
    tss: float
    rank: int
    df_residual: int


@dataclass
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result and provides named accessors for coefficients,
    inference, goodness of fit, prediction and an R-style summary.
    """
    _result: Result[LinearParams]
    _design: 'RegressionDesign'

    # === Coefficients and inference ===

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._design.column_names

    @property
    def coef(self) -> dict[str, float]:
        """Coefficients keyed by design matrix column name."""
        return {
            name: float(value)
            for name, value in zip(self.column_names, self.coefficients)
        }

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """SE(β) = sqrt(diag(σ² (X'X)⁻¹))."""
        return self._result.params.standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        return self._result.params.t_statistics

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values against Student's t with df_residual degrees of freedom."""
        return self._result.params.p_values

    @property
    def vcov(self) -> NDArray[np.floating[Any]]:
        """Coefficient covariance σ² (X'X)⁻¹."""
        return self._result.params.sigma_squared * self._result.params.unscaled_covariance

    def conf_int(self, level: float = 0.95) -> NDArray[np.floating[Any]]:
        """
        Confidence intervals for the coefficients.

        Args:
            level: Confidence level in (0, 1)

        Returns:
            (p, 2) array of [lower, upper] bounds, rows in column order
        """
        if not 0.0 < level < 1.0:
            raise ValidationError(f"level: must be in (0, 1), got {level}")
        t_crit = stats.t.ppf(1.0 - (1.0 - level) / 2.0, self.df_residual)
        half_width = t_crit * self.standard_errors
        return np.column_stack([
            self.coefficients - half_width,
            self.coefficients + half_width,
        ])

    # === Fit ===

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def sigma_squared(self) -> float:
        """Residual variance estimate RSS / (n - p)."""
        return self._result.params.sigma_squared

    @property
    def residual_std_error(self) -> float:
        return float(np.sqrt(self.sigma_squared))

    @property
    def r_squared(self) -> float:
        """Fraction of variance explained (NaN for a constant response)."""
        if self.tss == 0:
            return float('nan')
        return 1.0 - (self.rss / self.tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        df_int = 1 if self._design.has_intercept else 0
        if self.tss == 0:
            return float('nan')
        return 1.0 - (1.0 - self.r_squared) * (n - df_int) / self.df_residual

    @property
    def df_model(self) -> int:
        """Model degrees of freedom, excluding the intercept."""
        return self.rank - (1 if self._design.has_intercept else 0)

    @property
    def f_statistic(self) -> float:
        """
        Overall F statistic against the intercept-only model.

        NaN if there are no slopes, or if both the explained and the
        residual sums of squares are zero (constant response).
        """
        if self.df_model <= 0:
            return float('nan')
        explained = (self.tss - self.rss) / self.df_model
        if self.sigma_squared == 0:
            return float('nan') if explained == 0 else float('inf')
        return float(explained / self.sigma_squared)

    @property
    def f_p_value(self) -> float:
        f = self.f_statistic
        if np.isnan(f):
            return float('nan')
        return float(stats.f.sf(f, self.df_model, self.df_residual))

    # === Metadata ===

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n_observations(self) -> int:
        return self._design.n

    @property
    def design(self) -> 'RegressionDesign':
        return self._design

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # === Prediction ===

    def predict(self, new_data: ArrayLike | ModelFrame | dict[str, Any]) -> NDArray[np.floating[Any]]:
        """
        Predicted response for new observations.

        Args:
            new_data: A ModelFrame or mapping of variables (only when the
                model was fitted from a DesignMatrix), or an (m, p) array
                laid out like the fitted design matrix.

        Returns:
            (m,) array of predictions
        """
        design_matrix = self._design.design_matrix
        if isinstance(new_data, (ModelFrame, dict)):
            if design_matrix is None:
                raise ValidationError(
                    "predict: named data needs a model fitted from a DesignMatrix; "
                    "pass an array instead"
                )
            X_new = design_matrix.encode(new_data)
        else:
            X_new = check_array(new_data, 'new_data')
            if X_new.ndim == 1:
                X_new = X_new.reshape(1, -1)
            check_2d(X_new, 'new_data')
            check_finite(X_new, 'new_data')
            if X_new.shape[1] != self._design.p:
                raise ValidationError(
                    f"new_data: expected {self._design.p} columns, got {X_new.shape[1]}"
                )
        return X_new @ self.coefficients

    # === Presentation ===

    def coefficient_table(self) -> 'pd.DataFrame':
        """Coefficient table as a pandas DataFrame (requires pandas)."""
        import pandas as pd

        return pd.DataFrame(
            {
                'Estimate': self.coefficients,
                'Std. Error': self.standard_errors,
                't value': self.t_statistics,
                'Pr(>|t|)': self.p_values,
            },
            index=list(self.column_names),
        )

    def summary(self) -> str:
        """Generate R-style summary output (summary.lm)."""
        name_width = max(12, *(len(name) for name in self.column_names))
        q = np.quantile(self.residuals, [0.0, 0.25, 0.5, 0.75, 1.0])

        lines = []
        formula = self.info.get('formula')
        if formula:
            lines += ["Call:", f"lm(formula = {formula})", ""]
        lines += [
            "Residuals:",
            "".join(f"{label:>10}" for label in ("Min", "1Q", "Median", "3Q", "Max")),
            "".join(f"{v:>10.4f}" for v in q),
            "",
            "Coefficients:",
            f"{'':<{name_width}} {'Estimate':>12} {'Std. Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
        ]

        for name, coef, se, t, p in zip(
            self.column_names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            t_str = f"{t:10.3f}" if not np.isnan(t) else f"{'NA':>10}"
            p_str = _format_p_value(p)
            lines.append(
                f"{name:<{name_width}} {coef:12.6f} {se:12.6f} {t_str} {p_str:>12} "
                f"{_significance_stars(p)}".rstrip()
            )

        lines += [
            "---",
            "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1",
            "",
            f"Residual standard error: {self.residual_std_error:.4f} on "
            f"{self.df_residual} degrees of freedom",
            f"Multiple R-squared: {self.r_squared:.4f},\t"
            f"Adjusted R-squared: {self.adjusted_r_squared:.4f}",
        ]
        if not np.isnan(self.f_statistic):
            lines.append(
                f"F-statistic: {self.f_statistic:.4g} on {self.df_model} and "
                f"{self.df_residual} DF,  p-value: {_format_p_value(self.f_p_value)}"
            )
        lines.append(f"Backend: {self.backend_name}")
        for warning in self.warnings:
            lines.append(f"Warning: {warning}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self._design.n}, p={self._design.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )


def _format_p_value(p: float) -> str:
    if np.isnan(p):
        return "NA"
    if p < 2.2e-16:
        return "<2e-16"
    return f"{p:.3g}"


def _significance_stars(p: float | None) -> str:
    """Return significance stars for a p-value."""
    if p is None or np.isnan(p):
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""
