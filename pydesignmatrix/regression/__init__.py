"""
Ordinary least squares for additive linear models.

Public API:
    fit(X, y, ...) -> LinearSolution
    lm(formula, data, ...) -> LinearSolution

fit() takes a prepared design (DesignMatrix or array); lm() goes from
observations to a fitted model in one call. Both handle:
    - Input validation
    - Design construction
    - Backend selection
    - Result wrapping

Example:
    >>> from pydesignmatrix.regression import lm
    >>> result = lm('Size ~ Type + Weight', frame)
    >>> print(result.coef)
    >>> print(result.summary())
"""

from pydesignmatrix.regression.design import RegressionDesign
from pydesignmatrix.regression.solution import LinearSolution, LinearParams
from pydesignmatrix.regression.solvers import fit, lm

__all__ = [
    "fit",
    "lm",
    "RegressionDesign",
    "LinearSolution",
    "LinearParams",
]
