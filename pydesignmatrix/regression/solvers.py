"""
Solver dispatch for regression.

This module provides the public fitting functions and backend selection:

    fit(X, y)                        prepared design matrix -> LinearSolution
    lm('Size ~ Type + Weight', data) observations -> design matrix -> LinearSolution
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any, Literal

from numpy.typing import ArrayLike

from pydesignmatrix.core.exceptions import ValidationError
from pydesignmatrix.core.frame import ModelFrame
from pydesignmatrix.design.matrix import DesignMatrix, build_design_matrix
from pydesignmatrix.design.terms import Continuous, Factor, Term, parse_formula
from pydesignmatrix.regression.backends.cpu import CPUQRBackend, CPUSVDBackend
from pydesignmatrix.regression.design import RegressionDesign
from pydesignmatrix.regression.solution import LinearSolution


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'cpu_qr', 'cpu_svd']


def fit(
    X: ArrayLike | DesignMatrix | RegressionDesign,
    y: ArrayLike | None = None,
    *,
    backend: BackendChoice = 'auto',
    column_names: Sequence[str] | None = None,
) -> LinearSolution:
    """
    Fit a linear regression model by ordinary least squares.

    Solves:
        min_β ||y - Xβ||²

    Args:
        X: A DesignMatrix (intercept and factor columns already built), a
            RegressionDesign (then y must be None), or a raw (n x p)
            array-like used as-is, so it must contain any intercept column.
        y: Response vector (n,)
        backend: 'auto' / 'cpu' / 'cpu_qr' (pivoted QR) or 'cpu_svd'
        column_names: Names for the columns of a raw array X

    Returns:
        LinearSolution with coefficients, inference and summary

    Raises:
        ValidationError: If inputs are invalid
        DimensionMismatchError: If X and y have different numbers of rows
        UnderdeterminedModelError: If n <= p
        CollinearPredictorsError: If X is rank-deficient

    Example:
        >>> dm = build_design_matrix(frame, ['Type', 'Weight'])
        >>> result = fit(dm, frame['Size'])
        >>> print(result.summary())
    """
    # === Construct Design ===
    # This is the boundary - validate here, trust everywhere else
    if isinstance(X, RegressionDesign):
        if y is not None:
            raise ValueError("y must be None when X is a RegressionDesign")
        design = X
    elif y is None:
        raise ValueError("y required when X is not a RegressionDesign")
    elif isinstance(X, DesignMatrix):
        if column_names is not None:
            raise ValueError("column_names cannot override a DesignMatrix's names")
        design = RegressionDesign.from_design_matrix(X, y)
    else:
        design = RegressionDesign.from_arrays(X, y, column_names=column_names)

    # === Select Backend and Solve ===
    backend_impl = _get_backend(backend)
    result = backend_impl.solve(design)

    return LinearSolution(_result=result, _design=design)


def lm(
    formula: str,
    data: ModelFrame | Mapping[str, Any] | Any,
    *,
    terms: Sequence[Term] | None = None,
    level_order: str = 'sorted',
    backend: BackendChoice = 'auto',
) -> LinearSolution:
    """
    Fit a linear model to observations with mixed predictor types.

    Builds the ModelFrame (if needed), the design matrix (intercept, factor
    indicators, continuous columns) and fits it by OLS.

    Args:
        formula: Either an additive formula 'response ~ a + b', or just the
            response name, in which case `terms` lists the predictors.
        data: ModelFrame, mapping of variable -> values, or pandas DataFrame
        terms: Predictors when `formula` is a bare response name. With a
            full formula, Factor/Continuous entries here override how the
            same-named formula terms are encoded (e.g. a reference level).
        level_order: 'sorted' (alphabetical, R's default) or 'first_seen'
        backend: Backend choice passed to fit()

    Returns:
        LinearSolution; info['formula'] holds the formula that was fitted

    Raises:
        InvalidFactorError: Degenerate or invalid factor
        DimensionMismatchError: Variables of different lengths
        UnderdeterminedModelError: n <= p
        CollinearPredictorsError: Rank-deficient design

    Example:
        >>> result = lm('Size ~ Type + Weight', weight_genotype())
        >>> result.coef['TypeMutant']
    """
    frame = _as_frame(data)
    response, specs = _model_terms(formula, terms)

    if response not in frame:
        raise ValidationError(
            f"response: unknown variable '{response}'. Available: {list(frame.keys())}"
        )
    if frame.is_categorical(response):
        raise ValidationError(f"{response}: response must be numeric")

    design_matrix = build_design_matrix(frame, specs, level_order=level_order)
    solution = fit(design_matrix, frame[response], backend=backend)

    term_text = " + ".join(design_matrix.term_names) or "1"
    result = replace(
        solution._result,
        info={**solution.info, 'formula': f"{response} ~ {term_text}", 'response': response},
    )
    return LinearSolution(_result=result, _design=solution.design)


def _model_terms(
    formula: str,
    terms: Sequence[Term] | None,
) -> tuple[str, list[Term]]:
    """Response name and ordered term specs from formula / terms."""
    if '~' not in formula:
        if terms is None:
            raise ValueError("terms required when formula is a bare response name")
        return formula.strip(), list(terms)

    response, names = parse_formula(formula)
    if terms is None:
        return response, list(names)

    overrides: dict[str, Factor | Continuous] = {}
    for spec in terms:
        if not isinstance(spec, (Factor, Continuous)):
            raise ValidationError(
                "terms: with a formula, only Factor/Continuous overrides are accepted"
            )
        if spec.name not in names:
            raise ValidationError(
                f"terms: override for '{spec.name}' which is not in the formula {names}"
            )
        overrides[spec.name] = spec
    return response, [overrides.get(name, name) for name in names]


def _as_frame(data: Any) -> ModelFrame:
    """Accept a ModelFrame, a pandas DataFrame, or a mapping of columns."""
    if isinstance(data, ModelFrame):
        return data
    if hasattr(data, 'columns') and hasattr(data, 'dtypes'):
        return ModelFrame.from_dataframe(data)
    if isinstance(data, Mapping):
        return ModelFrame.from_columns(data)
    raise ValidationError(
        f"data: expected ModelFrame, DataFrame or mapping, got {type(data).__name__}"
    )


def _get_backend(choice: BackendChoice):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend()
    elif choice == 'cpu_svd':
        return CPUSVDBackend()
    else:
        raise ValueError(f"Unknown backend: {choice!r}")
