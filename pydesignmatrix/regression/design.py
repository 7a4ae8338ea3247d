"""
Regression Design.

Pairs a design matrix X with a response y after validating both. It is the
boundary of the OLS fitter: everything past this point trusts that X is
2D and finite, y is 1D and finite, lengths agree, and n > p.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydesignmatrix.core.exceptions import UnderdeterminedModelError, ValidationError
from pydesignmatrix.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
)
from pydesignmatrix.design.matrix import DesignMatrix
from pydesignmatrix.design.terms import INTERCEPT_NAME


@dataclass(frozen=True)
class RegressionDesign:
    """
    Validated (X, y) pair for least squares.

    Immutable after construction.

    Construction:
        RegressionDesign.from_design_matrix(dm, y)   # named columns, factor metadata
        RegressionDesign.from_arrays(X, y)           # X used as-is (bring your own intercept)
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _column_names: tuple[str, ...]
    _design_matrix: DesignMatrix | None = None

    @classmethod
    def from_design_matrix(cls, design_matrix: DesignMatrix, y: ArrayLike) -> RegressionDesign:
        """Build from a DesignMatrix and a response vector."""
        y_arr = check_array(y, 'y')
        return cls._build(
            np.asarray(design_matrix.X, dtype=np.float64),
            y_arr,
            column_names=design_matrix.column_names,
            design_matrix=design_matrix,
        )

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        *,
        column_names: tuple[str, ...] | list[str] | None = None,
    ) -> RegressionDesign:
        """Build directly from arrays. Columns default to x0, x1, ..."""
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        return cls._build(X_arr, y_arr, column_names=column_names, design_matrix=None)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        *,
        column_names: tuple[str, ...] | list[str] | None,
        design_matrix: DesignMatrix | None,
    ) -> RegressionDesign:
        """Internal builder with validation."""
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n, p = X.shape
        if p == 0:
            raise ValidationError("X: design matrix has no columns")
        if n <= p:
            raise UnderdeterminedModelError(
                f"Need more observations than model columns for OLS inference: "
                f"n={n}, p={p}, residual df={n - p}",
                n_observations=n,
                n_columns=p,
            )

        if column_names is None:
            names = tuple(f"x{j}" for j in range(p))
        else:
            names = tuple(str(c) for c in column_names)
            if len(names) != p:
                raise ValidationError(
                    f"column_names: got {len(names)} names for {p} columns"
                )

        X = X.astype(np.float64, copy=True)
        y = y.astype(np.float64, copy=True)
        X.flags.writeable = False
        y.flags.writeable = False

        return cls(
            _X=X,
            _y=y,
            _n=n,
            _p=p,
            _column_names=names,
            _design_matrix=design_matrix,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of model columns, intercept included."""
        return self._p

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._column_names

    @property
    def design_matrix(self) -> DesignMatrix | None:
        """The DesignMatrix this design was built from, if any."""
        return self._design_matrix

    @property
    def has_intercept(self) -> bool:
        """True if column 0 is a column of ones."""
        if self._design_matrix is not None:
            return self._column_names[0] == INTERCEPT_NAME
        return bool(np.all(self._X[:, 0] == 1.0))
