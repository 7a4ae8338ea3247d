"""
Design matrix construction.

Turns a ModelFrame and an ordered list of terms into the numeric matrix
X of a linear model:

    column 0            (Intercept), all ones
    then, per term      Factor      -> one indicator per non-reference level,
                                       named <factor><level>
                        Continuous  -> the values verbatim, named <variable>

This is what R's model.matrix(~ Type + Weight) produces for an additive
formula with treatment contrasts.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pydesignmatrix.core.exceptions import InvalidFactorError, ValidationError
from pydesignmatrix.core.frame import ModelFrame
from pydesignmatrix.core.validation import check_finite
from pydesignmatrix.design._encoding import encode_treatment
from pydesignmatrix.design.terms import (
    INTERCEPT_NAME,
    Continuous,
    Factor,
    Term,
    resolve_levels,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class DesignMatrix:
    """
    Encoded design matrix with the metadata needed to interpret coefficients.

    Attributes:
        X: (n, p) float64 design matrix, intercept in column 0
        column_names: p column labels
        term_names: terms in model order (without the intercept)
        term_slices: term name -> column slice in X
        factor_levels: factor name -> levels in model order (first = reference)
        level_order: policy used for factors without explicit levels
    """
    X: NDArray[np.floating[Any]]
    column_names: tuple[str, ...]
    term_names: tuple[str, ...]
    term_slices: dict[str, slice]
    factor_levels: dict[str, tuple[str, ...]]
    level_order: str

    @property
    def n(self) -> int:
        """Number of observations (rows)."""
        return self.X.shape[0]

    @property
    def p(self) -> int:
        """Number of columns, intercept included."""
        return self.X.shape[1]

    @property
    def reference_levels(self) -> dict[str, str]:
        """Factor name -> level absorbed into the intercept."""
        return {name: levels[0] for name, levels in self.factor_levels.items()}

    def column_index(self, name: str) -> int:
        """Position of a named column."""
        try:
            return self.column_names.index(name)
        except ValueError:
            raise KeyError(
                f"DesignMatrix has no column '{name}'. Available: {list(self.column_names)}"
            ) from None

    def column(self, name: str) -> NDArray[np.floating[Any]]:
        """Values of a named column."""
        return self.X[:, self.column_index(name)]

    def term_columns(self, term: str) -> tuple[str, ...]:
        """Column names generated by a term."""
        if term == INTERCEPT_NAME:
            return (INTERCEPT_NAME,)
        if term not in self.term_slices:
            raise KeyError(
                f"DesignMatrix has no term '{term}'. Available: {list(self.term_names)}"
            )
        return self.column_names[self.term_slices[term]]

    def encode(self, data: ModelFrame | Mapping[str, Any]) -> NDArray[np.floating[Any]]:
        """
        Encode new observations with this matrix's terms and levels.

        Unlike build_design_matrix, a factor may show a single level here
        (e.g. predicting for one group), but every value must be one of the
        levels seen when the matrix was built.

        Raises:
            InvalidFactorError: If a factor value was not seen at build time
            ValidationError: If a term variable is missing or not finite
        """
        frame = data if isinstance(data, ModelFrame) else ModelFrame.from_columns(data)
        n = frame.n_observations
        blocks: list[NDArray[np.floating[Any]]] = [np.ones((n, 1), dtype=np.float64)]

        for name in self.term_names:
            if name not in frame:
                raise ValidationError(
                    f"encode: missing variable '{name}'. Available: {list(frame.keys())}"
                )
            if name in self.factor_levels:
                levels = list(self.factor_levels[name])
                labels = frame.factor_labels(name)
                unseen = sorted(set(labels.tolist()) - set(levels))
                if unseen:
                    raise InvalidFactorError(
                        f"{name}: levels {unseen} were not present when the model was built "
                        f"(known: {levels})",
                        factor=name,
                        levels=tuple(levels),
                    )
                coded, _ = encode_treatment(labels, levels)
                blocks.append(coded)
            else:
                if frame.is_categorical(name):
                    raise ValidationError(
                        f"{name}: continuous predictor has non-numeric values"
                    )
                values = frame[name]
                check_finite(values, name)
                blocks.append(values.reshape(-1, 1).astype(np.float64))

        return np.hstack(blocks)

    def to_frame(self) -> 'pd.DataFrame':
        """The matrix as a pandas DataFrame with named columns (requires pandas)."""
        import pandas as pd

        return pd.DataFrame(
            self.X,
            columns=list(self.column_names),
            index=pd.RangeIndex(1, self.n + 1),
        )

    def format(self, digits: int = 4) -> str:
        """Printable table, one row per observation (like R's model.matrix print)."""
        cells = [
            [f"{v:.{digits}g}" for v in row]
            for row in self.X
        ]
        widths = [
            max(len(name), *(len(r[j]) for r in cells)) if cells else len(name)
            for j, name in enumerate(self.column_names)
        ]
        index_width = len(str(self.n))
        header = " " * index_width + " " + " ".join(
            name.rjust(w) for name, w in zip(self.column_names, widths)
        )
        lines = [header]
        for i, row in enumerate(cells, start=1):
            lines.append(
                str(i).rjust(index_width) + " " + " ".join(
                    cell.rjust(w) for cell, w in zip(row, widths)
                )
            )
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"DesignMatrix(n={self.n}, p={self.p}, columns={list(self.column_names)})"


def build_design_matrix(
    data: ModelFrame | Mapping[str, Any],
    terms: Sequence[Term],
    *,
    level_order: str = 'sorted',
) -> DesignMatrix:
    """
    Build the design matrix of an additive linear model.

    Args:
        data: ModelFrame, or a mapping of variable name -> 1D values
        terms: Predictors in model order. Each is a Factor, a Continuous,
            or a variable name (labels -> Factor, numbers -> Continuous).
        level_order: 'sorted' (alphabetical, default) or 'first_seen';
            decides the level order, and thus the reference level, of
            factors that do not declare their own levels.

    Returns:
        DesignMatrix with columns [(Intercept), <term columns>...]

    Raises:
        DimensionMismatchError: If variables have inconsistent lengths
        InvalidFactorError: If a factor has fewer than two observed levels,
            a value outside its declared levels, or an unknown reference
        ValidationError: Unknown or duplicate term, non-numeric or
            non-finite continuous predictor, unknown level_order

    Example:
        >>> frame = ModelFrame.from_columns(Type=['Control', 'Mutant', ...],
        ...                                 Weight=[67.2, 98.0, ...])
        >>> dm = build_design_matrix(frame, ['Type', 'Weight'])
        >>> dm.column_names
        ('(Intercept)', 'TypeMutant', 'Weight')
    """
    frame = data if isinstance(data, ModelFrame) else ModelFrame.from_columns(data)
    specs = [_resolve_term(frame, term) for term in terms]

    seen: set[str] = set()
    for spec in specs:
        if spec.name in seen:
            raise ValidationError(f"terms: '{spec.name}' given twice")
        seen.add(spec.name)

    n = frame.n_observations
    blocks: list[NDArray[np.floating[Any]]] = [np.ones((n, 1), dtype=np.float64)]
    column_names: list[str] = [INTERCEPT_NAME]
    term_slices: dict[str, slice] = {}
    factor_levels: dict[str, tuple[str, ...]] = {}

    for spec in specs:
        start = len(column_names)
        if isinstance(spec, Factor):
            labels = frame.factor_labels(spec.name)
            declared = spec.levels if spec.levels is not None else frame.declared_levels(spec.name)
            levels = resolve_levels(
                labels,
                level_order,
                declared=declared,
                reference=spec.reference,
                name=spec.name,
            )
            if len(levels) < 2:
                raise InvalidFactorError(
                    f"{spec.name}: need at least 2 observed levels, got {len(levels)} "
                    f"({levels}); a constant factor is not identifiable",
                    factor=spec.name,
                    levels=tuple(levels),
                )
            coded, contrasts = encode_treatment(labels, levels)
            blocks.append(coded)
            column_names.extend(f"{spec.name}{level}" for level in contrasts)
            factor_levels[spec.name] = tuple(levels)
        else:
            if frame.is_categorical(spec.name):
                raise ValidationError(
                    f"{spec.name}: continuous predictor has non-numeric values"
                )
            values = frame[spec.name]
            check_finite(values, spec.name)
            blocks.append(values.reshape(-1, 1).astype(np.float64))
            column_names.append(spec.name)
        term_slices[spec.name] = slice(start, len(column_names))

    if len(set(column_names)) != len(column_names):
        duplicates = sorted({c for c in column_names if column_names.count(c) > 1})
        raise ValidationError(f"terms: generated duplicate column names {duplicates}")

    X = np.hstack(blocks)
    X.flags.writeable = False

    return DesignMatrix(
        X=X,
        column_names=tuple(column_names),
        term_names=tuple(spec.name for spec in specs),
        term_slices=term_slices,
        factor_levels=factor_levels,
        level_order=level_order,
    )


# R's name for the same operation
model_matrix = build_design_matrix


def _resolve_term(frame: ModelFrame, term: Term) -> Factor | Continuous:
    """Turn a term into a Factor or Continuous, checking the variable exists."""
    if isinstance(term, (Factor, Continuous)):
        name = term.name
    elif isinstance(term, str):
        name = term
    else:
        raise ValidationError(
            f"terms: expected Factor, Continuous or str, got {type(term).__name__}"
        )

    if name not in frame:
        raise ValidationError(
            f"terms: unknown variable '{name}'. Available: {list(frame.keys())}"
        )

    if isinstance(term, str):
        return Factor(name) if frame.is_categorical(name) else Continuous(name)
    return term
