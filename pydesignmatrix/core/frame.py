"""
ModelFrame: the "I have observations" abstraction.

A ModelFrame holds named, equal-length variables. Numeric variables are
stored as float64; everything else (strings, booleans, pandas categoricals)
is stored as string labels. The frame does not know which variables are
responses or predictors; the design matrix builder decides that.

Usage:
    from pydesignmatrix import ModelFrame

    frame = ModelFrame.from_columns(Type=types, Weight=weight, Size=size)
    frame = ModelFrame.from_observations(rows)
    frame = ModelFrame.from_dataframe(df)
    frame = ModelFrame.from_file("mice.csv")

    frame.keys()            # ('Type', 'Weight', 'Size')
    frame['Weight']         # float64 array
    frame.is_categorical('Type')
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pydesignmatrix.core.exceptions import ValidationError
from pydesignmatrix.core.validation import (
    check_1d,
    check_consistent_length,
    check_labels,
    format_label,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class Observation:
    """
    One data row: a response value and the predictor values that go with it.

    Predictor values are either real numbers (continuous) or labels
    (categorical).
    """
    response: float
    predictors: Mapping[str, float | str]


@dataclass(frozen=True)
class ModelFrame:
    """
    Immutable column store for model variables.

    Construct via factory classmethods, not directly.
    """
    _columns: dict[str, NDArray]
    _order: tuple[str, ...]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    def keys(self) -> tuple[str, ...]:
        """Variable names in insertion order."""
        return self._order

    def __getitem__(self, key: str) -> NDArray:
        """
        Access a variable by name.

        Raises:
            KeyError: If the name is unknown, listing the available variables
        """
        if key not in self._columns:
            raise KeyError(
                f"ModelFrame has no variable '{key}'. Available: {list(self._order)}"
            )
        return self._columns[key]

    def __contains__(self, key: object) -> bool:
        return key in self._columns

    def __len__(self) -> int:
        return self.n_observations

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        """Source description and declared factor levels (copy)."""
        return dict(self._metadata)

    def is_categorical(self, name: str) -> bool:
        """True if the variable is stored as labels rather than numbers."""
        return not np.issubdtype(self[name].dtype, np.number)

    def declared_levels(self, name: str) -> tuple[str, ...] | None:
        """Level order carried by the source (e.g. a pandas Categorical), if any."""
        levels = self._metadata.get('levels', {}).get(name)
        return tuple(levels) if levels is not None else None

    def factor_labels(self, name: str) -> NDArray[np.str_]:
        """
        Labels of a variable used as a factor.

        Numeric variables are formatted with format_label (2.0 -> '2').

        Raises:
            ValidationError: If a numeric variable has non-finite values
        """
        values = self[name]
        if self.is_categorical(name):
            return values
        if not np.all(np.isfinite(values)):
            raise ValidationError(f"{name}: factor has non-finite values")
        return check_labels(values, name)

    def cell_means(
        self,
        response: str,
        by: str | list[str],
        *,
        level_order: str = 'sorted',
    ) -> dict[tuple[str, ...], float]:
        """
        Mean response for every observed combination of factor levels.

        Args:
            response: Numeric variable to average
            by: Factor name or list of factor names
            level_order: 'sorted' or 'first_seen'; determines key order

        Returns:
            {(level_1, level_2, ...): mean}, ordered by the factors' level order
        """
        from pydesignmatrix.design.terms import resolve_levels

        names = [by] if isinstance(by, str) else list(by)
        y = self[response]
        if self.is_categorical(response):
            raise ValidationError(f"{response}: cell means need a numeric response")

        labels = [self.factor_labels(name) for name in names]
        orders = [
            resolve_levels(lab, level_order, declared=self.declared_levels(name), name=name)
            for lab, name in zip(labels, names)
        ]

        cells: dict[tuple[str, ...], float] = {}
        for key in _product(orders):
            mask = np.ones(self.n_observations, dtype=bool)
            for lab, level in zip(labels, key):
                mask &= lab == level
            if np.any(mask):
                cells[key] = float(np.mean(y[mask]))
        return cells

    def to_dataframe(self) -> 'pd.DataFrame':
        """Return the frame as a pandas DataFrame (requires pandas)."""
        import pandas as pd

        return pd.DataFrame({name: self._columns[name] for name in self._order})

    # === Factory Methods ===

    @classmethod
    def from_columns(
        cls,
        columns: Mapping[str, Any] | None = None,
        **named_columns: Any,
    ) -> ModelFrame:
        """
        Construct from named 1D array-likes.

        Numeric arrays become continuous variables; any other dtype becomes
        categorical labels.

        Raises:
            DimensionMismatchError: If columns have different lengths
        """
        merged: dict[str, Any] = dict(columns or {})
        for name in named_columns:
            if name in merged:
                raise ValidationError(f"Variable '{name}' given twice")
        merged.update(named_columns)
        return cls._build(merged, source='columns')

    @classmethod
    def from_observations(
        cls,
        observations: Iterable[Observation | Mapping[str, Any]],
        *,
        response: str = 'y',
    ) -> ModelFrame:
        """
        Construct from row records.

        Each record is either an Observation (its response is stored under
        the name given by `response`) or a plain mapping of variable name to
        value. All records must have the same variables.
        """
        rows: list[dict[str, Any]] = []
        for obs in observations:
            if isinstance(obs, Observation):
                if response in obs.predictors:
                    raise ValidationError(
                        f"Observation predictor named '{response}' clashes with the response"
                    )
                row = {response: obs.response, **obs.predictors}
            else:
                row = dict(obs)
            rows.append(row)

        if not rows:
            raise ValidationError("observations: need at least one observation")

        names = list(rows[0].keys())
        for i, row in enumerate(rows[1:], start=1):
            if set(row.keys()) != set(names):
                raise ValidationError(
                    f"observations[{i}]: variables {sorted(row.keys())} "
                    f"differ from observations[0] {sorted(names)}"
                )

        columns = {name: [row[name] for row in rows] for name in names}
        return cls._build(columns, source='observations')

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> ModelFrame:
        """
        Construct from a pandas DataFrame.

        Categorical dtype columns keep their category order as declared levels.
        """
        import pandas as pd

        columns: dict[str, Any] = {}
        levels: dict[str, list[str]] = {}
        for col in df.columns:
            series = df[col]
            if isinstance(series.dtype, pd.CategoricalDtype):
                levels[str(col)] = [format_label(c) for c in series.cat.categories]
                columns[str(col)] = series.astype(object).to_numpy()
            elif pd.api.types.is_bool_dtype(series) or not pd.api.types.is_numeric_dtype(series):
                columns[str(col)] = series.astype(object).to_numpy()
            else:
                columns[str(col)] = series.to_numpy(dtype=np.float64)

        extra = {'source_path': source_path} if source_path else None
        return cls._build(columns, source='dataframe', levels=levels, extra=extra)

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> ModelFrame:
        """Construct from a CSV or TSV file (requires pandas)."""
        import pandas as pd

        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == '.csv':
            df = pd.read_csv(path, usecols=columns)
        elif suffix == '.tsv':
            df = pd.read_csv(path, sep='\t', usecols=columns)
        else:
            raise ValidationError(f"Unknown file format: {suffix}")
        return cls.from_dataframe(df, source_path=str(path))

    @classmethod
    def _build(
        cls,
        raw: Mapping[str, Any],
        *,
        source: str,
        levels: Mapping[str, list[str]] | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> ModelFrame:
        """Internal builder with validation; `extra` is merged into the metadata."""
        if not raw:
            raise ValidationError("ModelFrame needs at least one variable")

        storage: dict[str, NDArray] = {}
        for name, values in raw.items():
            arr = _as_column(values, name)
            arr.flags.writeable = False
            storage[name] = arr

        order = tuple(storage.keys())
        check_consistent_length(*(storage[k] for k in order), names=order)

        return cls(
            _columns=storage,
            _order=order,
            _metadata={
                'n_observations': storage[order[0]].shape[0],
                'source': source,
                'levels': dict(levels or {}),
                **(extra or {}),
            },
        )


def _as_column(values: Any, name: str) -> NDArray:
    """Numeric input -> float64, anything else -> string labels."""
    if hasattr(values, 'to_numpy'):
        values = values.to_numpy()
    try:
        arr = np.asarray(values)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    check_1d(arr, name)
    if np.issubdtype(arr.dtype, np.number) and arr.dtype != np.bool_:
        return arr.astype(np.float64)
    if arr.dtype == object and len(arr) > 0 and all(
        isinstance(v, (int, float, np.number)) and not isinstance(v, (bool, np.bool_))
        for v in arr
    ):
        return arr.astype(np.float64)
    return check_labels(arr, name)


def _product(orders: list[list[str]]) -> list[tuple[str, ...]]:
    """Cartesian product of level lists, first factor varying slowest."""
    keys: list[tuple[str, ...]] = [()]
    for levels in orders:
        keys = [key + (level,) for key in keys for level in levels]
    return keys
