"""
Input checks applied at the public boundary.

Each check tests one property and raises at once with the offending name
and value in the message; nothing here repairs bad input. Code behind the
boundary (design matrix assembly, backends) trusts what passed.
"""

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydesignmatrix.core.exceptions import (
    DimensionError,
    DimensionMismatchError,
    ValidationError,
)


def check_array(array: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Convert numeric input to a floating numpy array.

    Integers are promoted to float64; floating dtypes are kept. Booleans,
    strings and mixed object arrays are rejected rather than coerced, since
    a label column passed as a covariate is a modelling error.

    Raises:
        ValidationError: If the values are not numeric
    """
    try:
        arr = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if arr.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )
    if arr.dtype == np.bool_ or not np.issubdtype(arr.dtype, np.number):
        raise ValidationError(f"{name}: non-numeric dtype {arr.dtype}, expected numeric data")

    if np.issubdtype(arr.dtype, np.floating):
        return arr
    return arr.astype(np.float64)


def format_label(value: Any) -> str:
    """
    Text form of one factor label.

    Whole numbers print without a trailing '.0', so 1, 1.0 and "1" are the
    same level; other floats use repr. Strings are returned unchanged.
    """
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value))
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        value = float(value)
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def check_labels(values: ArrayLike, name: str) -> NDArray[np.str_]:
    """
    Convert categorical values to a 1D array of strings.

    Every label goes through format_label, so a number used as a level
    reads the same in declared levels, cell means and column names.

    Raises:
        DimensionError: If labels are not 1D
        ValidationError: If any label is missing (None or NaN)
    """
    arr = np.asarray(values, dtype=object)
    check_1d(arr, name)
    if any(v is None or (isinstance(v, (float, np.floating)) and np.isnan(v)) for v in arr):
        raise ValidationError(f"{name}: contains missing labels")
    return np.array([format_label(v) for v in arr], dtype=str)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Raises:
        ValidationError: If any value is NaN or infinite, with counts of each
    """
    if np.all(np.isfinite(array)):
        return
    n_nan = int(np.isnan(array).sum())
    n_inf = int(np.isinf(array).sum())
    raise ValidationError(f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)")


def check_ndim(array: NDArray, ndim: int, name: str) -> None:
    """
    Raises:
        DimensionError: If array.ndim != ndim
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray, name: str) -> None:
    check_ndim(array, 1, name)


def check_2d(array: NDArray, name: str) -> None:
    check_ndim(array, 2, name)


def check_consistent_length(*arrays: NDArray, names: tuple[str, ...]) -> None:
    """
    Require every array to have the same number of rows.

    Args:
        *arrays: Arrays whose first dimensions are compared
        names: One name per array, used in the message and in
            DimensionMismatchError.lengths

    Raises:
        ValueError: If names and arrays differ in count (caller bug)
        DimensionMismatchError: If the row counts differ
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    lengths = {name: arr.shape[0] for arr, name in zip(arrays, names)}
    if len(set(lengths.values())) > 1:
        details = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise DimensionMismatchError(f"Inconsistent lengths: {details}", lengths=lengths)
