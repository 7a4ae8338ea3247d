"""
Treatment (dummy) coding for factors.

A factor with levels L0 (reference), L1, ..., Lk becomes k indicator
columns; column j is 1 where the observation's level is L(j+1), 0 elsewhere.
Rows at the reference level are all zero.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray


def encode_treatment(
    values: NDArray,
    levels: list[str],
) -> tuple[NDArray[np.floating[Any]], list[str]]:
    """
    Treatment coding for a single factor.

    Args:
        values: 1D array of labels; every value must be in `levels`
        levels: Ordered levels, first = reference

    Returns:
        (X_coded, contrasts) where:
            X_coded: (n, k) float64 indicator matrix, k = len(levels) - 1
            contrasts: the k non-reference level names (column order)
    """
    labels = np.asarray(values).astype(str)
    contrasts = list(levels[1:])

    X = np.zeros((len(labels), len(contrasts)), dtype=np.float64)
    for j, level in enumerate(contrasts):
        X[:, j] = (labels == level).astype(np.float64)

    return X, contrasts
