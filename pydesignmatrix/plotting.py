"""Matplotlib rendering of raw observations, fitted lines and group means."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike

from pydesignmatrix.core.exceptions import ValidationError
from pydesignmatrix.core.validation import check_labels
from pydesignmatrix.design.terms import INTERCEPT_NAME

if TYPE_CHECKING:
    import matplotlib.pyplot as plt
    from matplotlib.collections import LineCollection
    from matplotlib.lines import Line2D
    from pydesignmatrix.regression.solution import LinearSolution


# Colours and markers for the reference and first non-reference group
REFERENCE_COLOR = "#D95F02"
CONTRAST_COLOR = "#1B9E77"
DEFAULT_COLORS = (REFERENCE_COLOR, CONTRAST_COLOR, "#7570B3", "#E7298A")
DEFAULT_MARKERS = ("o", "^", "s", "D")


def default_styles(levels: Sequence[str]) -> tuple[dict[str, str], dict[str, str]]:
    """Colour and marker per level, cycling through the defaults."""
    colors = {lvl: DEFAULT_COLORS[i % len(DEFAULT_COLORS)] for i, lvl in enumerate(levels)}
    markers = {lvl: DEFAULT_MARKERS[i % len(DEFAULT_MARKERS)] for i, lvl in enumerate(levels)}
    return colors, markers


def categorical_positions(levels: Sequence[str]) -> dict[str, float]:
    """x position of each level on a categorical axis: 1, 2, ..."""
    return {level: float(i + 1) for i, level in enumerate(levels)}


def render_scatter(
    x: ArrayLike,
    y: ArrayLike,
    groups: ArrayLike,
    *,
    colors: Mapping[str, str],
    markers: Mapping[str, str],
    axis_labels: tuple[str, str],
    title: str,
    x_levels: Sequence[str] | None = None,
    legend_title: str | None = None,
    ax: 'plt.Axes | None' = None,
) -> 'plt.Axes':
    """
    Scatter the raw observations, one colour/marker per group.

    Args:
        x: Numeric x values, or labels of a categorical x axis
        y: Response values
        groups: Group label of every observation
        colors: Group -> colour, in legend order; groups absent from
            the data are skipped
        markers: Group -> marker
        axis_labels: (x label, y label)
        title: Plot title
        x_levels: Order of a categorical x axis (positions 1, 2, ...);
            labels are placed in this order. Omit for numeric x.
        legend_title: Title of the group legend
        ax: Axes to draw on (a new figure is created if None)

    Returns:
        The Axes drawn on
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots()

    y_arr = np.asarray(y, dtype=np.float64)
    group_arr = check_labels(groups, 'groups')
    if x_levels is not None:
        positions = categorical_positions(x_levels)
        x_labels = check_labels(x, 'x')
        missing = sorted(set(x_labels.tolist()) - set(positions))
        if missing:
            raise ValidationError(f"x: labels {missing} are not in x_levels {list(x_levels)}")
        x_arr = np.array([positions[v] for v in x_labels])
        ax.set_xticks(list(positions.values()))
        ax.set_xticklabels(list(positions.keys()))
    else:
        x_arr = np.asarray(x, dtype=np.float64)

    if not (len(x_arr) == len(y_arr) == len(group_arr)):
        raise ValidationError(
            f"Inconsistent lengths: x={len(x_arr)}, y={len(y_arr)}, groups={len(group_arr)}"
        )

    unknown = sorted(set(group_arr.tolist()) - set(colors))
    if unknown:
        raise ValidationError(f"groups: {unknown} have no colour in {list(colors)}")

    # Legend entries follow the order of `colors` (the level order)
    for group in colors:
        mask = group_arr == group
        if not np.any(mask):
            continue
        ax.scatter(
            x_arr[mask],
            y_arr[mask],
            color=colors[group],
            marker=markers[group],
            label=group,
        )

    ax.set_xlabel(axis_labels[0])
    ax.set_ylabel(axis_labels[1])
    ax.set_title(title, fontsize="small")
    ax.legend(title=legend_title, fontsize="small", loc="upper left")
    return ax


def render_fitted_line(
    intercept: float,
    slope: float,
    color: str,
    *,
    ax: 'plt.Axes',
    label: str | None = None,
) -> 'Line2D':
    """Draw y = intercept + slope * x across the whole x range (like abline)."""
    return ax.axline((0.0, float(intercept)), slope=float(slope), color=color, label=label)


def render_group_means(
    group_positions: ArrayLike,
    mean_values: ArrayLike,
    color: str,
    *,
    ax: 'plt.Axes',
    half_width: float = 0.25,
) -> 'LineCollection':
    """Draw a short horizontal segment at each group mean, centred on its x position."""
    positions = np.asarray(group_positions, dtype=np.float64)
    means = np.asarray(mean_values, dtype=np.float64)
    if positions.shape != means.shape:
        raise ValidationError(
            f"group_positions {positions.shape} and mean_values {means.shape} differ in shape"
        )
    return ax.hlines(means, positions - half_width, positions + half_width, colors=color)


def group_lines(
    solution: 'LinearSolution',
    factor: str,
    slope_term: str,
) -> dict[str, tuple[float, float]]:
    """
    Per-level regression lines of a factor + continuous model.

    The reference level's line has the model intercept; every other level
    adds its indicator coefficient. All levels share the slope.

    Returns:
        {level: (intercept, slope)} in level order
    """
    design_matrix = solution.design.design_matrix
    if design_matrix is None or factor not in design_matrix.factor_levels:
        raise ValidationError(f"group_lines: '{factor}' is not a factor of the fitted model")

    coef = solution.coef
    if slope_term not in coef:
        raise ValidationError(f"group_lines: no coefficient named '{slope_term}'")

    levels = design_matrix.factor_levels[factor]
    lines: dict[str, tuple[float, float]] = {}
    for level in levels:
        offset = 0.0 if level == levels[0] else coef[f"{factor}{level}"]
        lines[level] = (coef[INTERCEPT_NAME] + offset, coef[slope_term])
    return lines


def save_figure(ax: 'plt.Axes', path: Any) -> None:
    """Write the axes' figure to disk and close it."""
    import matplotlib.pyplot as plt

    fig = ax.get_figure()
    fig.savefig(path, bbox_inches="tight")
    plt.close(fig)
