"""
The two worked examples, end to end.

    python -m pydesignmatrix.demo                 # print design matrices and summaries
    python -m pydesignmatrix.demo --plot figures  # also save the plots as PNG

Example 1 (weight_genotype): Size ~ Type + Weight. The design matrix has
columns (Intercept), TypeMutant, Weight, so the mutant line is the control
line shifted up by the TypeMutant coefficient with the same slope.

Example 2 (batch_effect): Gene_Expression ~ Lab + Type. LabB estimates the
batch shift between labs, TypeMutant the genotype effect within a lab.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydesignmatrix.datasets import batch_effect, weight_genotype
from pydesignmatrix.design.matrix import DesignMatrix
from pydesignmatrix.regression.solution import LinearSolution
from pydesignmatrix.regression.solvers import lm


@dataclass(frozen=True)
class PipelineOutput:
    """Everything one example produces."""
    design_matrix: DesignMatrix
    solution: LinearSolution
    axes: Any = None


def run_weight_genotype(*, plot: bool = False, backend: str = 'auto') -> PipelineOutput:
    """Fit Size ~ Type + Weight; optionally draw both group lines over the data."""
    frame = weight_genotype()
    solution = lm('Size ~ Type + Weight', frame, backend=backend)
    design_matrix = solution.design.design_matrix

    axes = None
    if plot:
        from pydesignmatrix.plotting import (
            default_styles,
            group_lines,
            render_fitted_line,
            render_scatter,
        )

        levels = design_matrix.factor_levels['Type']
        colors, markers = default_styles(levels)
        axes = render_scatter(
            frame['Weight'],
            frame['Size'],
            frame['Type'],
            colors=colors,
            markers=markers,
            axis_labels=("Weight (g)", "Size (cm)"),
            title="Example using design matrix for plotting regression lines",
            legend_title="Type",
        )
        for level, (intercept, slope) in group_lines(solution, 'Type', 'Weight').items():
            render_fitted_line(intercept, slope, colors[level], ax=axes)

    return PipelineOutput(design_matrix=design_matrix, solution=solution, axes=axes)


def run_batch_effect(*, plot: bool = False, backend: str = 'auto') -> PipelineOutput:
    """Fit Gene_Expression ~ Lab + Type; optionally draw per-cell means over the data."""
    frame = batch_effect()
    solution = lm('Gene_Expression ~ Lab + Type', frame, backend=backend)
    design_matrix = solution.design.design_matrix

    axes = None
    if plot:
        from pydesignmatrix.plotting import (
            categorical_positions,
            default_styles,
            render_group_means,
            render_scatter,
        )

        labs = design_matrix.factor_levels['Lab']
        types = design_matrix.factor_levels['Type']
        colors, markers = default_styles(types)
        axes = render_scatter(
            frame['Lab'],
            frame['Gene_Expression'],
            frame['Type'],
            colors=colors,
            markers=markers,
            axis_labels=("Lab", "Gene Expression"),
            title="Gene Expression by Lab and Type",
            x_levels=labs,
            legend_title="Type",
        )
        positions = categorical_positions(labs)
        means = frame.cell_means('Gene_Expression', ['Lab', 'Type'])
        for type_level in types:
            cells = [(lab, t) for (lab, t) in means if t == type_level]
            render_group_means(
                [positions[lab] for lab, _ in cells],
                [means[cell] for cell in cells],
                colors[type_level],
                ax=axes,
            )

    return PipelineOutput(design_matrix=design_matrix, solution=solution, axes=axes)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description='Design matrix and OLS walkthrough on two toy mouse experiments'
    )
    parser.add_argument('--plot', metavar='DIR', help='Save plots as PNG files in DIR')
    parser.add_argument(
        '--backend', default='auto', choices=['auto', 'cpu', 'cpu_qr', 'cpu_svd'],
        help='Least squares backend',
    )
    args = parser.parse_args(argv)

    plot = args.plot is not None
    outputs = {
        'weight_genotype': run_weight_genotype(plot=plot, backend=args.backend),
        'batch_effect': run_batch_effect(plot=plot, backend=args.backend),
    }

    for name, output in outputs.items():
        print(f"### {name}")
        print()
        print(output.design_matrix)
        print()
        print(output.solution.summary())
        print()

    if plot:
        from pydesignmatrix.plotting import save_figure

        out_dir = Path(args.plot)
        out_dir.mkdir(parents=True, exist_ok=True)
        for name, output in outputs.items():
            path = out_dir / f"{name}.png"
            save_figure(output.axes, path)
            print(f"saved {path}")

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
