"""
pydesignmatrix: design matrices and ordinary least squares for small
experimental datasets.

Submodules:
    design: Build treatment-coded design matrices from factors and covariates
    regression: OLS fit with standard errors, t-tests and R-style summary
    datasets: The weight/genotype and batch-effect example data
    plotting: Fitted lines and group means over raw data (matplotlib)
    demo: Both worked examples end to end
"""

__version__ = "0.1.0"

from pydesignmatrix.core.frame import ModelFrame, Observation
from pydesignmatrix.core.exceptions import (
    PyDesignMatrixError,
    ValidationError,
    DimensionMismatchError,
    InvalidFactorError,
    UnderdeterminedModelError,
    CollinearPredictorsError,
)
from pydesignmatrix.design import (
    Continuous,
    DesignMatrix,
    Factor,
    build_design_matrix,
    model_matrix,
)
from pydesignmatrix.regression import LinearSolution, fit, lm

__all__ = [
    "__version__",
    "ModelFrame",
    "Observation",
    "Factor",
    "Continuous",
    "DesignMatrix",
    "build_design_matrix",
    "model_matrix",
    "fit",
    "lm",
    "LinearSolution",
    "PyDesignMatrixError",
    "ValidationError",
    "DimensionMismatchError",
    "InvalidFactorError",
    "UnderdeterminedModelError",
    "CollinearPredictorsError",
]
