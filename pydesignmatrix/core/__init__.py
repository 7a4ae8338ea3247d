"""
Core infrastructure for pydesignmatrix.

Shared abstractions used by the design and regression subpackages.

Key components:
    frame: ModelFrame / Observation data intake
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, linear algebra kernels
"""

from pydesignmatrix.core.protocols import Backend
from pydesignmatrix.core.result import Result
from pydesignmatrix.core.frame import ModelFrame, Observation
from pydesignmatrix.core.exceptions import (
    PyDesignMatrixError,
    ValidationError,
    DimensionError,
    DimensionMismatchError,
    InvalidFactorError,
    NumericalError,
    UnderdeterminedModelError,
    CollinearPredictorsError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Data intake
    "ModelFrame",
    "Observation",
    # Exceptions
    "PyDesignMatrixError",
    "ValidationError",
    "DimensionError",
    "DimensionMismatchError",
    "InvalidFactorError",
    "NumericalError",
    "UnderdeterminedModelError",
    "CollinearPredictorsError",
]
