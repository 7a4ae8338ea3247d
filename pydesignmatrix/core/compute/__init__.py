"""
Shared compute infrastructure for pydesignmatrix.

This module provides timing utilities, numerical tolerances and the linear
algebra kernels used by the regression backends.

IMPORTANT: This is NOT where the regression backends live. Those go in
regression/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Stage timer for backend solves
    tolerances: Rank tolerance and comparison tiers
    linalg: Linear algebra kernels (QR, SVD)
"""

from pydesignmatrix.core.compute.timing import Timer

__all__ = [
    "Timer",
]
