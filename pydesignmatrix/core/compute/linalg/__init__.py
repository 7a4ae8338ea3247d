"""
Linear algebra kernels for pydesignmatrix.

All functions follow these conventions:
    - NumPy/SciPy (LAPACK under the hood), double precision
    - Each decomposition returns a structured, frozen result dataclass
    - Nothing here inverts X'X explicitly

Submodules:
    qr: Pivoted QR decomposition, solve, unscaled covariance
    svd: Thin SVD, solve, unscaled covariance
"""

from pydesignmatrix.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    qr_solve_cpu,
    qr_unscaled_covariance,
)
from pydesignmatrix.core.compute.linalg.svd import (
    SVDResult,
    svd_cpu,
    svd_solve_cpu,
    svd_unscaled_covariance,
)

__all__ = [
    # QR decomposition
    "QRResult",
    "qr_cpu",
    "qr_solve_cpu",
    "qr_unscaled_covariance",
    # SVD
    "SVDResult",
    "svd_cpu",
    "svd_solve_cpu",
    "svd_unscaled_covariance",
]
