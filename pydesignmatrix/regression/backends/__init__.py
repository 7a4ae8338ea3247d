"""
Regression backends.

Available backends:
    CPUQRBackend: reference implementation using pivoted QR decomposition
    CPUSVDBackend: thin SVD, also reports the condition number
"""

from pydesignmatrix.regression.backends.cpu import CPUQRBackend, CPUSVDBackend

__all__ = [
    "CPUQRBackend",
    "CPUSVDBackend",
]
