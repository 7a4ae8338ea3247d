"""
Design matrix construction for additive linear models.

Public API:
    build_design_matrix(data, terms, level_order=...) -> DesignMatrix
    model_matrix: alias of build_design_matrix
    Factor, Continuous: explicit term specifications
    parse_formula('y ~ a + b') -> ('y', ['a', 'b'])

Example:
    >>> from pydesignmatrix.design import build_design_matrix, Factor
    >>> dm = build_design_matrix(frame, [Factor('Type'), 'Weight'])
    >>> print(dm)
"""

from pydesignmatrix.design._encoding import encode_treatment
from pydesignmatrix.design.matrix import DesignMatrix, build_design_matrix, model_matrix
from pydesignmatrix.design.terms import (
    INTERCEPT_NAME,
    LEVEL_ORDERS,
    Continuous,
    Factor,
    parse_formula,
    resolve_levels,
)

__all__ = [
    "DesignMatrix",
    "build_design_matrix",
    "model_matrix",
    "Factor",
    "Continuous",
    "parse_formula",
    "resolve_levels",
    "encode_treatment",
    "INTERCEPT_NAME",
    "LEVEL_ORDERS",
]
