"""
Tests for the pydesignmatrix exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyDesignMatrixError)
    - Diagnostic attributes on DimensionMismatchError, InvalidFactorError,
      UnderdeterminedModelError, CollinearPredictorsError
    - Default attribute values
"""

import pytest

from pydesignmatrix.core.exceptions import (
    CollinearPredictorsError,
    DimensionError,
    DimensionMismatchError,
    InvalidFactorError,
    NumericalError,
    PyDesignMatrixError,
    UnderdeterminedModelError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyDesignMatrixError."""

    def test_validation_error_is_base_error(self):
        with pytest.raises(PyDesignMatrixError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_dimension_mismatch_is_dimension_error(self):
        with pytest.raises(DimensionError):
            raise DimensionMismatchError("lengths differ")

    def test_invalid_factor_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise InvalidFactorError("one level")

    def test_underdetermined_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise UnderdeterminedModelError("n <= p")

    def test_collinear_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise CollinearPredictorsError("rank deficient")

    def test_numerical_errors_are_not_validation_errors(self):
        assert not isinstance(CollinearPredictorsError("x"), ValidationError)
        assert not isinstance(UnderdeterminedModelError("x"), ValidationError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestDimensionMismatchError:

    def test_lengths_stored(self):
        err = DimensionMismatchError("bad", lengths={'x': 3, 'y': 4})
        assert err.lengths == {'x': 3, 'y': 4}

    def test_default_lengths_empty(self):
        assert DimensionMismatchError("bad").lengths == {}

    def test_message(self):
        assert str(DimensionMismatchError("x=3, y=4")) == "x=3, y=4"


class TestInvalidFactorError:

    def test_attributes(self):
        err = InvalidFactorError("bad", factor='Type', levels=('Control',))
        assert err.factor == 'Type'
        assert err.levels == ('Control',)

    def test_defaults_none(self):
        err = InvalidFactorError("bad")
        assert err.factor is None
        assert err.levels is None


class TestUnderdeterminedModelError:

    def test_attributes(self):
        err = UnderdeterminedModelError("bad", n_observations=3, n_columns=3)
        assert err.n_observations == 3
        assert err.n_columns == 3

    def test_defaults_none(self):
        err = UnderdeterminedModelError("bad")
        assert err.n_observations is None
        assert err.n_columns is None


class TestCollinearPredictorsError:

    def test_attributes(self):
        err = CollinearPredictorsError(
            "bad", rank=2, expected_rank=3, aliased=('TypeMutant',)
        )
        assert err.rank == 2
        assert err.expected_rank == 3
        assert err.aliased == ('TypeMutant',)

    def test_default_aliased_empty(self):
        err = CollinearPredictorsError("bad")
        assert err.rank is None
        assert err.aliased == ()
