"""
Tests for the Result envelope and the Timer.
"""

import dataclasses

import numpy
import pytest
import scipy

import pydesignmatrix
from pydesignmatrix.core.compute.timing import Timer
from pydesignmatrix.core.result import Result


class TestResult:

    def test_fields(self):
        result = Result(
            params={'beta': 1.0},
            info={'method': 'qr'},
            timing=None,
            backend_name='cpu_qr',
        )
        assert result.params == {'beta': 1.0}
        assert result.info['method'] == 'qr'
        assert result.timing is None
        assert result.warnings == ()

    def test_frozen(self):
        result = Result(params=None, info={}, timing=None, backend_name='x')
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.backend_name = 'y'

    def test_has_warning(self):
        result = Result(
            params=None, info={}, timing=None, backend_name='x',
            warnings=('essentially perfect fit: residual variance is zero',),
        )
        assert result.has_warning('perfect fit')
        assert not result.has_warning('collinear')

    def test_default_provenance(self):
        result = Result(params=None, info={}, timing=None, backend_name='x')
        assert result.provenance == {
            'pydesignmatrix_version': pydesignmatrix.__version__,
            'numpy_version': numpy.__version__,
            'scipy_version': scipy.__version__,
        }


class TestTimer:

    def test_sections_and_total(self):
        with Timer() as timer:
            with timer.section('solve'):
                pass
            with timer.section('solve'):
                pass
        result = timer.result()
        assert set(result) == {'total_seconds', 'solve'}
        assert result['total_seconds'] >= result['solve'] >= 0.0

    def test_result_inside_block(self):
        with Timer() as timer:
            with pytest.raises(RuntimeError, match="completed"):
                timer.result()

    def test_exception_propagates(self):
        timer = Timer()
        with pytest.raises(ZeroDivisionError):
            with timer:
                1 / 0
        assert 'total_seconds' in timer.result()
