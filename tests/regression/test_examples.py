"""
Closed-form checks on the two example datasets.

Size ~ Type + Weight has the pooled within-group slope as its Weight
coefficient; Gene_Expression ~ Lab + Type is a balanced 2x2 layout, so
each factor coefficient is a difference of marginal means.
"""

import numpy as np
import pytest

from pydesignmatrix import lm
from pydesignmatrix.core.compute.tolerances import CPU_FP64


# Within-group cross products about the group means
_SXY = 157.5 + 159.6
_SXX = 2838.08 + 1991.36
_SLOPE = _SXY / _SXX


class TestWeightGenotype:

    @pytest.fixture
    def result(self, weight_genotype_frame):
        return lm('Size ~ Type + Weight', weight_genotype_frame)

    def test_weight_is_pooled_slope(self, result):
        assert result.coef['Weight'] == pytest.approx(_SLOPE, rel=1e-10)

    def test_intercept_is_control_line(self, result):
        assert result.coef['(Intercept)'] == pytest.approx(7.1875 - _SLOPE * 106.4, rel=1e-9)

    def test_type_shift(self, result):
        assert result.coef['TypeMutant'] == pytest.approx(2.0625 + _SLOPE * 25.2, rel=1e-10)

    def test_matches_lstsq(self, result, weight_genotype_frame):
        X = result.design.X
        expected = np.linalg.lstsq(X, weight_genotype_frame['Size'], rcond=None)[0]
        np.testing.assert_allclose(
            result.coefficients, expected, rtol=CPU_FP64.rtol, atol=CPU_FP64.atol
        )

    def test_degrees_of_freedom(self, result):
        assert result.df_residual == 5
        assert result.n_observations == 8

    def test_residual_identity(self, result, weight_genotype_frame):
        np.testing.assert_allclose(
            result.fitted_values + result.residuals, weight_genotype_frame['Size'], atol=1e-9
        )

    def test_mutant_line_is_shifted(self, result):
        control = result.predict({'Type': ['Control'], 'Weight': [0.0]})[0]
        mutant = result.predict({'Type': ['Mutant'], 'Weight': [0.0]})[0]
        assert mutant - control == pytest.approx(result.coef['TypeMutant'])


class TestBatchEffect:

    @pytest.fixture
    def result(self, batch_effect_frame):
        return lm('Gene_Expression ~ Lab + Type', batch_effect_frame)

    def test_coefficients(self, result):
        np.testing.assert_allclose(
            result.coefficients, [127 / 60, -14 / 15, 19 / 15], rtol=1e-10
        )

    def test_lab_is_marginal_difference(self, result, batch_effect_frame):
        y = batch_effect_frame['Gene_Expression']
        lab = batch_effect_frame['Lab']
        expected = y[lab == 'B'].mean() - y[lab == 'A'].mean()
        assert result.coef['LabB'] == pytest.approx(expected)

    def test_degrees_of_freedom(self, result):
        assert result.df_residual == 9
        assert result.rank == 3
        assert result.df_model == 2

    def test_standard_errors(self, result):
        X = result.design.X
        expected = np.sqrt(np.diag(result.sigma_squared * np.linalg.inv(X.T @ X)))
        np.testing.assert_allclose(result.standard_errors, expected, rtol=1e-9)

    def test_balanced_factor_ses_equal(self, result):
        se = result.standard_errors
        assert se[1] == pytest.approx(se[2])

    def test_residual_identity(self, result, batch_effect_frame):
        np.testing.assert_allclose(
            result.fitted_values + result.residuals,
            batch_effect_frame['Gene_Expression'],
            atol=1e-9,
        )

    def test_cell_fitted_values_additive(self, result):
        # Fitted values of an additive model satisfy AB - AA = BB - BA
        fitted = {
            key: result.predict({'Lab': [key[0]], 'Type': [key[1]]})[0]
            for key in [('A', 'Control'), ('A', 'Mutant'), ('B', 'Control'), ('B', 'Mutant')]
        }
        assert (fitted[('A', 'Mutant')] - fitted[('A', 'Control')]) == pytest.approx(
            fitted[('B', 'Mutant')] - fitted[('B', 'Control')]
        )
