"""
End-to-end tests for the worked examples.
"""

import numpy as np
import pytest

from pydesignmatrix.datasets import batch_effect, weight_genotype
from pydesignmatrix.demo import PipelineOutput, main, run_batch_effect, run_weight_genotype


class TestDatasets:

    def test_weight_genotype(self):
        frame = weight_genotype()
        assert frame.keys() == ('Type', 'Weight', 'Size')
        assert frame.n_observations == 8
        assert frame['Type'].tolist() == ['Control'] * 4 + ['Mutant'] * 4

    def test_batch_effect(self):
        frame = batch_effect()
        assert frame.keys() == ('Lab', 'Type', 'Gene_Expression')
        assert frame.n_observations == 12


class TestPipelines:

    def test_weight_genotype(self):
        output = run_weight_genotype()
        assert isinstance(output, PipelineOutput)
        assert output.axes is None
        assert output.design_matrix.column_names == ('(Intercept)', 'TypeMutant', 'Weight')
        assert output.solution.df_residual == 5

    def test_batch_effect(self):
        output = run_batch_effect(backend='cpu_svd')
        assert output.solution.backend_name == 'cpu_svd'
        np.testing.assert_allclose(
            output.solution.coefficients, [127 / 60, -14 / 15, 19 / 15], rtol=1e-9
        )

    def test_weight_genotype_plot(self):
        pytest.importorskip("matplotlib")
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        output = run_weight_genotype(plot=True)
        assert len(output.axes.collections) == 2
        assert len(output.axes.lines) == 2
        plt.close('all')

    def test_batch_effect_plot(self):
        pytest.importorskip("matplotlib")
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        output = run_batch_effect(plot=True)
        # two scatter groups and one mean-segment collection per Type
        assert len(output.axes.collections) == 4
        plt.close('all')


class TestMain:

    def test_prints_both_examples(self, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        assert '### weight_genotype' in out
        assert '### batch_effect' in out
        assert 'lm(formula = Size ~ Type + Weight)' in out
        assert 'LabB' in out

    def test_saves_plots(self, tmp_path, capsys):
        pytest.importorskip("matplotlib")
        import matplotlib
        matplotlib.use("Agg")

        assert main(['--plot', str(tmp_path / 'figs'), '--backend', 'cpu_qr']) == 0
        assert (tmp_path / 'figs' / 'weight_genotype.png').exists()
        assert (tmp_path / 'figs' / 'batch_effect.png').exists()

    def test_rejects_unknown_backend(self):
        with pytest.raises(SystemExit):
            main(['--backend', 'gpu'])
