"""
Tests for ModelFrame construction and access.
"""

import dataclasses

import numpy as np
import pytest

from pydesignmatrix.core.exceptions import DimensionMismatchError, ValidationError
from pydesignmatrix.core.frame import ModelFrame, Observation
from pydesignmatrix.design.matrix import build_design_matrix
from pydesignmatrix.design.terms import Factor


# ═══════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════


class TestFromColumns:

    def test_numeric_and_labels(self):
        frame = ModelFrame.from_columns(Type=['a', 'b', 'a'], Weight=[1, 2, 3])
        assert frame.keys() == ('Type', 'Weight')
        assert frame.n_observations == 3
        assert len(frame) == 3
        assert frame['Weight'].dtype == np.float64
        assert frame.is_categorical('Type')
        assert not frame.is_categorical('Weight')

    def test_mapping_and_keywords_merge(self):
        frame = ModelFrame.from_columns({'a': [1, 2]}, b=[3, 4])
        assert frame.keys() == ('a', 'b')

    def test_name_given_twice(self):
        with pytest.raises(ValidationError, match="given twice"):
            ModelFrame.from_columns({'a': [1, 2]}, a=[3, 4])

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatchError) as excinfo:
            ModelFrame.from_columns(Type=['a', 'b', 'a'], Weight=[1.0, 2.0])
        assert excinfo.value.lengths == {'Type': 3, 'Weight': 2}

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="at least one variable"):
            ModelFrame.from_columns()

    def test_booleans_are_labels(self):
        frame = ModelFrame.from_columns(flag=[True, False])
        assert frame.is_categorical('flag')
        assert frame['flag'].tolist() == ['True', 'False']

    def test_columns_read_only(self):
        frame = ModelFrame.from_columns(x=[1.0, 2.0])
        with pytest.raises(ValueError):
            frame['x'][0] = 5.0

    def test_frozen(self):
        frame = ModelFrame.from_columns(x=[1.0, 2.0])
        with pytest.raises(dataclasses.FrozenInstanceError):
            frame._order = ()


class TestFromObservations:

    def test_observation_records(self):
        rows = [
            Observation(response=4.75, predictors={'Type': 'Control', 'Weight': 67.2}),
            Observation(response=7.00, predictors={'Type': 'Mutant', 'Weight': 47.6}),
        ]
        frame = ModelFrame.from_observations(rows, response='Size')
        assert set(frame.keys()) == {'Size', 'Type', 'Weight'}
        np.testing.assert_array_equal(frame['Size'], [4.75, 7.00])
        assert frame['Type'].tolist() == ['Control', 'Mutant']

    def test_mapping_records(self):
        frame = ModelFrame.from_observations([{'x': 1, 'g': 'a'}, {'x': 2, 'g': 'b'}])
        assert frame['x'].tolist() == [1.0, 2.0]

    def test_inconsistent_records(self):
        with pytest.raises(ValidationError, match=r"observations\[1\]"):
            ModelFrame.from_observations([{'x': 1}, {'z': 2}])

    def test_empty(self):
        with pytest.raises(ValidationError, match="at least one observation"):
            ModelFrame.from_observations([])

    def test_response_name_clash(self):
        with pytest.raises(ValidationError, match="clashes"):
            ModelFrame.from_observations([Observation(1.0, {'y': 2.0})])


class TestFromDataFrame:

    def test_categorical_order_kept(self):
        pd = pytest.importorskip("pandas")
        df = pd.DataFrame({
            'Type': pd.Categorical(['Mutant', 'Control'], categories=['Mutant', 'Control']),
            'Weight': [1.0, 2.0],
            'Lab': ['A', 'B'],
        })
        frame = ModelFrame.from_dataframe(df)
        assert frame.declared_levels('Type') == ('Mutant', 'Control')
        assert frame.declared_levels('Lab') is None
        assert frame.is_categorical('Lab')
        assert frame['Weight'].dtype == np.float64

    def test_from_file_csv(self, tmp_path):
        pytest.importorskip("pandas")
        path = tmp_path / "mice.csv"
        path.write_text("Type,Weight\nControl,67.2\nMutant,47.6\n")
        frame = ModelFrame.from_file(path)
        assert frame.keys() == ('Type', 'Weight')
        assert frame.metadata['source_path'] == str(path)

    def test_numeric_categories_formatted_like_labels(self):
        pd = pytest.importorskip("pandas")
        df = pd.DataFrame({'dose': pd.Categorical([2.0, 0.5, 1.0], categories=[2.0, 1.0, 0.5])})
        frame = ModelFrame.from_dataframe(df)
        assert frame.declared_levels('dose') == ('2', '1', '0.5')
        assert frame['dose'].tolist() == ['2', '0.5', '1']

    def test_source_path_set_at_construction(self):
        pd = pytest.importorskip("pandas")
        frame = ModelFrame.from_dataframe(pd.DataFrame({'x': [1.0]}), source_path='mice.csv')
        assert frame.metadata['source_path'] == 'mice.csv'
        assert 'source_path' not in ModelFrame.from_dataframe(pd.DataFrame({'x': [1.0]})).metadata

    def test_from_file_unknown_suffix(self, tmp_path):
        pytest.importorskip("pandas")
        with pytest.raises(ValidationError, match="Unknown file format"):
            ModelFrame.from_file(tmp_path / "mice.xlsx")

    def test_round_trip_to_dataframe(self, weight_genotype_frame):
        pytest.importorskip("pandas")
        df = weight_genotype_frame.to_dataframe()
        assert list(df.columns) == ['Type', 'Weight', 'Size']
        assert len(df) == 8


# ═══════════════════════════════════════════════════════════════════════
# Access
# ═══════════════════════════════════════════════════════════════════════


class TestAccess:

    def test_unknown_variable_lists_available(self):
        frame = ModelFrame.from_columns(x=[1.0])
        with pytest.raises(KeyError, match="Available"):
            frame['z']

    def test_contains(self):
        frame = ModelFrame.from_columns(x=[1.0])
        assert 'x' in frame
        assert 'z' not in frame

    def test_metadata_is_copy(self):
        frame = ModelFrame.from_columns(x=[1.0])
        frame.metadata['source'] = 'changed'
        assert frame.metadata['source'] == 'columns'


class TestCellMeans:

    def test_two_factor_cells(self, batch_effect_frame):
        means = batch_effect_frame.cell_means('Gene_Expression', ['Lab', 'Type'])
        assert list(means) == [
            ('A', 'Control'), ('A', 'Mutant'), ('B', 'Control'), ('B', 'Mutant'),
        ]
        np.testing.assert_allclose(
            list(means.values()), [5.9 / 3, 10.6 / 3, 4.0 / 3, 6.9 / 3]
        )

    def test_single_factor(self, weight_genotype_frame):
        means = weight_genotype_frame.cell_means('Size', 'Type')
        assert means[('Control',)] == pytest.approx(7.1875)
        assert means[('Mutant',)] == pytest.approx(9.25)

    def test_empty_cells_omitted(self):
        frame = ModelFrame.from_columns(a=['x', 'x', 'y'], b=['p', 'q', 'p'], v=[1.0, 2.0, 3.0])
        assert ('y', 'q') not in frame.cell_means('v', ['a', 'b'])

    def test_categorical_response_rejected(self, batch_effect_frame):
        with pytest.raises(ValidationError, match="numeric response"):
            batch_effect_frame.cell_means('Lab', 'Type')

    def test_numeric_factor_keys_match_design_levels(self):
        frame = ModelFrame.from_columns(dose=[1.0, 1.0, 2.0, 2.0], y=[1.0, 2.0, 3.0, 4.0])
        means = frame.cell_means('y', 'dose')
        assert means == {('1',): 1.5, ('2',): 3.5}
        dm = build_design_matrix(frame, [Factor('dose')])
        assert [key[0] for key in means] == list(dm.factor_levels['dose'])
