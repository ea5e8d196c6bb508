"""
Tests for quartile computations
"""
import math
import pytest
import pandas as pd
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.quartiles import (
    EmptyMatrixError,
    WhiskerDistanceError,
    check_plottable,
    default_plot_type,
    find_outliers,
    group_samples,
    log2_matrix,
    melt_matrix,
    prettify_variable_name,
    quantile_summary,
    replace_missing,
    validate_whisker_distance,
    whisker_bounds,
    wrap_label,
)


class TestDefaultPlotType:
    """Tests for the initial plot type"""

    def test_small_experiment_gets_boxes(self):
        assert default_plot_type(4) == "boxes"

    def test_threshold_is_inclusive(self):
        assert default_plot_type(20) == "boxes"

    def test_large_experiment_gets_lines(self):
        assert default_plot_type(21) == "lines"

    def test_custom_threshold(self):
        assert default_plot_type(40, threshold=50) == "boxes"


class TestWhiskerDistance:
    """Tests for whisker distance validation"""

    @pytest.mark.parametrize("value,expected", [(1.5, 1.5), (0, 0.0), ("2.5", 2.5), (3, 3.0)])
    def test_valid_values(self, value, expected):
        assert validate_whisker_distance(value) == expected

    @pytest.mark.parametrize("value", [-0.1, "abc", None, float('nan'), float('inf'), True, [1.5]])
    def test_invalid_values(self, value):
        with pytest.raises(WhiskerDistanceError):
            validate_whisker_distance(value)

    def test_error_is_value_error(self):
        """Callers catching ValueError also catch whisker errors"""
        with pytest.raises(ValueError):
            validate_whisker_distance(-1)


class TestLabels:
    """Tests for label helpers"""

    def test_prettify_variable_name(self):
        assert prettify_variable_name('cell_type') == 'Cell type'

    def test_prettify_keeps_rest_of_case(self):
        assert prettify_variable_name('RIN') == 'RIN'

    def test_wrap_label_splits_on_spaces(self):
        label = "log2(normalised counts per million)"
        wrapped = wrap_label(label, 15)

        assert "\n" in wrapped
        assert wrapped.replace("\n", " ") == label

    def test_wrap_label_keeps_short_labels(self):
        assert wrap_label("log2(expression)", 15) == "log2(expression)"


class TestGrouping:
    """Tests for sample grouping"""

    def test_missing_values_become_na(self, sample_annotation):
        grouped = group_samples(sample_annotation, 'condition')
        assert grouped.loc['Sample3', 'condition'] == "N/A"

    def test_nan_and_blank_are_missing(self):
        values = replace_missing(pd.Series(['a', np.nan, '', '  ', 'b']))
        assert values.tolist() == ['a', 'N/A', 'N/A', 'N/A', 'b']

    def test_integer_groups_with_gaps_keep_integer_labels(self):
        values = replace_missing(pd.Series([2, 1, np.nan]))
        assert [str(v) for v in values] == ['2', '1', 'N/A']

    def test_fractional_groups_unchanged(self):
        values = replace_missing(pd.Series([0.5, np.nan]))
        assert [str(v) for v in values] == ['0.5', 'N/A']

    def test_first_occurrence_order(self, interleaved_groups):
        _, annotation = interleaved_groups
        grouped = group_samples(annotation, 'group')
        assert list(grouped.index) == ['A', 'C', 'B', 'D']

    def test_within_group_order_preserved(self):
        annotation = pd.DataFrame(
            {'g': ['x', 'y', 'x', 'z', 'y', 'x']},
            index=['s1', 's2', 's3', 's4', 's5', 's6'],
        )
        grouped = group_samples(annotation, 'g')
        assert list(grouped.index) == ['s1', 's3', 's6', 's2', 's5', 's4']

    def test_input_not_modified(self, sample_annotation):
        group_samples(sample_annotation, 'condition')
        assert pd.isna(sample_annotation.loc['Sample3', 'condition'])


class TestMeltMatrix:
    """Tests for the long-form reshape"""

    def test_one_row_per_sample_and_feature(self, sample_count_matrix):
        long_df = melt_matrix(sample_count_matrix)

        n_features, n_samples = sample_count_matrix.shape
        assert len(long_df) == n_features * n_samples
        assert long_df['sample'].notna().all()
        assert long_df['log2_value'].notna().all()

    def test_values_are_log2_plus_one(self, sample_count_matrix):
        long_df = melt_matrix(sample_count_matrix)
        row = long_df[(long_df['sample'] == 'Sample2') & (long_df['feature'] == 'gene_7')].iloc[0]
        assert row['log2_value'] == pytest.approx(math.log2(sample_count_matrix.loc['gene_7', 'Sample2'] + 1))

    def test_sample_order_locked(self):
        """Numeric-looking ids keep the matrix order"""
        matrix = pd.DataFrame(np.ones((3, 3)), columns=['10', '2', '1'])
        long_df = melt_matrix(matrix)
        assert list(long_df['sample'].cat.categories) == ['10', '2', '1']
        assert long_df['sample'].cat.ordered

    @pytest.mark.parametrize("name", ['feature', 'sample', 'log2_value', 'group'])
    def test_sample_ids_matching_column_names(self, name):
        matrix = pd.DataFrame([[1.0, 3.0], [7.0, 15.0], [0.0, 1.0]], columns=[name, 'B'],
                              index=['f1', 'f2', 'f3'])
        annotation = pd.DataFrame({'group': ['x', 'y']}, index=[name, 'B'])

        long_df = melt_matrix(matrix, annotation, 'group')

        assert len(long_df) == 6
        assert list(long_df['sample'].cat.categories) == [name, 'B']
        first = long_df[long_df['sample'] == name]
        assert first['feature'].tolist() == ['f1', 'f2', 'f3']
        assert first['log2_value'].tolist() == [1.0, 3.0, 0.0]
        assert first['group'].unique().tolist() == ['x']
        assert long_df[long_df['sample'] == 'B']['log2_value'].tolist() == [2.0, 4.0, 1.0]

    def test_group_column_added(self, interleaved_groups):
        matrix, annotation = interleaved_groups
        long_df = melt_matrix(matrix, annotation, 'group')

        groups = long_df.drop_duplicates('sample').set_index('sample')['group']
        assert groups['A'] == 'g2'
        assert groups['B'] == 'g1'


class TestQuantileSummary:
    """Tests for the five-number summary"""

    def test_labels_and_order(self, sample_count_matrix):
        summary = quantile_summary(sample_count_matrix)
        assert list(summary.index) == ['0%', '25%', '50%', '75%', '100%']
        assert list(summary.columns) == list(sample_count_matrix.columns)

    def test_known_values(self, outlier_matrix):
        summary = quantile_summary(outlier_matrix)
        assert summary.loc['0%', 'A'] == pytest.approx(1)
        assert summary.loc['25%', 'A'] == pytest.approx(3.25)
        assert summary.loc['50%', 'A'] == pytest.approx(5.5)
        assert summary.loc['75%', 'A'] == pytest.approx(7.75)
        assert summary.loc['100%', 'A'] == pytest.approx(20)

    def test_missing_values_ignored(self):
        matrix = pd.DataFrame({'A': [0.0, 1.0, 3.0, np.nan]})
        summary = quantile_summary(matrix)
        assert summary.loc['100%', 'A'] == pytest.approx(2.0)

    @pytest.mark.parametrize("k", [0, 0.5, 1.5, 3])
    def test_bounds_are_ordered(self, sample_count_matrix, k):
        summary = quantile_summary(sample_count_matrix)
        bounds = whisker_bounds(summary, k)

        assert (bounds['lower'] <= summary.loc['25%']).all()
        assert (summary.loc['25%'] <= summary.loc['50%']).all()
        assert (summary.loc['50%'] <= summary.loc['75%']).all()
        assert (summary.loc['75%'] <= bounds['upper']).all()


class TestOutliers:
    """Tests for IQR outlier detection"""

    def test_single_outlier_beyond_upper_bound(self, outlier_matrix):
        log_values = log2_matrix(outlier_matrix)
        summary = quantile_summary(outlier_matrix)

        outliers = find_outliers(log_values, summary, 1.5)

        assert len(outliers) == 1
        assert outliers.iloc[0]['sample'] == 'A'
        assert outliers.iloc[0]['feature'] == 'feat9'
        assert outliers.iloc[0]['value'] == pytest.approx(20)

    def test_value_inside_bound_not_flagged(self, outlier_matrix):
        log_values = log2_matrix(outlier_matrix)
        outliers = find_outliers(log_values, quantile_summary(outlier_matrix), 1.5)
        assert 'feat8' not in outliers['feature'].tolist()  # 14 < 14.5

    def test_zero_distance_flags_everything_outside_quartiles(self, sample_count_matrix):
        log_values = log2_matrix(sample_count_matrix)
        summary = quantile_summary(sample_count_matrix)

        outliers = find_outliers(log_values, summary, 0)

        expected = set()
        for sample in log_values.columns:
            y = log_values[sample]
            mask = (y < summary.loc['25%', sample]) | (y > summary.loc['75%', sample])
            expected.update((sample, f) for f in y[mask].index)

        assert set(zip(outliers['sample'], outliers['feature'])) == expected

    def test_no_outliers_gives_empty_frame(self, outlier_matrix):
        matrix = outlier_matrix[['B']]
        outliers = find_outliers(log2_matrix(matrix), quantile_summary(matrix), 1.5)

        assert outliers.empty
        assert list(outliers.columns) == ['sample', 'feature', 'value', 'label']

    def test_labeller_used_for_labels(self, outlier_matrix):
        log_values = log2_matrix(outlier_matrix)
        outliers = find_outliers(
            log_values, quantile_summary(outlier_matrix), 1.5,
            labeller=lambda ids: [f"label_{i}" for i in ids]
        )
        assert outliers.iloc[0]['label'] == 'label_feat9'

    def test_labels_default_to_feature_ids(self, outlier_matrix):
        log_values = log2_matrix(outlier_matrix)
        outliers = find_outliers(log_values, quantile_summary(outlier_matrix), 1.5)
        assert outliers.iloc[0]['label'] == 'feat9'


class TestCheckPlottable:
    """Tests for empty matrix detection"""

    def test_no_samples(self, sample_count_matrix):
        with pytest.raises(EmptyMatrixError):
            check_plottable(sample_count_matrix[[]])

    def test_no_features(self, sample_count_matrix):
        with pytest.raises(EmptyMatrixError):
            check_plottable(sample_count_matrix.iloc[0:0])

    def test_plottable_matrix_passes(self, sample_count_matrix):
        check_plottable(sample_count_matrix)
