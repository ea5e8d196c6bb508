"""
Tests for file handler utilities
"""
import pytest
import pandas as pd
import numpy as np
from pathlib import Path
import sys

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.file_handlers import (
    align_annotation,
    build_experiment_list,
    categorical_columns,
    read_assay_matrix,
    read_sample_annotation,
)


class TestAssayMatrix:
    """Tests for assay matrix reading"""

    def test_csv_shape(self, temp_matrix_csv):
        df = read_assay_matrix(temp_matrix_csv)
        assert df.shape == (100, 4)

    def test_columns_and_index(self, temp_matrix_csv):
        df = read_assay_matrix(temp_matrix_csv)
        assert list(df.columns) == ['Sample1', 'Sample2', 'Sample3', 'Sample4']
        assert all(idx.startswith('gene_') for idx in df.index)

    def test_tab_separated(self, tmp_path, sample_count_matrix):
        path = tmp_path / "counts.tsv"
        sample_count_matrix.to_csv(path, sep='\t')

        df = read_assay_matrix(path)
        assert df.shape == (100, 4)
        assert df.loc['gene_3', 'Sample2'] == sample_count_matrix.loc['gene_3', 'Sample2']

    def test_non_numeric_rejected(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("id,S1,S2\ng1,1,abc\ng2,2,3\n")

        with pytest.raises(ValueError, match="Non-numeric"):
            read_assay_matrix(path)


class TestSampleAnnotation:
    """Tests for annotation reading"""

    def test_sample_column_detected(self, temp_annotation_csv):
        df = read_sample_annotation(temp_annotation_csv)
        assert list(df.index) == ['Sample3', 'Sample1', 'Sample4', 'Sample2']
        assert 'SampleID' not in df.columns

    def test_explicit_sample_column(self, tmp_path):
        path = tmp_path / "annotation.csv"
        path.write_text("run,condition\nR1,a\nR2,b\n")

        df = read_sample_annotation(path, sample_col='run')
        assert list(df.index) == ['R1', 'R2']

    def test_missing_sample_column(self, tmp_path):
        path = tmp_path / "annotation.csv"
        path.write_text("condition,batch\na,1\nb,2\n")

        with pytest.raises(ValueError, match="No sample column"):
            read_sample_annotation(path)


class TestExperimentList:
    """Tests for building an experiment list from uploads"""

    def test_annotation_aligned_to_matrix(self, temp_matrix_csv, temp_annotation_csv):
        matrix = read_assay_matrix(temp_matrix_csv)
        annotation = read_sample_annotation(temp_annotation_csv)

        eselist = build_experiment_list(matrix, annotation, assay_name='counts', measure='counts')
        experiment = eselist.first()

        assert experiment.samples == list(matrix.columns)
        assert experiment.measure('counts') == 'counts'

    def test_group_vars_detected(self, temp_matrix_csv, temp_annotation_csv):
        matrix = read_assay_matrix(temp_matrix_csv)
        annotation = read_sample_annotation(temp_annotation_csv)

        eselist = build_experiment_list(matrix, annotation)
        assert eselist.group_vars == ['condition', 'batch']
        assert eselist.default_groupvar == 'condition'

    def test_without_annotation(self, sample_count_matrix):
        eselist = build_experiment_list(sample_count_matrix)
        assert eselist.group_vars == []
        assert eselist.first().n_samples == 4

    def test_sample_mismatch(self, sample_count_matrix, sample_annotation):
        with pytest.raises(ValueError, match="mismatch"):
            align_annotation(sample_count_matrix, sample_annotation.iloc[:2])

    def test_feature_labels(self, sample_count_matrix):
        eselist = build_experiment_list(sample_count_matrix, feature_labels={'gene_1': 'ACTB'})
        assert eselist.first().id_to_label(['gene_1', 'gene_2']) == ['ACTB', 'gene_2']


class TestCategoricalColumns:
    """Tests for grouping variable detection"""

    def test_unique_per_sample_excluded(self):
        annotation = pd.DataFrame({
            'id_like': ['a', 'b', 'c', 'd'],
            'constant': ['x'] * 4,
            'group': ['x', 'x', 'y', np.nan],
        })
        assert categorical_columns(annotation) == ['group']
