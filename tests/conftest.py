"""
Pytest configuration and fixtures for ExprQuartiles tests
"""
import pytest
import pandas as pd
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def sample_count_matrix():
    """Create a sample count matrix for testing"""
    np.random.seed(42)
    data = {
        'Sample1': np.random.randint(0, 1000, 100),
        'Sample2': np.random.randint(0, 1000, 100),
        'Sample3': np.random.randint(0, 1000, 100),
        'Sample4': np.random.randint(0, 1000, 100),
    }
    index = [f'gene_{i}' for i in range(100)]
    return pd.DataFrame(data, index=index)


@pytest.fixture
def sample_annotation():
    """Sample annotation indexed by sample id, one missing condition"""
    return pd.DataFrame({
        'condition': ['control', 'treatment', None, 'treatment'],
        'batch': ['1', '1', '2', '2'],
    }, index=['Sample1', 'Sample2', 'Sample3', 'Sample4'])


@pytest.fixture
def interleaved_groups():
    """Samples A-D alternating between two groups"""
    matrix = pd.DataFrame(
        np.arange(1, 41).reshape(10, 4),
        columns=['A', 'B', 'C', 'D'],
        index=[f'f{i}' for i in range(10)],
    )
    annotation = pd.DataFrame({'group': ['g2', 'g1', 'g2', 'g1']}, index=['A', 'B', 'C', 'D'])
    return matrix, annotation


@pytest.fixture
def outlier_matrix():
    """
    Raw values whose log2(x + 1) are known exactly

    Sample 'A' on the log scale is 1..8, 14, 20: Q1 = 3.25, Q3 = 7.75,
    so with k = 1.5 the upper bound is 14.5 and only 20 is an outlier.
    Sample 'B' is 1..10 with no outliers.
    """
    log_a = [1, 2, 3, 4, 5, 6, 7, 8, 14, 20]
    log_b = list(range(1, 11))
    features = [f'feat{i}' for i in range(10)]
    return pd.DataFrame({
        'A': [2.0 ** v - 1 for v in log_a],
        'B': [2.0 ** v - 1 for v in log_b],
    }, index=features)


@pytest.fixture
def demo_experiments():
    """Synthetic experiment list with 12 samples and grouping variables"""
    from utils.assay import make_demo_experiments
    return make_demo_experiments(n_samples=12, n_features=200)


@pytest.fixture
def ungrouped_experiments(sample_count_matrix):
    """Experiment list with no grouping variables"""
    from utils.assay import AssayExperiment, ExperimentList
    experiment = AssayExperiment(
        assays={'counts': sample_count_matrix},
        col_data=pd.DataFrame(index=list(sample_count_matrix.columns)),
        assay_measures={'counts': 'read counts'},
    )
    return ExperimentList(experiments={'plain': experiment})


@pytest.fixture
def temp_matrix_csv(tmp_path, sample_count_matrix):
    """Count matrix written as CSV"""
    path = tmp_path / "counts.csv"
    sample_count_matrix.rename_axis('gene_id').to_csv(path)
    return path


@pytest.fixture
def temp_annotation_csv(tmp_path):
    """Annotation CSV with samples in a different order to the matrix"""
    path = tmp_path / "annotation.csv"
    path.write_text(
        "SampleID,condition,batch\n"
        "Sample3,treatment,2\n"
        "Sample1,control,1\n"
        "Sample4,treatment,2\n"
        "Sample2,control,1\n"
    )
    return path
