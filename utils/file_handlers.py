"""
File handling utilities for ExprQuartiles
"""
import io
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd
from loguru import logger

from .assay import AssayExperiment, ExperimentList

SAMPLE_COLUMN_CANDIDATES = ['SampleID', 'sample', 'Sample', 'sample_id', 'name']


def _read_text(source) -> str:
    """Read a path or a Streamlit uploaded file into text"""
    if isinstance(source, (str, Path)):
        return Path(source).read_text()
    data = source.getvalue()
    return data.decode('utf-8') if isinstance(data, bytes) else data


def _detect_separator(text: str) -> str:
    first_line = text.split('\n', 1)[0]
    return '\t' if '\t' in first_line else ','


def read_assay_matrix(source: Union[str, Path, object]) -> pd.DataFrame:
    """
    Read an assay matrix from CSV/TSV

    Args:
        source: Path or uploaded file; first column holds feature ids

    Returns:
        DataFrame (features x samples) of floats
    """
    text = _read_text(source)
    df = pd.read_csv(io.StringIO(text), sep=_detect_separator(text), index_col=0)
    df.columns = df.columns.astype(str).str.strip()
    df.index = df.index.astype(str)

    non_numeric = [c for c in df.columns if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        raise ValueError(f"Non-numeric assay columns: {non_numeric[:5]}")

    logger.info(f"Loaded assay matrix: {df.shape[0]} features x {df.shape[1]} samples")
    return df.astype(float)


def read_sample_annotation(
    source: Union[str, Path, object],
    sample_col: Optional[str] = None
) -> pd.DataFrame:
    """
    Read sample annotation from CSV/TSV

    Args:
        source: Path or uploaded file
        sample_col: Column holding sample ids (inferred when omitted)

    Returns:
        DataFrame indexed by sample id
    """
    text = _read_text(source)
    df = pd.read_csv(io.StringIO(text), sep=_detect_separator(text))
    df.columns = df.columns.str.strip()

    if sample_col is None:
        matches = [c for c in SAMPLE_COLUMN_CANDIDATES if c in df.columns]
        if not matches:
            raise ValueError(
                f"No sample column found in annotation. Available columns: {list(df.columns)}"
            )
        sample_col = matches[0]
    elif sample_col not in df.columns:
        raise ValueError(f"Column '{sample_col}' not found in annotation")

    df[sample_col] = df[sample_col].astype(str).str.strip()
    df = df.set_index(sample_col)

    logger.info(f"Loaded sample annotation: {len(df)} samples, {df.shape[1]} variables")
    return df


def align_annotation(matrix: pd.DataFrame, annotation: pd.DataFrame) -> pd.DataFrame:
    """
    Reorder annotation rows to match matrix columns

    Raises:
        ValueError: if samples differ between the two tables
    """
    matrix_samples = set(matrix.columns)
    annotation_samples = set(annotation.index)

    in_matrix_only = sorted(matrix_samples - annotation_samples)
    if in_matrix_only:
        msg = "Sample name mismatch detected:\n"
        msg += f"- In assay matrix but not annotation: {in_matrix_only[:5]}\n"
        raise ValueError(msg)

    return annotation.loc[list(matrix.columns)]


def categorical_columns(annotation: pd.DataFrame, max_levels: int = 20) -> List[str]:
    """Annotation columns usable as grouping variables"""
    group_vars = []
    for col in annotation.columns:
        n_levels = annotation[col].nunique(dropna=True)
        if 1 < n_levels <= max_levels and n_levels < len(annotation):
            group_vars.append(col)
    return group_vars


def build_experiment_list(
    matrix: pd.DataFrame,
    annotation: Optional[pd.DataFrame] = None,
    assay_name: str = 'assay',
    measure: str = 'expression',
    experiment_name: str = 'Uploaded experiment',
    feature_labels: Optional[Dict[str, str]] = None
) -> ExperimentList:
    """
    Wrap uploaded tables as a single-experiment ExperimentList

    Without annotation every sample gets an empty annotation row, so no
    grouping variables are offered.
    """
    if annotation is None:
        annotation = pd.DataFrame(index=list(matrix.columns))
    else:
        annotation = align_annotation(matrix, annotation)

    row_data = None
    if feature_labels:
        row_data = pd.DataFrame({'label': pd.Series(feature_labels)})

    experiment = AssayExperiment(
        assays={assay_name: matrix},
        col_data=annotation,
        row_data=row_data,
        label_field='label' if row_data is not None else None,
        assay_measures={assay_name: measure},
    )

    group_vars = categorical_columns(annotation)
    logger.info(f"Built experiment '{experiment_name}' with group variables: {group_vars}")

    return ExperimentList(
        experiments={experiment_name: experiment},
        group_vars=group_vars,
        default_groupvar=group_vars[0] if group_vars else None,
        title=experiment_name,
    )
