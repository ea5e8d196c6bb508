"""
Quartile computations for ExprQuartiles
Sample ordering, long-form reshaping, quantile summaries and IQR outliers
"""
import math
import textwrap
from numbers import Real
from typing import Callable, Iterable, List, Optional

import numpy as np
import pandas as pd

QUANTILE_PROBS = [0.0, 0.25, 0.5, 0.75, 1.0]
QUANTILE_LABELS = ['0%', '25%', '50%', '75%', '100%']

MISSING_GROUP_LABEL = "N/A"


class WhiskerDistanceError(ValueError):
    """Whisker distance is not a non-negative real number"""


class EmptyMatrixError(ValueError):
    """Matrix has no samples or no features to plot"""


def default_plot_type(n_samples: int, threshold: int = 20) -> str:
    """
    Choose the initial plot type for an experiment

    Boxplots stay readable for small sample numbers; past the threshold the
    line-based quartile plot is the default.
    """
    return "boxes" if n_samples <= threshold else "lines"


def validate_whisker_distance(value) -> float:
    """
    Check a whisker distance supplied from the UI

    Args:
        value: Raw value (number or numeric string)

    Returns:
        The distance as a float

    Raises:
        WhiskerDistanceError: if the value is not a finite number >= 0
    """
    if isinstance(value, bool):
        raise WhiskerDistanceError(f"Whisker distance must be a number, got {value!r}")

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise WhiskerDistanceError(f"Whisker distance must be a number, got {value!r}") from None
    elif not isinstance(value, Real):
        raise WhiskerDistanceError(f"Whisker distance must be a number, got {value!r}")

    value = float(value)
    if not math.isfinite(value):
        raise WhiskerDistanceError(f"Whisker distance must be finite, got {value}")
    if value < 0:
        raise WhiskerDistanceError(f"Whisker distance must be >= 0, got {value}")

    return value


def check_plottable(matrix: pd.DataFrame):
    """Raise EmptyMatrixError if there is nothing to draw"""
    if matrix is None or matrix.shape[1] == 0:
        raise EmptyMatrixError("No samples selected")
    if matrix.shape[0] == 0:
        raise EmptyMatrixError("Matrix has no features")


def prettify_variable_name(name: str) -> str:
    """'cell_type' -> 'Cell type'"""
    pretty = str(name).replace('_', ' ')
    return pretty[:1].upper() + pretty[1:]


def wrap_label(text: str, width: int = 15) -> str:
    """Split a label into lines of roughly fixed width, breaking on spaces"""
    lines = textwrap.wrap(text, width=width, break_long_words=False, break_on_hyphens=False)
    return "\n".join(lines) if lines else text


def replace_missing(values: pd.Series, label: str = MISSING_GROUP_LABEL) -> pd.Series:
    """Replace missing values (NaN, None, empty strings) with a literal label"""
    # Integer columns with gaps arrive as float; keep their labels as '2', not '2.0'
    if pd.api.types.is_float_dtype(values):
        present = values.dropna()
        if len(present) and np.isfinite(present).all() and (present == present.round()).all():
            values = values.astype('Int64')
    values = values.astype(object)
    missing = values.isna() | (values.astype(str).str.strip() == '')
    return values.where(~missing, label)


def group_samples(annotation: pd.DataFrame, group_col: str) -> pd.DataFrame:
    """
    Order samples so that members of each group are adjacent

    Groups appear in order of first occurrence and samples keep their
    original relative order within a group. Missing group values become
    "N/A".

    Args:
        annotation: Sample annotation, one row per sample
        group_col: Column to group by

    Returns:
        Reordered copy of the annotation
    """
    annotation = annotation.copy()
    annotation[group_col] = replace_missing(annotation[group_col])

    levels = pd.unique(annotation[group_col])
    codes = pd.Categorical(annotation[group_col], categories=levels).codes
    order = np.argsort(codes, kind='stable')

    return annotation.iloc[order]


def log2_matrix(matrix: pd.DataFrame) -> pd.DataFrame:
    """log2(x + 1), keeping labels"""
    return np.log2(matrix.astype(float) + 1)


def melt_matrix(
    matrix: pd.DataFrame,
    annotation: Optional[pd.DataFrame] = None,
    group_col: Optional[str] = None
) -> pd.DataFrame:
    """
    Reshape a features x samples matrix to long form for plotting

    Args:
        matrix: Assay matrix (features x samples)
        annotation: Sample annotation indexed by sample id
        group_col: Optional grouping column in the annotation

    Returns:
        DataFrame with 'sample', 'feature', 'log2_value' (and 'group'),
        one row per sample/feature pair. 'sample' is categorical with the
        matrix column order as its categories.
    """
    samples = [str(s) for s in matrix.columns]
    values = log2_matrix(matrix)
    n_features = values.shape[0]

    # Column-major flattening: all features of the first sample, then the next
    long_df = pd.DataFrame({
        'sample': np.repeat(samples, n_features),
        'feature': np.tile(values.index.to_numpy(), len(samples)),
        'log2_value': values.to_numpy().ravel(order='F'),
    })

    if group_col:
        groups = pd.Series(annotation[group_col].values, index=annotation.index.astype(str))
        long_df['group'] = long_df['sample'].map(groups)

    # Lock the axis order so sample ids are never re-sorted or read as numbers
    long_df['sample'] = pd.Categorical(long_df['sample'], categories=samples, ordered=True)

    return long_df


def quantile_summary(matrix: pd.DataFrame) -> pd.DataFrame:
    """
    Five-number summary of each sample after log2(x + 1)

    Returns:
        DataFrame indexed by '0%', '25%', '50%', '75%', '100%' with one
        column per sample, in matrix column order
    """
    summary = log2_matrix(matrix).quantile(QUANTILE_PROBS, interpolation='linear')
    summary.index = QUANTILE_LABELS
    return summary


def whisker_bounds(summary: pd.DataFrame, whisker_distance: float) -> pd.DataFrame:
    """
    Per-sample outlier bounds

    Returns:
        DataFrame indexed by sample with 'lower' and 'upper' columns
    """
    iqr = summary.loc['75%'] - summary.loc['25%']
    return pd.DataFrame({
        'lower': summary.loc['25%'] - iqr * whisker_distance,
        'upper': summary.loc['75%'] + iqr * whisker_distance,
    })


def find_outliers(
    log_values: pd.DataFrame,
    summary: pd.DataFrame,
    whisker_distance: float,
    labeller: Optional[Callable[[Iterable[str]], List[str]]] = None
) -> pd.DataFrame:
    """
    Values strictly beyond the whiskers of each sample

    Args:
        log_values: log2-transformed matrix (features x samples)
        summary: Output of quantile_summary for the same matrix
        whisker_distance: IQR multiplier
        labeller: Resolves feature ids to display labels

    Returns:
        DataFrame with 'sample', 'feature', 'value' and 'label' columns;
        empty when no sample has outliers
    """
    bounds = whisker_bounds(summary, whisker_distance)

    frames = []
    for sample in log_values.columns:
        y = log_values[sample]
        mask = (y > bounds.loc[sample, 'upper']) | (y < bounds.loc[sample, 'lower'])
        if mask.any():
            hits = y[mask]
            frames.append(pd.DataFrame({
                'sample': str(sample),
                'feature': hits.index.astype(str),
                'value': hits.values,
            }))

    if not frames:
        return pd.DataFrame({
            'sample': pd.Series(dtype=object),
            'feature': pd.Series(dtype=object),
            'value': pd.Series(dtype=float),
            'label': pd.Series(dtype=object),
        })

    outliers = pd.concat(frames, ignore_index=True)
    if labeller is not None:
        outliers['label'] = list(labeller(outliers['feature'].tolist()))
    else:
        outliers['label'] = outliers['feature']

    return outliers
