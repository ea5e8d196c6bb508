"""
Plotting utilities for ExprQuartiles
Static sample boxplots (matplotlib) and interactive quartile plots (Plotly)
"""
import io
import math
from typing import Callable, Dict, List, Optional, Sequence, Union

import pandas as pd
import plotly.graph_objects as go
from loguru import logger
from matplotlib.figure import Figure
from matplotlib.patches import Patch

from config import config
from .assay import AssayExperiment
from .quartiles import (
    check_plottable,
    find_outliers,
    group_samples,
    log2_matrix,
    melt_matrix,
    prettify_variable_name,
    quantile_summary,
    whisker_bounds,
    wrap_label,
)

Palette = Union[Dict[str, str], Sequence[str], None]


def make_group_palette(groups: Sequence, palette: Palette = None) -> Dict[str, str]:
    """
    Assign one color per distinct group value, in order of first occurrence

    Args:
        groups: Group values (duplicates allowed)
        palette: Mapping group -> color, or a list of colors used in group
            order. Groups not covered fall back to the categorical palette.

    Returns:
        Dict of group value -> color
    """
    levels = list(pd.unique(pd.Series(list(groups), dtype=object)))
    fallback = config.palette.categorical

    color_map = {}
    fallback_idx = 0
    for i, level in enumerate(levels):
        if isinstance(palette, dict) and level in palette:
            color_map[level] = palette[level]
        elif palette is not None and not isinstance(palette, dict) and i < len(palette):
            color_map[level] = palette[i]
        else:
            color_map[level] = fallback[fallback_idx % len(fallback)]
            fallback_idx += 1

    return color_map


def plot_sample_boxplot(
    matrix: pd.DataFrame,
    annotation: pd.DataFrame,
    group_col: Optional[str] = None,
    palette: Palette = None,
    measure: str = "expression",
    whisker_distance: float = 1.5,
    width: Optional[float] = None,
    height: Optional[float] = None
) -> Figure:
    """
    Boxplot of log2 values per sample, optionally filled by group

    Args:
        matrix: Assay matrix (features x samples)
        annotation: Sample annotation indexed by sample id
        group_col: Annotation column to color by ('' or None for no coloring)
        palette: Colors for the groups (see make_group_palette)
        measure: Measurement type for the y axis label
        whisker_distance: Whisker length in multiples of the IQR
        width: Figure width in inches (scaled to the sample count if omitted)
        height: Figure height in inches

    Returns:
        Matplotlib figure
    """
    check_plottable(matrix)
    settings = config.boxplot

    # Keep groups together while preserving the sample order within them
    if group_col:
        annotation = group_samples(annotation, group_col)
        matrix = matrix[list(annotation.index)]

    plot_df = melt_matrix(matrix, annotation, group_col or None)
    samples = list(plot_df['sample'].cat.categories)

    box_data = [
        grp['log2_value'].dropna().values
        for _, grp in plot_df.groupby('sample', observed=False, sort=True)
    ]

    if width is None:
        width = max(settings.static_min_width, len(samples) * settings.static_width_per_sample)
    if height is None:
        height = settings.static_height

    fig = Figure(figsize=(width, height), layout="constrained")
    ax = fig.add_subplot()

    bp = ax.boxplot(
        box_data,
        whis=whisker_distance,
        patch_artist=True,
        widths=0.7,
        medianprops=dict(color='black', linewidth=1.5),
        flierprops=dict(marker='o', markersize=3, markerfacecolor='black', markeredgecolor='black'),
    )

    if group_col:
        sample_groups = annotation[group_col].tolist()
        color_map = make_group_palette(sample_groups, palette)
        for box, group in zip(bp['boxes'], sample_groups):
            box.set_facecolor(color_map[group])

        handles = [
            Patch(facecolor=color, edgecolor='black', label=str(group))
            for group, color in color_map.items()
        ]
        fig.legend(
            handles=handles,
            loc='outside lower center',
            ncol=math.ceil(len(handles) / 2),
            title=prettify_variable_name(group_col),
            fontsize=12,
            title_fontsize=13,
            frameon=False,
        )
    else:
        for box in bp['boxes']:
            box.set_facecolor(config.palette.box_fill)

    ax.set_xticks(range(1, len(samples) + 1))
    ax.set_xticklabels(samples, rotation=90, ha='center')
    ax.set_xlabel('')
    ax.set_ylabel(wrap_label(f"log2({measure})", settings.label_width), fontsize=14)
    ax.tick_params(axis='both', labelsize=13)
    ax.grid(True, color='#EBEBEB')
    ax.set_axisbelow(True)

    logger.debug(f"Sample boxplot: {len(samples)} samples, grouped by {group_col or 'nothing'}")
    return fig


def plot_quartile_lines(
    matrix: pd.DataFrame,
    experiment: Optional[AssayExperiment] = None,
    measure: str = "expression",
    whisker_distance: float = 1.5,
    height: Optional[int] = None
) -> go.Figure:
    """
    Line-based alternative to boxplots for large sample numbers

    Plots lines at the median, quartiles and whiskers, with points for the
    outliers beyond the whiskers.

    Args:
        matrix: Assay matrix (features x samples)
        experiment: Experiment used to resolve outlier feature labels
        measure: Measurement type for the y axis label
        whisker_distance: IQR multiplier for the whiskers and outliers
        height: Figure height in pixels

    Returns:
        Plotly figure
    """
    check_plottable(matrix)

    samples = [str(s) for s in matrix.columns]
    log_values = log2_matrix(matrix)
    log_values.columns = samples
    summary = quantile_summary(matrix)
    summary.columns = samples

    labeller = experiment.id_to_label if experiment is not None else None
    outliers = find_outliers(log_values, summary, whisker_distance, labeller=labeller)
    bounds = whisker_bounds(summary, whisker_distance)

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        x=outliers['sample'].tolist(),
        y=outliers['value'].tolist(),
        mode='markers',
        name='outliers',
        marker=dict(color=config.palette.outlier_color),
        hoverinfo='text',
        text=outliers['label'].tolist(),
    ))

    lines = [
        (bounds['upper'], dict(width=1, color=config.palette.margin_color, dash='dash'),
         f"75%<br />+ (IQR * {whisker_distance:g})"),
        (summary.loc['75%'], dict(dash='dash', color='black'), '75%'),
        (summary.loc['50%'], dict(dash='solid', color='black'), 'median'),
        (summary.loc['25%'], dict(dash='longdash', color='black'), '25%'),
        (bounds['lower'], dict(width=1, color=config.palette.margin_color, dash='longdash'),
         f"25%<br />- (IQR * {whisker_distance:g})"),
    ]
    for values, line, name in lines:
        fig.add_trace(go.Scatter(
            x=samples,
            y=values.tolist(),
            mode='lines',
            line=line,
            name=name,
        ))

    fig.update_layout(
        xaxis=dict(title=None, type='category', categoryorder='array', categoryarray=samples),
        yaxis=dict(title=f"log2({measure})"),
        margin=dict(b=150),
        hovermode='closest',
        title=None,
        template='plotly_white',
        height=height or config.boxplot.lines_height_px,
    )

    logger.debug(f"Quartile plot: {len(samples)} samples, {len(outliers)} outliers")
    return fig


def figure_to_png(fig: Figure, dpi: Optional[int] = None) -> bytes:
    """Render a matplotlib figure to PNG bytes at its own size"""
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=dpi or config.boxplot.export_dpi)
    return buf.getvalue()


def plot_gene_model(
    species: str,
    chromosome: str,
    start: int,
    end: int,
    fetch_transcripts: Callable[[str, str, int, int], pd.DataFrame]
) -> go.Figure:
    """
    Transcript/exon tracks for a genomic range

    Args:
        species: Species identifier passed to the annotation source
        chromosome: Chromosome name
        start: Range start (1-based, inclusive)
        end: Range end
        fetch_transcripts: Annotation source returning one row per exon with
            'transcript_id', 'start', 'end' and optionally 'strand' and
            'gene_name'

    Returns:
        Plotly figure with one track per transcript
    """
    if end <= start:
        raise ValueError(f"Range end ({end}) must be greater than start ({start})")

    exons = fetch_transcripts(species, chromosome, start, end)
    logger.info(f"Gene model {species} {chromosome}:{start}-{end}: {len(exons)} exons")

    fig = go.Figure()
    transcripts: List[str] = list(pd.unique(exons['transcript_id'])) if len(exons) else []

    for track, transcript_id in enumerate(transcripts):
        tx = exons[exons['transcript_id'] == transcript_id]
        strand = tx['strand'].iloc[0] if 'strand' in tx.columns else ''
        label = tx['gene_name'].iloc[0] if 'gene_name' in tx.columns else transcript_id

        # Intron line across the transcript span
        fig.add_trace(go.Scatter(
            x=[tx['start'].min(), tx['end'].max()],
            y=[track, track],
            mode='lines',
            line=dict(color='black', width=1),
            name=str(transcript_id),
            hoverinfo='text',
            text=f"{label} ({transcript_id}) {strand}",
            showlegend=False,
        ))

        for _, exon in tx.iterrows():
            fig.add_shape(
                type='rect',
                x0=exon['start'], x1=exon['end'],
                y0=track - 0.3, y1=track + 0.3,
                fillcolor=config.palette.categorical[3],
                line=dict(width=0),
            )

    fig.update_layout(
        xaxis=dict(title=f"{chromosome} ({species})", range=[start, end]),
        yaxis=dict(
            tickmode='array',
            tickvals=list(range(len(transcripts))),
            ticktext=[str(t) for t in transcripts],
            range=[-1, max(len(transcripts), 1)],
        ),
        template='plotly_white',
        height=max(200, 60 * len(transcripts) + 100),
    )

    return fig
