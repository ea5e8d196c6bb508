from .quartiles import (
    default_plot_type,
    validate_whisker_distance,
    group_samples,
    melt_matrix,
    quantile_summary,
    whisker_bounds,
    find_outliers,
    WhiskerDistanceError,
    EmptyMatrixError,
)

from .assay import (
    AssayExperiment,
    ExperimentList,
    make_demo_experiments,
)

from .file_handlers import (
    read_assay_matrix,
    read_sample_annotation,
    build_experiment_list,
)

from .plotting import (
    plot_sample_boxplot,
    plot_quartile_lines,
    plot_gene_model,
    make_group_palette,
    figure_to_png,
)

__all__ = [
    # Quartiles
    'default_plot_type',
    'validate_whisker_distance',
    'group_samples',
    'melt_matrix',
    'quantile_summary',
    'whisker_bounds',
    'find_outliers',
    'WhiskerDistanceError',
    'EmptyMatrixError',
    # Assays
    'AssayExperiment',
    'ExperimentList',
    'make_demo_experiments',
    # File handlers
    'read_assay_matrix',
    'read_sample_annotation',
    'build_experiment_list',
    # Plotting
    'plot_sample_boxplot',
    'plot_quartile_lines',
    'plot_gene_model',
    'make_group_palette',
    'figure_to_png',
]
