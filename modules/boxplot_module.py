"""
Quartile Plot Module for ExprQuartiles
Boxplots for small sample numbers, line-based quartile plots for large ones
"""
import streamlit as st
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from config import config
from config.settings import BoxplotSettings
from utils.assay import ExperimentList
from utils.assets import AssetLoader, default_asset_loader
from utils.caching import hash_dataframe
from utils.error_handling import ErrorClassifier, format_error_for_streamlit
from utils.layout import FieldSet, Heading, HelpModal, InputField, Panel, Placeholder, namespace
from utils.plotting import plot_quartile_lines, plot_sample_boxplot
from utils.quartiles import (
    EmptyMatrixError,
    WhiskerDistanceError,
    check_plottable,
    default_plot_type,
    validate_whisker_distance,
)
from modules.groupby_module import build_groupby_field, get_groupby, group_palette
from modules.plotdownload_module import build_download_field, make_png_payload
from modules.selectmatrix_module import MatrixSelection, build_selectmatrix_fields, select_matrix

MODULE_ID = "boxplot"


def build_boxplot_controls(
    module_id: str,
    eselist: ExperimentList,
    settings: Optional[BoxplotSettings] = None
) -> Panel:
    """
    Inputs for the quartile plots

    The plot type defaults to boxes for experiments with few samples. The
    quartile controls only get their own field set when there is a
    grouping variable to go with them.

    Args:
        module_id: Namespace for the widget ids
        eselist: Available experiments
        settings: Boxplot settings (global config by default)

    Returns:
        Panel of inputs
    """
    settings = settings or config.boxplot
    ns = namespace(module_id)

    default_type = default_plot_type(eselist.first().n_samples, settings.boxes_max_samples)

    quartile_plot_filters = [
        InputField(
            'radio', ns('plotType'), 'Plot type',
            options=list(settings.plot_types),
            value=default_type,
        ),
        InputField(
            'number', ns('whiskerDistance'), 'Whisker distance in multiples of IQR',
            value=float(settings.whisker_distance),
            min_value=0.0,
            step=0.1,
        ),
    ]

    elements = []
    groupby_field = build_groupby_field(ns('boxplot'), eselist, label="Color by")
    if groupby_field is not None:
        quartile_plot_filters.append(groupby_field)
        elements.append(FieldSet(ns('quartile_plot_filters'), 'Quartile plot', quartile_plot_filters))
    else:
        elements.extend(quartile_plot_filters)

    elements.append(FieldSet(ns('expression'), 'Expression', build_selectmatrix_fields(ns('sampleBoxplot'), eselist)))
    elements.append(FieldSet(ns('export'), 'Export', [build_download_field(ns('boxplot'), 'box plot')]))

    return Panel(ns('inputs'), elements)


def build_boxplot_outputs(module_id: str, asset_loader: Optional[AssetLoader] = None) -> Panel:
    """Help, heading and the plot placeholder"""
    ns = namespace(module_id)
    loader = asset_loader or default_asset_loader()

    return Panel(ns('outputs'), [
        HelpModal(ns('boxplot'), 'help', 'Quartile plots', loader.load('boxplot.md')),
        Heading('Quartile plots'),
        Placeholder(ns('quartilesPlot')),
    ])


@dataclass(frozen=True)
class QuartilePlotState:
    """Snapshot of the inputs the quartile plots depend on"""
    plot_type: str
    whisker_distance: Any
    group_by: Optional[str]
    selection_values: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def from_values(cls, module_id: str, values: Dict[str, Any]) -> 'QuartilePlotState':
        ns = namespace(module_id)
        prefix = ns('sampleBoxplot')
        selection_values = tuple(sorted(
            (k, tuple(v) if isinstance(v, list) else v)
            for k, v in values.items() if k.startswith(prefix)
        ))
        return cls(
            plot_type=values.get(ns('plotType'), 'boxes'),
            whisker_distance=values.get(ns('whiskerDistance'), config.boxplot.whisker_distance),
            group_by=get_groupby(ns('boxplot'), values),
            selection_values=selection_values,
        )

    def values(self) -> Dict[str, Any]:
        """Matrix selection inputs as a plain dict"""
        return {k: list(v) if isinstance(v, tuple) else v for k, v in self.selection_values}


@dataclass(frozen=True)
class PlotRegion:
    """What the placeholder should hold"""
    kind: str  # 'image' or 'interactive'
    id: str
    height: int


class QuartilePlotController:
    """
    Decides which plot to show and rebuilds it when its inputs change

    The last figure of each view is kept with the key it was built from;
    a figure is only rebuilt when that key changes.
    """

    def __init__(self, module_id: str, eselist: ExperimentList, settings: Optional[BoxplotSettings] = None):
        self.module_id = module_id
        self.eselist = eselist
        self.settings = settings or config.boxplot
        self._views: Dict[str, Tuple[tuple, Any]] = {}
        self.render_counts: Dict[str, int] = {'boxes': 0, 'lines': 0, 'export': 0}

    def region(self, state: QuartilePlotState) -> PlotRegion:
        ns = namespace(self.module_id)
        if state.plot_type == 'boxes':
            return PlotRegion('image', ns('sampleBoxplot'), self.settings.lines_height_px)
        return PlotRegion('interactive', ns('quartilesPlotly'), self.settings.lines_height_px)

    def selection(self, state: QuartilePlotState) -> MatrixSelection:
        return select_matrix(namespace(self.module_id)('sampleBoxplot'), self.eselist, state.values())

    def figure(self, state: QuartilePlotState):
        """
        Figure for the current plot type, rebuilt only if its inputs changed

        Raises:
            WhiskerDistanceError: for an invalid whisker distance
            EmptyMatrixError: when no samples or features are selected
        """
        whisker = validate_whisker_distance(state.whisker_distance)
        selection = self.selection(state)
        check_plottable(selection.matrix)
        fingerprint = hash_dataframe(selection.matrix)

        if state.plot_type == 'boxes':
            view = 'boxes'
            key = (fingerprint, state.group_by, whisker, selection.measure)

            def build():
                return plot_sample_boxplot(
                    selection.matrix,
                    selection.col_data,
                    group_col=state.group_by,
                    palette=group_palette(selection.col_data, state.group_by),
                    measure=selection.measure,
                    whisker_distance=whisker,
                )
        else:
            view = 'lines'
            key = (fingerprint, whisker, selection.measure)

            def build():
                return plot_quartile_lines(
                    selection.matrix,
                    selection.experiment,
                    measure=selection.measure,
                    whisker_distance=whisker,
                    height=self.settings.lines_height_px,
                )

        return self._memo(view, key, build, selection)

    def _memo(self, view: str, key: tuple, build: Callable[[], Any], selection: MatrixSelection):
        """Return the stored result for a view, rebuilding it if the key changed"""
        cached = self._views.get(view)
        if cached is not None and cached[0] == key:
            logger.debug(f"Reusing {view} plot")
            return cached[1]

        result = build()
        self._views[view] = (key, result)
        self.render_counts[view] += 1
        logger.info(f"Rendered {view} plot for {selection.experiment_name}/{selection.assay} "
                    f"({selection.matrix.shape[1]} samples)")
        return result

    def export_figure(self, state: QuartilePlotState, width: float, height: float):
        """Uncolored boxplot of the current selection at a fixed size"""
        whisker = validate_whisker_distance(state.whisker_distance)
        selection = self.selection(state)
        return plot_sample_boxplot(
            selection.matrix,
            selection.col_data,
            measure=selection.measure,
            whisker_distance=whisker,
            width=width,
            height=height,
        )

    def export_png(self, state: QuartilePlotState) -> Optional[Tuple[bytes, str, str]]:
        """
        PNG payload for the download button, None if nothing can be plotted

        The payload is kept like the on-screen figures and only rebuilt when
        the selection, whisker distance or measure changes.
        """
        s = self.settings
        try:
            whisker = validate_whisker_distance(state.whisker_distance)
            selection = self.selection(state)
            check_plottable(selection.matrix)
        except (WhiskerDistanceError, EmptyMatrixError) as e:
            logger.debug(f"Export unavailable: {e}")
            return None

        key = (hash_dataframe(selection.matrix), whisker, selection.measure)

        def build():
            return make_png_payload(
                lambda width, height: self.export_figure(state, width, height),
                s.export_filename,
                s.export_width_px,
                s.export_height_px,
                dpi=s.export_dpi,
            )

        return self._memo('export', key, build, selection)


def get_controller(eselist: ExperimentList) -> QuartilePlotController:
    """Session controller, replaced when the experiment list changes"""
    controller = st.session_state.get('boxplot_controller')
    if controller is None or controller.eselist is not eselist:
        controller = QuartilePlotController(MODULE_ID, eselist)
        st.session_state.boxplot_controller = controller
    return controller


def render_quartiles_plot(controller: QuartilePlotController, state: QuartilePlotState):
    """Fill the plot placeholder"""
    region = controller.region(state)
    try:
        if region.kind == 'image':
            with st.spinner("Making sample boxplot"):
                fig = controller.figure(state)
            st.pyplot(fig, clear_figure=False)
        else:
            fig = controller.figure(state)
            st.plotly_chart(fig, use_container_width=True, key=region.id)
    except (WhiskerDistanceError, EmptyMatrixError) as e:
        diagnostic = ErrorClassifier.classify_plot_error(e)
        if diagnostic.severity == 'info':
            st.info(format_error_for_streamlit(diagnostic))
        else:
            st.error(format_error_for_streamlit(diagnostic))


def render_boxplot_page():
    """Render the quartile plots page"""
    from modules.data_module import get_experiment_list
    from modules.widgets import render_control_panel, render_output_panel

    eselist = get_experiment_list()
    controller = get_controller(eselist)
    ns = namespace(MODULE_ID)

    controls = build_boxplot_controls(MODULE_ID, eselist)
    outputs = build_boxplot_outputs(MODULE_ID)

    def export(values):
        return controller.export_png(QuartilePlotState.from_values(MODULE_ID, values))

    col_inputs, col_plot = st.columns([1, 3])

    with col_inputs:
        values = render_control_panel(controls, downloads={ns('boxplot-download'): export})

    state = QuartilePlotState.from_values(MODULE_ID, values)

    with col_plot:
        render_output_panel(outputs, lambda placeholder: render_quartiles_plot(controller, state))
