"""
Matrix Selection Module for ExprQuartiles
Choose an experiment, an assay and the samples to plot
"""
import pandas as pd
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.assay import AssayExperiment, ExperimentList
from utils.layout import InputField, namespace


@dataclass
class MatrixSelection:
    """The matrix and annotation currently selected"""
    experiment_name: str
    experiment: AssayExperiment
    assay: str
    matrix: pd.DataFrame
    col_data: pd.DataFrame
    measure: str


def _experiment(eselist: ExperimentList, name: Optional[str]) -> AssayExperiment:
    return eselist[name] if name in eselist.experiments else eselist.first()


def build_selectmatrix_fields(module_id: str, eselist: ExperimentList) -> List[InputField]:
    """Inputs for choosing the experiment, assay and samples"""
    ns = namespace(module_id)
    names = eselist.names()
    fields = []

    experiment_id = None
    if len(names) > 1:
        experiment_id = ns('experiment')
        fields.append(InputField('select', experiment_id, 'Experiment', options=names, value=names[0]))

    fields.append(InputField(
        'select', ns('assay'), 'Matrix',
        value=None,
        depends_on=experiment_id,
        options_for=lambda name: _experiment(eselist, name).assay_names(),
    ))
    fields.append(InputField(
        'multiselect', ns('samples'), 'Samples',
        value=None,
        depends_on=experiment_id,
        options_for=lambda name: _experiment(eselist, name).samples,
        help="Samples to include (all by default)",
    ))

    return fields


def select_matrix(module_id: str, eselist: ExperimentList, values: Dict[str, Any]) -> MatrixSelection:
    """
    Resolve input values to the selected matrix

    Missing values fall back to the first experiment, its first assay and
    all of its samples.
    """
    ns = namespace(module_id)

    name = values.get(ns('experiment'))
    if name not in eselist.experiments:
        name = eselist.names()[0]
    experiment = eselist[name]

    assay = values.get(ns('assay'))
    if assay not in experiment.assays:
        assay = experiment.assay_names()[0]

    samples = values.get(ns('samples'))
    if samples is None:
        samples = experiment.samples
    else:
        wanted = set(samples)
        samples = [s for s in experiment.samples if s in wanted]

    return MatrixSelection(
        experiment_name=name,
        experiment=experiment,
        assay=assay,
        matrix=experiment.assays[assay][samples],
        col_data=experiment.col_data.loc[samples],
        measure=experiment.measure(assay),
    )
