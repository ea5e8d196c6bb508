"""
Assay containers for ExprQuartiles
Matrices, sample annotation and feature labels shared by the plot modules
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd


@dataclass
class AssayExperiment:
    """
    One experiment: named assay matrices over a common set of samples

    Args:
        assays: Assay name -> matrix (features x samples)
        col_data: Sample annotation indexed by sample id
        row_data: Optional feature annotation indexed by feature id
        label_field: Column of row_data holding display labels
        assay_measures: Assay name -> measurement label used in axis titles
    """
    assays: Dict[str, pd.DataFrame]
    col_data: pd.DataFrame
    row_data: Optional[pd.DataFrame] = None
    label_field: Optional[str] = None
    assay_measures: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.assays:
            raise ValueError("An experiment needs at least one assay")
        for name, matrix in self.assays.items():
            if list(matrix.columns) != list(self.col_data.index):
                raise ValueError(f"Columns of assay '{name}' do not match the sample annotation")

    @property
    def n_samples(self) -> int:
        return len(self.col_data)

    @property
    def samples(self) -> List[str]:
        return list(self.col_data.index)

    def assay_names(self) -> List[str]:
        return list(self.assays)

    def measure(self, assay: str) -> str:
        """Human readable measurement type of an assay"""
        return self.assay_measures.get(assay, assay)

    def id_to_label(self, ids: Iterable[str]) -> List[str]:
        """Resolve feature ids to display labels, falling back to the id"""
        ids = [str(i) for i in ids]
        if self.row_data is None or not self.label_field or self.label_field not in self.row_data.columns:
            return ids

        labels = pd.Series(
            self.row_data[self.label_field].values,
            index=self.row_data.index.astype(str)
        )
        resolved = []
        for feature_id in ids:
            label = labels.get(feature_id)
            resolved.append(str(label) if label is not None and not pd.isna(label) else feature_id)
        return resolved


@dataclass
class ExperimentList:
    """Ordered collection of experiments plus the variables usable for grouping"""
    experiments: Dict[str, AssayExperiment]
    group_vars: List[str] = field(default_factory=list)
    default_groupvar: Optional[str] = None
    title: str = ""

    def __post_init__(self):
        if self.default_groupvar and self.default_groupvar not in self.group_vars:
            raise ValueError(f"Default group variable '{self.default_groupvar}' is not a group variable")

    def __len__(self):
        return len(self.experiments)

    def __getitem__(self, name: str) -> AssayExperiment:
        return self.experiments[name]

    def names(self) -> List[str]:
        return list(self.experiments)

    def first(self) -> AssayExperiment:
        return next(iter(self.experiments.values()))


def make_demo_experiments(
    n_samples: int = 12,
    n_features: int = 500,
    seed: int = 42
) -> ExperimentList:
    """
    Build a synthetic experiment list for exploring the app

    Counts are negative binomial with a per-sample depth factor, so the
    quartiles differ visibly between samples.
    """
    rng = np.random.default_rng(seed)

    samples = [f"S{i + 1:02d}" for i in range(n_samples)]
    features = [f"ENSG{i:011d}" for i in range(n_features)]

    base = rng.gamma(shape=0.8, scale=200, size=(n_features, 1))
    depth = rng.uniform(0.5, 1.5, size=(1, n_samples))
    counts = rng.negative_binomial(5, 5 / (5 + base * depth))

    raw = pd.DataFrame(counts, index=features, columns=samples)
    cpm = raw / raw.sum(axis=0) * 1e6

    conditions = ['control', 'treated']
    col_data = pd.DataFrame({
        'condition': [conditions[i % 2] for i in range(n_samples)],
        'batch': [f"b{(i // 4) + 1}" for i in range(n_samples)],
        'cell_type': [None if i == n_samples - 1 else ('neuron' if i < n_samples // 2 else 'glia')
                      for i in range(n_samples)],
    }, index=samples)

    row_data = pd.DataFrame({
        'gene_name': [f"GENE{i}" for i in range(n_features)],
    }, index=features)

    experiment = AssayExperiment(
        assays={'raw': raw, 'cpm': cpm.round(3)},
        col_data=col_data,
        row_data=row_data,
        label_field='gene_name',
        assay_measures={'raw': 'counts', 'cpm': 'normalised counts per million'},
    )

    return ExperimentList(
        experiments={'Demo experiment': experiment},
        group_vars=['condition', 'batch', 'cell_type'],
        default_groupvar='condition',
        title="Demo data",
    )
