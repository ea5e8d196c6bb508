"""
Group-by Module for ExprQuartiles
Pick the annotation variable used to color samples
"""
import pandas as pd
from pathlib import Path
from typing import Dict, Optional

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.assay import ExperimentList
from utils.layout import InputField, namespace
from utils.plotting import make_group_palette
from utils.quartiles import group_samples, prettify_variable_name


def build_groupby_field(module_id: str, eselist: ExperimentList, label: str = "Group by") -> Optional[InputField]:
    """Select box over the grouping variables, or None if there are none"""
    if not eselist.group_vars:
        return None

    ns = namespace(module_id)
    return InputField(
        'select', ns('groupby'), label,
        options=list(eselist.group_vars),
        value=eselist.default_groupvar or eselist.group_vars[0],
        format_func=prettify_variable_name,
    )


def get_groupby(module_id: str, values: Dict) -> Optional[str]:
    """Chosen grouping variable, None when grouping is unavailable or blank"""
    return values.get(namespace(module_id)('groupby')) or None


def group_palette(col_data: pd.DataFrame, group_var: Optional[str]) -> Optional[Dict[str, str]]:
    """One color per group value, in the order groups appear on the plot"""
    if not group_var:
        return None
    grouped = group_samples(col_data, group_var)
    return make_group_palette(grouped[group_var].tolist())
