"""
Modules package for ExprQuartiles
"""
from .boxplot_module import render_boxplot_page
from .data_module import render_data_page
from .help_module import render_help_page

__all__ = [
    'render_boxplot_page',
    'render_data_page',
    'render_help_page',
]
