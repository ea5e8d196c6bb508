"""
Plot Download Module for ExprQuartiles
"""
from pathlib import Path
from typing import Callable, Tuple

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.layout import InputField, namespace
from utils.plotting import figure_to_png


def build_download_field(module_id: str, label: str) -> InputField:
    """Download trigger for a plot"""
    return InputField('download', namespace(module_id)('download'), f"Download {label}")


def make_png_payload(
    make_plot: Callable,
    filename: str,
    width_px: int,
    height_px: int,
    dpi: int = 100
) -> Tuple[bytes, str, str]:
    """
    Render a plot factory to PNG for st.download_button

    Args:
        make_plot: Called with (width, height) in inches, returns a figure
        filename: Download file name
        width_px: Image width in pixels
        height_px: Image height in pixels
        dpi: Resolution used to convert pixels to inches

    Returns:
        (png bytes, filename, mime type)
    """
    fig = make_plot(width_px / dpi, height_px / dpi)
    return figure_to_png(fig, dpi=dpi), filename, "image/png"
