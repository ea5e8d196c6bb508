"""
Configuration settings for ExprQuartiles
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List

# Base paths
BASE_DIR = Path(__file__).parent.parent
ASSETS_DIR = BASE_DIR / "assets"
INLINE_HELP_DIR = ASSETS_DIR / "inlinehelp"


@dataclass
class BoxplotSettings:
    """Quartile plot parameters"""
    # Experiments with more samples than this default to the line plot
    boxes_max_samples: int = 20

    whisker_distance: float = 1.5  # multiples of IQR

    # Static boxplot (inches) and interactive chart (pixels)
    static_height: float = 6.0
    static_width_per_sample: float = 0.35
    static_min_width: float = 6.0
    lines_height_px: int = 600

    # y axis label wrapping
    label_width: int = 15

    # Export
    export_filename: str = "boxplot.png"
    export_width_px: int = 800
    export_height_px: int = 600
    export_dpi: int = 100

    plot_types: List[str] = field(default_factory=lambda: ["boxes", "lines"])


@dataclass
class PaletteSettings:
    """Colors for grouped plots"""
    # Colorblind-friendly categorical palette
    categorical: List[str] = field(default_factory=lambda: [
        '#E64B35',  # Red
        '#4DBBD5',  # Cyan
        '#00A087',  # Teal
        '#3C5488',  # Dark blue
        '#F39B7F',  # Salmon
        '#8491B4',  # Lavender
        '#91D1C2',  # Mint
        '#DC0000',  # Bright red
        '#7E6148',  # Brown
        '#B09C85',  # Tan
    ])
    box_fill: str = '#FFFFFF'
    outlier_color: str = 'black'
    margin_color: str = 'grey'


@dataclass
class PathSettings:
    """Path configuration settings"""
    base_dir: Path = field(default_factory=lambda: BASE_DIR)
    assets_dir: Path = field(default_factory=lambda: ASSETS_DIR)
    inline_help_dir: Path = field(default_factory=lambda: INLINE_HELP_DIR)


class Config:
    """Main configuration class"""

    def __init__(self):
        self.boxplot = BoxplotSettings()
        self.palette = PaletteSettings()
        self.paths = PathSettings()

        # App settings
        self.app_name = "ExprQuartiles"
        self.app_tagline = "Quartile plots for assay matrices"
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

    def to_dict(self) -> dict:
        """Export configuration as dictionary"""
        return {
            'boxplot': self.boxplot.__dict__,
            'palette': self.palette.__dict__,
        }

    def validate(self) -> list:
        """
        Validate all configuration settings.

        Returns:
            List of validation error strings (empty if valid)
        """
        errors = []

        b = self.boxplot
        if b.boxes_max_samples < 1:
            errors.append(f"boxplot.boxes_max_samples must be >= 1, got {b.boxes_max_samples}")
        if b.whisker_distance < 0:
            errors.append(f"boxplot.whisker_distance must be >= 0, got {b.whisker_distance}")
        if b.export_width_px < 1 or b.export_height_px < 1:
            errors.append(
                f"boxplot export size must be positive, got {b.export_width_px}x{b.export_height_px}"
            )
        if b.label_width < 1:
            errors.append(f"boxplot.label_width must be >= 1, got {b.label_width}")
        if sorted(b.plot_types) != ["boxes", "lines"]:
            errors.append(f"boxplot.plot_types must be 'boxes' and 'lines', got {b.plot_types}")

        if not self.palette.categorical:
            errors.append("palette.categorical must contain at least one color")

        return errors


# Create global config instance
config = Config()
