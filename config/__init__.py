"""
Configuration package for ExprQuartiles
"""
from .settings import config, Config, BoxplotSettings, PaletteSettings, PathSettings

__all__ = ['config', 'Config', 'BoxplotSettings', 'PaletteSettings', 'PathSettings']
