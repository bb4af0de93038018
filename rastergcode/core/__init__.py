"""
RasterGCode Core Module

Contains the core data structures:
- PixelGrid: the pixel access contract and its numpy implementation
- RasterSettings: immutable run configuration
"""

from .pixel_grid import PixelGrid, ArrayPixelGrid, GridSize, PixelOutOfBoundsError
from .settings import (
    RasterSettings, FeedUnit, AxisPair, Range, Precision,
    settings_to_dict, settings_from_dict, load_settings, save_settings
)

__all__ = [
    'PixelGrid', 'ArrayPixelGrid', 'GridSize', 'PixelOutOfBoundsError',
    'RasterSettings', 'FeedUnit', 'AxisPair', 'Range', 'Precision',
    'settings_to_dict', 'settings_from_dict', 'load_settings', 'save_settings',
]
