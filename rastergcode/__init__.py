"""
RasterGCode - raster image to laser engraving G-code.

Converts a grid of gray values into an optimized G-code toolpath or a
power height map.
"""

from .core import ArrayPixelGrid, RasterSettings, load_settings
from .laser import RasterToGCode, HeightMapGenerator, Event

__version__ = "0.1.0"

__all__ = [
    'ArrayPixelGrid', 'RasterSettings', 'load_settings',
    'RasterToGCode', 'HeightMapGenerator', 'Event',
]
