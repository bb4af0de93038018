"""
RasterGCode Laser Module

Scanline building, optimization and G-code generation.
"""

from .power import PowerMapper
from .commands import CommandEmitter, format_fixed, format_number
from .line_builder import (
    PixelSample, LineBuilder, HorizontalLineBuilder, DiagonalLineBuilder,
    make_line_builder, read_pixel_power
)
from .line_optimizer import LineOptimizer, trim_line, merge_line, overscan_line
from .events import (
    Event, EventDispatcher, UnknownEventError,
    ProgressEvent, DoneEvent, AbortEvent,
    HeightMapProgressEvent, HeightMapDoneEvent
)
from .scheduling import LineJob, JobState, qt_scheduler, asyncio_scheduler
from .raster_generator import RasterToGCode, ResolvedPoint
from .height_map import HeightMapGenerator, format_height_map

__all__ = [
    # Power and words
    'PowerMapper', 'CommandEmitter', 'format_fixed', 'format_number',
    # Scanlines
    'PixelSample', 'LineBuilder', 'HorizontalLineBuilder', 'DiagonalLineBuilder',
    'make_line_builder', 'read_pixel_power',
    'LineOptimizer', 'trim_line', 'merge_line', 'overscan_line',
    # Events and driver
    'Event', 'EventDispatcher', 'UnknownEventError',
    'ProgressEvent', 'DoneEvent', 'AbortEvent',
    'HeightMapProgressEvent', 'HeightMapDoneEvent',
    'LineJob', 'JobState', 'qt_scheduler', 'asyncio_scheduler',
    # Generators
    'RasterToGCode', 'ResolvedPoint', 'HeightMapGenerator', 'format_height_map',
]
