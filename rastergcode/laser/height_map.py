"""
Height map generation.

Maps every pixel to its beam power without any toolpath encoding. Rows
are produced bottom row first, like the G-code scanlines.
"""

from pathlib import Path
from typing import List, Optional, Union

from ..core.pixel_grid import PixelGrid
from ..core.settings import RasterSettings
from .commands import format_number
from .events import HeightMapDoneEvent, HeightMapProgressEvent, Handler
from .line_builder import read_pixel_power
from .power import PowerMapper
from .scheduling import JobState, LineJob, Scheduler


def format_height_map(height_map: List[List[float]]) -> str:
    """One comma separated row of power values per line."""
    return '\n'.join(','.join(format_number(value) for value in row) for row in height_map)


class HeightMapGenerator(LineJob):
    """Build the power height map of a pixel grid, one row per step."""

    def __init__(self, grid: PixelGrid, settings: Optional[RasterSettings] = None,
                 scheduler: Optional[Scheduler] = None):
        settings = settings or RasterSettings()

        is_valid, error = settings.validate()
        if not is_valid:
            raise ValueError(error)

        super().__init__(non_blocking=settings.non_blocking, scheduler=scheduler)

        self.grid = grid
        self.settings = settings
        self.power = PowerMapper.from_settings(settings)
        self.height_map: List[List[float]] = []

    @property
    def total_lines(self) -> int:
        size = self.grid.size
        return size.height if size.width > 0 else 0

    def run(self, non_blocking: Optional[bool] = None,
            progress: Optional[Handler] = None,
            done: Optional[Handler] = None,
            abort: Optional[Handler] = None) -> Optional[List[List[float]]]:
        """
        Map the whole grid.

        Returns:
            The rows when the run completed before returning, None otherwise
        """
        self._start(non_blocking, progress, done, abort)

        if self.state == JobState.DONE:
            return self.height_map
        return None

    def save_to_file(self, filepath: Union[str, Path]):
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(format_height_map(self.height_map))
            f.write('\n')

    def _begin(self):
        self.height_map = []

    def _process_line(self, index: int) -> List[float]:
        pixels = [
            self.power.map_power(read_pixel_power(self.grid, x, index))
            for x in range(self.grid.size.width)
        ]
        self.height_map.append(pixels)
        return pixels

    def _progress_event(self, percent: int, payload) -> HeightMapProgressEvent:
        return HeightMapProgressEvent(percent=percent, pixels=payload)

    def _done_event(self) -> HeightMapDoneEvent:
        return HeightMapDoneEvent(height_map=list(self.height_map))
