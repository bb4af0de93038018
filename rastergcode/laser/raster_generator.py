"""
Raster to G-code generator.

Scans a pixel grid line by line (boustrophedon rows, or anti-diagonals),
reduces every line to its power-change points and emits G-code where only
the words that changed are printed.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

from ..core.pixel_grid import PixelGrid
from ..core.settings import RasterSettings
from .commands import CommandEmitter, format_number
from .events import DoneEvent, ProgressEvent, Handler
from .line_builder import PixelSample, make_line_builder
from .line_optimizer import LineOptimizer
from .power import PowerMapper
from .scheduling import JobState, LineJob, Scheduler

logger = logging.getLogger(__name__)

# Options listed in the header when enabled (settings JSON names)
HEADER_OPTIONS = (
    ('trimLine', 'trim_line'),
    ('joinPixel', 'join_pixel'),
    ('burnWhite', 'burn_white'),
    ('verboseG', 'verbose_g'),
    ('diagonal', 'diagonal'),
)


@dataclass
class ResolvedPoint:
    """A sample converted to machine units."""
    g: int      # 0 = rapid move, 1 = controlled move
    x: float    # mm
    y: float    # mm
    s: float    # Firmware power value


class RasterToGCode(LineJob):
    """
    Generate engraving G-code from a pixel grid.

    Example:
        >>> grid = ArrayPixelGrid(np.array([[255, 0, 255]], dtype=np.uint8))
        >>> generator = RasterToGCode(grid, RasterSettings(non_blocking=False))
        >>> gcode = generator.run()
        >>> gcode[-2:]
        ['G1 X0.15 Y0.05 S0.0000', 'S1.0000']
    """

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
        self.emitter = CommandEmitter(settings.precision.as_dict(), verbose=settings.verbose_g)
        self.optimizer = LineOptimizer(settings)
        self.builder = make_line_builder(grid, settings.diagonal)

        # G word used on white pixels
        self.idle_g = 1 if settings.burn_white else 0

        self.gcode: List[str] = []
        self._reversed = False

        if settings.diagonal and settings.overscan and settings.ppi.x != settings.ppi.y:
            logger.warning("Diagonal overscan uses the X pixel density (%s ppi)", settings.ppi.x)

    @property
    def total_lines(self) -> int:
        return self.builder.total_lines

    @property
    def output_size(self) -> Tuple[float, float]:
        """Engraved (width, height) in mm."""
        size = self.grid.size
        beam_size = self.settings.beam_size
        return round(size.width * beam_size, 10), round(size.height * beam_size, 10)

    @property
    def gcode_text(self) -> str:
        return '\n'.join(self.gcode)

    def run(self, non_blocking: Optional[bool] = None,
            progress: Optional[Handler] = None,
            done: Optional[Handler] = None,
            abort: Optional[Handler] = None) -> Optional[List[str]]:
        """
        Generate the G-code of the whole grid.

        Args:
            non_blocking: Override settings.non_blocking for this run
            progress: Handler for ProgressEvent
            done: Handler for DoneEvent
            abort: Handler for AbortEvent

        Returns:
            The G-code lines when the run completed before returning
            (blocking mode), None otherwise
        """
        self._start(non_blocking, progress, done, abort)

        if self.state == JobState.DONE:
            return self.gcode
        return None

    def save_to_file(self, filepath: Union[str, Path]):
        """Save the generated G-code to a file."""
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self.gcode_text)
            f.write('\n')

    def _begin(self):
        self.gcode = []
        self.emitter.reset()
        self._reversed = False
        self._add_header()

    def _add_header(self):
        settings = self.settings
        width, height = self.output_size
        ppm = settings.ppm
        feed_rate = format_number(settings.feed_rate_mm_min)

        self.gcode.extend([
            '; Generated by RasterGCode',
            f'; Size       : {format_number(width)} x {format_number(height)} mm',
            f'; PPI        : x: {format_number(settings.ppi.x)} - y: {format_number(settings.ppi.y)}',
            f'; PPM        : x: {format_number(ppm.x)} - y: {format_number(ppm.y)}',
            f'; Beam size  : {format_number(settings.beam_size)} mm',
            f'; Beam range : {format_number(settings.beam_range.min)} to {format_number(settings.beam_range.max)}',
            f'; Beam power : {format_number(settings.beam_power.min)} to {format_number(settings.beam_power.max)} %',
            f'; Feed rate  : {feed_rate} mm/min',
        ])

        options = [name for name, attr in HEADER_OPTIONS if getattr(settings, attr)]
        if options:
            self.gcode.append('; Options    : ' + ', '.join(options))

        self.gcode.extend(['', f'G0 F{feed_rate}', f'G1 F{feed_rate}', ''])

    def _process_line(self, index: int) -> Optional[List[str]]:
        line = self.builder.build(index, self._reversed)
        line = self.optimizer.optimize(line, self._reversed)

        if line is None:
            logger.debug("Line %d is empty, skipped", index)
            return None

        commands = self._emit_line(line)
        if not commands:
            return None

        # Next line runs the other way
        self._reversed = not self._reversed
        self.gcode.extend(commands)
        return commands

    def _progress_event(self, percent: int, payload) -> ProgressEvent:
        return ProgressEvent(percent=percent, gcode=payload)

    def _done_event(self) -> DoneEvent:
        return DoneEvent(gcode=list(self.gcode))

    def resolve_point(self, sample: PixelSample) -> ResolvedPoint:
        """
        Convert a sample to machine coordinates and power.

        Boundary and transition samples are moved by half a beam so the
        beam edge, not its center, lands on the pixel edge.
        """
        settings = self.settings
        offset = settings.beam_offset

        x = sample.x * settings.beam_size + settings.offsets.x
        y = sample.y * settings.beam_size + settings.offsets.y

        if settings.diagonal:
            y += settings.beam_size

            if sample.first or sample.last_white:
                x += offset
                y -= offset
            elif sample.last or sample.last_colored:
                x -= offset
                y += offset
        else:
            y += offset

            if sample.first or sample.last_white:
                x += offset
            elif sample.last or sample.last_colored:
                x -= offset

        return ResolvedPoint(
            g=1 if sample.s else self.idle_g,
            x=x,
            y=y,
            s=self.power.map_power(sample.s),
        )

    def _emit_line(self, line: List[PixelSample]) -> List[str]:
        commands = []
        points = [self.resolve_point(sample) for sample in line]

        # Move to the start of the line, beam off
        start = points[0]
        command = self.emitter.line(('G', self.idle_g), ('X', start.x), ('Y', start.y), ('S', 0))
        if command:
            commands.append(command)

        for point in points:
            command = self.emitter.line(('G', point.g), ('X', point.x), ('Y', point.y), ('S', point.s))
            if command:
                commands.append(command)

        return commands
