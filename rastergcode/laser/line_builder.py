"""
Scanline builders.

A builder walks the pixel grid along one scanline (an image row, or an
anti-diagonal) and turns every probed pixel into a PixelSample. One
probe past the grid edge closes the last run of the line.

Coordinates are logical machine coordinates: origin at the bottom-left,
Y increasing upward. The grid itself has a top-left origin, so rows are
flipped on read.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from ..core.pixel_grid import PixelGrid, PixelOutOfBoundsError
from .power import MAX_GRAY

_NO_DEFAULT = object()


@dataclass
class PixelSample:
    """
    One probed pixel of a scanline.

    Attributes:
        x, y: Logical pixel coordinates (overscan samples may be fractional)
        s: Power applied on the segment that ends at this sample
        p: Energy of the pixel itself (0 = white, 255 = black)
        first, last: Line boundary markers, set by the optimizer
        last_white: Previous sample was white, this one is colored
        last_colored: Previous sample was colored, this one is white
    """
    x: float
    y: float
    s: int
    p: int
    first: bool = False
    last: bool = False
    last_white: bool = False
    last_colored: bool = False


def read_pixel_power(grid: PixelGrid, x: int, y: int, default=_NO_DEFAULT) -> int:
    """
    Read the energy of a pixel in logical coordinates.

    Args:
        grid: Pixel source
        x, y: Logical coordinates (bottom-left origin)
        default: Returned instead of raising when (x, y) is off the grid

    Returns:
        255 - gray, so black pixels carry the most energy

    Raises:
        PixelOutOfBoundsError: off the grid and no default given
    """
    try:
        gray = grid.get_pixel(x, grid.size.height - y - 1)
    except PixelOutOfBoundsError:
        if default is _NO_DEFAULT:
            raise
        return default

    return MAX_GRAY - gray


class LineBuilder(ABC):
    """Builds the raw sample list of each scanline of a grid."""

    def __init__(self, grid: PixelGrid):
        self.grid = grid

    @property
    @abstractmethod
    def total_lines(self) -> int:
        """Number of scanlines in a full pass."""

    @abstractmethod
    def probes(self, index: int) -> Iterator[Tuple[int, int]]:
        """Yield the logical (x, y) positions probed for a scanline."""

    def build(self, index: int, reversed: bool = False) -> List[PixelSample]:
        """
        Build the raw samples of one scanline.

        On a forward line each sample carries the power of the previous
        pixel, since the beam burns the segment it is heading toward. On
        a reversed line the order is flipped later, so each sample keeps
        its own power.

        Args:
            index: Scanline number, 0 <= index < total_lines
            reversed: True when the line will be traversed backward

        Returns:
            Samples in probe order
        """
        line: List[PixelSample] = []
        previous = None

        for x, y in self.probes(index):
            p = read_pixel_power(self.grid, x, y, previous.p if previous else 0)
            s = p if reversed or previous is None else previous.p

            sample = PixelSample(x=x, y=y, s=s, p=p)

            if previous is not None:
                sample.last_white = not previous.p and bool(p)
                sample.last_colored = bool(previous.p) and not p

            line.append(sample)
            previous = sample

        return line


class HorizontalLineBuilder(LineBuilder):
    """One scanline per image row, bottom row first."""

    @property
    def total_lines(self) -> int:
        size = self.grid.size
        return size.height if size.width > 0 else 0

    def probes(self, index: int) -> Iterator[Tuple[int, int]]:
        for x in range(self.grid.size.width + 1):
            yield x, index


class DiagonalLineBuilder(LineBuilder):
    """
    One scanline per anti-diagonal.

    Diagonals start on the left column going up, then along the top row
    going right, and each walks toward the bottom-right by (x+1, y-1).
    """

    @property
    def total_lines(self) -> int:
        size = self.grid.size
        if not size.width or not size.height:
            return 0
        return size.width + size.height - 1

    def start(self, index: int) -> Tuple[int, int]:
        """Logical start position of a diagonal."""
        height = self.grid.size.height
        if index < height:
            return 0, index
        return index - height + 1, height - 1

    def probes(self, index: int) -> Iterator[Tuple[int, int]]:
        width, height = self.grid.size.width, self.grid.size.height
        x, y = self.start(index)

        while -1 <= y < height and 0 <= x <= width:
            yield x, y
            x += 1
            y -= 1


def make_line_builder(grid: PixelGrid, diagonal: bool = False) -> LineBuilder:
    if diagonal:
        return DiagonalLineBuilder(grid)
    return HorizontalLineBuilder(grid)
