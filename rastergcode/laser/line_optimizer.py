"""
Scanline optimization.

Reduces a raw scanline to the points where the beam power changes:
- trim: drop white pixels at both ends
- merge: keep one sample per run of equal power
- overscan: add unpowered travel on both ends so the head is at speed
  when it reaches the first colored pixel
"""

from typing import List, Optional
import logging

from ..core.settings import RasterSettings
from .line_builder import PixelSample

logger = logging.getLogger(__name__)


def trim_line(line: List[PixelSample]) -> List[PixelSample]:
    """
    Remove white samples from both ends of a line.

    The closing sample is kept while the sample before it is colored,
    since it marks where the last colored run ends.

    Returns:
        The trimmed line (may be empty)
    """
    start = 0
    while start < len(line) and not line[start].p:
        start += 1

    line = line[start:]

    end = len(line)
    while end >= 2 and not line[end - 2].p:
        end -= 1

    return line[:end]


def merge_line(line: List[PixelSample]) -> List[PixelSample]:
    """
    Join consecutive samples with the same power.

    Keeps the first sample, every sample where the power changes and the
    closing sample. Lines shorter than 3 samples are returned as is.
    """
    if len(line) < 3:
        return line

    merged = [line[0]]
    power = line[0].p

    for sample in line[1:-1]:
        if sample.p != power:
            merged.append(sample)
        power = sample.p

    merged.append(line[-1])
    return merged


def overscan_line(line: List[PixelSample], pixels: float,
                  reversed: bool = False, diagonal: bool = False) -> List[PixelSample]:
    """
    Add an unpowered sample beyond each end of a non-empty line.

    Args:
        line: Samples in probe order
        pixels: Overscan distance in pixels
        reversed: The line will be traversed backward
        diagonal: Extend along the anti-diagonal instead of the row

    Returns:
        New list with the two extra samples
    """
    first, last = line[0], line[-1]

    # The former ends now sit on a white/colored transition
    if first.s:
        first.last_white = True
    if last.s:
        last.last_colored = True

    # Nothing is burnt while travelling from the overscan sample
    if reversed:
        last.s = 0
    else:
        first.s = 0

    left = PixelSample(x=first.x - pixels, y=first.y, s=0, p=0)
    right = PixelSample(x=last.x + pixels, y=last.y, s=0, p=0)

    if diagonal:
        left.y += pixels
        right.y -= pixels

    return [left] + line + [right]


class LineOptimizer:
    """Apply the enabled reductions of a settings snapshot to scanlines."""

    def __init__(self, settings: RasterSettings):
        self.trim = settings.trim_line
        self.join = settings.join_pixel
        self.diagonal = settings.diagonal
        self.overscan_pixels = settings.overscan / settings.ppm.x if settings.overscan else 0.0

    def optimize(self, line: List[PixelSample],
                 reversed: bool = False) -> Optional[List[PixelSample]]:
        """
        Optimize one raw scanline.

        Args:
            line: Raw samples from a LineBuilder
            reversed: Traverse the line backward

        Returns:
            Samples in traversal order with first/last flags set,
            or None when nothing is left to engrave
        """
        if self.trim:
            line = trim_line(line)

        if not line:
            return None

        if self.join:
            line = merge_line(line)

        if self.overscan_pixels:
            line = overscan_line(line, self.overscan_pixels, reversed, self.diagonal)

        line[0].first = True
        line[-1].last = True

        if reversed:
            line.reverse()

        return line
