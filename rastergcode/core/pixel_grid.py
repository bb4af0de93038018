"""
Pixel Grid Module

The narrow pixel-access contract consumed by the raster engine, and a
numpy-backed implementation of it.

Grids use the image convention: origin at the top-left corner, gray values
from 0 (black) to 255 (white).
"""

from dataclasses import dataclass
from typing import Protocol, Union
from pathlib import Path
import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


class PixelOutOfBoundsError(IndexError):
    """Raised when a pixel outside the grid is requested."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Pixel ({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y


@dataclass(frozen=True)
class GridSize:
    """Grid dimensions in pixels."""
    width: int
    height: int


class PixelGrid(Protocol):
    """Anything that can hand out gray levels by pixel coordinates."""

    @property
    def size(self) -> GridSize:
        ...

    def get_pixel(self, x: int, y: int) -> int:
        """Return the 0-255 gray level at (x, y), top-left origin."""
        ...


class ArrayPixelGrid:
    """
    Pixel grid backed by a 2-D numpy array (rows x columns).

    Example:
        >>> grid = ArrayPixelGrid(np.array([[255, 0, 255]], dtype=np.uint8))
        >>> grid.size
        GridSize(width=3, height=1)
        >>> grid.get_pixel(1, 0)
        0
    """

    def __init__(self, data):
        data = np.asarray(data)

        if data.ndim == 1:
            data = data.reshape(1, -1)
        if data.ndim != 2:
            raise ValueError(f"Pixel data must be 2-D, got shape {data.shape}")

        if data.dtype != np.uint8:
            data = np.clip(data, 0, 255).astype(np.uint8)

        self._data = data
        self._size = GridSize(width=int(data.shape[1]), height=int(data.shape[0]))

    @classmethod
    def from_image(cls, filepath: Union[str, Path]) -> 'ArrayPixelGrid':
        """
        Load an image file as a grayscale grid.

        Decoding and color conversion are left to Pillow.

        Args:
            filepath: Path to any image Pillow can open

        Returns:
            ArrayPixelGrid holding the 'L' mode pixels
        """
        with Image.open(filepath) as img:
            if img.mode not in ('RGB', 'L'):
                img = img.convert('RGB')
            if img.mode == 'RGB':
                img = img.convert('L')
            data = np.array(img, dtype=np.uint8)

        logger.info("Loaded %s (%dx%d)", filepath, data.shape[1], data.shape[0])
        return cls(data)

    @property
    def size(self) -> GridSize:
        return self._size

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def get_pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self._size.width and 0 <= y < self._size.height):
            raise PixelOutOfBoundsError(x, y, self._size.width, self._size.height)
        return int(self._data[y, x])
