"""
Raster Settings

Immutable configuration snapshot for one raster-to-gcode run, plus
helpers to read and write it as JSON.

The JSON layout uses the same camelCase keys as the LaserWeb raster
settings (beamSize, trimLine, joinPixel, ...), so existing settings
files can be reused.
"""

from dataclasses import dataclass, field, replace, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Tuple, Union
import json
import logging

logger = logging.getLogger(__name__)

MM_PER_INCH = 25.4


class FeedUnit(Enum):
    """Unit of the configured feed rate."""
    MM_PER_MIN = "mm/min"
    MM_PER_SEC = "mm/sec"


@dataclass(frozen=True)
class AxisPair:
    """A value per machine axis (pixel density, offsets, ppm...)."""
    x: float
    y: float


@dataclass(frozen=True)
class Range:
    """Inclusive min/max pair."""
    min: float
    max: float


@dataclass(frozen=True)
class Precision:
    """Number of decimals printed for each G-code word."""
    x: int = 2
    y: int = 2
    s: int = 4

    def as_dict(self) -> Dict[str, int]:
        return {'X': self.x, 'Y': self.y, 'S': self.s}


@dataclass(frozen=True)
class RasterSettings:
    """Settings for raster G-code generation."""

    # Input resolution (a single number means the same ppi on both axes)
    ppi: AxisPair = field(default_factory=lambda: AxisPair(254, 254))

    # Beam
    beam_size: float = 0.1                                          # Beam size in mm
    beam_range: Range = field(default_factory=lambda: Range(0, 1))    # Firmware S value range
    beam_power: Range = field(default_factory=lambda: Range(0, 100))  # % of beam_range

    # Motion
    feed_rate: float = 1500.0
    feed_unit: FeedUnit = FeedUnit.MM_PER_MIN
    offsets: AxisPair = field(default_factory=lambda: AxisPair(0, 0))
    overscan: float = 0.0            # Extra travel on both ends of a line (mm)

    # Options
    trim_line: bool = True           # Trim trailing white pixels
    join_pixel: bool = True          # Join consecutive pixels with same intensity
    burn_white: bool = True          # True = G1 S0, False = G0 on white pixels
    verbose_g: bool = False          # Print every word on every command
    diagonal: bool = False           # Scan along anti-diagonals

    precision: Precision = field(default_factory=Precision)

    # Hand control back to the host event loop between lines
    non_blocking: bool = True

    def __post_init__(self):
        # Normalize shorthand values (frozen, so bypass __setattr__)
        if isinstance(self.ppi, (int, float)):
            object.__setattr__(self, 'ppi', AxisPair(self.ppi, self.ppi))
        if isinstance(self.feed_unit, str):
            object.__setattr__(self, 'feed_unit', FeedUnit(self.feed_unit))

    @property
    def ppm(self) -> AxisPair:
        """Millimeters covered by one pixel on each axis."""
        return AxisPair(
            round(MM_PER_INCH / self.ppi.x, 10),
            round(MM_PER_INCH / self.ppi.y, 10),
        )

    @property
    def scale_ratio(self) -> AxisPair:
        ppm = self.ppm
        return AxisPair(ppm.x / self.beam_size, ppm.y / self.beam_size)

    @property
    def beam_offset(self) -> float:
        """Half the beam width, used to land on pixel edges."""
        return self.beam_size / 2

    @property
    def real_beam_range(self) -> Range:
        """Power range in firmware units."""
        return Range(
            self.beam_range.max / 100 * self.beam_power.min,
            self.beam_range.max / 100 * self.beam_power.max,
        )

    @property
    def feed_rate_mm_min(self) -> float:
        if self.feed_unit == FeedUnit.MM_PER_SEC:
            return self.feed_rate * 60
        return self.feed_rate

    def validate(self) -> Tuple[bool, str]:
        """
        Check the settings for values the generator cannot work with.

        Returns:
            (is_valid, error_message)
        """
        if self.ppi.x <= 0 or self.ppi.y <= 0:
            return False, f"PPI must be positive, got x={self.ppi.x} y={self.ppi.y}"
        if self.beam_size <= 0:
            return False, f"Beam size must be positive, got {self.beam_size}"
        if self.beam_range.min > self.beam_range.max:
            return False, "Beam range min is greater than max"
        if self.beam_power.min > self.beam_power.max:
            return False, "Beam power min is greater than max"
        if self.feed_rate <= 0:
            return False, f"Feed rate must be positive, got {self.feed_rate}"
        if min(self.precision.x, self.precision.y, self.precision.s) < 0:
            return False, "Precision must not be negative"
        if self.overscan < 0:
            return False, f"Overscan must not be negative, got {self.overscan}"
        return True, ""

    def with_overrides(self, **changes) -> 'RasterSettings':
        """Return a copy with some fields replaced (per-run overrides)."""
        return replace(self, **changes)


# camelCase key -> field name
_KEYS = {
    'ppi': 'ppi',
    'beamSize': 'beam_size',
    'beamRange': 'beam_range',
    'beamPower': 'beam_power',
    'feedRate': 'feed_rate',
    'feedUnit': 'feed_unit',
    'offsets': 'offsets',
    'overscan': 'overscan',
    'trimLine': 'trim_line',
    'joinPixel': 'join_pixel',
    'burnWhite': 'burn_white',
    'verboseG': 'verbose_g',
    'diagonal': 'diagonal',
    'precision': 'precision',
    'nonBlocking': 'non_blocking',
}


def settings_to_dict(settings: RasterSettings) -> Dict[str, Any]:
    """Convert settings to a JSON-friendly dictionary."""
    return {
        'ppi': {'x': settings.ppi.x, 'y': settings.ppi.y},
        'beamSize': settings.beam_size,
        'beamRange': asdict(settings.beam_range),
        'beamPower': asdict(settings.beam_power),
        'feedRate': settings.feed_rate,
        'feedUnit': settings.feed_unit.value,
        'offsets': {'X': settings.offsets.x, 'Y': settings.offsets.y},
        'overscan': settings.overscan,
        'trimLine': settings.trim_line,
        'joinPixel': settings.join_pixel,
        'burnWhite': settings.burn_white,
        'verboseG': settings.verbose_g,
        'diagonal': settings.diagonal,
        'precision': settings.precision.as_dict(),
        'nonBlocking': settings.non_blocking,
    }


def _axis_pair(value: Any) -> AxisPair:
    if isinstance(value, (int, float)):
        return AxisPair(value, value)
    return AxisPair(value.get('x', value.get('X', 0)), value.get('y', value.get('Y', 0)))


def settings_from_dict(settings_dict: Dict[str, Any],
                       base: RasterSettings = None) -> RasterSettings:
    """
    Build settings from a dictionary.

    Args:
        settings_dict: camelCase keys, missing keys keep the base value
        base: Settings to start from (defaults to RasterSettings())

    Returns:
        New RasterSettings

    Raises:
        ValueError: on unknown keys or invalid resulting settings
    """
    unknown = set(settings_dict) - set(_KEYS)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

    changes: Dict[str, Any] = {}
    for key, value in settings_dict.items():
        name = _KEYS[key]
        if name in ('ppi', 'offsets'):
            value = _axis_pair(value)
        elif name in ('beam_range', 'beam_power'):
            value = Range(value['min'], value['max'])
        elif name == 'feed_unit':
            value = FeedUnit(value)
        elif name == 'precision':
            defaults = Precision()
            value = Precision(
                x=int(value.get('X', defaults.x)),
                y=int(value.get('Y', defaults.y)),
                s=int(value.get('S', defaults.s)),
            )
        changes[name] = value

    settings = replace(base or RasterSettings(), **changes)

    is_valid, error = settings.validate()
    if not is_valid:
        raise ValueError(error)
    return settings


def load_settings(filepath: Union[str, Path]) -> RasterSettings:
    """Load settings from a JSON file."""
    with open(filepath, 'r', encoding='utf-8') as f:
        settings_dict = json.load(f)

    logger.debug("Loaded settings from %s", filepath)
    return settings_from_dict(settings_dict)


def save_settings(settings: RasterSettings, filepath: Union[str, Path]):
    """Save settings to a JSON file."""
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(settings_to_dict(settings), f, indent=2)
