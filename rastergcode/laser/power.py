"""
Pixel energy to beam power mapping.
"""

from ..core.settings import RasterSettings, Range

MAX_GRAY = 255


class PowerMapper:
    """
    Linear map from pixel energy (0-255, 255 = darkest) to firmware S value.

    Values are not clamped; callers pass gray-range energies.
    """

    def __init__(self, power_range: Range):
        self.power_range = power_range

    @classmethod
    def from_settings(cls, settings: RasterSettings) -> 'PowerMapper':
        return cls(settings.real_beam_range)

    def map_power(self, value: float) -> float:
        low, high = self.power_range.min, self.power_range.max
        return value * (high - low) / MAX_GRAY + low

    __call__ = map_power

    def __repr__(self):
        return f"PowerMapper(min={self.power_range.min}, max={self.power_range.max})"
