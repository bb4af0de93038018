"""
G-code word emitter.

Machines keep their last feed, power and position until told otherwise,
so a word is only printed when its formatted value changes. Verbose mode
prints every word every time.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping, Optional, Tuple


def format_fixed(value: float, decimals: int) -> str:
    """
    Format a number with a fixed count of decimals, ties rounded up.

    The exact binary value is rounded half away from zero, so 0.125 gives
    '0.13' and 1.005 (stored just below 1.005) gives '1.00'.

    Args:
        value: Number to format
        decimals: Digits after the decimal point

    Returns:
        Fixed-point text without exponent
    """
    if value == 0:
        value = 0.0
    quantum = Decimal(1).scaleb(-decimals)
    return f"{Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP):f}"


class CommandEmitter:
    """Format G-code words and drop the ones that did not change."""

    def __init__(self, precision: Mapping[str, int], verbose: bool = False):
        self.precision = dict(precision)
        self.verbose = verbose
        self._last: Dict[str, str] = {}

    def reset(self):
        """Forget every emitted value (start of a run)."""
        self._last = {}

    def last_value(self, axis: str) -> Optional[str]:
        return self._last.get(axis)

    def command(self, axis: str, value: float) -> Optional[str]:
        """
        Format one word.

        Args:
            axis: Word letter (G, X, Y, S...)
            value: Numeric value, rounded to the axis precision

        Returns:
            The word (e.g. 'X1.25') or None if unchanged
        """
        formatted = format_fixed(value, self.precision.get(axis, 0))

        if self.verbose or formatted != self._last.get(axis):
            self._last[axis] = formatted
            return axis + formatted

        return None

    def line(self, *words: Tuple[str, float]) -> Optional[str]:
        """
        Format several words as one command line.

        Returns:
            Space separated words, or None if no word changed
        """
        tokens = []
        for axis, value in words:
            token = self.command(axis, value)
            if token:
                tokens.append(token)

        return ' '.join(tokens) if tokens else None


def format_number(value: float) -> str:
    """Shortest text for a number, without a trailing '.0' on whole values."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
