"""Number and label formatting for ticks and tooltips."""

from __future__ import annotations

import math
from typing import Callable

TickFormatter = Callable[[float], str]

_ORDINAL_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}


def number_formatter(decimals: int = 0, *, thousands: bool = False) -> TickFormatter:
    """Return a formatter that renders numbers with a fixed number of decimals."""
    fmt = f"{',' if thousands else ''}.{int(decimals)}f"

    def _format(value: float) -> str:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return ""
        return format(float(value), fmt)

    return _format


format_number: TickFormatter = number_formatter(0)


def ordinal(n: float) -> str:
    """Ordinal string for a number: 1st, 2nd, 3rd, 4th, 11th, 12th, 13th, 21st, ...

    Non-integral values get "th" (e.g. "12.5th").
    """
    value = round(float(n), 6)
    if not value.is_integer():
        return f"{value:g}th"
    k = int(value)
    m = abs(k) % 100
    suffix = "th" if 10 < m < 14 else _ORDINAL_SUFFIXES.get(m % 10, "th")
    return f"{k}{suffix}"


def quantile_label(probability: float) -> str:
    """Tooltip label for a quantile probability, e.g. 0.25 -> "25th quantile"."""
    return f"{ordinal(probability * 100)} quantile"
