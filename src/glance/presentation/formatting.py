"""Number formatting for map legends and tooltips."""

import math
from typing import Optional

MISSING = "—"

_COMPACT = [
    (1.0, ""),
    (1e3, "K"),
    (1e6, "M"),
    (1e9, "B"),
    (1e12, "T"),
]


def _trim(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def compact(x: float, digits: int = 2) -> str:
    """Short form with a magnitude suffix: 1234567 -> '1.23M'.

    The unit is chosen on the rounded value, so 999999.5 reads '1M'
    rather than '1000K'.
    """
    i = 0
    while i + 1 < len(_COMPACT) and abs(x) >= _COMPACT[i + 1][0]:
        i += 1
    scaled = round(x / _COMPACT[i][0], digits)
    if abs(scaled) >= 1000 and i + 1 < len(_COMPACT):
        i += 1
        scaled = round(x / _COMPACT[i][0], digits)
    return _trim(f"{scaled:.{digits}f}") + _COMPACT[i][1]


def format_number(x: Optional[float], unit: Optional[str] = None) -> str:
    """Format a metric value for display.

    Percent units keep one decimal; everything else, currency included,
    uses compact notation with at most two decimals.
    """
    if x is None or not math.isfinite(x):
        return MISSING

    if unit == "%":
        return _trim(f"{x:,.1f}") + "%"

    return compact(x)
