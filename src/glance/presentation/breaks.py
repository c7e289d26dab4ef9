"""
Choropleth classification.

Values are bucketed into five color classes using four quantile breaks
taken at the 20th, 40th, 60th and 80th percentile positions of the
sorted values.
"""

import math
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..models import LatestValue

QUANTILES = (0.2, 0.4, 0.6, 0.8)

PALETTE = ["#f7fbff", "#c6dbef", "#6baed6", "#2171b5", "#08306b"]
NO_DATA_COLOR = "#eeeeee"


def _finite(values: Iterable) -> List[float]:
    out = []
    for v in values:
        if v is None:
            continue
        try:
            f = float(v)
        except (TypeError, ValueError):
            continue
        if math.isfinite(f):
            out.append(f)
    return out


def quantile_breaks(values: Iterable[float]) -> List[float]:
    """Return the four break points for a set of values.

    ``breaks[k]`` is ``sorted_values[floor(p_k * (n - 1))]``. Non-finite
    values are ignored; an empty input yields ``[0, 0, 0, 0]``.
    """
    ordered = sorted(_finite(values))
    if not ordered:
        return [0.0, 0.0, 0.0, 0.0]
    last = len(ordered) - 1
    return [ordered[math.floor(p * last)] for p in QUANTILES]


def classify(value: float, breaks: List[float]) -> int:
    """Return the color class (0-4) of a value; the upper bound is inclusive."""
    for i, b in enumerate(breaks):
        if value <= b:
            return i
    return len(breaks)


def color_for(value: Optional[float], breaks: List[float]) -> str:
    if value is None or not math.isfinite(value):
        return NO_DATA_COLOR
    return PALETTE[classify(value, breaks)]


def legend_labels(breaks: List[float], fmt: Callable[[float], str] = str) -> List[str]:
    """Labels for the five classes, e.g. ``['≤ 1', '≤ 2', '≤ 3', '≤ 4', '> 4']``."""
    labels = [f"≤ {fmt(b)}" for b in breaks]
    labels.append(f"> {fmt(breaks[-1])}")
    return labels


def metric_breaks(values: Dict[str, LatestValue]) -> List[float]:
    return quantile_breaks(v.value for v in values.values())


def dominant_year(values: Dict[str, LatestValue]) -> Optional[int]:
    """Most common observation year; ties go to the year seen first."""
    counts = Counter(v.year for v in values.values())
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def year_label(values: Dict[str, LatestValue]) -> str:
    year = dominant_year(values)
    return f"Latest ({year})" if year else "Latest"


def ranked_values(values: Dict[str, LatestValue]) -> List[Tuple[str, int, float]]:
    """``(iso3, year, value)`` rows with finite values, largest first."""
    rows = [
        (iso3, v.year, v.value)
        for iso3, v in values.items()
        if math.isfinite(v.value)
    ]
    rows.sort(key=lambda r: r[2], reverse=True)
    return rows
