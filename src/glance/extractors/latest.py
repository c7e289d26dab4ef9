"""
Latest-value reduction shared by every source.

Each adapter normalizes its rows into a frame with ``country_code``,
``year`` and ``value`` columns, then collapses it to one observation
per country.
"""

from typing import Dict

import numpy as np
import pandas as pd

from ..models import LatestValue

COLUMNS = ["country_code", "year", "value"]


def latest_by_country(frame: pd.DataFrame) -> Dict[str, LatestValue]:
    """Keep the greatest-year observation per country.

    Rows without a country code, or with a non-finite year or value, are
    dropped first. Among rows sharing the greatest year, the earliest row
    in the frame wins. Output keys follow first appearance in the frame.

    Args:
        frame: Rows with ``country_code``, ``year`` and ``value``;
            ``year`` and ``value`` already numeric (NaN where unparseable).

    Returns:
        Mapping of country code to LatestValue.
    """
    if frame.empty:
        return {}

    frame = frame[COLUMNS].reset_index(drop=True)
    years = frame["year"].to_numpy(dtype=float)
    values = frame["value"].to_numpy(dtype=float)
    codes = frame["country_code"].fillna("").astype(str)

    valid = (codes != "").to_numpy() & np.isfinite(years) & np.isfinite(values)
    frame = frame[valid]
    if frame.empty:
        return {}

    # idxmax returns the first label holding the maximum
    winners = frame.groupby("country_code", sort=False)["year"].idxmax()
    latest = frame.loc[winners]

    return {
        row.country_code: LatestValue(year=int(row.year), value=float(row.value))
        for row in latest.itertuples(index=False)
    }
