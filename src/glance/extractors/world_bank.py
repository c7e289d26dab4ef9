"""
World Bank Indicators API client.

Fetches one indicator for every country from api.worldbank.org using
page-number pagination with metadata-driven page counts, then reduces
the rows to the latest value per ISO-3 code.
"""

from typing import Dict, List
from urllib.parse import quote

import pandas as pd

from .. import config
from ..models import LatestValue
from .base_client import BaseClient
from .latest import COLUMNS, latest_by_country
from .result import ExtractionResult


class WorldBankClient(BaseClient):
    """Client for the World Bank Indicators API.

    The API returns ``[metadata, data]`` where metadata contains ``page``,
    ``pages``, ``per_page`` and ``total``. Each page request is retried
    with linear backoff; a page that still fails aborts the indicator.

    Usage::

        client = WorldBankClient()
        latest = client.latest("NY.GDP.PCAP.CD")
        latest["FRA"]  # LatestValue(year=2023, value=...)
    """

    source_name = "world_bank"
    base_url = config.WORLD_BANK_URL

    def __init__(self, base_url: str = None, page_size: int = None, **kwargs):
        super().__init__(**kwargs)
        if base_url is not None:
            self.base_url = base_url.rstrip("/")
        self.page_size = page_size or config.WB_PAGE_SIZE

    def extract(self, metric, **kwargs) -> ExtractionResult:
        """Fetch the latest value per country for one indicator.

        Args:
            metric: MetricDescriptor whose ``id`` is an indicator code.

        Returns:
            ExtractionResult with the latest-value mapping, or a failed
            result carrying the exception.
        """
        started = self._begin()

        try:
            values = self.latest(metric.id)
            return self._build_result(metric.id, values, started)
        except Exception as exc:
            return self._build_error(metric.id, exc, started)

    def latest(self, indicator_id: str) -> Dict[str, LatestValue]:
        return to_latest_by_iso3(self.fetch_indicator(indicator_id))

    def fetch_indicator(self, indicator_id: str) -> List[dict]:
        """Fetch all pages for a single indicator, across all countries."""
        all_records: list = []
        path = f"/country/all/indicator/{quote(indicator_id, safe='')}"
        page = 1
        pages = 1

        while page <= pages:
            params = {
                "format": "json",
                "per_page": self.page_size,
                "page": page,
            }
            raw = self._get_json(path, params=params)

            metadata = raw[0] if isinstance(raw, list) and raw else None
            data = raw[1] if isinstance(raw, list) and len(raw) > 1 else None

            pages = (metadata or {}).get("pages") or 1
            all_records.extend(rec for rec in (data or []) if rec)
            page += 1

        self._log.debug(
            "%s: %d rows over %d page(s)", indicator_id, len(all_records), pages
        )
        return all_records


def to_latest_by_iso3(records: List[dict]) -> Dict[str, LatestValue]:
    """Reduce World Bank rows to the latest non-null value per ISO-3 code.

    Rows with an empty ``countryiso3code``, a ``date`` that is not a
    finite number or a null ``value`` are skipped.
    """
    if not records:
        return {}

    frame = pd.DataFrame(
        [
            {
                "country_code": rec.get("countryiso3code") or "",
                "year": rec.get("date"),
                "value": rec.get("value"),
            }
            for rec in records
        ],
        columns=COLUMNS,
    )
    frame["year"] = pd.to_numeric(frame["year"], errors="coerce")
    frame["value"] = pd.to_numeric(frame["value"], errors="coerce")
    return latest_by_country(frame)
