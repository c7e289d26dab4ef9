"""
Our World in Data CO2 dataset client.

The whole dataset is a single multi-megabyte CSV. It is downloaded and
parsed once per build; every OWID metric is then a column lookup on the
same parsed table.
"""

import io
import warnings
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

import pandas as pd

from .. import config
from ..exceptions import SchemaMismatchError
from ..models import LatestValue
from .base_client import BaseClient
from .latest import latest_by_country
from .result import ExtractionResult

ISO_COLUMN = "iso_code"
YEAR_COLUMN = "year"

# Real countries only; aggregates look like OWID_WRL
ISO3_PATTERN = r"[A-Z]{3}"


@dataclass
class OwidDataset:
    """Parsed OWID CSV.

    Cells are kept as raw strings (empty cells are ``""``); numeric
    parsing happens per column at reduction time.
    """

    frame: pd.DataFrame
    fetched_at: Optional[datetime] = None
    source_url: Optional[str] = None
    index: Dict[str, int] = field(init=False)

    def __post_init__(self):
        self.index = {name: i for i, name in enumerate(self.frame.columns)}

    def has_column(self, name: str) -> bool:
        return name in self.index

    def __len__(self) -> int:
        return len(self.frame)


def parse_csv(text: str) -> OwidDataset:
    """Parse CSV text into a header index and raw string rows.

    Cells beyond the header width are dropped. The first column is never
    promoted to a row index, even when every row ends with a trailing
    comma.

    Raises:
        SchemaMismatchError: If the payload has no header row or cannot
            be tokenized at all.
    """
    try:
        header = pd.read_csv(io.StringIO(text), nrows=0, index_col=False, dtype=str).columns
        width = len(header)
        with warnings.catch_warnings():
            # Dropping cells past the header width is intended
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            frame = pd.read_csv(
                io.StringIO(text),
                engine="python",
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                on_bad_lines=lambda cells: cells[:width],
            )
    except pd.errors.EmptyDataError:
        raise SchemaMismatchError("OWID payload is empty (no header row)")
    except pd.errors.ParserError as exc:
        raise SchemaMismatchError(f"OWID payload is not valid CSV: {exc}") from exc
    return OwidDataset(frame=frame.fillna(""))


def latest_from_owid(dataset: OwidDataset, column: str) -> Dict[str, LatestValue]:
    """Reduce one OWID column to the latest value per ISO-3 code.

    Raises:
        SchemaMismatchError: If ``column`` (or the ``iso_code``/``year``
            key columns) is absent from the header. Nothing is reduced
            in that case.
    """
    for required in (column, ISO_COLUMN, YEAR_COLUMN):
        if not dataset.has_column(required):
            raise SchemaMismatchError(f"OWID column not found: {required}")

    src = dataset.frame
    iso = src[ISO_COLUMN].astype(str)
    raw = src[column].astype(str).str.strip()

    frame = pd.DataFrame({
        "country_code": iso.where(iso.str.fullmatch(ISO3_PATTERN), ""),
        "year": pd.to_numeric(src[YEAR_COLUMN].astype(str).str.strip(), errors="coerce"),
        "value": pd.to_numeric(raw.where(raw != ""), errors="coerce"),
    })
    return latest_by_country(frame)


class OwidClient(BaseClient):
    """Client for the OWID CO2 dataset.

    Usage::

        client = OwidClient()
        client.load_dataset()  # one download per build
        result = client.extract(metric)  # metric.id is a column name
    """

    source_name = "owid"
    base_url = config.OWID_CO2_URL
    accept = "text/csv"

    def __init__(self, dataset_url: str = None, **kwargs):
        # Single attempt; OWID failures are not retried
        kwargs.setdefault("max_attempts", 1)
        super().__init__(**kwargs)
        if dataset_url is not None:
            self.base_url = dataset_url
        self._dataset: Optional[OwidDataset] = None

    @property
    def dataset(self) -> Optional[OwidDataset]:
        return self._dataset

    def load_dataset(self) -> OwidDataset:
        """Download and parse the dataset, reusing it if already loaded."""
        if self._dataset is None:
            self._dataset = self.fetch_dataset()
        return self._dataset

    def fetch_dataset(self) -> OwidDataset:
        text = self._get_text(self.base_url)
        dataset = parse_csv(text)
        dataset.fetched_at = datetime.now(timezone.utc)
        dataset.source_url = self.base_url
        self._log.info(
            "Loaded OWID dataset: %d rows x %d columns",
            len(dataset), len(dataset.index),
        )
        return dataset

    def extract(self, metric, dataset: OwidDataset = None, **kwargs) -> ExtractionResult:
        """Reduce one OWID column from the shared dataset.

        Args:
            metric: MetricDescriptor whose ``id`` is a column name.
            dataset: Parsed dataset; defaults to the loaded one.
        """
        started = self._begin()

        try:
            if dataset is None:
                dataset = self.load_dataset()
            values = latest_from_owid(dataset, metric.id)
            return self._build_result(metric.id, values, started)
        except Exception as exc:
            return self._build_error(metric.id, exc, started)
