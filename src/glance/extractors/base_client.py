"""
Base HTTP client shared by the source adapters.

Source-specific clients inherit from BaseClient, which provides:
- Session pooling with a custom User-Agent
- Per-attempt timeout
- Bounded retry loop with linear backoff (delay = backoff x attempt)
- Per-request telemetry

Builds run sequentially, so there is no rate limiter or response cache:
each payload is requested once per run.
"""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from .. import config
from ..exceptions import SourceFetchError
from .result import ExtractionResult


class BaseClient(ABC):
    """Abstract base class for source clients.

    Subclasses implement ``source_name``, ``base_url`` and ``extract()``.
    HTTP retries, timeouts and telemetry are handled here.

    Usage::

        class MyClient(BaseClient):
            source_name = "my_api"
            base_url = "https://api.example.com"

            def extract(self, metric, **kwargs):
                started = self._begin()
                rows = self._get_json("/endpoint", params={"q": "test"})
                return self._build_result(metric.id, reduce(rows), started)
    """

    accept = "application/json"

    # --- Abstract interface ---------------------------------------------------

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Short identifier for this data source (e.g. 'world_bank')."""

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Root URL for this source (no trailing slash)."""

    @abstractmethod
    def extract(self, metric, **kwargs) -> ExtractionResult:
        """Fetch one metric and return its latest values per country."""

    # --- Lifecycle ------------------------------------------------------------

    def __init__(
        self,
        timeout: float = None,
        max_attempts: int = None,
        backoff: float = None,
    ):
        """Initialize the client.

        Args:
            timeout: Seconds before a single attempt is abandoned.
            max_attempts: Attempts per request before giving up.
            backoff: Base delay in seconds; attempt ``n`` waits ``n * backoff``.
        """
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self.max_attempts = max_attempts if max_attempts is not None else config.HTTP_RETRIES
        self.backoff = backoff if backoff is not None else config.RETRY_BACKOFF

        self._session = requests.Session()
        self._session.headers.update({
            "User-Agent": f"world-at-a-glance/{self.source_name}",
            "Accept": self.accept,
        })

        # Telemetry counters
        self.api_calls = 0
        self.retries = 0
        self.errors = 0
        self._timings: list = []
        self._mark = (0, 0)

        self._log = logging.getLogger(f"extractor.{self.source_name}")

    def close(self) -> None:
        self._session.close()

    # --- HTTP with retries ----------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}" if path.startswith("/") else path

    def _request(
        self,
        path: str,
        params: Optional[Dict] = None,
        max_attempts: Optional[int] = None,
        parse=None,
    ) -> Any:
        """GET with timeout and linear-backoff retries.

        Any ``requests`` error counts as transient: connection failures,
        timeouts, non-2xx statuses and undecodable bodies.

        Args:
            path: URL path appended to ``base_url``, or an absolute URL.
            params: Query parameters.
            max_attempts: Override for this request (1 disables retries).
            parse: Callable turning the response into the return value.

        Returns:
            ``parse(response)``, or the response itself.

        Raises:
            SourceFetchError: When every attempt failed.
        """
        url = self._url(path)
        attempts = max_attempts if max_attempts is not None else self.max_attempts

        last_error = None
        for attempt in range(1, attempts + 1):
            self.api_calls += 1
            start = time.monotonic()
            try:
                resp = self._session.get(url, params=params, timeout=self.timeout)
                resp.raise_for_status()
                result = parse(resp) if parse else resp
                self._timings.append(time.monotonic() - start)
                return result
            except requests.RequestException as exc:
                self._timings.append(time.monotonic() - start)
                self.errors += 1
                last_error = exc
                if attempt < attempts:
                    wait = self.backoff * attempt
                    self.retries += 1
                    self._log.warning(
                        "Request failed (%s), retry %d/%d in %.1fs",
                        exc, attempt, attempts - 1, wait,
                    )
                    time.sleep(wait)

        raise SourceFetchError(
            f"{self.source_name}: GET {url} failed after {attempts} attempt(s): {last_error}",
            url=url,
        ) from last_error

    def _get_json(self, path: str, params: Optional[Dict] = None, **kwargs) -> Any:
        """GET a JSON document."""
        return self._request(path, params=params, parse=lambda r: r.json(), **kwargs)

    def _get_text(self, path: str, params: Optional[Dict] = None, **kwargs) -> str:
        """GET a text document (CSV, GeoJSON...)."""
        return self._request(path, params=params, parse=lambda r: r.text, **kwargs)

    # --- Result builder -------------------------------------------------------

    def _begin(self) -> datetime:
        """Mark the start of one extraction; counters keep accumulating."""
        self._mark = (self.api_calls, self.retries)
        return datetime.now(timezone.utc)

    def _build_result(
        self, metric_id: str, values, started_at: datetime
    ) -> ExtractionResult:
        """Build a successful ExtractionResult from a latest-value mapping.

        ``api_calls`` and ``retries`` count only the requests made since
        the matching ``_begin()``.
        """
        completed = datetime.now(timezone.utc)
        return ExtractionResult(
            success=True,
            source=self.source_name,
            metric_id=metric_id,
            records=len(values),
            api_calls=self.api_calls - self._mark[0],
            retries=self.retries - self._mark[1],
            started_at=started_at,
            completed_at=completed,
            duration_seconds=(completed - started_at).total_seconds(),
            values=values,
        )

    def _build_error(
        self, metric_id: str, exc: Exception, started_at: datetime
    ) -> ExtractionResult:
        """Build a failed ExtractionResult that keeps the original exception."""
        completed = datetime.now(timezone.utc)
        return ExtractionResult(
            success=False,
            source=self.source_name,
            metric_id=metric_id,
            records=0,
            api_calls=self.api_calls - self._mark[0],
            retries=self.retries - self._mark[1],
            started_at=started_at,
            completed_at=completed,
            duration_seconds=(completed - started_at).total_seconds(),
            error=str(exc),
            exception=exc,
        )

    # --- Telemetry ------------------------------------------------------------

    def get_telemetry(self) -> Dict[str, Any]:
        """Return telemetry summary for this client."""
        return {
            "source": self.source_name,
            "api_calls": self.api_calls,
            "retries": self.retries,
            "errors": self.errors,
            "avg_latency": (
                sum(self._timings) / len(self._timings)
                if self._timings
                else 0.0
            ),
        }

