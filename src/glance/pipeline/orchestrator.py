"""
Build orchestrator.

Registers one client per source, walks the metric catalog in order and
writes one artifact per metric, then the manifest. There is no partial
success: the first failing metric aborts the run.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .. import config
from ..exceptions import BuildError, SchemaMismatchError
from ..extractors.base_client import BaseClient
from ..extractors.result import ExtractionResult
from ..geo import ensure_geojson
from ..models import Manifest, MetricArtifact, MetricDescriptor, utc_timestamp
from .writer import ArtifactWriter


@dataclass
class BuildSummary:
    """What a successful run produced."""

    updated_at: str
    countries: Dict[str, int] = field(default_factory=dict)
    results: List[ExtractionResult] = field(default_factory=list)
    geo_downloaded: bool = False
    telemetry: Dict[str, Any] = field(default_factory=dict)

    @property
    def metric_count(self) -> int:
        return len(self.countries)


class BuildOrchestrator:
    """Drive one complete dashboard build.

    Usage::

        b = BuildOrchestrator(METRICS, ArtifactWriter("public/data"))
        b.register("worldbank", WorldBankClient())
        b.register("owid", OwidClient())
        summary = b.run()
    """

    def __init__(
        self,
        metrics: List[MetricDescriptor],
        writer: ArtifactWriter,
        geo_path: Optional[str] = None,
        geo_url: Optional[str] = None,
        notes: str = config.MANIFEST_NOTES,
    ):
        self.metrics = list(metrics)
        self.writer = writer
        self.geo_path = geo_path
        self.geo_url = geo_url
        self.notes = notes
        self._clients: Dict[str, BaseClient] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def register(self, source: str, client: BaseClient) -> None:
        """Register the client serving a catalog ``source`` value."""
        self._clients[source] = client

    def list_sources(self) -> List[str]:
        return list(self._clients.keys())

    def client_for(self, metric: MetricDescriptor) -> BaseClient:
        """Return the client registered for a metric's source.

        Raises:
            SchemaMismatchError: If no client serves that source.
        """
        if metric.source not in self._clients:
            raise SchemaMismatchError(
                f"No client registered for source '{metric.source}' "
                f"(metric {metric.id})"
            )
        return self._clients[metric.source]

    def collect(self, metric: MetricDescriptor) -> ExtractionResult:
        """Extract one metric, raising if the client reported a failure.

        Raises:
            BuildError: Wrapping the client's original exception.
        """
        result = self.client_for(metric).extract(metric)
        if not result.success:
            cause = result.exception or RuntimeError(result.error)
            raise BuildError(metric.id, cause) from cause
        return result

    def run(self) -> BuildSummary:
        """Run the build: boundary file, OWID dataset, artifacts, manifest."""
        for metric in self.metrics:
            self.client_for(metric)

        summary = BuildSummary(updated_at=utc_timestamp())

        if self.geo_path and self.geo_url:
            summary.geo_downloaded = ensure_geojson(self.geo_path, self.geo_url)

        self.writer.prepare()

        # One download shared by every OWID metric
        if any(m.source == "owid" for m in self.metrics):
            self._clients["owid"].load_dataset()

        for metric in self.metrics:
            result = self.collect(metric)
            artifact = MetricArtifact(
                metric_id=metric.id,
                updated_at=summary.updated_at,
                values=result.values,
            )
            self.writer.write_artifact(artifact)
            summary.countries[metric.id] = artifact.country_count
            summary.results.append(result)
            self.logger.info(
                "wrote latest/%s.json (%d countries)",
                metric.id, artifact.country_count,
            )
            self.logger.debug(
                "%s: %d API call(s), %d retries in %.2fs",
                metric.id, result.api_calls, result.retries, result.duration_seconds,
            )

        self.writer.write_manifest(
            Manifest(updated_at=summary.updated_at, metrics=self.metrics, notes=self.notes)
        )
        summary.telemetry = self.get_telemetry()
        self.logger.info("done: %d metrics", summary.metric_count)
        return summary

    def get_telemetry(self) -> Dict[str, Any]:
        """Aggregate telemetry across all registered clients.

        Client counters accumulate over the whole run, so the shared OWID
        download is counted once under its source.
        """
        per_source = {}
        totals = {"api_calls": 0, "retries": 0, "errors": 0}

        for name, client in self._clients.items():
            t = client.get_telemetry()
            per_source[name] = t
            totals["api_calls"] += t["api_calls"]
            totals["retries"] += t["retries"]
            totals["errors"] += t["errors"]

        return {"totals": totals, "per_source": per_source}

    def close(self) -> None:
        """Close every registered client's HTTP session."""
        for client in self._clients.values():
            client.close()
