"""
Build-time data model.

Every object here is recomputed from scratch on each build run and
serialized to the JSON shapes the map grid reads.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

SOURCES = ("worldbank", "owid")


def utc_timestamp(when: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    when = when or datetime.now(timezone.utc)
    when = when.astimezone(timezone.utc)
    return when.strftime("%Y-%m-%dT%H:%M:%S.") + f"{when.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class MetricDescriptor:
    """One indicator shown on the dashboard.

    ``id`` is the World Bank indicator code or the OWID column name,
    depending on ``source``.
    """

    id: str
    name: str
    unit: str
    source: str

    def __post_init__(self):
        if self.source not in SOURCES:
            raise ValueError(
                f"unknown source {self.source!r} for metric {self.id!r}; "
                f"expected one of {SOURCES}"
            )

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "source": self.source,
        }


@dataclass(frozen=True)
class LatestValue:
    """Most recent valid observation for one country and one metric."""

    year: int
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "value": self.value}


@dataclass
class MetricArtifact:
    """Contents of ``latest/<metricId>.json``."""

    metric_id: str
    updated_at: str
    values: Dict[str, LatestValue] = field(default_factory=dict)

    @property
    def country_count(self) -> int:
        return len(self.values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metricId": self.metric_id,
            "updatedAt": self.updated_at,
            "values": {iso3: v.to_dict() for iso3, v in self.values.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricArtifact":
        values = {
            iso3: LatestValue(year=int(v["year"]), value=float(v["value"]))
            for iso3, v in (data.get("values") or {}).items()
        }
        return cls(
            metric_id=data["metricId"],
            updated_at=data["updatedAt"],
            values=values,
        )


@dataclass
class Manifest:
    """Contents of ``meta.json``: the catalog plus the run timestamp."""

    updated_at: str
    metrics: List[MetricDescriptor]
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "updatedAt": self.updated_at,
            "metrics": [m.to_dict() for m in self.metrics],
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        return cls(
            updated_at=data["updatedAt"],
            metrics=[MetricDescriptor(**m) for m in data.get("metrics", [])],
            notes=data.get("notes", ""),
        )
