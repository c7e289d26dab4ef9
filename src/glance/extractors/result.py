"""
Extraction result container.

Structured output from one metric extraction, with telemetry and the
per-country latest-value mapping.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from ..models import LatestValue


@dataclass
class ExtractionResult:
    """Result of extracting a single metric.

    On failure ``exception`` keeps the original error so the caller can
    re-raise it with its traceback.
    """

    success: bool
    source: str
    metric_id: Optional[str] = None
    records: int = 0
    api_calls: int = 0
    retries: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: float = 0.0
    error: Optional[str] = None
    exception: Optional[BaseException] = field(default=None, repr=False)
    values: Dict[str, LatestValue] = field(default_factory=dict)

