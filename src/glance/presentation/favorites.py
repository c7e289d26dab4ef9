"""
Dashboard selection state.

Favorites are an explicit object loaded once at startup and saved on
every change, instead of module-level state. The grid shows the user's
favorites when there are any and the first tiles of the catalog
otherwise.
"""

import json
import logging
import os
from typing import Iterable, List

from ..models import MetricDescriptor

GRID_SIZE = 27

logger = logging.getLogger(__name__)


class Favorites:
    """Ordered set of favorite metric ids."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids = dict.fromkeys(ids)

    def __contains__(self, metric_id: str) -> bool:
        return metric_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(self._ids)

    def toggle(self, metric_id: str) -> bool:
        """Add or remove an id; returns True if it is now a favorite."""
        if metric_id in self._ids:
            del self._ids[metric_id]
            return False
        self._ids[metric_id] = None
        return True

    def clear(self) -> None:
        self._ids.clear()

    def to_list(self) -> List[str]:
        return list(self._ids)


class FavoritesStore:
    """Load and save favorites as a JSON list of metric ids."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Favorites:
        """Read favorites; a missing or malformed file loads as empty."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return Favorites()
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable favorites file %s: %s", self.path, exc)
            return Favorites()

        if not isinstance(data, list):
            return Favorites()
        return Favorites(x for x in data if isinstance(x, str))

    def save(self, favorites: Favorites) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(favorites.to_list(), f)


def filter_metrics(metrics: List[MetricDescriptor], query: str) -> List[MetricDescriptor]:
    """Case-insensitive search on metric name or id."""
    q = (query or "").strip().lower()
    if not q:
        return list(metrics)
    return [m for m in metrics if q in m.name.lower() or q in m.id.lower()]


def grid_metrics(
    metrics: List[MetricDescriptor],
    favorites: Favorites,
    limit: int = GRID_SIZE,
) -> List[MetricDescriptor]:
    """Metrics to show as map tiles, in catalog order."""
    chosen = [m for m in metrics if m.id in favorites]
    if chosen:
        return chosen[:limit]
    return list(metrics)[:limit]
