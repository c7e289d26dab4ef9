"""
Country boundary file.

The map grid draws Natural Earth admin-0 polygons. The file changes
rarely, so it is downloaded once and kept on disk between builds.
"""

import json
import logging
import os
from typing import Any, Dict

import requests

from .exceptions import SourceFetchError

logger = logging.getLogger(__name__)

# Anything smaller is a truncated or error-page download
MIN_GEOJSON_BYTES = 1000


def ensure_geojson(
    path: str,
    url: str,
    min_size: int = MIN_GEOJSON_BYTES,
    timeout: float = 60,
    session: requests.Session = None,
) -> bool:
    """Download the boundary file unless a plausible copy already exists.

    Returns:
        True if the file was downloaded, False if the cached copy was kept.

    Raises:
        SourceFetchError: If the download fails.
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    if os.path.exists(path) and os.path.getsize(path) > min_size:
        logger.info("geojson already present: %s", path)
        return False

    logger.info("downloading %s", url)
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise SourceFetchError(f"geo download failed: {exc}", url=url) from exc

    with open(path, "w", encoding="utf-8") as f:
        f.write(resp.text)
    logger.info("wrote %s", path)
    return True


def load_geojson(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def country_names(geojson: Dict[str, Any]) -> Dict[str, str]:
    """Map ISO-3 codes to display names from feature properties.

    Natural Earth uses ``ISO_A3``/``ADMIN``; other exports use the
    lowercase ``iso_a3``/``name``. Features lacking either are skipped.
    """
    names: Dict[str, str] = {}
    for feature in geojson.get("features") or []:
        props = (feature or {}).get("properties") or {}
        iso3 = props.get("ISO_A3") or props.get("iso_a3")
        name = props.get("ADMIN") or props.get("name")
        if iso3 and name:
            names[iso3] = name
    return names
