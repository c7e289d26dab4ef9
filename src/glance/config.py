"""Build settings, read from the environment with sensible defaults.

Paths default to the ``public/`` tree the static site is served from.
"""

import os

from .exceptions import ConfigurationError

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _env_number(name: str, default, cast=float):
    """Read a positive number from the environment."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


# Output locations
OUTPUT_DIR = os.getenv("GLANCE_OUTPUT_DIR", os.path.join(ROOT_DIR, "public", "data"))
GEO_PATH = os.getenv(
    "GLANCE_GEO_PATH",
    os.path.join(ROOT_DIR, "public", "geo", "countries_simplified.geojson"),
)

# Upstream sources
GEO_URL = os.getenv(
    "GLANCE_GEO_URL",
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
    "master/geojson/ne_110m_admin_0_countries.geojson",
)
WORLD_BANK_URL = os.getenv("GLANCE_WORLD_BANK_URL", "https://api.worldbank.org/v2")
OWID_CO2_URL = os.getenv(
    "GLANCE_OWID_CO2_URL",
    "https://raw.githubusercontent.com/owid/co2-data/master/owid-co2-data.csv",
)

# HTTP behaviour
WB_PAGE_SIZE = _env_number("GLANCE_WB_PAGE_SIZE", 20000, int)
HTTP_TIMEOUT = _env_number("GLANCE_HTTP_TIMEOUT", 30.0)
HTTP_RETRIES = _env_number("GLANCE_HTTP_RETRIES", 3, int)
RETRY_BACKOFF = _env_number("GLANCE_RETRY_BACKOFF", 0.5)

LOG_LEVEL = os.getenv("GLANCE_LOG_LEVEL", "INFO").upper()

MANIFEST_NOTES = "Latest available value per country; built daily by GitHub Actions."
