"""
Exception hierarchy for the dashboard build.

Row-level data quality problems are never raised; they are filtered out
during reduction. Everything here is fatal to a build run.
"""


class GlanceError(Exception):
    """Base exception for all build errors."""


class ConfigurationError(GlanceError):
    """
    Raised when an environment setting is missing or invalid.

    Examples:
    - A numeric setting that does not parse
    - A timeout or retry count that is not positive
    """


class SourceFetchError(GlanceError):
    """
    Raised when an upstream source cannot be fetched.

    For the World Bank client this is raised only after all retry
    attempts are spent. OWID and the boundary file are fetched once.
    """

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class SchemaMismatchError(GlanceError):
    """
    Raised when a source does not have the shape the catalog expects.

    Examples:
    - An OWID column named in the catalog is absent from the CSV header
    - A metric descriptor names a source with no registered client
    """


class BuildError(GlanceError):
    """Raised when a metric fails; carries the offending metric id."""

    def __init__(self, metric_id: str, cause: Exception):
        super().__init__(f"metric {metric_id!r} failed: {cause}")
        self.metric_id = metric_id
        self.cause = cause
