"""
Build entry point.

Fetches every catalog metric and writes the static data tree the map
grid reads. Takes no arguments; exits 0 on success and 1 on any error.

    $ glance-build
    $ python -m glance.build
"""

import logging
import sys

from . import config
from .catalog import METRICS
from .extractors.owid import OwidClient
from .extractors.world_bank import WorldBankClient
from .logging_config import create_logger
from .pipeline.orchestrator import BuildOrchestrator
from .pipeline.writer import ArtifactWriter

logger = logging.getLogger("glance.build")


def create_orchestrator() -> BuildOrchestrator:
    """Wire the catalog, clients and writer from ``glance.config``."""
    orchestrator = BuildOrchestrator(
        METRICS,
        ArtifactWriter(config.OUTPUT_DIR),
        geo_path=config.GEO_PATH,
        geo_url=config.GEO_URL,
    )
    orchestrator.register("worldbank", WorldBankClient())
    orchestrator.register("owid", OwidClient())
    return orchestrator


def main() -> int:
    create_logger(log_level=config.LOG_LEVEL)
    orchestrator = None
    try:
        orchestrator = create_orchestrator()
        summary = orchestrator.run()
    except Exception:
        logger.exception("build failed")
        return 1
    finally:
        if orchestrator is not None:
            orchestrator.close()

    totals = summary.telemetry.get("totals", {})
    logger.info(
        "%d artifacts written to %s (%d API calls, %d retries)",
        summary.metric_count,
        config.OUTPUT_DIR,
        totals.get("api_calls", 0),
        totals.get("retries", 0),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
