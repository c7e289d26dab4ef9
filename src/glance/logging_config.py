"""
Console logging for the build.

Progress goes to stdout; errors and tracebacks go to stderr so a CI log
shows failures separately from the per-metric lines.
"""

import logging
import sys
from typing import Optional, Union

import colorlog

LOG_FORMAT = (
    "%(log_color)s[%(levelname)s]%(reset)s "
    "%(blue)s[%(name)s]%(reset)s "
    "%(message)s"
)

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def create_logger(
    name: Optional[str] = None,
    log_level: Union[int, str] = logging.INFO,
) -> logging.Logger:
    """
    Attach colored stdout/stderr handlers to a logger.

    Calling this on the root logger (``name=None``) makes every
    component logger (``extractor.world_bank``, ``BuildOrchestrator``...)
    share the same output.

    :param name: Logger name, or None for the root logger
    :param log_level: Level name or number
    :return: The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = colorlog.ColoredFormatter(LOG_FORMAT, log_colors=LOG_COLORS)

    out = colorlog.StreamHandler(sys.stdout)
    out.setLevel(log_level)
    out.addFilter(_BelowError())
    out.setFormatter(formatter)
    logger.addHandler(out)

    err = colorlog.StreamHandler(sys.stderr)
    err.setLevel(logging.ERROR)
    err.setFormatter(formatter)
    logger.addHandler(err)

    return logger
