"""
Structured logging configuration for the command line tools.

Library modules log through ``logging.getLogger(__name__)`` and stay silent
unless an application configures logging. The CLI decides where events go:
its own structlog events are rendered as JSON lines on stderr, and standard
library records go to stderr as well, so JSON written to stdout stays
machine-readable.
"""

import logging
import os
import sys

import structlog

LOG_LEVEL_ENV = "EADV_MOCKER_LOG_LEVEL"


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog for CLI usage.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...). If None, uses the
               EADV_MOCKER_LOG_LEVEL environment variable or defaults to INFO.
    """
    level_name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"unknown log level {level_name!r}")

    # Library modules log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
