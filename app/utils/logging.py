"""structlog configuration shared by the resolver modules.

Call :func:`get_logger` with a dotted component name; the first call
configures structlog once.  The level comes from ``LOG_LEVEL`` (default
``INFO``) so CLI runs and tests can turn on tier-level DEBUG events without
code changes.  Output goes to stderr so CLI stdout stays machine-readable.
"""

import logging
import os
import sys

import structlog

_configured = False


def configure(level: str | None = None) -> None:
    """Configure structlog for console output at *level* (or ``LOG_LEVEL``)."""
    global _configured
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str):
    """Return a structlog logger bound to *name*."""
    if not _configured:
        configure()
    return structlog.get_logger(name)
