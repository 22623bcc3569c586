"""structlog setup for the rede CLI.

Log events go to stderr as JSON lines so that stdout carries only the
parsed or rendered request. The parsing and rendering core never logs.
"""

import logging
import sys

import structlog


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a logger, setting up structlog at the WARNING level if nothing has yet."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)


def configure_logging(level: str = "WARNING") -> None:
    """(Re)configure structlog. The CLI calls this once per invocation with --log-level."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.WARNING)),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )
