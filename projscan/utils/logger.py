"""Structured logging for projscan using structlog.

Everything is written to stderr; stdout carries the JSON results printed by
the CLI.
"""

import logging
import os

import structlog
from structlog.types import FilteringBoundLogger

TRUTHY = ("true", "1", "yes", "on")

# Third-party loggers that are chatty below WARNING
QUIET_LIBRARIES = ("dulwich", "MARKDOWN")


def _renderer():
    if os.getenv("LOG_FORMAT", "pretty").lower() == "json":
        return structlog.processors.JSONRenderer()
    colors = os.getenv("LOG_COLORS", "true").lower() in TRUTHY
    return structlog.dev.ConsoleRenderer(colors=colors)


def configure_structlog():
    """(Re)configure logging from LOG_LEVEL, LOG_FORMAT and LOG_COLORS.

    Stdlib records (dulwich, Python-Markdown, warnings) are routed through
    the same ProcessorFormatter as structlog events, so both render alike.
    Safe to call again after the environment changes.
    """
    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(),
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level_name, logging.WARNING))
    logging.captureWarnings(True)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_structlog()


def scan_log(
    logger: FilteringBoundLogger,
    kind: str,
    target: str,
    duration_ms: float,
    **kwargs,
):
    """Log a finished scan with its timing."""
    logger.info(
        f"Parsed {kind}",
        kind=kind,
        target=target,
        duration_ms=round(duration_ms, 2),
        **kwargs,
    )


def get_logger(name: str, level: int | None = None) -> FilteringBoundLogger:
    stdlib_logger = logging.getLogger(name)
    if level is not None:
        stdlib_logger.setLevel(level)
    return structlog.get_logger(name)


git_logger = get_logger("projscan.git")
parser_logger = get_logger("projscan.parsers")
cli_logger = get_logger("projscan.cli")
