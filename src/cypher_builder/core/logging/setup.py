"""structlog configuration bridged into Logfire.

Logfire itself is configured by the host application (``logfire.configure``).
``setup_logging`` only wires structlog and the standard library so that
builder events pass through the Logfire processor and a single renderer.
"""

import logging
import sys

import logfire
import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.types import EventDict, Processor, WrappedLogger
from structlog.typing import FilteringBoundLogger

from cypher_builder.core.config import settings


def add_error_type(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Name the exception class on events that carry one under ``error``."""
    error = event_dict.get("error")
    if isinstance(error, BaseException):
        event_dict["error_type"] = type(error).__name__
    return event_dict


def _shared_processors() -> list[Processor]:
    """Processors applied to structlog events and standard library records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        CallsiteParameterAdder(
            parameters=[
                CallsiteParameter.MODULE,
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO,
            ]
        ),
        add_error_type,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and route standard library logging through it.

    Args:
        level: Minimum level name; defaults to ``Settings.log_level``
        log_format: ``console`` or ``json``; defaults to ``Settings.log_format``
    """
    log_level = logging.getLevelNamesMapping().get((level or settings.log_level).upper(), logging.INFO)
    renderer = _renderer(log_format or settings.log_format)
    shared = _shared_processors()

    structlog.configure(
        # Logfire processor MUST come before the final renderer
        processors=[*shared, logfire.StructlogProcessor(), renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Get a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)
