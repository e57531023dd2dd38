"""Structured logging: structlog loggers bridged into Logfire, plus context-local fields."""

from .context import (
    clear_log_context,
    debug,
    error,
    get_log_context,
    info,
    log_context,
    log_with_context,
    set_log_context,
    update_log_context,
    warning,
)
from .setup import get_logger, setup_logging

__all__ = [
    "clear_log_context",
    "debug",
    "error",
    "get_log_context",
    "get_logger",
    "info",
    "log_context",
    "log_with_context",
    "set_log_context",
    "setup_logging",
    "update_log_context",
    "warning",
]
