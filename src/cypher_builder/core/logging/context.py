"""Context-local fields attached to builder log events.

Callers tag a unit of work (a request id, the kind of statement being built)
with ``log_context``; the level helpers bind whatever is current onto each
event they emit.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from .setup import get_logger

logger = get_logger(__name__)

# None as default to avoid sharing a mutable dict between contexts
_log_context: ContextVar[dict[str, Any] | None] = ContextVar("cypher_builder_log_context", default=None)


def get_log_context() -> dict[str, Any]:
    """Copy of the fields currently bound."""
    return dict(_log_context.get() or {})


def set_log_context(context: dict[str, Any]) -> None:
    _log_context.set(dict(context))


def update_log_context(key: str, value: Any) -> None:
    _log_context.set({**get_log_context(), key: value})


def clear_log_context() -> None:
    _log_context.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """Bind ``fields`` for the duration of the block.

    The outer context is restored on exit, also when the block raises.

    Example:
        ```python
        with log_context(request_id="r1"):
            statement.build()
        ```
    """
    token = _log_context.set({**get_log_context(), **fields})
    try:
        yield get_log_context()
    finally:
        _log_context.reset(token)


def log_with_context(level: str, message: str, **fields: Any) -> None:
    """Log ``message`` at ``level`` with the current context plus ``fields``."""
    bound = logger.bind(**{**get_log_context(), **fields})
    getattr(bound, level)(message)


def debug(message: str, **fields: Any) -> None:
    log_with_context("debug", message, **fields)


def info(message: str, **fields: Any) -> None:
    log_with_context("info", message, **fields)


def warning(message: str, **fields: Any) -> None:
    log_with_context("warning", message, **fields)


def error(message: str, **fields: Any) -> None:
    log_with_context("error", message, **fields)
