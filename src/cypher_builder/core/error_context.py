"""Error context capture for structured logging."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from .base import ApplicationError


class ErrorContext:
    """Snapshot of an error and the call it escaped from.

    ``to_dict`` gives a flat mapping usable directly as log event fields.
    Builder errors add their code, level and details; other exceptions only
    their type and message.

    Args:
        error: The exception being reported
        trace_id: Correlation id; generated when omitted
        **context: Extra fields such as the failing function's name
    """

    def __init__(self, error: BaseException, trace_id: str | None = None, **context: Any) -> None:
        self.error = error
        self.trace_id = trace_id or uuid4().hex
        self.raised_at = datetime.now(UTC)
        self.context = context

    @property
    def is_application_error(self) -> bool:
        return isinstance(self.error, ApplicationError)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            **self.context,
            "error_type": type(self.error).__name__,
            "error_message": str(self.error),
            "trace_id": self.trace_id,
            "raised_at": self.raised_at.isoformat(),
        }
        if isinstance(self.error, ApplicationError):
            result.update(self.error.to_dict())
        return result
