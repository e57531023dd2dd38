"""Error taxonomy shared by every layer of the builder.

Each error carries a stable code, a severity and a pydantic details model.
Logging flattens the details into the event; logfire records the models as
structured attributes.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any

from logfire.integrations.pydantic import PluginSettings
from pydantic import BaseModel, Field, field_serializer


class ErrorLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def logging_level(self) -> int:
        """Numeric level understood by ``logging`` and structlog."""
        return logging.getLevelNamesMapping()[self.name]


class ErrorCode(str, Enum):
    """Error codes for the query builder."""

    # General Errors (1xxx)
    UNKNOWN = "1000"
    INVALID_INPUT = "1002"
    CONFIG_INVALID = "1005"

    # Model Errors (2xxx)
    PATTERN_INVALID = "2001"
    EXPRESSION_INVALID = "2002"
    CLAUSE_INVALID = "2003"
    CLAUSE_ORDER = "2004"

    # Build Errors (3xxx)
    UNSUPPORTED_VALUE = "3001"
    NAMING_CONFLICT = "3002"


class ErrorDetails(BaseModel, plugin_settings=PluginSettings(logfire={"record": "all"})):
    """Where the error was raised and what was being done at the time"""

    source: str = Field(description="Module that raised the error, e.g. 'patterns' or 'state'")
    operation: str = Field(description="Operation in progress, e.g. 'construct' or 'add_clause'")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the error occurred")

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ValidationErrorDetails(ErrorDetails):
    """Details for malformed patterns, expressions and clauses"""

    field: str | None = Field(None, description="Field or position that failed validation")
    actual_value: Any = Field(None, description="Value that failed validation")
    expected_type: str | None = Field(None, description="Expected type or format")
    constraint: str | None = Field(None, description="Constraint that was violated")


class NamingErrorDetails(ErrorDetails):
    """Details for identifier assignment errors"""

    name: str = Field(description="Identifier that could not be bound")
    kind: str = Field(description="Kind of entity being named (variable or parameter)")


def _coerce_details(details: ErrorDetails | dict[str, Any] | None) -> ErrorDetails:
    if details is None:
        return ErrorDetails(source="unknown", operation="unknown")
    if isinstance(details, ErrorDetails):
        return details
    return ValidationErrorDetails.model_validate({"source": "unknown", "operation": "unknown", **details})


class ApplicationError(Exception):
    """Base class for all query builder errors.

    Args:
        message: Human readable description
        code: Stable error code
        level: Severity the error is logged at
        details: Details model, or a dict of ValidationErrorDetails fields
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        level: ErrorLevel = ErrorLevel.ERROR,
        details: ErrorDetails | dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.level = level
        self.details = _coerce_details(details)

    def to_dict(self) -> dict[str, Any]:
        """Code, level and details as plain data for log events."""
        return {
            "error_code": self.code.value,
            "error_level": self.level.value,
            "details": self.details.model_dump(exclude_none=True),
        }
