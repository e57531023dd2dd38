"""Specific error types for the query builder."""

from typing import Any

from .base import (
    ApplicationError,
    ErrorCode,
    ErrorDetails,
    ErrorLevel,
    NamingErrorDetails,
    ValidationErrorDetails,
)


class ValidationError(ApplicationError):
    """Structurally malformed pattern or expression."""

    def __init__(
        self,
        message: str,
        details: ValidationErrorDetails | dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.PATTERN_INVALID,
    ):
        super().__init__(
            message=message,
            code=code,
            level=ErrorLevel.ERROR,
            details=details or ValidationErrorDetails(source="model", operation="construct"),
        )


class ConfigurationError(ApplicationError):
    """A clause or statement is missing a required part or is out of order."""

    def __init__(
        self,
        message: str,
        details: ErrorDetails | dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.CLAUSE_INVALID,
    ):
        super().__init__(
            message=message,
            code=code,
            level=ErrorLevel.ERROR,
            details=details or ValidationErrorDetails(source="clause", operation="construct"),
        )


class UnsupportedValueError(ApplicationError):
    """A literal or parameter value the serializer cannot represent."""

    def __init__(self, message: str, value: Any = None, details: ErrorDetails | None = None):
        self.value = value
        super().__init__(
            message=message,
            code=ErrorCode.UNSUPPORTED_VALUE,
            level=ErrorLevel.ERROR,
            details=details
            or ValidationErrorDetails(
                source="environment",
                operation="check_value",
                actual_value=repr(value),
                expected_type="str | int | float | bool | None | list | dict[str, ...]",
            ),
        )


class NamingConflict(ApplicationError):
    """Two distinct variables or params bound to one explicit name in a build."""

    def __init__(self, name: str, kind: str = "variable"):
        self.name = name
        super().__init__(
            message=f"{kind.capitalize()} name '{name}' is already bound to a different {kind}",
            code=ErrorCode.NAMING_CONFLICT,
            level=ErrorLevel.ERROR,
            details=NamingErrorDetails(
                source="environment",
                operation=f"{kind}_name",
                name=name,
                kind=kind,
            ),
        )
