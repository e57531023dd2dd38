"""
Unit tests for error types, error context and the error handling decorator.
"""

import logging

import pytest

from cypher_builder import ConfigurationError, NamingConflict, UnsupportedValueError, ValidationError
from cypher_builder.core.base import (
    ApplicationError,
    ErrorCode,
    ErrorDetails,
    ErrorLevel,
    ValidationErrorDetails,
)
from cypher_builder.core.decorators import with_error_handling
from cypher_builder.core.error_context import ErrorContext


class TestErrorTypes:
    def test_hierarchy(self):
        for error_class in (ValidationError, ConfigurationError, UnsupportedValueError, NamingConflict):
            assert issubclass(error_class, ApplicationError)

    def test_default_codes(self):
        assert ValidationError("bad").code == ErrorCode.PATTERN_INVALID
        assert ConfigurationError("bad").code == ErrorCode.CLAUSE_INVALID
        assert UnsupportedValueError("bad").code == ErrorCode.UNSUPPORTED_VALUE
        assert NamingConflict("n").code == ErrorCode.NAMING_CONFLICT

    def test_naming_conflict_message(self):
        error = NamingConflict("limit", kind="parameter")

        assert str(error) == "Parameter name 'limit' is already bound to a different parameter"
        assert error.details.name == "limit"

    def test_dict_details_are_converted(self):
        error = ApplicationError("boom", ErrorCode.UNKNOWN, details={"source": "test", "field": "x"})

        assert isinstance(error.details, ErrorDetails)
        assert error.details.source == "test"
        assert error.details.operation == "unknown"
        assert error.details.field == "x"

    def test_to_dict(self):
        error = ConfigurationError(
            "bad clause",
            details=ValidationErrorDetails(source="clauses", operation="return", field="projections"),
        )

        result = error.to_dict()

        assert result["error_code"] == ErrorCode.CLAUSE_INVALID.value
        assert result["error_level"] == "error"
        assert result["details"]["field"] == "projections"
        assert "constraint" not in result["details"]

    def test_error_level_to_logging_level(self):
        assert ErrorLevel.WARNING.logging_level == logging.WARNING
        assert ErrorLevel.CRITICAL.logging_level == logging.CRITICAL


class TestErrorContext:
    def test_application_error_fields(self):
        error = ValidationError(
            "bad pattern",
            details=ValidationErrorDetails(source="patterns", operation="construct", field="elements"),
        )

        result = ErrorContext(error, function="Pattern.__init__").to_dict()

        assert result["function"] == "Pattern.__init__"
        assert result["error_type"] == "ValidationError"
        assert result["error_message"] == "bad pattern"
        assert result["error_code"] == ErrorCode.PATTERN_INVALID.value
        assert result["details"]["source"] == "patterns"
        assert result["details"]["field"] == "elements"
        assert "trace_id" in result

    def test_plain_exception(self):
        context = ErrorContext(ValueError("nope"), trace_id="abc")
        result = context.to_dict()

        assert not context.is_application_error
        assert result["trace_id"] == "abc"
        assert "error_code" not in result

    def test_trace_ids_are_unique(self):
        error = ValueError("nope")

        assert ErrorContext(error).trace_id != ErrorContext(error).trace_id


class TestWithErrorHandling:
    def test_passes_through_results(self):
        @with_error_handling()
        def add(a, b):
            return a + b

        assert add(1, 2) == 3

    def test_reraises(self):
        @with_error_handling()
        def fail():
            raise ConfigurationError("broken")

        with pytest.raises(ConfigurationError, match="broken"):
            fail()

    def test_swallows_when_asked(self):
        @with_error_handling(error_level=ErrorLevel.WARNING, reraise=False)
        def fail():
            raise RuntimeError("broken")

        assert fail() is None

    def test_preserves_metadata(self):
        @with_error_handling()
        def documented(value: int) -> int:
            """Docstring."""
            return value

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
