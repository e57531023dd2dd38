from .base import ApplicationError, ErrorCode, ErrorLevel
from .errors import (
    ConfigurationError,
    NamingConflict,
    UnsupportedValueError,
    ValidationError,
)
