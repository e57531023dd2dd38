"""Error handling decorators"""

from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from .base import ApplicationError, ErrorLevel
from .error_context import ErrorContext
from .logging import get_logger

logger = get_logger(__name__)
P = ParamSpec("P")
T = TypeVar("T")


def with_error_handling(
    error_level: ErrorLevel = ErrorLevel.ERROR,
    reraise: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T | None]]:
    """Log failures of the wrapped function as structured events.

    Builder errors are logged at their own level together with their code
    and details; any other exception at ``error_level``.

    Args:
        error_level: Severity for exceptions that are not ApplicationErrors
        reraise: Re-raise after logging; when False the call returns None

    Example:
        ```python
        @with_error_handling(error_level=ErrorLevel.WARNING)
        def render(statement: Statement) -> str: ...
        ```
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T | None]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T | None:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                level = e.level if isinstance(e, ApplicationError) else error_level
                context = ErrorContext(e, function=func.__qualname__)
                logger.log(level.logging_level, f"{func.__qualname__} failed: {e}", **context.to_dict())
                if reraise:
                    raise
                return None

        return wrapper

    return decorator
