"""State management for statement composition.

This module tracks clause order so that statements are rejected as soon as a
clause is appended somewhere Cypher would not accept it.
"""

from enum import Enum, auto
from typing import ClassVar

from cypher_builder.core.base import ErrorCode, ValidationErrorDetails
from cypher_builder.core.errors import ConfigurationError


class ClauseType(Enum):
    """Enum for Cypher clause types."""

    # Reading
    MATCH = auto()
    OPTIONAL_MATCH = auto()
    WHERE = auto()
    UNWIND = auto()
    CALL = auto()

    # Projection
    RETURN = auto()
    WITH = auto()

    # Data manipulation
    CREATE = auto()
    MERGE = auto()
    DELETE = auto()
    DETACH_DELETE = auto()
    SET = auto()
    REMOVE = auto()

    # Ordering and pagination
    ORDER_BY = auto()
    SKIP = auto()
    LIMIT = auto()


_READING = {
    ClauseType.MATCH,
    ClauseType.OPTIONAL_MATCH,
    ClauseType.UNWIND,
    ClauseType.CALL,
}

_UPDATING = {
    ClauseType.CREATE,
    ClauseType.MERGE,
    ClauseType.DELETE,
    ClauseType.DETACH_DELETE,
    ClauseType.SET,
    ClauseType.REMOVE,
}

_PROJECTING = {ClauseType.WITH, ClauseType.RETURN}

_MODIFIERS = {ClauseType.ORDER_BY, ClauseType.SKIP, ClauseType.LIMIT}


class CypherQueryState:
    """State machine for tracking statement clause order.

    Ensures that clauses are appended in a semantically valid order and
    prevents common issues like a WHERE that follows no MATCH or WITH, or
    two RETURN clauses in one statement.
    """

    _VALID_AFTER: ClassVar[dict[ClauseType, set[ClauseType]]] = {
        ClauseType.MATCH: _READING | _UPDATING | _PROJECTING | {ClauseType.WHERE},
        ClauseType.OPTIONAL_MATCH: _READING | _UPDATING | _PROJECTING | {ClauseType.WHERE},
        # MATCH ... WHERE ... MATCH is fine; only a second WHERE is not
        ClauseType.WHERE: _READING | _UPDATING | _PROJECTING,
        ClauseType.UNWIND: _READING | _UPDATING | _PROJECTING,
        ClauseType.CALL: _READING | _UPDATING | _PROJECTING,
        ClauseType.WITH: _READING | _UPDATING | _PROJECTING | _MODIFIERS | {ClauseType.WHERE},
        # After RETURN only ordering and pagination
        ClauseType.RETURN: set(_MODIFIERS),
        ClauseType.CREATE: _READING | _UPDATING | _PROJECTING,
        ClauseType.MERGE: _READING | _UPDATING | _PROJECTING,
        ClauseType.DELETE: _READING | _UPDATING | _PROJECTING,
        ClauseType.DETACH_DELETE: _READING | _UPDATING | _PROJECTING,
        ClauseType.SET: _READING | _UPDATING | _PROJECTING,
        ClauseType.REMOVE: _READING | _UPDATING | _PROJECTING,
        ClauseType.ORDER_BY: {ClauseType.SKIP, ClauseType.LIMIT},
        ClauseType.SKIP: {ClauseType.LIMIT},
        ClauseType.LIMIT: set(),
    }

    # What may continue a statement once WITH's modifiers are done
    _AFTER_WITH_MODIFIERS: ClassVar[set[ClauseType]] = _READING | _UPDATING | _PROJECTING | {ClauseType.WHERE}

    _VALID_START_CLAUSES: ClassVar[set[ClauseType]] = _READING | _PROJECTING | {
        ClauseType.CREATE,
        ClauseType.MERGE,
    }

    _COMPLETE_ENDINGS: ClassVar[set[ClauseType]] = _UPDATING | {ClauseType.RETURN, ClauseType.CALL}

    def __init__(self) -> None:
        """Initialize the statement state."""
        self._clauses: list[ClauseType] = []
        self._projection: ClauseType | None = None
        self._returned = False

    @property
    def clauses(self) -> tuple[ClauseType, ...]:
        return tuple(self._clauses)

    @property
    def current_clause(self) -> ClauseType | None:
        """Get the current clause type."""
        if not self._clauses:
            return None
        return self._clauses[-1]

    @property
    def is_complete(self) -> bool:
        """Whether the statement ends in a RETURN (plus modifiers) or an updating clause."""
        if not self._clauses:
            return False
        last = self._clauses[-1]
        if last in _MODIFIERS:
            return self._projection is ClauseType.RETURN
        return last in self._COMPLETE_ENDINGS

    def valid_next(self) -> set[ClauseType]:
        """Clause types that may be appended next."""
        if not self._clauses:
            return set(self._VALID_START_CLAUSES)
        if self._returned and self.current_clause not in _MODIFIERS | {ClauseType.RETURN}:
            return set()
        allowed = set(self._VALID_AFTER[self._clauses[-1]])
        if self._clauses[-1] in _MODIFIERS and self._projection is ClauseType.WITH:
            allowed |= self._AFTER_WITH_MODIFIERS
        return allowed

    def validate_can_add(self, clause_type: ClauseType) -> None:
        """Validate that a clause can be added.

        Args:
            clause_type: The type of clause to validate

        Raises:
            ConfigurationError: If the clause cannot be added
        """
        allowed = self.valid_next()
        if clause_type in allowed:
            return

        valid = ", ".join(sorted(clause.name for clause in allowed)) or "nothing"
        if not self._clauses:
            message = f"Statement cannot start with {clause_type.name}, valid options are: {valid}"
        else:
            message = f"Cannot add {clause_type.name} after {self._clauses[-1].name}, valid options are: {valid}"
        raise ConfigurationError(
            message,
            details=ValidationErrorDetails(
                source="state",
                operation="add_clause",
                field="clauses",
                actual_value=clause_type.name,
                constraint=f"one of: {valid}",
            ),
            code=ErrorCode.CLAUSE_ORDER,
        )

    def add_clause(self, clause_type: ClauseType) -> None:
        """Add a clause to the statement state.

        Raises:
            ConfigurationError: If adding the clause would create an invalid statement
        """
        self.validate_can_add(clause_type)
        if clause_type in _PROJECTING:
            self._projection = clause_type
        if clause_type is ClauseType.RETURN:
            self._returned = True
        self._clauses.append(clause_type)

    def validate_query_complete(self) -> None:
        """Validate that the statement is complete.

        Raises:
            ConfigurationError: If the statement is not complete
        """
        if not self._clauses:
            raise ConfigurationError(
                "Statement is empty",
                details=ValidationErrorDetails(
                    source="state", operation="build", field="clauses", constraint="non-empty"
                ),
                code=ErrorCode.CLAUSE_INVALID,
            )
        if not self.is_complete:
            raise ConfigurationError(
                "Statement is not complete. It must end with RETURN or a write operation "
                "(CREATE, MERGE, DELETE, SET, etc.)",
                details=ValidationErrorDetails(
                    source="state",
                    operation="build",
                    field="clauses",
                    actual_value=self._clauses[-1].name,
                    constraint="ends with RETURN or an updating clause",
                ),
                code=ErrorCode.CLAUSE_ORDER,
            )
