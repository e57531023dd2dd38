"""Statement composition.

A Statement is an ordered list of clauses. Clauses are appended in call
order and never reordered; each append is checked by the clause-order state
machine so misuse fails at the call that introduced it.
"""

from typing import TYPE_CHECKING, Any

from cypher_builder.core.base import ErrorCode, ValidationErrorDetails
from cypher_builder.core.errors import ConfigurationError
from cypher_builder.cypher.clauses import (
    Call,
    Clause,
    Create,
    Delete,
    Limit,
    Match,
    Merge,
    OrderBy,
    Projection,
    Remove,
    Return,
    Set,
    Skip,
    Unwind,
    Where,
    With,
)
from cypher_builder.cypher.expressions import BoolOperator, Expression, PropertyRef, and_
from cypher_builder.cypher.patterns import Pattern
from cypher_builder.cypher.state import CypherQueryState
from cypher_builder.cypher.variables import Node, Variable

if TYPE_CHECKING:
    from cypher_builder.core.config import Settings
    from cypher_builder.cypher.compiler import CompiledQuery


class Statement:
    """Fluent, ordered sequence of clauses.

    Example:
        ```python
        movie = Node("Movie")
        query, params = (
            Statement()
            .match(movie)
            .where(movie.property("title").eq("The Matrix"))
            .return_(movie.property("title"))
            .build()
        )
        ```
    """

    def __init__(self, *clauses: Clause) -> None:
        self._clauses: list[Clause] = []
        self._state_machine = CypherQueryState()
        for clause in clauses:
            self.append(clause)

    @property
    def clauses(self) -> tuple[Clause, ...]:
        return tuple(self._clauses)

    @property
    def is_complete(self) -> bool:
        return self._state_machine.is_complete

    def validate_complete(self) -> None:
        """Raise ConfigurationError unless the statement can be sent on its own."""
        self._state_machine.validate_query_complete()

    def append(self, clause: Clause) -> "Statement":
        """Append a clause.

        Raises:
            ConfigurationError: If the clause cannot follow the current last clause
        """
        self._state_machine.add_clause(clause.clause_type)
        self._clauses.append(clause)
        return self

    def _trailing_where(self, operation: str) -> Where:
        if self._clauses and isinstance(self._clauses[-1], Where):
            return self._clauses[-1]
        raise ConfigurationError(
            f"{operation} requires the statement to end with a WHERE clause",
            details=ValidationErrorDetails(source="statement", operation=operation, field="clauses"),
            code=ErrorCode.CLAUSE_ORDER,
        )

    def _extend_where(self, operation: str, op: BoolOperator, predicates: tuple[Expression, ...]) -> "Statement":
        # Clauses may be shared between statements and are never changed in place
        self._clauses[-1] = self._trailing_where(operation).extended(op, *predicates)
        return self

    # Reading

    def match(self, pattern: Pattern | Node) -> "Statement":
        return self.append(Match(pattern))

    def optional_match(self, pattern: Pattern | Node) -> "Statement":
        return self.append(Match(pattern, optional=True))

    def where(self, *predicates: Expression) -> "Statement":
        """Filter the preceding MATCH or WITH.

        Several predicates are combined with AND. If the statement already
        ends with a WHERE, that clause is extended instead of adding another.
        """
        if self._clauses and isinstance(self._clauses[-1], Where):
            return self._extend_where("where", BoolOperator.AND, predicates)
        return self.append(Where(and_(*predicates)))

    def and_where(self, *predicates: Expression) -> "Statement":
        return self._extend_where("and_where", BoolOperator.AND, predicates)

    def or_where(self, *predicates: Expression) -> "Statement":
        return self._extend_where("or_where", BoolOperator.OR, predicates)

    def unwind(self, expression: Any, alias: Variable | None = None) -> "Statement":
        return self.append(Unwind(expression, alias))

    def call(self, subquery: "Statement") -> "Statement":
        return self.append(Call(subquery))

    # Projection

    def return_(self, *projections: Projection, distinct: bool = False) -> "Statement":
        return self.append(Return(*projections, distinct=distinct))

    def with_(self, *projections: Projection, distinct: bool = False) -> "Statement":
        return self.append(With(*projections, distinct=distinct))

    def order_by(self, *items: Expression | tuple[Expression, str]) -> "Statement":
        return self.append(OrderBy(*items))

    def skip(self, count: int | Expression) -> "Statement":
        return self.append(Skip(count))

    def limit(self, count: int | Expression) -> "Statement":
        return self.append(Limit(count))

    # Writing

    def create(self, pattern: Pattern | Node) -> "Statement":
        return self.append(Create(pattern))

    def merge(self, pattern: Pattern | Node) -> "Statement":
        return self.append(Merge(pattern))

    def set_(self, *assignments: tuple[PropertyRef, Any]) -> "Statement":
        return self.append(Set(*assignments))

    def remove(self, *properties: PropertyRef) -> "Statement":
        return self.append(Remove(*properties))

    def delete(self, *variables: Variable) -> "Statement":
        return self.append(Delete(*variables))

    def detach_delete(self, *variables: Variable) -> "Statement":
        return self.append(Delete(*variables, detach=True))

    def build(self, settings: "Settings | None" = None) -> "CompiledQuery":
        """Compile to ``(cypher, params)``. See :func:`cypher_builder.cypher.compiler.build`."""
        from cypher_builder.cypher.compiler import build

        return build(self, settings=settings)


class Union:
    """Complete statements joined by ``UNION`` (or ``UNION ALL``)."""

    def __init__(self, *statements: Statement, all: bool = False) -> None:  # noqa: A002
        if len(statements) < 2:
            raise ConfigurationError(
                "UNION requires at least two statements",
                details=ValidationErrorDetails(
                    source="statement",
                    operation="union",
                    field="statements",
                    actual_value=len(statements),
                    constraint=">= 2",
                ),
            )
        self.statements: tuple[Statement, ...] = statements
        self.all = all

    def build(self, settings: "Settings | None" = None) -> "CompiledQuery":
        from cypher_builder.cypher.compiler import build

        return build(self, settings=settings)
