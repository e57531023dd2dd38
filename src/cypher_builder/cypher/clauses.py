"""Clause model.

Each clause class is one tagged variant: it names its ClauseType and holds
the patterns, expressions and variables it needs. Arity is checked when the
clause is constructed.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar, NamedTuple

from cypher_builder.core.base import ValidationErrorDetails
from cypher_builder.core.errors import ConfigurationError
from cypher_builder.cypher.expressions import (
    BoolOperator,
    Expression,
    Param,
    PropertyRef,
    as_expression,
    extend_group,
)
from cypher_builder.cypher.patterns import Pattern
from cypher_builder.cypher.state import ClauseType
from cypher_builder.cypher.variables import Node, Variable

if TYPE_CHECKING:
    from cypher_builder.cypher.statement import Statement


def _missing(clause: str, field: str, message: str) -> ConfigurationError:
    return ConfigurationError(
        message,
        details=ValidationErrorDetails(source="clauses", operation=clause, field=field, constraint="non-empty"),
    )


def _as_pattern(pattern: Pattern | Node) -> Pattern:
    if isinstance(pattern, Node):
        return Pattern(pattern)
    if not isinstance(pattern, Pattern):
        raise ConfigurationError(
            f"Expected a Pattern or Node, got {type(pattern).__name__}",
            details=ValidationErrorDetails(
                source="clauses", operation="pattern", field="pattern", actual_value=repr(pattern)
            ),
        )
    return pattern


class Clause:
    """Base class for all clauses."""

    clause_type: ClassVar[ClauseType]


class Match(Clause):
    """``MATCH pattern`` or, with ``optional=True``, ``OPTIONAL MATCH pattern``."""

    def __init__(self, pattern: Pattern | Node, optional: bool = False) -> None:
        self.pattern = _as_pattern(pattern)
        self.optional = optional

    @property
    def clause_type(self) -> ClauseType:  # type: ignore[override]
        return ClauseType.OPTIONAL_MATCH if self.optional else ClauseType.MATCH


class OptionalMatch(Match):
    def __init__(self, pattern: Pattern | Node) -> None:
        super().__init__(pattern, optional=True)


def _check_predicate(predicate: Any) -> Expression:
    if not isinstance(predicate, Expression):
        raise ConfigurationError(
            f"WHERE predicate must be an expression, got {type(predicate).__name__}",
            details=ValidationErrorDetails(
                source="clauses", operation="where", field="predicate", actual_value=repr(predicate)
            ),
        )
    return predicate


class Where(Clause):
    """A filter clause with an extensible root predicate.

    ``and_``/``or_`` replace the root with an extended group: extending with
    the root's own operator appends to its operand list, a different operator
    wraps the old root. Existing sub-expressions are kept as they are.
    """

    clause_type = ClauseType.WHERE

    def __init__(self, predicate: Expression) -> None:
        if predicate is None:
            raise _missing("where", "predicate", "WHERE requires a predicate")
        self.predicate: Expression = _check_predicate(predicate)

    def and_(self, *predicates: Expression) -> "Where":
        self.predicate = self._extended(BoolOperator.AND, predicates)
        return self

    def or_(self, *predicates: Expression) -> "Where":
        self.predicate = self._extended(BoolOperator.OR, predicates)
        return self

    def extended(self, op: BoolOperator, *predicates: Expression) -> "Where":
        """Return a new Where with the predicates added; this clause is left as is."""
        return Where(self._extended(op, predicates))

    def _extended(self, op: BoolOperator, predicates: Sequence[Expression]) -> Expression:
        return extend_group(op, self.predicate, [_check_predicate(p) for p in predicates])


class ProjectionItem(NamedTuple):
    expression: Expression
    alias: str | Variable | None = None


Projection = Expression | tuple[Expression, str | Variable]


def _projection_items(clause: str, projections: Sequence[Any]) -> tuple[ProjectionItem, ...]:
    if not projections:
        raise _missing(clause, "projections", "at least one projection required")
    items = []
    for projection in projections:
        if isinstance(projection, tuple):
            expression, alias = projection
            items.append(ProjectionItem(as_expression(expression), alias))
        else:
            items.append(ProjectionItem(as_expression(projection)))
    return tuple(items)


class Return(Clause):
    """``RETURN [DISTINCT] expr [AS alias], ...``

    Args:
        *projections: Expressions, or ``(expression, alias)`` pairs where the
            alias is a string or a Variable

    Raises:
        ConfigurationError: If no projection is given
    """

    clause_type = ClauseType.RETURN

    def __init__(self, *projections: Projection, distinct: bool = False) -> None:
        self.projections = _projection_items("return", projections)
        self.distinct = distinct


class With(Clause):
    """``WITH [DISTINCT] expr [AS alias], ...``; same projection rules as Return."""

    clause_type = ClauseType.WITH

    def __init__(self, *projections: Projection, distinct: bool = False) -> None:
        self.projections = _projection_items("with", projections)
        self.distinct = distinct


class SortItem(NamedTuple):
    expression: Expression
    direction: str | None = None


class OrderBy(Clause):
    """``ORDER BY expr [ASC|DESC], ...``"""

    clause_type = ClauseType.ORDER_BY

    def __init__(self, *items: Expression | tuple[Expression, str]) -> None:
        if not items:
            raise _missing("order_by", "items", "ORDER BY requires at least one sort item")
        sort_items = []
        for item in items:
            if isinstance(item, tuple):
                expression, direction = item
                direction = direction.upper()
                if direction not in ("ASC", "DESC"):
                    raise ConfigurationError(
                        f"Sort direction must be ASC or DESC, got {direction!r}",
                        details=ValidationErrorDetails(
                            source="clauses",
                            operation="order_by",
                            field="direction",
                            actual_value=direction,
                            constraint="ASC | DESC",
                        ),
                    )
                sort_items.append(SortItem(as_expression(expression), direction))
            else:
                sort_items.append(SortItem(as_expression(item)))
        self.items: tuple[SortItem, ...] = tuple(sort_items)


def _count(clause: str, count: int | Expression) -> Expression:
    if isinstance(count, Expression):
        return count
    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        raise ConfigurationError(
            f"{clause.upper()} requires a non-negative integer, got {count!r}",
            details=ValidationErrorDetails(
                source="clauses", operation=clause, field="count", actual_value=count, constraint=">= 0"
            ),
        )
    return Param(count)


class Skip(Clause):
    """``SKIP $param``; integer counts are sent as parameters."""

    clause_type = ClauseType.SKIP

    def __init__(self, count: int | Expression) -> None:
        self.count = _count("skip", count)


class Limit(Clause):
    """``LIMIT $param``; integer counts are sent as parameters."""

    clause_type = ClauseType.LIMIT

    def __init__(self, count: int | Expression) -> None:
        self.count = _count("limit", count)


class Create(Clause):
    clause_type = ClauseType.CREATE

    def __init__(self, pattern: Pattern | Node) -> None:
        self.pattern = _as_pattern(pattern)


class Assignment(NamedTuple):
    target: PropertyRef
    value: Expression


def _assignments(clause: str, assignments: Sequence[tuple[PropertyRef, Any]]) -> tuple[Assignment, ...]:
    items = []
    for target, value in assignments:
        if not isinstance(target, PropertyRef):
            raise ConfigurationError(
                f"{clause.upper()} target must be a property reference, got {type(target).__name__}",
                details=ValidationErrorDetails(
                    source="clauses", operation=clause, field="target", actual_value=repr(target)
                ),
            )
        items.append(Assignment(target, as_expression(value)))
    return tuple(items)


class Merge(Clause):
    """``MERGE pattern`` with optional ``ON CREATE SET`` / ``ON MATCH SET`` actions."""

    clause_type = ClauseType.MERGE

    def __init__(self, pattern: Pattern | Node) -> None:
        self.pattern = _as_pattern(pattern)
        self.on_create_assignments: tuple[Assignment, ...] = ()
        self.on_match_assignments: tuple[Assignment, ...] = ()

    def on_create(self, *assignments: tuple[PropertyRef, Any]) -> "Merge":
        self.on_create_assignments += _assignments("on_create", assignments)
        return self

    def on_match(self, *assignments: tuple[PropertyRef, Any]) -> "Merge":
        self.on_match_assignments += _assignments("on_match", assignments)
        return self


class Set(Clause):
    """``SET this0.title = $param0, ...``

    Example:
        ```python
        Set((movie.property("title"), "The Matrix"), (movie.property("year"), 1999))
        ```
    """

    clause_type = ClauseType.SET

    def __init__(self, *assignments: tuple[PropertyRef, Any]) -> None:
        if not assignments:
            raise _missing("set", "assignments", "SET requires at least one assignment")
        self.assignments = _assignments("set", assignments)


class Remove(Clause):
    clause_type = ClauseType.REMOVE

    def __init__(self, *properties: PropertyRef) -> None:
        if not properties:
            raise _missing("remove", "properties", "REMOVE requires at least one property")
        self.properties: tuple[PropertyRef, ...] = properties


class Delete(Clause):
    """``DELETE var, ...`` or, with ``detach=True``, ``DETACH DELETE var, ...``."""

    def __init__(self, *variables: Variable, detach: bool = False) -> None:
        if not variables:
            raise _missing("delete", "variables", "DELETE requires at least one variable")
        self.variables: tuple[Variable, ...] = variables
        self.detach = detach

    @property
    def clause_type(self) -> ClauseType:  # type: ignore[override]
        return ClauseType.DETACH_DELETE if self.detach else ClauseType.DELETE


class Unwind(Clause):
    """``UNWIND expr AS var``; the alias is a fresh Variable unless one is given."""

    clause_type = ClauseType.UNWIND

    def __init__(self, expression: Any, alias: Variable | None = None) -> None:
        self.expression = as_expression(expression)
        self.alias = alias if alias is not None else Variable()


class Call(Clause):
    """``CALL { subquery }``; the subquery shares naming with the outer statement."""

    clause_type = ClauseType.CALL

    def __init__(self, statement: "Statement") -> None:
        if not statement.clauses:
            raise _missing("call", "statement", "CALL requires a non-empty subquery")
        self.statement = statement
