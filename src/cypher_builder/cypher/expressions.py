"""Expression model for Cypher predicates and projections.

Expressions are immutable trees of plain Python objects. They never define
``__eq__`` or ``__hash__``: identity is the only equivalence, which is what
lets the build context key its name tables on the objects themselves.

Rendering lives in the compiler; this module only describes shapes and the
precedence rules the compiler consults when deciding on parentheses.
"""

import builtins
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any

from cypher_builder.core.base import ErrorCode, ValidationErrorDetails
from cypher_builder.core.errors import ValidationError

if TYPE_CHECKING:
    from cypher_builder.cypher.variables import Variable


class Precedence(IntEnum):
    """Binding strength of an expression, loosest first."""

    OR = 1
    XOR = 2
    AND = 3
    COMPARISON = 4
    NOT = 5
    ADDITIVE = 6
    MULTIPLICATIVE = 7
    POWER = 8
    ATOM = 10


class BoolOperator(str, Enum):
    AND = "AND"
    OR = "OR"
    XOR = "XOR"

    @property
    def precedence(self) -> Precedence:
        return Precedence[self.name]


class ComparisonOperator(str, Enum):
    EQ = "="
    NEQ = "<>"
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS WITH"
    ENDS_WITH = "ENDS WITH"
    IN = "IN"
    MATCHES = "=~"


class MathOperator(str, Enum):
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MOD = "%"
    POW = "^"

    @property
    def precedence(self) -> Precedence:
        if self is MathOperator.POW:
            return Precedence.POWER
        if self in (MathOperator.PLUS, MathOperator.MINUS):
            return Precedence.ADDITIVE
        return Precedence.MULTIPLICATIVE


class Expression:
    """Base class for every renderable Cypher expression.

    Offers the shorthand combinators used to grow predicates fluently.
    Chaining the same combinator extends one flat group instead of nesting:
    ``a.and_(b).and_(c)`` is a single ``AND`` with three operands.
    """

    precedence: Precedence = Precedence.ATOM

    def and_(self, *others: "Expression") -> "BooleanOp":
        return extend_group(BoolOperator.AND, self, others)

    def or_(self, *others: "Expression") -> "BooleanOp":
        return extend_group(BoolOperator.OR, self, others)

    def xor(self, *others: "Expression") -> "BooleanOp":
        return extend_group(BoolOperator.XOR, self, others)

    def not_(self) -> "Not":
        return Not(self)

    def __and__(self, other: "Expression") -> "BooleanOp":
        return self.and_(other)

    def __or__(self, other: "Expression") -> "BooleanOp":
        return self.or_(other)

    def __invert__(self) -> "Not":
        return self.not_()

    # Comparison shorthands
    def eq(self, other: Any) -> "Comparison":
        return eq(self, other)

    def neq(self, other: Any) -> "Comparison":
        return neq(self, other)

    def lt(self, other: Any) -> "Comparison":
        return lt(self, other)

    def lte(self, other: Any) -> "Comparison":
        return lte(self, other)

    def gt(self, other: Any) -> "Comparison":
        return gt(self, other)

    def gte(self, other: Any) -> "Comparison":
        return gte(self, other)

    def contains(self, other: Any) -> "Comparison":
        return contains(self, other)

    def starts_with(self, other: Any) -> "Comparison":
        return starts_with(self, other)

    def ends_with(self, other: Any) -> "Comparison":
        return ends_with(self, other)

    def in_(self, other: Any) -> "Comparison":
        return in_(self, other)

    def is_null(self) -> "NullCheck":
        return NullCheck(self)

    def is_not_null(self) -> "NullCheck":
        return NullCheck(self, negated=True)


class Param(Expression):
    """A literal value hoisted out of the query text into the params map.

    Two Params holding equal values are still two distinct parameters.

    Args:
        value: The literal value sent alongside the query
        name: Optional explicit parameter name; generated when omitted
    """

    def __init__(self, value: Any, name: str | None = None) -> None:
        self.value = value
        self.name = name

    def __repr__(self) -> str:
        label = f" name={self.name!r}" if self.name else ""
        return f"<Param{label} value={self.value!r}>"


class Literal(Expression):
    """A value rendered inline into the query text."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"<Literal {self.value!r}>"


class PropertyRef(Expression):
    """Property access on a variable, e.g. ``this0.title`` or ``this0.address.city``."""

    def __init__(self, variable: "Variable", *path: str) -> None:
        if not path:
            raise ValidationError(
                "Property reference needs at least one key",
                details=ValidationErrorDetails(
                    source="expressions", operation="property", field="path", constraint="non-empty"
                ),
                code=ErrorCode.EXPRESSION_INVALID,
            )
        self.variable = variable
        self.path: tuple[str, ...] = path

    def property(self, *path: str) -> "PropertyRef":
        return PropertyRef(self.variable, *self.path, *path)

    @builtins.property
    def key(self) -> str:
        return self.path[-1]


class Comparison(Expression):
    precedence = Precedence.COMPARISON

    def __init__(self, op: ComparisonOperator | str, left: Any, right: Any) -> None:
        self.op = ComparisonOperator(op)
        self.left = as_expression(left)
        self.right = as_expression(right)


class NullCheck(Expression):
    """``x IS NULL`` or ``x IS NOT NULL``."""

    precedence = Precedence.COMPARISON

    def __init__(self, operand: Any, negated: bool = False) -> None:
        self.operand = as_expression(operand)
        self.negated = negated


class BooleanOp(Expression):
    """An ``AND``/``OR``/``XOR`` group over two or more operands."""

    def __init__(self, op: BoolOperator | str, operands: Iterable[Expression]) -> None:
        self.op = BoolOperator(op)
        self.operands: tuple[Expression, ...] = tuple(as_expression(o) for o in operands)
        if len(self.operands) < 2:
            raise ValidationError(
                f"{self.op.value} needs at least two operands, got {len(self.operands)}",
                details=ValidationErrorDetails(
                    source="expressions",
                    operation="boolean_op",
                    field="operands",
                    actual_value=len(self.operands),
                    constraint=">= 2",
                ),
                code=ErrorCode.EXPRESSION_INVALID,
            )

    @property
    def precedence(self) -> Precedence:  # type: ignore[override]
        return self.op.precedence


class Not(Expression):
    precedence = Precedence.NOT

    def __init__(self, operand: Expression) -> None:
        self.operand = as_expression(operand)


class MathOp(Expression):
    def __init__(self, op: MathOperator | str, left: Any, right: Any) -> None:
        self.op = MathOperator(op)
        self.left = as_expression(left)
        self.right = as_expression(right)

    @property
    def precedence(self) -> Precedence:  # type: ignore[override]
        return self.op.precedence


class FunctionCall(Expression):
    """A call such as ``count(this0)`` or ``collect(DISTINCT this1.name)``."""

    def __init__(self, name: str, *args: Any, distinct: bool = False) -> None:
        self.name = name
        self.args: tuple[Expression, ...] = tuple(as_expression(a) for a in args)
        self.distinct = distinct


class ListExpr(Expression):
    """A list built from expressions, e.g. ``[this0.title, $param0]``."""

    def __init__(self, items: Sequence[Any]) -> None:
        self.items: tuple[Expression, ...] = tuple(as_expression(i) for i in items)


class MapExpr(Expression):
    """A map built from expressions, e.g. ``{ title: this0.title }``."""

    def __init__(self, entries: Mapping[str, Any]) -> None:
        self.entries: dict[str, Expression] = {k: as_expression(v) for k, v in entries.items()}


def as_expression(value: Any) -> Expression:
    """Return ``value`` if it is an Expression, otherwise hoist it into a Param."""
    if isinstance(value, Expression):
        return value
    return Param(value)


def extend_group(op: BoolOperator, head: Expression, others: Sequence[Expression]) -> BooleanOp:
    if isinstance(head, BooleanOp) and head.op is op:
        return BooleanOp(op, [*head.operands, *others])
    return BooleanOp(op, [head, *others])


def needs_parentheses(child: Expression, parent: Expression, right: bool = False) -> bool:
    """Decide whether ``child`` must be wrapped when rendered as an operand of ``parent``.

    A child binding looser than its parent is wrapped, as is one binding
    equally under a different operator. ``NOT`` wraps any non-atomic operand,
    and a ``NOT`` used inside a comparison or arithmetic is wrapped too.

    Args:
        child: The operand being rendered
        parent: The operator expression containing it
        right: Whether the child is the right-hand operand of a binary operator

    Returns:
        True if the child must be parenthesized
    """
    child_prec = child.precedence
    parent_prec = parent.precedence

    if isinstance(parent, Not):
        return child_prec < Precedence.ATOM
    if isinstance(child, Not):
        return not isinstance(parent, BooleanOp)
    if child_prec != parent_prec:
        return child_prec < parent_prec

    if isinstance(parent, BooleanOp):
        return not (isinstance(child, BooleanOp) and child.op is parent.op)
    if isinstance(parent, MathOp) and isinstance(child, MathOp):
        associative = child.op is parent.op and parent.op in (MathOperator.PLUS, MathOperator.MULTIPLY)
        # Left-associative: a - b - c == (a - b) - c, but a - (b - c) needs parens
        return not associative and (right or child.op is not parent.op or parent.op is MathOperator.POW)
    # Comparisons do not chain
    return True


# Factories


def eq(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.EQ, left, right)


def neq(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.NEQ, left, right)


def lt(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.LT, left, right)


def lte(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.LTE, left, right)


def gt(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.GT, left, right)


def gte(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.GTE, left, right)


def contains(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.CONTAINS, left, right)


def starts_with(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.STARTS_WITH, left, right)


def ends_with(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.ENDS_WITH, left, right)


def in_(left: Any, right: Any) -> Comparison:
    return Comparison(ComparisonOperator.IN, left, right)


def matches(left: Any, right: Any) -> Comparison:
    """Regular expression match (``=~``)."""
    return Comparison(ComparisonOperator.MATCHES, left, right)


def is_null(operand: Any) -> NullCheck:
    return NullCheck(operand)


def is_not_null(operand: Any) -> NullCheck:
    return NullCheck(operand, negated=True)


def _combine(op: BoolOperator, operands: tuple[Expression | None, ...]) -> Expression:
    present = [o for o in operands if o is not None]
    if not present:
        raise ValidationError(
            f"{op.value} needs at least one operand",
            details=ValidationErrorDetails(
                source="expressions", operation=op.value.lower(), field="operands", constraint=">= 1"
            ),
            code=ErrorCode.EXPRESSION_INVALID,
        )
    if len(present) == 1:
        return present[0]
    return BooleanOp(op, present)


def and_(*operands: Expression | None) -> Expression:
    """Explicit ``AND`` group. ``None`` operands are skipped; a single operand is returned as is."""
    return _combine(BoolOperator.AND, operands)


def or_(*operands: Expression | None) -> Expression:
    """Explicit ``OR`` group. ``None`` operands are skipped; a single operand is returned as is."""
    return _combine(BoolOperator.OR, operands)


def xor(*operands: Expression | None) -> Expression:
    return _combine(BoolOperator.XOR, operands)


def not_(operand: Expression) -> Not:
    return Not(operand)


def plus(left: Any, right: Any) -> MathOp:
    return MathOp(MathOperator.PLUS, left, right)


def minus(left: Any, right: Any) -> MathOp:
    return MathOp(MathOperator.MINUS, left, right)


def multiply(left: Any, right: Any) -> MathOp:
    return MathOp(MathOperator.MULTIPLY, left, right)


def divide(left: Any, right: Any) -> MathOp:
    return MathOp(MathOperator.DIVIDE, left, right)


def mod(left: Any, right: Any) -> MathOp:
    return MathOp(MathOperator.MOD, left, right)


def pow_(left: Any, right: Any) -> MathOp:
    return MathOp(MathOperator.POW, left, right)
