"""Cypher AST and compiler.

This package provides the node/relationship/expression/clause model and the
compiler that turns it into query text plus parameters.
"""

from .clauses import (
    Call,
    Clause,
    Create,
    Delete,
    Limit,
    Match,
    Merge,
    OptionalMatch,
    OrderBy,
    Remove,
    Return,
    Set,
    Skip,
    Unwind,
    Where,
    With,
)
from .compiler import CompiledQuery, Compiler, build
from .environment import BuildContext
from .expressions import (
    BooleanOp,
    BoolOperator,
    Comparison,
    ComparisonOperator,
    Expression,
    FunctionCall,
    ListExpr,
    Literal,
    MapExpr,
    MathOp,
    MathOperator,
    Not,
    NullCheck,
    Param,
    PropertyRef,
    and_,
    contains,
    divide,
    ends_with,
    eq,
    gt,
    gte,
    in_,
    is_not_null,
    is_null,
    lt,
    lte,
    matches,
    minus,
    mod,
    multiply,
    neq,
    not_,
    or_,
    plus,
    pow_,
    starts_with,
    xor,
)
from .patterns import Direction, Pattern, PatternBuilder, RelationshipSegment
from .state import ClauseType, CypherQueryState
from .statement import Statement, Union
from .variables import NamedNode, NamedRelationship, NamedVariable, Node, Relationship, Variable

__all__ = [
    "BoolOperator",
    "BooleanOp",
    "BuildContext",
    "Call",
    "Clause",
    "ClauseType",
    "CompiledQuery",
    "Comparison",
    "ComparisonOperator",
    "Compiler",
    "Create",
    "CypherQueryState",
    "Delete",
    "Direction",
    "Expression",
    "FunctionCall",
    "Limit",
    "ListExpr",
    "Literal",
    "MapExpr",
    "Match",
    "MathOp",
    "MathOperator",
    "Merge",
    "NamedNode",
    "NamedRelationship",
    "NamedVariable",
    "Node",
    "Not",
    "NullCheck",
    "OptionalMatch",
    "OrderBy",
    "Param",
    "Pattern",
    "PatternBuilder",
    "PropertyRef",
    "Relationship",
    "RelationshipSegment",
    "Remove",
    "Return",
    "Set",
    "Skip",
    "Statement",
    "Union",
    "Unwind",
    "Variable",
    "Where",
    "With",
    "and_",
    "build",
    "contains",
    "divide",
    "ends_with",
    "eq",
    "gt",
    "gte",
    "in_",
    "is_not_null",
    "is_null",
    "lt",
    "lte",
    "matches",
    "minus",
    "mod",
    "multiply",
    "neq",
    "not_",
    "or_",
    "plus",
    "pow_",
    "starts_with",
    "xor",
]
