"""Helpers for common Cypher functions.

Each helper returns a FunctionCall; anything that is not already an
Expression is sent as a parameter.
"""

from typing import Any

from cypher_builder.cypher.expressions import FunctionCall
from cypher_builder.cypher.variables import Node, Relationship, Variable


# Aggregations


def count(expression: Any, distinct: bool = False) -> FunctionCall:
    return FunctionCall("count", expression, distinct=distinct)


def collect(expression: Any, distinct: bool = False) -> FunctionCall:
    return FunctionCall("collect", expression, distinct=distinct)


def sum_(expression: Any) -> FunctionCall:
    return FunctionCall("sum", expression)


def avg(expression: Any) -> FunctionCall:
    return FunctionCall("avg", expression)


def min_(expression: Any) -> FunctionCall:
    return FunctionCall("min", expression)


def max_(expression: Any) -> FunctionCall:
    return FunctionCall("max", expression)


# Scalar and list functions


def coalesce(*expressions: Any) -> FunctionCall:
    """First non-null argument."""
    return FunctionCall("coalesce", *expressions)


def size(expression: Any) -> FunctionCall:
    return FunctionCall("size", expression)


def head(expression: Any) -> FunctionCall:
    return FunctionCall("head", expression)


def last(expression: Any) -> FunctionCall:
    return FunctionCall("last", expression)


def keys(variable: Variable) -> FunctionCall:
    return FunctionCall("keys", variable)


def properties(variable: Variable) -> FunctionCall:
    return FunctionCall("properties", variable)


def element_id(variable: Variable) -> FunctionCall:
    return FunctionCall("elementId", variable)


def labels(node: Node) -> FunctionCall:
    return FunctionCall("labels", node)


def type_(relationship: Relationship) -> FunctionCall:
    return FunctionCall("type", relationship)


# String functions


def to_lower(expression: Any) -> FunctionCall:
    return FunctionCall("toLower", expression)


def to_upper(expression: Any) -> FunctionCall:
    return FunctionCall("toUpper", expression)


def to_string(expression: Any) -> FunctionCall:
    return FunctionCall("toString", expression)


def trim(expression: Any) -> FunctionCall:
    return FunctionCall("trim", expression)
