"""Programmatic builder for Cypher queries.

Assemble nodes, relationships, patterns, predicates and clauses as Python
objects, then compile them into query text and a parameter map.
"""

from cypher_builder.core.errors import (
    ConfigurationError,
    NamingConflict,
    UnsupportedValueError,
    ValidationError,
)
from cypher_builder.cypher import *  # noqa: F403
from cypher_builder.cypher import __all__ as _cypher_all
from cypher_builder.cypher import functions

__all__ = [
    "ConfigurationError",
    "NamingConflict",
    "UnsupportedValueError",
    "ValidationError",
    "functions",
    *_cypher_all,
]
