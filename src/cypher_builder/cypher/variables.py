"""Query variables: nodes, relationships and plain variables.

A variable carries no identifier of its own. The build context assigns one
the first time it meets the object, so the same instance renders the same
name everywhere in a statement and two look-alike instances never collide.
Named variants pin an explicit identifier instead.
"""

from collections.abc import Mapping
from typing import Any, ClassVar

from cypher_builder.cypher.expressions import Expression, PropertyRef, as_expression

# (min, max); either bound may be open
HopRange = tuple[int | None, int | None]


class Variable(Expression):
    """A plain query variable, e.g. the target of ``UNWIND ... AS var1``."""

    # NamingConfig field holding the generated-name prefix
    naming_prefix: ClassVar[str] = "variable_prefix"

    name: str | None = None

    def property(self, *path: str) -> PropertyRef:
        """Reference a property of this variable.

        Example:
            ```python
            movie.property("title")          # this0.title
            person.property("address", "city")  # this1.address.city
            ```
        """
        return PropertyRef(self, *path)

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else f" at {id(self):#x}"
        return f"<{type(self).__name__}{label}>"


class NamedVariable(Variable):
    """A variable rendered with a caller-chosen identifier."""

    def __init__(self, name: str) -> None:
        self.name = name


def _as_properties(properties: Mapping[str, Any] | None) -> dict[str, Expression]:
    return {key: as_expression(value) for key, value in (properties or {}).items()}


class Node(Variable):
    """A node variable with labels and an optional property map.

    Args:
        *labels: Node labels, rendered in order (duplicates are dropped)
        properties: Property name to Expression; plain values become Params
    """

    naming_prefix: ClassVar[str] = "node_prefix"

    def __init__(self, *labels: str, properties: Mapping[str, Any] | None = None) -> None:
        self.labels: tuple[str, ...] = tuple(dict.fromkeys(labels))
        self.properties: dict[str, Expression] = _as_properties(properties)


class NamedNode(Node):
    def __init__(self, name: str, *labels: str, properties: Mapping[str, Any] | None = None) -> None:
        super().__init__(*labels, properties=properties)
        self.name = name


class Relationship(Variable):
    """A relationship variable.

    Direction is not stored here: it belongs to the pattern segment that
    draws the relationship, so one instance can be reused in any orientation.

    Args:
        type_: Relationship type (can be None)
        properties: Property name to Expression; plain values become Params
        hops: Variable-length quantifier. An int means an exact length,
            ``(min, max)`` a range with either end open, ``(None, None)`` any length.
    """

    naming_prefix: ClassVar[str] = "relationship_prefix"

    def __init__(
        self,
        type_: str | None = None,
        properties: Mapping[str, Any] | None = None,
        hops: int | HopRange | None = None,
    ) -> None:
        self.type = type_
        self.properties: dict[str, Expression] = _as_properties(properties)
        self.hops: HopRange | None = (hops, hops) if isinstance(hops, int) else hops


class NamedRelationship(Relationship):
    def __init__(
        self,
        name: str,
        type_: str | None = None,
        properties: Mapping[str, Any] | None = None,
        hops: int | HopRange | None = None,
    ) -> None:
        super().__init__(type_, properties=properties, hops=hops)
        self.name = name
