"""Pattern builders for Cypher queries.

This module provides the node/relationship chains used by MATCH, CREATE and
MERGE, plus a fluent builder to assemble them.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cypher_builder.core.base import ErrorCode, ValidationErrorDetails
from cypher_builder.core.errors import ValidationError
from cypher_builder.cypher.variables import Node, Relationship


class Direction(str, Enum):
    """Arrowhead placement for a relationship segment.

    ``RIGHT`` renders ``-[]->``, ``LEFT`` renders ``<-[]-`` and ``NONE``
    renders ``-[]-``. The adjacent nodes never move.
    """

    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


@dataclass(frozen=True, eq=False)
class RelationshipSegment:
    """A relationship as drawn at one position of a pattern."""

    relationship: Relationship
    direction: Direction = Direction.RIGHT


PatternElement = Node | RelationshipSegment


def _invalid(
    message: str,
    position: int | None = None,
    value: Any = None,
    constraint: str | None = None,
) -> ValidationError:
    return ValidationError(
        message,
        details=ValidationErrorDetails(
            source="patterns",
            operation="construct",
            field=f"elements[{position}]" if position is not None else "elements",
            actual_value=repr(value) if value is not None else None,
            constraint=constraint,
        ),
        code=ErrorCode.PATTERN_INVALID,
    )


def _segment(element: Any, position: int) -> RelationshipSegment:
    if isinstance(element, RelationshipSegment):
        return element
    if isinstance(element, Relationship):
        return RelationshipSegment(element)
    if isinstance(element, tuple) and len(element) == 2 and isinstance(element[0], Relationship):
        try:
            direction = Direction(element[1])
        except ValueError:
            raise _invalid(
                f"Unknown relationship direction {element[1]!r}",
                position,
                element[1],
                "one of: left, right, none",
            ) from None
        return RelationshipSegment(element[0], direction)
    raise _invalid(
        f"Expected a relationship at position {position}, got {type(element).__name__}",
        position,
        element,
        "pattern must alternate node and relationship",
    )


def _check_hops(relationship: Relationship, position: int) -> None:
    hops = relationship.hops
    if hops is None:
        return
    if not isinstance(hops, tuple) or len(hops) != 2:
        raise _invalid("Hop quantifier must be an int or a (min, max) pair", position, hops)
    low, high = hops
    for bound in hops:
        if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int) or bound < 0):
            raise _invalid("Hop bounds must be non-negative integers", position, hops, ">= 0")
    if low is not None and high is not None and low > high:
        raise _invalid("Hop minimum exceeds maximum", position, hops, "min <= max")


class Pattern:
    """An alternating chain ``Node (Relationship Node)*``.

    Elements are validated on construction so malformed chains fail where
    they are written rather than at build time.

    Args:
        *elements: Nodes and relationships. A relationship may be given bare
            (drawn left to right), as a ``(relationship, direction)`` pair, or
            as a RelationshipSegment.
        labels: Render node labels. Relationship types are always rendered.
        properties: Render property maps
        bound: Nodes declared by an earlier clause. They render as their
            bare name, e.g. ``(this0)``, while the other nodes of the
            pattern keep their labels and properties.

    Example:
        ```python
        # MATCH (this0:Person) MATCH (this1:Movie) CREATE (this0)-[this2:ACTED_IN]->(this1)
        Pattern(person, acted_in, movie, bound=(person, movie))
        ```
    """

    def __init__(
        self,
        *elements: Any,
        labels: bool = True,
        properties: bool = True,
        bound: Iterable[Node] = (),
    ) -> None:
        if not elements:
            raise _invalid("Pattern needs at least one node", constraint="non-empty")

        normalized: list[PatternElement] = []
        for position, element in enumerate(elements):
            if position % 2 == 0:
                if not isinstance(element, Node):
                    raise _invalid(
                        f"Expected a node at position {position}, got {type(element).__name__}",
                        position,
                        element,
                        "pattern must alternate node and relationship",
                    )
                normalized.append(element)
            else:
                segment = _segment(element, position)
                _check_hops(segment.relationship, position)
                normalized.append(segment)

        if not isinstance(normalized[-1], Node):
            raise _invalid(
                "Pattern must end on a node",
                len(normalized) - 1,
                elements[-1],
                "pattern must start and end on a node",
            )

        bound_nodes = tuple(bound)
        for node in bound_nodes:
            if not any(node is element for element in normalized):
                raise _invalid(
                    f"Bound node {node!r} is not part of the pattern",
                    value=node,
                    constraint="bound nodes must appear in the pattern",
                )

        self.elements: tuple[PatternElement, ...] = tuple(normalized)
        self.labels = labels
        self.properties = properties
        self.bound = bound_nodes

    def is_bound(self, node: Node) -> bool:
        return any(node is b for b in self.bound)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(e for e in self.elements if isinstance(e, Node))

    @property
    def segments(self) -> tuple[RelationshipSegment, ...]:
        return tuple(e for e in self.elements if isinstance(e, RelationshipSegment))

    def __iter__(self) -> Iterator[PatternElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)


class PatternBuilder:
    """Fluent builder for Cypher patterns.

    Example:
        ```python
        pattern = PatternBuilder().node(person).rel_to(acted_in).node(movie).build()
        ```
    """

    def __init__(self) -> None:
        """Initialize a new pattern builder."""
        self._elements: list[Any] = []
        self._bound: list[Node] = []

    def node(self, node: Node | None = None, bound: bool = False) -> "PatternBuilder":
        """Add a node; a fresh anonymous node is used when none is given.

        Args:
            node: Node variable to place in the chain
            bound: The node was declared by an earlier clause; render its name only

        Returns:
            Self for method chaining
        """
        node = node if node is not None else Node()
        self._elements.append(node)
        if bound:
            self._bound.append(node)
        return self

    def relationship(
        self,
        relationship: Relationship | None = None,
        direction: Direction | str = Direction.RIGHT,
    ) -> "PatternBuilder":
        """Add a relationship segment.

        Args:
            relationship: Relationship variable; a fresh untyped one when omitted
            direction: Arrowhead placement

        Returns:
            Self for method chaining
        """
        rel = relationship if relationship is not None else Relationship()
        self._elements.append((rel, direction))
        return self

    def rel_to(self, relationship: Relationship | None = None) -> "PatternBuilder":
        """Add an outgoing relationship (shorthand for relationship(direction=RIGHT))."""
        return self.relationship(relationship, Direction.RIGHT)

    def rel_from(self, relationship: Relationship | None = None) -> "PatternBuilder":
        """Add an incoming relationship (shorthand for relationship(direction=LEFT))."""
        return self.relationship(relationship, Direction.LEFT)

    def rel(self, relationship: Relationship | None = None) -> "PatternBuilder":
        """Add an undirected relationship (shorthand for relationship(direction=NONE))."""
        return self.relationship(relationship, Direction.NONE)

    def build(self, labels: bool = True, properties: bool = True) -> Pattern:
        """Validate the chain and return the Pattern.

        Raises:
            ValidationError: If the chain does not alternate node/relationship
        """
        return Pattern(*self._elements, labels=labels, properties=properties, bound=self._bound)
