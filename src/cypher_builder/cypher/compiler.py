"""Compile statements into Cypher text and parameters.

The compiler walks a statement once, depth first, clause by clause and
within each clause left to right. All naming goes through one BuildContext
created for the call, so a variable used in MATCH, WHERE and RETURN gets the
same identifier in all three places.
"""

import re
import textwrap
from typing import Any, NamedTuple

import logfire

from cypher_builder.core.base import ErrorLevel
from cypher_builder.core.config import Settings
from cypher_builder.core.config import settings as default_settings
from cypher_builder.core.decorators import with_error_handling
from cypher_builder.core.logging import debug, log_context
from cypher_builder.cypher.clauses import (
    Assignment,
    Call,
    Clause,
    Create,
    Delete,
    Limit,
    Match,
    Merge,
    OrderBy,
    ProjectionItem,
    Remove,
    Return,
    Set,
    Skip,
    Unwind,
    Where,
    With,
)
from cypher_builder.cypher.environment import BuildContext, check_inline_value
from cypher_builder.cypher.expressions import (
    BooleanOp,
    Comparison,
    Expression,
    FunctionCall,
    ListExpr,
    Literal,
    MapExpr,
    MathOp,
    Not,
    NullCheck,
    Param,
    PropertyRef,
    needs_parentheses,
)
from cypher_builder.cypher.patterns import Direction, Pattern, RelationshipSegment
from cypher_builder.cypher.statement import Statement, Union
from cypher_builder.cypher.variables import HopRange, Node, Variable

_SIMPLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class CompiledQuery(NamedTuple):
    """The build output; unpacks as ``(cypher, params)``."""

    cypher: str
    params: dict[str, Any]


def escape_name(name: str) -> str:
    """Backtick-quote a label, type, key or alias unless it is a plain identifier."""
    if _SIMPLE_NAME.match(name):
        return name
    return "`" + name.replace("`", "``") + "`"


def render_literal(value: Any) -> str:
    """Render a checked literal value as Cypher text."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        # Cypher exponents take no sign for positive powers
        return repr(value).replace("e+", "e")
    if isinstance(value, int):
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'
    if isinstance(value, list | tuple):
        return "[" + ", ".join(render_literal(item) for item in value) + "]"
    if not value:
        return "{}"
    entries = ", ".join(f"{escape_name(key)}: {render_literal(item)}" for key, item in value.items())
    return "{ " + entries + " }"


def _render_hops(hops: HopRange | None) -> str:
    if hops is None:
        return ""
    low, high = hops
    if low is None and high is None:
        return "*"
    if low == high:
        return f"*{low}"
    return f"*{'' if low is None else low}..{'' if high is None else high}"


class Compiler:
    """Turns a Statement (or Union) into a CompiledQuery.

    The compiler holds configuration only; every call to ``build`` gets a
    fresh BuildContext, so identifiers are renumbered from scratch each time.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    @with_error_handling(error_level=ErrorLevel.ERROR)
    @logfire.instrument("Compile Cypher statement", extract_args=False)
    def build(self, buildable: Statement | Union) -> CompiledQuery:
        """Build the final Cypher query and parameters.

        Args:
            buildable: A complete Statement, or a Union of complete statements

        Returns:
            CompiledQuery of (cypher, params)

        Raises:
            ConfigurationError: If the statement is empty or incomplete
            UnsupportedValueError: If a param or literal value cannot be represented
            NamingConflict: If two objects claim the same explicit name
        """
        context = BuildContext(self.settings.naming)
        kind = "union" if isinstance(buildable, Union) else "statement"

        with log_context(statement_kind=kind):
            if isinstance(buildable, Union):
                cypher = self._compile_union(buildable, context)
                clause_count = sum(len(s.clauses) for s in buildable.statements)
            elif isinstance(buildable, Statement):
                buildable.validate_complete()
                cypher = self._compile_statement(buildable, context)
                clause_count = len(buildable.clauses)
            else:
                raise TypeError(f"Cannot build {type(buildable).__name__}; expected Statement or Union")

            params = context.params
            debug(
                "Compiled Cypher statement",
                clause_count=clause_count,
                variable_count=context.variable_count,
                param_count=len(params),
            )
        return CompiledQuery(cypher, params)

    # Statements

    def _compile_union(self, union: Union, context: BuildContext) -> str:
        separator = self.settings.clause_separator
        keyword = "UNION ALL" if union.all else "UNION"
        parts = []
        for statement in union.statements:
            statement.validate_complete()
            parts.append(self._compile_statement(statement, context))
        return f"{separator}{keyword}{separator}".join(parts)

    def _compile_statement(self, statement: Statement, context: BuildContext) -> str:
        return self.settings.clause_separator.join(
            self._compile_clause(clause, context) for clause in statement.clauses
        )

    # Clauses

    def _compile_clause(self, clause: Clause, context: BuildContext) -> str:
        if isinstance(clause, Match):
            keyword = "OPTIONAL MATCH" if clause.optional else "MATCH"
            return f"{keyword} {self._compile_pattern(clause.pattern, context)}"

        elif isinstance(clause, Where):
            return f"WHERE {self._compile_expr(clause.predicate, context)}"

        elif isinstance(clause, Return | With):
            keyword = "RETURN" if isinstance(clause, Return) else "WITH"
            if clause.distinct:
                keyword += " DISTINCT"
            items = ", ".join(self._compile_projection(item, context) for item in clause.projections)
            return f"{keyword} {items}"

        elif isinstance(clause, OrderBy):
            items = []
            for item in clause.items:
                text = self._compile_expr(item.expression, context)
                items.append(f"{text} {item.direction}" if item.direction else text)
            return "ORDER BY " + ", ".join(items)

        elif isinstance(clause, Skip):
            return f"SKIP {self._compile_expr(clause.count, context)}"

        elif isinstance(clause, Limit):
            return f"LIMIT {self._compile_expr(clause.count, context)}"

        elif isinstance(clause, Create):
            return f"CREATE {self._compile_pattern(clause.pattern, context)}"

        elif isinstance(clause, Merge):
            parts = [f"MERGE {self._compile_pattern(clause.pattern, context)}"]
            if clause.on_create_assignments:
                parts.append("ON CREATE SET " + self._compile_assignments(clause.on_create_assignments, context))
            if clause.on_match_assignments:
                parts.append("ON MATCH SET " + self._compile_assignments(clause.on_match_assignments, context))
            return self.settings.clause_separator.join(parts)

        elif isinstance(clause, Set):
            return "SET " + self._compile_assignments(clause.assignments, context)

        elif isinstance(clause, Remove):
            return "REMOVE " + ", ".join(self._compile_expr(p, context) for p in clause.properties)

        elif isinstance(clause, Delete):
            keyword = "DETACH DELETE" if clause.detach else "DELETE"
            return f"{keyword} " + ", ".join(self._name(v, context) for v in clause.variables)

        elif isinstance(clause, Unwind):
            expression = self._compile_expr(clause.expression, context)
            return f"UNWIND {expression} AS {self._name(clause.alias, context)}"

        elif isinstance(clause, Call):
            body = self._compile_statement(clause.statement, context)
            return "CALL {\n" + textwrap.indent(body, self.settings.indent) + "\n}"

        raise TypeError(f"Unsupported clause type: {type(clause).__name__}")

    def _compile_projection(self, item: ProjectionItem, context: BuildContext) -> str:
        text = self._compile_expr(item.expression, context)
        if item.alias is None:
            return text
        if isinstance(item.alias, Variable):
            return f"{text} AS {self._name(item.alias, context)}"
        return f"{text} AS {escape_name(item.alias)}"

    def _compile_assignments(self, assignments: tuple[Assignment, ...], context: BuildContext) -> str:
        return ", ".join(
            f"{self._compile_expr(a.target, context)} = {self._compile_expr(a.value, context)}"
            for a in assignments
        )

    def _name(self, variable: Variable, context: BuildContext) -> str:
        return escape_name(context.name_of(variable))

    # Patterns

    def _compile_pattern(self, pattern: Pattern, context: BuildContext) -> str:
        parts = []
        for element in pattern.elements:
            if isinstance(element, Node):
                parts.append(self._compile_node(element, pattern, context))
            else:
                parts.append(self._compile_segment(element, pattern, context))
        return "".join(parts)

    def _compile_node(self, node: Node, pattern: Pattern, context: BuildContext) -> str:
        name = self._name(node, context)
        if pattern.is_bound(node):
            return f"({name})"
        labels = "".join(f":{escape_name(label)}" for label in node.labels) if pattern.labels else ""
        properties = self._compile_properties(node.properties, context) if pattern.properties else ""
        return f"({name}{labels}{properties})"

    def _compile_segment(self, segment: RelationshipSegment, pattern: Pattern, context: BuildContext) -> str:
        relationship = segment.relationship
        name = self._name(relationship, context)
        rel_type = f":{escape_name(relationship.type)}" if relationship.type else ""
        hops = _render_hops(relationship.hops)
        properties = self._compile_properties(relationship.properties, context) if pattern.properties else ""
        inner = f"[{name}{rel_type}{hops}{properties}]"

        if segment.direction is Direction.RIGHT:
            return f"-{inner}->"
        if segment.direction is Direction.LEFT:
            return f"<-{inner}-"
        return f"-{inner}-"

    def _compile_properties(self, properties: dict[str, Expression], context: BuildContext) -> str:
        if not properties:
            return ""
        entries = ", ".join(
            f"{escape_name(key)}: {self._compile_expr(value, context)}" for key, value in properties.items()
        )
        return " { " + entries + " }"

    # Expressions

    def _operand(self, child: Expression, parent: Expression, context: BuildContext, right: bool = False) -> str:
        text = self._compile_expr(child, context)
        return f"({text})" if needs_parentheses(child, parent, right=right) else text

    def _compile_expr(self, expr: Expression, context: BuildContext) -> str:
        if isinstance(expr, Variable):
            return self._name(expr, context)

        elif isinstance(expr, Param):
            return "$" + escape_name(context.param_name_of(expr))

        elif isinstance(expr, Literal):
            check_inline_value(expr.value)
            return render_literal(expr.value)

        elif isinstance(expr, PropertyRef):
            path = ".".join(escape_name(key) for key in expr.path)
            return f"{self._name(expr.variable, context)}.{path}"

        elif isinstance(expr, Comparison | MathOp):
            left = self._operand(expr.left, expr, context)
            right = self._operand(expr.right, expr, context, right=True)
            return f"{left} {expr.op.value} {right}"

        elif isinstance(expr, NullCheck):
            operand = self._operand(expr.operand, expr, context)
            return f"{operand} IS NOT NULL" if expr.negated else f"{operand} IS NULL"

        elif isinstance(expr, BooleanOp):
            return f" {expr.op.value} ".join(self._operand(o, expr, context) for o in expr.operands)

        elif isinstance(expr, Not):
            return f"NOT {self._operand(expr.operand, expr, context)}"

        elif isinstance(expr, FunctionCall):
            args = ", ".join(self._compile_expr(arg, context) for arg in expr.args)
            return f"{expr.name}({'DISTINCT ' if expr.distinct else ''}{args})"

        elif isinstance(expr, ListExpr):
            return "[" + ", ".join(self._compile_expr(item, context) for item in expr.items) + "]"

        elif isinstance(expr, MapExpr):
            if not expr.entries:
                return "{}"
            entries = ", ".join(
                f"{escape_name(key)}: {self._compile_expr(value, context)}" for key, value in expr.entries.items()
            )
            return "{ " + entries + " }"

        raise TypeError(f"Unsupported expression type: {type(expr).__name__}")


def build(buildable: Statement | Union, settings: Settings | None = None) -> CompiledQuery:
    """Compile a statement with a fresh build context.

    Example:
        ```python
        query, params = build(statement)
        ```
    """
    return Compiler(settings).build(buildable)
