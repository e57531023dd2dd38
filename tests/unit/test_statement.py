"""
Unit tests for clause construction and statement composition.
"""

import pytest

from cypher_builder import (
    BooleanOp,
    BoolOperator,
    Call,
    ClauseType,
    ConfigurationError,
    CypherQueryState,
    Delete,
    Limit,
    Match,
    Node,
    OptionalMatch,
    OrderBy,
    Param,
    Remove,
    Return,
    Set,
    Skip,
    Statement,
    Union,
    Unwind,
    ValidationError,
    Variable,
    Where,
    With,
)
from cypher_builder.core.base import ErrorCode


@pytest.fixture
def movie():
    return Node("Movie")


@pytest.fixture
def preds(movie):
    return (
        movie.property("a").eq(1),
        movie.property("b").eq(2),
        movie.property("c").eq(3),
    )


class TestClauses:
    """Arity checks at construction."""

    def test_return_requires_projection(self):
        with pytest.raises(ConfigurationError, match="at least one projection required"):
            Return()

    def test_with_requires_projection(self):
        with pytest.raises(ConfigurationError, match="at least one projection required"):
            With()

    def test_projection_aliases(self, movie):
        clause = Return(movie, (movie.property("title"), "title"))

        assert clause.projections[0].alias is None
        assert clause.projections[1].alias == "title"

    @pytest.mark.parametrize("factory", [OrderBy, Set, Remove, Delete])
    def test_list_clauses_require_items(self, factory):
        with pytest.raises(ConfigurationError):
            factory()

    def test_order_by_direction(self, movie):
        clause = OrderBy((movie.property("title"), "desc"), movie.property("year"))

        assert clause.items[0].direction == "DESC"
        assert clause.items[1].direction is None

    def test_order_by_rejects_unknown_direction(self, movie):
        with pytest.raises(ConfigurationError, match="ASC or DESC"):
            OrderBy((movie.property("title"), "sideways"))

    @pytest.mark.parametrize("count", [-1, True, 1.5])
    def test_skip_and_limit_reject_bad_counts(self, count):
        with pytest.raises(ConfigurationError):
            Skip(count)
        with pytest.raises(ConfigurationError):
            Limit(count)

    def test_limit_count_becomes_param(self):
        clause = Limit(10)

        assert isinstance(clause.count, Param)
        assert clause.count.value == 10

    def test_set_target_must_be_property(self, movie):
        with pytest.raises(ConfigurationError, match="property reference"):
            Set((movie, 1))

    def test_call_requires_statement_body(self):
        with pytest.raises(ConfigurationError):
            Call(Statement())

    def test_unwind_creates_alias(self):
        clause = Unwind([1, 2])

        assert isinstance(clause.alias, Variable)

    def test_match_clause_types(self, movie):
        assert Match(movie).clause_type is ClauseType.MATCH
        assert OptionalMatch(movie).clause_type is ClauseType.OPTIONAL_MATCH
        assert Delete(movie, detach=True).clause_type is ClauseType.DETACH_DELETE

    def test_match_rejects_other_values(self):
        with pytest.raises(ConfigurationError):
            Match("(n)")


class TestWhereExtension:
    def test_and_appends_to_flat_group(self, preds):
        a, b, c = preds
        where = Where(a).and_(b).and_(c)

        assert isinstance(where.predicate, BooleanOp)
        assert where.predicate.op is BoolOperator.AND
        assert where.predicate.operands == (a, b, c)

    def test_or_wraps_existing_group(self, preds):
        a, b, c = preds
        where = Where(a).and_(b)
        original = where.predicate
        where.or_(c)

        assert where.predicate.op is BoolOperator.OR
        assert where.predicate.operands == (original, c)
        assert original.operands == (a, b)

    def test_where_requires_predicate(self):
        with pytest.raises(ConfigurationError):
            Where(None)

    @pytest.mark.parametrize("predicate", [True, "n.x = 1", 1])
    def test_where_rejects_non_expressions(self, predicate):
        with pytest.raises(ConfigurationError, match="must be an expression"):
            Where(predicate)

    def test_extension_rejects_non_expressions(self, preds):
        with pytest.raises(ConfigurationError):
            Where(preds[0]).and_(True)

    def test_extended_leaves_original(self, preds):
        a, b, _ = preds
        where = Where(a)
        extended = where.extended(BoolOperator.OR, b)

        assert where.predicate is a
        assert extended.predicate.operands == (a, b)


class TestStatementComposition:
    def test_where_after_where_extends(self, movie, preds):
        a, b, _ = preds
        statement = Statement().match(movie).where(a).where(b)

        assert len(statement.clauses) == 2
        assert statement.clauses[1].predicate.operands == (a, b)

    def test_where_with_several_predicates(self, movie, preds):
        statement = Statement().match(movie).where(*preds)

        assert statement.clauses[1].predicate.operands == preds

    def test_or_where(self, movie, preds):
        a, b, c = preds
        statement = Statement().match(movie).where(a, b).or_where(c)

        predicate = statement.clauses[1].predicate
        assert predicate.op is BoolOperator.OR
        assert predicate.operands[1] is c

    def test_and_where_needs_trailing_where(self, movie, preds):
        with pytest.raises(ConfigurationError) as exc_info:
            Statement().match(movie).and_where(preds[0])

        assert exc_info.value.code == ErrorCode.CLAUSE_ORDER

    def test_where_needs_a_predicate(self, movie):
        with pytest.raises(ValidationError):
            Statement().match(movie).where()

    def test_where_rejects_plain_values(self, movie):
        with pytest.raises(ConfigurationError):
            Statement().match(movie).where(True)

    def test_shared_where_is_not_changed(self, movie, preds):
        a, b, c = preds
        shared = Where(a)
        first = Statement(Match(movie), shared)
        second = Statement(Match(movie), shared).where(b).or_where(c)

        assert shared.predicate is a
        assert first.clauses[1] is shared
        assert second.clauses[1] is not shared
        assert second.clauses[1].predicate.op is BoolOperator.OR

    def test_clauses_keep_call_order(self, movie):
        statement = Statement().match(movie).with_(movie).match(Node("Person")).return_(movie)

        assert [type(c) for c in statement.clauses] == [Match, With, Match, Return]

    def test_statement_accepts_clauses(self, movie):
        statement = Statement(Match(movie), Return(movie))

        assert statement.is_complete

    def test_union_needs_two_statements(self, movie):
        with pytest.raises(ConfigurationError):
            Union(Statement().match(movie).return_(movie))


class TestClauseOrder:
    """Misplaced clauses fail at the call that appends them."""

    def test_where_cannot_start(self, preds):
        with pytest.raises(ConfigurationError, match="cannot start with WHERE"):
            Statement().where(preds[0])

    def test_nothing_after_return_but_modifiers(self, movie):
        statement = Statement().match(movie).return_(movie)

        with pytest.raises(ConfigurationError, match="Cannot add MATCH after RETURN"):
            statement.match(Node())

    def test_second_return(self, movie):
        with pytest.raises(ConfigurationError):
            Statement().match(movie).return_(movie).return_(movie)

    def test_limit_then_order_by(self, movie):
        with pytest.raises(ConfigurationError):
            Statement().match(movie).return_(movie).limit(1).order_by(movie.property("title"))

    def test_modifiers_after_with_allow_continuation(self, movie):
        statement = (
            Statement().match(movie).with_(movie).order_by(movie.property("title")).limit(5).return_(movie)
        )

        assert statement.is_complete

    def test_where_after_with(self, movie, preds):
        statement = Statement().match(movie).with_(movie).where(preds[0]).return_(movie)

        assert statement.is_complete

    def test_match_after_where(self, movie, preds):
        Statement().match(movie).where(preds[0]).match(Node("Person"))

    def test_failed_append_leaves_statement_unchanged(self, movie):
        statement = Statement().match(movie).return_(movie)

        with pytest.raises(ConfigurationError):
            statement.create(Node())

        assert len(statement.clauses) == 2


class TestCompleteness:
    def test_empty_statement(self):
        with pytest.raises(ConfigurationError, match="Statement is empty"):
            Statement().build()

    def test_match_only_is_incomplete(self, movie):
        statement = Statement().match(movie)

        assert not statement.is_complete
        with pytest.raises(ConfigurationError, match="not complete"):
            statement.build()

    def test_with_is_not_an_ending(self, movie):
        assert not Statement().match(movie).with_(movie).is_complete

    @pytest.mark.parametrize(
        "finish",
        [
            lambda s, n: s.return_(n),
            lambda s, n: s.return_(n).order_by(n).skip(1).limit(2),
            lambda s, n: s.delete(n),
            lambda s, n: s.detach_delete(n),
            lambda s, n: s.set_((n.property("seen"), True)),
            lambda s, n: s.remove(n.property("tmp")),
            lambda s, n: s.create(Node("Copy")),
            lambda s, n: s.merge(Node("Copy")),
        ],
    )
    def test_complete_endings(self, movie, finish):
        assert finish(Statement().match(movie), movie).is_complete


class TestQueryState:
    def test_valid_start_clauses(self):
        state = CypherQueryState()

        assert ClauseType.MATCH in state.valid_next()
        assert ClauseType.WHERE not in state.valid_next()
        assert ClauseType.SET not in state.valid_next()

    def test_nothing_after_limit(self):
        state = CypherQueryState()
        for clause in (ClauseType.MATCH, ClauseType.RETURN, ClauseType.LIMIT):
            state.add_clause(clause)

        assert state.valid_next() == set()
        assert state.is_complete
        assert state.current_clause is ClauseType.LIMIT

    def test_validate_can_add_reports_options(self):
        state = CypherQueryState()
        state.add_clause(ClauseType.MATCH)
        state.add_clause(ClauseType.RETURN)

        with pytest.raises(ConfigurationError) as exc_info:
            state.validate_can_add(ClauseType.WHERE)

        assert "LIMIT" in str(exc_info.value)
        assert exc_info.value.details.actual_value == "WHERE"
