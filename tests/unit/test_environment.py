"""
Unit tests for per-build naming and value checks.
"""

from datetime import datetime

import pytest

from cypher_builder import (
    BuildContext,
    NamedNode,
    NamedVariable,
    NamingConflict,
    Node,
    Param,
    Relationship,
    UnsupportedValueError,
    Variable,
)
from cypher_builder.core.base import ErrorCode
from cypher_builder.core.config import NamingConfig
from cypher_builder.cypher.environment import check_inline_value, check_value


@pytest.fixture
def context():
    return BuildContext()


class TestVariableNaming:
    def test_same_object_same_name(self, context):
        movie = Node("Movie")

        assert context.name_of(movie) == "this0"
        assert context.name_of(movie) == "this0"
        assert context.variable_count == 1

    def test_equal_looking_nodes_get_distinct_names(self, context):
        first, second = Node("Movie"), Node("Movie")

        assert context.name_of(first) != context.name_of(second)

    def test_shared_positional_counter(self, context):
        assert context.name_of(Node()) == "this0"
        assert context.name_of(Relationship()) == "this1"
        assert context.name_of(Variable()) == "var2"

    def test_explicit_name_is_used_verbatim(self, context):
        assert context.name_of(NamedNode("n1", "Movie")) == "n1"

    def test_explicit_name_conflict(self, context):
        context.name_of(NamedNode("n"))

        with pytest.raises(NamingConflict) as exc_info:
            context.name_of(NamedVariable("n"))

        assert exc_info.value.name == "n"
        assert exc_info.value.code == ErrorCode.NAMING_CONFLICT
        assert exc_info.value.details.kind == "variable"

    def test_explicit_name_after_generated_conflicts(self, context):
        context.name_of(Node())

        with pytest.raises(NamingConflict):
            context.name_of(NamedNode("this0"))

    def test_generated_names_skip_explicit_ones(self, context):
        context.name_of(NamedNode("this0"))

        assert context.name_of(Node()) == "this1"

    def test_variables_are_not_mutated(self, context):
        movie = Node("Movie")
        context.name_of(movie)

        assert movie.name is None

    def test_fresh_context_restarts_numbering(self):
        movie = Node("Movie")
        BuildContext().name_of(Node())

        assert BuildContext().name_of(movie) == "this0"

    def test_custom_prefixes(self):
        context = BuildContext(NamingConfig(node_prefix="n", relationship_prefix="r", variable_prefix="v"))

        assert context.name_of(Node()) == "n0"
        assert context.name_of(Relationship()) == "r1"
        assert context.name_of(Variable()) == "v2"


class TestParamNaming:
    def test_equal_values_stay_distinct(self, context):
        first, second = Param("X"), Param("X")

        assert context.param_name_of(first) == "param0"
        assert context.param_name_of(second) == "param1"
        assert context.params == {"param0": "X", "param1": "X"}

    def test_same_param_is_sent_once(self, context):
        shared = Param(42)

        assert context.param_name_of(shared) == context.param_name_of(shared)
        assert context.params == {"param0": 42}

    def test_params_counter_is_separate_from_variables(self, context):
        context.name_of(Node())
        context.name_of(Node())

        assert context.param_name_of(Param(1)) == "param0"

    def test_explicit_param_name(self, context):
        assert context.param_name_of(Param(10, name="limit")) == "limit"
        assert context.params == {"limit": 10}

    def test_explicit_param_conflict(self, context):
        context.param_name_of(Param(1, name="limit"))

        with pytest.raises(NamingConflict) as exc_info:
            context.param_name_of(Param(2, name="limit"))

        assert exc_info.value.details.kind == "parameter"

    def test_generated_param_skips_explicit(self, context):
        context.param_name_of(Param(1, name="param0"))

        assert context.param_name_of(Param(2)) == "param1"

    def test_params_in_first_encounter_order(self, context):
        for value in ("a", "b", "c"):
            context.param_name_of(Param(value))

        assert list(context.params) == ["param0", "param1", "param2"]

    def test_unsupported_value_is_rejected_on_naming(self, context):
        with pytest.raises(UnsupportedValueError):
            context.param_name_of(Param(object()))

        assert context.params == {}


class TestValueChecks:
    @pytest.mark.parametrize(
        "value",
        ["text", 1, 1.5, True, None, [1, "a", None], ("a", 2), {"a": [1, {"b": None}]}, {}],
    )
    def test_supported(self, value):
        check_value(value)

    @pytest.mark.parametrize("value", [object(), datetime(2024, 1, 1), {1, 2}, b"bytes", [1, object()]])
    def test_unsupported(self, value):
        with pytest.raises(UnsupportedValueError):
            check_value(value)

    def test_non_string_map_key(self):
        with pytest.raises(UnsupportedValueError, match="Map keys must be strings"):
            check_value({1: "a"})

    def test_error_keeps_offending_value(self):
        marker = object()

        with pytest.raises(UnsupportedValueError) as exc_info:
            check_value({"nested": [marker]})

        assert exc_info.value.value is marker
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_VALUE

    def test_nan_is_a_valid_param_but_not_inline(self):
        check_value(float("nan"))

        with pytest.raises(UnsupportedValueError):
            check_inline_value([1.0, float("nan")])

    @pytest.mark.parametrize("value", [2**63, -(2**63) - 1, [1, 2**64], {"big": 2**70}])
    def test_out_of_range_int_is_a_valid_param_but_not_inline(self, value):
        check_value(value)

        with pytest.raises(UnsupportedValueError, match="64-bit"):
            check_inline_value(value)

    def test_int64_bounds_are_inline(self):
        check_inline_value([2**63 - 1, -(2**63)])

    def test_explicit_names_are_kept_raw(self, context):
        assert context.name_of(NamedNode("my node")) == "my node"
        assert context.param_name_of(Param(1, name="a b")) == "a b"
