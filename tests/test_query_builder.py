"""Tests for QueryBuilder against the in-memory adapter."""

from __future__ import annotations

import logging

import pytest

from cqrs_ddd_filter_params import config
from cqrs_ddd_filter_params.adapters import (
    Condition,
    MemoryAdapter,
    MemoryOperatorRegistry,
    MemoryQuery,
)
from cqrs_ddd_filter_params.adapters.memory import EqualOperator
from cqrs_ddd_filter_params.exceptions import (
    ConfigurationError,
    OperatorNotSupportedError,
    TypeCastError,
)
from cqrs_ddd_filter_params.filter import Filter
from cqrs_ddd_filter_params.query_builder import QueryBuilder, to_conditions
from cqrs_ddd_filter_params.types import Operator, RangeValue


def ids(query: MemoryQuery) -> list[object]:
    return [r["id"] for r in query.all()]


@pytest.fixture
def builder(memory_adapter: MemoryAdapter) -> QueryBuilder:
    return QueryBuilder(memory_adapter)


class TestToConditions:
    def test_range_expands_to_two_bounds(self, by_field, memory_adapter) -> None:
        f = Filter.from_config(
            by_field["inserted_at"], Operator.GTE_LTE, RangeValue("2024-01-01", "2024-02-01")
        )
        assert to_conditions([f], memory_adapter) == [
            Condition("inserted_at", Operator.GTE, "2024-01-01"),
            Condition("inserted_at", Operator.LTE, "2024-02-01"),
        ]

    def test_open_range_yields_one_bound(self, by_field, memory_adapter) -> None:
        f = Filter.from_config(by_field["inserted_at"], Operator.GTE_LTE, (None, "2024-02-01"))
        assert to_conditions([f], memory_adapter) == [
            Condition("inserted_at", Operator.LTE, "2024-02-01"),
        ]

    def test_pattern_is_wrapped(self, by_field, memory_adapter) -> None:
        f = Filter.from_config(by_field["name"], Operator.ILIKE, "blue")
        assert to_conditions([f], memory_adapter) == [
            Condition("name", Operator.ILIKE, "%blue%"),
        ]

    def test_query_field_is_used_as_column(self, memory_adapter) -> None:
        cfg = config.number("total", query_field="amount")
        f = Filter.from_config(cfg, Operator.GT, 5)
        assert to_conditions([f], memory_adapter) == [Condition("amount", Operator.GT, 5)]

    @pytest.mark.parametrize("value", [None, "", [], (None, None)])
    def test_empty_values_are_dropped(self, by_field, memory_adapter, value) -> None:
        cfg = by_field["inserted_at"] if isinstance(value, tuple) else by_field["name"]
        f = Filter.from_config(cfg, value=value)
        assert to_conditions([f], memory_adapter) == []

    def test_non_boolean_is_is_dropped(self, by_field, memory_adapter) -> None:
        f = Filter.from_config(by_field["urgent"], Operator.IS, "maybe")
        assert to_conditions([f], memory_adapter) == []


class TestApply:
    def test_equality(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["status"], Operator.EQ, "active")
        assert ids(builder.apply(memory_query, [f])) == [1]

    def test_no_filters_returns_everything(self, builder, memory_query) -> None:
        assert ids(builder.apply(memory_query, [])) == [1, 2, 3]

    def test_ilike_substring(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["name"], Operator.ILIKE, "BLUE")
        assert ids(builder.apply(memory_query, [f])) == [1, 3]

    def test_date_range(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["inserted_at"], Operator.GTE_LTE, ("2024-02-01", None))
        assert ids(builder.apply(memory_query, [f])) == [2, 3]

    def test_array_overlap(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["tags"], Operator.OV, ["bug", "feature"])
        assert ids(builder.apply(memory_query, [f])) == [1, 2]

    def test_boolean_is(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["urgent"], Operator.IS, False)
        assert ids(builder.apply(memory_query, [f])) == [2]

    def test_conditions_are_and_combined(self, builder, by_field, memory_query) -> None:
        filters = [
            Filter.from_config(by_field["name"], Operator.ILIKE, "gadget"),
            Filter.from_config(by_field["status"], Operator.NEQ, "pending"),
        ]
        assert ids(builder.apply(memory_query, filters)) == [3]

    def test_disallowed_fields_are_ignored(self, builder, by_field, memory_query) -> None:
        filters = [
            Filter.from_config(by_field["status"], Operator.EQ, "active"),
            Filter.from_config(by_field["urgent"], Operator.IS, False),
        ]
        result = builder.apply(memory_query, filters, allowed_fields=["status"])
        assert ids(result) == [1]

    def test_empty_filter_does_not_narrow(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["status"], Operator.EQ, "")
        assert ids(builder.apply(memory_query, [f])) == [1, 2, 3]

    def test_params_mapping_with_config(self, builder, configs, memory_query) -> None:
        result = builder.apply(memory_query, {"status": "eq.active"}, config=configs)
        assert ids(result) == [1]

    def test_numeric_text_compares_as_number(self, builder, configs, memory_query) -> None:
        assert ids(builder.apply(memory_query, {"amount": "gt.50"}, config=configs)) == [1]
        assert ids(builder.apply(memory_query, {"amount": "lte.120"}, config=configs)) == [1, 2]

    def test_uncomparable_text_raises(self, builder, configs, memory_query) -> None:
        with pytest.raises(TypeCastError):
            builder.apply(memory_query, {"amount": "gt.lots"}, config=configs).all()

    def test_params_mapping_without_config_raises(self, builder, memory_query) -> None:
        with pytest.raises(ConfigurationError):
            builder.apply(memory_query, {"status": "eq.active"})

    def test_unsupported_operator_raises(self, by_field, memory_query) -> None:
        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())
        builder = QueryBuilder(MemoryAdapter(registry=registry))
        f = Filter.from_config(by_field["name"], Operator.ILIKE, "blue")
        with pytest.raises(OperatorNotSupportedError) as exc_info:
            builder.apply(memory_query, [f])
        assert exc_info.value.supported == ["eq"]

    def test_requires_adapter(self) -> None:
        with pytest.raises(ConfigurationError):
            QueryBuilder(None)  # type: ignore[arg-type]

    def test_does_not_mutate_input(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["name"], Operator.ILIKE, "blue")
        builder.apply(memory_query, [f])
        assert f.value == "blue"
        assert memory_query.predicates == ()


class TestSchema:
    def test_mapping_schema_casts_values(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["amount"], Operator.GT, "100")
        result = builder.apply(memory_query, [f], schema={"amount": int})
        assert ids(result) == [1]

    def test_callable_schema(self, builder, by_field, memory_query) -> None:
        seen: list[Condition] = []

        def caster(conditions):
            seen.extend(conditions)
            return [c._replace(value=int(c.value)) for c in conditions]

        f = Filter.from_config(by_field["amount"], Operator.LT, "100")
        assert ids(builder.apply(memory_query, [f], schema=caster)) == [2]
        assert seen == [Condition("amount", Operator.LT, "100")]

    def test_cast_failure_propagates(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["amount"], Operator.GT, "lots")
        with pytest.raises(TypeCastError):
            builder.apply(memory_query, [f], schema={"amount": int})


class TestApplyRaw:
    def test_operator_prefixed_params(self, builder, memory_query) -> None:
        params = {"status": "in.(active,pending)", "amount": "gt.50"}
        result = builder.apply_raw(memory_query, params, schema={"amount": int})
        assert ids(result) == [1]

    def test_group_conditions(self, builder, memory_query) -> None:
        params = {"and": "(inserted_at.gte.2024-02-01,inserted_at.lte.2024-02-28)"}
        assert ids(builder.apply_raw(memory_query, params)) == [2]

    def test_pattern_is_substring(self, builder, memory_query) -> None:
        assert ids(builder.apply_raw(memory_query, {"name": "ilike.*widget*"})) == [1]

    def test_unparseable_entries_are_dropped(self, builder, memory_query, caplog) -> None:
        params = {"status": "active", "page": "2", "name": "eq."}
        with caplog.at_level(logging.DEBUG, logger="cqrs_ddd_filter_params.query_builder"):
            result = builder.apply_raw(memory_query, params)
        assert ids(result) == [1, 2, 3]
        assert "Dropping raw parameter" in caplog.text

    def test_allowed_fields(self, builder, memory_query) -> None:
        params = {"status": "eq.active", "urgent": "is.false"}
        result = builder.apply_raw(memory_query, params, allowed_fields={"urgent"})
        assert ids(result) == [2]

    def test_is_null(self, builder, memory_query) -> None:
        assert ids(builder.apply_raw(memory_query, {"amount": "is.null"})) == [3]

    def test_non_boolean_is_is_dropped(self, builder, memory_query) -> None:
        assert ids(builder.apply_raw(memory_query, {"urgent": "is.maybe"})) == [1, 2, 3]

    def test_quoted_group_value(self, builder, memory_query) -> None:
        params = {"and": '(name.eq."Blue widget",amount.gte."100")'}
        assert ids(builder.apply_raw(memory_query, params)) == [1]


class TestPaginationAndCount:
    def test_apply_pagination(self, builder, memory_query) -> None:
        page = builder.apply_pagination(memory_query, limit=1, offset=1)
        assert ids(page) == [2]

    def test_count_ignores_paging(self, builder, by_field, memory_query) -> None:
        f = Filter.from_config(by_field["name"], Operator.ILIKE, "gadget")
        query = builder.apply_pagination(builder.apply(memory_query, [f]), limit=1, offset=0)
        assert ids(query) == [2]
        assert builder.count(query) == 2
