"""Tests for ParamsSerializer and the query-string helpers."""

from __future__ import annotations

import datetime

import pytest

from cqrs_ddd_filter_params.config import FieldConfig
from cqrs_ddd_filter_params.filter import Filter
from cqrs_ddd_filter_params.pagination import Pagination
from cqrs_ddd_filter_params.serializer import (
    ParamsSerializer,
    pagination_to_params,
    range_conditions,
    to_params,
    to_path,
    to_query_string,
)
from cqrs_ddd_filter_params.types import Operator, RangeValue


@pytest.fixture
def make(by_field: dict[str, FieldConfig]):
    def _make(field: str, operator: Operator | str, value: object) -> Filter:
        return Filter.from_config(by_field[field], operator, value)

    return _make


def test_simple_eq(make) -> None:
    assert to_params([make("status", "eq", "active")]) == {"status": "eq.active"}


@pytest.mark.parametrize("value", ["*foo*", "*foo", "foo*", "foo"])
def test_ilike_wildcards_are_idempotent(make, value: str) -> None:
    assert to_params([make("name", "ilike", value)]) == {"name": "ilike.*foo*"}


def test_in_list(make) -> None:
    assert to_params([make("tags", "in", ["urgent", "bug"])]) == {"tags": "in.(urgent,bug)"}


def test_not_in_list(make) -> None:
    assert to_params([make("tags", "not_in", ["a"])]) == {"tags": "not_in.(a)"}


@pytest.mark.parametrize("op", ["cs", "cd", "ov"])
def test_array_operators_use_braces(make, op: str) -> None:
    assert to_params([make("tags", op, ["a", "b"])]) == {"tags": f"{op}.{{a,b}}"}


def test_booleans_and_nulls(make) -> None:
    assert to_params([make("urgent", "is", True)]) == {"urgent": "is.true"}
    assert to_params([make("urgent", "is", False)]) == {"urgent": "is.false"}
    assert to_params([make("urgent", "is_null", True)]) == {"urgent": "is.null"}
    assert to_params([make("urgent", "is_null", False)]) == {"urgent": "is.not_null"}


def test_custom_param_has_no_prefix(make) -> None:
    assert to_params([make("title", "ilike", "hello")]) == {"search": "hello"}


def test_unset_values_are_dropped(make) -> None:
    filters = [
        make("status", "eq", None),
        make("name", "ilike", ""),
        make("inserted_at", "gte_lte", (None, None)),
    ]
    assert to_params(filters) == {}


def test_empty_list_is_written(make) -> None:
    assert to_params([make("tags", "in", [])]) == {"tags": "in.()"}
    assert to_params([make("tags", "cs", [])]) == {"tags": "cs.{}"}


class TestRanges:
    def test_both_bounds(self, make) -> None:
        f = make("inserted_at", "gte_lte", ("2024-01-01", "2024-02-01"))
        assert to_params([f]) == {
            "and": "(inserted_at.gte.2024-01-01,inserted_at.lte.2024-02-01)"
        }

    def test_only_lower_bound(self, make) -> None:
        f = make("inserted_at", "gte_lte", RangeValue("2024-01-01", None))
        assert to_params([f]) == {"and": "(inserted_at.gte.2024-01-01)"}

    def test_dates_are_iso_formatted(self) -> None:
        assert range_conditions("d", (datetime.date(2024, 1, 1), None)) == ["d.gte.2024-01-01"]

    def test_merges_into_existing_group(self, make) -> None:
        f = make("inserted_at", "gte_lte", (None, "2024-02-01"))
        params = to_params([f], {"and": "(amount.gte.5)", "limit": "10"})
        assert params == {
            "and": "(amount.gte.5,inserted_at.lte.2024-02-01)",
            "limit": "10",
        }

    def test_existing_params_are_not_mutated(self, make) -> None:
        existing = {"and": "(amount.gte.5)"}
        to_params([make("inserted_at", "gte_lte", ("a", None))], existing)
        assert existing == {"and": "(amount.gte.5)"}

    def test_custom_group_key(self, make) -> None:
        serializer = ParamsSerializer(group_key="where")
        f = make("inserted_at", "gte_lte", ("a", "b"))
        assert serializer.to_params([f]) == {"where": "(inserted_at.gte.a,inserted_at.lte.b)"}

    def test_bounds_with_delimiters_are_quoted(self, make) -> None:
        f = make("inserted_at", "gte_lte", ("x,y)", "z"))
        assert to_params([f]) == {"and": '(inserted_at.gte."x,y)",inserted_at.lte.z)'}


def test_to_query_string_is_sorted_and_repeats_lists() -> None:
    params = {"b": "eq.2", "a": ["gte.1", "lte.3"]}
    assert to_query_string(params) == "a=gte.1&a=lte.3&b=eq.2"


def test_to_query_string_encodes_reserved_characters() -> None:
    params = {
        "and": "(inserted_at.gte.2024-01-01T10:00:00+01:00)",
        "name": "eq.R&D 50%",
        "tags": "in.(a,b)",
        "title": "ilike.*x=y#1*",
    }
    assert to_query_string(params) == (
        "and=(inserted_at.gte.2024-01-01T10:00:00%2B01:00)"
        "&name=eq.R%26D%2050%25"
        "&tags=in.(a,b)"
        "&title=ilike.*x%3Dy%231*"
    )


def test_to_path() -> None:
    assert to_path("/orders", {"status": "eq.active"}) == "/orders?status=eq.active"
    assert to_path("/orders", {}) == "/orders"


def test_pagination_to_params() -> None:
    assert pagination_to_params(Pagination(limit=25, offset=50)) == {
        "limit": "25",
        "offset": "50",
    }
