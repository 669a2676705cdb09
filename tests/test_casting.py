"""Tests for value casting."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

import pytest

from cqrs_ddd_filter_params.adapters import Condition
from cqrs_ddd_filter_params.casting import (
    SchemaTypeCaster,
    TypeCaster,
    cast_condition,
    cast_value,
)
from cqrs_ddd_filter_params.exceptions import TypeCastError
from cqrs_ddd_filter_params.types import Operator


@pytest.mark.parametrize(
    ("value", "target", "expected"),
    [
        ("42", int, 42),
        (" 7 ", int, 7),
        ("1.5", float, 1.5),
        ("10.50", Decimal, Decimal("10.50")),
        ("true", bool, True),
        ("NO", bool, False),
        ("t", bool, True),
        (3, str, "3"),
        ("2024-01-05", datetime.date, datetime.date(2024, 1, 5)),
        ("2024-01-05T10:30:00", datetime.date, datetime.date(2024, 1, 5)),
        (
            "2024-01-05T10:30:00Z",
            datetime.datetime,
            datetime.datetime(2024, 1, 5, 10, 30, tzinfo=datetime.timezone.utc),
        ),
        ("2024-01-05", datetime.datetime, datetime.datetime(2024, 1, 5)),
        (
            "12345678-1234-5678-1234-567812345678",
            uuid.UUID,
            uuid.UUID("12345678-1234-5678-1234-567812345678"),
        ),
    ],
)
def test_cast_value(value, target, expected) -> None:
    assert cast_value(value, target) == expected


@pytest.mark.parametrize(
    ("value", "target"),
    [
        ("abc", int),
        (True, int),
        ("maybe", bool),
        ("x", Decimal),
        ("2024-13-01", datetime.date),
        ("not-a-uuid", uuid.UUID),
        ("1,5", float),
    ],
)
def test_cast_failure(value, target) -> None:
    with pytest.raises(TypeCastError) as exc_info:
        cast_value(value, target, field="amount")
    assert exc_info.value.field == "amount"
    assert exc_info.value.target == target.__name__


def test_lists_are_cast_element_wise() -> None:
    assert cast_value(["1", "2"], int) == [1, 2]


def test_none_passes_through() -> None:
    assert cast_value(None, int) is None


def test_unknown_target_passes_through() -> None:
    marker = object()
    assert cast_value(marker, dict) is marker


@pytest.mark.parametrize(
    "operator", [Operator.LIKE, Operator.ILIKE, Operator.IS, Operator.IS_NULL, Operator.FTS]
)
def test_pattern_and_null_operators_are_not_cast(operator) -> None:
    condition = Condition("amount", operator, "%12%")
    assert cast_condition(condition, int) is condition


class TestSchemaTypeCaster:
    def test_casts_known_columns(self) -> None:
        caster = SchemaTypeCaster({"amount": int})
        conditions = [
            Condition("amount", Operator.GTE, "10"),
            Condition("name", Operator.EQ, "10"),
        ]
        assert caster(conditions) == [
            Condition("amount", Operator.GTE, 10),
            Condition("name", Operator.EQ, "10"),
        ]

    def test_types_are_copied(self) -> None:
        caster = SchemaTypeCaster({"amount": int})
        caster.types["amount"] = str
        assert caster.types == {"amount": int}

    def test_satisfies_protocol(self) -> None:
        assert isinstance(SchemaTypeCaster({}), TypeCaster)
