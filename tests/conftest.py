"""Shared fixtures for filter-params tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_filter_params import config
from cqrs_ddd_filter_params.adapters import MemoryAdapter, MemoryQuery
from cqrs_ddd_filter_params.config import FieldConfig
from cqrs_ddd_filter_params.parser import ParamsParser


@pytest.fixture
def configs() -> list[FieldConfig]:
    """A typical order-list configuration covering every encoding shape."""
    return [
        config.text("name", label="Name"),
        config.select("status", options=["pending", "active", "shipped"]),
        config.multi_select("tags", options=["urgent", "bug", "feature"]),
        config.number("amount"),
        config.date_range("inserted_at", label="Created"),
        config.boolean("urgent"),
        config.text("title", custom_param="search"),
    ]


@pytest.fixture
def by_field(configs: list[FieldConfig]) -> dict[str, FieldConfig]:
    return {c.field: c for c in configs}


@pytest.fixture
def parser(configs: list[FieldConfig]) -> ParamsParser:
    return ParamsParser(configs)


@pytest.fixture
def orders() -> list[dict[str, object]]:
    return [
        {
            "id": 1,
            "name": "Blue widget",
            "status": "active",
            "tags": ["urgent", "bug"],
            "amount": 120,
            "urgent": True,
            "inserted_at": "2024-01-05",
        },
        {
            "id": 2,
            "name": "Red gadget",
            "status": "pending",
            "tags": ["feature"],
            "amount": 40,
            "urgent": False,
            "inserted_at": "2024-02-10",
        },
        {
            "id": 3,
            "name": "Blue gadget",
            "status": "shipped",
            "tags": [],
            "amount": None,
            "urgent": None,
            "inserted_at": "2024-03-15",
        },
    ]


@pytest.fixture
def memory_query(orders: list[dict[str, object]]) -> MemoryQuery:
    return MemoryQuery.of(orders)


@pytest.fixture
def memory_adapter() -> MemoryAdapter:
    return MemoryAdapter()
