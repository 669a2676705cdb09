"""Core enums and value shapes shared by every filter component."""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Union


class FilterType(str, Enum):
    """Kinds of filterable fields."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    DATETIME = "datetime"
    DATE_RANGE = "date_range"
    DATETIME_RANGE = "datetime_range"
    BOOLEAN = "boolean"
    RADIO_GROUP = "radio_group"

    @property
    def is_range(self) -> bool:
        """True for types whose value is a ``(lower, upper)`` pair."""
        return self in _RANGE_TYPES

    @property
    def is_choice(self) -> bool:
        """True for types that need an options source."""
        return self in _CHOICE_TYPES


_RANGE_TYPES = frozenset({FilterType.DATE_RANGE, FilterType.DATETIME_RANGE})
_CHOICE_TYPES = frozenset(
    {FilterType.SELECT, FilterType.MULTI_SELECT, FilterType.RADIO_GROUP}
)


class Operator(str, Enum):
    """Filter operators understood by the URL grammar."""

    # Comparison
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"

    # Pattern match
    LIKE = "like"
    ILIKE = "ilike"

    # Membership
    IN = "in"
    NOT_IN = "not_in"

    # Tri-state
    IS = "is"
    IS_NULL = "is_null"

    # Array containment / overlap
    CS = "cs"
    CD = "cd"
    OV = "ov"

    # Full-text search
    FTS = "fts"
    PLFTS = "plfts"
    PHFTS = "phfts"

    # Compound range (never on the wire as a prefix)
    GTE_LTE = "gte_lte"

    def __str__(self) -> str:
        return self.value


class ValueArity(str, Enum):
    """Whether an operator takes one value or a list of values."""

    SINGLE = "single"
    MULTI = "multi"


class RangeValue(NamedTuple):
    """Inclusive ``(lower, upper)`` bounds; either side may be ``None``."""

    lower: Any = None
    upper: Any = None

    @property
    def is_empty(self) -> bool:
        return self.lower is None and self.upper is None


Scalar = Union[str, int, float, Decimal, bool, datetime.date, datetime.datetime]
FilterValue = Union[Scalar, list[Any], RangeValue, tuple[Any, Any], None]
