"""
Type casting for condition values.

URL values arrive as strings; a caster coerces them to the column's real
type before the adapter builds predicates. Unlike parsing, casting is
strict: a value that cannot be converted raises :class:`TypeCastError`.
"""

from __future__ import annotations

import datetime
import logging
import uuid as uuid_module
from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .exceptions import TypeCastError
from .types import Operator

if TYPE_CHECKING:
    from .adapters.base import Condition

logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({"true", "t", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "f", "0", "no"})

# Operators whose value is a pattern or search expression, never a column value.
_UNCAST_OPERATORS = frozenset(
    {
        Operator.LIKE,
        Operator.ILIKE,
        Operator.IS,
        Operator.IS_NULL,
        Operator.FTS,
        Operator.PLFTS,
        Operator.PHFTS,
    }
)


@runtime_checkable
class TypeCaster(Protocol):
    """Hook applied to the condition list before backend translation."""

    def __call__(self, conditions: Sequence[Condition]) -> list[Condition]:
        ...


# ---------------------------------------------------------------------------
# Value casting
# ---------------------------------------------------------------------------


def _cast_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _cast_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    return datetime.datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))


def _cast_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    text = str(value).strip()
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        return datetime.datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def _cast_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as err:
        raise ValueError(f"not a decimal: {value!r}") from err


def _cast_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def _cast_uuid(value: Any) -> uuid_module.UUID:
    if isinstance(value, uuid_module.UUID):
        return value
    return uuid_module.UUID(str(value).strip())


# datetime precedes date: every datetime is a date.
_CASTERS: dict[type, Any] = {
    str: str,
    bool: _cast_boolean,
    int: _cast_int,
    float: lambda v: float(str(v).strip()),
    Decimal: _cast_decimal,
    datetime.datetime: _cast_datetime,
    datetime.date: _cast_date,
    uuid_module.UUID: _cast_uuid,
}


def cast_value(value: Any, target: type, *, field: str = "<value>") -> Any:
    """
    Cast *value* to *target*.

    Lists and tuples are cast element-wise; ``None`` passes through.
    Unsupported targets leave the value unchanged.

    Raises:
        TypeCastError: If the value cannot be represented as *target*.
    """
    if value is None:
        return None
    if isinstance(value, list | tuple):
        return [cast_value(item, target, field=field) for item in value]
    caster = _CASTERS.get(target)
    if caster is None:
        logger.debug("No caster for %s on '%s'; passing value through", target, field)
        return value
    try:
        return caster(value)
    except (TypeError, ValueError) as err:
        raise TypeCastError(field, value, target.__name__) from err


def cast_condition(condition: Condition, target: type) -> Condition:
    if condition.operator in _UNCAST_OPERATORS:
        return condition
    return condition._replace(value=cast_value(condition.value, target, field=condition.field))


class SchemaTypeCaster:
    """
    Cast condition values using an explicit ``{column: type}`` mapping.

    Conditions on columns missing from the mapping pass through unchanged::

        caster = SchemaTypeCaster({"total": Decimal, "inserted_at": date})
        stmt = builder.apply(select(Order), filters, schema=caster)
    """

    def __init__(self, types: Mapping[str, type]) -> None:
        self._types = dict(types)

    @property
    def types(self) -> dict[str, type]:
        return dict(self._types)

    def __call__(self, conditions: Sequence[Condition]) -> list[Condition]:
        out = []
        for condition in conditions:
            target = self._types.get(condition.field)
            out.append(condition if target is None else cast_condition(condition, target))
        return out
