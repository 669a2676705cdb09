"""
In-memory adapter — evaluate conditions against plain records.

Useful for tests, fixtures and small static datasets. Records may be
mappings or objects; fields are read with ``record[field]`` or
``getattr(record, field)``. New operators are added by subclassing
:class:`MemoryOperator` and registering an instance.
"""

from __future__ import annotations

import dataclasses
import operator as op_module
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from ..casting import cast_value
from ..exceptions import FieldNotFoundError, TypeCastError
from ..types import Operator
from .base import FilterAdapter, OperatorRegistry

Predicate = Callable[[Any], bool]


def _sql_pattern_to_regex(pattern: str) -> str:
    """Convert a SQL LIKE pattern (``%``, ``_``) to an anchored regex."""
    parts = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "^" + "".join(parts) + "$"


def _compare(compare: Callable[[Any, Any], Any], field_value: Any, condition_value: Any) -> bool:
    """
    Order *field_value* against *condition_value*.

    ``None`` never matches. A URL string compared with a typed record value
    is cast to that value's type first.

    Raises:
        TypeCastError: If the two values cannot be ordered.
    """
    if field_value is None:
        return False
    try:
        return bool(compare(field_value, condition_value))
    except TypeError:
        target = type(field_value)
    coerced = cast_value(condition_value, target)
    try:
        return bool(compare(field_value, coerced))
    except TypeError as err:
        raise TypeCastError("<value>", condition_value, target.__name__) from err


class MemoryOperator(ABC):
    """
    Strategy interface for evaluating one operator in Python.

    Each operator is an isolated class with a single ``evaluate`` method.
    """

    @property
    @abstractmethod
    def name(self) -> Operator:
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        ...


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value == condition_value)


class NotEqualOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.NEQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value != condition_value)


class GreaterThanOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.GT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(op_module.gt, field_value, condition_value)


class GreaterEqualOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.GTE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(op_module.ge, field_value, condition_value)


class LessThanOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.LT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(op_module.lt, field_value, condition_value)


class LessEqualOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.LTE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return _compare(op_module.le, field_value, condition_value)


class LikeOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.LIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        regex = _sql_pattern_to_regex(str(condition_value))
        return re.match(regex, str(field_value), re.DOTALL) is not None


class ILikeOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.ILIKE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        regex = _sql_pattern_to_regex(str(condition_value))
        return re.match(regex, str(field_value), re.IGNORECASE | re.DOTALL) is not None


class InOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value in condition_value


class NotInOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.NOT_IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value not in condition_value


class IsOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.IS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return field_value is condition_value or field_value == condition_value


class IsNullOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.IS_NULL

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return (field_value is None) == bool(condition_value)


class ArrayContainsOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.CS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return all(item in field_value for item in condition_value)


class ArrayContainedByOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.CD

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return all(item in condition_value for item in field_value)


class ArrayOverlapOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.OV

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return any(item in field_value for item in condition_value)


_TSQUERY_SPLIT = re.compile(r"[\s&|!()]+")


class FtsOperator(MemoryOperator):
    """Every ``&``/space separated term occurs in the text."""

    @property
    def name(self) -> Operator:
        return Operator.FTS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        text = str(field_value).lower()
        terms = [t for t in _TSQUERY_SPLIT.split(str(condition_value).lower()) if t]
        return all(t in text for t in terms)


class PlainFtsOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.PLFTS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        words = set(str(field_value).lower().split())
        return all(w in words for w in str(condition_value).lower().split())


class PhraseFtsOperator(MemoryOperator):
    @property
    def name(self) -> Operator:
        return Operator.PHFTS

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return " ".join(str(condition_value).lower().split()) in " ".join(
            str(field_value).lower().split()
        )


class MemoryOperatorRegistry(OperatorRegistry[MemoryOperator]):
    def evaluate(self, name: Operator, field_value: Any, condition_value: Any) -> bool:
        """
        Raises:
            OperatorNotSupportedError: If *name* is not registered.
        """
        return self.require(name).evaluate(field_value, condition_value)


def build_default_memory_registry() -> MemoryOperatorRegistry:
    registry = MemoryOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        LikeOperator(),
        ILikeOperator(),
        InOperator(),
        NotInOperator(),
        IsOperator(),
        IsNullOperator(),
        ArrayContainsOperator(),
        ArrayContainedByOperator(),
        ArrayOverlapOperator(),
        FtsOperator(),
        PlainFtsOperator(),
        PhraseFtsOperator(),
    )
    return registry


# ---------------------------------------------------------------------------
# Queryable
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class MemoryQuery:
    """Immutable lazy query over a sequence of records."""

    records: tuple[Any, ...]
    predicates: tuple[Predicate, ...] = ()
    limit: int | None = None
    offset: int | None = None

    @classmethod
    def of(cls, records: Iterable[Any]) -> MemoryQuery:
        return cls(records=tuple(records))

    def where(self, predicate: Predicate) -> MemoryQuery:
        return dataclasses.replace(self, predicates=(*self.predicates, predicate))

    def matching(self) -> list[Any]:
        """Records passing every predicate, ignoring limit/offset."""
        return [r for r in self.records if all(p(r) for p in self.predicates)]

    def all(self) -> list[Any]:
        rows = self.matching()
        start = self.offset or 0
        end = start + self.limit if self.limit is not None else None
        return rows[start:end]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())


def read_field(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


class MemoryAdapter(FilterAdapter):
    """
    Filter :class:`MemoryQuery` objects.

    Pass *fields* to reject unknown field names with
    :class:`FieldNotFoundError`; without it missing fields read as ``None``.
    """

    def __init__(
        self,
        fields: Iterable[str] | None = None,
        *,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self._fields = frozenset(fields) if fields is not None else None
        self._registry = registry or build_default_memory_registry()

    def supported_operators(self) -> frozenset[Operator]:
        return self._registry.supported_operators

    def apply_condition(
        self,
        queryable: MemoryQuery,
        field: str,
        operator: Operator,
        value: Any,
    ) -> MemoryQuery:
        if self._fields is not None and field not in self._fields:
            raise FieldNotFoundError(field, "records", sorted(self._fields))
        op = self._registry.require(operator)
        return queryable.where(lambda r: op.evaluate(read_field(r, field), value))

    def paginate(
        self, queryable: MemoryQuery, limit: int | None, offset: int | None
    ) -> MemoryQuery:
        return dataclasses.replace(queryable, limit=limit, offset=offset)

    def count(self, queryable: MemoryQuery, session: Any = None) -> int:
        return len(queryable.matching())
