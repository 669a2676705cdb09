"""
QueryBuilder — apply active filters to a backend queryable.

The builder turns filters into backend-neutral :class:`Condition` records
and hands them to a :class:`FilterAdapter`; it never builds predicates or
executes queries itself::

    builder = QueryBuilder(SQLAlchemyAdapter(Order))
    stmt = builder.apply(
        select(Order),
        filters,
        allowed_fields=["status", "total"],
        schema=SQLAlchemyTypeCaster(Order),
    )

Fields outside ``allowed_fields`` are dropped silently. Type-cast failures
propagate as :class:`TypeCastError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .adapters.base import Condition
from .casting import SchemaTypeCaster
from .exceptions import ConfigurationError
from .filter import is_empty_value
from .operators import PATTERN_OPERATORS, RANGE_OPERATOR, WIRE_OPERATORS
from .parser import DEFAULT_GROUP_KEY, ParamsParser
from .syntax import (
    parse_condition,
    parse_operator_value,
    split_conditions,
    unquote_item,
    unwrap_group,
)
from .types import Operator

if TYPE_CHECKING:
    from .adapters.base import FilterAdapter
    from .config import FieldConfig
    from .filter import Filter

logger = logging.getLogger(__name__)

Schema = Callable[[Sequence[Condition]], Sequence[Condition]] | Mapping[str, type]


def to_conditions(
    filters: Iterable[Filter],
    adapter: FilterAdapter,
    *,
    allowed_fields: Collection[str] | None = None,
) -> list[Condition]:
    """
    Expand filters into neutral conditions.

    Disallowed and empty filters are dropped, as are ``is`` filters with a
    non-boolean value. ``gte_lte`` becomes up to two bound conditions and
    pattern values get the adapter's wildcards.
    """
    conditions: list[Condition] = []
    for f in filters:
        if allowed_fields is not None and f.field not in allowed_fields:
            logger.debug("Dropping filter on non-allowed field '%s'", f.field)
            continue
        if f.is_empty:
            logger.debug("Dropping empty filter '%s'", f.field)
            continue
        if not _has_predicate(f.operator, f.value):
            logger.debug("Dropping 'is' filter on '%s' with value %r", f.field, f.value)
            continue
        column = f.config.column
        if f.operator is RANGE_OPERATOR:
            lower, upper = f.value
            if lower is not None:
                conditions.append(Condition(column, Operator.GTE, lower))
            if upper is not None:
                conditions.append(Condition(column, Operator.LTE, upper))
        elif f.operator in PATTERN_OPERATORS and isinstance(f.value, str):
            conditions.append(Condition(column, f.operator, adapter.substring_pattern(f.value)))
        else:
            conditions.append(Condition(column, f.operator, f.value))
    return conditions


class QueryBuilder:
    """Apply filters to queryables through a swappable adapter."""

    def __init__(self, adapter: FilterAdapter, *, group_key: str = DEFAULT_GROUP_KEY) -> None:
        if adapter is None:
            raise ConfigurationError("QueryBuilder requires a FilterAdapter")
        self.adapter = adapter
        self._group_key = group_key

    def apply(
        self,
        queryable: Any,
        filters_or_params: Iterable[Filter] | Mapping[str, Any],
        *,
        allowed_fields: Collection[str] | None = None,
        schema: Schema | None = None,
        config: Iterable[FieldConfig] | None = None,
    ) -> Any:
        """
        Return *queryable* narrowed by the given filters.

        A parameter mapping is parsed with *config* first.

        Raises:
            ConfigurationError: A mapping was passed without *config*.
            OperatorNotSupportedError: The adapter cannot translate an
                operator.
            TypeCastError: *schema* could not cast a value.
        """
        if isinstance(filters_or_params, Mapping):
            if config is None:
                raise ConfigurationError(
                    "QueryBuilder.apply() needs 'config' when given a parameter mapping"
                )
            parser = ParamsParser(config, group_key=self._group_key)
            filters: Iterable[Filter] = parser.parse(filters_or_params).filters
        else:
            filters = filters_or_params

        conditions = to_conditions(filters, self.adapter, allowed_fields=allowed_fields)
        for condition in conditions:
            self.adapter.check_supported(condition.operator)
        return self._finish(queryable, conditions, schema)

    def apply_raw(
        self,
        queryable: Any,
        params: Mapping[str, Any],
        *,
        allowed_fields: Collection[str] | None = None,
        schema: Schema | None = None,
    ) -> Any:
        """
        Apply ``key=operator.value`` parameters without field configs.

        Each key is treated as a column name; conditions inside the grouping
        parameter are read as ``column.operator.value``. Entries without a
        recognised operator, with an unsupported operator, with an empty
        value or with a non-boolean ``is`` value are dropped.
        """
        conditions: list[Condition] = []
        for field, raw in self._raw_entries(params):
            if allowed_fields is not None and field not in allowed_fields:
                logger.debug("Dropping raw parameter on non-allowed field '%s'", field)
                continue
            parsed = parse_operator_value(raw)
            if parsed is None:
                logger.debug("Dropping raw parameter %s=%r", field, raw)
                continue
            operator, value = parsed
            if (
                not self.adapter.supports(operator)
                or is_empty_value(value)
                or not _has_predicate(operator, value)
            ):
                logger.debug("Dropping raw condition %s %s %r", field, operator, value)
                continue
            if operator in PATTERN_OPERATORS and isinstance(value, str):
                value = self.adapter.substring_pattern(value)
            conditions.append(Condition(field, operator, value))
        return self._finish(queryable, conditions, schema)

    def _raw_entries(self, params: Mapping[str, Any]) -> list[tuple[str, Any]]:
        entries: list[tuple[str, Any]] = []
        for key, raw in params.items():
            values = list(raw) if isinstance(raw, list | tuple) else [raw]
            if key != self._group_key:
                if values:
                    entries.append((key, values[-1]))
                continue
            for chunk in values:
                for condition in split_conditions(unwrap_group(str(chunk))):
                    parts = parse_condition(condition)
                    if parts is None or parts[1] not in {op.value for op in WIRE_OPERATORS}:
                        logger.debug("Dropping malformed grouped condition %r", condition)
                        continue
                    entries.append((parts[0], f"{parts[1]}.{unquote_item(parts[2])}"))
        return entries

    def _finish(self, queryable: Any, conditions: list[Condition], schema: Schema | None) -> Any:
        caster = _resolve_caster(schema)
        if caster is not None:
            conditions = list(caster(conditions))
        return self.adapter.apply_conditions(queryable, conditions)

    def apply_pagination(
        self, queryable: Any, limit: int | None = None, offset: int | None = None
    ) -> Any:
        return self.adapter.paginate(queryable, limit, offset)

    def count(self, queryable: Any, session: Any = None) -> int:
        """Count matching rows; ordering, paging and projection are ignored."""
        return self.adapter.count(queryable, session)


def _has_predicate(operator: Operator, value: Any) -> bool:
    """``is`` takes only booleans; a literal such as ``is.maybe`` is dropped."""
    return operator is not Operator.IS or isinstance(value, bool)


def _resolve_caster(
    schema: Schema | None,
) -> Callable[[Sequence[Condition]], Sequence[Condition]] | None:
    if schema is None:
        return None
    if isinstance(schema, Mapping):
        return SchemaTypeCaster(schema)
    return schema
