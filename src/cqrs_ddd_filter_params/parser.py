"""ParamsParser — URL parameters -> list of Filter + remaining params."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, NamedTuple
from urllib.parse import parse_qsl

from .filter import Filter
from .operators import RANGE_OPERATOR
from .syntax import (
    parse_condition,
    parse_operator_value,
    shape_value,
    split_conditions,
    unquote_item,
    unwrap_group,
)
from .types import Operator, RangeValue

if TYPE_CHECKING:
    from .config import FieldConfig

logger = logging.getLogger(__name__)

DEFAULT_GROUP_KEY = "and"


class ParseResult(NamedTuple):
    """Parsed filters and the parameters no filter claimed."""

    filters: list[Filter]
    remaining: dict[str, Any]


class ParamsParser:
    """
    Parse a parameter map into active filters.

    Keys matching a field's ``custom_param`` or its ``field`` name become
    filters; range fields may also be recovered from the grouping
    parameter (``and=(created.gte.X,created.lte.Y)``). Everything else is
    returned untouched in ``remaining`` for pagination, sorting, etc.

    Parsing is lenient: an unknown operator prefix falls back to the
    field's default operator with the whole string as value.
    """

    def __init__(
        self,
        configs: Iterable[FieldConfig],
        *,
        group_key: str = DEFAULT_GROUP_KEY,
    ) -> None:
        self._configs = tuple(configs)
        self._by_field = {c.field: c for c in self._configs}
        self._by_param = {c.custom_param: c for c in self._configs if c.custom_param}
        self._group_key = group_key

    @property
    def configs(self) -> tuple[FieldConfig, ...]:
        return self._configs

    def parse(self, params: Mapping[str, Any] | None) -> ParseResult:
        """Return ``(filters, remaining)``."""
        if not params:
            return ParseResult(self._always_on(set()), {})

        remaining = dict(params)
        grouped: list[Filter] = []
        if self._group_key in remaining:
            grouped, residual = self._parse_group(remaining.pop(self._group_key))
            if residual is not None:
                remaining[self._group_key] = residual

        filters: list[Filter] = []
        seen: set[str] = set()
        for key, raw in list(remaining.items()):
            config = self._by_param.get(key) or self._by_field.get(key)
            if config is None:
                continue
            del remaining[key]
            if config.field in seen:
                logger.debug("Ignoring duplicate parameter '%s' for '%s'", key, config.field)
                continue
            seen.add(config.field)
            parsed = self._parse_param(config, raw)
            if parsed is not None:
                filters.append(parsed)

        for range_filter in grouped:
            if range_filter.field in seen:
                logger.debug(
                    "Range '%s' given directly and in '%s'; keeping direct value",
                    range_filter.field,
                    self._group_key,
                )
                continue
            seen.add(range_filter.field)
            filters.append(range_filter)

        filters.extend(self._always_on(seen))
        return ParseResult(filters, remaining)

    # -- parameters ---------------------------------------------------------

    def _parse_param(self, config: FieldConfig, raw: Any) -> Filter | None:
        if config.type.is_range:
            return self._parse_range_param(config, _as_list(raw))
        values = _as_list(raw)
        if not values:
            return None
        operator, value = self._split(config, values[-1])
        return Filter(field=config.field, operator=operator, value=value, config=config)

    def _split(self, config: FieldConfig, raw: Any) -> tuple[Operator, Any]:
        parsed = parse_operator_value(raw)
        if parsed is not None:
            return parsed
        logger.debug(
            "No operator prefix in %r for '%s'; using default '%s'",
            raw,
            config.field,
            config.default_operator,
        )
        if isinstance(raw, str) and config.default_operator is not RANGE_OPERATOR:
            return shape_value(config.default_operator, raw)
        return config.default_operator, raw

    def _parse_range_param(self, config: FieldConfig, values: list[Any]) -> Filter | None:
        lower = upper = None
        for raw in values:
            parsed = parse_operator_value(raw)
            if parsed is None:
                logger.debug("Ignoring range bound %r for '%s'", raw, config.field)
                continue
            operator, value = parsed
            if operator is Operator.GTE:
                lower = value
            elif operator is Operator.LTE:
                upper = value
            else:
                logger.debug(
                    "Ignoring '%s' bound for range field '%s'", operator, config.field
                )
        return _range_filter(config, lower, upper)

    # -- grouping parameter -------------------------------------------------

    def _parse_group(self, raw: Any) -> tuple[list[Filter], str | None]:
        bounds: dict[str, list[Any]] = {}
        residual: list[str] = []
        for chunk in _as_list(raw):
            for condition in split_conditions(unwrap_group(str(chunk))):
                parts = parse_condition(condition)
                config = self._by_field.get(parts[0]) if parts else None
                if (
                    parts is None
                    or config is None
                    or not config.type.is_range
                    or parts[1] not in (Operator.GTE.value, Operator.LTE.value)
                ):
                    residual.append(condition)
                    continue
                _, op, value = parts
                slot = bounds.setdefault(config.field, [None, None])
                slot[0 if op == Operator.GTE.value else 1] = unquote_item(value)

        filters = []
        for field, (lower, upper) in bounds.items():
            range_filter = _range_filter(self._by_field[field], lower, upper)
            if range_filter is not None:
                filters.append(range_filter)
        return filters, ("(" + ",".join(residual) + ")") if residual else None

    def _always_on(self, seen: set[str]) -> list[Filter]:
        return [
            Filter.from_config(config)
            for config in self._configs
            if config.always_on and config.field not in seen
        ]


def _as_list(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, list | tuple):
        return list(raw)
    return [raw]


def _range_filter(config: FieldConfig, lower: Any, upper: Any) -> Filter | None:
    if lower is None and upper is None:
        return None
    return Filter(
        field=config.field,
        operator=RANGE_OPERATOR,
        value=RangeValue(lower, upper),
        config=config,
    )


def from_params(
    params: Mapping[str, Any] | None,
    configs: Iterable[FieldConfig],
    *,
    group_key: str = DEFAULT_GROUP_KEY,
) -> ParseResult:
    """Shortcut for ``ParamsParser(configs).parse(params)``."""
    return ParamsParser(configs, group_key=group_key).parse(params)


def from_query_string(
    query_string: str,
    configs: Iterable[FieldConfig],
    *,
    group_key: str = DEFAULT_GROUP_KEY,
) -> ParseResult:
    """Parse a raw ``a=b&c=d`` query string; repeated keys become lists."""
    return from_params(query_string_to_params(query_string), configs, group_key=group_key)


def query_string_to_params(query_string: str) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        if key not in params:
            params[key] = value
        elif isinstance(params[key], list):
            params[key].append(value)
        else:
            params[key] = [params[key], value]
    return params
