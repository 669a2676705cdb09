"""ParamsSerializer — list of Filter -> URL parameters."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from .operators import RANGE_OPERATOR
from .parser import DEFAULT_GROUP_KEY
from .syntax import (
    format_bare_value,
    format_condition,
    format_operator_value,
    split_conditions,
    unwrap_group,
)
from .types import Operator

if TYPE_CHECKING:
    from .filter import Filter
    from .pagination import Pagination

logger = logging.getLogger(__name__)

# Grammar punctuation left readable in query strings.
_QUERY_SAFE = "(){}[],.*:;!$'@/?\"\\|"


class ParamsSerializer:
    """
    Encode active filters as URL parameters.

    Unset filters (``None``, ``""``, a boundless range) are skipped; an
    empty list is written as ``op.()`` so it parses back. Range filters
    are collected into the grouping parameter, everything else becomes
    ``key=operator.value``.
    """

    def __init__(self, *, group_key: str = DEFAULT_GROUP_KEY) -> None:
        self._group_key = group_key

    def to_params(
        self,
        filters: Iterable[Filter],
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Return *params* (copied) updated with the encoded *filters*.

        Conditions already present under the grouping key are kept and the
        new range conditions appended inside the same parentheses.
        """
        result: dict[str, Any] = dict(params or {})
        conditions: list[str] = []
        for f in filters:
            if f.is_unset:
                logger.debug("Skipping unset filter '%s'", f.field)
                continue
            if f.operator is RANGE_OPERATOR:
                conditions.extend(range_conditions(f.field, f.value))
                continue
            custom_param = f.config.custom_param if f.config is not None else None
            if custom_param:
                result[custom_param] = format_bare_value(f.operator, f.value)
            else:
                result[f.field] = format_operator_value(f.operator, f.value)

        if conditions:
            existing = result.get(self._group_key)
            if isinstance(existing, str) and existing.strip():
                conditions = split_conditions(unwrap_group(existing)) + conditions
            result[self._group_key] = "(" + ",".join(conditions) + ")"
        return result


def range_conditions(field: str, value: Any) -> list[str]:
    """``("a", None)`` -> ``["field.gte.a"]``."""
    lower, upper = value
    out = []
    if lower is not None:
        out.append(format_condition(field, Operator.GTE, lower))
    if upper is not None:
        out.append(format_condition(field, Operator.LTE, upper))
    return out


def to_params(
    filters: Iterable[Filter],
    params: Mapping[str, Any] | None = None,
    *,
    group_key: str = DEFAULT_GROUP_KEY,
) -> dict[str, Any]:
    return ParamsSerializer(group_key=group_key).to_params(filters, params)


def to_query_string(params: Mapping[str, Any]) -> str:
    """
    Join parameters as ``key=value&...``.

    Keys are sorted; list values repeat the key. Only characters that
    change how a query string splits or decodes (``&``, ``=``, ``+``,
    ``%``, ``#``, whitespace, non-ASCII) are percent-encoded, so the
    operator grammar stays readable in the address bar and
    :func:`~.parser.from_query_string` reads back the same values.
    """
    pairs: list[str] = []
    for key in sorted(params):
        value = params[key]
        items = value if isinstance(value, list | tuple) else [value]
        pairs.extend(f"{_encode(key)}={_encode(item)}" for item in items)
    return "&".join(pairs)


def _encode(value: Any) -> str:
    return quote(str(value), safe=_QUERY_SAFE)


def to_path(base: str, params: Mapping[str, Any]) -> str:
    """``to_path("/orders", {"a": "eq.1"})`` -> ``"/orders?a=eq.1"``."""
    query = to_query_string(params)
    return f"{base}?{query}" if query else base


def pagination_to_params(pagination: Pagination) -> dict[str, str]:
    return {"limit": str(pagination.limit), "offset": str(pagination.offset)}
