"""
URL value grammar — ``operator.value`` encoding and decoding.

Wire format::

    field=eq.value                 equality
    field=ilike.*pattern*          pattern match, ``*`` wildcards
    field=in.(v1,v2)               membership
    field=is.true | is.null        tri-state
    field=cs.{v1,v2}               array containment / overlap
    and=(field.gte.v1,field.lte.v2)  grouped conditions

List items containing delimiters, quotes, backslashes or surrounding
whitespace are double-quoted with backslash escapes: ``in.("a,b",c)``.

Every function here is lenient: a value that does not fit the grammar
yields ``None`` (or is kept literally) rather than raising.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from .operators import ARRAY_OPERATORS, PATTERN_OPERATORS, WIRE_OPERATORS
from .types import Operator

_WILDCARD = "*"
_QUOTE = '"'
_ESCAPE = "\\"
_OPENERS = "({"
_CLOSERS = ")}"
_NEEDS_QUOTING = frozenset(',(){}"\\')

_TRUE = "true"
_FALSE = "false"
_NULL = "null"
_NOT_NULL = "not_null"


# ---------------------------------------------------------------------------
# Scalars and wildcards
# ---------------------------------------------------------------------------


def format_scalar(value: Any) -> str:
    """Render a scalar the way it appears in a URL."""
    if value is None:
        return _NULL
    if isinstance(value, bool):
        return _TRUE if value else _FALSE
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def strip_wildcards(value: Any) -> Any:
    """Remove leading and trailing ``*`` markers from a string value."""
    if not isinstance(value, str):
        return value
    return value.lstrip(_WILDCARD).rstrip(_WILDCARD)


def wrap_wildcards(value: str) -> str:
    """Ensure *value* starts and ends with ``*``. Idempotent."""
    if not value.startswith(_WILDCARD):
        value = _WILDCARD + value
    if not value.endswith(_WILDCARD):
        value = value + _WILDCARD
    return value


# ---------------------------------------------------------------------------
# List literals
# ---------------------------------------------------------------------------


def _brackets(operator: Operator) -> tuple[str, str]:
    return ("{", "}") if operator in ARRAY_OPERATORS else ("(", ")")


def quote_item(item: Any) -> str:
    text = format_scalar(item)
    if text == "" or text != text.strip() or any(ch in _NEEDS_QUOTING for ch in text):
        escaped = text.replace(_ESCAPE, _ESCAPE * 2).replace(_QUOTE, _ESCAPE + _QUOTE)
        return f"{_QUOTE}{escaped}{_QUOTE}"
    return text


def format_list_literal(values: Any, operator: Operator) -> str:
    """``["a", "b"]`` -> ``(a,b)`` or ``{a,b}`` depending on *operator*."""
    opener, closer = _brackets(operator)
    return opener + ",".join(quote_item(v) for v in values) + closer


def split_items(inner: str) -> list[str]:
    """Split the inside of a list literal on commas, honouring quotes."""
    if not inner.strip():
        return []
    items: list[str] = []
    current: list[str] = []
    quoted = False
    in_quotes = False
    chars = iter(inner)
    for ch in chars:
        if in_quotes:
            if ch == _ESCAPE:
                current.append(next(chars, ""))
            elif ch == _QUOTE:
                in_quotes = False
            else:
                current.append(ch)
        elif ch == _QUOTE:
            in_quotes = True
            quoted = True
            current = []
        elif ch == ",":
            items.append(_finish_item(current, quoted))
            current, quoted = [], False
        else:
            current.append(ch)
    items.append(_finish_item(current, quoted))
    return items


def _finish_item(chars: list[str], quoted: bool) -> str:
    text = "".join(chars)
    return text if quoted else text.strip()


def unquote_item(text: str) -> str:
    """Inverse of :func:`quote_item`; unquoted text is returned as is."""
    stripped = text.strip()
    if len(stripped) >= 2 and stripped[0] == _QUOTE and stripped[-1] == _QUOTE:
        return split_items(stripped)[0]
    return text


def parse_list_literal(text: str, operator: Operator) -> list[str]:
    """
    Parse a list literal for *operator*.

    A value without the enclosing brackets is wrapped as a one-element
    list.
    """
    opener, closer = _brackets(operator)
    stripped = text.strip()
    if stripped.startswith(opener) and stripped.endswith(closer) and len(stripped) >= 2:
        return split_items(stripped[1:-1])
    if stripped == "":
        return []
    return [text]


# ---------------------------------------------------------------------------
# Grouped conditions
# ---------------------------------------------------------------------------


def unwrap_group(text: str) -> str:
    """``(a,b)`` -> ``a,b``."""
    stripped = text.strip()
    if stripped.startswith("("):
        stripped = stripped[1:]
    if stripped.endswith(")"):
        stripped = stripped[:-1]
    return stripped


def split_conditions(text: str) -> list[str]:
    """
    Split a grouped condition list on top-level commas.

    Commas nested inside ``(...)`` or ``{...}`` or inside double quotes do
    not separate conditions, so ``status.in.(a,b),total.gte.5`` yields two
    conditions.
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    in_quotes = False
    chars = iter(text)
    for ch in chars:
        if in_quotes:
            current.append(ch)
            if ch == _ESCAPE:
                current.append(next(chars, ""))
            elif ch == _QUOTE:
                in_quotes = False
            continue
        if ch == _QUOTE:
            in_quotes = True
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS and depth > 0:
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def parse_condition(condition: str) -> tuple[str, str, str] | None:
    """``field.op.value`` -> ``(field, op, value)``; ``None`` if malformed."""
    parts = condition.split(".", 2)
    if len(parts) != 3 or not parts[0]:
        return None
    return parts[0], parts[1], parts[2]


def format_condition(field: str, operator: Operator, value: Any) -> str:
    """
    ``field.op.value`` for the grouping parameter.

    A scalar holding a delimiter is double-quoted so the condition list
    still splits correctly; :func:`unquote_item` reverses it.
    """
    if isinstance(value, list | tuple | set | frozenset):
        return f"{field}.{format_operator_value(operator, value)}"
    return f"{field}.{operator.value}.{quote_item(value)}"


# ---------------------------------------------------------------------------
# operator.value
# ---------------------------------------------------------------------------


def split_operator_value(raw: str) -> tuple[Operator, str] | None:
    """Split on the first ``.``; ``None`` if the prefix is not an operator."""
    prefix, sep, rest = raw.partition(".")
    if not sep:
        return None
    try:
        operator = Operator(prefix)
    except ValueError:
        return None
    if operator not in WIRE_OPERATORS:
        return None
    return operator, rest


def shape_value(operator: Operator, raw: str) -> tuple[Operator, Any]:
    """
    Convert the textual value of *operator* into its structured form.

    ``is.null`` / ``is.not_null`` become ``is_null`` with ``True`` /
    ``False``; list operators parse their literal; pattern operators drop
    ``*`` markers.
    """
    if operator in (Operator.IN, Operator.NOT_IN) or operator in ARRAY_OPERATORS:
        return operator, parse_list_literal(raw, operator)
    if operator in PATTERN_OPERATORS:
        return operator, strip_wildcards(raw)
    lowered = raw.strip().lower()
    if operator is Operator.IS:
        if lowered == _TRUE:
            return operator, True
        if lowered == _FALSE:
            return operator, False
        if lowered == _NULL:
            return Operator.IS_NULL, True
        if lowered == _NOT_NULL:
            return Operator.IS_NULL, False
        return operator, raw
    if operator is Operator.IS_NULL:
        if lowered in (_TRUE, _NULL):
            return operator, True
        if lowered in (_FALSE, _NOT_NULL):
            return operator, False
    return operator, raw


def parse_operator_value(raw: Any) -> tuple[Operator, Any] | None:
    """
    Parse ``operator.value`` into ``(operator, value)``.

    Returns ``None`` when *raw* is not a string or carries no recognised
    operator prefix.
    """
    if not isinstance(raw, str):
        return None
    split = split_operator_value(raw)
    if split is None:
        return None
    return shape_value(*split)


def _encode(operator: Operator, value: Any) -> tuple[str, str]:
    if operator is Operator.ILIKE and isinstance(value, str):
        return operator.value, wrap_wildcards(value)
    if operator is Operator.IS_NULL and isinstance(value, bool):
        return Operator.IS.value, _NULL if value else _NOT_NULL
    if isinstance(value, list | tuple | set | frozenset):
        return operator.value, format_list_literal(value, operator)
    return operator.value, format_scalar(value)


def format_operator_value(operator: Operator, value: Any) -> str:
    """Inverse of :func:`parse_operator_value`."""
    prefix, body = _encode(operator, value)
    return f"{prefix}.{body}"


def format_bare_value(operator: Operator, value: Any) -> str:
    """Value without the operator prefix, for custom parameters."""
    if operator is Operator.IS_NULL and isinstance(value, bool):
        return _NULL if value else _NOT_NULL
    if isinstance(value, list | tuple | set | frozenset):
        return format_list_literal(value, operator)
    return format_scalar(value)
