"""
Operator catalogue: human labels, value arity and per-type option lists.

The catalogue is static, process-wide data. Lookups never raise for an
unknown operator; ``label`` falls back to the raw symbol and ``arity`` to
``single``.
"""

from __future__ import annotations

from typing import Any

from .types import FilterType, Operator, ValueArity

_LABELS: dict[Operator, str] = {
    Operator.EQ: "is",
    Operator.NEQ: "is not",
    Operator.GT: "is greater than",
    Operator.GTE: "is at least",
    Operator.LT: "is less than",
    Operator.LTE: "is at most",
    Operator.LIKE: "like",
    Operator.ILIKE: "contains",
    Operator.IN: "is any of",
    Operator.NOT_IN: "is none of",
    Operator.IS: "is",
    Operator.IS_NULL: "is null",
    Operator.CS: "contains all",
    Operator.CD: "contained by",
    Operator.OV: "contains any",
    Operator.FTS: "search",
    Operator.PLFTS: "search",
    Operator.PHFTS: "phrase search",
    Operator.GTE_LTE: "between",
}

MULTI_VALUE_OPERATORS: frozenset[Operator] = frozenset(
    {Operator.IN, Operator.NOT_IN, Operator.OV, Operator.CS, Operator.CD}
)
ARRAY_OPERATORS: frozenset[Operator] = frozenset(
    {Operator.CS, Operator.CD, Operator.OV}
)
PATTERN_OPERATORS: frozenset[Operator] = frozenset({Operator.LIKE, Operator.ILIKE})
RANGE_OPERATOR = Operator.GTE_LTE

# Operators that may appear as the ``op.`` prefix of a parameter value.
WIRE_OPERATORS: frozenset[Operator] = frozenset(
    op for op in Operator if op is not RANGE_OPERATOR
)

_TYPE_OPTIONS: dict[FilterType, list[tuple[Operator, str]]] = {
    FilterType.TEXT: [
        (Operator.ILIKE, "contains"),
        (Operator.EQ, "equals"),
        (Operator.NEQ, "not equals"),
        (Operator.LIKE, "like"),
    ],
    FilterType.NUMBER: [
        (Operator.EQ, "is"),
        (Operator.NEQ, "is not"),
        (Operator.LT, "is less than"),
        (Operator.LTE, "is at most"),
        (Operator.GT, "is greater than"),
        (Operator.GTE, "is at least"),
    ],
    FilterType.SELECT: [(Operator.EQ, "is"), (Operator.NEQ, "is not")],
    FilterType.MULTI_SELECT: [
        (Operator.OV, "contains any"),
        (Operator.CS, "contains all"),
    ],
    FilterType.DATE: [
        (Operator.EQ, "is"),
        (Operator.GT, "after"),
        (Operator.GTE, "on or after"),
        (Operator.LT, "before"),
        (Operator.LTE, "on or before"),
    ],
    FilterType.DATETIME: [
        (Operator.EQ, "is"),
        (Operator.GT, "after"),
        (Operator.GTE, "on or after"),
        (Operator.LT, "before"),
        (Operator.LTE, "on or before"),
    ],
    FilterType.DATE_RANGE: [(Operator.GTE_LTE, "between")],
    FilterType.DATETIME_RANGE: [(Operator.GTE_LTE, "between")],
    FilterType.BOOLEAN: [(Operator.IS, "is")],
    FilterType.RADIO_GROUP: [(Operator.EQ, "is")],
}

# (allowed operators, default operator) used by the config builders.
_TYPE_DEFAULTS: dict[FilterType, tuple[tuple[Operator, ...], Operator]] = {
    FilterType.TEXT: (
        (Operator.ILIKE, Operator.EQ, Operator.NEQ, Operator.LIKE),
        Operator.ILIKE,
    ),
    FilterType.NUMBER: (
        (
            Operator.EQ,
            Operator.NEQ,
            Operator.GT,
            Operator.GTE,
            Operator.LT,
            Operator.LTE,
        ),
        Operator.EQ,
    ),
    FilterType.SELECT: ((Operator.EQ, Operator.NEQ), Operator.EQ),
    FilterType.MULTI_SELECT: ((Operator.CS, Operator.OV), Operator.OV),
    FilterType.DATE: (
        (Operator.EQ, Operator.GT, Operator.GTE, Operator.LT, Operator.LTE),
        Operator.EQ,
    ),
    FilterType.DATETIME: (
        (Operator.EQ, Operator.GT, Operator.GTE, Operator.LT, Operator.LTE),
        Operator.EQ,
    ),
    FilterType.DATE_RANGE: ((Operator.GTE_LTE,), Operator.GTE_LTE),
    FilterType.DATETIME_RANGE: ((Operator.GTE_LTE,), Operator.GTE_LTE),
    FilterType.BOOLEAN: ((Operator.IS,), Operator.IS),
    FilterType.RADIO_GROUP: ((Operator.EQ,), Operator.EQ),
}


def _check_exhaustive() -> None:
    missing_labels = set(Operator) - set(_LABELS)
    if missing_labels:
        raise RuntimeError(f"Operators without a label: {sorted(missing_labels)}")
    for table_name, table in (("options", _TYPE_OPTIONS), ("defaults", _TYPE_DEFAULTS)):
        missing = set(FilterType) - set(table)
        if missing:
            raise RuntimeError(f"Filter types missing from {table_name}: {sorted(missing)}")


_check_exhaustive()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def parse_operator(symbol: Any) -> Operator | None:
    """Return the ``Operator`` for *symbol*, or ``None`` if unknown."""
    if isinstance(symbol, Operator):
        return symbol
    try:
        return Operator(str(symbol).strip().lower())
    except ValueError:
        return None


def label(operator: Operator | str) -> str:
    """Display label for *operator*; unknown operators return their symbol."""
    op = parse_operator(operator)
    if op is None:
        return str(operator)
    return _LABELS[op]


def arity(operator: Operator | str) -> ValueArity:
    """``multi`` for list-valued operators, ``single`` for everything else."""
    op = parse_operator(operator)
    if op in MULTI_VALUE_OPERATORS:
        return ValueArity.MULTI
    return ValueArity.SINGLE


def is_multi(operator: Operator | str) -> bool:
    return arity(operator) is ValueArity.MULTI


def options_for_type(filter_type: FilterType | str) -> list[tuple[Operator, str]]:
    """Operator choices (with type-specific wording) for a filter type."""
    return list(_TYPE_OPTIONS[FilterType(filter_type)])


def default_operators_for_type(
    filter_type: FilterType | str,
) -> tuple[tuple[Operator, ...], Operator]:
    """Return ``(allowed_operators, default_operator)`` for a filter type."""
    return _TYPE_DEFAULTS[FilterType(filter_type)]
