"""
FieldConfig — static description of one filterable field.

Configs are created once at application start and shared read-only across
requests. One builder function per filter type fills in that type's
allowed operators and default operator::

    configs = [
        text("title", custom_param="search", always_on=True),
        select("status", options=["pending", "active", "shipped"]),
        multi_select("tags", options=["urgent", "bug", "feature"]),
        date_range("inserted_at", label="Created"),
        boolean("urgent"),
    ]
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .operators import default_operators_for_type
from .types import FilterType, Operator


class FieldConfig(BaseModel):
    """Immutable configuration for a single filterable field.

    Attributes:
        field: Public field identifier, unique within a config set.
        type: The field's filter type.
        operators: Allowed operators (non-empty, ordered).
        default_operator: Operator used when none is given; must be in
            ``operators``.
        default_value: Value for new filters and the reset target.
        query_field: Backend column name when it differs from ``field``.
        custom_param: Bespoke parameter key; the value is written without
            an operator prefix.
        options: Static option list (``"value"`` or ``("Label", "value")``).
        options_fn: Zero-argument supplier resolved lazily by UI callers.
        always_on: The parser synthesises a default filter when absent.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    field: str
    type: FilterType
    label: str = ""
    operators: tuple[Operator, ...]
    default_operator: Operator
    default_value: Any = None
    query_field: str | None = None
    custom_param: str | None = None
    options: tuple[Any, ...] | None = None
    options_fn: Callable[[], Sequence[Any]] | None = None
    placeholder: str | None = None
    always_on: bool = False
    removable: bool = True

    # Presentation metadata consumed by UI collaborators.
    true_label: str = "Yes"
    false_label: str = "No"
    any_label: str = "Any"
    nullable: bool = False
    style: Literal["pills", "radios"] = "pills"
    inline_threshold: int = Field(default=4, ge=0)
    time_format: Literal["twelve_hour", "twenty_four_hour"] = "twelve_hour"
    minute_step: Literal[1, 5, 15, 30] = 1

    @model_validator(mode="before")
    @classmethod
    def _default_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("label") and data.get("field"):
            data = {**data, "label": humanize(str(data["field"]))}
        return data

    @model_validator(mode="after")
    def _check_invariants(self) -> FieldConfig:
        if not self.operators:
            raise ValueError(f"Field '{self.field}' must allow at least one operator")
        if self.default_operator not in self.operators:
            raise ValueError(
                f"Default operator '{self.default_operator.value}' of field "
                f"'{self.field}' is not among its operators"
            )
        if self.type.is_choice and self.options is None and self.options_fn is None:
            raise ValueError(
                f"Field '{self.field}' of type '{self.type.value}' requires "
                f"'options' or 'options_fn'"
            )
        return self

    @property
    def column(self) -> str:
        """Backend attribute name."""
        return self.query_field or self.field

    @property
    def param_key(self) -> str:
        """URL parameter key."""
        return self.custom_param or self.field

    def allows(self, operator: Operator | str) -> bool:
        return operator in self.operators


def humanize(name: str) -> str:
    """``"inserted_at"`` -> ``"Inserted at"``."""
    text = name.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _build(field: str, filter_type: FilterType, options: dict[str, Any]) -> FieldConfig:
    allowed, default = default_operators_for_type(filter_type)
    operators = tuple(options.pop("operators", allowed))
    if "default_operator" not in options:
        # An empty list is left for the model validator to reject.
        fallback = operators[0] if operators else default
        options["default_operator"] = default if default in operators else fallback
    if "options" in options and options["options"] is not None:
        options["options"] = tuple(options["options"])
    return FieldConfig(field=field, type=filter_type, operators=operators, **options)


def text(field: str, **options: Any) -> FieldConfig:
    """Text filter. Operators ``ilike, eq, neq, like``; default ``ilike``."""
    return _build(field, FilterType.TEXT, options)


def number(field: str, **options: Any) -> FieldConfig:
    """Number filter. Operators ``eq, neq, gt, gte, lt, lte``; default ``eq``."""
    return _build(field, FilterType.NUMBER, options)


def select(field: str, **options: Any) -> FieldConfig:
    """Single-select filter. Requires ``options`` or ``options_fn``."""
    return _build(field, FilterType.SELECT, options)


def multi_select(field: str, **options: Any) -> FieldConfig:
    """
    Multi-select filter over an array column.

    ``cs`` matches rows whose array contains all selected values, ``ov``
    (the default) rows containing any of them.
    """
    return _build(field, FilterType.MULTI_SELECT, options)


def date(field: str, **options: Any) -> FieldConfig:
    return _build(field, FilterType.DATE, options)


def datetime(field: str, **options: Any) -> FieldConfig:
    return _build(field, FilterType.DATETIME, options)


def date_range(field: str, **options: Any) -> FieldConfig:
    """Date range filter; the single operator is ``gte_lte``."""
    return _build(field, FilterType.DATE_RANGE, options)


def datetime_range(field: str, **options: Any) -> FieldConfig:
    return _build(field, FilterType.DATETIME_RANGE, options)


def boolean(field: str, **options: Any) -> FieldConfig:
    """Boolean filter using ``is.true`` / ``is.false``."""
    return _build(field, FilterType.BOOLEAN, options)


def radio_group(field: str, **options: Any) -> FieldConfig:
    return _build(field, FilterType.RADIO_GROUP, options)
