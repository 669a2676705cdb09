"""Filter — one active field/operator/value instance."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from .operators import RANGE_OPERATOR
from .types import Operator, RangeValue

if TYPE_CHECKING:
    from .config import FieldConfig

_UNSET: Any = object()


@dataclasses.dataclass(eq=False)
class Filter:
    """
    An active filter.

    ``value`` is a scalar for single-value operators, a list for
    multi-value operators and a :class:`RangeValue` for ``gte_lte``.
    Equality compares ``field``, ``operator`` and ``value`` only.
    """

    field: str
    operator: Operator
    value: Any
    config: FieldConfig = dataclasses.field(repr=False)
    id: str = ""

    def __post_init__(self) -> None:
        self.operator = Operator(self.operator)
        if self.operator is RANGE_OPERATOR and isinstance(self.value, tuple):
            self.value = RangeValue(*self.value)
        if not self.id:
            self.id = self.field

    @classmethod
    def from_config(
        cls,
        config: FieldConfig,
        operator: Operator | str | None = None,
        value: Any = _UNSET,
    ) -> Filter:
        """
        Build a filter for *config*.

        Without arguments the config's default operator and default value
        are used.
        """
        return cls(
            field=config.field,
            operator=Operator(operator) if operator is not None else config.default_operator,
            value=config.default_value if value is _UNSET else value,
            config=config,
        )

    @property
    def is_empty(self) -> bool:
        """True for values that would produce a vacuous predicate."""
        return is_empty_value(self.value)

    @property
    def is_unset(self) -> bool:
        """True when there is nothing to write to the URL; ``[]`` is still written."""
        return is_unset_value(self.value)

    def reset(self) -> None:
        """Restore the config's default operator and value in place."""
        self.operator = self.config.default_operator
        self.value = self.config.default_value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return (self.field, self.operator, self.value) == (
            other.field,
            other.operator,
            other.value,
        )

    __hash__ = None  # type: ignore[assignment]


def is_unset_value(value: Any) -> bool:
    """``None``, ``""`` or a range with neither bound."""
    if value is None or value == "":
        return True
    return isinstance(value, tuple) and len(value) == 2 and value[0] is None and value[1] is None


def is_empty_value(value: Any) -> bool:
    """An unset value or an empty list; such values never narrow a query."""
    return is_unset_value(value) or (isinstance(value, list) and not value)
