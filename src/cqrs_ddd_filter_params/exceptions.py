"""
Filter exception hierarchy.

All exceptions inherit from ``FilterError`` and provide ``to_dict()`` for
API-friendly error responses. Malformed URL input never raises; these are
reserved for validation failures, cast failures and programming errors.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .validator import FilterViolation


class FilterError(Exception):
    """Base exception for all filter errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ConfigurationError(FilterError):
    """A component was called with an incomplete or inconsistent setup."""


class FilterValidationError(FilterError):
    """Raised on request when the validator reports a violation."""

    def __init__(self, violation: FilterViolation) -> None:
        self.violation = violation
        super().__init__(violation.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FILTER_VALIDATION_ERROR",
            **self.violation.to_dict(),
        }


class TypeCastError(FilterError):
    """A condition value could not be coerced to the field's type."""

    def __init__(self, field: str, value: Any, target: str) -> None:
        self.field = field
        self.value = value
        self.target = target
        super().__init__(f"Cannot cast {value!r} to {target} for field '{field}'")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TYPE_CAST_ERROR",
            "field": self.field,
            "value": repr(self.value),
            "target": self.target,
        }


class FieldNotFoundError(FilterError):
    """
    The backend cannot resolve a field to a column.

    Uses fuzzy matching to suggest similar valid field names.
    """

    def __init__(
        self,
        field: str,
        source: str,
        available_fields: list[str],
        cutoff: float = 0.6,
    ) -> None:
        self.field = field
        self.source = source
        self.available_fields = available_fields
        self.suggestions = get_close_matches(field, available_fields, n=3, cutoff=cutoff)

        message = f"Unknown field '{field}' on '{source}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.field,
            "source": self.source,
            "suggestions": self.suggestions,
        }


class OperatorNotSupportedError(FilterError):
    """The backend adapter has no translation for an operator."""

    def __init__(self, operator: str, supported: list[str]) -> None:
        self.operator = operator
        self.supported = supported
        self.suggestions = get_close_matches(operator, supported, n=3, cutoff=0.6)

        message = f"Operator '{operator}' is not supported by this backend."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_SUPPORTED",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "supported": sorted(self.supported),
        }
