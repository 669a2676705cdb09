"""
FilterValidator — reject malformed or oversized filters before querying.

The validator only reports; it never drops or mutates filters. Checks run
per filter in order (operator, string length, list size) and stop at the
first violation::

    result = FilterValidator().validate(filters)
    if not result:
        return bad_request(result.error.to_dict())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from .exceptions import FilterValidationError

if TYPE_CHECKING:
    from .filter import Filter

logger = logging.getLogger(__name__)

DEFAULT_MAX_VALUE_LENGTH = 500
DEFAULT_MAX_LIST_SIZE = 100


@dataclass(frozen=True)
class FilterViolation:
    """Base class for validation failures."""

    code: ClassVar[str] = "FILTER_VIOLATION"

    field: str

    @property
    def message(self) -> str:
        return f"Invalid filter on '{self.field}'"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **asdict(self)}


@dataclass(frozen=True)
class InvalidOperator(FilterViolation):
    code: ClassVar[str] = "INVALID_OPERATOR"

    operator: str

    @property
    def message(self) -> str:
        return f"Operator '{self.operator}' is not allowed for field '{self.field}'"


@dataclass(frozen=True)
class ValueTooLong(FilterViolation):
    code: ClassVar[str] = "VALUE_TOO_LONG"

    actual: int
    maximum: int

    @property
    def message(self) -> str:
        return (
            f"Value for field '{self.field}' is {self.actual} characters long "
            f"(maximum {self.maximum})"
        )


@dataclass(frozen=True)
class ListTooLarge(FilterViolation):
    code: ClassVar[str] = "LIST_TOO_LARGE"

    actual: int
    maximum: int

    @property
    def message(self) -> str:
        return (
            f"List for field '{self.field}' has {self.actual} items "
            f"(maximum {self.maximum})"
        )


@dataclass(frozen=True)
class FilterValidationResult:
    """Outcome of :meth:`FilterValidator.validate`; truthy when valid."""

    error: FilterViolation | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> FilterValidationResult:
        return cls()

    @classmethod
    def failure(cls, error: FilterViolation) -> FilterValidationResult:
        return cls(error=error)

    def raise_for_error(self) -> None:
        """Raise :class:`FilterValidationError` if a violation was found."""
        if self.error is not None:
            raise FilterValidationError(self.error)

    def __bool__(self) -> bool:
        return self.is_valid


class FilterValidator:
    """Check operators against configs and bound value sizes."""

    def __init__(
        self,
        *,
        max_value_length: int = DEFAULT_MAX_VALUE_LENGTH,
        max_list_size: int = DEFAULT_MAX_LIST_SIZE,
    ) -> None:
        self.max_value_length = max_value_length
        self.max_list_size = max_list_size

    def validate(self, filters: Iterable[Filter]) -> FilterValidationResult:
        for f in filters:
            violation = self.check(f)
            if violation is not None:
                logger.debug("Filter rejected: %s", violation.message)
                return FilterValidationResult.failure(violation)
        return FilterValidationResult.success()

    def check(self, f: Filter) -> FilterViolation | None:
        """Return the first violation of a single filter, if any."""
        if not f.config.allows(f.operator):
            return InvalidOperator(field=f.field, operator=str(f.operator))
        if isinstance(f.value, str) and len(f.value) > self.max_value_length:
            return ValueTooLong(
                field=f.field, actual=len(f.value), maximum=self.max_value_length
            )
        if isinstance(f.value, list) and len(f.value) > self.max_list_size:
            return ListTooLarge(
                field=f.field, actual=len(f.value), maximum=self.max_list_size
            )
        return None


def validate(filters: Iterable[Filter]) -> FilterValidationResult:
    """Validate with the default limits."""
    return FilterValidator().validate(filters)
