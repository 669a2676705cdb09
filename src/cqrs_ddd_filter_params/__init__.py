"""URL filter parameters — parse, serialize, validate and apply filters."""

from __future__ import annotations

from . import config
from .adapters import Condition, FilterAdapter, MemoryAdapter, MemoryQuery
from .casting import SchemaTypeCaster, TypeCaster, cast_value
from .config import FieldConfig
from .exceptions import (
    ConfigurationError,
    FieldNotFoundError,
    FilterError,
    FilterValidationError,
    OperatorNotSupportedError,
    TypeCastError,
)
from .filter import Filter
from .pagination import Pagination, pagination_from_params
from .parser import ParamsParser, ParseResult, from_params, from_query_string
from .query_builder import QueryBuilder, to_conditions
from .serializer import (
    ParamsSerializer,
    pagination_to_params,
    to_params,
    to_path,
    to_query_string,
)
from .types import FilterType, Operator, RangeValue, ValueArity
from .validator import (
    FilterValidationResult,
    FilterValidator,
    FilterViolation,
    InvalidOperator,
    ListTooLarge,
    ValueTooLong,
    validate,
)

__all__ = [
    "Condition",
    "ConfigurationError",
    "FieldConfig",
    "FieldNotFoundError",
    "Filter",
    "FilterAdapter",
    "FilterError",
    "FilterType",
    "FilterValidationError",
    "FilterValidationResult",
    "FilterValidator",
    "FilterViolation",
    "InvalidOperator",
    "ListTooLarge",
    "MemoryAdapter",
    "MemoryQuery",
    "Operator",
    "OperatorNotSupportedError",
    "Pagination",
    "ParamsParser",
    "ParamsSerializer",
    "ParseResult",
    "QueryBuilder",
    "RangeValue",
    "SchemaTypeCaster",
    "TypeCastError",
    "TypeCaster",
    "ValueArity",
    "ValueTooLong",
    "cast_value",
    "config",
    "from_params",
    "from_query_string",
    "pagination_from_params",
    "pagination_to_params",
    "to_conditions",
    "to_params",
    "to_path",
    "to_query_string",
    "validate",
]
