"""
SQLAlchemy reference adapter.

Usage::

    from cqrs_ddd_filter_params.adapters.sqlalchemy import SQLAlchemyAdapter

    stmt = QueryBuilder(SQLAlchemyAdapter(Order)).apply(select(Order), filters)
"""

from __future__ import annotations

from .adapter import SQLAlchemyAdapter
from .casting import SQLAlchemyTypeCaster
from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyAdapter",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "SQLAlchemyTypeCaster",
    "build_default_sqla_registry",
]
