"""
SQLAlchemy operator implementations and default registry.

Array (``cs``/``cd``/``ov``) and full-text operators emit PostgreSQL
syntax; the rest are portable.
"""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import func

from ...exceptions import TypeCastError
from ...types import Operator
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


# -- comparison -------------------------------------------------------------


class EqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.EQ

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.eq(column, value))


class NotEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.NEQ

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.ne(column, value))


class GreaterThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.GT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.gt(column, value))


class GreaterEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.GTE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.ge(column, value))


class LessThanOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.LT

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.lt(column, value))


class LessEqualOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.LTE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", op_module.le(column, value))


# -- patterns ---------------------------------------------------------------


class LikeOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.LIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.like(value))


class ILikeOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.ILIKE

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.ilike(value))


# -- membership -------------------------------------------------------------


class InOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.in_(value))


class NotInOperator(SQLAlchemyOperator):
    @property
    def name(self) -> Operator:
        return Operator.NOT_IN

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", ~column.in_(value))


# -- null / boolean ---------------------------------------------------------


class IsOperator(SQLAlchemyOperator):
    """``column IS true | false | NULL``"""

    @property
    def name(self) -> Operator:
        return Operator.IS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value is not None and not isinstance(value, bool):
            raise TypeCastError(getattr(column, "key", str(column)), value, "bool")
        return cast("ColumnElement[bool]", column.is_(value))


class IsNullOperator(SQLAlchemyOperator):
    """``True`` -> ``IS NULL``, ``False`` -> ``IS NOT NULL``."""

    @property
    def name(self) -> Operator:
        return Operator.IS_NULL

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        if value:
            return cast("ColumnElement[bool]", column.is_(None))
        return cast("ColumnElement[bool]", column.is_not(None))


# -- arrays (PostgreSQL) ----------------------------------------------------


class ArrayContainsOperator(SQLAlchemyOperator):
    """``column @> value``"""

    @property
    def name(self) -> Operator:
        return Operator.CS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.op("@>")(list(value)))


class ArrayContainedByOperator(SQLAlchemyOperator):
    """``column <@ value``"""

    @property
    def name(self) -> Operator:
        return Operator.CD

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.op("<@")(list(value)))


class ArrayOverlapOperator(SQLAlchemyOperator):
    """``column && value``"""

    @property
    def name(self) -> Operator:
        return Operator.OV

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.op("&&")(list(value)))


# -- full-text search (PostgreSQL) ------------------------------------------


class FtsOperator(SQLAlchemyOperator):
    """``to_tsvector(column) @@ to_tsquery(value)``"""

    @property
    def name(self) -> Operator:
        return Operator.FTS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return func.to_tsvector(column).op("@@")(func.to_tsquery(value))


class PlainFtsOperator(SQLAlchemyOperator):
    """``to_tsvector(column) @@ plainto_tsquery(value)``"""

    @property
    def name(self) -> Operator:
        return Operator.PLFTS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return func.to_tsvector(column).op("@@")(func.plainto_tsquery(value))


class PhraseFtsOperator(SQLAlchemyOperator):
    """``to_tsvector(column) @@ phraseto_tsquery(value)``"""

    @property
    def name(self) -> Operator:
        return Operator.PHFTS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return func.to_tsvector(column).op("@@")(func.phraseto_tsquery(value))


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Create a registry with all built-in SQLAlchemy operators."""
    registry = SQLAlchemyOperatorRegistry()
    registry.register_all(
        # Comparison
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        # Patterns
        LikeOperator(),
        ILikeOperator(),
        # Membership
        InOperator(),
        NotInOperator(),
        # Null / boolean
        IsOperator(),
        IsNullOperator(),
        # Arrays
        ArrayContainsOperator(),
        ArrayContainedByOperator(),
        ArrayOverlapOperator(),
        # Full-text search
        FtsOperator(),
        PlainFtsOperator(),
        PhraseFtsOperator(),
    )
    return registry


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()
