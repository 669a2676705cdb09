"""
SQLAlchemyAdapter — apply conditions to a SQLAlchemy 2.x ``Select``.

Columns are resolved from the mapped *model* when one is given, otherwise
from the FROM clauses of the statement being filtered::

    adapter = SQLAlchemyAdapter(Order)
    stmt = QueryBuilder(adapter).apply(select(Order), filters)
    total = adapter.count(stmt, session)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, func, inspect, literal_column, select

from ...exceptions import ConfigurationError, FieldNotFoundError
from ..base import FilterAdapter
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from sqlalchemy.engine import Connection

    from ...types import Operator
    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger(__name__)


class SQLAlchemyAdapter(FilterAdapter):
    """Reference adapter: each condition becomes a ``WHERE`` clause."""

    def __init__(
        self,
        model: type[Any] | None = None,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        """
        Args:
            model: Optional mapped class used for column resolution.
            registry: Optional custom operator registry. Falls back to
                ``DEFAULT_SQLA_REGISTRY``.
        """
        self._model = model
        self._registry = registry or DEFAULT_SQLA_REGISTRY

    def supported_operators(self) -> frozenset[Operator]:
        return self._registry.supported_operators

    def apply_condition(
        self,
        queryable: Select[Any],
        field: str,
        operator: Operator,
        value: Any,
    ) -> Select[Any]:
        column = self.resolve_column(queryable, field)
        return queryable.where(self._registry.apply(operator, column, value))

    def resolve_column(self, stmt: Select[Any], field: str) -> Any:
        """
        Raises:
            FieldNotFoundError: If *field* is not a column of the model or
                of the statement's FROM clauses.
        """
        columns = self._columns(stmt)
        column = columns.get(field)
        if column is None:
            raise FieldNotFoundError(field, self._source_name(stmt), sorted(columns))
        return column

    def _columns(self, stmt: Select[Any]) -> dict[str, Any]:
        if self._model is not None:
            mapper = inspect(self._model)
            return {attr.key: getattr(self._model, attr.key) for attr in mapper.column_attrs}
        columns: dict[str, Any] = {}
        for from_clause in stmt.get_final_froms():
            for column in from_clause.c:
                columns.setdefault(column.key, column)
        return columns

    def _source_name(self, stmt: Select[Any]) -> str:
        if self._model is not None:
            return self._model.__name__
        names = [getattr(f, "name", str(f)) for f in stmt.get_final_froms()]
        return ", ".join(names) or "<select>"

    # -- pagination / counting ---------------------------------------------

    def paginate(
        self, queryable: Select[Any], limit: int | None, offset: int | None
    ) -> Select[Any]:
        if limit is not None:
            queryable = queryable.limit(limit)
        if offset is not None:
            queryable = queryable.offset(offset)
        return queryable

    @staticmethod
    def count_statement(stmt: Select[Any]) -> Select[Any]:
        """
        ``SELECT count(*)`` over *stmt* with ORDER BY, LIMIT, OFFSET and the
        projection stripped; filters and joins are kept.
        """
        inner = (
            stmt.order_by(None)
            .limit(None)
            .offset(None)
            .with_only_columns(literal_column("1"), maintain_column_froms=True)
        )
        return select(func.count()).select_from(inner.subquery())

    def count(
        self, queryable: Select[Any], session: Session | Connection | None = None
    ) -> int:
        """
        Execute :meth:`count_statement` through a synchronous session.

        Raises:
            ConfigurationError: If no session or connection is given.
        """
        if session is None:
            raise ConfigurationError(
                "SQLAlchemyAdapter.count() requires a Session or Connection"
            )
        total = session.execute(self.count_statement(queryable)).scalar_one()
        logger.debug("Counted %d rows", total)
        return int(total)
