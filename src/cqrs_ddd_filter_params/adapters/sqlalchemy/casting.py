"""SQLAlchemyTypeCaster — derive cast targets from mapped column types."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.types import ARRAY

from ...casting import SchemaTypeCaster

logger = logging.getLogger(__name__)


def _python_type(column_type: Any) -> type | None:
    if isinstance(column_type, ARRAY):
        column_type = column_type.item_type
    try:
        return column_type.python_type  # type: ignore[no-any-return]
    except NotImplementedError:
        return None


class SQLAlchemyTypeCaster(SchemaTypeCaster):
    """
    Cast condition values to the ``python_type`` of the model's columns.

    Array columns cast each item to the element type. Columns whose type
    has no ``python_type`` are left uncast.
    """

    def __init__(self, model: type[Any]) -> None:
        types: dict[str, type] = {}
        for attr in inspect(model).column_attrs:
            target = _python_type(attr.columns[0].type)
            if target is None:
                logger.debug("Column '%s' has no python_type; not casting", attr.key)
                continue
            types[attr.key] = target
        super().__init__(types)
        self.model = model
