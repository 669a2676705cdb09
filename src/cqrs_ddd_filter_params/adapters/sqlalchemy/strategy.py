"""
SQLAlchemy operator strategies.

One ``SQLAlchemyOperator`` subclass per :class:`Operator` lives in
``operators.py``; the registry maps operators to them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..base import OperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from ...types import Operator


class SQLAlchemyOperator(ABC):
    """Compile one operator into a ``ColumnElement[bool]``."""

    @property
    @abstractmethod
    def name(self) -> Operator:
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Args:
            column: A column or instrumented attribute.
            value: The condition value, already cast when a caster ran.
        """
        ...


class SQLAlchemyOperatorRegistry(OperatorRegistry[SQLAlchemyOperator]):
    def apply(self, name: Operator, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Raises:
            OperatorNotSupportedError: If *name* is not registered.
        """
        return self.require(name).apply(column, value)
