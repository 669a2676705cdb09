"""Backend adapters translating neutral conditions into predicates.

The SQLAlchemy adapter lives in :mod:`.sqlalchemy` and is imported
explicitly so the core never requires SQLAlchemy.
"""

from __future__ import annotations

from .base import Condition, FilterAdapter, OperatorRegistry
from .memory import MemoryAdapter, MemoryOperator, MemoryOperatorRegistry, MemoryQuery

__all__ = [
    "Condition",
    "FilterAdapter",
    "MemoryAdapter",
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "MemoryQuery",
    "OperatorRegistry",
]
