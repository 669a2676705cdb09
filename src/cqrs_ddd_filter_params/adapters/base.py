"""FilterAdapter — backend-specific translation of neutral conditions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, NamedTuple, Protocol, TypeVar

from ..exceptions import OperatorNotSupportedError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..types import Operator


class Condition(NamedTuple):
    """One backend-neutral predicate: ``field <operator> value``.

    ``field`` is the backend column name (``FieldConfig.column``).
    """

    field: str
    operator: Operator
    value: Any


class OperatorStrategy(Protocol):
    """Anything that handles one operator, keyed by :attr:`name`."""

    @property
    def name(self) -> Operator:
        ...


StrategyT = TypeVar("StrategyT", bound=OperatorStrategy)


class OperatorRegistry(Generic[StrategyT]):
    """
    Operator strategies keyed by :class:`Operator`.

    Each adapter subclasses this with its own strategy type and an entry
    point that runs the looked-up strategy.
    """

    def __init__(self) -> None:
        self._operators: dict[Operator, StrategyT] = {}

    def register(self, strategy: StrategyT) -> None:
        """Add *strategy*, replacing any registered for the same operator."""
        self._operators[strategy.name] = strategy

    def register_all(self, *strategies: StrategyT) -> None:
        for strategy in strategies:
            self.register(strategy)

    @property
    def supported_operators(self) -> frozenset[Operator]:
        return frozenset(self._operators)

    def require(self, name: Operator) -> StrategyT:
        """
        Raises:
            OperatorNotSupportedError: If no strategy handles *name*.
        """
        strategy = self._operators.get(name)
        if strategy is None:
            raise OperatorNotSupportedError(
                str(name), sorted(str(op) for op in self._operators)
            )
        return strategy


class FilterAdapter(ABC):
    """
    Translate conditions into predicates on a backend queryable.

    The query builder never knows the queryable's type; it only calls the
    methods below. Adapters return a new queryable and never execute it
    (``count`` excepted).
    """

    @abstractmethod
    def apply_condition(
        self,
        queryable: Any,
        field: str,
        operator: Operator,
        value: Any,
    ) -> Any:
        """Return *queryable* narrowed by one condition."""
        ...

    @abstractmethod
    def supported_operators(self) -> frozenset[Operator]:
        ...

    def supports(self, operator: Operator) -> bool:
        return operator in self.supported_operators()

    def check_supported(self, operator: Operator) -> None:
        """
        Raises:
            OperatorNotSupportedError: If *operator* has no translation.
        """
        if not self.supports(operator):
            raise OperatorNotSupportedError(
                str(operator), sorted(str(op) for op in self.supported_operators())
            )

    def substring_pattern(self, value: str) -> str:
        """Wrap a pattern-match value in backend wildcards."""
        return f"%{value}%"

    def apply_conditions(self, queryable: Any, conditions: Iterable[Condition]) -> Any:
        for condition in conditions:
            queryable = self.apply_condition(
                queryable, condition.field, condition.operator, condition.value
            )
        return queryable

    @abstractmethod
    def paginate(self, queryable: Any, limit: int | None, offset: int | None) -> Any:
        ...

    @abstractmethod
    def count(self, queryable: Any, session: Any = None) -> int:
        """Number of rows *queryable* matches, ignoring order and paging."""
        ...
