from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterator

from .descriptors import describe

if TYPE_CHECKING:
    from .expressions import Expression


class QueryProvider(ABC):
    """
    Interface for query execution engines.

    Any backend (in-memory iterables, SQLAlchemy) must implement these
    methods. Providers only interpret expression trees; they never mutate
    them.
    """

    def create_query(self, expression: Expression) -> Query:
        """Wrap ``expression`` in a new deferred handle bound to this provider."""
        return Query(self, expression, expression.element_type)

    @abstractmethod
    def execute(self, expression: Expression) -> Any:
        """
        Evaluate ``expression``.

        Terminal expressions return a scalar or element; sequence
        expressions return an iterable of elements.
        """
        ...


class Query:
    """
    Deferred, untyped query handle.

    A Query pairs a provider with the root of an expression tree and the
    runtime element-type descriptor of the rows it yields. Nothing runs
    until the handle is iterated or handed to a terminal operator.

    Notes:
        - Handles are immutable; composing returns a new handle.
        - Iterating executes the whole expression every time, so a handle
          can be re-iterated only as far as the provider allows.

    Example:
        >>> query = as_queryable([3, 1, 2])
        >>> list(BasicQueryable.reverse(query))
        [2, 1, 3]
    """

    __slots__ = ("_element_type", "_expression", "_provider")

    def __init__(self, provider: QueryProvider, expression: Expression, element_type: type):
        self._provider = provider
        self._expression = expression
        self._element_type = element_type

    @property
    def provider(self) -> QueryProvider:
        return self._provider

    @property
    def expression(self) -> Expression:
        return self._expression

    @property
    def element_type(self) -> type:
        return self._element_type

    def __iter__(self) -> Iterator[Any]:
        return iter(self._provider.execute(self._expression))

    def __repr__(self) -> str:
        return f"<Query[{describe(self._element_type)}] {self._expression!r}>"
