from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Iterable

from .expressions import CallExpression, Expression, SourceExpression
from .logging import get_logger
from .provider import Query, QueryProvider

logger = get_logger(__name__)


class InMemoryQueryProvider(QueryProvider):
    """
    Executes expression trees over ordinary Python iterables.

    Each node is evaluated by calling its bound operator on the rows of its
    predecessor, so take and skip stay lazy while reverse and the terminal
    operators consume their input.
    """

    def execute(self, expression: Expression) -> Any:
        logger.debug("Executing %r", expression)
        return self._evaluate(expression)

    def _evaluate(self, expression: Expression) -> Any:
        if isinstance(expression, SourceExpression):
            return expression.source
        if isinstance(expression, CallExpression):
            rows = self._evaluate(expression.parent)
            return expression.operator(rows, *expression.arguments)
        raise TypeError(f"Cannot evaluate {type(expression).__name__}")


in_memory_provider = InMemoryQueryProvider()


def as_queryable(
    iterable: Iterable[Any],
    element_type: type | None = None,
    provider: InMemoryQueryProvider | None = None,
) -> Query:
    """
    Wrap an iterable in a deferred query handle.

    When ``element_type`` is omitted it is taken from the first element of a
    non-empty sequence, and is ``object`` otherwise. One-shot iterators are
    accepted, but the resulting handle can then only be executed once.

    Example:
        >>> query = as_queryable([3, 1, 2])
        >>> query.element_type
        <class 'int'>
    """
    if element_type is None:
        if isinstance(iterable, Sequence) and len(iterable) > 0:
            element_type = type(iterable[0])
        else:
            element_type = object
    provider = provider or in_memory_provider
    return provider.create_query(SourceExpression(iterable, element_type))
