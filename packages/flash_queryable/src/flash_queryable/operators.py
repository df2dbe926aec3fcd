from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass
from enum import Enum
from itertools import islice
from typing import Any, Callable, Iterable

from .descriptors import default_value, describe
from .exceptions import MultipleElementsError, SequenceEmptyError, UnknownOperatorError
from .logging import get_logger

logger = get_logger(__name__)

# Algorithms are called as algorithm(element_type, rows, *arguments).
Algorithm = Callable[..., Any]

_MISSING = object()


class OperatorKind(str, Enum):
    SEQUENCE = "sequence"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class Operator:
    """A generic query algorithm, not yet bound to an element type."""

    name: str
    kind: OperatorKind
    generic: Algorithm


@dataclass(frozen=True)
class BoundOperator:
    """
    An operator instantiated for one element-type descriptor.

    This is what an expression node references: the algorithm resolved for
    ``element_type`` plus the operator metadata providers dispatch on.
    """

    operator: Operator
    element_type: type
    algorithm: Algorithm

    @property
    def name(self) -> str:
        return self.operator.name

    @property
    def kind(self) -> OperatorKind:
        return self.operator.kind

    @property
    def is_terminal(self) -> bool:
        return self.operator.kind is OperatorKind.TERMINAL

    def __call__(self, rows: Iterable[Any], *arguments: Any) -> Any:
        return self.algorithm(self.element_type, rows, *arguments)

    def __repr__(self) -> str:
        return f"{self.name}[{describe(self.element_type)}]"


class OperatorRegistry:
    """
    Dispatch table from (operator name, element type) to an algorithm.

    Generic algorithms are registered once per name. Element types may
    override an algorithm; ``bind`` resolves the override registered for the
    nearest class in the element type's MRO and falls back to the generic
    one.

    Example:
        >>> registry = OperatorRegistry()
        >>> @registry.operator("count", OperatorKind.TERMINAL)
        ... def count(element_type, rows):
        ...     return sum(1 for _ in rows)
        >>> registry.bind("count", int)(iter([1, 2]))
        2
    """

    def __init__(self) -> None:
        self._operators: dict[str, Operator] = {}
        self._overrides: dict[str, dict[type, Algorithm]] = {}
        self._bound: dict[tuple[str, type], BoundOperator] = {}

    def operator(
        self, name: str, kind: OperatorKind
    ) -> Callable[[Algorithm], Algorithm]:
        """Register the generic algorithm for ``name``."""

        def decorator(func: Algorithm) -> Algorithm:
            self._operators[name] = Operator(name, kind, func)
            self._invalidate(name)
            return func

        return decorator

    def register(
        self, name: str, element_type: type
    ) -> Callable[[Algorithm], Algorithm]:
        """Register an algorithm override of ``name`` for ``element_type``."""
        self.get(name)

        def decorator(func: Algorithm) -> Algorithm:
            self._overrides.setdefault(name, {})[element_type] = func
            self._invalidate(name)
            return func

        return decorator

    def get(self, name: str) -> Operator:
        try:
            return self._operators[name]
        except KeyError:
            supported = ", ".join(self.names())
            msg = f"Unknown operator '{name}'. Registered: {supported}"
            raise UnknownOperatorError(msg) from None

    def bind(self, name: str, element_type: type) -> BoundOperator:
        """
        Instantiate operator ``name`` for ``element_type``.

        Results are cached per (name, element_type) pair, so repeated
        composition over the same descriptor returns the same object.
        """
        key = (name, element_type)
        bound = self._bound.get(key)
        if bound is not None:
            return bound

        operator = self.get(name)
        algorithm = self._resolve_override(name, element_type) or operator.generic
        bound = BoundOperator(operator, element_type, algorithm)
        logger.debug("Bound %r", bound)
        # Concurrent binders may race here; either result is equivalent.
        return self._bound.setdefault(key, bound)

    def _resolve_override(self, name: str, element_type: type) -> Algorithm | None:
        overrides = self._overrides.get(name)
        if not overrides:
            return None
        for klass in getattr(element_type, "__mro__", (element_type,)):
            if klass in overrides:
                return overrides[klass]
        return None

    def _invalidate(self, name: str) -> None:
        for key in [k for k in self._bound if k[0] == name]:
            del self._bound[key]

    def names(self) -> list[str]:
        return sorted(self._operators)


queryable_operators = OperatorRegistry()


@queryable_operators.operator("take", OperatorKind.SEQUENCE)
def take(element_type: type, rows: Iterable[Any], count: int) -> Iterable[Any]:
    return islice(rows, count)


@queryable_operators.operator("skip", OperatorKind.SEQUENCE)
def skip(element_type: type, rows: Iterable[Any], count: int) -> Iterable[Any]:
    return islice(rows, count, None)


@queryable_operators.operator("reverse", OperatorKind.SEQUENCE)
def reverse(element_type: type, rows: Iterable[Any]) -> Iterable[Any]:
    return reversed(list(rows))


@queryable_operators.operator("any", OperatorKind.TERMINAL)
def any_(element_type: type, rows: Iterable[Any]) -> bool:
    return next(iter(rows), _MISSING) is not _MISSING


@queryable_operators.operator("count", OperatorKind.TERMINAL)
def count(element_type: type, rows: Iterable[Any]) -> int:
    if isinstance(rows, Sized):
        return len(rows)
    return sum(1 for _ in rows)


@queryable_operators.operator("first", OperatorKind.TERMINAL)
def first(element_type: type, rows: Iterable[Any]) -> Any:
    value = next(iter(rows), _MISSING)
    if value is _MISSING:
        raise SequenceEmptyError("Sequence contains no elements")
    return value


@queryable_operators.operator("first_or_default", OperatorKind.TERMINAL)
def first_or_default(element_type: type, rows: Iterable[Any]) -> Any:
    value = next(iter(rows), _MISSING)
    if value is _MISSING:
        return default_value(element_type)
    return value


def _single(element_type: type, rows: Iterable[Any], *, or_default: bool) -> Any:
    it = iter(rows)
    value = next(it, _MISSING)
    if value is _MISSING:
        if or_default:
            return default_value(element_type)
        raise SequenceEmptyError("Sequence contains no elements")
    if next(it, _MISSING) is not _MISSING:
        raise MultipleElementsError("Sequence contains more than one element")
    return value


@queryable_operators.operator("single", OperatorKind.TERMINAL)
def single(element_type: type, rows: Iterable[Any]) -> Any:
    return _single(element_type, rows, or_default=False)


@queryable_operators.operator("single_or_default", OperatorKind.TERMINAL)
def single_or_default(element_type: type, rows: Iterable[Any]) -> Any:
    return _single(element_type, rows, or_default=True)
