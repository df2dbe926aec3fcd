from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from typing import Any

ElementType = type

_ZERO_VALUES: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    Decimal: Decimal(0),
    Fraction: Fraction(0),
}


def register_default(element_type: type, value: Any) -> None:
    """
    Register the zero-value returned for ``element_type`` by the
    ``*_or_default`` operators.

    Example:
        >>> register_default(Money, Money(0))
    """
    _ZERO_VALUES[element_type] = value


def default_value(element_type: type) -> Any:
    """
    Return the zero-value of an element type.

    Numeric types resolve to their zero (``bool`` before ``int``, since it
    subclasses it); any other type, including ORM models, resolves to None.
    """
    for klass in getattr(element_type, "__mro__", (element_type,)):
        if klass in _ZERO_VALUES:
            return _ZERO_VALUES[klass]
    return None


def describe(element_type: type) -> str:
    """Qualified name used in log lines and error messages."""
    module = getattr(element_type, "__module__", None)
    name = getattr(element_type, "__qualname__", repr(element_type))
    if module in (None, "builtins"):
        return name
    return f"{module}.{name}"
