from __future__ import annotations

from typing import Any, Iterator

from .config import queryable_settings
from .expressions import CallExpression
from .logging import get_logger
from .operators import OperatorRegistry, queryable_operators
from .provider import Query
from .validator import Validate

logger = get_logger(__name__)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class BasicQueryable:
    """
    Sequence operators for query handles whose element type is only known
    at runtime.

    Every operation validates its arguments, binds the named operator to the
    handle's element-type descriptor and wraps it in a new expression node
    over the handle's expression. take, skip and reverse return a new
    deferred ``Query`` with the same descriptor; the remaining operators
    execute through the handle's provider and return the result.

    Notes:
        - Handles are never mutated; each call allocates one expression node.
        - Errors raised by the provider while executing propagate unchanged.

    Examples:
        >>> query = as_queryable([3, 1, 2])
        >>> list(BasicQueryable.take(BasicQueryable.skip(query, 1), 1))
        [1]
        >>> BasicQueryable.count(query)
        3
        >>> BasicQueryable.first_or_default(BasicQueryable.skip(query, 5))
        0
    """

    operators: OperatorRegistry = queryable_operators

    @classmethod
    def _compose(cls, source: Query, name: str, *arguments: Any) -> CallExpression:
        bound = cls.operators.bind(name, source.element_type)
        expression = CallExpression(bound, source.expression, arguments)
        if queryable_settings.LOG_EXPRESSIONS:
            logger.debug("Composed %r", expression)
        return expression

    @classmethod
    def _create(cls, source: Query, name: str, *arguments: Any) -> Query:
        return source.provider.create_query(cls._compose(source, name, *arguments))

    @classmethod
    def _execute(cls, source: Query, name: str) -> Any:
        return source.provider.execute(cls._compose(source, name))

    @classmethod
    def take(cls, source: Query, count: int) -> Query:
        """
        Return the first ``count`` elements of a sequence.

        Raises:
            PreconditionError: If source is None or count is not a positive
                integer.

        Example:
            >>> BasicQueryable.take(users, 10)
        """
        (
            Validate.argument(source, "source")
            .is_not_null()
            .check()
            .argument(count, "count")
            .is_in_range(_is_integer, "must be an integer")
            .is_in_range(lambda x: x > 0, "must be greater than zero")
            .check()
        )

        return cls._create(source, "take", count)

    @classmethod
    def skip(cls, source: Query, count: int) -> Query:
        """
        Bypass ``count`` elements and return the remaining ones.

        Skipping zero elements returns ``source`` itself.

        Raises:
            PreconditionError: If source is None or count is not a
                non-negative integer.
        """
        (
            Validate.argument(source, "source")
            .is_not_null()
            .check()
            .argument(count, "count")
            .is_in_range(_is_integer, "must be an integer")
            .is_in_range(lambda x: x >= 0, "must not be negative")
            .check()
        )

        if count == 0:
            return source

        return cls._create(source, "skip", count)

    @classmethod
    def any(cls, source: Query) -> bool:
        """Determine whether a sequence contains any elements."""
        Validate.argument(source, "source").is_not_null().check()

        return bool(cls._execute(source, "any"))

    @classmethod
    def count(cls, source: Query) -> int:
        """Return the number of elements in a sequence."""
        Validate.argument(source, "source").is_not_null().check()

        return int(cls._execute(source, "count"))

    @classmethod
    def single(cls, source: Query) -> object:
        """
        Return the only element of a sequence.

        Raises:
            SequenceEmptyError: If the sequence is empty.
            MultipleElementsError: If the sequence has more than one element.
        """
        Validate.argument(source, "source").is_not_null().check()

        return cls._execute(source, "single")

    @classmethod
    def single_or_default(cls, source: Query) -> object:
        """
        Return the only element of a sequence, or the element type's
        zero-value when it is empty.

        Raises:
            MultipleElementsError: If the sequence has more than one element.
        """
        Validate.argument(source, "source").is_not_null().check()

        return cls._execute(source, "single_or_default")

    @classmethod
    def first(cls, source: Query) -> object:
        """
        Return the first element of a sequence.

        Raises:
            SequenceEmptyError: If the sequence is empty.
        """
        Validate.argument(source, "source").is_not_null().check()

        return cls._execute(source, "first")

    @classmethod
    def first_or_default(cls, source: Query) -> object:
        """Return the first element, or the element type's zero-value."""
        Validate.argument(source, "source").is_not_null().check()

        return cls._execute(source, "first_or_default")

    @classmethod
    def reverse(cls, source: Query) -> Query:
        """Invert the order of the elements in a sequence."""
        Validate.argument(source, "source").is_not_null().check()

        return cls._create(source, "reverse")

    # Dynamic views: same behaviour, typed as Any for attribute access on rows.

    @classmethod
    def single_dynamic(cls, source: Query) -> Any:
        Validate.argument(source, "source").is_not_null().check()

        return cls.single(source)

    @classmethod
    def single_or_default_dynamic(cls, source: Query) -> Any:
        Validate.argument(source, "source").is_not_null().check()

        return cls.single_or_default(source)

    @classmethod
    def first_dynamic(cls, source: Query) -> Any:
        Validate.argument(source, "source").is_not_null().check()

        return cls.first(source)

    @classmethod
    def first_or_default_dynamic(cls, source: Query) -> Any:
        Validate.argument(source, "source").is_not_null().check()

        return cls.first_or_default(source)

    @classmethod
    def as_enumerable_dynamic(cls, source: Query) -> Iterator[Any]:
        """
        Iterate the materialised result of a query.

        Validation runs eagerly; rows are produced lazily.
        """
        Validate.argument(source, "source").is_not_null().check()

        return cls._iterate(source)

    @staticmethod
    def _iterate(source: Query) -> Iterator[Any]:
        yield from source
