from __future__ import annotations

from typing import Any, Callable

from .exceptions import PreconditionError
from .logging import get_logger

logger = get_logger(__name__)


class Validate:
    """
    Entry point for fluent argument preconditions.

    Each ``argument()`` call opens a chain of constraints for one value.
    ``check()`` raises the first violation and otherwise hands back a
    ``Validate`` so the next argument can be chained.

    Example:
        >>> Validate.argument(source, "source").is_not_null().check() \\
        ...     .argument(count, "count").is_in_range(lambda x: x > 0).check()
    """

    @staticmethod
    def argument(value: Any, name: str) -> ArgumentValidation:
        return ArgumentValidation(value, name)


class ArgumentValidation:
    """Constraints recorded against a single named argument."""

    def __init__(self, value: Any, name: str):
        self.value = value
        self.name = name
        self._error: PreconditionError | None = None

    def _fail(self, description: str) -> None:
        # Only the first violation is reported.
        if self._error is None:
            self._error = PreconditionError(self.name, description)

    def is_not_null(self) -> ArgumentValidation:
        if self.value is None:
            self._fail("must not be None")
        return self

    def is_in_range(
        self,
        predicate: Callable[[Any], bool],
        description: str | None = None,
    ) -> ArgumentValidation:
        """
        Require ``predicate(value)`` to hold.

        The predicate is skipped when an earlier constraint already failed,
        so ``is_not_null()`` guards it against ``None``.
        """
        if self._error is None and not predicate(self.value):
            self._fail(description or f"is out of range (got {self.value!r})")
        return self

    def check(self) -> Validate:
        if self._error is not None:
            logger.debug(
                "Precondition failed for %s: %s",
                self._error.argument_name,
                self._error.constraint_description,
            )
            raise self._error
        return Validate()
