class FlashQueryableError(Exception):
    """Base class for all Flash Queryable exceptions."""


class PreconditionError(FlashQueryableError, ValueError):
    """Raised when an argument fails validation before a query is composed."""

    def __init__(self, argument_name: str, constraint_description: str):
        self.argument_name = argument_name
        self.constraint_description = constraint_description
        super().__init__(f"Argument '{argument_name}' {constraint_description}.")


class UnknownOperatorError(FlashQueryableError, LookupError):
    """Raised when no algorithm is registered under an operator name."""


class ExecutionError(FlashQueryableError):
    """Raised by a query provider while executing an expression."""


class SequenceEmptyError(ExecutionError, ValueError):
    """Raised when an element was expected but the sequence was empty."""


class MultipleElementsError(ExecutionError, ValueError):
    """Raised when a single element was expected but several were found."""


class TranslationError(ExecutionError):
    """Raised when a provider cannot express a query expression."""
