from .basic import BasicQueryable
from .config import QueryableSettings, queryable_settings
from .descriptors import default_value, register_default
from .exceptions import (
    ExecutionError,
    FlashQueryableError,
    MultipleElementsError,
    PreconditionError,
    SequenceEmptyError,
    TranslationError,
    UnknownOperatorError,
)
from .expressions import CallExpression, Expression, SourceExpression
from .logging import get_logger, setup_logging
from .memory import InMemoryQueryProvider, as_queryable
from .operators import BoundOperator, OperatorKind, OperatorRegistry, queryable_operators
from .provider import Query, QueryProvider
from .sql import SQLAlchemyQueryProvider
from .validator import Validate

__all__ = [
    "BasicQueryable",
    "BoundOperator",
    "CallExpression",
    "ExecutionError",
    "Expression",
    "FlashQueryableError",
    "InMemoryQueryProvider",
    "MultipleElementsError",
    "OperatorKind",
    "OperatorRegistry",
    "PreconditionError",
    "Query",
    "QueryProvider",
    "QueryableSettings",
    "SQLAlchemyQueryProvider",
    "SequenceEmptyError",
    "SourceExpression",
    "TranslationError",
    "UnknownOperatorError",
    "Validate",
    "as_queryable",
    "default_value",
    "get_logger",
    "queryable_operators",
    "queryable_settings",
    "register_default",
    "setup_logging",
]
