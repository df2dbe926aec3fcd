from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.engine import Row
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import UnaryExpression

from .config import queryable_settings
from .descriptors import describe
from .exceptions import TranslationError
from .expressions import CallExpression, Expression, SourceExpression
from .logging import get_logger
from .provider import Query, QueryProvider

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from sqlalchemy.sql import ColumnElement

logger = get_logger(__name__)


@dataclass(frozen=True)
class _SelectPlan:
    """
    A Select plus the row window accumulated from take/skip.

    LIMIT/OFFSET are tracked separately and applied once in ``build()``,
    because SQL always applies OFFSET before LIMIT while take and skip may
    be composed in either order.
    """

    stmt: Select
    offset: int = 0
    limit: int | None = None

    @property
    def windowed(self) -> bool:
        return self.offset > 0 or self.limit is not None

    def build(self) -> Select:
        stmt = self.stmt
        if self.offset:
            stmt = stmt.offset(self.offset)
        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        return stmt


def _take(plan: _SelectPlan, count: int) -> _SelectPlan:
    limit = count if plan.limit is None else min(plan.limit, count)
    return replace(plan, limit=limit)


def _skip(plan: _SelectPlan, count: int) -> _SelectPlan:
    # Skipping inside an existing window shrinks what is left of it.
    limit = None if plan.limit is None else max(plan.limit - count, 0)
    return replace(plan, offset=plan.offset + count, limit=limit)


def _flip(clause: ColumnElement[Any]) -> ColumnElement[Any]:
    """
    Invert one ORDER BY clause.

    NULLS FIRST/LAST wrappers are swapped along with the inner direction so
    the reversed query yields the rows in exactly the opposite order.
    """
    if isinstance(clause, UnaryExpression) and clause.modifier is not None:
        if clause.modifier is operators.desc_op:
            return clause.element.asc()
        if clause.modifier is operators.asc_op:
            return clause.element.desc()
        if clause.modifier is operators.nulls_first_op:
            return _flip(clause.element).nulls_last()
        if clause.modifier is operators.nulls_last_op:
            return _flip(clause.element).nulls_first()
        raise TranslationError(f"Cannot reverse ORDER BY clause {clause}")
    return clause.desc()


def _reverse(plan: _SelectPlan) -> _SelectPlan:
    """
    Invert the ORDER BY of the plan.

    Unordered entity queries are ordered by primary key descending, so
    ``reverse`` always has a defined order to invert.
    """
    if plan.windowed:
        msg = "Cannot reverse a query after take or skip has been applied"
        raise TranslationError(msg)

    stmt = plan.stmt
    clauses = list(stmt._order_by_clauses)
    if clauses:
        ordering = [_flip(c) for c in clauses]
    else:
        descriptions = stmt.column_descriptions
        entity = descriptions[0].get("entity") if len(descriptions) == 1 else None
        if entity is None:
            msg = "Cannot reverse an unordered query that does not select an entity"
            raise TranslationError(msg)
        ordering = [col.desc() for col in inspect(entity).primary_key]

    return replace(plan, stmt=stmt.order_by(None).order_by(*ordering))


_SEQUENCE_TRANSLATIONS: dict[str, Callable[..., _SelectPlan]] = {
    "take": _take,
    "skip": _skip,
    "reverse": _reverse,
}

# Rows fetched for element-returning terminals: enough to tell the
# operator's algorithm whether the cardinality contract holds.
_FETCH_WINDOWS: dict[str, int] = {
    "first": 1,
    "first_or_default": 1,
    "single": 2,
    "single_or_default": 2,
}


def infer_element_type(stmt: Select) -> type:
    """
    Derive the element-type descriptor of a Select.

    Single-entity selects yield the mapped class, single-column selects the
    column's Python type, and anything wider yields ``Row``.
    """
    descriptions = stmt.column_descriptions
    if len(descriptions) != 1:
        return Row
    kind = descriptions[0]["type"]
    if isinstance(kind, type):
        return kind
    try:
        return kind.python_type
    except NotImplementedError:
        return object


class SQLAlchemyQueryProvider(QueryProvider):
    """
    Executes expression trees as SQL through a synchronous SQLAlchemy session.

    The root of every tree is a ``Select``; take, skip and reverse are folded
    into it as LIMIT, OFFSET and ORDER BY. count and any run as
    ``SELECT count(*)`` and ``EXISTS``. first and single fetch at most one or
    two rows and let the bound operator enforce the cardinality rules.

    Notes:
        - The session is owned by the caller; the provider never commits,
          rolls back or closes it.
        - Database errors propagate unmodified.

    Example:
        >>> provider = SQLAlchemyQueryProvider(session)
        >>> users = provider.query(User)
        >>> BasicQueryable.count(BasicQueryable.take(users, 10))
        # SELECT count(*) FROM (SELECT ... FROM users LIMIT 10) AS anon_1;
    """

    def __init__(self, session: Session):
        self.session = session

    def query(self, source: type | Select, element_type: type | None = None) -> Query:
        """
        Build a root handle over a mapped class or a ``Select``.

        Raises:
            ValueError: If the Select already carries LIMIT or OFFSET; use
                take/skip so the window can be composed.
        """
        stmt = source if isinstance(source, Select) else select(source)
        if stmt._limit_clause is not None or stmt._offset_clause is not None:
            msg = "Root statements must not carry LIMIT/OFFSET; compose take/skip"
            raise ValueError(msg)
        if element_type is None:
            element_type = infer_element_type(stmt)
        return self.create_query(SourceExpression(stmt, element_type))

    def execute(self, expression: Expression) -> Any:
        if isinstance(expression, CallExpression) and expression.operator.is_terminal:
            plan = self._plan(expression.parent)
            return self._execute_terminal(expression, plan)
        return self._fetch(self._plan(expression).build())

    def _plan(self, expression: Expression) -> _SelectPlan:
        *steps, root = expression.walk()
        if not isinstance(root, SourceExpression):
            raise TranslationError(f"Cannot translate {type(root).__name__}")

        plan = _SelectPlan(root.source)
        # walk() runs outermost first; fold from the root outwards.
        for step in reversed(steps):
            plan = self._translate(plan, step)
        return plan

    def _translate(self, plan: _SelectPlan, step: Expression) -> _SelectPlan:
        if not isinstance(step, CallExpression):
            raise TranslationError(f"Cannot translate {type(step).__name__}")
        if step.operator.is_terminal:
            msg = f"Terminal operator '{step.name}' cannot be composed further"
            raise TranslationError(msg)

        translate = _SEQUENCE_TRANSLATIONS.get(step.name)
        if translate is None:
            msg = (
                f"Operator '{step.name}' over "
                f"{describe(step.element_type)} has no SQL translation"
            )
            raise TranslationError(msg)
        return translate(plan, *step.arguments)

    def _execute_terminal(self, expression: CallExpression, plan: _SelectPlan) -> Any:
        if expression.name == "count":
            # Wrapped in a subquery so the window and DISTINCT count correctly.
            stmt = select(func.count()).select_from(plan.build().subquery())
            return self._scalar(stmt) or 0

        if expression.name == "any":
            return bool(self._scalar(select(plan.build().exists())))

        window = _FETCH_WINDOWS.get(expression.name)
        if window is None:
            msg = f"Operator '{expression.name}' has no SQL translation"
            raise TranslationError(msg)
        rows = self._fetch(_take(plan, window).build())
        return expression.operator(rows)

    def _scalar(self, stmt: Select) -> Any:
        self._echo(stmt)
        return self.session.scalar(stmt)

    def _fetch(self, stmt: Select) -> list[Any]:
        self._echo(stmt)
        result = self.session.execute(stmt)
        # Single entity or column selects yield the objects themselves.
        if len(stmt.column_descriptions) == 1:
            return list(result.scalars().all())
        return list(result.all())

    def _echo(self, stmt: Select) -> None:
        if queryable_settings.SQL_ECHO:
            logger.info("SQL: %s", stmt)
        else:
            logger.debug("Executing statement with %s column(s)", len(stmt.selected_columns))
