from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator

from .descriptors import describe

if TYPE_CHECKING:
    from .operators import BoundOperator


class Expression:
    """
    One immutable step of a query pipeline.

    Nodes never change after construction. Composing an operator allocates
    a new node that points at the previous one, so a node can be shared by
    any number of handles.
    """

    element_type: type

    @property
    def predecessor(self) -> Expression | None:
        return None

    def walk(self) -> Iterator[Expression]:
        """Yield this node and its predecessors, outermost first."""
        node: Expression | None = self
        while node is not None:
            yield node
            node = node.predecessor


@dataclass(frozen=True, eq=False)
class SourceExpression(Expression):
    """Root node wrapping the provider-specific data source."""

    source: Any
    element_type: type

    def __repr__(self) -> str:
        return f"Source[{describe(self.element_type)}]"


@dataclass(frozen=True, eq=False)
class CallExpression(Expression):
    """
    A call of a type-bound operator over a predecessor expression.

    ``arguments`` holds the literal arguments following the source, e.g.
    the count of a take.
    """

    operator: BoundOperator
    parent: Expression
    arguments: tuple[Any, ...] = ()

    @property
    def predecessor(self) -> Expression:
        return self.parent

    @property
    def name(self) -> str:
        return self.operator.name

    @property
    def element_type(self) -> type:  # type: ignore[override]
        return self.operator.element_type

    def __repr__(self) -> str:
        args = "".join(f", {a!r}" for a in self.arguments)
        return f"{self.operator!r}({self.parent!r}{args})"
