import pytest
from flash_queryable import (
    BasicQueryable,
    CallExpression,
    InMemoryQueryProvider,
    SourceExpression,
    as_queryable,
    queryable_operators,
)
from flash_queryable.expressions import Expression


class TestAsQueryable:
    def test_infers_element_type_from_first_element(self):
        assert as_queryable(["a", "b"]).element_type is str

    def test_empty_sequence_defaults_to_object(self):
        assert as_queryable([]).element_type is object

    def test_iterator_defaults_to_object(self):
        assert as_queryable(iter([1, 2])).element_type is object

    def test_explicit_element_type(self):
        query = as_queryable([], float)

        assert query.element_type is float
        assert isinstance(query.expression, SourceExpression)
        assert query.expression.source == []

    def test_custom_provider(self):
        provider = InMemoryQueryProvider()
        assert as_queryable([1], provider=provider).provider is provider


class TestInMemoryQueryProvider:
    def test_execute_source_returns_rows(self):
        rows = [1, 2]
        provider = InMemoryQueryProvider()

        assert provider.execute(SourceExpression(rows, int)) is rows

    def test_execute_chain(self):
        provider = InMemoryQueryProvider()
        root = SourceExpression([4, 5, 6], int)
        skip = CallExpression(queryable_operators.bind("skip", int), root, (1,))
        count = CallExpression(queryable_operators.bind("count", int), skip)

        assert provider.execute(count) == 2

    def test_handle_can_be_iterated_repeatedly_over_a_list(self, numbers):
        query = BasicQueryable.reverse(numbers)
        assert list(query) == list(query) == [2, 1, 3]

    def test_one_shot_iterator_is_consumed(self):
        query = as_queryable(iter([1, 2]), int)

        assert list(query) == [1, 2]
        assert list(query) == []

    def test_unknown_expression_type(self):
        class Foreign(Expression):
            element_type = int

        with pytest.raises(TypeError, match="Cannot evaluate Foreign"):
            InMemoryQueryProvider().execute(Foreign())

    def test_query_repr(self, numbers):
        query = BasicQueryable.take(numbers, 2)
        assert repr(query) == "<Query[int] take[int](Source[int], 2)>"
