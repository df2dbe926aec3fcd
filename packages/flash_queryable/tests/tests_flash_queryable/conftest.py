from decimal import Decimal

import pytest
from flash_queryable import SQLAlchemyQueryProvider, as_queryable
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from .models import Base, Product


@pytest.fixture
def numbers():
    """The [3, 1, 2] sequence used throughout the operator examples."""
    return as_queryable([3, 1, 2])


@pytest.fixture
def empty():
    return as_queryable([], int)


@pytest.fixture
def session():
    """
    Yields a session bound to a fresh in-memory SQLite database seeded with
    three products whose ids follow the [3, 1, 2] example order by name.
    """
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        session.add_all(
            [
                Product(id=1, name="b-widget", price=Decimal("1.00")),
                Product(id=2, name="c-gadget", price=Decimal("2.00")),
                Product(id=3, name="a-gizmo", price=Decimal("3.00")),
            ]
        )
        session.commit()
        yield session

    engine.dispose()


@pytest.fixture
def provider(session):
    return SQLAlchemyQueryProvider(session)
