from datetime import datetime
from decimal import Decimal

import pytest

from campus_eats.models import MenuItem, Role, User
from campus_eats.ordering import OrderingSession
from campus_eats.pricing import SimplePricingStrategy
from campus_eats.repositories import InMemoryMenuRepository, InMemoryOrderRepository

NOW = datetime(2026, 10, 18, 12, 0, 0)


@pytest.fixture
def menu():
    return [
        MenuItem(id="m1", name="Bagel", price=Decimal("3.50"), category="Breakfast"),
        MenuItem(id="m2", name="Muffin", price=Decimal("2.00"), category="Breakfast", available=False),
    ]


@pytest.fixture
def student():
    return User(id="u1", name="Ada", role=Role.STUDENT)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def session(menu, student, clock):
    return OrderingSession(
        user=student,
        menu=InMemoryMenuRepository(menu),
        orders=InMemoryOrderRepository(),
        pricing=SimplePricingStrategy(),
        clock=clock,
    )
