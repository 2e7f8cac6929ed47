"""Shared fixtures."""

from decimal import Decimal

import pytest

from ticketbooth.constants import Category
from ticketbooth.ledger import Sale
from ticketbooth.persistence import PersistenceAdapter
from ticketbooth.pricing import PriceList
from ticketbooth.session import BoxOfficeSession
from ticketbooth.stores.memory import MemoryStore


def make_sale(
    sale_id: int = 1,
    name: str = "Ana Lopez",
    category: Category = Category.VIP,
    quantity: int = 2,
    unit_price: str = "50.00",
) -> Sale:
    return Sale.create(
        sale_id=sale_id,
        customer_name=name,
        category=category,
        quantity=quantity,
        prices=PriceList({category: Decimal(unit_price)}),
        created_at="2026-10-18T12:00:00+00:00",
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def session(store: MemoryStore) -> BoxOfficeSession:
    return BoxOfficeSession(PersistenceAdapter(store))
