"""
Pytest configuration and shared fixtures.
"""
from datetime import datetime, timedelta
from typing import Callable, List

import pytest

from engine.frames import inventory_to_frame, transactions_to_frame
from engine.models import InventoryItem, Transaction
from sources.base import InMemoryRecordSource

NOW = datetime(2026, 1, 15, 12, 0)
BUSINESS_ID = "biz-1"
OTHER_BUSINESS_ID = "biz-2"


@pytest.fixture
def now() -> datetime:
    """Fixed reference time used as "now" by every time-windowed test."""
    return NOW


@pytest.fixture
def make_sale() -> Callable[..., Transaction]:
    def _make(
        amount: float,
        date: datetime,
        product_id: str | None = None,
        quantity: int = 1,
        cogs: float = 0.0,
        business_id: str = BUSINESS_ID,
        category: str = "Sales",
    ) -> Transaction:
        return Transaction(
            business_id=business_id,
            type="SALE",
            category=category,
            amount=amount,
            date=date,
            product_id=product_id,
            quantity=quantity,
            cogs=cogs,
        )

    return _make


@pytest.fixture
def make_expense() -> Callable[..., Transaction]:
    def _make(
        amount: float,
        date: datetime,
        business_id: str = BUSINESS_ID,
        category: str = "Rent",
    ) -> Transaction:
        return Transaction(
            business_id=business_id,
            type="EXPENSE",
            category=category,
            amount=amount,
            date=date,
        )

    return _make


@pytest.fixture
def inventory() -> List[InventoryItem]:
    """Four items for biz-1 and one for biz-2."""
    return [
        InventoryItem(
            product_id="p1", business_id=BUSINESS_ID, name="Widget",
            cost_price=4.0, selling_price=10.0, stock=50,
        ),
        InventoryItem(
            product_id="p2", business_id=BUSINESS_ID, name="Gadget",
            cost_price=6.0, selling_price=15.0, stock=9,
        ),
        InventoryItem(
            product_id="p3", business_id=BUSINESS_ID, name="Gizmo",
            cost_price=1.0, selling_price=3.0, stock=10,
        ),
        InventoryItem(
            product_id="p4", business_id=BUSINESS_ID, name="Doohickey",
            cost_price=2.0, selling_price=5.0, stock=0,
        ),
        InventoryItem(
            product_id="x1", business_id=OTHER_BUSINESS_ID, name="Foreign",
            cost_price=1.0, selling_price=2.0, stock=3,
        ),
    ]


@pytest.fixture
def recent_sales(make_sale) -> List[Transaction]:
    """
    Sales within the last 30 days of NOW.

    p1: 150 units (run rate 5/day), p3: 60 units, p2: nothing recent.
    """
    sales = []
    for day in range(1, 16):
        sales.append(
            make_sale(100.0, NOW - timedelta(days=day), product_id="p1", quantity=10, cogs=40.0)
        )
    for day in range(1, 7):
        sales.append(
            make_sale(30.0, NOW - timedelta(days=day, hours=2), product_id="p3", quantity=10, cogs=10.0)
        )
    return sales


@pytest.fixture
def frame_of() -> Callable:
    return transactions_to_frame


@pytest.fixture
def inventory_frame(inventory):
    return inventory_to_frame(inventory)


@pytest.fixture
def source_factory(inventory) -> Callable[..., InMemoryRecordSource]:
    def _make(transactions, items=None) -> InMemoryRecordSource:
        return InMemoryRecordSource(transactions, inventory if items is None else items)

    return _make
