"""
Record source interface and an in-memory implementation.

A record source supplies the raw transactions and inventory the analytics
engine works from. Filtering happens here; aggregation does not.
"""

from datetime import datetime
from typing import Iterable, Protocol

from engine.frames import as_naive
from engine.models import InventoryItem, Transaction, TransactionType


class RecordSource(Protocol):
    def fetch_transactions(
        self,
        business_id: str,
        type: TransactionType | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        product_id: str | None = None,
    ) -> list[Transaction]:
        """Matching transactions, newest first. Date bounds are inclusive."""
        ...

    def fetch_inventory(self, business_id: str) -> list[InventoryItem]:
        ...

    def fetch_inventory_by_id(self, product_id: str) -> InventoryItem | None:
        ...


class InMemoryRecordSource:
    """Serves records held in memory (tests, fixtures, pre-loaded exports)."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        inventory: Iterable[InventoryItem] = (),
    ):
        self._transactions = list(transactions)
        self._inventory = list(inventory)

    def fetch_transactions(
        self,
        business_id: str,
        type: TransactionType | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        product_id: str | None = None,
    ) -> list[Transaction]:
        lower = as_naive(date_from) if date_from is not None else None
        upper = as_naive(date_to) if date_to is not None else None

        matches = []
        for txn in self._transactions:
            if txn.business_id != business_id:
                continue
            if type is not None and txn.type != type:
                continue
            if product_id is not None and txn.product_id != product_id:
                continue
            moment = as_naive(txn.date)
            if lower is not None and moment < lower:
                continue
            if upper is not None and moment > upper:
                continue
            matches.append(txn)

        return sorted(matches, key=lambda t: as_naive(t.date), reverse=True)

    def fetch_inventory(self, business_id: str) -> list[InventoryItem]:
        return [item for item in self._inventory if item.business_id == business_id]

    def fetch_inventory_by_id(self, product_id: str) -> InventoryItem | None:
        for item in self._inventory:
            if item.product_id == product_id:
                return item
        return None

    def business_ids(self) -> list[str]:
        """Businesses that own at least one record."""
        ids = {t.business_id for t in self._transactions}
        ids.update(i.business_id for i in self._inventory)
        return sorted(ids)
