"""
Conversion of validated records into pandas DataFrames.

The analysis functions operate on frames with these column names; an empty
record list still yields a frame with the full column set and proper dtypes.
"""

from datetime import datetime
from typing import Iterable

import pandas as pd

from .models import InventoryItem, Transaction

TRANSACTION_COLUMNS = [
    "business_id",
    "type",
    "category",
    "amount",
    "date",
    "product_id",
    "quantity",
    "cogs",
]

INVENTORY_COLUMNS = [
    "product_id",
    "business_id",
    "name",
    "cost_price",
    "selling_price",
    "stock",
    "description",
]


def as_naive(moment: datetime) -> pd.Timestamp:
    """Timestamp comparable with frame dates (tz-aware values become naive UTC)."""
    ts = pd.Timestamp(moment)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    df = pd.DataFrame(
        [t.model_dump() for t in transactions], columns=TRANSACTION_COLUMNS
    )

    df["date"] = pd.to_datetime(df["date"], utc=True).dt.tz_convert(None)
    df["amount"] = df["amount"].astype(float)
    df["cogs"] = df["cogs"].fillna(0).astype(float)
    df["quantity"] = df["quantity"].astype("int64")
    df["product_id"] = df["product_id"].astype(object)

    return df


def inventory_to_frame(items: Iterable[InventoryItem]) -> pd.DataFrame:
    df = pd.DataFrame([i.model_dump() for i in items], columns=INVENTORY_COLUMNS)

    df["cost_price"] = df["cost_price"].astype(float)
    df["selling_price"] = df["selling_price"].astype(float)
    df["stock"] = df["stock"].astype("int64")

    return df
