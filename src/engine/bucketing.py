"""
Time bucketing of transaction records.

Groups dated records into one bucket per distinct period (day, month or
year). Bucket keys are formatted so that lexicographic order equals
chronological order, which lets a plain sort on the key order the output.
"""

import logging
from datetime import datetime
from enum import Enum

import pandas as pd

from .frames import as_naive
from .models import EXPENSE, SALE, Bucket

logger = logging.getLogger(__name__)

BUCKET_COLUMNS = ["key", "sales", "expenses", "cogs", "profit"]


class Granularity(str, Enum):
    """Time-bucket size."""

    DAY = "day"
    MONTH = "month"
    YEAR = "year"

    @property
    def key_format(self) -> str:
        return _KEY_FORMATS[self]


_KEY_FORMATS = {
    Granularity.DAY: "%Y-%m-%d",
    Granularity.MONTH: "%Y-%m",
    Granularity.YEAR: "%Y",
}

DEFAULT_RANGE = "year"

# Range selector -> (lookback window, bucket size)
RANGES: dict[str, tuple[pd.DateOffset, Granularity]] = {
    "week": (pd.DateOffset(days=7), Granularity.DAY),
    "month": (pd.DateOffset(months=1), Granularity.DAY),
    "year": (pd.DateOffset(years=1), Granularity.MONTH),
    "3years": (pd.DateOffset(years=3), Granularity.YEAR),
    "5years": (pd.DateOffset(years=5), Granularity.YEAR),
    "10years": (pd.DateOffset(years=10), Granularity.YEAR),
}


def resolve_range(range_: str | None) -> str:
    """
    Normalize a range selector, falling back to the yearly default.

    Unknown selectors are not an error; they are logged and treated as
    DEFAULT_RANGE.
    """
    if range_ in RANGES:
        return range_
    if range_ is not None:
        logger.warning(
            "Unknown range selector, using default",
            extra={"range": range_, "default": DEFAULT_RANGE},
        )
    return DEFAULT_RANGE


def granularity_for_range(range_: str | None) -> Granularity:
    return RANGES[resolve_range(range_)][1]


def range_start(range_: str | None, now: datetime) -> pd.Timestamp:
    """Lower bound (inclusive) of the lookback window for a range selector."""
    offset = RANGES[resolve_range(range_)][0]
    return as_naive(now) - offset


def period_key(moment: datetime, granularity: Granularity) -> str:
    return pd.Timestamp(moment).strftime(granularity.key_format)


def period_keys(dates: pd.Series, granularity: Granularity) -> pd.Series:
    return dates.dt.strftime(granularity.key_format)


def _empty_buckets() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "key": pd.Series(dtype=object),
            "sales": pd.Series(dtype=float),
            "expenses": pd.Series(dtype=float),
            "cogs": pd.Series(dtype=float),
            "profit": pd.Series(dtype=float),
        }
    )


def bucket_records(
    transactions_df: pd.DataFrame,
    granularity: Granularity = Granularity.DAY,
    date_col: str = "date",
    type_col: str = "type",
    amount_col: str = "amount",
    cogs_col: str = "cogs",
) -> pd.DataFrame:
    """
    Aggregate records into chronologically ordered buckets.

    Returns DataFrame with one row per period present in the data:
    - key (period key for the granularity)
    - sales (sum of SALE amounts)
    - expenses (sum of EXPENSE amounts)
    - cogs (sum of SALE cogs)
    - profit (sales - expenses - cogs)

    Input order does not matter; an empty input gives an empty frame.
    """
    if len(transactions_df) == 0:
        return _empty_buckets()

    is_sale = transactions_df[type_col] == SALE
    is_expense = transactions_df[type_col] == EXPENSE
    amounts = transactions_df[amount_col].astype(float)

    keyed = pd.DataFrame(
        {
            "key": period_keys(transactions_df[date_col], granularity),
            "sales": amounts.where(is_sale, 0.0),
            "expenses": amounts.where(is_expense, 0.0),
            "cogs": transactions_df[cogs_col].fillna(0).astype(float).where(is_sale, 0.0),
        }
    )

    buckets = (
        keyed.groupby("key", sort=True)[["sales", "expenses", "cogs"]]
        .sum()
        .reset_index()
    )
    buckets["profit"] = buckets["sales"] - buckets["expenses"] - buckets["cogs"]

    return buckets[BUCKET_COLUMNS]


def sum_by_period(
    df: pd.DataFrame,
    granularity: Granularity,
    columns: dict[str, str],
    date_col: str = "date",
) -> pd.DataFrame:
    """
    Sum arbitrary columns per period key, ascending.

    ``columns`` maps output name -> source column, e.g.
    {"total_quantity": "quantity"}.
    """
    if len(df) == 0:
        return pd.DataFrame(columns=["key", *columns])

    keyed = df.assign(key=period_keys(df[date_col], granularity))
    return (
        keyed.groupby("key", sort=True)
        .agg(**{out: (src, "sum") for out, src in columns.items()})
        .reset_index()
    )


def to_buckets(buckets_df: pd.DataFrame) -> list[Bucket]:
    return [
        Bucket(
            key=row.key,
            sales=float(row.sales),
            expenses=float(row.expenses),
            cogs=float(row.cogs),
            profit=float(row.profit),
        )
        for row in buckets_df.itertuples(index=False)
    ]
