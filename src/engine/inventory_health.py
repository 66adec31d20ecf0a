"""
Inventory health signals.

Two independent signals are computed:
- Stockout projection: days of stock left at the trailing run rate
- Low-stock alert: a static threshold on current stock

An item can be low stock but healthy by run rate (slow mover) or above the
threshold but critical (fast mover). Both are reported side by side.
"""

import math
from datetime import datetime, timedelta

import pandas as pd

from .frames import as_naive
from .models import SALE, StockoutProjection

CRITICAL = "critical"
ATTENTION = "attention"
HEALTHY = "healthy"
STABLE = "stable"

STATUS_ORDER = {CRITICAL: 0, ATTENTION: 1, HEALTHY: 2, STABLE: 3}


def classify_days_left(
    days_left: int,
    critical_days: int = 7,
    attention_days: int = 30,
) -> str:
    if days_left < critical_days:
        return CRITICAL
    if days_left < attention_days:
        return ATTENTION
    return HEALTHY


def project_stockout(
    stock: int,
    quantity_sold: int,
    window_days: int = 30,
    critical_days: int = 7,
    attention_days: int = 30,
) -> StockoutProjection:
    """
    Project days until stockout from the trailing quantity sold.

    daily_rate = quantity_sold / window_days
    days_left = floor(stock / daily_rate)

    No sales in the window means nothing to project: status is "stable"
    and days_left is None.
    """
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")

    daily_rate = quantity_sold / window_days

    if daily_rate <= 0:
        return StockoutProjection(
            stock=stock,
            quantity_sold=quantity_sold,
            window_days=window_days,
            daily_rate=0.0,
            days_left=None,
            status=STABLE,
        )

    days_left = math.floor(stock / daily_rate)

    return StockoutProjection(
        stock=stock,
        quantity_sold=quantity_sold,
        window_days=window_days,
        daily_rate=daily_rate,
        days_left=days_left,
        status=classify_days_left(days_left, critical_days, attention_days),
    )


def compute_sales_velocity(
    transactions_df: pd.DataFrame,
    reference_date: datetime,
    lookback_days: int = 30,
    product_col: str = "product_id",
    qty_col: str = "quantity",
    date_col: str = "date",
    type_col: str = "type",
) -> pd.DataFrame:
    """
    Compute the trailing run rate per product.

    Returns DataFrame with:
    - product_id
    - total_sold (in lookback window)
    - avg_daily_sales (total_sold / lookback_days)
    """
    empty = pd.DataFrame(columns=[product_col, "total_sold", "avg_daily_sales"])
    if len(transactions_df) == 0:
        return empty

    cutoff = as_naive(reference_date) - timedelta(days=lookback_days)
    recent = transactions_df[
        (transactions_df[type_col] == SALE)
        & transactions_df[product_col].notna()
        & (transactions_df[date_col] >= cutoff)
    ]

    if len(recent) == 0:
        return empty

    velocity = recent.groupby(product_col).agg(total_sold=(qty_col, "sum")).reset_index()
    velocity["avg_daily_sales"] = velocity["total_sold"] / lookback_days

    return velocity


def is_low_stock(stock: int, threshold: int = 10) -> bool:
    return stock < threshold


def low_stock_items(
    inventory_df: pd.DataFrame,
    threshold: int = 10,
    stock_col: str = "stock",
) -> pd.DataFrame:
    """Items strictly below the stock threshold, lowest stock first."""
    flagged = inventory_df[inventory_df[stock_col] < threshold]
    return flagged.sort_values(stock_col, kind="mergesort").reset_index(drop=True)


def lowest_stock_items(
    inventory_df: pd.DataFrame,
    limit: int = 10,
    stock_col: str = "stock",
) -> pd.DataFrame:
    """The ``limit`` items with the least stock, ascending."""
    return (
        inventory_df.sort_values(stock_col, kind="mergesort")
        .head(limit)
        .reset_index(drop=True)
    )


def assess_inventory_health(
    inventory_df: pd.DataFrame,
    transactions_df: pd.DataFrame,
    reference_date: datetime,
    window_days: int = 30,
    critical_days: int = 7,
    attention_days: int = 30,
    low_stock_threshold: int = 10,
) -> pd.DataFrame:
    """
    Stockout projection and low-stock flag for every inventory item.

    Returns the inventory columns plus:
    - total_sold, daily_rate, days_left (nullable), status
    - low_stock

    Sorted by status severity, then fewest days left.
    """
    velocity = compute_sales_velocity(
        transactions_df, reference_date, lookback_days=window_days
    )

    merged = inventory_df.merge(
        velocity[["product_id", "total_sold"]], on="product_id", how="left"
    )
    merged["total_sold"] = merged["total_sold"].fillna(0).astype("int64")

    projections = [
        project_stockout(
            int(stock),
            int(sold),
            window_days=window_days,
            critical_days=critical_days,
            attention_days=attention_days,
        )
        for stock, sold in zip(merged["stock"], merged["total_sold"])
    ]

    merged["daily_rate"] = [p.daily_rate for p in projections]
    merged["days_left"] = pd.array([p.days_left for p in projections], dtype="Int64")
    merged["status"] = [p.status for p in projections]
    merged["low_stock"] = merged["stock"] < low_stock_threshold

    merged["status_order"] = merged["status"].map(STATUS_ORDER)
    merged = merged.sort_values(
        ["status_order", "days_left"], na_position="last", kind="mergesort"
    )

    return merged.drop(columns="status_order").reset_index(drop=True)
