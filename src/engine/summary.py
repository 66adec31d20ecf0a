"""
Financial summaries: sales, expenses, COGS and profit.

All functions are pure; an empty record set produces an all-zero summary.
"""

import logging
from datetime import datetime

import pandas as pd

from .bucketing import Granularity, bucket_records
from .frames import as_naive
from .models import EXPENSE, SALE, ChartRow, PeriodSummary, SummaryReport

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = "monthly"
PERIODS = ("daily", "weekly", "monthly")


def summary_window_start(period: str | None, now: datetime) -> pd.Timestamp:
    """
    Start of the reporting window for a summary period.

    - daily: midnight today
    - weekly: 7 days back
    - monthly: one calendar month back

    Unknown or missing periods fall back to monthly.
    """
    if period not in PERIODS:
        if period is not None:
            logger.warning(
                "Unknown summary period, using default",
                extra={"period": period, "default": DEFAULT_PERIOD},
            )
        period = DEFAULT_PERIOD

    moment = as_naive(now)
    if period == "daily":
        return moment.normalize()
    if period == "weekly":
        return moment - pd.DateOffset(days=7)
    return moment - pd.DateOffset(months=1)


def summarize_totals(
    transactions_df: pd.DataFrame,
    type_col: str = "type",
    amount_col: str = "amount",
    cogs_col: str = "cogs",
) -> PeriodSummary:
    """Totals over the whole record set."""
    if len(transactions_df) == 0:
        return PeriodSummary()

    sales = transactions_df[transactions_df[type_col] == SALE]
    expenses = transactions_df[transactions_df[type_col] == EXPENSE]

    total_sales = float(sales[amount_col].sum())
    total_expenses = float(expenses[amount_col].sum())
    total_cogs = float(sales[cogs_col].fillna(0).sum())

    return PeriodSummary(
        total_sales=total_sales,
        total_expenses=total_expenses,
        total_cogs=total_cogs,
        profit=total_sales - total_expenses - total_cogs,
    )


def summarize_by_period(
    transactions_df: pd.DataFrame,
    granularity: Granularity = Granularity.DAY,
) -> list[ChartRow]:
    """Per-bucket sales/expenses/cogs/profit, ascending by period."""
    buckets = bucket_records(transactions_df, granularity)
    return [
        ChartRow(
            date=row.key,
            sales=float(row.sales),
            expenses=float(row.expenses),
            cogs=float(row.cogs),
            profit=float(row.profit),
        )
        for row in buckets.itertuples(index=False)
    ]


def build_summary_report(transactions_df: pd.DataFrame) -> SummaryReport:
    """Period totals plus the daily chart series."""
    return SummaryReport(
        period_summary=summarize_totals(transactions_df),
        chart_data=summarize_by_period(transactions_df, Granularity.DAY),
    )
