"""
Analytics service: the request-level entry point of the engine.

Each operation fetches a snapshot of records from the record source once,
runs the pure analysis functions over it and returns a payload model.

Error policy:
- ProductNotFoundError propagates as-is
- Any unexpected exception is logged and re-raised as ComputationError
- Insufficient forecast data and unknown range/period selectors resolve
  to fallback values, never errors
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import TYPE_CHECKING

import pandas as pd

from .bucketing import (
    Granularity,
    bucket_records,
    granularity_for_range,
    range_start,
    sum_by_period,
)
from .config import AnalyticsConfig, config
from .exceptions import AnalyticsError, ComputationError, ProductNotFoundError
from .export import build_export_frame, to_xlsx_bytes
from .forecast import daily_sales_series, forecast_sales
from .frames import as_naive, inventory_to_frame, transactions_to_frame
from .inventory_health import (
    assess_inventory_health,
    low_stock_items,
    lowest_stock_items,
    project_stockout,
)
from .models import (
    SALE,
    ForecastResult,
    InventoryHealthRow,
    InventoryItem,
    NetSalesPoint,
    ProductAnalytics,
    ProductSalesPoint,
    ProductSnapshot,
    RankedItem,
    SummaryReport,
)
from .observability import Timer
from .ranking import top_selling_items
from .summary import build_summary_report, summary_window_start

if TYPE_CHECKING:
    from sources.base import RecordSource

logger = logging.getLogger(__name__)


def _boundary(operation: str):
    """Time the operation and convert unexpected failures to ComputationError."""

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            with Timer(operation, logger):
                try:
                    return func(self, *args, **kwargs)
                except AnalyticsError:
                    raise
                except Exception as exc:
                    logger.exception(f"{operation} failed", extra={"operation": operation})
                    raise ComputationError(operation, str(exc)) from exc

        return wrapper

    return decorator


class AnalyticsService:
    """
    Computes analytics for one business per call.

    Stateless apart from its collaborators; safe to share between
    concurrent callers.
    """

    def __init__(self, source: "RecordSource", settings: AnalyticsConfig = config):
        self.source = source
        self.settings = settings

    @staticmethod
    def _resolve_now(now: datetime | None) -> pd.Timestamp:
        return as_naive(now if now is not None else datetime.now(timezone.utc))

    def _pick_items(self, items: list[InventoryItem], ordered: pd.DataFrame) -> list[InventoryItem]:
        by_id = {item.product_id: item for item in items}
        return [by_id[pid] for pid in ordered["product_id"]]

    @_boundary("sales_forecast")
    def get_sales_forecast(
        self, business_id: str, now: datetime | None = None
    ) -> ForecastResult:
        """Seven-day forecast from the trailing window of daily sales."""
        settings = self.settings.forecast
        moment = self._resolve_now(now)
        since = moment - timedelta(days=settings.window_days)

        sales = self.source.fetch_transactions(business_id, type=SALE, date_from=since)
        series = daily_sales_series(transactions_to_frame(sales), since)

        return forecast_sales(
            series["sales"],
            today=moment.date(),
            horizon_days=settings.horizon_days,
            min_points=settings.min_points,
        )

    @_boundary("net_sales")
    def get_net_sales(
        self,
        business_id: str,
        range_: str | None = None,
        now: datetime | None = None,
    ) -> list[NetSalesPoint]:
        """
        Sales totals per period for a range selector.

        week/month -> daily buckets, year (default) -> monthly,
        3years/5years/10years -> yearly.
        """
        moment = self._resolve_now(now)
        granularity = granularity_for_range(range_)
        start = range_start(range_, moment)

        sales = self.source.fetch_transactions(business_id, type=SALE, date_from=start)
        buckets = bucket_records(transactions_to_frame(sales), granularity)

        return [
            NetSalesPoint(period_key=row.key, total_sales=float(row.sales))
            for row in buckets.itertuples(index=False)
        ]

    @_boundary("top_items")
    def get_top_items(self, business_id: str) -> list[RankedItem]:
        sales = self.source.fetch_transactions(business_id, type=SALE)
        inventory = self.source.fetch_inventory(business_id)

        return top_selling_items(
            transactions_to_frame(sales),
            inventory_to_frame(inventory),
            limit=self.settings.ranking.top_items_limit,
        )

    @_boundary("product_analytics")
    def get_product_analytics(
        self,
        business_id: str,
        product_id: str,
        now: datetime | None = None,
    ) -> ProductAnalytics:
        """
        Daily quantity/revenue for one product over the run-rate window,
        with its current stock and stockout projection.
        """
        product = self.source.fetch_inventory_by_id(product_id)
        if product is None or product.business_id != business_id:
            raise ProductNotFoundError(product_id)

        inventory_settings = self.settings.inventory
        window = inventory_settings.run_rate_window_days
        since = self._resolve_now(now) - timedelta(days=window)

        sales = transactions_to_frame(
            self.source.fetch_transactions(
                business_id, type=SALE, date_from=since, product_id=product_id
            )
        )
        daily = sum_by_period(
            sales,
            Granularity.DAY,
            {"total_quantity": "quantity", "total_revenue": "amount"},
        )

        stockout = project_stockout(
            product.stock,
            int(sales["quantity"].sum()),
            window_days=window,
            critical_days=inventory_settings.critical_days,
            attention_days=inventory_settings.attention_days,
        )

        return ProductAnalytics(
            sales=[
                ProductSalesPoint(
                    period_key=row.key,
                    total_quantity=int(row.total_quantity),
                    total_revenue=float(row.total_revenue),
                )
                for row in daily.itertuples(index=False)
            ],
            product=ProductSnapshot(
                name=product.name,
                stock=product.stock,
                selling_price=product.selling_price,
            ),
            stockout=stockout,
        )

    @_boundary("period_summary")
    def get_period_summary(
        self,
        business_id: str,
        period: str | None = None,
        now: datetime | None = None,
    ) -> SummaryReport:
        """Totals plus daily chart rows for daily/weekly/monthly windows."""
        start = summary_window_start(period, self._resolve_now(now))
        records = self.source.fetch_transactions(business_id, date_from=start)
        return build_summary_report(transactions_to_frame(records))

    @_boundary("inventory_analytics")
    def get_inventory_analytics(self, business_id: str) -> list[InventoryItem]:
        """Items with the least stock, ascending."""
        items = self.source.fetch_inventory(business_id)
        lowest = lowest_stock_items(
            inventory_to_frame(items), limit=self.settings.inventory.lowest_stock_limit
        )
        return self._pick_items(items, lowest)

    @_boundary("low_stock_alerts")
    def get_low_stock_alerts(self, business_id: str) -> list[InventoryItem]:
        """Items below the static stock threshold."""
        items = self.source.fetch_inventory(business_id)
        flagged = low_stock_items(
            inventory_to_frame(items), threshold=self.settings.inventory.low_stock_threshold
        )
        return self._pick_items(items, flagged)

    @_boundary("inventory_health")
    def get_inventory_health(
        self, business_id: str, now: datetime | None = None
    ) -> list[InventoryHealthRow]:
        """Run-rate projection and low-stock flag for every item."""
        inventory_settings = self.settings.inventory
        moment = self._resolve_now(now)
        window = inventory_settings.run_rate_window_days

        sales = self.source.fetch_transactions(
            business_id, type=SALE, date_from=moment - timedelta(days=window)
        )
        health = assess_inventory_health(
            inventory_to_frame(self.source.fetch_inventory(business_id)),
            transactions_to_frame(sales),
            reference_date=moment,
            window_days=window,
            critical_days=inventory_settings.critical_days,
            attention_days=inventory_settings.attention_days,
            low_stock_threshold=inventory_settings.low_stock_threshold,
        )

        return [
            InventoryHealthRow(
                product_id=str(row.product_id),
                name=row.name,
                stock=int(row.stock),
                daily_rate=float(row.daily_rate),
                days_left=None if pd.isna(row.days_left) else int(row.days_left),
                status=row.status,
                low_stock=bool(row.low_stock),
            )
            for row in health.itertuples(index=False)
        ]

    @_boundary("export")
    def export_transactions(
        self,
        business_id: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> pd.DataFrame:
        """Flat sheet of transactions, newest first."""
        records = self.source.fetch_transactions(
            business_id, date_from=date_from, date_to=date_to
        )
        return build_export_frame(records, self.source.fetch_inventory(business_id))

    @_boundary("export_workbook")
    def export_workbook(
        self,
        business_id: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> bytes:
        sheet = self.export_transactions(business_id, date_from=date_from, date_to=date_to)
        return to_xlsx_bytes(sheet)
