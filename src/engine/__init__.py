# Analytics & reporting engine for small-business ledgers
# Pure aggregation, regression and ranking over transaction/inventory records

from .bucketing import Granularity, bucket_records, granularity_for_range, range_start
from .exceptions import (
    AnalyticsError,
    ComputationError,
    ProductNotFoundError,
    RecordSourceError,
)
from .forecast import fit_linear_trend, forecast_sales
from .inventory_health import (
    assess_inventory_health,
    is_low_stock,
    project_stockout,
)
from .ranking import top_selling_items
from .service import AnalyticsService
from .summary import build_summary_report, summarize_by_period, summarize_totals

__all__ = [
    "Granularity",
    "bucket_records",
    "granularity_for_range",
    "range_start",
    "AnalyticsError",
    "ComputationError",
    "ProductNotFoundError",
    "RecordSourceError",
    "fit_linear_trend",
    "forecast_sales",
    "assess_inventory_health",
    "is_low_stock",
    "project_stockout",
    "top_selling_items",
    "AnalyticsService",
    "build_summary_report",
    "summarize_by_period",
    "summarize_totals",
]
