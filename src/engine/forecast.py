"""
Short-horizon sales forecast from a linear trend.

The daily sales series is indexed 0..n-1 (one index per day that had sales)
and fitted by ordinary least squares. The fitted line is extended for the
next few days and R^2 of the fit is reported as the confidence score.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Sequence

import numpy as np
import pandas as pd

from .bucketing import Granularity, bucket_records
from .frames import as_naive
from .models import SALE, ForecastPoint, ForecastResult

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA_MESSAGE = "insufficient data"


@dataclass(frozen=True)
class LinearTrend:
    """Least-squares line y = slope * i + intercept."""

    slope: float
    intercept: float
    r_squared: float

    def predict(self, index: float) -> float:
        return self.slope * index + self.intercept

    @property
    def direction(self) -> str:
        # A flat line reports DOWN; only a strictly positive slope is UP
        return "UP" if self.slope > 0 else "DOWN"


def fit_linear_trend(values: Sequence[float]) -> LinearTrend:
    """
    Fit y_i against i = 0..n-1 by ordinary least squares.

    R^2 = 1 - SS_res / SS_tot, defined as 0 for a constant series and
    clipped to [0, 1] against floating point drift.
    """
    y = np.asarray(values, dtype=float)
    n = len(y)
    if n == 0:
        raise ValueError("Cannot fit a trend to an empty series")

    # Exact zero spread only; tiny steps on a large base are still a trend
    if n == 1 or np.ptp(y) == 0:
        return LinearTrend(slope=0.0, intercept=float(y[0]), r_squared=0.0)

    x = np.arange(n, dtype=float)
    x_mean = x.mean()
    y_mean = y.mean()

    slope = float(((x - x_mean) * (y - y_mean)).sum() / ((x - x_mean) ** 2).sum())
    intercept = float(y_mean - slope * x_mean)

    fitted = slope * x + intercept
    ss_res = float(((y - fitted) ** 2).sum())
    ss_tot = float(((y - y_mean) ** 2).sum())
    r_squared = 1.0 - ss_res / ss_tot

    return LinearTrend(
        slope=slope,
        intercept=intercept,
        r_squared=float(np.clip(r_squared, 0.0, 1.0)),
    )


def daily_sales_series(
    transactions_df: pd.DataFrame,
    since: datetime | None = None,
    date_col: str = "date",
    type_col: str = "type",
) -> pd.DataFrame:
    """
    Total SALE amount per day, ascending, for days on/after ``since``.

    Days without sales are absent rather than zero-filled.
    """
    sales = transactions_df[transactions_df[type_col] == SALE]
    if since is not None:
        sales = sales[sales[date_col] >= as_naive(since)]

    buckets = bucket_records(sales, Granularity.DAY, date_col=date_col, type_col=type_col)
    return buckets[["key", "sales"]].reset_index(drop=True)


def forecast_sales(
    daily_sales: Sequence[float] | pd.Series,
    today: date,
    horizon_days: int = 7,
    min_points: int = 5,
) -> ForecastResult:
    """
    Project the next ``horizon_days`` of sales.

    Args:
        daily_sales: Chronological daily totals (oldest first)
        today: Forecast dates start the day after this date
        horizon_days: Number of future days to predict
        min_points: Below this many points no forecast is produced

    Predictions are clamped at zero since sales cannot be negative.
    """
    values = list(daily_sales)

    if len(values) < min_points:
        logger.info(
            "Not enough daily points for forecast",
            extra={"points": len(values), "required": min_points},
        )
        return ForecastResult(success=True, message=INSUFFICIENT_DATA_MESSAGE, forecast=[])

    trend = fit_linear_trend(values)
    n = len(values)

    forecast = [
        ForecastPoint(
            date=today + timedelta(days=step),
            predicted_amount=max(0.0, trend.predict(n + step - 1)),
            confidence=trend.r_squared,
        )
        for step in range(1, horizon_days + 1)
    ]

    return ForecastResult(
        success=True,
        trend=trend.direction,
        r_squared=trend.r_squared,
        forecast=forecast,
    )
