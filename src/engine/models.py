"""
Record and payload models for the analytics engine.

Source records (Transaction, InventoryItem) are validated on construction
and immutable afterwards. Everything else is derived per call and never
persisted.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TransactionType = Literal["SALE", "EXPENSE"]
SALE: TransactionType = "SALE"
EXPENSE: TransactionType = "EXPENSE"

Trend = Literal["UP", "DOWN"]
StockStatus = Literal["critical", "attention", "healthy", "stable"]


class Transaction(BaseModel):
    """A single sale or expense entry."""

    model_config = ConfigDict(frozen=True)

    business_id: str
    type: TransactionType
    category: str
    amount: float = Field(ge=0)
    date: datetime
    product_id: str | None = Field(
        default=None, description="Inventory item sold; only meaningful for SALE"
    )
    quantity: int = Field(default=1, gt=0)
    cogs: float = Field(
        default=0.0, ge=0, description="Cost price x quantity, fixed at creation time"
    )


class InventoryItem(BaseModel):
    """A stocked product owned by a business."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    business_id: str
    name: str
    cost_price: float = Field(ge=0)
    selling_price: float = Field(ge=0)
    stock: int = Field(ge=0)
    description: str | None = None


class Bucket(BaseModel):
    """Aggregate of records sharing one time period."""

    key: str = Field(description="Period key, e.g. 2024-07-25, 2024-07 or 2024")
    sales: float = 0.0
    expenses: float = 0.0
    cogs: float = 0.0
    profit: float = 0.0


class ForecastPoint(BaseModel):
    date: date
    predicted_amount: float = Field(ge=0)
    confidence: float = Field(ge=0, le=1, description="R^2 of the fitted trend")


class ForecastResult(BaseModel):
    """
    Seven-day linear sales forecast.

    When too few daily points exist the result is still a success, with a
    message and an empty forecast instead of trend/r_squared.
    """

    success: bool = True
    trend: Trend | None = None
    r_squared: float | None = None
    message: str | None = None
    forecast: list[ForecastPoint] = Field(default_factory=list)


class NetSalesPoint(BaseModel):
    period_key: str
    total_sales: float


class RankedItem(BaseModel):
    product_id: str
    name: str
    total_quantity: int
    total_revenue: float


class StockoutProjection(BaseModel):
    """Point-in-time depletion estimate assuming a constant run rate."""

    stock: int
    quantity_sold: int
    window_days: int
    daily_rate: float
    days_left: int | None = Field(
        default=None, description="None when nothing sold in the window"
    )
    status: StockStatus


class ProductSalesPoint(BaseModel):
    period_key: str
    total_quantity: int
    total_revenue: float


class ProductSnapshot(BaseModel):
    name: str
    stock: int
    selling_price: float


class ProductAnalytics(BaseModel):
    sales: list[ProductSalesPoint]
    product: ProductSnapshot
    stockout: StockoutProjection


class PeriodSummary(BaseModel):
    total_sales: float = 0.0
    total_expenses: float = 0.0
    total_cogs: float = 0.0
    profit: float = 0.0


class ChartRow(BaseModel):
    date: str
    sales: float
    expenses: float
    cogs: float
    profit: float


class SummaryReport(BaseModel):
    period_summary: PeriodSummary
    chart_data: list[ChartRow] = Field(description="Ascending by date")


class InventoryHealthRow(BaseModel):
    """
    Both stock signals for one item.

    ``status`` is the run-rate projection; ``low_stock`` is the static
    threshold check. They are independent and may disagree.
    """

    product_id: str
    name: str
    stock: int
    daily_rate: float
    days_left: int | None
    status: StockStatus
    low_stock: bool
