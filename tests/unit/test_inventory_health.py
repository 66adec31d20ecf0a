"""
Tests for engine.inventory_health module.
"""
from datetime import timedelta

import pandas as pd
import pytest

from engine.frames import inventory_to_frame
from engine.inventory_health import (
    assess_inventory_health,
    classify_days_left,
    compute_sales_velocity,
    is_low_stock,
    low_stock_items,
    lowest_stock_items,
    project_stockout,
)


class TestProjectStockout:
    """Tests for the run-rate stockout projection."""

    def test_days_left_is_floored(self):
        """20 units over 30 days, 10 in stock -> rate 0.667, 15 days left."""
        projection = project_stockout(stock=10, quantity_sold=20)
        assert projection.daily_rate == pytest.approx(20 / 30)
        assert projection.days_left == 15
        assert projection.status == "attention"

    def test_critical(self):
        projection = project_stockout(stock=5, quantity_sold=30)
        assert projection.days_left == 5
        assert projection.status == "critical"

    def test_healthy(self):
        projection = project_stockout(stock=100, quantity_sold=30)
        assert projection.days_left == 100
        assert projection.status == "healthy"

    def test_no_sales_is_stable(self):
        projection = project_stockout(stock=3, quantity_sold=0)
        assert projection.status == "stable"
        assert projection.days_left is None
        assert projection.daily_rate == 0.0

    def test_zero_stock_with_sales_is_critical(self):
        projection = project_stockout(stock=0, quantity_sold=12)
        assert projection.days_left == 0
        assert projection.status == "critical"

    def test_custom_window(self):
        projection = project_stockout(stock=14, quantity_sold=14, window_days=7)
        assert projection.daily_rate == pytest.approx(2.0)
        assert projection.days_left == 7
        assert projection.window_days == 7

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            project_stockout(stock=1, quantity_sold=1, window_days=0)


class TestClassifyDaysLeft:
    """Boundaries are exclusive: 7 is attention, 30 is healthy."""

    @pytest.mark.parametrize(
        "days_left,status",
        [(0, "critical"), (6, "critical"), (7, "attention"), (29, "attention"), (30, "healthy")],
    )
    def test_boundaries(self, days_left, status):
        assert classify_days_left(days_left) == status


class TestLowStock:
    """Tests for the static threshold signal."""

    @pytest.mark.parametrize("stock,expected", [(0, True), (9, True), (10, False), (11, False)])
    def test_threshold_is_strict(self, stock, expected):
        assert is_low_stock(stock) is expected

    def test_low_stock_items_sorted_ascending(self, inventory_frame):
        flagged = low_stock_items(inventory_frame)
        assert flagged["product_id"].tolist() == ["p4", "x1", "p2"]

    def test_lowest_stock_items_limit(self, inventory_frame):
        lowest = lowest_stock_items(inventory_frame, limit=2)
        assert lowest["product_id"].tolist() == ["p4", "x1"]
        assert lowest["stock"].tolist() == [0, 3]


class TestComputeSalesVelocity:
    """Tests for compute_sales_velocity."""

    def test_trailing_window(self, frame_of, recent_sales, make_sale, now):
        old_sale = make_sale(500.0, now - timedelta(days=45), product_id="p1", quantity=50)
        velocity = compute_sales_velocity(frame_of(recent_sales + [old_sale]), now)
        by_id = velocity.set_index("product_id")

        assert by_id.loc["p1", "total_sold"] == 150
        assert by_id.loc["p1", "avg_daily_sales"] == pytest.approx(5.0)
        assert by_id.loc["p3", "total_sold"] == 60
        assert list(velocity.columns) == ["product_id", "total_sold", "avg_daily_sales"]

    def test_empty(self, frame_of, now):
        assert len(compute_sales_velocity(frame_of([]), now)) == 0


class TestAssessInventoryHealth:
    """Tests for the combined health table."""

    @pytest.fixture
    def own_inventory(self, inventory):
        return inventory_to_frame([i for i in inventory if i.business_id == "biz-1"])

    def test_statuses(self, own_inventory, frame_of, recent_sales, now):
        health = assess_inventory_health(own_inventory, frame_of(recent_sales), now)
        by_id = health.set_index("product_id")

        assert by_id.loc["p1", "status"] == "attention"
        assert by_id.loc["p1", "days_left"] == 10
        assert by_id.loc["p3", "status"] == "critical"
        assert by_id.loc["p3", "days_left"] == 5
        assert by_id.loc["p2", "status"] == "stable"
        assert pd.isna(by_id.loc["p2", "days_left"])

    def test_signals_are_independent(self, own_inventory, frame_of, recent_sales, now):
        """p3 sits at the threshold (not low) yet is critical by run rate."""
        health = assess_inventory_health(own_inventory, frame_of(recent_sales), now)
        by_id = health.set_index("product_id")

        assert bool(by_id.loc["p3", "low_stock"]) is False
        assert bool(by_id.loc["p2", "low_stock"]) is True
        assert by_id.loc["p2", "status"] == "stable"

    def test_sorted_by_severity(self, own_inventory, frame_of, recent_sales, now):
        health = assess_inventory_health(own_inventory, frame_of(recent_sales), now)

        assert health["product_id"].tolist()[:2] == ["p3", "p1"]
        assert set(health["product_id"].tolist()[2:]) == {"p2", "p4"}

    def test_no_sales(self, own_inventory, frame_of, now):
        health = assess_inventory_health(own_inventory, frame_of([]), now)
        assert set(health["status"]) == {"stable"}
        assert health["total_sold"].tolist() == [0, 0, 0, 0]
