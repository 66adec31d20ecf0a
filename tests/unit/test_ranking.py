"""
Tests for engine.ranking module.
"""
from datetime import datetime

import pytest

from engine.frames import inventory_to_frame
from engine.models import InventoryItem
from engine.ranking import rank_products, top_selling_items

SOLD_AT = datetime(2026, 1, 10)


def _item(product_id, name):
    return InventoryItem(
        product_id=product_id, business_id="biz-1", name=name,
        cost_price=1.0, selling_price=2.0, stock=5,
    )


class TestTopSellingItems:
    """Tests for top_selling_items."""

    def test_top_three_by_quantity(self, frame_of, make_sale, inventory_frame):
        records = [
            make_sale(10.0, SOLD_AT, product_id="p1", quantity=5),
            make_sale(10.0, SOLD_AT, product_id="p1", quantity=5),
            make_sale(45.0, SOLD_AT, product_id="p2", quantity=3),
            make_sale(24.0, SOLD_AT, product_id="p3", quantity=8),
            make_sale(5.0, SOLD_AT, product_id="p4", quantity=1),
        ]
        top = top_selling_items(frame_of(records), inventory_frame)

        assert [t.product_id for t in top] == ["p1", "p3", "p2"]
        assert top[0].name == "Widget"
        assert top[0].total_quantity == 10
        assert top[0].total_revenue == pytest.approx(20.0)

    def test_products_missing_from_inventory_are_dropped(self, frame_of, make_sale, inventory_frame):
        records = [
            make_sale(500.0, SOLD_AT, product_id="deleted", quantity=100),
            make_sale(10.0, SOLD_AT, product_id="p2", quantity=1),
        ]
        top = top_selling_items(frame_of(records), inventory_frame)
        assert [t.product_id for t in top] == ["p2"]

    def test_sales_without_product_are_ignored(self, frame_of, make_sale, inventory_frame):
        top = top_selling_items(frame_of([make_sale(10.0, SOLD_AT)]), inventory_frame)
        assert top == []

    def test_fewer_than_limit(self, frame_of, make_sale, inventory_frame):
        top = top_selling_items(
            frame_of([make_sale(1.0, SOLD_AT, product_id="p1")]), inventory_frame
        )
        assert len(top) == 1

    def test_empty(self, frame_of, inventory_frame):
        assert top_selling_items(frame_of([]), inventory_frame) == []


class TestTieBreaking:
    """Equal quantities are ordered by revenue, then name, then id."""

    def test_revenue_breaks_quantity_tie(self, frame_of, make_sale):
        inventory = inventory_to_frame([_item("a", "Alpha"), _item("b", "Beta")])
        records = [
            make_sale(10.0, SOLD_AT, product_id="a", quantity=4),
            make_sale(30.0, SOLD_AT, product_id="b", quantity=4),
        ]
        ranked = rank_products(frame_of(records), inventory)
        assert ranked["product_id"].tolist() == ["b", "a"]

    def test_name_then_id_break_full_tie(self, frame_of, make_sale):
        inventory = inventory_to_frame(
            [_item("z2", "Same"), _item("z1", "Same"), _item("y", "Another")]
        )
        records = [
            make_sale(10.0, SOLD_AT, product_id=pid, quantity=2) for pid in ("z2", "z1", "y")
        ]
        ranked = rank_products(frame_of(records), inventory)
        assert ranked["product_id"].tolist() == ["y", "z1", "z2"]

    def test_order_independent_of_input(self, frame_of, make_sale):
        inventory = inventory_to_frame([_item("a", "Alpha"), _item("b", "Beta")])
        records = [
            make_sale(10.0, SOLD_AT, product_id="a", quantity=4),
            make_sale(10.0, SOLD_AT, product_id="b", quantity=4),
        ]
        forward = rank_products(frame_of(records), inventory)["product_id"].tolist()
        backward = rank_products(frame_of(records[::-1]), inventory)["product_id"].tolist()
        assert forward == backward == ["a", "b"]
