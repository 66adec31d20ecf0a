"""
Top-selling product ranking.
"""

import pandas as pd

from .models import SALE, RankedItem

# Primary key first; later keys break ties deterministically
RANK_ORDER = [
    ("total_quantity", False),
    ("total_revenue", False),
    ("name", True),
    ("product_id", True),
]


def rank_products(
    transactions_df: pd.DataFrame,
    inventory_df: pd.DataFrame,
) -> pd.DataFrame:
    """
    Join sales to inventory and aggregate per product.

    Inner join: sales of products no longer in inventory are dropped.

    Returns DataFrame sorted by total_quantity desc, then total_revenue
    desc, then name asc, then product_id asc:
    - product_id, name, total_quantity, total_revenue
    """
    columns = [key for key, _ in RANK_ORDER]
    sales = transactions_df[
        (transactions_df["type"] == SALE) & transactions_df["product_id"].notna()
    ]

    merged = sales.merge(
        inventory_df[["product_id", "name"]], on="product_id", how="inner"
    )
    if len(merged) == 0:
        return pd.DataFrame(columns=["product_id", "name", "total_quantity", "total_revenue"])

    ranked = (
        merged.groupby("product_id")
        .agg(
            name=("name", "first"),
            total_quantity=("quantity", "sum"),
            total_revenue=("amount", "sum"),
        )
        .reset_index()
    )

    ranked = ranked.sort_values(
        columns,
        ascending=[asc for _, asc in RANK_ORDER],
        kind="mergesort",
    )

    return ranked[["product_id", "name", "total_quantity", "total_revenue"]].reset_index(
        drop=True
    )


def top_selling_items(
    transactions_df: pd.DataFrame,
    inventory_df: pd.DataFrame,
    limit: int = 3,
) -> list[RankedItem]:
    """The ``limit`` best sellers by quantity."""
    ranked = rank_products(transactions_df, inventory_df).head(limit)
    return [
        RankedItem(
            product_id=str(row.product_id),
            name=row.name,
            total_quantity=int(row.total_quantity),
            total_revenue=float(row.total_revenue),
        )
        for row in ranked.itertuples(index=False)
    ]
