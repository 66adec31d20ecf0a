"""
Data quality checks for raw ledger exports.

Rows that fail a critical check are excluded from analysis by the loader;
warnings and info issues are reported but the rows are kept.
"""

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from .models import EXPENSE, SALE


@dataclass
class QualityIssue:
    """One kind of problem found in a data source."""

    column: str
    issue_type: str  # e.g. "unparsed_date", "unknown_type", "negative_value"
    severity: str  # "critical", "warning", "info"
    count: int
    sample_values: list[Any] = field(default_factory=list)
    description: str = ""
    row_mask: pd.Series | None = field(default=None, repr=False)


@dataclass
class QualityReport:
    source_name: str
    total_rows: int
    issues: list[QualityIssue] = field(default_factory=list)

    @property
    def critical_issues(self) -> list[QualityIssue]:
        return [i for i in self.issues if i.severity == "critical"]

    @property
    def has_critical_issues(self) -> bool:
        return len(self.critical_issues) > 0

    def rejected_rows(self) -> pd.Series:
        """Boolean mask of rows hit by any critical issue."""
        mask = pd.Series(False, index=pd.RangeIndex(self.total_rows))
        for issue in self.critical_issues:
            if issue.row_mask is not None:
                mask |= issue.row_mask.reindex(mask.index, fill_value=False)
        return mask

    def summary(self) -> dict:
        return {
            "source": self.source_name,
            "total_rows": self.total_rows,
            "critical": len(self.critical_issues),
            "warnings": len([i for i in self.issues if i.severity == "warning"]),
            "info": len([i for i in self.issues if i.severity == "info"]),
        }


def _issue(
    df: pd.DataFrame,
    mask: pd.Series,
    column: str,
    issue_type: str,
    severity: str,
    description: str,
) -> list[QualityIssue]:
    count = int(mask.sum())
    if count == 0:
        return []
    return [
        QualityIssue(
            column=column,
            issue_type=issue_type,
            severity=severity,
            count=count,
            sample_values=df.loc[mask, column].head(5).tolist(),
            description=f"{count:,} {description}",
            row_mask=mask,
        )
    ]


def check_transactions(
    df: pd.DataFrame,
    known_product_ids: set[str] | None = None,
) -> QualityReport:
    """
    Check a raw transaction frame.

    Expects the raw ``date`` column alongside its parsed ``date_parsed``.
    """
    issues: list[QualityIssue] = []

    issues += _issue(
        df, df["business_id"].isna(), "business_id", "missing", "critical", "rows without a business"
    )

    unparsed = df["date_parsed"].isna()
    issues += _issue(df, unparsed, "date", "unparsed_date", "critical", "dates couldn't be parsed")

    unknown_type = ~df["type"].isin([SALE, EXPENSE])
    issues += _issue(df, unknown_type, "type", "unknown_type", "critical", "rows with unknown type")

    amounts = pd.to_numeric(df["amount"], errors="coerce")
    issues += _issue(
        df, amounts.isna() | (amounts < 0), "amount", "invalid_amount", "critical",
        "missing or negative amounts",
    )

    # Blank cogs/quantity cells are allowed (loader defaults them); anything
    # present must be a usable number
    if "cogs" in df.columns:
        cogs = pd.to_numeric(df["cogs"], errors="coerce")
        issues += _issue(
            df, df["cogs"].notna() & cogs.isna(), "cogs", "invalid_value", "critical",
            "non-numeric COGS values",
        )
        issues += _issue(df, cogs < 0, "cogs", "negative_value", "critical", "negative COGS values")

    if "quantity" in df.columns:
        quantity = pd.to_numeric(df["quantity"], errors="coerce")
        fractional = quantity.notna() & (quantity % 1 != 0)
        issues += _issue(
            df, (df["quantity"].notna() & quantity.isna()) | fractional, "quantity",
            "invalid_quantity", "critical", "non-numeric or fractional quantities",
        )
        issues += _issue(
            df, quantity.notna() & (quantity <= 0), "quantity", "non_positive_quantity",
            "critical", "non-positive quantities",
        )

    if known_product_ids is not None and "product_id" in df.columns:
        orphaned = (
            (df["type"] == SALE)
            & df["product_id"].notna()
            & ~df["product_id"].astype(str).isin(known_product_ids)
        )
        issues += _issue(
            df, orphaned, "product_id", "unknown_product", "warning",
            "sales reference products missing from inventory",
        )

    return QualityReport(source_name="Transactions", total_rows=len(df), issues=issues)


def check_inventory(df: pd.DataFrame) -> QualityReport:
    """Check a raw inventory frame."""
    issues: list[QualityIssue] = []

    for column in ("product_id", "business_id", "name"):
        issues += _issue(
            df, df[column].isna(), column, "missing", "critical", f"items without {column}"
        )

    for column in ("cost_price", "selling_price", "stock"):
        values = pd.to_numeric(df[column], errors="coerce")
        issues += _issue(
            df, values.isna() | (values < 0), column, "invalid_value", "critical",
            f"missing or negative {column} values",
        )

    duplicated = df["product_id"].duplicated(keep="first")
    issues += _issue(df, duplicated, "product_id", "duplicate", "critical", "duplicate product ids")

    below_cost = pd.to_numeric(df["selling_price"], errors="coerce") < pd.to_numeric(
        df["cost_price"], errors="coerce"
    )
    issues += _issue(df, below_cost, "selling_price", "below_cost", "info", "items priced below cost")

    return QualityReport(source_name="Inventory", total_rows=len(df), issues=issues)
