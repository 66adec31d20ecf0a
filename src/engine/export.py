"""
Flat transaction sheet for spreadsheet download.

The column set is fixed: Date, Type, Category, Product, Quantity, Amount,
COGS. Rows are newest first.
"""

import io
from typing import Iterable

import pandas as pd

from .frames import inventory_to_frame, transactions_to_frame
from .models import InventoryItem, Transaction

EXPORT_COLUMNS = ["Date", "Type", "Category", "Product", "Quantity", "Amount", "COGS"]

MISSING_PRODUCT = "-"


def build_export_frame(
    transactions: Iterable[Transaction],
    inventory: Iterable[InventoryItem] = (),
) -> pd.DataFrame:
    """
    One row per transaction with product names resolved from inventory.

    Unknown or absent products show as "-".
    """
    txns = transactions_to_frame(transactions)
    if len(txns) == 0:
        return pd.DataFrame(columns=EXPORT_COLUMNS)

    names = (
        inventory_to_frame(inventory)
        .drop_duplicates("product_id")
        .set_index("product_id")["name"]
    )
    txns = txns.sort_values("date", ascending=False, kind="mergesort")

    sheet = pd.DataFrame(
        {
            "Date": txns["date"].dt.strftime("%Y-%m-%d"),
            "Type": txns["type"],
            "Category": txns["category"],
            "Product": txns["product_id"].map(names).fillna(MISSING_PRODUCT),
            "Quantity": txns["quantity"],
            "Amount": txns["amount"],
            "COGS": txns["cogs"].fillna(0.0),
        }
    )

    return sheet[EXPORT_COLUMNS].reset_index(drop=True)


def to_xlsx_bytes(sheet: pd.DataFrame, sheet_name: str = "Transactions") -> bytes:
    """Encode the sheet as an .xlsx workbook."""
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        sheet.to_excel(writer, sheet_name=sheet_name, index=False)

        # Widen columns to fit their content
        worksheet = writer.sheets[sheet_name]
        for column_cells in worksheet.columns:
            longest = max(len(str(cell.value)) for cell in column_cells if cell.value is not None)
            worksheet.column_dimensions[column_cells[0].column_letter].width = min(longest + 2, 50)

    return output.getvalue()
