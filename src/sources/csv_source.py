"""
CSV-backed record source.

Reads two exports from a data directory:
- transactions.csv: business_id, type, category, amount, date,
  product_id, quantity, cogs
- inventory.csv: product_id, business_id, name, cost_price,
  selling_price, stock, description

Headers are matched case-insensitively and camelCase exports
(businessId, costPrice, ...) are accepted. Rows failing a critical quality
check are dropped and reported; the remaining rows become validated
records served through the in-memory source.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from engine.exceptions import RecordSourceError
from engine.models import InventoryItem, Transaction
from engine.parsers import DateParser
from engine.quality import QualityReport, check_inventory, check_transactions

from .base import InMemoryRecordSource

logger = logging.getLogger(__name__)


@dataclass
class LoadedLedger:
    """Validated records plus the quality reports produced while loading."""

    transactions: list[Transaction]
    inventory: list[InventoryItem]
    quality_reports: dict[str, QualityReport]


def _optional(value):
    return None if pd.isna(value) else value


class CsvLedgerLoader:
    """Loads and cleans ledger CSV exports."""

    TRANSACTIONS_FILE = "transactions.csv"
    INVENTORY_FILE = "inventory.csv"

    TRANSACTION_REQUIRED = ("business_id", "type", "category", "amount", "date")
    INVENTORY_REQUIRED = (
        "product_id", "business_id", "name", "cost_price", "selling_price", "stock",
    )

    # Normalized header -> canonical column
    COLUMN_ALIASES = {
        "businessid": "business_id",
        "productid": "product_id",
        "costprice": "cost_price",
        "sellingprice": "selling_price",
    }

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        self.date_parser = DateParser()

    def load_all(self) -> LoadedLedger:
        inventory, inventory_report = self.load_inventory()
        known_ids = {item.product_id for item in inventory}
        transactions, transactions_report = self.load_transactions(known_ids)

        return LoadedLedger(
            transactions=transactions,
            inventory=inventory,
            quality_reports={
                "transactions": transactions_report,
                "inventory": inventory_report,
            },
        )

    def _read_csv(self, filename: str, required: tuple[str, ...]) -> pd.DataFrame:
        path = self.data_dir / filename
        try:
            df = pd.read_csv(path, dtype=str, skipinitialspace=True)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise RecordSourceError(str(path), str(exc)) from exc

        df.columns = [self._canonical(c) for c in df.columns]

        missing = [c for c in required if c not in df.columns]
        if missing:
            raise RecordSourceError(str(path), f"missing columns: {', '.join(missing)}")

        return df

    def _canonical(self, header: str) -> str:
        key = header.strip().lower().replace(" ", "_")
        return self.COLUMN_ALIASES.get(key.replace("_", ""), key)

    def load_transactions(
        self, known_product_ids: set[str] | None = None
    ) -> tuple[list[Transaction], QualityReport]:
        """
        Load transactions.csv.

        - Dates in any supported format
        - Type normalized to upper case
        - Blank quantity defaults to 1, blank cogs to 0
        - Non-numeric or fractional values reject the row
        """
        df = self._read_csv(self.TRANSACTIONS_FILE, self.TRANSACTION_REQUIRED)

        for column in ("product_id", "quantity", "cogs"):
            if column not in df.columns:
                df[column] = None

        df["type"] = df["type"].fillna("").str.strip().str.upper()
        df["date_parsed"] = self.date_parser.parse_series(df["date"])

        report = check_transactions(df, known_product_ids)
        clean = df[~report.rejected_rows()]

        # Unparseable values were rejected above; only blank cells get defaults
        quantity = pd.to_numeric(clean["quantity"]).fillna(1)
        cogs = pd.to_numeric(clean["cogs"]).fillna(0.0)
        amount = pd.to_numeric(clean["amount"])

        records = []
        for idx in clean.index:
            try:
                records.append(
                    Transaction(
                        business_id=str(clean.at[idx, "business_id"]),
                        type=clean.at[idx, "type"],
                        category=str(_optional(clean.at[idx, "category"]) or ""),
                        amount=float(amount[idx]),
                        date=clean.at[idx, "date_parsed"].to_pydatetime(),
                        product_id=_optional(clean.at[idx, "product_id"]),
                        quantity=int(quantity[idx]),
                        cogs=float(cogs[idx]),
                    )
                )
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid transaction row",
                    extra={"row": int(idx), "errors": exc.error_count()},
                )

        self._log_report(report, kept=len(records))
        return records, report

    def load_inventory(self) -> tuple[list[InventoryItem], QualityReport]:
        df = self._read_csv(self.INVENTORY_FILE, self.INVENTORY_REQUIRED)

        if "description" not in df.columns:
            df["description"] = None

        report = check_inventory(df)
        clean = df[~report.rejected_rows()]

        records = []
        for row in clean.itertuples(index=True):
            try:
                records.append(
                    InventoryItem(
                        product_id=str(row.product_id),
                        business_id=str(row.business_id),
                        name=str(row.name),
                        cost_price=float(row.cost_price),
                        selling_price=float(row.selling_price),
                        stock=int(float(row.stock)),
                        description=_optional(row.description),
                    )
                )
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid inventory row",
                    extra={"row": int(row.Index), "errors": exc.error_count()},
                )

        self._log_report(report, kept=len(records))
        return records, report

    def _log_report(self, report: QualityReport, kept: int) -> None:
        summary = report.summary()
        if report.issues:
            logger.warning(
                f"{report.source_name}: {len(report.issues)} quality issue(s)",
                extra={**summary, "rows_kept": kept},
            )
        else:
            logger.info(f"{report.source_name}: loaded cleanly", extra={"rows_kept": kept})


class CsvRecordSource(InMemoryRecordSource):
    """Record source over a directory of CSV exports, loaded once."""

    def __init__(self, data_dir: Path | str):
        ledger = CsvLedgerLoader(data_dir).load_all()
        super().__init__(ledger.transactions, ledger.inventory)
        self.quality_reports = ledger.quality_reports
