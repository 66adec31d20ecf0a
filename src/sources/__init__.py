# Record sources: where raw transactions and inventory come from
# The engine only reads through the RecordSource interface

from .base import InMemoryRecordSource, RecordSource
from .csv_source import CsvLedgerLoader, CsvRecordSource

__all__ = ["RecordSource", "InMemoryRecordSource", "CsvLedgerLoader", "CsvRecordSource"]
