"""
Date parsing for ledger exports.

Transaction exports carry dates as plain ISO dates, ISO timestamps (with or
without fractional seconds / a trailing Z) or the US/EU day-month forms that
spreadsheet tools produce.
"""

from datetime import datetime

import pandas as pd


class DateParser:
    """
    Multi-format date parser with a per-instance cache.

    To extend: pass ``custom_formats``; they are tried before the defaults.
    """

    # Ordered by specificity: full timestamps before bare dates
    DATE_FORMATS = [
        "%Y-%m-%dT%H:%M:%S.%fZ",  # 2024-07-25T14:30:00.000Z
        "%Y-%m-%dT%H:%M:%SZ",     # 2024-07-25T14:30:00Z
        "%Y-%m-%dT%H:%M:%S.%f",   # 2024-07-25T14:30:00.123
        "%Y-%m-%dT%H:%M:%S",      # 2024-07-25T14:30:00
        "%Y-%m-%d %H:%M:%S",      # 2024-07-25 14:30:00
        "%Y-%m-%d %H:%M",         # 2024-07-25 14:30
        "%Y-%m-%d",               # 2024-07-25
        "%Y/%m/%d",               # 2024/07/25
        "%m/%d/%Y",               # 07/25/2024
        "%d.%m.%Y",               # 25.07.2024
    ]

    def __init__(self, custom_formats: list[str] | None = None):
        self.formats = (custom_formats or []) + self.DATE_FORMATS
        self._cache: dict[str, datetime | None] = {}

    def parse(self, value) -> datetime | None:
        """Parse a single value; None when no format matches."""
        if isinstance(value, datetime):
            return value
        if value is None or pd.isna(value):
            return None

        text = str(value).strip()
        if not text:
            return None

        if text in self._cache:
            return self._cache[text]

        parsed = None
        for fmt in self.formats:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

        self._cache[text] = parsed
        return parsed

    def parse_series(self, series: pd.Series) -> pd.Series:
        """Parse a Series into datetime64; unparseable values become NaT."""
        return pd.to_datetime(series.map(self.parse))
