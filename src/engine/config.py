"""
Centralized configuration for the ledger analytics engine.

Values are loaded from environment variables (a local .env file is honoured)
with defaults that match the documented analytics policies.

Usage:
    from engine.config import config

    window = config.forecast.window_days
    threshold = config.inventory.low_stock_threshold
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class ForecastConfig:
    """Linear-trend sales forecast settings."""

    window_days: int = field(default_factory=lambda: _env_int("FORECAST_WINDOW_DAYS", 30))
    horizon_days: int = field(default_factory=lambda: _env_int("FORECAST_HORIZON_DAYS", 7))
    min_points: int = field(default_factory=lambda: _env_int("FORECAST_MIN_POINTS", 5))


@dataclass(frozen=True)
class InventoryConfig:
    """Stock health thresholds."""

    # Trailing window used for the daily run rate
    run_rate_window_days: int = field(
        default_factory=lambda: _env_int("RUN_RATE_WINDOW_DAYS", 30)
    )
    critical_days: int = field(default_factory=lambda: _env_int("STOCKOUT_CRITICAL_DAYS", 7))
    attention_days: int = field(
        default_factory=lambda: _env_int("STOCKOUT_ATTENTION_DAYS", 30)
    )
    low_stock_threshold: int = field(
        default_factory=lambda: _env_int("LOW_STOCK_THRESHOLD", 10)
    )
    lowest_stock_limit: int = field(default_factory=lambda: _env_int("LOWEST_STOCK_LIMIT", 10))


@dataclass(frozen=True)
class RankingConfig:
    """Top-item ranking settings."""

    top_items_limit: int = field(default_factory=lambda: _env_int("TOP_ITEMS_LIMIT", 3))


@dataclass(frozen=True)
class AnalyticsConfig:
    """Root configuration object."""

    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    inventory: InventoryConfig = field(default_factory=InventoryConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("LEDGER_DATA_DIR", "data"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


config = AnalyticsConfig()
