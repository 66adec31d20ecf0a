"""
Tests for engine.exceptions and engine.config modules.
"""
from engine.config import AnalyticsConfig, ForecastConfig, InventoryConfig
from engine.exceptions import (
    AnalyticsError,
    ComputationError,
    ProductNotFoundError,
    RecordSourceError,
)


class TestAnalyticsError:
    """Tests for base AnalyticsError exception."""

    def test_message_only(self):
        error = AnalyticsError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.details is None

    def test_message_with_details(self):
        error = AnalyticsError("Failed", "division by zero")
        assert str(error) == "Failed: division by zero"


class TestSubclasses:
    """All engine errors share the base class."""

    def test_product_not_found(self):
        error = ProductNotFoundError("p-1")
        assert isinstance(error, AnalyticsError)
        assert error.product_id == "p-1"
        assert error.message == "Product not found"

    def test_computation_error(self):
        error = ComputationError("net_sales", "boom")
        assert isinstance(error, AnalyticsError)
        assert str(error) == "net_sales failed: boom"

    def test_record_source_error(self):
        error = RecordSourceError("/tmp/x.csv")
        assert error.path == "/tmp/x.csv"
        assert "/tmp/x.csv" in str(error)


class TestConfig:
    """Tests for environment-driven configuration."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("FORECAST_MIN_POINTS", "9")
        monkeypatch.setenv("LOW_STOCK_THRESHOLD", "25")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = AnalyticsConfig()
        assert settings.forecast.min_points == 9
        assert settings.inventory.low_stock_threshold == 25
        assert settings.log_level == "DEBUG"

    def test_invalid_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("FORECAST_HORIZON_DAYS", "seven")
        assert ForecastConfig().horizon_days == 7

    def test_defaults(self, monkeypatch):
        for name in ("STOCKOUT_CRITICAL_DAYS", "STOCKOUT_ATTENTION_DAYS"):
            monkeypatch.delenv(name, raising=False)
        settings = InventoryConfig()
        assert settings.critical_days == 7
        assert settings.attention_days == 30
