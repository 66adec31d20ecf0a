"""
Logging setup and operation timing for the analytics engine.

Modules log through ``logging.getLogger(__name__)``; the host application
calls ``setup_logging`` once at startup.
"""

import logging
import time
from datetime import datetime, timezone

# Attributes every LogRecord carries; anything else was passed via ``extra``
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "asctime", "taskName",
}


class ReadableFormatter(logging.Formatter):
    """
    Format: TIMESTAMP - LEVEL - LOGGER - MESSAGE | {extra fields}
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S"
        )
        line = f"{timestamp} - {record.levelname:8} - {record.name} - {record.getMessage()}"

        extras = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _STANDARD_ATTRS and not k.startswith("_")
        }
        if extras:
            line += f" | {extras}"

        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"

        return line


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging with a single stream handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    handler = logging.StreamHandler()
    handler.setFormatter(ReadableFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Streamlit's file watcher is chatty at DEBUG
    logging.getLogger("watchdog").setLevel(logging.WARNING)


class Timer:
    """
    Context manager that logs how long an operation took.

    Usage:
        with Timer("net_sales", logger) as t:
            result = compute()
        t.elapsed_ms
    """

    def __init__(
        self,
        name: str,
        logger: logging.Logger | None = None,
        warn_threshold_ms: float = 1000,
    ):
        self.name = name
        self.logger = logger
        self.warn_threshold_ms = warn_threshold_ms
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000

        if self.logger:
            level = logging.WARNING if self.elapsed_ms > self.warn_threshold_ms else logging.DEBUG
            self.logger.log(
                level,
                f"{self.name} completed",
                extra={"duration_ms": round(self.elapsed_ms, 2)},
            )
