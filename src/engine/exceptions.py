"""
Exception hierarchy for the analytics engine.

Exception Hierarchy:
    AnalyticsError (base)
    ├── ProductNotFoundError  - referenced product is missing from inventory
    ├── ComputationError      - unexpected failure while aggregating
    └── RecordSourceError     - raw records could not be loaded

Insufficient forecast data and unknown range selectors are not errors:
they resolve to documented fallback values.
"""


class AnalyticsError(Exception):
    """Base exception for all analytics errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ProductNotFoundError(AnalyticsError):
    """
    Product-level analytics were requested for a product that does not exist.

    Kept separate from ComputationError so callers can answer
    "no such product" instead of "computation failed".
    """

    def __init__(self, product_id: str):
        super().__init__("Product not found", details=str(product_id))
        self.product_id = product_id


class ComputationError(AnalyticsError):
    """
    An unexpected exception escaped an analytics operation.

    The original exception is chained as __cause__.
    """

    def __init__(self, operation: str, details: str | None = None):
        super().__init__(f"{operation} failed", details)
        self.operation = operation


class RecordSourceError(AnalyticsError):
    """Raw transaction or inventory records could not be read."""

    def __init__(self, path: str, details: str | None = None):
        super().__init__(f"Could not load records from {path}", details)
        self.path = path
