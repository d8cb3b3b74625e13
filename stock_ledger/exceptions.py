"""
Typed exceptions for the stock ledger.

Callers catch by type, not by message. Every class carries a
machine-readable ``code`` and keeps its context as attributes so
the API layer and the log formatter can report it without parsing
strings.

    StockLedgerError
    +-- ValidationError          malformed or missing input
    +-- ProductNotFoundError     unknown product id
    +-- UnitMismatchError        quantity for weighable / weight for countable
    +-- InsufficientStockError   deduction larger than the balance
    +-- DuplicateSKUError        SKU already used by another product
    +-- StorageError             transaction failed; nothing was applied
        +-- ImmutableLedgerError attempt to update or delete a ledger entry

Business-rule errors are raised before anything is written.
StorageError means the whole operation was rolled back and may be
retried by the caller.
"""

from decimal import Decimal


class StockLedgerError(Exception):
    """Base exception for all stock ledger errors."""

    code: str = "STOCK_LEDGER_ERROR"


class ValidationError(StockLedgerError):
    """Input is malformed or missing a required value."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class ProductNotFoundError(StockLedgerError):
    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int | None, message: str | None = None):
        self.product_id = product_id
        super().__init__(message or f"Product {product_id} not found")


class UnitMismatchError(StockLedgerError):
    """The supplied measure does not match the product's unit type."""

    code: str = "UNIT_MISMATCH"

    def __init__(self, product_id: int, unit_type: str, message: str):
        self.product_id = product_id
        self.unit_type = unit_type
        super().__init__(message)


class InsufficientStockError(StockLedgerError):
    code: str = "INSUFFICIENT_STOCK"

    def __init__(
        self,
        product_id: int,
        unit: str,
        available: Decimal,
        requested: Decimal,
    ):
        self.product_id = product_id
        self.unit = unit
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock {unit} for product {product_id}: "
            f"available={available}, requested={requested}"
        )


class DuplicateSKUError(StockLedgerError):
    code: str = "DUPLICATE_SKU"

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"SKU '{sku}' already exists")


class StorageError(StockLedgerError):
    """
    The storage transaction failed and was rolled back.

    Neither the ledger nor the balance was changed.
    """

    code: str = "STORAGE_ERROR"


class ImmutableLedgerError(StorageError):
    code: str = "LEDGER_IMMUTABLE"

    def __init__(self, entry_id: int | None, action: str):
        self.entry_id = entry_id
        self.action = action
        super().__init__(
            f"Ledger entry {entry_id} is immutable: {action} is not allowed"
        )
