"""
Translation of service errors into HTTP errors.
"""

from fastapi import Header, HTTPException

from stock_ledger.exceptions import (
    DuplicateSKUError,
    InsufficientStockError,
    ProductNotFoundError,
    StockLedgerError,
    StorageError,
    UnitMismatchError,
    ValidationError,
)

STATUS_BY_ERROR = (
    (ProductNotFoundError, 404),
    (DuplicateSKUError, 409),
    (StorageError, 503),
    (ValidationError, 400),
    (UnitMismatchError, 400),
    (InsufficientStockError, 400),
)


def http_error(error: StockLedgerError) -> HTTPException:
    """Build the HTTPException for a service error."""
    status_code = next(
        (status for cls, status in STATUS_BY_ERROR if isinstance(error, cls)),
        400,
    )
    return HTTPException(
        status_code=status_code,
        detail={"message": str(error), "code": error.code},
    )


def acting_user(x_user_id: str = Header(min_length=1, max_length=100)) -> str:
    """
    The authenticated user, as supplied by the identity provider in
    front of this service. Trusted verbatim.
    """
    return x_user_id
