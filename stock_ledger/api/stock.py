"""
Stock movement API endpoints.

StockService commits its own transaction, so these handlers only
translate errors. The acting user comes from the X-User-Id header.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from stock_ledger.api.errors import acting_user, http_error
from stock_ledger.exceptions import StockLedgerError
from stock_ledger.models.base import get_db
from stock_ledger.schemas.stock import (
    BalanceResponse,
    MovementResult,
    SaleRequest,
    StockInRequest,
    StockOutRequest,
)
from stock_ledger.services.stock_service import Movement, StockService

router = APIRouter(tags=["Stock"])


def _service(http_request: Request, db: Session) -> StockService:
    return StockService(db, http_request.app.state.product_locks)


def _result(movement: Movement) -> MovementResult:
    return MovementResult(
        product_id=movement.product_id,
        entry_id=movement.entry_id,
        kind=movement.kind,
        new_balance=BalanceResponse.model_validate(movement.new_balance),
        total_amount=movement.total_amount,
    )


@router.post("/stock/stock-in", response_model=MovementResult, status_code=201)
def stock_in(
    request: StockInRequest,
    http_request: Request,
    user_id: str = Depends(acting_user),
    db: Session = Depends(get_db),
):
    """Receive stock into a product."""
    try:
        return _result(_service(http_request, db).stock_in(request, user_id))
    except StockLedgerError as e:
        raise http_error(e)


@router.post("/stock/stock-out", response_model=MovementResult, status_code=201)
def stock_out(
    request: StockOutRequest,
    http_request: Request,
    user_id: str = Depends(acting_user),
    db: Session = Depends(get_db),
):
    """Remove stock without a sale."""
    try:
        return _result(_service(http_request, db).stock_out(request, user_id))
    except StockLedgerError as e:
        raise http_error(e)


@router.post("/sales", response_model=MovementResult, status_code=201)
def sell(
    request: SaleRequest,
    http_request: Request,
    user_id: str = Depends(acting_user),
    db: Session = Depends(get_db),
):
    """Record a sale. The response carries total_amount and entry_id."""
    try:
        return _result(_service(http_request, db).sell(request, user_id))
    except StockLedgerError as e:
        raise http_error(e)
