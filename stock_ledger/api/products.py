"""
Catalog API endpoints.

Creation and updates go through CatalogService and are committed
here. Balances are read-only on this surface.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stock_ledger.api.errors import http_error
from stock_ledger.exceptions import (
    DuplicateSKUError,
    ProductNotFoundError,
    StockLedgerError,
    StorageError,
)
from stock_ledger.models.base import get_db
from stock_ledger.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)
from stock_ledger.schemas.stock import (
    BalanceResponse,
    LedgerEntryResponse,
    ReconcileResponse,
)
from stock_ledger.services.catalog_service import CatalogService
from stock_ledger.services.ledger_store import LedgerStore
from stock_ledger.services.stock_service import StockService

router = APIRouter(prefix="/products", tags=["Products"])


def _commit(db: Session, sku: str | None) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        if sku is not None:
            raise DuplicateSKUError(sku) from e
        raise StorageError(f"Catalog commit failed: {e}") from e
    except SQLAlchemyError as e:
        raise StorageError(f"Catalog commit failed: {e}") from e


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(
    request: ProductCreate,
    db: Session = Depends(get_db),
):
    """Create a product with an empty balance."""
    service = CatalogService(db)
    try:
        product = service.create(request)
        _commit(db, request.sku)
        db.refresh(product)
        return product
    except StockLedgerError as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    """All products, ordered by name."""
    return CatalogService(db).list()


@router.get("/by-barcode/{barcode}", response_model=ProductResponse)
def get_product_by_barcode(barcode: str, db: Session = Depends(get_db)):
    product = CatalogService(db).get_by_barcode(barcode)
    if not product:
        raise http_error(ProductNotFoundError(
            None, f"No product with barcode {barcode}"
        ))
    return product


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).get(product_id)
    except StockLedgerError as e:
        raise http_error(e)


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    request: ProductUpdate,
    db: Session = Depends(get_db),
):
    """Update descriptive fields. Quantity and weight cannot be set here."""
    service = CatalogService(db)
    try:
        product = service.update(product_id, request)
        _commit(db, request.sku)
        db.refresh(product)
        return product
    except StockLedgerError as e:
        db.rollback()
        raise http_error(e)


@router.get("/{product_id}/ledger", response_model=list[LedgerEntryResponse])
def get_product_ledger(product_id: int, db: Session = Depends(get_db)):
    """Ledger history for a product, newest first."""
    try:
        CatalogService(db).get(product_id)
    except StockLedgerError as e:
        raise http_error(e)
    return LedgerStore(db).entries_for_product(product_id)


@router.get("/{product_id}/reconcile", response_model=ReconcileResponse)
def reconcile_product(
    product_id: int,
    http_request: Request,
    db: Session = Depends(get_db),
):
    """Compare the stored balance with the one derived from the ledger."""
    service = StockService(db, http_request.app.state.product_locks)
    try:
        result = service.reconcile(product_id)
    except StockLedgerError as e:
        raise http_error(e)
    return ReconcileResponse(
        product_id=result.product_id,
        stored=BalanceResponse.model_validate(result.stored),
        derived=BalanceResponse.model_validate(result.derived),
        in_sync=result.in_sync,
    )
