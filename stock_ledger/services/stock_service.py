"""
Stock service — stock-in, stock-out, and sales.

Each operation is one atomic transition:
1. Validates the input (one positive measure, price rules)
2. Takes the product's exclusive lock
3. Loads the product (row-locked where the database supports it)
4. Checks the measure against the product's unit type
5. For deductions, checks the balance covers the request
6. Appends the ledger entry and commits the new balance together
7. Returns the new balance

Every business-rule failure is raised before anything is
written. If the database fails during step 6, the transaction is
rolled back and StorageError is raised: neither the entry nor the
balance change survives.

Unlike the catalog, this service owns its commit. The lock must
be held until the commit returns, otherwise a second caller could
read the balance before the first caller's deduction is durable.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stock_ledger.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    StorageError,
    ValidationError,
)
from stock_ledger.logging_config import LogContext, get_logger
from stock_ledger.models.enums import EntryKind
from stock_ledger.models.ledger_entry import LedgerEntry
from stock_ledger.models.product import Product
from stock_ledger.schemas.stock import (
    StockInRequest,
    StockOutRequest,
    SaleRequest,
)
from stock_ledger.services.balance_engine import (
    Balance,
    BalanceEngine,
    SCALE,
    ZERO,
    check_unit,
)
from stock_ledger.services.ledger_store import LedgerStore
from stock_ledger.services.locks import ProductLocks

logger = get_logger("stock")


@dataclass(frozen=True)
class Movement:
    """Outcome of a committed stock movement."""
    product_id: int
    entry_id: int
    kind: EntryKind
    new_balance: Balance
    total_amount: Decimal | None = None


@dataclass(frozen=True)
class Reconciliation:
    product_id: int
    stored: Balance
    derived: Balance

    @property
    def in_sync(self) -> bool:
        return self.stored == self.derived


def _check_scale(value: Decimal, field: str) -> None:
    try:
        stored = value.quantize(SCALE)
    except InvalidOperation:
        raise ValidationError(f"{field} is out of range", field=field)
    if value != stored:
        raise ValidationError(
            f"{field} allows at most 4 decimal places", field=field
        )


def _measure(quantity: Decimal | None,
             weight: Decimal | None) -> tuple[Decimal, Decimal]:
    """
    Turn the optional quantity/weight pair into magnitudes.

    None means "not supplied". Zero is a supplied value and is
    rejected as non-positive.
    """
    if quantity is None and weight is None:
        raise ValidationError("Either quantity or weight is required")
    if quantity is not None and weight is not None:
        raise ValidationError("Supply either quantity or weight, not both")
    if quantity is not None:
        if quantity <= 0:
            raise ValidationError("quantity must be positive", field="quantity")
        _check_scale(quantity, "quantity")
        return quantity, ZERO
    if weight <= 0:
        raise ValidationError("weight must be positive", field="weight")
    _check_scale(weight, "weight")
    return ZERO, weight


def _check_price(unit_price: Decimal | None, required: bool) -> None:
    if unit_price is None:
        if required:
            raise ValidationError("unit_price is required", field="unit_price")
        return
    if unit_price < 0:
        raise ValidationError(
            "unit_price must not be negative", field="unit_price"
        )
    _check_scale(unit_price, "unit_price")


def _check_user(user_id: str) -> None:
    if not user_id or not user_id.strip():
        raise ValidationError("An acting user is required", field="user_id")


class StockService:

    def __init__(self, db: Session, locks: ProductLocks):
        self.db = db
        self.locks = locks
        self.ledger = LedgerStore(db)
        self.balances = BalanceEngine(db)

    @contextmanager
    def _atomic(self):
        """
        One storage transaction: commit on success, roll back on any
        failure. Database errors surface as StorageError.
        """
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("stock_movement_rolled_back", exc_info=True)
            raise StorageError(f"Stock movement failed: {e}") from e
        except StorageError:
            self.db.rollback()
            logger.error("stock_movement_rolled_back", exc_info=True)
            raise
        except BaseException:
            self.db.rollback()
            raise

    def _lock_product(self, product_id: int) -> Product:
        """
        Load the product with a fresh read of its balance.

        populate_existing overwrites anything the session cached
        before the lock was taken.
        """
        product = self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def _record(
        self,
        kind: EntryKind,
        product_id: int,
        quantity: Decimal | None,
        weight: Decimal | None,
        user_id: str,
        unit_price: Decimal | None = None,
        note: str | None = None,
    ) -> Movement:
        quantity_delta, weight_delta = _measure(quantity, weight)
        _check_price(unit_price, required=kind == EntryKind.SALE)
        _check_user(user_id)

        with LogContext.bind(user_id=user_id, product_id=product_id):
            with self.locks.hold(product_id), self._atomic():
                product = self._lock_product(product_id)
                check_unit(product, quantity_delta, weight_delta)

                projected = self.balances.apply(
                    product_id, kind, quantity_delta, weight_delta
                )
                if projected.is_negative:
                    unit = product.unit_type.measure
                    available = getattr(product, unit)
                    logger.warning(
                        "insufficient_stock",
                        extra={
                            "kind": kind.value,
                            "available": available,
                            "requested": quantity_delta or weight_delta,
                        },
                    )
                    raise InsufficientStockError(
                        product_id, unit, available,
                        quantity_delta or weight_delta,
                    )

                total_amount = None
                if kind == EntryKind.SALE:
                    total_amount = (
                        (quantity_delta or weight_delta) * unit_price
                    ).quantize(SCALE, rounding=ROUND_HALF_UP)

                entry = self.ledger.append(LedgerEntry(
                    product_id=product_id,
                    kind=kind,
                    quantity_delta=quantity_delta,
                    weight_delta=weight_delta,
                    unit_price=unit_price,
                    total_amount=total_amount,
                    note=note,
                    user_id=user_id,
                ))
                new_balance = self.balances.commit(
                    product_id,
                    kind.sign * quantity_delta,
                    kind.sign * weight_delta,
                )
                entry_id = entry.id

            logger.info(
                "stock_movement_committed",
                extra={
                    "kind": kind.value,
                    "entry_id": entry_id,
                    "quantity": new_balance.quantity,
                    "weight": new_balance.weight,
                },
            )

        return Movement(
            product_id=product_id,
            entry_id=entry_id,
            kind=kind,
            new_balance=new_balance,
            total_amount=total_amount,
        )

    def stock_in(self, request: StockInRequest, user_id: str) -> Movement:
        """
        Receive stock. Increases the balance; no sufficiency check.

        unit_price is optional and only recorded on the entry.
        """
        return self._record(
            EntryKind.STOCK_IN,
            request.product_id,
            request.quantity,
            request.weight,
            user_id,
            unit_price=request.unit_price,
            note=request.note,
        )

    def stock_out(self, request: StockOutRequest, user_id: str) -> Movement:
        """
        Remove stock without a sale (waste, damage, transfer out).

        Raises InsufficientStockError if the balance does not cover it.
        """
        return self._record(
            EntryKind.STOCK_OUT,
            request.product_id,
            request.quantity,
            request.weight,
            user_id,
            note=request.note,
        )

    def sell(self, request: SaleRequest, user_id: str) -> Movement:
        """
        Record a sale.

        total_amount = magnitude x unit_price is stored on the entry
        and returned. Raises InsufficientStockError if the balance
        does not cover the sale.
        """
        return self._record(
            EntryKind.SALE,
            request.product_id,
            request.quantity,
            request.weight,
            user_id,
            unit_price=request.unit_price,
            note=request.note,
        )

    def reconcile(self, product_id: int) -> Reconciliation:
        """
        Compare the stored balance with the one derived from the
        ledger. Read-only.
        """
        product = self.db.get(Product, product_id, populate_existing=True)
        if not product:
            raise ProductNotFoundError(product_id)
        return Reconciliation(
            product_id=product_id,
            stored=Balance(product.quantity, product.weight),
            derived=self.balances.derive(product_id),
        )
