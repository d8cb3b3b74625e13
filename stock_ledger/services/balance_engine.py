"""
Balance engine — keeps each product's on-hand balance in step
with the ledger.

apply() answers "what would the balance be after this movement?"
without touching anything, so the coordinator can refuse a
deduction before it writes a ledger entry. commit() writes the
new balance; the coordinator calls it in the same transaction as
the ledger append.

The stored balance must always equal the signed sum of the
product's ledger entries. derive() recomputes that sum from the
ledger so the two can be compared.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select, func, case
from sqlalchemy.orm import Session

from stock_ledger.exceptions import ProductNotFoundError, UnitMismatchError
from stock_ledger.models.enums import EntryKind, UnitType
from stock_ledger.models.ledger_entry import LedgerEntry
from stock_ledger.models.product import Product

ZERO = Decimal("0")

# Storage scale of every measure, price and amount column
SCALE = Decimal("0.0001")


@dataclass(frozen=True)
class Balance:
    """A product's on-hand quantity and weight."""
    quantity: Decimal
    weight: Decimal

    @property
    def is_negative(self) -> bool:
        return self.quantity < 0 or self.weight < 0


def check_unit(product: Product, quantity_delta: Decimal,
               weight_delta: Decimal) -> None:
    """
    Exactly one measure may be non-zero, and it must be the one
    the product's unit type uses.
    """
    if quantity_delta and weight_delta:
        raise UnitMismatchError(
            product.id, product.unit_type.value,
            "A movement carries either a quantity or a weight, not both",
        )
    if quantity_delta and product.unit_type != UnitType.COUNTABLE:
        raise UnitMismatchError(
            product.id, product.unit_type.value,
            f"Product {product.id} is weighable; supply a weight",
        )
    if weight_delta and product.unit_type != UnitType.WEIGHABLE:
        raise UnitMismatchError(
            product.id, product.unit_type.value,
            f"Product {product.id} is countable; supply a quantity",
        )


class BalanceEngine:

    def __init__(self, db: Session):
        self.db = db

    def _product(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def current(self, product_id: int) -> Balance:
        product = self._product(product_id)
        return Balance(product.quantity, product.weight)

    def apply(self, product_id: int, kind: EntryKind,
              quantity_delta: Decimal, weight_delta: Decimal) -> Balance:
        """
        Return the balance that would result from the movement.

        Deltas are magnitudes; the kind decides the direction.
        Nothing is written. The result may be negative; deciding
        what to do about that is the caller's job.
        """
        product = self._product(product_id)
        check_unit(product, quantity_delta, weight_delta)
        return Balance(
            quantity=product.quantity + kind.sign * quantity_delta,
            weight=product.weight + kind.sign * weight_delta,
        )

    def commit(self, product_id: int, signed_quantity_delta: Decimal,
               signed_weight_delta: Decimal) -> Balance:
        """
        Add the signed deltas to the stored balance and flush.

        Must run inside the transaction that appends the matching
        ledger entry. The returned balance is read back after the
        flush, so it is the value the database holds.
        """
        product = self._product(product_id)
        check_unit(product, signed_quantity_delta, signed_weight_delta)
        product.quantity = product.quantity + signed_quantity_delta
        product.weight = product.weight + signed_weight_delta
        self.db.flush()
        self.db.refresh(product, ["quantity", "weight"])
        return Balance(product.quantity, product.weight)

    def derive(self, product_id: int) -> Balance:
        """Recompute the balance as the signed sum of ledger entries."""
        self._product(product_id)
        sign = case((LedgerEntry.kind == EntryKind.STOCK_IN, 1), else_=-1)
        quantity, weight = self.db.execute(
            select(
                func.coalesce(func.sum(sign * LedgerEntry.quantity_delta), 0),
                func.coalesce(func.sum(sign * LedgerEntry.weight_delta), 0),
            ).where(LedgerEntry.product_id == product_id)
        ).one()
        return Balance(Decimal(str(quantity)), Decimal(str(weight)))
