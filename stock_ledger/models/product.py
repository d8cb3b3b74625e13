"""
Product model (the catalog).

A product carries its own current balance (quantity for countable
products, weight for weighable ones). The balance columns are a
denormalized view of the ledger: they are written only by the
BalanceEngine, inside the same transaction as the ledger entry
that explains the change.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, CheckConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stock_ledger.models.base import Base
from stock_ledger.models.enums import UnitType
from stock_ledger.time_utils import utcnow


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        CheckConstraint("weight >= 0", name="ck_products_weight_non_negative"),
        CheckConstraint(
            "price_per_unit >= 0", name="ck_products_price_non_negative"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    sku: Mapped[str | None] = mapped_column(
        String(64), unique=True, nullable=True
    )
    barcode: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )
    unit_type: Mapped[UnitType] = mapped_column(
        SAEnum(UnitType, name="unit_type_enum", create_constraint=True),
        nullable=False,
    )
    price_per_unit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    weight: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="product"
    )

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.name!r} ({self.unit_type.value})>"
