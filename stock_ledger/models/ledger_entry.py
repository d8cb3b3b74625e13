"""
Ledger entry model.

One row per stock-affecting event. Deltas are stored as
magnitudes; the direction comes from the kind (STOCK_IN adds,
STOCK_OUT and SALE subtract). Exactly one of quantity_delta and
weight_delta is non-zero, matching the product's unit type.

Entries are immutable. Corrections are new entries. The ORM
listeners below refuse any UPDATE or DELETE issued through a
session.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, ForeignKey, CheckConstraint, Index,
    Enum as SAEnum, event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stock_ledger.exceptions import ImmutableLedgerError
from stock_ledger.models.base import Base
from stock_ledger.models.enums import EntryKind
from stock_ledger.time_utils import utcnow


class LedgerEntry(Base):
    """
    An immutable stock movement.

    The sequence id is the primary key: it increases with every
    append, so entries for a product are totally ordered by id.
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        CheckConstraint(
            "quantity_delta >= 0", name="ck_ledger_quantity_delta_magnitude"
        ),
        CheckConstraint(
            "weight_delta >= 0", name="ck_ledger_weight_delta_magnitude"
        ),
        Index("ix_ledger_entries_product_created", "product_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"), nullable=False
    )
    kind: Mapped[EntryKind] = mapped_column(
        SAEnum(EntryKind, name="entry_kind_enum", create_constraint=True),
        nullable=False,
        index=True,
    )
    quantity_delta: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    weight_delta: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    unit_price: Mapped[Decimal | None] = mapped_column(
        Numeric(19, 4), nullable=True
    )
    total_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(19, 4), nullable=True
    )
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )

    product: Mapped["Product"] = relationship(back_populates="entries")

    @property
    def magnitude(self) -> Decimal:
        return self.quantity_delta or self.weight_delta

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.id} {self.kind.value} "
            f"product={self.product_id} q={self.quantity_delta} "
            f"w={self.weight_delta}>"
        )


@event.listens_for(LedgerEntry, "before_update")
def _refuse_entry_update(mapper, connection, target):
    raise ImmutableLedgerError(target.id, "update")


@event.listens_for(LedgerEntry, "before_delete")
def _refuse_entry_delete(mapper, connection, target):
    raise ImmutableLedgerError(target.id, "delete")
