"""
Ledger store — the append-only record of stock movements.

append() only persists. It checks no business rules; the
coordinator has already done that inside the same transaction.
Nothing here updates or deletes an entry.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stock_ledger.exceptions import StorageError
from stock_ledger.models.enums import EntryKind
from stock_ledger.models.ledger_entry import LedgerEntry
from stock_ledger.models.product import Product


@dataclass(frozen=True)
class LedgerFilter:
    """Predicate for scan(). Unset fields match everything."""
    product_id: int | None = None
    kind: EntryKind | None = None
    since: datetime | None = None
    until: datetime | None = None


class LedgerScan:
    """
    A lazy, restartable sequence of ledger entries.

    Each iteration runs the query afresh, so iterating twice gives
    two independent passes over whatever is committed at the time.
    """

    def __init__(self, db: Session, ledger_filter: LedgerFilter,
                 newest_first: bool = False, batch_size: int = 500):
        self._db = db
        self.filter = ledger_filter
        self.newest_first = newest_first
        self.batch_size = batch_size

    def _query(self):
        f = self.filter
        query = select(LedgerEntry)
        if f.product_id is not None:
            query = query.where(LedgerEntry.product_id == f.product_id)
        if f.kind is not None:
            query = query.where(LedgerEntry.kind == f.kind)
        if f.since is not None:
            query = query.where(LedgerEntry.created_at >= f.since)
        if f.until is not None:
            query = query.where(LedgerEntry.created_at <= f.until)
        if self.newest_first:
            return query.order_by(
                LedgerEntry.created_at.desc(), LedgerEntry.id.desc()
            )
        return query.order_by(LedgerEntry.id)

    def __iter__(self) -> Iterator[LedgerEntry]:
        result = self._db.execute(
            self._query().execution_options(yield_per=self.batch_size)
        )
        yield from result.scalars()

    def with_product_names(self) -> Iterator[tuple[LedgerEntry, str]]:
        """The same pass, each entry paired with its product's name."""
        query = (
            self._query()
            .join(Product, Product.id == LedgerEntry.product_id)
            .add_columns(Product.name)
        )
        result = self._db.execute(
            query.execution_options(yield_per=self.batch_size)
        )
        for entry, name in result:
            yield entry, name


class LedgerStore:

    def __init__(self, db: Session):
        self.db = db

    def append(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Persist a new entry and assign its sequence id.

        Raises StorageError if the database refuses the write. The
        surrounding transaction is left for the caller to roll back.
        """
        if entry.id is not None:
            raise StorageError(f"Ledger entry {entry.id} was already appended")
        try:
            self.db.add(entry)
            self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to append ledger entry: {e}") from e
        return entry

    def scan(self, ledger_filter: LedgerFilter | None = None,
             newest_first: bool = False) -> LedgerScan:
        return LedgerScan(self.db, ledger_filter or LedgerFilter(), newest_first)

    def entries_for_product(self, product_id: int) -> list[LedgerEntry]:
        """Return all entries for a product, newest first."""
        entries = self.db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.product_id == product_id)
            .order_by(LedgerEntry.id.desc())
        ).scalars().all()
        return list(entries)

    def get(self, entry_id: int) -> LedgerEntry | None:
        return self.db.get(LedgerEntry, entry_id)
