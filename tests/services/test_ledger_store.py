"""
Tests for the LedgerStore.

Covers sequence assignment, immutability of written entries, and
the filtering and restartability of scans.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from stock_ledger.exceptions import ImmutableLedgerError, StorageError
from stock_ledger.models.enums import EntryKind
from stock_ledger.models.ledger_entry import LedgerEntry
from stock_ledger.services.ledger_store import LedgerFilter, LedgerStore
from tests.helpers import make_product


def entry(product_id, kind=EntryKind.STOCK_IN, quantity="1", created_at=None,
          total_amount=None):
    extra = {"created_at": created_at} if created_at is not None else {}
    return LedgerEntry(
        product_id=product_id,
        kind=kind,
        quantity_delta=Decimal(quantity),
        weight_delta=Decimal("0"),
        total_amount=total_amount,
        user_id="clerk",
        **extra,
    )


class TestAppend:

    def test_append_assigns_increasing_ids(self, db_session):
        product = make_product(db_session)
        store = LedgerStore(db_session)

        first = store.append(entry(product.id))
        second = store.append(entry(product.id))
        db_session.commit()

        assert first.id is not None
        assert second.id > first.id

    def test_append_twice_rejected(self, db_session):
        product = make_product(db_session)
        store = LedgerStore(db_session)
        written = store.append(entry(product.id))

        with pytest.raises(StorageError, match="already appended"):
            store.append(written)

    def test_entries_cannot_be_updated(self, db_session):
        product = make_product(db_session)
        written = LedgerStore(db_session).append(entry(product.id))
        db_session.commit()

        written.note = "edited"
        with pytest.raises(ImmutableLedgerError):
            db_session.flush()

    def test_entries_cannot_be_deleted(self, db_session):
        product = make_product(db_session)
        written = LedgerStore(db_session).append(entry(product.id))
        db_session.commit()

        db_session.delete(written)
        with pytest.raises(ImmutableLedgerError) as exc_info:
            db_session.flush()
        assert exc_info.value.action == "delete"

    def test_entries_for_product_newest_first(self, db_session):
        a = make_product(db_session, name="A")
        b = make_product(db_session, name="B")
        store = LedgerStore(db_session)
        e1 = store.append(entry(a.id))
        store.append(entry(b.id))
        e3 = store.append(entry(a.id))
        db_session.commit()

        ids = [e.id for e in store.entries_for_product(a.id)]
        assert ids == [e3.id, e1.id]


class TestScan:

    def test_scan_filters_by_product_and_kind(self, db_session):
        a = make_product(db_session, name="A")
        b = make_product(db_session, name="B")
        store = LedgerStore(db_session)
        store.append(entry(a.id, EntryKind.STOCK_IN))
        sale = store.append(entry(a.id, EntryKind.SALE))
        store.append(entry(b.id, EntryKind.SALE))
        db_session.commit()

        found = list(store.scan(LedgerFilter(product_id=a.id, kind=EntryKind.SALE)))
        assert [e.id for e in found] == [sale.id]

    def test_scan_filters_by_time_window(self, db_session):
        product = make_product(db_session)
        store = LedgerStore(db_session)
        now = datetime(2026, 3, 15, 12, 0)
        store.append(entry(product.id, created_at=now - timedelta(days=10)))
        recent = store.append(entry(product.id, created_at=now - timedelta(days=1)))
        store.append(entry(product.id, created_at=now + timedelta(days=1)))
        db_session.commit()

        found = list(store.scan(LedgerFilter(
            since=now - timedelta(days=2), until=now,
        )))
        assert [e.id for e in found] == [recent.id]

    def test_scan_is_lazy_and_restartable(self, db_session):
        product = make_product(db_session)
        store = LedgerStore(db_session)
        store.append(entry(product.id))
        db_session.commit()

        scan = store.scan(LedgerFilter(product_id=product.id))
        assert len(list(scan)) == 1

        # A second pass sees entries committed after the scan was built
        store.append(entry(product.id))
        db_session.commit()
        assert len(list(scan)) == 2

    def test_scan_newest_first(self, db_session):
        product = make_product(db_session)
        store = LedgerStore(db_session)
        now = datetime(2026, 3, 15, 12, 0)
        older = store.append(entry(product.id, created_at=now - timedelta(hours=2)))
        newer = store.append(entry(product.id, created_at=now))
        db_session.commit()

        found = list(store.scan(newest_first=True))
        assert [e.id for e in found] == [newer.id, older.id]

    def test_scan_with_product_names(self, db_session):
        flour = make_product(db_session, name="Flour")
        sugar = make_product(db_session, name="Sugar")
        store = LedgerStore(db_session)
        store.append(entry(flour.id, kind=EntryKind.SALE, total_amount=Decimal("2")))
        store.append(entry(sugar.id, kind=EntryKind.SALE, total_amount=Decimal("3")))
        store.append(entry(sugar.id))
        db_session.commit()

        pairs = list(
            store.scan(LedgerFilter(kind=EntryKind.SALE)).with_product_names()
        )

        assert [(e.product_id, name) for e, name in pairs] == [
            (flour.id, "Flour"),
            (sugar.id, "Sugar"),
        ]
