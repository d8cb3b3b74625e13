"""
Tests for the ReportingService.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from stock_ledger.models.enums import EntryKind, UnitType
from stock_ledger.models.ledger_entry import LedgerEntry
from stock_ledger.schemas.report import Period
from stock_ledger.schemas.stock import SaleRequest, StockInRequest
from stock_ledger.services.ledger_store import LedgerStore
from stock_ledger.services.reporting_service import ReportingService
from stock_ledger.services.stock_service import StockService
from stock_ledger.time_utils import utcnow
from tests.helpers import make_product

NOW = datetime(2026, 5, 20, 15, 30)


def fixed_clock():
    return NOW


def record_sale(store, product_id, amount, created_at, user_id="cashier"):
    return store.append(LedgerEntry(
        product_id=product_id,
        kind=EntryKind.SALE,
        quantity_delta=Decimal("1"),
        weight_delta=Decimal("0"),
        unit_price=Decimal(amount),
        total_amount=Decimal(amount),
        user_id=user_id,
        created_at=created_at,
    ))


class TestStockSnapshot:

    def test_snapshot_ordered_by_name_with_balances(self, db_session, locks):
        bananas = make_product(db_session, name="Bananas", unit_type=UnitType.WEIGHABLE)
        make_product(db_session, name="Apples")
        StockService(db_session, locks).stock_in(
            StockInRequest(product_id=bananas.id, weight=Decimal("3.5")),
            user_id="u",
        )

        rows = ReportingService(db_session).stock_snapshot()

        assert [r.name for r in rows] == ["Apples", "Bananas"]
        assert rows[1].weight == Decimal("3.5")
        assert rows[0].quantity == 0

    def test_snapshot_is_stable_without_mutation(self, db_session):
        make_product(db_session, name="A")
        make_product(db_session, name="B")
        service = ReportingService(db_session)

        assert service.stock_snapshot() == service.stock_snapshot()


class TestWindows:

    def test_window_starts(self, db_session):
        service = ReportingService(db_session, clock=fixed_clock)

        assert service.window_start(Period.DAILY) == datetime(2026, 5, 20)
        assert service.window_start(Period.WEEKLY) == datetime(2026, 5, 13)
        assert service.window_start(Period.MONTHLY) == datetime(2026, 4, 20)


class TestSalesByPeriod:

    def test_daily_sales_newest_first_with_total(self, db_session):
        product = make_product(db_session, name="Tea")
        store = LedgerStore(db_session)
        record_sale(store, product.id, "3.00", NOW - timedelta(days=1))
        early = record_sale(store, product.id, "5.00", NOW.replace(hour=9))
        late = record_sale(store, product.id, "7.00", NOW.replace(hour=14), "cashier-2")
        db_session.commit()

        report = ReportingService(db_session, clock=fixed_clock).sales_by_period(
            Period.DAILY
        )

        assert [e.entry_id for e in report.entries] == [late.id, early.id]
        assert report.entries[0].product_name == "Tea"
        assert report.entries[0].user_id == "cashier-2"
        assert report.total_revenue == Decimal("12.00")

    def test_stock_movements_are_not_sales(self, db_session, locks):
        product = make_product(db_session)
        StockService(db_session, locks).stock_in(
            StockInRequest(product_id=product.id, quantity=Decimal("4"),
                           unit_price=Decimal("9")),
            user_id="u",
        )

        report = ReportingService(db_session).sales_by_period(Period.MONTHLY)
        assert report.entries == []
        assert report.total_revenue == 0

    def test_weekly_window_includes_seventh_day_back(self, db_session):
        product = make_product(db_session)
        store = LedgerStore(db_session)
        record_sale(store, product.id, "1.00", NOW - timedelta(days=7))
        record_sale(store, product.id, "1.00", NOW - timedelta(days=8))
        db_session.commit()

        report = ReportingService(db_session, clock=fixed_clock).sales_by_period(
            Period.WEEKLY
        )
        assert len(report.entries) == 1


class TestRevenueByPeriod:

    def test_daily_revenue_after_two_sales(self, db_session, locks):
        product = make_product(db_session, price="10.00")
        service = StockService(db_session, locks)
        service.stock_in(
            StockInRequest(product_id=product.id, quantity=Decimal("50")),
            user_id="u",
        )
        service.sell(
            SaleRequest(product_id=product.id, quantity=Decimal("20"),
                        unit_price=Decimal("12.00")),
            user_id="u",
        )
        service.sell(
            SaleRequest(product_id=product.id, quantity=Decimal("1"),
                        unit_price=Decimal("12.00")),
            user_id="u",
        )

        report = ReportingService(db_session).revenue_by_period(Period.DAILY)

        assert len(report.by_day) == 1
        assert report.by_day[0].date == utcnow().date()
        assert report.by_day[0].daily_revenue == Decimal("252.00")
        assert report.by_day[0].total_sales == 2
        assert report.total_revenue == Decimal("252.00")
        assert report.total_sales == 2

    def test_monthly_revenue_grouped_newest_day_first(self, db_session):
        product = make_product(db_session)
        store = LedgerStore(db_session)
        record_sale(store, product.id, "10.00", NOW - timedelta(days=2))
        record_sale(store, product.id, "2.50", NOW - timedelta(days=2, hours=3))
        record_sale(store, product.id, "4.00", NOW)
        record_sale(store, product.id, "99.00", NOW - timedelta(days=45))
        db_session.commit()

        report = ReportingService(db_session, clock=fixed_clock).revenue_by_period(
            Period.MONTHLY
        )

        assert [d.date for d in report.by_day] == [
            NOW.date(), (NOW - timedelta(days=2)).date()
        ]
        assert report.by_day[1].daily_revenue == Decimal("12.50")
        assert report.by_day[1].total_sales == 2
        assert report.total_revenue == Decimal("16.50")
        assert report.total_sales == 3

    def test_empty_period(self, db_session):
        report = ReportingService(db_session).revenue_by_period(Period.WEEKLY)

        assert report.by_day == []
        assert report.total_revenue == 0
        assert report.total_sales == 0
