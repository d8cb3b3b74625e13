"""
Reporting service — read-only views over products and the ledger.

Nothing here takes a product lock or writes. Reports read whatever
is committed when they run, so they may trail in-flight movements
by a few entries.

Period windows are calendar dates in UTC, anchored to the time of
the call:
    daily   — entries dated today
    weekly  — entries dated on or after today minus 7 days
    monthly — entries dated on or after today minus 30 days
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from stock_ledger.models.enums import EntryKind
from stock_ledger.models.product import Product
from stock_ledger.schemas.report import (
    Period,
    RevenueDay,
    RevenueReport,
    SaleRow,
    SalesReport,
    StockSnapshotRow,
)
from stock_ledger.services.ledger_store import LedgerFilter, LedgerStore
from stock_ledger.time_utils import utcnow

PERIOD_DAYS = {
    Period.DAILY: 0,
    Period.WEEKLY: 7,
    Period.MONTHLY: 30,
}


class ReportingService:

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock
        self.ledger = LedgerStore(db)

    def window_start(self, period: Period) -> datetime:
        """Midnight of the first calendar day the period covers."""
        today = self.clock().date()
        first_day = today - timedelta(days=PERIOD_DAYS[Period(period)])
        return datetime.combine(first_day, datetime.min.time())

    def stock_snapshot(self) -> list[StockSnapshotRow]:
        """Every product with its current balance, ordered by name."""
        products = self.db.execute(
            select(Product).order_by(Product.name, Product.id)
        ).scalars().all()
        return [
            StockSnapshotRow(
                product_id=p.id,
                name=p.name,
                category=p.category,
                sku=p.sku,
                barcode=p.barcode,
                unit_type=p.unit_type,
                price_per_unit=p.price_per_unit,
                quantity=p.quantity,
                weight=p.weight,
            )
            for p in products
        ]

    def _sales(self, period: Period):
        return self.ledger.scan(
            LedgerFilter(kind=EntryKind.SALE, since=self.window_start(period)),
            newest_first=True,
        )

    def sales_by_period(self, period: Period) -> SalesReport:
        """Sales in the window, newest first, with their total revenue."""
        period = Period(period)
        rows = []
        total = Decimal("0")
        for entry, product_name in self._sales(period).with_product_names():
            amount = entry.total_amount or Decimal("0")
            rows.append(SaleRow(
                entry_id=entry.id,
                product_id=entry.product_id,
                product_name=product_name,
                user_id=entry.user_id,
                quantity=entry.quantity_delta,
                weight=entry.weight_delta,
                unit_price=entry.unit_price,
                total_amount=amount,
                created_at=entry.created_at,
            ))
            total += amount

        return SalesReport(period=period, entries=rows, total_revenue=total)

    def revenue_by_period(self, period: Period) -> RevenueReport:
        """Sales in the window grouped by calendar date, newest date first."""
        period = Period(period)
        by_day: dict = {}
        for entry in self._sales(period):
            day = entry.created_at.date()
            revenue, count = by_day.get(day, (Decimal("0"), 0))
            by_day[day] = (revenue + (entry.total_amount or Decimal("0")), count + 1)

        days = [
            RevenueDay(date=day, daily_revenue=revenue, total_sales=count)
            for day, (revenue, count) in sorted(
                by_day.items(), key=lambda item: item[0], reverse=True
            )
        ]
        return RevenueReport(
            period=period,
            by_day=days,
            total_revenue=sum((d.daily_revenue for d in days), Decimal("0")),
            total_sales=sum(d.total_sales for d in days),
        )
