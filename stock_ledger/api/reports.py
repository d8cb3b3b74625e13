"""
Reporting API endpoints. Read-only.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stock_ledger.models.base import get_db
from stock_ledger.schemas.report import (
    Period,
    RevenueReport,
    SalesReport,
    StockSnapshotRow,
)
from stock_ledger.services.reporting_service import ReportingService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/stock", response_model=list[StockSnapshotRow])
def stock_report(db: Session = Depends(get_db)):
    """Current balance of every product, ordered by name."""
    return ReportingService(db).stock_snapshot()


@router.get("/sales", response_model=SalesReport)
def sales_report(
    period: Period = Period.DAILY,
    db: Session = Depends(get_db),
):
    return ReportingService(db).sales_by_period(period)


@router.get("/revenue", response_model=RevenueReport)
def revenue_report(
    period: Period = Period.DAILY,
    db: Session = Depends(get_db),
):
    """Revenue per calendar day in the period, newest day first."""
    return ReportingService(db).revenue_by_period(period)
