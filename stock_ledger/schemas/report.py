"""
Pydantic schemas for reporting.
"""

import enum
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from stock_ledger.models.enums import UnitType


class Period(str, enum.Enum):
    """Reporting window anchored to the time of the call."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class StockSnapshotRow(BaseModel):
    product_id: int
    name: str
    category: str
    sku: str | None
    barcode: str | None
    unit_type: UnitType
    price_per_unit: Decimal
    quantity: Decimal
    weight: Decimal


class SaleRow(BaseModel):
    entry_id: int
    product_id: int
    product_name: str
    user_id: str
    quantity: Decimal
    weight: Decimal
    unit_price: Decimal | None
    total_amount: Decimal
    created_at: datetime


class SalesReport(BaseModel):
    period: Period
    entries: list[SaleRow]
    total_revenue: Decimal


class RevenueDay(BaseModel):
    date: date
    daily_revenue: Decimal
    total_sales: int


class RevenueReport(BaseModel):
    period: Period
    by_day: list[RevenueDay]
    total_revenue: Decimal
    total_sales: int
