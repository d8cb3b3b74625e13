"""
Pydantic schemas for catalog operations.

These define the API contract. The update schema deliberately has
no quantity or weight field: balances only change through stock
movements.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stock_ledger.models.enums import UnitType


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    sku: str | None = Field(default=None, min_length=1, max_length=64)
    barcode: str | None = Field(default=None, min_length=1, max_length=64)
    unit_type: UnitType
    price_per_unit: Decimal = Field(ge=0, decimal_places=4)


class ProductUpdate(BaseModel):
    """Partial update. Only fields that were supplied are applied."""
    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    sku: str | None = Field(default=None, min_length=1, max_length=64)
    barcode: str | None = Field(default=None, min_length=1, max_length=64)
    unit_type: UnitType | None = None
    price_per_unit: Decimal | None = Field(default=None, ge=0, decimal_places=4)


class ProductResponse(BaseModel):
    id: int
    name: str
    category: str
    sku: str | None
    barcode: str | None
    unit_type: UnitType
    price_per_unit: Decimal
    quantity: Decimal
    weight: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
