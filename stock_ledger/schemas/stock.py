"""
Pydantic schemas for stock movements and the ledger.

quantity and weight are optional: None means "not supplied". A
supplied zero is a real value and is rejected by the coordinator
as non-positive rather than silently treated as missing. Field
level checks here stay structural so every business rule is
reported through the coordinator's typed errors. Measures and
prices carry at most 4 decimal places, the scale they are stored
at.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from stock_ledger.models.enums import EntryKind


class StockInRequest(BaseModel):
    product_id: int
    quantity: Decimal | None = Field(default=None, decimal_places=4)
    weight: Decimal | None = Field(default=None, decimal_places=4)
    unit_price: Decimal | None = Field(default=None, decimal_places=4)
    note: str | None = Field(default=None, max_length=500)


class StockOutRequest(BaseModel):
    product_id: int
    quantity: Decimal | None = Field(default=None, decimal_places=4)
    weight: Decimal | None = Field(default=None, decimal_places=4)
    note: str | None = Field(default=None, max_length=500)


class SaleRequest(BaseModel):
    product_id: int
    quantity: Decimal | None = Field(default=None, decimal_places=4)
    weight: Decimal | None = Field(default=None, decimal_places=4)
    unit_price: Decimal | None = Field(default=None, decimal_places=4)
    note: str | None = Field(default=None, max_length=500)


class BalanceResponse(BaseModel):
    quantity: Decimal
    weight: Decimal

    model_config = {"from_attributes": True}


class MovementResult(BaseModel):
    """Outcome of a committed stock movement."""
    product_id: int
    entry_id: int
    kind: EntryKind
    new_balance: BalanceResponse
    total_amount: Decimal | None = None


class LedgerEntryResponse(BaseModel):
    id: int
    product_id: int
    kind: EntryKind
    quantity_delta: Decimal
    weight_delta: Decimal
    unit_price: Decimal | None
    total_amount: Decimal | None
    note: str | None
    user_id: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ReconcileResponse(BaseModel):
    """Stored balance compared with the balance derived from the ledger."""
    product_id: int
    stored: BalanceResponse
    derived: BalanceResponse
    in_sync: bool
