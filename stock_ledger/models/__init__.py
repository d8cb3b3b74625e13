"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from stock_ledger.models.base import Base, create_session_factory, get_db
from stock_ledger.models.enums import UnitType, EntryKind
from stock_ledger.models.product import Product
from stock_ledger.models.ledger_entry import LedgerEntry

__all__ = [
    "Base",
    "create_session_factory",
    "get_db",
    "UnitType",
    "EntryKind",
    "Product",
    "LedgerEntry",
]
