"""Business logic services."""

from stock_ledger.services.locks import ProductLocks
from stock_ledger.services.catalog_service import CatalogService
from stock_ledger.services.ledger_store import LedgerFilter, LedgerStore
from stock_ledger.services.balance_engine import Balance, BalanceEngine
from stock_ledger.services.stock_service import StockService
from stock_ledger.services.reporting_service import ReportingService

__all__ = [
    "ProductLocks",
    "CatalogService",
    "LedgerFilter",
    "LedgerStore",
    "Balance",
    "BalanceEngine",
    "StockService",
    "ReportingService",
]
