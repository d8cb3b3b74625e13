"""
Shared enumerations for database models.

Python enums mapped to database enums ensure only valid values
can be stored.
"""

import enum


class UnitType(str, enum.Enum):
    """How a product is measured."""
    COUNTABLE = "COUNTABLE"
    WEIGHABLE = "WEIGHABLE"

    @property
    def measure(self) -> str:
        """Name of the balance field this unit type uses."""
        return "quantity" if self is UnitType.COUNTABLE else "weight"


class EntryKind(str, enum.Enum):
    """Kind of stock-affecting event recorded in the ledger."""
    STOCK_IN = "STOCK_IN"
    STOCK_OUT = "STOCK_OUT"
    SALE = "SALE"

    @property
    def sign(self) -> int:
        """Direction of the event's effect on the balance."""
        return 1 if self is EntryKind.STOCK_IN else -1

    @property
    def deducts(self) -> bool:
        return self.sign < 0
