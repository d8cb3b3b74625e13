"""Helpers shared by service and API tests."""

from decimal import Decimal

from stock_ledger.models.enums import UnitType
from stock_ledger.schemas.product import ProductCreate
from stock_ledger.services.catalog_service import CatalogService


def make_product(db_session, name="Widget", unit_type=UnitType.COUNTABLE,
                 price="10.00", sku=None, barcode=None, category="General"):
    """Create and commit a product."""
    product = CatalogService(db_session).create(ProductCreate(
        name=name,
        category=category,
        sku=sku,
        barcode=barcode,
        unit_type=unit_type,
        price_per_unit=Decimal(price),
    ))
    db_session.commit()
    return product
