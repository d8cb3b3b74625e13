"""
Catalog service — product identity, unit type, and price.

Creating a product starts it at zero quantity and zero weight.
Updates change descriptive fields only; the balance columns are
never touched here. The caller controls the commit.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stock_ledger.exceptions import (
    DuplicateSKUError,
    ProductNotFoundError,
    StorageError,
    ValidationError,
)
from stock_ledger.logging_config import get_logger
from stock_ledger.models.product import Product
from stock_ledger.schemas.product import ProductCreate, ProductUpdate

logger = get_logger("catalog")

# Fields a partial update may change but never set to null
REQUIRED_FIELDS = ("name", "category", "unit_type", "price_per_unit")


class CatalogService:

    def __init__(self, db: Session):
        self.db = db

    def _ensure_sku_free(self, sku: str, exclude_id: int | None = None):
        query = select(Product.id).where(Product.sku == sku)
        if exclude_id is not None:
            query = query.where(Product.id != exclude_id)
        if self.db.execute(query.limit(1)).scalar_one_or_none() is not None:
            raise DuplicateSKUError(sku)

    def _flush(self, sku: str | None) -> None:
        """
        Flush pending catalog changes.

        The pre-check in _ensure_sku_free can race with a concurrent
        writer; the unique constraint settles it and surfaces here.
        """
        try:
            self.db.flush()
        except IntegrityError as e:
            if sku is not None:
                raise DuplicateSKUError(sku) from e
            raise StorageError(f"Catalog write failed: {e}") from e

    def create(self, request: ProductCreate) -> Product:
        """
        Create a new product with an empty balance.

        Raises DuplicateSKUError if the SKU is already in use.
        """
        if request.sku is not None:
            self._ensure_sku_free(request.sku)

        product = Product(
            name=request.name,
            category=request.category,
            sku=request.sku,
            barcode=request.barcode,
            unit_type=request.unit_type,
            price_per_unit=request.price_per_unit,
        )
        self.db.add(product)
        self._flush(request.sku)
        logger.info(
            "product_created",
            extra={"product_id": product.id, "sku": product.sku},
        )
        return product

    def update(self, product_id: int, request: ProductUpdate) -> Product:
        """Apply the supplied fields to an existing product."""
        product = self.get(product_id)

        changes = request.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be cleared", field=field)

        new_unit = changes.get("unit_type")
        if new_unit is not None and new_unit != product.unit_type:
            if product.quantity or product.weight:
                raise ValidationError(
                    "unit_type cannot change while the product holds stock",
                    field="unit_type",
                )

        if changes.get("sku") is not None:
            self._ensure_sku_free(changes["sku"], exclude_id=product.id)

        for field, value in changes.items():
            setattr(product, field, value)

        self._flush(changes.get("sku"))
        logger.info(
            "product_updated",
            extra={"product_id": product.id, "fields": sorted(changes)},
        )
        return product

    def get(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def get_by_sku(self, sku: str) -> Product | None:
        return self.db.execute(
            select(Product).where(Product.sku == sku)
        ).scalar_one_or_none()

    def get_by_barcode(self, barcode: str) -> Product | None:
        """Return the first product carrying this barcode, if any."""
        return self.db.execute(
            select(Product)
            .where(Product.barcode == barcode)
            .order_by(Product.id)
            .limit(1)
        ).scalar_one_or_none()

    def list(self) -> list[Product]:
        """All products, ordered by name."""
        products = self.db.execute(
            select(Product).order_by(Product.name, Product.id)
        ).scalars().all()
        return list(products)
