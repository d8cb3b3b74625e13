"""products and ledger entries

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UNIT_TYPE = sa.Enum(
    "COUNTABLE", "WEIGHABLE", name="unit_type_enum", create_constraint=True
)
ENTRY_KIND = sa.Enum(
    "STOCK_IN", "STOCK_OUT", "SALE", name="entry_kind_enum", create_constraint=True
)


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("sku", sa.String(64), nullable=True, unique=True),
        sa.Column("barcode", sa.String(64), nullable=True),
        sa.Column("unit_type", UNIT_TYPE, nullable=False),
        sa.Column("price_per_unit", sa.Numeric(19, 4), nullable=False),
        sa.Column("quantity", sa.Numeric(19, 4), nullable=False),
        sa.Column("weight", sa.Numeric(19, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        sa.CheckConstraint("weight >= 0", name="ck_products_weight_non_negative"),
        sa.CheckConstraint("price_per_unit >= 0", name="ck_products_price_non_negative"),
    )
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_barcode", "products", ["barcode"])

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "product_id", sa.Integer(),
            sa.ForeignKey("products.id"), nullable=False,
        ),
        sa.Column("kind", ENTRY_KIND, nullable=False),
        sa.Column("quantity_delta", sa.Numeric(19, 4), nullable=False),
        sa.Column("weight_delta", sa.Numeric(19, 4), nullable=False),
        sa.Column("unit_price", sa.Numeric(19, 4), nullable=True),
        sa.Column("total_amount", sa.Numeric(19, 4), nullable=True),
        sa.Column("note", sa.String(500), nullable=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quantity_delta >= 0", name="ck_ledger_quantity_delta_magnitude"),
        sa.CheckConstraint("weight_delta >= 0", name="ck_ledger_weight_delta_magnitude"),
    )
    op.create_index("ix_ledger_entries_kind", "ledger_entries", ["kind"])
    op.create_index("ix_ledger_entries_created_at", "ledger_entries", ["created_at"])
    op.create_index(
        "ix_ledger_entries_product_created",
        "ledger_entries",
        ["product_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_table("ledger_entries")
    op.drop_table("products")
    UNIT_TYPE.drop(op.get_bind(), checkfirst=True)
    ENTRY_KIND.drop(op.get_bind(), checkfirst=True)
