"""create products table

Revision ID: 002
Revises: 001
Create Date: 2026-10-05 11:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("deposit", sa.Float(), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column(
            "condition",
            sa.Enum("NEW", "LIKE_NEW", "GOOD", "FAIR", "POOR", name="product_condition"),
            nullable=False,
        ),
        # Only the rental coordinator moves a product between these two states
        sa.Column(
            "status",
            sa.Enum("AVAILABLE", "RENTED", name="product_status"),
            nullable=False,
            server_default="AVAILABLE",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        sa.CheckConstraint("deposit >= 0", name="ck_products_deposit_non_negative"),
    )
    op.create_index("ix_products_id", "products", ["id"], unique=False)
    op.create_index("ix_products_owner_id", "products", ["owner_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_products_owner_id", table_name="products")
    op.drop_index("ix_products_id", table_name="products")
    op.drop_table("products")

    # PostgreSQL keeps enum types after the table is gone
    bind = op.get_bind()
    sa.Enum(name="product_status").drop(bind, checkfirst=True)
    sa.Enum(name="product_condition").drop(bind, checkfirst=True)
