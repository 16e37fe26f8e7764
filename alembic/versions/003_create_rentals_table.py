"""create rentals table

Revision ID: 003
Revises: 002
Create Date: 2026-10-05 12:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "rentals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("renter_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "ACTIVE", "COMPLETED", "CANCELLED", name="rental_status"),
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["renter_id"], ["users.id"]),
        sa.CheckConstraint("total_price >= 0", name="ck_rentals_total_price_non_negative"),
    )
    op.create_index("ix_rentals_id", "rentals", ["id"], unique=False)
    op.create_index("ix_rentals_product_id", "rentals", ["product_id"], unique=False)
    op.create_index("ix_rentals_owner_id", "rentals", ["owner_id"], unique=False)
    op.create_index("ix_rentals_renter_id", "rentals", ["renter_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_rentals_renter_id", table_name="rentals")
    op.drop_index("ix_rentals_owner_id", table_name="rentals")
    op.drop_index("ix_rentals_product_id", table_name="rentals")
    op.drop_index("ix_rentals_id", table_name="rentals")
    op.drop_table("rentals")

    sa.Enum(name="rental_status").drop(op.get_bind(), checkfirst=True)
