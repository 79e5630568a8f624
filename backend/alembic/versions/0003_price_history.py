from alembic import op
import sqlalchemy as sa


revision = "0003_price_history"
down_revision = "0002_items_products"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "item_price_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("old_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("new_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_item_price_history_item_id", "item_price_history", ["item_id"])

    op.create_table(
        "product_price_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("old_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("new_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_product_price_history_product_id", "product_price_history", ["product_id"])


def downgrade() -> None:
    op.drop_table("product_price_history")
    op.drop_table("item_price_history")
