from alembic import op
import sqlalchemy as sa


revision = "0002_items_products"
down_revision = "0001_organizations_users"
branch_labels = None
depends_on = None


def _category_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("organization_id", "name", name=f"uq_{name}_organization_name"),
    )
    op.create_index(f"ix_{name}_organization_id", name, ["organization_id"])


def upgrade() -> None:
    _category_table("item_categories")
    _category_table("product_categories")

    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("item_categories.id", ondelete="SET NULL"), nullable=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discounted_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("price > 0", name="ck_items_price_positive"),
        sa.CheckConstraint(
            "discounted_price IS NULL OR (discounted_price > 0 AND discounted_price < price)",
            name="ck_items_discounted_price",
        ),
    )
    op.create_index("ix_items_organization_id", "items", ["organization_id"])
    op.create_index("ix_items_name", "items", ["name"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("product_categories.id", ondelete="SET NULL"), nullable=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sale_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("promotional_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("total_cost", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("margin", sa.Numeric(7, 2), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_products_organization_id", "products", ["organization_id"])
    op.create_index("ix_products_name", "products", ["name"])

    op.create_table(
        "product_item_lines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("items.id"), nullable=False),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("cost", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.CheckConstraint("quantity > 0", name="ck_product_item_lines_quantity_positive"),
    )
    op.create_index("ix_product_item_lines_product_id", "product_item_lines", ["product_id"])
    op.create_index("ix_product_item_lines_item_id", "product_item_lines", ["item_id"])


def downgrade() -> None:
    op.drop_table("product_item_lines")
    op.drop_table("products")
    op.drop_table("items")
    op.drop_table("product_categories")
    op.drop_table("item_categories")
