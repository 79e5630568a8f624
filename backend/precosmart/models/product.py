from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Boolean, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from precosmart.models.organization import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(String(1000), nullable=True)
    category_id = Column(Integer, ForeignKey("product_categories.id", ondelete="SET NULL"), nullable=True, index=True)
    organization_id = Column(Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    sale_price = Column(Numeric(12, 2), nullable=False, default=0)
    promotional_price = Column(Numeric(12, 2), nullable=True)

    # Derived fields, written only by costing_service.recompute_product
    total_cost = Column(Numeric(14, 4), nullable=False, default=0)
    margin = Column(Numeric(7, 2), nullable=False, default=0)

    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    category = relationship("ProductCategory")
    organization = relationship("Organization")
    lines = relationship(
        "ProductItemLine",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductItemLine.id",
    )


class ProductItemLine(Base):
    __tablename__ = "product_item_lines"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    quantity = Column(Numeric(14, 4), nullable=False)
    unit = Column(String(20), nullable=False)
    cost = Column(Numeric(14, 4), nullable=False, default=0)

    product = relationship("Product", back_populates="lines")
    item = relationship("Item")
