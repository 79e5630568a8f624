"""
Cadastro de produtos. Custo total e margem nunca vêm do cliente:
são mantidos por costing_service.
"""
import logging
from typing import List

from sqlalchemy.orm import Session, joinedload

from precosmart.core.errors import NotFoundError, ValidationError
from precosmart.models.category import ProductCategory
from precosmart.models.price_history import ProductPriceHistory
from precosmart.models.product import Product, ProductItemLine
from precosmart.services import costing_service
from precosmart.services.category_service import ensure_category


logger = logging.getLogger(__name__)


def _validate_prices(data) -> None:
    if data.sale_price < 0:
        raise ValidationError("O preço de venda não pode ser negativo")
    if data.promotional_price is not None and data.promotional_price <= 0:
        raise ValidationError("O preço promocional deve ser maior que zero")


def list_products(db: Session, organization_id: int, include_inactive: bool = False) -> List[Product]:
    query = (
        db.query(Product)
        .options(joinedload(Product.category))
        .filter(Product.organization_id == organization_id)
    )
    if not include_inactive:
        query = query.filter(Product.active == True)  # noqa: E712
    return query.order_by(Product.name).all()


def get_product(db: Session, organization_id: int, product_id: int) -> Product:
    product = (
        db.query(Product)
        .options(
            joinedload(Product.category),
            joinedload(Product.lines).joinedload(ProductItemLine.item),
        )
        .filter(Product.id == product_id, Product.organization_id == organization_id)
        .first()
    )
    if not product:
        raise NotFoundError(f"Produto não encontrado: {product_id}")
    return product


def create_product(db: Session, organization_id: int, data) -> Product:
    _validate_prices(data)
    product = Product(
        name=data.name.strip(),
        description=data.description,
        category_id=ensure_category(db, ProductCategory, organization_id, data.category_id),
        organization_id=organization_id,
        sale_price=data.sale_price,
        promotional_price=data.promotional_price,
        total_cost=0,
        margin=0,
        active=data.active,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("created product=%s organization=%s", product.id, organization_id)
    return product


def update_product(db: Session, organization_id: int, product_id: int, data) -> Product:
    _validate_prices(data)
    product = get_product(db, organization_id, product_id)

    product.name = data.name.strip()
    product.description = data.description
    product.category_id = ensure_category(db, ProductCategory, organization_id, data.category_id)
    product.promotional_price = data.promotional_price
    product.active = data.active
    db.commit()

    costing_service.update_sale_price(db, organization_id, product.id, data.sale_price)
    return get_product(db, organization_id, product.id)


def deactivate_product(db: Session, organization_id: int, product_id: int) -> Product:
    product = get_product(db, organization_id, product_id)
    product.active = False
    db.commit()
    db.refresh(product)
    logger.info("deactivated product=%s", product.id)
    return product


def price_history(db: Session, organization_id: int, product_id: int) -> List[ProductPriceHistory]:
    product = get_product(db, organization_id, product_id)
    return (
        db.query(ProductPriceHistory)
        .filter(ProductPriceHistory.product_id == product.id)
        .order_by(ProductPriceHistory.changed_at.desc(), ProductPriceHistory.id.desc())
        .all()
    )


def get_line(db: Session, organization_id: int, product_id: int, line_id: int) -> ProductItemLine:
    product = get_product(db, organization_id, product_id)
    for line in product.lines:
        if line.id == line_id:
            return line
    raise NotFoundError(f"Linha não encontrada: {line_id}")
