"""
Cadastro de insumos de uma empresa.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from precosmart.core.errors import NotFoundError, ValidationError
from precosmart.core.units import units_compatible
from precosmart.models.category import ItemCategory
from precosmart.models.item import Item
from precosmart.models.product import ProductItemLine
from precosmart.models.price_history import ItemPriceHistory
from precosmart.services import costing_service
from precosmart.services.category_service import ensure_category


logger = logging.getLogger(__name__)


def validate_item_prices(price: Optional[Decimal], discounted_price: Optional[Decimal]) -> None:
    """
    Raises:
        ValidationError: preço não positivo, ou desconto fora de (0, preço)
    """
    if price is None or price <= 0:
        raise ValidationError("O preço deve ser maior que zero")
    if discounted_price is not None:
        if discounted_price <= 0:
            raise ValidationError("O preço com desconto deve ser maior que zero")
        if discounted_price >= price:
            raise ValidationError("O preço com desconto deve ser menor que o preço original")


def list_items(db: Session, organization_id: int, include_inactive: bool = False) -> List[Item]:
    query = (
        db.query(Item)
        .options(joinedload(Item.category))
        .filter(Item.organization_id == organization_id)
    )
    if not include_inactive:
        query = query.filter(Item.active == True)  # noqa: E712
    return query.order_by(Item.name).all()


def get_item(db: Session, organization_id: int, item_id: int) -> Item:
    item = (
        db.query(Item)
        .options(joinedload(Item.category))
        .filter(Item.id == item_id, Item.organization_id == organization_id)
        .first()
    )
    if not item:
        raise NotFoundError(f"Insumo não encontrado: {item_id}")
    return item


def create_item(db: Session, organization_id: int, data) -> Item:
    validate_item_prices(data.price, data.discounted_price)
    item = Item(
        name=data.name.strip(),
        description=data.description,
        category_id=ensure_category(db, ItemCategory, organization_id, data.category_id),
        organization_id=organization_id,
        unit=data.unit.value,
        price=data.price,
        discounted_price=data.discounted_price,
        active=data.active,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("created item=%s organization=%s", item.id, organization_id)
    return item


def update_item(db: Session, organization_id: int, item_id: int, data) -> Item:
    validate_item_prices(data.price, data.discounted_price)
    item = get_item(db, organization_id, item_id)
    if not units_compatible(item.unit, data.unit.value):
        in_use = db.query(ProductItemLine.id).filter(ProductItemLine.item_id == item.id).first()
        if in_use:
            raise ValidationError(
                f"Insumo usado em produtos: não é possível trocar a unidade de {item.unit} para {data.unit.value}"
            )

    item.name = data.name.strip()
    item.description = data.description
    item.category_id = ensure_category(db, ItemCategory, organization_id, data.category_id)
    item.unit = data.unit.value
    item.discounted_price = data.discounted_price
    item.active = data.active
    costing_service.update_item_price(db, organization_id, item.id, data.price, commit=False)

    db.commit()
    db.refresh(item)
    return item


def deactivate_item(db: Session, organization_id: int, item_id: int) -> Item:
    item = get_item(db, organization_id, item_id)
    item.active = False
    db.commit()
    db.refresh(item)
    logger.info("deactivated item=%s", item.id)
    return item


def price_history(db: Session, organization_id: int, item_id: int) -> List[ItemPriceHistory]:
    item = get_item(db, organization_id, item_id)
    return (
        db.query(ItemPriceHistory)
        .filter(ItemPriceHistory.item_id == item.id)
        .order_by(ItemPriceHistory.changed_at.desc(), ItemPriceHistory.id.desc())
        .all()
    )
