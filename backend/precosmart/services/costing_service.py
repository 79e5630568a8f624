"""
Custo derivado e margem dos produtos.

`total_cost` e `margin` de um produto são projeções das suas linhas de insumo
e do preço de venda. Só `recompute_product` escreve esses campos; toda
operação que altera linhas passa por `_line_mutation`, que grava a linha e só
depois recalcula o produto.
"""
import functools
import logging
from decimal import Decimal
from typing import Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from precosmart.core.errors import NotFoundError, RecomputeError, ValidationError
from precosmart.core.units import UnitConversionError, convert_unit, price_basis_quantity
from precosmart.models.item import Item
from precosmart.models.price_history import ItemPriceHistory, ProductPriceHistory
from precosmart.models.product import Product, ProductItemLine


logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
COST_PRECISION = Decimal("0.0001")
ZERO = Decimal("0")

Number = Union[int, float, Decimal, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value))


def effective_price(item: Item) -> Decimal:
    """Preço com desconto quando existir, senão o preço cheio."""
    if item.discounted_price is not None:
        return to_decimal(item.discounted_price)
    return to_decimal(item.price)


def calculate_line_cost(item: Item, quantity: Number, unit: Optional[str] = None) -> Decimal:
    """
    Custo de uma linha: (preço efetivo / base do preço) × quantidade.

    A quantidade é convertida para a unidade do insumo antes do cálculo.

    Raises:
        ValidationError: unidade incompatível com a do insumo
    """
    try:
        amount = convert_unit(quantity, unit or item.unit, item.unit)
    except UnitConversionError as e:
        raise ValidationError(str(e))
    cost = effective_price(item) / price_basis_quantity(item.unit) * amount
    return cost.quantize(COST_PRECISION)


def calculate_margin(sale_price: Optional[Number], total_cost: Optional[Number]) -> Decimal:
    sale = to_decimal(sale_price)
    cost = to_decimal(total_cost)
    if cost > 0 and sale > 0:
        return ((sale - cost) / sale * Decimal("100")).quantize(CENT)
    return ZERO.quantize(CENT)


def _get_product(db: Session, organization_id: int, product_id: int) -> Product:
    product = db.query(Product).filter(
        Product.id == product_id,
        Product.organization_id == organization_id,
    ).first()
    if not product:
        raise NotFoundError(f"Produto não encontrado: {product_id}")
    return product


def _get_item(db: Session, organization_id: int, item_id: int) -> Item:
    item = db.query(Item).filter(
        Item.id == item_id,
        Item.organization_id == organization_id,
    ).first()
    if not item:
        raise NotFoundError(f"Insumo não encontrado: {item_id}")
    return item


def _get_line(db: Session, organization_id: int, line_id: int) -> ProductItemLine:
    line = (
        db.query(ProductItemLine)
        .join(Product, Product.id == ProductItemLine.product_id)
        .filter(ProductItemLine.id == line_id, Product.organization_id == organization_id)
        .first()
    )
    if not line:
        raise NotFoundError(f"Linha não encontrada: {line_id}")
    return line


def _validate_quantity(quantity: Number) -> Decimal:
    amount = to_decimal(quantity)
    if amount <= 0:
        raise ValidationError("A quantidade deve ser maior que zero")
    return amount


def recompute_product(db: Session, organization_id: int, product_id: int) -> Product:
    """Soma o custo das linhas atuais e recalcula a margem do produto."""
    product = _get_product(db, organization_id, product_id)
    lines = db.query(ProductItemLine).filter(ProductItemLine.product_id == product.id).all()
    total = sum((to_decimal(line.cost) for line in lines), ZERO)

    product.total_cost = total
    product.margin = calculate_margin(product.sale_price, total)
    db.commit()
    db.refresh(product)
    logger.info(
        "recomputed product=%s lines=%s total_cost=%s margin=%s",
        product.id, len(lines), product.total_cost, product.margin,
    )
    return product


def _line_mutation(func):
    """
    Wrap an operation returning (result, product_id). The mutation commits
    first; the parent product is recomputed only afterwards.
    """
    @functools.wraps(func)
    def wrapper(db: Session, organization_id: int, *args, **kwargs):
        result, product_id = func(db, organization_id, *args, **kwargs)
        try:
            recompute_product(db, organization_id, product_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("recompute failed for product=%s after %s", product_id, func.__name__)
            raise RecomputeError(product_id)
        return result
    return wrapper


@_line_mutation
def add_item_line(
    db: Session,
    organization_id: int,
    product_id: int,
    item_id: int,
    quantity: Number,
    unit: Optional[str] = None,
) -> Tuple[ProductItemLine, int]:
    amount = _validate_quantity(quantity)
    product = _get_product(db, organization_id, product_id)
    item = _get_item(db, organization_id, item_id)
    if not item.active:
        raise ValidationError(f"Insumo inativo: {item.name}")

    line_unit = unit or item.unit
    line = ProductItemLine(
        product_id=product.id,
        item_id=item.id,
        quantity=amount,
        unit=line_unit,
        cost=calculate_line_cost(item, amount, line_unit),
    )
    db.add(line)
    db.commit()
    db.refresh(line)
    logger.info("added line=%s product=%s item=%s cost=%s", line.id, product.id, item.id, line.cost)
    return line, product.id


@_line_mutation
def update_item_line(
    db: Session,
    organization_id: int,
    line_id: int,
    new_quantity: Number,
) -> Tuple[ProductItemLine, int]:
    amount = _validate_quantity(new_quantity)
    line = _get_line(db, organization_id, line_id)

    line.quantity = amount
    line.cost = calculate_line_cost(line.item, amount, line.unit)
    db.commit()
    db.refresh(line)
    logger.info("updated line=%s quantity=%s cost=%s", line.id, line.quantity, line.cost)
    return line, line.product_id


@_line_mutation
def remove_item_line(db: Session, organization_id: int, line_id: int) -> Tuple[int, int]:
    line = _get_line(db, organization_id, line_id)
    product_id = line.product_id
    db.delete(line)
    db.commit()
    logger.info("removed line=%s from product=%s", line_id, product_id)
    return product_id, product_id


def update_sale_price(db: Session, organization_id: int, product_id: int, new_sale_price: Number) -> Product:
    """
    Troca o preço de venda registrando o histórico.

    Valor igual ao atual não gera histórico nem altera custo e margem.
    """
    new_price = to_decimal(new_sale_price).quantize(CENT)
    if new_price < 0:
        raise ValidationError("O preço de venda não pode ser negativo")

    product = _get_product(db, organization_id, product_id)
    old_price = to_decimal(product.sale_price).quantize(CENT)
    if old_price == new_price:
        return product

    db.add(ProductPriceHistory(product_id=product.id, old_price=old_price, new_price=new_price))
    product.sale_price = new_price
    db.commit()
    logger.info("product=%s sale_price %s -> %s", product.id, old_price, new_price)
    return recompute_product(db, organization_id, product.id)


def update_item_price(
    db: Session,
    organization_id: int,
    item_id: int,
    new_price: Number,
    commit: bool = True,
) -> Item:
    """
    Troca o preço do insumo registrando o histórico.

    O preço com desconto atual precisa continuar menor que o novo preço.
    """
    price = to_decimal(new_price).quantize(CENT)
    if price <= 0:
        raise ValidationError("O preço deve ser maior que zero")

    item = _get_item(db, organization_id, item_id)
    if item.discounted_price is not None and to_decimal(item.discounted_price) >= price:
        raise ValidationError("O preço com desconto deve ser menor que o preço original")

    old_price = to_decimal(item.price).quantize(CENT)
    if old_price != price:
        db.add(ItemPriceHistory(item_id=item.id, old_price=old_price, new_price=price))
        item.price = price
        logger.info("item=%s price %s -> %s", item.id, old_price, price)
    if commit:
        db.commit()
        db.refresh(item)
    return item
