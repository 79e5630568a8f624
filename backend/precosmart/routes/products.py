from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from precosmart.core.database import get_db
from precosmart.core.deps import get_active_organization
from precosmart.models.organization import Organization
from precosmart.routes.errors import SERVICE_ERRORS, to_http_error
from precosmart.routes.schemas import (
    LineIn,
    LineOut,
    LineUpdate,
    PriceHistoryOut,
    ProductBase,
    ProductDetailOut,
    ProductOut,
)
from precosmart.services import costing_service, product_service


router = APIRouter()


@router.get("/", response_model=List[ProductOut])
def list_products(
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
    include_inactive: bool = Query(False),
):
    return product_service.list_products(db, organization.id, include_inactive=include_inactive)


@router.post("/", response_model=ProductDetailOut)
def create_product(
    data: ProductBase,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        product = product_service.create_product(db, organization.id, data)
        return product_service.get_product(db, organization.id, product.id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.get("/{product_id}", response_model=ProductDetailOut)
def get_product(product_id: int, db: Session = Depends(get_db), organization: Organization = Depends(get_active_organization)):
    try:
        return product_service.get_product(db, organization.id, product_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.put("/{product_id}", response_model=ProductDetailOut)
def update_product(
    product_id: int,
    data: ProductBase,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        return product_service.update_product(db, organization.id, product_id, data)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.delete("/{product_id}", response_model=ProductOut)
def delete_product(product_id: int, db: Session = Depends(get_db), organization: Organization = Depends(get_active_organization)):
    try:
        return product_service.deactivate_product(db, organization.id, product_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.get("/{product_id}/price-history", response_model=List[PriceHistoryOut])
def get_price_history(
    product_id: int,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        return product_service.price_history(db, organization.id, product_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.post("/{product_id}/lines", response_model=LineOut)
def add_line(
    product_id: int,
    data: LineIn,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        return costing_service.add_item_line(
            db,
            organization.id,
            product_id,
            data.item_id,
            data.quantity,
            data.unit.value if data.unit else None,
        )
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.put("/{product_id}/lines/{line_id}", response_model=LineOut)
def update_line(
    product_id: int,
    line_id: int,
    data: LineUpdate,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        product_service.get_line(db, organization.id, product_id, line_id)
        return costing_service.update_item_line(db, organization.id, line_id, data.quantity)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.delete("/{product_id}/lines/{line_id}", response_model=ProductDetailOut)
def remove_line(
    product_id: int,
    line_id: int,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        product_service.get_line(db, organization.id, product_id, line_id)
        costing_service.remove_item_line(db, organization.id, line_id)
        return product_service.get_product(db, organization.id, product_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)
