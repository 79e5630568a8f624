import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from precosmart.core.database import get_db
from precosmart.core.deps import get_active_organization
from precosmart.models.organization import Organization
from precosmart.routes.errors import SERVICE_ERRORS, to_http_error
from precosmart.routes.schemas import ItemBase, ItemOut, PriceHistoryOut
from precosmart.services import item_service


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[ItemOut])
def list_items(
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
    include_inactive: bool = Query(False),
):
    logger.info("list_items organization=%s include_inactive=%s", organization.id, include_inactive)
    return item_service.list_items(db, organization.id, include_inactive=include_inactive)


@router.post("/", response_model=ItemOut)
def create_item(data: ItemBase, db: Session = Depends(get_db), organization: Organization = Depends(get_active_organization)):
    try:
        return item_service.create_item(db, organization.id, data)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: int, db: Session = Depends(get_db), organization: Organization = Depends(get_active_organization)):
    try:
        return item_service.get_item(db, organization.id, item_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.put("/{item_id}", response_model=ItemOut)
def update_item(
    item_id: int,
    data: ItemBase,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        return item_service.update_item(db, organization.id, item_id, data)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.delete("/{item_id}", response_model=ItemOut)
def delete_item(item_id: int, db: Session = Depends(get_db), organization: Organization = Depends(get_active_organization)):
    """Soft delete: the item stays referenced by existing product lines."""
    try:
        return item_service.deactivate_item(db, organization.id, item_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)


@router.get("/{item_id}/price-history", response_model=List[PriceHistoryOut])
def get_price_history(
    item_id: int,
    db: Session = Depends(get_db),
    organization: Organization = Depends(get_active_organization),
):
    try:
        return item_service.price_history(db, organization.id, item_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)
