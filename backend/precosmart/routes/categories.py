from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from precosmart.core.database import get_db
from precosmart.core.deps import get_active_organization
from precosmart.models.category import ItemCategory, ProductCategory
from precosmart.models.organization import Organization
from precosmart.routes.errors import SERVICE_ERRORS, to_http_error
from precosmart.routes.schemas import CategoryIn, CategoryOut
from precosmart.services import category_service


def build_category_router(model) -> APIRouter:
    """Same CRUD for item and product categories."""
    router = APIRouter()

    @router.get("/", response_model=List[CategoryOut])
    def list_categories(db: Session = Depends(get_db), organization: Organization = Depends(get_active_organization)):
        return category_service.list_categories(db, model, organization.id)

    @router.post("/", response_model=CategoryOut)
    def create_category(
        data: CategoryIn,
        db: Session = Depends(get_db),
        organization: Organization = Depends(get_active_organization),
    ):
        try:
            return category_service.create_category(db, model, organization.id, data.name, data.description)
        except SERVICE_ERRORS as e:
            raise to_http_error(db, e)

    @router.put("/{category_id}", response_model=CategoryOut)
    def update_category(
        category_id: int,
        data: CategoryIn,
        db: Session = Depends(get_db),
        organization: Organization = Depends(get_active_organization),
    ):
        try:
            return category_service.update_category(
                db, model, organization.id, category_id, data.name, data.description
            )
        except SERVICE_ERRORS as e:
            raise to_http_error(db, e)

    @router.delete("/{category_id}")
    def delete_category(
        category_id: int,
        db: Session = Depends(get_db),
        organization: Organization = Depends(get_active_organization),
    ):
        try:
            category_service.delete_category(db, model, organization.id, category_id)
        except SERVICE_ERRORS as e:
            raise to_http_error(db, e)
        return {"ok": True}

    return router


item_categories_router = build_category_router(ItemCategory)
product_categories_router = build_category_router(ProductCategory)
