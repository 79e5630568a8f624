from typing import List, Optional, Type, Union

from sqlalchemy.orm import Session

from precosmart.core.errors import NotFoundError, ValidationError
from precosmart.models.category import ItemCategory, ProductCategory

CategoryModel = Union[Type[ItemCategory], Type[ProductCategory]]


def _normalize_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("O nome da categoria é obrigatório")
    return cleaned


def list_categories(db: Session, model: CategoryModel, organization_id: int) -> List:
    return db.query(model).filter(model.organization_id == organization_id).order_by(model.name).all()


def get_category(db: Session, model: CategoryModel, organization_id: int, category_id: int):
    category = db.query(model).filter(
        model.id == category_id,
        model.organization_id == organization_id,
    ).first()
    if not category:
        raise NotFoundError(f"Categoria não encontrada: {category_id}")
    return category


def create_category(db: Session, model: CategoryModel, organization_id: int, name: str, description: Optional[str] = None):
    name = _normalize_name(name)
    if db.query(model).filter(model.organization_id == organization_id, model.name == name).first():
        raise ValidationError(f"Categoria já existe: {name}")
    category = model(name=name, description=description, organization_id=organization_id)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(
    db: Session,
    model: CategoryModel,
    organization_id: int,
    category_id: int,
    name: str,
    description: Optional[str] = None,
):
    category = get_category(db, model, organization_id, category_id)
    name = _normalize_name(name)
    clash = db.query(model).filter(
        model.organization_id == organization_id,
        model.name == name,
        model.id != category_id,
    ).first()
    if clash:
        raise ValidationError(f"Categoria já existe: {name}")
    category.name = name
    category.description = description
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, model: CategoryModel, organization_id: int, category_id: int) -> None:
    category = get_category(db, model, organization_id, category_id)
    db.delete(category)
    db.commit()


def ensure_category(db: Session, model: CategoryModel, organization_id: int, category_id: Optional[int]) -> Optional[int]:
    """Check that a category referenced by an item or product belongs to the organization."""
    if category_id is None:
        return None
    return get_category(db, model, organization_id, category_id).id
