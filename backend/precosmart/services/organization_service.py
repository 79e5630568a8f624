from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from precosmart.core.errors import NotFoundError, ValidationError
from precosmart.core.roles import Role
from precosmart.models.membership import Membership
from precosmart.models.organization import Organization
from precosmart.models.user import User


logger = logging.getLogger(__name__)


def _normalize_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def create_organization(db: Session, user: User, name: str, tax_id: Optional[str] = None) -> Organization:
    """
    Create an organization and make its creator an admin member.
    Both rows are committed together.
    """
    normalized_name = _normalize_text(name)
    if not normalized_name:
        raise ValidationError("O nome da empresa é obrigatório")

    organization = Organization(name=normalized_name, tax_id=_normalize_text(tax_id), active=True)
    db.add(organization)
    db.flush()
    db.add(Membership(user_id=user.id, organization_id=organization.id, role=Role.admin.value))
    db.commit()
    db.refresh(organization)
    logger.info("user=%s created organization=%s", user.id, organization.id)
    return organization


def list_user_organizations(db: Session, user_id: int) -> List[Membership]:
    return (
        db.query(Membership)
        .options(joinedload(Membership.organization))
        .join(Organization, Organization.id == Membership.organization_id)
        .filter(Membership.user_id == user_id, Organization.active == True)  # noqa: E712
        .order_by(Organization.name)
        .all()
    )


def get_membership(db: Session, user_id: int, organization_id: int) -> Optional[Membership]:
    return (
        db.query(Membership)
        .join(Organization, Organization.id == Membership.organization_id)
        .filter(
            Membership.user_id == user_id,
            Membership.organization_id == organization_id,
            Organization.active == True,  # noqa: E712
        )
        .first()
    )


def add_member(db: Session, organization_id: int, email: str, role: Role) -> Membership:
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user:
        raise NotFoundError(f"Usuário não encontrado: {email}")
    if get_membership(db, user.id, organization_id):
        raise ValidationError("Usuário já pertence a esta empresa")
    membership = Membership(user_id=user.id, organization_id=organization_id, role=role.value)
    db.add(membership)
    db.commit()
    db.refresh(membership)
    logger.info("user=%s joined organization=%s as %s", user.id, organization_id, role.value)
    return membership
