from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from precosmart.core.database import get_db
from precosmart.core.deps import get_current_user, require_admin
from precosmart.core.roles import Role
from precosmart.models.membership import Membership
from precosmart.models.user import User
from precosmart.routes.errors import SERVICE_ERRORS, to_http_error
from precosmart.services import organization_service


router = APIRouter()


class OrganizationCreate(BaseModel):
    name: str
    tax_id: Optional[str] = None


class OrganizationOut(BaseModel):
    id: int
    name: str
    tax_id: Optional[str] = None
    role: str


class MemberCreate(BaseModel):
    email: EmailStr
    role: Role = Role.member


class MemberOut(BaseModel):
    user_id: int
    organization_id: int
    role: str

    class Config:
        from_attributes = True


def _organization_out(membership: Membership) -> OrganizationOut:
    return OrganizationOut(
        id=membership.organization.id,
        name=membership.organization.name,
        tax_id=membership.organization.tax_id,
        role=membership.role,
    )


@router.get("/", response_model=List[OrganizationOut])
def list_my_organizations(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [_organization_out(m) for m in organization_service.list_user_organizations(db, user.id)]


@router.post("/", response_model=OrganizationOut)
def create_organization(data: OrganizationCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        organization = organization_service.create_organization(db, user, data.name, data.tax_id)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)
    return OrganizationOut(id=organization.id, name=organization.name, tax_id=organization.tax_id, role=Role.admin.value)


@router.post("/{organization_id}/select", response_model=OrganizationOut)
def select_organization(organization_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Confirm the user may act inside the organization before the client caches it."""
    membership = organization_service.get_membership(db, user.id, organization_id)
    if not membership:
        raise HTTPException(status_code=403, detail="Not a member of this organization")
    return _organization_out(membership)


@router.post("/members", response_model=MemberOut)
def add_member(
    data: MemberCreate,
    db: Session = Depends(get_db),
    membership: Membership = Depends(require_admin),
):
    try:
        return organization_service.add_member(db, membership.organization_id, data.email, data.role)
    except SERVICE_ERRORS as e:
        raise to_http_error(db, e)
