from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from precosmart.core.config import settings
from precosmart.core.database import get_db
from precosmart.core.security import decode_token
from precosmart.core.roles import ADMIN_ROLES
from precosmart.models.membership import Membership
from precosmart.models.organization import Organization
from precosmart.models.user import User
from precosmart.services.organization_service import get_membership


def get_optional_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None),
) -> Optional[User]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    payload = decode_token(authorization.split(" ", 1)[1], expected_type="access")
    if not payload:
        return None
    user = db.query(User).filter(User.id == int(payload["sub"]), User.active == True).first()  # noqa: E712
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def get_organization_id(request: Request) -> Optional[int]:
    raw = request.headers.get(settings.organization_header)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid organization header")


def get_active_membership(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    organization_id: Optional[int] = Depends(get_organization_id),
) -> Membership:
    if organization_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing organization header")
    membership = get_membership(db, user.id, organization_id)
    if not membership:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not a member of this organization")
    return membership


def get_active_organization(membership: Membership = Depends(get_active_membership)) -> Organization:
    return membership.organization


def require_admin(membership: Membership = Depends(get_active_membership)) -> Membership:
    if membership.role not in {r.value for r in ADMIN_ROLES}:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
    return membership
