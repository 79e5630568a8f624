from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from precosmart.core.database import get_db
from precosmart.core.deps import get_optional_user, get_organization_id
from precosmart.core.selection_store import ACTIVE_ORGANIZATION_KEY, MemorySelectionStore
from precosmart.core.tenant_resolver import DEFAULT_ROUTE
from precosmart.models.user import User
from precosmart.services.organization_service import list_user_organizations
from precosmart.services.tenant_session import OrganizationSummary, TenantSession


router = APIRouter()


class OrganizationSummaryOut(BaseModel):
    id: int
    name: str
    tax_id: Optional[str] = None


class ResolveResponse(BaseModel):
    action: str
    route: Optional[str] = None
    loading_only: bool = False
    retry: bool = False
    active_organization: Optional[OrganizationSummaryOut] = None
    organizations: List[OrganizationSummaryOut] = []


@router.get("/resolve", response_model=ResolveResponse)
def resolve_route(
    route: str = Query(DEFAULT_ROUTE, description="Route the client wants to show"),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
    cached_organization_id: Optional[int] = Depends(get_organization_id),
):
    """
    Tell the client whether to render `route` or where to go instead.
    The organization header is treated as the client's cached selection and
    is checked against live memberships.
    """
    store = MemorySelectionStore()
    if cached_organization_id is not None:
        store.set(ACTIVE_ORGANIZATION_KEY, cached_organization_id)

    tenant = TenantSession(store)
    tenant.hydrate()
    if user is None:
        tenant.signed_out()
    else:
        tenant.signed_in()
        try:
            memberships = list_user_organizations(db, user.id)
        except SQLAlchemyError as e:
            db.rollback()
            tenant.memberships_failed(str(e))
        else:
            tenant.memberships_loaded(
                OrganizationSummary(m.organization.id, m.organization.name, m.organization.tax_id)
                for m in memberships
            )

    decision = tenant.decide(route)
    active = tenant.active_organization
    return ResolveResponse(
        action=decision.action.value,
        route=decision.route,
        loading_only=decision.loading_only,
        retry=decision.retry,
        active_organization=OrganizationSummaryOut(**asdict(active)) if active else None,
        organizations=[OrganizationSummaryOut(**asdict(o)) for o in tenant.organizations],
    )
