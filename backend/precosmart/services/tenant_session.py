"""
Client-side tenant context: which organizations the signed-in user has and
which one is active.

The id read from the store at start is only a hint for the first paint.
Routing uses `resolved`, which is set after live memberships arrive and the
hint has been checked against them.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional

from precosmart.core.selection_store import (
    ACTIVE_ORGANIZATION_KEY,
    ORGANIZATIONS_KEY,
    SelectionStore,
)
from precosmart.core.tenant_resolver import (
    AuthStatus,
    Decision,
    MembershipStatus,
    ResolverState,
    reconcile_active_organization,
    resolve,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrganizationSummary:
    id: int
    name: str
    tax_id: Optional[str] = None


def _parse_cached_id(value) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class TenantSession:
    def __init__(self, store: SelectionStore):
        self.store = store
        self.auth_status = AuthStatus.loading
        self.membership_status = MembershipStatus.idle
        self.organizations: List[OrganizationSummary] = []
        self.cached_organizations: List[OrganizationSummary] = []
        self.cached_hint: Optional[int] = None
        self.resolved: Optional[int] = None
        self.error: Optional[str] = None
        self.closed = False

    def hydrate(self) -> None:
        """Read the cached selection before any live data is available."""
        self.cached_hint = _parse_cached_id(self.store.get(ACTIVE_ORGANIZATION_KEY))
        cached = self.store.get(ORGANIZATIONS_KEY) or []
        if not isinstance(cached, list):
            logger.warning("discarding malformed cached organization list %r", cached)
            cached = []
        summaries = []
        for entry in cached:
            try:
                summaries.append(OrganizationSummary(int(entry["id"]), entry["name"], entry.get("tax_id")))
            except (KeyError, TypeError, ValueError):
                logger.warning("discarding malformed cached organization entry %r", entry)
        self.cached_organizations = summaries

    def signed_in(self) -> None:
        self.auth_status = AuthStatus.signed_in
        self.membership_status = MembershipStatus.loading
        self.error = None

    def signed_out(self) -> None:
        self.auth_status = AuthStatus.signed_out
        self.membership_status = MembershipStatus.idle
        self.organizations = []
        self.cached_organizations = []
        self.cached_hint = None
        self.resolved = None
        self.store.delete(ORGANIZATIONS_KEY)
        self.store.delete(ACTIVE_ORGANIZATION_KEY)

    def memberships_loaded(self, organizations: Iterable[OrganizationSummary]) -> None:
        if self.closed:
            return
        self.organizations = list(organizations)
        self.membership_status = MembershipStatus.loaded
        self.error = None

        ids = [o.id for o in self.organizations]
        resolved = reconcile_active_organization(ids, self.cached_hint)
        if self.cached_hint is not None and resolved != self.cached_hint:
            logger.info("cached organization %s is not a current membership", self.cached_hint)
        self.resolved = resolved
        self.cached_hint = resolved
        self._persist()

    def memberships_failed(self, error: str) -> None:
        if self.closed:
            return
        self.membership_status = MembershipStatus.error
        self.error = error
        logger.error("loading memberships failed: %s", error)

    def retry(self) -> None:
        if self.auth_status == AuthStatus.signed_in:
            self.membership_status = MembershipStatus.loading
            self.error = None

    def select(self, organization_id: int) -> OrganizationSummary:
        if self.membership_status != MembershipStatus.loaded:
            raise ValueError("Memberships are not loaded yet")
        for organization in self.organizations:
            if organization.id == organization_id:
                self.resolved = organization_id
                self.cached_hint = organization_id
                self._persist()
                return organization
        raise ValueError(f"Not a member of organization {organization_id}")

    @property
    def active_organization(self) -> Optional[OrganizationSummary]:
        for organization in self.organizations:
            if organization.id == self.resolved:
                return organization
        return None

    def state(self, route: str) -> ResolverState:
        loaded = self.membership_status == MembershipStatus.loaded
        return ResolverState(
            auth_status=self.auth_status,
            membership_status=self.membership_status,
            organization_ids=frozenset(o.id for o in self.organizations) if loaded else frozenset(),
            active_organization_id=self.resolved if loaded else None,
            route=route,
        )

    def decide(self, route: str) -> Decision:
        return resolve(self.state(route))

    def close(self) -> None:
        self.closed = True

    def _persist(self) -> None:
        self.store.set(ORGANIZATIONS_KEY, [asdict(o) for o in self.organizations])
        if self.resolved is None:
            self.store.delete(ACTIVE_ORGANIZATION_KEY)
        else:
            self.store.set(ACTIVE_ORGANIZATION_KEY, self.resolved)
