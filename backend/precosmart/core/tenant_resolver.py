"""
Decides where a request for a route should go, given the authentication
state and the organizations the user belongs to.

`resolve` is a pure function: callers build a ResolverState, call it once per
state change and perform the navigation themselves.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional


SIGN_IN_ROUTE = "/auth/login"
CREATE_ORGANIZATION_ROUTE = "/empresas/nova"
SELECT_ORGANIZATION_ROUTE = "/empresas/selecionar"
DEFAULT_ROUTE = "/dashboard"

PUBLIC_AUTH_ROUTES = frozenset({
    SIGN_IN_ROUTE,
    "/auth/cadastro",
    "/auth/recuperar-senha",
    "/auth/nova-senha",
})
ORGANIZATION_SETUP_ROUTES = frozenset({
    CREATE_ORGANIZATION_ROUTE,
    SELECT_ORGANIZATION_ROUTE,
})


class AuthStatus(str, Enum):
    loading = "loading"
    signed_out = "signedOut"
    signed_in = "signedIn"


class MembershipStatus(str, Enum):
    idle = "idle"
    loading = "loading"
    loaded = "loaded"
    error = "error"


class Action(str, Enum):
    render = "render"
    redirect = "redirect"
    loading = "loading"
    error = "error"


@dataclass(frozen=True)
class ResolverState:
    auth_status: AuthStatus
    membership_status: MembershipStatus
    organization_ids: FrozenSet[int] = field(default_factory=frozenset)
    active_organization_id: Optional[int] = None
    route: str = DEFAULT_ROUTE


@dataclass(frozen=True)
class Decision:
    action: Action
    route: Optional[str] = None
    loading_only: bool = False
    retry: bool = False

    @classmethod
    def render(cls, route: str) -> "Decision":
        return cls(Action.render, route=route)

    @classmethod
    def redirect(cls, route: str) -> "Decision":
        return cls(Action.redirect, route=route)


def _path(route: str) -> str:
    return route.split("?", 1)[0].rstrip("/") or "/"


def is_public_auth_route(route: str) -> bool:
    return _path(route) in PUBLIC_AUTH_ROUTES


def is_organization_setup_route(route: str) -> bool:
    return _path(route) in ORGANIZATION_SETUP_ROUTES


def resolve(state: ResolverState) -> Decision:
    """First matching rule wins."""
    signed_in = state.auth_status == AuthStatus.signed_in

    if state.auth_status == AuthStatus.loading:
        return Decision(Action.loading, loading_only=True)
    # Memberships are only fetched for a signed-in user
    if signed_in and state.membership_status in (MembershipStatus.idle, MembershipStatus.loading):
        return Decision(Action.loading, loading_only=True)
    if signed_in and state.membership_status == MembershipStatus.error:
        return Decision(Action.error, route=state.route, retry=True)

    if state.auth_status == AuthStatus.signed_out:
        if is_public_auth_route(state.route):
            return Decision.render(state.route)
        return Decision.redirect(SIGN_IN_ROUTE)

    if not state.organization_ids:
        if is_organization_setup_route(state.route):
            return Decision.render(state.route)
        return Decision.redirect(CREATE_ORGANIZATION_ROUTE)

    # An id outside the membership set counts as no selection
    active = state.active_organization_id
    if active not in state.organization_ids:
        active = None
    if active is None and not is_organization_setup_route(state.route):
        return Decision.redirect(SELECT_ORGANIZATION_ROUTE)

    return Decision.render(state.route)


def reconcile_active_organization(
    organization_ids: Iterable[int],
    cached_id: Optional[int],
) -> Optional[int]:
    """
    Validate a cached active-organization id against live memberships.

    The cached id survives only when the user still belongs to it. Otherwise a
    single membership is selected automatically and anything else clears the
    selection.
    """
    ids = set(organization_ids)
    if cached_id is not None and cached_id in ids:
        return cached_id
    if len(ids) == 1:
        return next(iter(ids))
    return None
