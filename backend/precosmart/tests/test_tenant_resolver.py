import pytest

from precosmart.core.tenant_resolver import (
    CREATE_ORGANIZATION_ROUTE,
    SELECT_ORGANIZATION_ROUTE,
    SIGN_IN_ROUTE,
    Action,
    AuthStatus,
    MembershipStatus,
    ResolverState,
    reconcile_active_organization,
    resolve,
)


def state(auth=AuthStatus.signed_in, membership=MembershipStatus.loaded, orgs=(), active=None, route="/produtos"):
    return ResolverState(
        auth_status=auth,
        membership_status=membership,
        organization_ids=frozenset(orgs),
        active_organization_id=active,
        route=route,
    )


def test_auth_loading_shows_placeholder():
    decision = resolve(state(auth=AuthStatus.loading, membership=MembershipStatus.idle))
    assert decision.action == Action.loading
    assert decision.loading_only is True
    assert decision.route is None


@pytest.mark.parametrize("membership", [MembershipStatus.idle, MembershipStatus.loading])
def test_signed_in_waits_for_memberships(membership):
    decision = resolve(state(membership=membership, orgs=[1], active=1))
    assert decision.action == Action.loading


def test_signed_out_redirects_to_login():
    decision = resolve(state(auth=AuthStatus.signed_out, membership=MembershipStatus.idle))
    assert decision.action == Action.redirect
    assert decision.route == SIGN_IN_ROUTE


@pytest.mark.parametrize("route", ["/auth/login", "/auth/cadastro", "/auth/recuperar-senha", "/auth/nova-senha"])
def test_signed_out_may_see_public_auth_routes(route):
    decision = resolve(state(auth=AuthStatus.signed_out, membership=MembershipStatus.idle, route=route))
    assert decision.action == Action.render
    assert decision.route == route


def test_no_organizations_redirects_to_create():
    decision = resolve(state(orgs=()))
    assert decision.action == Action.redirect
    assert decision.route == CREATE_ORGANIZATION_ROUTE


def test_no_organizations_renders_create_page():
    decision = resolve(state(orgs=(), route=CREATE_ORGANIZATION_ROUTE))
    assert decision.action == Action.render


@pytest.mark.parametrize("orgs", [(1,), (1, 2), (1, 2, 3)])
def test_missing_selection_redirects_to_select(orgs):
    decision = resolve(state(orgs=orgs, active=None))
    assert decision.action == Action.redirect
    assert decision.route == SELECT_ORGANIZATION_ROUTE


def test_active_id_outside_memberships_counts_as_unselected():
    decision = resolve(state(orgs=(1, 2), active=9))
    assert decision.route == SELECT_ORGANIZATION_ROUTE


@pytest.mark.parametrize("route", [SELECT_ORGANIZATION_ROUTE, CREATE_ORGANIZATION_ROUTE])
def test_setup_routes_render_without_selection(route):
    decision = resolve(state(orgs=(1, 2), active=None, route=route))
    assert decision.action == Action.render


def test_ready_renders_requested_route():
    decision = resolve(state(orgs=(1, 2), active=2, route="/produtos?page=2"))
    assert decision.action == Action.render
    assert decision.route == "/produtos?page=2"


def test_membership_error_offers_retry_instead_of_redirect():
    decision = resolve(state(membership=MembershipStatus.error, orgs=(1,), active=None))
    assert decision.action == Action.error
    assert decision.retry is True
    assert decision.route == "/produtos"


@pytest.mark.parametrize(
    "memberships, cached, expected",
    [
        ({1}, None, 1),
        ({1}, 7, 1),
        ({1, 2}, 2, 2),
        ({1, 2}, 7, None),
        ({1, 2}, None, None),
        (set(), 7, None),
        (set(), None, None),
    ],
)
def test_reconcile_active_organization(memberships, cached, expected):
    assert reconcile_active_organization(memberships, cached) == expected
