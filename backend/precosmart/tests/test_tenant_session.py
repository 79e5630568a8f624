from precosmart.core.selection_store import (
    ACTIVE_ORGANIZATION_KEY,
    ORGANIZATIONS_KEY,
    JsonFileSelectionStore,
    MemorySelectionStore,
)
from precosmart.core.tenant_resolver import Action, MembershipStatus, SELECT_ORGANIZATION_ROUTE
from precosmart.services.tenant_session import OrganizationSummary, TenantSession


ACME = OrganizationSummary(1, "Acme")
BETA = OrganizationSummary(2, "Beta", "12.345.678/0001-90")


def start(store):
    session = TenantSession(store)
    session.hydrate()
    session.signed_in()
    return session


def test_single_organization_is_selected_and_persisted():
    store = MemorySelectionStore()
    session = start(store)
    session.memberships_loaded([ACME])

    assert session.resolved == 1
    assert store.get(ACTIVE_ORGANIZATION_KEY) == 1
    assert store.get(ORGANIZATIONS_KEY) == [{"id": 1, "name": "Acme", "tax_id": None}]
    decision = session.decide("/produtos")
    assert decision.action == Action.render
    assert decision.route == "/produtos"


def test_cached_hint_is_not_used_before_memberships_load():
    session = start(MemorySelectionStore({ACTIVE_ORGANIZATION_KEY: 2}))
    assert session.cached_hint == 2
    assert session.resolved is None
    assert session.decide("/produtos").action == Action.loading


def test_cached_selection_kept_when_still_a_member():
    session = start(MemorySelectionStore({ACTIVE_ORGANIZATION_KEY: "2"}))
    session.memberships_loaded([ACME, BETA])
    assert session.resolved == 2
    assert session.active_organization == BETA


def test_stale_cache_with_many_organizations_is_cleared():
    store = MemorySelectionStore({ACTIVE_ORGANIZATION_KEY: 99})
    session = start(store)
    session.memberships_loaded([ACME, BETA])

    assert session.resolved is None
    assert store.get(ACTIVE_ORGANIZATION_KEY) is None
    assert session.decide("/produtos").route == SELECT_ORGANIZATION_ROUTE


def test_stale_cache_with_one_organization_auto_selects():
    store = MemorySelectionStore({ACTIVE_ORGANIZATION_KEY: 99})
    session = start(store)
    session.memberships_loaded([BETA])
    assert session.resolved == 2
    assert store.get(ACTIVE_ORGANIZATION_KEY) == 2


def test_explicit_selection_is_persisted():
    store = MemorySelectionStore()
    session = start(store)
    session.memberships_loaded([ACME, BETA])
    session.select(2)
    assert store.get(ACTIVE_ORGANIZATION_KEY) == 2
    assert session.decide("/dashboard").action == Action.render


def test_selecting_foreign_organization_fails():
    session = start(MemorySelectionStore())
    session.memberships_loaded([ACME])
    try:
        session.select(5)
    except ValueError:
        pass
    else:
        raise AssertionError("select accepted a non-member organization")
    assert session.resolved == 1


def test_failure_surfaces_retry_without_default_selection():
    store = MemorySelectionStore({ACTIVE_ORGANIZATION_KEY: 1})
    session = start(store)
    session.memberships_failed("timeout")

    decision = session.decide("/produtos")
    assert decision.action == Action.error
    assert decision.retry is True
    assert session.resolved is None

    session.retry()
    assert session.membership_status == MembershipStatus.loading
    session.memberships_loaded([ACME])
    assert session.resolved == 1


def test_closed_session_ignores_late_results():
    session = start(MemorySelectionStore())
    session.close()
    session.memberships_loaded([ACME])
    assert session.membership_status == MembershipStatus.loading
    assert session.resolved is None


def test_sign_out_clears_cached_selection():
    store = MemorySelectionStore()
    session = start(store)
    session.memberships_loaded([ACME])
    session.signed_out()
    assert store.get(ACTIVE_ORGANIZATION_KEY) is None
    assert store.get(ORGANIZATIONS_KEY) is None
    assert session.decide("/produtos").route == "/auth/login"


def test_json_file_store_survives_restart(tmp_path):
    path = str(tmp_path / "state" / "selection.json")
    first = start(JsonFileSelectionStore(path))
    first.memberships_loaded([ACME, BETA])
    first.select(1)

    second = TenantSession(JsonFileSelectionStore(path))
    second.hydrate()
    assert second.cached_hint == 1
    assert second.cached_organizations == [ACME, BETA]


def test_json_file_store_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "selection.json"
    path.write_text("{not json")
    session = TenantSession(JsonFileSelectionStore(str(path)))
    session.hydrate()
    assert session.cached_hint is None


def test_malformed_cached_organization_list_is_discarded():
    session = TenantSession(MemorySelectionStore({ORGANIZATIONS_KEY: 7, ACTIVE_ORGANIZATION_KEY: 1}))
    session.hydrate()
    assert session.cached_organizations == []
    assert session.cached_hint == 1
