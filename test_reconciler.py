"""Tests for committing a lockdown selection."""

import pytest

from alwayson.lockdown.candidates import enumerate_candidates
from alwayson.lockdown.exceptions import (
    InvalidIndexError,
    InvalidLockdownProfileError,
    StoreReadError,
    StoreWriteError,
)
from alwayson.lockdown.models import Profile
from alwayson.lockdown.reconciler import LockdownReconciler


def build(profile_store, app_registry, scope):
    return enumerate_candidates(
        profile_store.list_lockdown_eligible_profiles(scope),
        app_registry.list_vpn_apps(scope),
        profile_store.get_current_lockdown_key(),
        app_registry.get_current_always_on_package(scope.user_id),
        scope.user_id,
        app_registry.resolve_display_label,
    )


@pytest.fixture
def reconciler(profile_store, app_registry, notifier):
    return LockdownReconciler(profile_store, app_registry, notifier, user_id=0)


def test_switch_from_legacy_to_app(reconciler, profile_store, app_registry, notifier, primary_scope):
    profile_store.lockdown_key = "p1"
    candidates = build(profile_store, app_registry, primary_scope)
    assert candidates.active_index == 1

    assert reconciler.commit(candidates, candidates.active_index, 2) is True

    assert profile_store.calls == [("clear_lockdown_key",)]
    assert app_registry.calls == [("set_always_on_package", 0, "com.x")]
    assert profile_store.lockdown_key is None
    assert app_registry.always_on == {0: "com.x"}
    assert notifier.count == 1


def test_switch_from_app_to_legacy(reconciler, profile_store, app_registry, notifier, primary_scope):
    app_registry.always_on[0] = "com.x"
    candidates = build(profile_store, app_registry, primary_scope)
    assert candidates.active_index == 2

    assert reconciler.commit(candidates, candidates.active_index, 1, lambda p: True) is True

    assert app_registry.calls == [("set_always_on_package", 0, None)]
    assert profile_store.calls == [("set_lockdown_key", "p1")]
    assert app_registry.always_on == {}
    assert notifier.count == 1


def test_select_none_clears_both(reconciler, profile_store, app_registry, notifier, primary_scope):
    profile_store.lockdown_key = "p1"
    candidates = build(profile_store, app_registry, primary_scope)

    reconciler.commit(candidates, candidates.active_index, 0)

    assert profile_store.calls == [("clear_lockdown_key",)]
    assert app_registry.calls == [("set_always_on_package", 0, None)]
    assert notifier.count == 1


def test_same_index_is_noop(reconciler, profile_store, app_registry, notifier, primary_scope):
    profile_store.lockdown_key = "p1"
    candidates = build(profile_store, app_registry, primary_scope)

    assert reconciler.commit(candidates, 1, 1) is False

    assert profile_store.calls == []
    assert app_registry.calls == []
    assert notifier.count == 0


def test_invalid_profile_is_rejected_without_writes(reconciler, profile_store, app_registry, notifier,
                                                    primary_scope):
    app_registry.always_on[0] = "com.x"
    candidates = build(profile_store, app_registry, primary_scope)

    with pytest.raises(InvalidLockdownProfileError):
        reconciler.commit(candidates, candidates.active_index, 1, lambda p: False)

    assert profile_store.calls == []
    assert app_registry.calls == []
    assert profile_store.get_current_lockdown_key() is None
    assert app_registry.get_current_always_on_package(0) == "com.x"
    assert notifier.count == 0


def test_default_validator_rejects_hostname_server(reconciler, profile_store, app_registry, primary_scope):
    profile_store.profiles[0] = Profile(
        key="p1", name="Work", type="ipsec", server="vpn.example.com", dns_servers="203.0.113.53")
    candidates = build(profile_store, app_registry, primary_scope)

    with pytest.raises(InvalidLockdownProfileError):
        reconciler.commit(candidates, 0, 1)
    assert profile_store.calls == []


def test_out_of_range_index(reconciler, profile_store, app_registry, notifier, primary_scope):
    candidates = build(profile_store, app_registry, primary_scope)
    assert len(candidates) == 3

    for index in (5, 3, -1):
        with pytest.raises(InvalidIndexError):
            reconciler.commit(candidates, candidates.active_index, index)

    assert profile_store.calls == []
    assert app_registry.calls == []
    assert notifier.count == 0


def test_failed_clear_stops_before_setting_legacy(reconciler, profile_store, app_registry, notifier,
                                                  primary_scope):
    app_registry.always_on[0] = "com.x"
    app_registry.fail_on.add("set_always_on_package")
    candidates = build(profile_store, app_registry, primary_scope)

    with pytest.raises(StoreWriteError):
        reconciler.commit(candidates, candidates.active_index, 1, lambda p: True)

    assert profile_store.calls == []
    assert notifier.count == 0


def test_failed_set_leaves_nothing_active(reconciler, profile_store, app_registry, notifier, primary_scope):
    profile_store.lockdown_key = "p1"
    app_registry.fail_on.add("set_always_on_package")
    candidates = build(profile_store, app_registry, primary_scope)

    with pytest.raises(StoreWriteError):
        reconciler.commit(candidates, candidates.active_index, 2)

    assert profile_store.lockdown_key is None
    assert app_registry.always_on == {}
    assert notifier.count == 0


def test_none_attempts_both_clears_on_failure(reconciler, profile_store, app_registry, notifier, primary_scope):
    profile_store.lockdown_key = "p1"
    profile_store.fail_on.add("clear_lockdown_key")
    candidates = build(profile_store, app_registry, primary_scope)

    with pytest.raises(StoreWriteError):
        reconciler.commit(candidates, candidates.active_index, 0)

    assert profile_store.calls == [("clear_lockdown_key",)]
    assert app_registry.calls == [("set_always_on_package", 0, None)]
    assert notifier.count == 0


def test_none_clears_app_when_keystore_is_unreadable(reconciler, profile_store, app_registry, notifier,
                                                     primary_scope):
    profile_store.lockdown_key = "p1"
    app_registry.always_on[0] = "com.x"
    candidates = build(profile_store, app_registry, primary_scope)

    def unreadable():
        raise StoreReadError("keystore.conf is corrupt")

    profile_store.clear_lockdown_key = unreadable

    with pytest.raises(StoreReadError):
        reconciler.commit(candidates, candidates.active_index, 0)

    assert app_registry.calls == [("set_always_on_package", 0, None)]
    assert app_registry.always_on == {}
    assert notifier.count == 0
