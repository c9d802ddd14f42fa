import os
import tempfile

import pytest

os.environ.setdefault("ALWAYSON_LOG_DIR", tempfile.mkdtemp(prefix="alwayson-logs-"))

from alwayson.lockdown.exceptions import LabelNotFoundError, StoreWriteError  # noqa: E402
from alwayson.lockdown.models import AppVpnInfo, IdentityScope, Profile  # noqa: E402


class FakeProfileStore:
    """In-memory profile store recording every mutation."""

    def __init__(self, profiles=(), lockdown_key=None):
        self.profiles = list(profiles)
        self.lockdown_key = lockdown_key
        self.calls = []
        self.fail_on = set()

    def list_lockdown_eligible_profiles(self, scope):
        return list(self.profiles) if scope.is_primary else []

    def get_current_lockdown_key(self):
        return self.lockdown_key

    def set_lockdown_key(self, key):
        self.calls.append(("set_lockdown_key", key))
        if "set_lockdown_key" in self.fail_on:
            raise StoreWriteError("keystore unavailable")
        self.lockdown_key = key

    def clear_lockdown_key(self):
        self.calls.append(("clear_lockdown_key",))
        if "clear_lockdown_key" in self.fail_on:
            raise StoreWriteError("keystore unavailable")
        self.lockdown_key = None


class FakeAppRegistry:
    """In-memory VPN app registry recording every mutation."""

    def __init__(self, apps=(), labels=None, always_on=None):
        self.apps = list(apps)
        self.labels = dict(labels or {})
        self.always_on = dict(always_on or {})
        self.calls = []
        self.fail_on = set()

    def list_vpn_apps(self, scope):
        return [a for a in self.apps if a.user_id == scope.user_id]

    def resolve_display_label(self, package_name):
        if package_name not in self.labels:
            raise LabelNotFoundError(package_name)
        return self.labels[package_name]

    def get_current_always_on_package(self, user_id):
        return self.always_on.get(user_id)

    def set_always_on_package(self, user_id, package_name):
        self.calls.append(("set_always_on_package", user_id, package_name))
        if "set_always_on_package" in self.fail_on:
            raise StoreWriteError("registry unavailable")
        if package_name is None:
            self.always_on.pop(user_id, None)
        else:
            self.always_on[user_id] = package_name


class FakeNotifier:
    def __init__(self):
        self.count = 0

    def notify_lockdown_policy_changed(self):
        self.count += 1


@pytest.fixture
def work_profile():
    return Profile(key="p1", name="Work", type="l2tp_ipsec_psk",
                   server="203.0.113.10", dns_servers="203.0.113.53")


@pytest.fixture
def profile_store(work_profile):
    return FakeProfileStore(profiles=[work_profile])


@pytest.fixture
def app_registry():
    return FakeAppRegistry(apps=[AppVpnInfo("com.x", 0)], labels={"com.x": "X VPN"})


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def primary_scope():
    return IdentityScope(user_id=0, is_primary=True)
