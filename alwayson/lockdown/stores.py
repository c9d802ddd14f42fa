"""Profile store and VPN app registry backends."""

import configparser
from pathlib import Path
from typing import Iterable, List, Optional, Protocol

from .exceptions import LabelNotFoundError
from .models import AppVpnInfo, IdentityScope, Profile
from .utils import read_ini, read_ini_for_update, write_ini_atomically
from ..logging_utility import logger

PROFILE_PREFIX = "profile:"
USER_PREFIX = "user:"
LOCKDOWN_SECTION = "lockdown"
DESKTOP_ENTRY = "Desktop Entry"


class ProfileStore(Protocol):
    def list_lockdown_eligible_profiles(self, scope: IdentityScope) -> List[Profile]: ...

    def get_current_lockdown_key(self) -> Optional[str]: ...

    def set_lockdown_key(self, key: str) -> None: ...

    def clear_lockdown_key(self) -> None: ...


class VpnAppRegistry(Protocol):
    def list_vpn_apps(self, scope: IdentityScope) -> List[AppVpnInfo]: ...

    def resolve_display_label(self, package_name: str) -> str: ...

    def get_current_always_on_package(self, user_id: int) -> Optional[str]: ...

    def set_always_on_package(self, user_id: int, package_name: Optional[str]) -> None: ...


class LockdownNotifier(Protocol):
    def notify_lockdown_policy_changed(self) -> None: ...


class KeystoreProfileStore:
    """
    Legacy VPN profiles kept in an INI keystore file.

    Each profile lives in a ``[profile:<key>]`` section; the lockdown
    designation is the ``key`` option of the ``[lockdown]`` section.
    """

    def __init__(self, path: Path, excluded_types: Iterable[str] = ("pptp",)):
        self.path = Path(path)
        self.excluded_types = {t.lower() for t in excluded_types}

    def list_lockdown_eligible_profiles(self, scope: IdentityScope) -> List[Profile]:
        # Legacy VPN takes over the whole device, so only the primary user sees it
        if not scope.is_primary:
            return []

        config = read_ini(self.path)
        profiles = []
        for section in config.sections():
            if not section.startswith(PROFILE_PREFIX):
                continue
            values = config[section]
            profile = Profile(
                key=section[len(PROFILE_PREFIX):],
                name=values.get("name", section[len(PROFILE_PREFIX):]),
                type=values.get("type", ""),
                server=values.get("server", ""),
                dns_servers=values.get("dns_servers", ""),
            )
            if profile.type.lower() in self.excluded_types:
                continue
            profiles.append(profile)
        return profiles

    def get_current_lockdown_key(self) -> Optional[str]:
        config = read_ini(self.path)
        key = config.get(LOCKDOWN_SECTION, "key", fallback=None)
        return key or None

    def set_lockdown_key(self, key: str) -> None:
        config = read_ini_for_update(self.path)
        if not config.has_section(LOCKDOWN_SECTION):
            config.add_section(LOCKDOWN_SECTION)
        config.set(LOCKDOWN_SECTION, "key", key)
        write_ini_atomically(config, self.path)
        logger.info(f"Lockdown key set to '{key}'")

    def clear_lockdown_key(self) -> None:
        config = read_ini_for_update(self.path)
        if not config.has_option(LOCKDOWN_SECTION, "key"):
            return
        config.remove_option(LOCKDOWN_SECTION, "key")
        write_ini_atomically(config, self.path)
        logger.info("Lockdown key cleared")


class IniVpnAppRegistry:
    """
    Installed VPN apps and always-on designations per user.

    ``[user:<id>]`` sections list the user's VPN packages in ``apps`` and
    the always-on package in ``always_on``. Display labels come from
    ``<apps_dir>/<package>.desktop``.
    """

    def __init__(self, path: Path, apps_dir: Path):
        self.path = Path(path)
        self.apps_dir = Path(apps_dir)

    @staticmethod
    def _section(user_id: int) -> str:
        return f"{USER_PREFIX}{user_id}"

    def list_vpn_apps(self, scope: IdentityScope) -> List[AppVpnInfo]:
        config = read_ini(self.path)
        packages = config.get(self._section(scope.user_id), "apps", fallback="").split()
        return [AppVpnInfo(package_name=p, user_id=scope.user_id) for p in packages]

    def resolve_display_label(self, package_name: str) -> str:
        desktop_file = self.apps_dir / f"{package_name}.desktop"
        entry = configparser.ConfigParser(interpolation=None, strict=False)
        # Desktop entry keys are case sensitive
        entry.optionxform = str
        try:
            read = entry.read(desktop_file, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError) as e:
            raise LabelNotFoundError(package_name) from e

        name = entry.get(DESKTOP_ENTRY, "Name", fallback="").strip() if read else ""
        if not name:
            raise LabelNotFoundError(package_name)
        return name

    def get_current_always_on_package(self, user_id: int) -> Optional[str]:
        config = read_ini(self.path)
        package = config.get(self._section(user_id), "always_on", fallback=None)
        return package or None

    def set_always_on_package(self, user_id: int, package_name: Optional[str]) -> None:
        config = read_ini_for_update(self.path)
        section = self._section(user_id)
        if package_name is None:
            if not config.has_option(section, "always_on"):
                return
            config.remove_option(section, "always_on")
        else:
            if not config.has_section(section):
                config.add_section(section)
            config.set(section, "always_on", package_name)
        write_ini_atomically(config, self.path)
        logger.info(f"Always-on package for user {user_id} set to {package_name!r}")
