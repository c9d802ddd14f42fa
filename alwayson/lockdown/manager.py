"""Always-on VPN lockdown management implementation."""

import configparser
import threading
from pathlib import Path
from typing import Callable, Optional

from .candidates import enumerate_candidates
from .exceptions import ConfigurationError, StaleSelectionError
from .models import CandidateList, IdentityScope, Profile
from .notifier import EnforcerNotifier
from .reconciler import LockdownReconciler
from .stores import (
    IniVpnAppRegistry,
    KeystoreProfileStore,
    LockdownNotifier,
    ProfileStore,
    VpnAppRegistry,
)
from .validation import is_valid_lockdown_profile
from ..logging_utility import logger

CONFIG_SECTION = "lockdown"


class LockdownManager:
    def __init__(
            self,
            profile_store: ProfileStore,
            app_registry: VpnAppRegistry,
            notifier: LockdownNotifier,
            scope: IdentityScope,
            none_label: str = "None",
            profile_validator: Callable[[Profile], bool] = is_valid_lockdown_profile,
    ):
        self.profile_store = profile_store
        self.app_registry = app_registry
        self.scope = scope
        self.none_label = none_label
        self.profile_validator = profile_validator
        self.reconciler = LockdownReconciler(profile_store, app_registry, notifier, scope.user_id)
        # at most one commit in flight; the clear-before-set ordering assumes no interleaving writer
        self._commit_lock = threading.Lock()

    @classmethod
    def from_config(cls, config_file: str) -> 'LockdownManager':
        """
        Build a manager from an INI configuration file.

        Relative store paths are resolved against the configuration file's
        directory.

        Args:
            config_file: Path to the configuration file

        Returns:
            LockdownManager wired to the configured stores
        """
        config = cls._load_config(config_file)
        base_path = Path(config_file).resolve().parent

        try:
            section = config[CONFIG_SECTION]
            profile_store_path = base_path / section['profile_store']
            app_registry_path = base_path / section['app_registry']
            apps_dir = base_path / section['apps_dir']
            user_id = section.getint('user_id', fallback=0)
            primary_user_id = section.getint('primary_user_id', fallback=0)
            use_sudo = section.getboolean('use_sudo', fallback=False)
        except (KeyError, ValueError) as e:
            raise ConfigurationError(f"Invalid lockdown configuration: {str(e)}")

        excluded_types = section.get('excluded_profile_types', 'pptp').split()
        scope = IdentityScope(user_id=user_id, is_primary=user_id == primary_user_id)
        logger.info(f"Lockdown manager for user {user_id} (primary: {scope.is_primary})")

        return cls(
            profile_store=KeystoreProfileStore(profile_store_path, excluded_types),
            app_registry=IniVpnAppRegistry(app_registry_path, apps_dir),
            notifier=EnforcerNotifier(section.get('enforcer_unit') or None, use_sudo),
            scope=scope,
            none_label=section.get('none_label', 'None'),
        )

    @staticmethod
    def _load_config(config_file: str) -> configparser.ConfigParser:
        config = configparser.ConfigParser()
        if not config.read(config_file):
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        return config

    def get_candidates(self) -> CandidateList:
        """Enumerate the chooser from the live store contents."""
        profiles = self.profile_store.list_lockdown_eligible_profiles(self.scope)
        apps = self.app_registry.list_vpn_apps(self.scope)

        return enumerate_candidates(
            profiles,
            apps,
            self.profile_store.get_current_lockdown_key(),
            self.app_registry.get_current_always_on_package(self.scope.user_id),
            self.scope.user_id,
            self.app_registry.resolve_display_label,
            self.none_label,
        )

    def select(self, requested_index: int, expected_id: Optional[str] = None) -> bool:
        """
        Commit the candidate at requested_index against live state.

        Args:
            requested_index: Position chosen by the caller
            expected_id: Id of the candidate the caller displayed at that position

        Returns:
            True if the designation changed, False if it was already active
        """
        with self._commit_lock:
            candidates = self.get_candidates()

            if (expected_id is not None
                    and 0 <= requested_index < len(candidates)
                    and candidates[requested_index].id != expected_id):
                raise StaleSelectionError(
                    f"Candidate at {requested_index} is now {candidates[requested_index].id}, "
                    f"not {expected_id}"
                )

            return self.reconciler.commit(
                candidates,
                candidates.active_index,
                requested_index,
                self.profile_validator,
            )
