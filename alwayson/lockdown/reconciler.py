"""Commit a lockdown selection across the profile store and app registry."""

from typing import Callable, Optional

from .exceptions import InvalidIndexError, InvalidLockdownProfileError, LockdownError
from .models import CandidateKind, CandidateList, Profile
from .stores import LockdownNotifier, ProfileStore, VpnAppRegistry
from .validation import is_valid_lockdown_profile
from ..logging_utility import logger


class LockdownReconciler:
    """
    Swaps the always-on designation between legacy profiles and VPN apps.

    There is no transaction spanning both stores. Every transition clears
    the other mechanism before setting the new one, so a failure part way
    leaves nothing active rather than two things active.
    """

    def __init__(
            self,
            profile_store: ProfileStore,
            app_registry: VpnAppRegistry,
            notifier: LockdownNotifier,
            user_id: int,
    ):
        self.profile_store = profile_store
        self.app_registry = app_registry
        self.notifier = notifier
        self.user_id = user_id

    def commit(
            self,
            candidates: CandidateList,
            active_index: int,
            requested_index: int,
            profile_validator: Optional[Callable[[Profile], bool]] = None,
    ) -> bool:
        """
        Make the candidate at requested_index the active one.

        Args:
            candidates: Freshly enumerated candidate list
            active_index: Index currently active in that list
            requested_index: Index chosen by the caller
            profile_validator: Lockdown check for legacy profiles

        Returns:
            True if the designation changed, False if it was already active

        Raises:
            InvalidIndexError: requested_index is out of range
            InvalidLockdownProfileError: the legacy profile failed validation
            StoreWriteError: a store mutation failed
        """
        if not 0 <= requested_index < len(candidates):
            raise InvalidIndexError(requested_index, len(candidates))
        if requested_index == active_index:
            logger.info(f"Lockdown candidate {requested_index} already active")
            return False

        if profile_validator is None:
            profile_validator = is_valid_lockdown_profile

        candidate = candidates[requested_index]
        if candidate.kind is CandidateKind.NONE:
            self._clear_all()
        elif candidate.kind is CandidateKind.LEGACY:
            profile = candidate.profile
            if not profile_validator(profile):
                logger.warning(f"Rejected lockdown profile '{profile.key}'")
                raise InvalidLockdownProfileError(profile.key)
            self.app_registry.set_always_on_package(self.user_id, None)
            self.profile_store.set_lockdown_key(profile.key)
        else:
            app = candidate.app
            self.profile_store.clear_lockdown_key()
            self.app_registry.set_always_on_package(app.user_id, app.package_name)

        logger.info(f"Lockdown VPN set to {candidate.id}")
        # kick enforcement since the designation changed
        self.notifier.notify_lockdown_policy_changed()
        return True

    def _clear_all(self) -> None:
        """Clear both designations, attempting each even if the other fails."""
        errors = []
        try:
            self.profile_store.clear_lockdown_key()
        except LockdownError as e:
            logger.error(f"Failed to clear lockdown key: {e}")
            errors.append(e)
        try:
            self.app_registry.set_always_on_package(self.user_id, None)
        except LockdownError as e:
            logger.error(f"Failed to clear always-on package: {e}")
            errors.append(e)

        if errors:
            raise errors[0]
