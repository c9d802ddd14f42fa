"""Unified candidate list for the always-on VPN chooser."""

from typing import Callable, Optional, Sequence

from .exceptions import LabelResolutionError
from .models import AppVpnInfo, Candidate, CandidateList, Profile
from ..logging_utility import logger


def enumerate_candidates(
        profiles: Sequence[Profile],
        apps: Sequence[AppVpnInfo],
        current_lockdown_key: Optional[str],
        current_always_on_package: Optional[str],
        current_user_id: int,
        resolve_label: Callable[[str], str],
        none_label: str = "None",
) -> CandidateList:
    """
    Build the ordered chooser list and locate the active entry.

    Legacy profiles come first, then VPN apps. The active index is recorded
    when a candidate is appended; the first match wins, so a stored lockdown
    key takes precedence over an always-on package.

    Args:
        profiles: Lockdown-eligible legacy profiles, already scoped
        apps: Installed VPN apps, already scoped
        current_lockdown_key: Key of the legacy profile in lockdown, if any
        current_always_on_package: Always-on package for the current user, if any
        current_user_id: User the always-on package belongs to
        resolve_label: Maps a package name to its display label
        none_label: Label of the "no VPN" entry

    Returns:
        CandidateList with the "no VPN" entry at index 0
    """
    candidates = [Candidate.none(none_label)]
    active_index = 0
    matched = False

    # Add true lockdown VPNs to the list first.
    for profile in profiles:
        if not matched and current_lockdown_key is not None and profile.key == current_lockdown_key:
            active_index = len(candidates)
            matched = True
        candidates.append(Candidate.legacy(profile))

    for app in apps:
        try:
            label = resolve_label(app.package_name)
        except LabelResolutionError as e:
            logger.warning(f"Skipping VPN app '{app.package_name}': {e}", exc_info=e)
            continue

        if (not matched
                and current_always_on_package is not None
                and app.package_name == current_always_on_package
                and app.user_id == current_user_id):
            active_index = len(candidates)
            matched = True
        candidates.append(Candidate.for_app(app, label))

    return CandidateList(candidates=candidates, active_index=active_index)
