"""Lockdown eligibility checks for legacy profiles."""

import ipaddress

from .models import Profile

# PPTP has no usable always-on mechanism
LOCKDOWN_EXCLUDED_TYPES = frozenset({"pptp"})


def _is_numeric_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_valid_lockdown_profile(profile: Profile) -> bool:
    """
    Check that a profile carries what lockdown mode needs.

    Lockdown blocks all traffic until the tunnel is up, so neither the
    server nor the DNS servers may require a name lookup.
    """
    if profile.type.lower() in LOCKDOWN_EXCLUDED_TYPES:
        return False
    if not _is_numeric_address(profile.server.strip()):
        return False

    dns_servers = profile.dns_servers.split()
    if not dns_servers:
        return False
    return all(_is_numeric_address(dns) for dns in dns_servers)
