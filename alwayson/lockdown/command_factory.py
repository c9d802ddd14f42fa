"""Factory for creating lockdown enforcement commands."""

from .commands import SYSTEMCTL_RELOAD


class LockdownCommandFactory:
    """Factory for creating commands that drive the enforcement service."""

    @staticmethod
    def reload_enforcer(unit: str, use_sudo: bool = False) -> list[str]:
        """Create command asking the enforcer to re-read the lockdown designation."""
        cmd = SYSTEMCTL_RELOAD.with_arg(unit)
        if use_sudo:
            cmd = cmd.as_sudo()
        return cmd.build()
