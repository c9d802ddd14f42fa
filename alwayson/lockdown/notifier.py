"""Lockdown policy change notification."""

from typing import Optional

from .command_factory import LockdownCommandFactory
from .exceptions import LockdownError
from .utils import run_command
from ..logging_utility import logger


class EnforcerNotifier:
    """Tells the network enforcement service to re-read the lockdown designation."""

    def __init__(self, unit: Optional[str] = None, use_sudo: bool = False):
        self.unit = unit
        self.use_sudo = use_sudo

    def notify_lockdown_policy_changed(self) -> None:
        if not self.unit:
            logger.info("Lockdown policy changed; no enforcer unit configured")
            return

        try:
            run_command(LockdownCommandFactory.reload_enforcer(self.unit, self.use_sudo))
            logger.info(f"Reloaded enforcer unit {self.unit}")
        except (LockdownError, OSError) as e:
            logger.error(f"Failed to notify enforcer {self.unit}: {str(e)}")
