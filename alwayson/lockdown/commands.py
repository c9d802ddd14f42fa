"""Command templates and builders for lockdown enforcement."""

from typing import FrozenSet, List, Optional
from dataclasses import dataclass

from .exceptions import LockdownError


class CommandError(LockdownError):
    """Base exception for command-related errors."""
    pass


class ValidationError(CommandError):
    """Raised when command validation fails."""
    pass


@dataclass
class Command:
    """Command builder with validation."""
    base_cmd: List[str]
    use_sudo: bool = False
    _valid_flags: Optional[FrozenSet[str]] = None

    def _validate_flag(self, flag: str) -> None:
        """Validate flag if validation rules exist."""
        if self._valid_flags is not None and flag not in self._valid_flags:
            valid_flags = ", ".join(f"--{f.replace('_', '-')}" for f in sorted(self._valid_flags))
            raise ValidationError(
                f"Invalid option '{flag}' for command {self.base_cmd[0]}. "
                f"Valid options are: {valid_flags}"
            )

    def _validate_executable(self) -> None:
        """Validate that base command exists."""
        if not self.base_cmd:
            raise ValidationError("Command cannot be empty")

    @classmethod
    def from_str(cls, cmd: str, valid_flags: Optional[FrozenSet[str]] = None) -> 'Command':
        """Create command from string with optional validation rules."""
        command = cls(cmd.split(), False, valid_flags)
        command._validate_executable()
        return command

    def with_arg(self, arg: str) -> 'Command':
        """Add single argument."""
        if not arg or arg.startswith('-'):
            raise ValidationError(f"Invalid argument '{arg}' for command {self.base_cmd[0]}")
        return Command(self.base_cmd + [arg], self.use_sudo, self._valid_flags)

    def with_flags(self, *flags: str) -> 'Command':
        """Add value-less options with validation."""
        cmd = self.base_cmd.copy()
        for flag in flags:
            self._validate_flag(flag)
            cmd.append("--" + flag.replace("_", "-"))
        return Command(cmd, self.use_sudo, self._valid_flags)

    def as_sudo(self) -> 'Command':
        """Mark command to be executed with sudo."""
        return Command(self.base_cmd, True, self._valid_flags)

    def build(self) -> List[str]:
        """Get final command list."""
        self._validate_executable()
        return ["sudo"] + self.base_cmd if self.use_sudo else self.base_cmd


SYSTEMCTL_FLAGS = frozenset({'no_block'})


SYSTEMCTL = Command.from_str("systemctl", valid_flags=SYSTEMCTL_FLAGS)
SYSTEMCTL_RELOAD = SYSTEMCTL.with_flags("no_block").with_arg("reload-or-restart")
