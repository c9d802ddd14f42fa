"""Custom exceptions for lockdown VPN selection."""


class LockdownError(Exception):
    """Base exception for lockdown-related errors."""
    pass


class ConfigurationError(LockdownError):
    """Raised when there's an issue with the lockdown configuration"""
    pass


class InvalidIndexError(LockdownError):
    """Raised when a requested index is outside the current candidate list"""

    def __init__(self, index: int, count: int):
        super().__init__(f"Index {index} is out of range for {count} candidates")
        self.index = index
        self.count = count


class InvalidLockdownProfileError(LockdownError):
    """Raised when a legacy profile lacks what lockdown mode requires"""

    def __init__(self, key: str):
        super().__init__(f"Profile '{key}' is not valid for lockdown mode")
        self.key = key


class StaleSelectionError(LockdownError):
    """Raised when the candidate at an index no longer matches what was displayed"""
    pass


class StoreReadError(LockdownError):
    """Raised when a profile store or app registry file cannot be read"""
    pass


class StoreWriteError(LockdownError):
    """Raised when a profile store or app registry mutation fails"""
    pass


class LabelResolutionError(LockdownError):
    """Raised when a VPN app's display label cannot be resolved"""
    pass


class LabelNotFoundError(LabelResolutionError):
    """Raised when a VPN app's metadata is absent"""

    def __init__(self, package_name: str):
        super().__init__(f"VPN package not found: '{package_name}'")
        self.package_name = package_name
