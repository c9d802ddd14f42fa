"""Data models for lockdown VPN selection."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class CandidateKind(Enum):
    """Kind of a selectable lockdown option"""
    NONE = "none"
    LEGACY = "legacy"
    APP = "app"


@dataclass(frozen=True)
class Profile:
    """Legacy VPN profile as stored in the keystore"""
    key: str
    name: str
    type: str = ""
    server: str = ""
    dns_servers: str = ""


@dataclass(frozen=True)
class AppVpnInfo:
    """Third-party VPN application installed for a user"""
    package_name: str
    user_id: int


@dataclass(frozen=True)
class IdentityScope:
    """Identity the candidates are enumerated for"""
    user_id: int
    is_primary: bool = False


@dataclass(frozen=True)
class Candidate:
    """One option in the lockdown chooser"""
    kind: CandidateKind
    label: str
    profile: Optional[Profile] = None
    app: Optional[AppVpnInfo] = None

    @classmethod
    def none(cls, label: str) -> 'Candidate':
        return cls(CandidateKind.NONE, label)

    @classmethod
    def legacy(cls, profile: Profile) -> 'Candidate':
        return cls(CandidateKind.LEGACY, profile.name, profile=profile)

    @classmethod
    def for_app(cls, app: AppVpnInfo, label: str) -> 'Candidate':
        return cls(CandidateKind.APP, label, app=app)

    @property
    def id(self) -> str:
        """Stable identifier, independent of the candidate's position."""
        if self.kind is CandidateKind.LEGACY:
            return f"profile:{self.profile.key}"
        if self.kind is CandidateKind.APP:
            return f"app:{self.app.user_id}:{self.app.package_name}"
        return "none"


@dataclass(frozen=True)
class CandidateList:
    """Snapshot of the chooser: ordered candidates plus the active position"""
    candidates: List[Candidate]
    active_index: int = 0

    def __len__(self) -> int:
        return len(self.candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self.candidates[index]

    @property
    def active(self) -> Candidate:
        return self.candidates[self.active_index]
