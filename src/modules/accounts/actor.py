"""The acting user as seen by authorization and action resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from modules.accounts.constants import UserRole, VerificationStatus

if TYPE_CHECKING:
    from modules.accounts.models import Profile


@dataclass(frozen=True)
class Actor:
    """Immutable snapshot of who is acting.

    ``id`` is the profile id as a string; ``role`` is the acting
    ``UserRole``.  Decision functions never touch the database, so the
    snapshot is taken once per request.
    """

    id: str
    role: str
    phone: str = ""
    verification_status: str = VerificationStatus.UNVERIFIED

    @classmethod
    def from_profile(cls, profile: Profile) -> Actor:
        return cls(
            id=str(profile.id),
            role=profile.acting_role,
            phone=profile.phone or "",
            verification_status=profile.verification_status,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT
