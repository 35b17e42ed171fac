"""Profile repository interface.

Extends ``IRepository[Profile]`` with the look-ups the user directory
needs: resolving the profile of an authenticated user, listing profiles
by role and granting roles.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import Profile


class IProfileRepository(IRepository["Profile"]):
    """Repository contract for profiles and their role assignments."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Profile]:
        """List profiles (roles prefetched) with optional filters."""

    @abstractmethod
    def get_by_user(self, user: Any) -> Optional[Profile]:
        """Return the profile attached to a Django auth user."""

    @abstractmethod
    def get_or_create_for_user(self, user: Any) -> Profile:
        """Return the user's profile, creating a buyer profile on first use."""

    @abstractmethod
    def get_or_create_external(
        self, external_id: str, email: str = "", phone: str = "", name: str = ""
    ) -> Profile:
        """Return the profile linked to an identity-provider subject."""

    @abstractmethod
    def list_by_role(self, role: str) -> List[Profile]:
        """List profiles holding ``role``."""

    @abstractmethod
    def add_role(self, profile: Profile, role: str) -> bool:
        """Grant ``role``; returns ``False`` if it was already held."""
