"""Profile service layer (Use Cases).

Covers the user directory (profiles, roles, delivery agents) and the
seller verification workflow:

    UNVERIFIED / REJECTED --submit--> PENDING --approve--> VERIFIED (+SELLER)
                                       PENDING --reject--> REJECTED
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.accounts.actor import Actor
from modules.accounts.constants import (
    SUBMITTABLE_VERIFICATION_STATES,
    Role,
    VerificationStatus,
)
from modules.accounts.exceptions import (
    ProfileNotFound,
    RoleChangeNotAllowed,
    VerificationStateError,
)

if TYPE_CHECKING:
    from modules.accounts.dtos import ReviewVerificationDTO, SubmitVerificationDTO
    from modules.accounts.models import Profile
    from modules.accounts.repositories.interfaces import IProfileRepository

logger = structlog.get_logger(__name__)


class ProfileService:
    """Application service for profile use-cases."""

    def __init__(self, repository: IProfileRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_profile(self, id: str) -> Profile:
        profile = self._repo.get_by_id(id)
        if not profile:
            raise ProfileNotFound(f"Profile {id} not found.")
        return profile

    def get_for_user(self, user: Any) -> Profile:
        """Profile of an authenticated user, provisioned on first access."""
        return self._repo.get_or_create_for_user(user)

    def get_actor(self, user: Any) -> Actor:
        return Actor.from_profile(self.get_for_user(user))

    def list_profiles(self, filters: Optional[Dict[str, Any]] = None) -> List[Profile]:
        return self._repo.list(filters)

    def list_agents(self) -> List[Profile]:
        return self._repo.list_by_role(Role.AGENT)

    def list_pending_verifications(self) -> List[Profile]:
        return self._repo.list({"verification_status": VerificationStatus.PENDING})

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def grant_role(self, actor: Actor, profile_id: str, role: str) -> Profile:
        """Add ``role`` to a profile; granting an existing role is a no-op.

        Raises:
            RoleChangeNotAllowed: the actor is not an administrator.
            ProfileNotFound: profile does not exist.
        """
        log = logger.bind(actor_id=actor.id, profile_id=profile_id, role=role)
        if not actor.is_admin:
            log.warning("profile.role_grant_denied")
            raise RoleChangeNotAllowed("Administrator role required.")

        profile = self.get_profile(profile_id)
        self._repo.add_role(profile, role)
        return profile

    @transaction.atomic
    def submit_verification(self, profile_id: str, dto: SubmitVerificationDTO) -> Profile:
        """Move a profile into review.

        Raises:
            ProfileNotFound: profile does not exist.
            VerificationStateError: already pending or verified.
        """
        profile = self.get_profile(profile_id)
        log = logger.bind(profile_id=str(profile.id), status=profile.verification_status)

        if profile.verification_status not in SUBMITTABLE_VERIFICATION_STATES:
            log.warning("verification.submit_rejected")
            raise VerificationStateError(
                f"Verification cannot be submitted while {profile.verification_status}."
            )

        profile.full_name = dto.full_name
        profile.verification_city = dto.city
        profile.name = profile.name or dto.full_name
        profile.city = profile.city or dto.city
        profile.verification_status = VerificationStatus.PENDING
        profile.submitted_at = timezone.now()
        profile.reviewed_at = None
        profile.rejection_reason = ""
        self._repo.save(profile)

        log.info("verification.submitted")
        return profile

    @transaction.atomic
    def review_verification(self, profile_id: str, dto: ReviewVerificationDTO) -> Profile:
        if dto.approve:
            return self.approve_verification(profile_id)
        return self.reject_verification(profile_id, dto.reason)

    @transaction.atomic
    def approve_verification(self, profile_id: str) -> Profile:
        """Mark the profile verified and grant the SELLER role."""
        profile = self._get_pending(profile_id)
        profile.verification_status = VerificationStatus.VERIFIED
        profile.reviewed_at = timezone.now()
        self._repo.save(profile)
        self._repo.add_role(profile, Role.SELLER)
        logger.info("verification.approved", profile_id=str(profile.id))
        return profile

    @transaction.atomic
    def reject_verification(self, profile_id: str, reason: str = "") -> Profile:
        profile = self._get_pending(profile_id)
        profile.verification_status = VerificationStatus.REJECTED
        profile.reviewed_at = timezone.now()
        profile.rejection_reason = reason
        self._repo.save(profile)
        logger.info("verification.rejected", profile_id=str(profile.id))
        return profile

    def _get_pending(self, profile_id: str) -> Profile:
        profile = self.get_profile(profile_id)
        if profile.verification_status != VerificationStatus.PENDING:
            raise VerificationStateError(
                f"Profile {profile_id} has no pending verification."
            )
        return profile
