"""Django ORM implementation of the Profile repository.

Missing or malformed ids resolve to ``None``; the Service Layer decides
how a missing profile surfaces to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.accounts.constants import Role
from modules.accounts.models import Profile, RoleAssignment
from modules.accounts.repositories.interfaces import IProfileRepository

logger = structlog.get_logger(__name__)


class ProfileDjangoRepository(IProfileRepository):
    """Concrete Profile repository backed by Django ORM."""

    @staticmethod
    def _queryset():
        return Profile.objects.select_related("user").prefetch_related(
            "role_assignments"
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Profile]:
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Profile]:
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_user(self, user: Any) -> Optional[Profile]:
        if user is None or not getattr(user, "pk", None):
            return None
        return self._queryset().filter(user_id=user.pk).first()

    def list_by_role(self, role: str) -> List[Profile]:
        return list(
            self._queryset().filter(role_assignments__role=role).order_by("name")
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Profile) -> Profile:
        is_new = entity._state.adding
        entity.save()
        logger.info("profile.saved", profile_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        profile = self.get_by_id(id)
        if not profile:
            return False
        profile.delete()
        logger.info("profile.deleted", profile_id=str(id))
        return True

    @transaction.atomic
    def add_role(self, profile: Profile, role: str) -> bool:
        _, created = RoleAssignment.objects.get_or_create(profile=profile, role=role)
        if created:
            logger.info("profile.role_granted", profile_id=str(profile.id), role=role)
        # Drop the prefetch cache so ``profile.roles`` sees the new row.
        getattr(profile, "_prefetched_objects_cache", {}).pop("role_assignments", None)
        return created

    @transaction.atomic
    def get_or_create_for_user(self, user: Any) -> Profile:
        profile = self.get_by_user(user)
        if profile:
            return profile
        profile, created = Profile.objects.get_or_create(
            user=user,
            defaults={
                "name": user.get_full_name() or user.get_username(),
                "email": user.email or "",
            },
        )
        if created:
            self.add_role(profile, Role.ADMIN if user.is_superuser else Role.BUYER)
            logger.info("profile.provisioned", profile_id=str(profile.id))
        return self.get_by_id(str(profile.id)) or profile

    @transaction.atomic
    def get_or_create_external(
        self, external_id: str, email: str = "", phone: str = "", name: str = ""
    ) -> Profile:
        profile = self._queryset().filter(external_id=external_id).first()
        if profile:
            return profile

        User = get_user_model()
        user, _ = User.objects.get_or_create(
            username=external_id[:150],
            defaults={"email": email},
        )
        profile, created = Profile.objects.get_or_create(
            user=user,
            defaults={
                "external_id": external_id,
                "email": email,
                "phone": phone,
                "name": name,
            },
        )
        if created:
            self.add_role(profile, Role.BUYER)
            logger.info(
                "profile.provisioned",
                profile_id=str(profile.id),
                source="identity_provider",
            )
        return self.get_by_id(str(profile.id)) or profile
