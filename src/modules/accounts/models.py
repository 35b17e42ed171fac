"""Profile and RoleAssignment models.

``Profile`` holds the marketplace identity of a Django auth user: contact
details, the seller verification workflow and the ``external_id`` issued
by the identity provider.  Roles are stored as one ``RoleAssignment`` row
per role; a profile with no rows acts as a plain buyer.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.accounts.constants import (
    Role,
    VerificationStatus,
    acting_role,
    primary_role,
)
from modules.core.models import BaseModel


class Profile(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    external_id = models.CharField(  # noqa: DJ01
        max_length=255,
        unique=True,
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=150, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=32, blank=True, default="", db_index=True)
    city = models.CharField(max_length=100, blank=True, default="")
    avatar_url = models.URLField(blank=True, default="")

    verification_status = models.CharField(
        max_length=20,
        choices=VerificationStatus.choices,
        default=VerificationStatus.UNVERIFIED,
    )
    full_name = models.CharField(max_length=150, blank=True, default="")
    verification_city = models.CharField(max_length=100, blank=True, default="")
    submitted_at = models.DateTimeField(null=True, blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default="")

    class Meta:
        db_table = "profiles"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["verification_status"],
                name="profiles_verification_idx",
            ),
        ]

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    @property
    def roles(self) -> set[str]:
        return {assignment.role for assignment in self.role_assignments.all()}

    @property
    def primary_role(self) -> Role:
        return primary_role(self.roles)

    @property
    def acting_role(self) -> str:
        return acting_role(self.primary_role)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED

    def __str__(self) -> str:
        return self.name or self.email or self.phone or str(self.id)


class RoleAssignment(BaseModel):
    profile = models.ForeignKey(
        "accounts.Profile",
        on_delete=models.CASCADE,
        related_name="role_assignments",
    )
    role = models.CharField(max_length=10, choices=Role.choices)

    class Meta:
        db_table = "role_assignments"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["profile", "role"],
                name="role_assignments_unique_profile_role",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.profile} : {self.role}"
