"""DRF permission classes backed by marketplace roles."""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from modules.accounts.constants import UserRole
from modules.accounts.repositories.django_repository import ProfileDjangoRepository


class IsMarketplaceAdmin(BasePermission):
    """Allow only users whose acting role is ``ADMIN``."""

    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        profile = ProfileDjangoRepository().get_or_create_for_user(user)
        return profile.acting_role == UserRole.ADMIN
