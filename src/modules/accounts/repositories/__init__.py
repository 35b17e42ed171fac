"""Profile repositories package."""

from modules.accounts.repositories.django_repository import ProfileDjangoRepository
from modules.accounts.repositories.interfaces import IProfileRepository

__all__ = ["IProfileRepository", "ProfileDjangoRepository"]
