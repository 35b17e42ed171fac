"""Repository contract shared by the marketplace apps.

Services are constructed with an implementation of these interfaces,
which keeps the ORM out of the decision logic and lets tests swap in
their own implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from django.db.models import QuerySet

EntityT = TypeVar("EntityT")


class IRepository(ABC, Generic[EntityT]):
    """Persistence for one aggregate (``Profile``, ``Listing``, ``Transaction``...).

    Lookups never raise for bad input: an unknown or malformed id is
    simply ``None``.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[EntityT]: ...

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Lazily evaluated rows matching the ORM lookups in ``filters``."""

    @abstractmethod
    def save(self, entity: EntityT) -> EntityT:
        """Insert or update; aggregates with pending domain events write them to the outbox."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """``True`` when a row was removed (or tombstoned)."""
