"""Listing repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.listings.models import Listing


class IListingRepository(IRepository["Listing"]):
    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Listing]":
        """Live (not soft-deleted) listings with optional filters."""

    @abstractmethod
    def list_visible_to(self, viewer_id: Optional[str], include_all: bool = False):
        """Active public listings plus the viewer's own listings."""
