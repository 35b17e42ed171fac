"""Django ORM implementation of the Listing repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from modules.listings.constants import ListingVisibility
from modules.listings.models import Listing
from modules.listings.repositories.interfaces import IListingRepository

logger = structlog.get_logger(__name__)


class ListingDjangoRepository(IListingRepository):
    def get_by_id(self, id: str) -> Optional[Listing]:
        """Live listing by id; ``None`` for unknown, deleted or malformed ids."""
        try:
            return Listing.objects.alive().select_related("seller").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None):
        queryset = Listing.objects.alive().select_related("seller")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_visible_to(self, viewer_id: Optional[str], include_all: bool = False):
        queryset = self.list()
        if include_all:
            return queryset
        public = Q(is_active=True, visibility=ListingVisibility.PUBLIC)
        if viewer_id:
            return queryset.filter(public | Q(seller_id=viewer_id))
        return queryset.filter(public)

    @transaction.atomic
    def save(self, entity: Listing) -> Listing:
        is_new = entity._state.adding
        entity.save()
        logger.info("listing.saved", listing_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        listing = self.get_by_id(id)
        if not listing:
            return False
        listing.delete()
        logger.info("listing.soft_deleted", listing_id=str(id))
        return True
