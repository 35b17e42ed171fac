"""Listing service layer (Use Cases).

Publishing requires ``can_create_listing``; editing and deleting require
ownership or the admin role.  Private and inactive listings are visible
only to their seller and to admins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import transaction

from modules.accounts.constants import UserRole
from modules.listings.constants import ListingVisibility
from modules.listings.exceptions import ListingNotAllowed, ListingNotFound
from modules.listings.models import Listing
from modules.listings.policy import can_create_listing, can_manage_listing

if TYPE_CHECKING:
    from modules.accounts.actor import Actor
    from modules.listings.dtos import CreateListingDTO, UpdateListingDTO
    from modules.listings.repositories.interfaces import IListingRepository

logger = structlog.get_logger(__name__)


class ListingService:
    def __init__(self, repository: IListingRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_listing(self, actor: Actor, dto: CreateListingDTO) -> Listing:
        """Publish a listing owned by ``actor``.

        Raises:
            ListingNotAllowed: the actor is an unverified buyer/seller.
        """
        log = logger.bind(actor_id=actor.id, role=actor.role)
        if not can_create_listing(actor):
            log.warning("listing.create_denied")
            raise ListingNotAllowed("Verify your identity before posting listings.")

        listing = Listing(seller_id=actor.id, **dto.model_dump())
        listing = self._repo.save(listing)
        log.info("listing.created", listing_id=str(listing.id))
        return listing

    @transaction.atomic
    def update_listing(self, actor: Actor, id: str, dto: UpdateListingDTO) -> Listing:
        listing = self._get_managed(actor, id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(listing, field, value)
        listing = self._repo.save(listing)
        logger.info("listing.updated", listing_id=str(listing.id), actor_id=actor.id)
        return listing

    @transaction.atomic
    def delete_listing(self, actor: Actor, id: str) -> None:
        self._get_managed(actor, id)
        self._repo.delete(id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_listing(self, actor: Actor | None, id: str) -> Listing:
        listing = self._repo.get_by_id(id)
        if not listing or not self._is_visible(actor, listing):
            raise ListingNotFound(f"Listing {id} not found.")
        return listing

    def list_listings(self, actor: Actor | None):
        is_admin = actor is not None and actor.role == UserRole.ADMIN
        return self._repo.list_visible_to(
            actor.id if actor else None, include_all=is_admin
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_managed(self, actor: Actor, id: str) -> Listing:
        listing = self.get_listing(actor, id)
        if not can_manage_listing(actor, listing):
            logger.warning("listing.manage_denied", listing_id=id, actor_id=actor.id)
            raise ListingNotAllowed("Only the seller or an admin can change this listing.")
        return listing

    @staticmethod
    def _is_visible(actor: Actor | None, listing: Listing) -> bool:
        if listing.is_active and listing.visibility == ListingVisibility.PUBLIC:
            return True
        return can_manage_listing(actor, listing)
