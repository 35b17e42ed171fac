from datetime import date

import pytest
from pydantic import ValidationError

from modules.accounts.actor import Actor
from modules.accounts.constants import UserRole, VerificationStatus
from modules.listings.constants import ListingVisibility
from modules.listings.dtos import CreateListingDTO, UpdateListingDTO
from modules.listings.exceptions import ListingNotAllowed, ListingNotFound
from modules.listings.models import Listing
from modules.listings.policy import can_create_listing, can_manage_listing
from modules.listings.repositories.django_repository import ListingDjangoRepository
from modules.listings.services import ListingService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ListingService(repository=ListingDjangoRepository())


PHONE = CreateListingDTO(title="Tecno Camon 20", price=95_000, delivery_fee=2_000)


class TestPolicy:
    def test_unverified_member_cannot_post(self):
        actor = Actor(id="U1", role=UserRole.BUYER_SELLER)
        assert can_create_listing(actor) is False

    def test_verified_member_can_post(self):
        actor = Actor(
            id="U1",
            role=UserRole.BUYER_SELLER,
            verification_status=VerificationStatus.VERIFIED,
        )
        assert can_create_listing(actor) is True

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.AGENT])
    def test_staff_can_post(self, role):
        assert can_create_listing(Actor(id="U1", role=role)) is True

    def test_anonymous_cannot_post(self):
        assert can_create_listing(None) is False

    def test_only_owner_or_admin_manages(self, listing):
        owner = Actor(id=str(listing.seller_id), role=UserRole.BUYER_SELLER)
        stranger = Actor(id="X1", role=UserRole.BUYER_SELLER)
        admin = Actor(id="AD1", role=UserRole.ADMIN)
        assert can_manage_listing(owner, listing)
        assert can_manage_listing(admin, listing)
        assert not can_manage_listing(stranger, listing)


class TestCreateListing:
    def test_verified_seller_publishes(self, service, seller, actor_of):
        listing = service.create_listing(actor_of(seller), PHONE)
        assert listing.seller_id == seller.id
        assert listing.delivery_fee == 2_000

    def test_unverified_buyer_refused(self, service, buyer, actor_of):
        with pytest.raises(ListingNotAllowed):
            service.create_listing(actor_of(buyer), PHONE)
        assert not Listing.objects.filter(title=PHONE.title).exists()

    def test_pre_order_requires_arrival_date(self):
        with pytest.raises(ValidationError):
            CreateListingDTO(title="PS5", price=300_000, is_pre_order=True)

    def test_pre_order_with_arrival(self, service, seller, actor_of):
        dto = CreateListingDTO(
            title="PS5",
            price=300_000,
            is_pre_order=True,
            expected_arrival=date(2030, 1, 15),
        )
        assert service.create_listing(actor_of(seller), dto).is_pre_order

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            CreateListingDTO(title="Free", price=0)


class TestManageListing:
    def test_owner_updates(self, service, listing, seller, actor_of):
        updated = service.update_listing(
            actor_of(seller), str(listing.id), UpdateListingDTO(price=430_000)
        )
        assert updated.price == 430_000
        assert updated.title == "iPhone 14 Pro Max 256GB"

    def test_stranger_cannot_update(self, service, listing, buyer, actor_of):
        with pytest.raises(ListingNotAllowed):
            service.update_listing(
                actor_of(buyer), str(listing.id), UpdateListingDTO(price=1)
            )

    def test_delete_is_soft(self, service, listing, seller, actor_of):
        service.delete_listing(actor_of(seller), str(listing.id))
        assert Listing.objects.get(id=listing.id).is_deleted
        with pytest.raises(ListingNotFound):
            service.get_listing(actor_of(seller), str(listing.id))


class TestVisibility:
    def test_private_listing_hidden_from_others(self, service, listing, seller, buyer, actor_of):
        listing.visibility = ListingVisibility.PRIVATE
        listing.save()

        with pytest.raises(ListingNotFound):
            service.get_listing(actor_of(buyer), str(listing.id))
        assert service.get_listing(actor_of(seller), str(listing.id)).id == listing.id
        assert list(service.list_listings(actor_of(buyer))) == []

    def test_anonymous_sees_public_listings(self, service, listing):
        assert [item.id for item in service.list_listings(None)] == [listing.id]
