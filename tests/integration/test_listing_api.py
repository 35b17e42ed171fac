import pytest

from modules.listings.constants import ListingVisibility

pytestmark = pytest.mark.integration

BASE_URL = "/api/v1/listings/"

NEW_LISTING = {
    "title": "Samsung Galaxy A54",
    "price": 210000,
    "delivery_fee": 3000,
    "category": "electronics",
}


class TestCreateListing:
    def test_verified_seller_creates(self, api_client, seller):
        api_client.force_authenticate(user=seller.user)
        response = api_client.post(BASE_URL, NEW_LISTING, format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Samsung Galaxy A54"
        assert data["seller_id"] == str(seller.id)

    def test_unverified_buyer_forbidden(self, api_client, buyer):
        api_client.force_authenticate(user=buyer.user)
        response = api_client.post(BASE_URL, NEW_LISTING, format="json")
        assert response.status_code == 403

    def test_invalid_price_is_400(self, api_client, seller):
        api_client.force_authenticate(user=seller.user)
        response = api_client.post(BASE_URL, {**NEW_LISTING, "price": 0}, format="json")
        assert response.status_code == 400


class TestReadListings:
    def test_private_listing_hidden_from_others(self, api_client, buyer, listing):
        listing.visibility = ListingVisibility.PRIVATE
        listing.save()
        api_client.force_authenticate(user=buyer.user)

        assert api_client.get(f"{BASE_URL}{listing.id}/").status_code == 404
        assert api_client.get(BASE_URL).json()["count"] == 0

    def test_search(self, api_client, buyer, listing):
        api_client.force_authenticate(user=buyer.user)
        data = api_client.get(BASE_URL, {"search": "iphone"}).json()
        assert [row["id"] for row in data["results"]] == [str(listing.id)]


class TestManageListing:
    def test_owner_patches(self, api_client, seller, listing):
        api_client.force_authenticate(user=seller.user)
        response = api_client.patch(
            f"{BASE_URL}{listing.id}/", {"price": 440000}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["price"] == 440000

    def test_stranger_cannot_delete(self, api_client, buyer, listing):
        api_client.force_authenticate(user=buyer.user)
        assert api_client.delete(f"{BASE_URL}{listing.id}/").status_code == 403

    def test_owner_deletes(self, api_client, seller, listing):
        api_client.force_authenticate(user=seller.user)
        assert api_client.delete(f"{BASE_URL}{listing.id}/").status_code == 204
        assert api_client.get(f"{BASE_URL}{listing.id}/").status_code == 404
