import pytest

from modules.notifications.constants import ADMIN_BROADCAST_RECIPIENT, NotificationType
from modules.notifications.models import Notification

pytestmark = pytest.mark.integration

BASE_URL = "/api/v1/notifications/"


def _notify(recipient, message, type=NotificationType.BUYER):
    return Notification.objects.create(
        recipient_id=str(recipient), message=message, type=type
    )


@pytest.fixture()
def as_buyer(api_client, buyer):
    api_client.force_authenticate(user=buyer.user)
    return api_client


class TestListNotifications:
    def test_only_own_notifications(self, as_buyer, buyer, seller):
        _notify(buyer.id, "for buyer")
        _notify(seller.id, "for seller", NotificationType.SELLER)

        data = as_buyer.get(BASE_URL).json()

        assert data["count"] == 1
        assert data["results"][0]["message"] == "for buyer"
        assert data["results"][0]["is_read"] is False

    def test_admin_receives_broadcasts(self, api_client, admin):
        _notify(ADMIN_BROADCAST_RECIPIENT, "in transit", NotificationType.ADMIN)
        api_client.force_authenticate(user=admin.user)

        data = api_client.get(BASE_URL).json()

        assert [row["recipient_id"] for row in data["results"]] == [
            ADMIN_BROADCAST_RECIPIENT
        ]

    def test_requires_authentication(self, api_client):
        assert api_client.get(BASE_URL).status_code == 401


class TestUnreadCount:
    def test_count(self, as_buyer, buyer):
        _notify(buyer.id, "one")
        _notify(buyer.id, "two")
        assert as_buyer.get(f"{BASE_URL}unread-count/").json() == {"count": 2}

    def test_has_unread_by_type(self, as_buyer, buyer):
        _notify(buyer.id, "as buyer")
        response = as_buyer.get(
            f"{BASE_URL}unread-count/", {"types": ["seller"]}
        )
        assert response.json() == {"count": 1, "has_unread": False}

    def test_invalid_type_is_400(self, as_buyer):
        response = as_buyer.get(f"{BASE_URL}unread-count/", {"types": ["nobody"]})
        assert response.status_code == 400


class TestMarkRead:
    def test_mark_by_ids(self, as_buyer, buyer):
        first = _notify(buyer.id, "one")
        _notify(buyer.id, "two")

        response = as_buyer.post(
            f"{BASE_URL}mark-read/", {"ids": [str(first.id)]}, format="json"
        )

        assert response.json() == {"updated": 1}
        first.refresh_from_db()
        assert first.is_read is True

    def test_mark_by_type(self, as_buyer, buyer):
        _notify(buyer.id, "sold", NotificationType.SELLER)
        _notify(buyer.id, "bought")

        response = as_buyer.post(
            f"{BASE_URL}mark-read/", {"types": ["seller"]}, format="json"
        )

        assert response.json() == {"updated": 1}
        assert as_buyer.get(f"{BASE_URL}unread-count/").json()["count"] == 1

    def test_empty_body_is_400(self, as_buyer):
        response = as_buyer.post(f"{BASE_URL}mark-read/", {}, format="json")
        assert response.status_code == 400

    def test_mark_all(self, as_buyer, buyer, seller):
        _notify(buyer.id, "one")
        _notify(buyer.id, "two")
        other = _notify(seller.id, "untouched", NotificationType.SELLER)

        response = as_buyer.post(f"{BASE_URL}mark-all-read/")

        assert response.json() == {"updated": 2}
        other.refresh_from_db()
        assert other.is_read is False
