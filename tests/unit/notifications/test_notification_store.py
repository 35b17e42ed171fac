"""Tests for the notification store: dedup window, retention cap, read marking."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.accounts.actor import Actor
from modules.accounts.constants import UserRole
from modules.notifications.constants import (
    ADMIN_BROADCAST_RECIPIENT,
    ESCROW_HELD_MESSAGE,
    NotificationType,
)
from modules.notifications.models import Notification
from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.services import NotificationService, recipient_ids_for

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return NotificationDjangoRepository()


@pytest.fixture()
def service(repo):
    return NotificationService(repository=repo)


def _save(repo, recipient="S1", message="hello", type=NotificationType.SELLER):
    return repo.save_notification(recipient_id=recipient, message=message, type=type)


class TestDeduplication:
    def test_identical_message_within_window_is_reused(self, repo):
        first = _save(repo)
        second = _save(repo)
        assert first.id == second.id
        assert Notification.objects.filter(recipient_id="S1").count() == 1

    def test_different_message_is_stored(self, repo):
        _save(repo, message="one")
        _save(repo, message="two")
        assert Notification.objects.filter(recipient_id="S1").count() == 2

    def test_same_message_to_other_recipient_is_stored(self, repo):
        _save(repo, recipient="S1")
        _save(repo, recipient="S2")
        assert Notification.objects.count() == 2

    def test_window_expiry_allows_a_new_row(self, repo):
        start = timezone.now()
        with freeze_time(start):
            _save(repo)
        with freeze_time(start + timedelta(seconds=61)):
            _save(repo)
        assert Notification.objects.filter(recipient_id="S1").count() == 2

    def test_status_change_dispatched_twice_stores_one_row(self, service):
        class Tx:
            id = None
            seller_id = "S1"
            buyer_id = "B1"
            assigned_agent_id = None

        service.on_status_change(Tx(), "escrow_held", "B1")
        service.on_status_change(Tx(), "escrow_held", "B1")

        rows = Notification.objects.filter(recipient_id="S1")
        assert rows.count() == 1
        assert rows.get().message == ESCROW_HELD_MESSAGE


class TestRetentionCap:
    def test_oldest_rows_evicted_beyond_cap(self, repo, settings):
        settings.NOTIFICATION_MAX_PER_RECIPIENT = 10
        start = timezone.now()
        for i in range(12):
            with freeze_time(start + timedelta(seconds=i)):
                _save(repo, message=f"message {i}")

        messages = list(
            Notification.objects.filter(recipient_id="S1").values_list("message", flat=True)
        )
        assert len(messages) == 10
        assert "message 0" not in messages
        assert "message 1" not in messages
        assert messages[0] == "message 11"

    def test_cap_is_per_recipient(self, repo, settings):
        settings.NOTIFICATION_MAX_PER_RECIPIENT = 2
        for i in range(3):
            _save(repo, recipient="S1", message=f"s {i}")
        _save(repo, recipient="B1", message="b")
        assert Notification.objects.filter(recipient_id="S1").count() == 2
        assert Notification.objects.filter(recipient_id="B1").count() == 1


class TestReading:
    def test_admins_also_read_broadcasts(self):
        admin = Actor(id="AD1", role=UserRole.ADMIN)
        member = Actor(id="B1", role=UserRole.BUYER_SELLER)
        assert recipient_ids_for(admin) == ["AD1", ADMIN_BROADCAST_RECIPIENT]
        assert recipient_ids_for(member) == ["B1"]

    def test_unread_count_and_mark_all(self, repo, service):
        _save(repo, recipient="B1", message="a", type=NotificationType.BUYER)
        _save(repo, recipient="B1", message="b", type=NotificationType.BUYER)
        _save(repo, recipient="S1", message="c")
        buyer = Actor(id="B1", role=UserRole.BUYER_SELLER)

        assert service.unread_count(buyer) == 2
        assert service.mark_all_read(buyer) == 2
        assert service.unread_count(buyer) == 0
        assert Notification.objects.get(recipient_id="S1").is_read is False

    def test_mark_read_ignores_other_peoples_ids(self, repo, service):
        mine = _save(repo, recipient="B1", message="mine", type=NotificationType.BUYER)
        theirs = _save(repo, recipient="S1", message="theirs")
        buyer = Actor(id="B1", role=UserRole.BUYER_SELLER)

        updated = service.mark_read(buyer, ids=[str(mine.id), str(theirs.id)])

        assert updated == 1
        theirs.refresh_from_db()
        assert theirs.is_read is False

    def test_mark_read_by_type(self, repo, service):
        _save(repo, recipient="U1", message="as seller", type=NotificationType.SELLER)
        _save(repo, recipient="U1", message="as buyer", type=NotificationType.BUYER)
        user = Actor(id="U1", role=UserRole.BUYER_SELLER)

        assert service.has_unread(user, [NotificationType.SELLER]) is True
        service.mark_read(user, types=[NotificationType.SELLER])
        assert service.has_unread(user, [NotificationType.SELLER]) is False
        assert service.has_unread(user, [NotificationType.BUYER]) is True

    def test_admin_list_includes_broadcasts(self, repo, service):
        _save(repo, recipient=ADMIN_BROADCAST_RECIPIENT, message="in transit")
        _save(repo, recipient="AD1", message="direct")
        admin = Actor(id="AD1", role=UserRole.ADMIN)
        assert service.list_notifications(admin).count() == 2
