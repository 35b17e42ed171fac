"""Django ORM implementation of the notification store."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Iterable, Optional, Sequence

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.notifications.models import Notification
from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


class NotificationDjangoRepository(INotificationRepository):
    def get_by_id(self, id: str) -> Optional[Notification]:
        try:
            return Notification.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None):
        queryset = Notification.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Notification) -> Notification:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        try:
            deleted, _ = Notification.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        return deleted > 0

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    @transaction.atomic
    def save_notification(
        self,
        recipient_id: str,
        message: str,
        type: str,
        transaction_id: Optional[str] = None,
    ) -> Notification:
        log = logger.bind(recipient_id=recipient_id, type=type)
        window_start = timezone.now() - timedelta(
            seconds=settings.NOTIFICATION_DEDUP_WINDOW_SECONDS
        )
        existing = (
            Notification.objects.filter(
                recipient_id=recipient_id,
                message=message,
                created_at__gte=window_start,
            )
            .order_by("-created_at", "-id")
            .first()
        )
        if existing:
            log.info("notification.deduplicated", notification_id=str(existing.id))
            return existing

        notification = Notification.objects.create(
            recipient_id=recipient_id,
            message=message,
            type=type,
            transaction_id=transaction_id,
        )
        evicted = self._enforce_cap(recipient_id)
        log.info(
            "notification.created",
            notification_id=str(notification.id),
            evicted=evicted,
        )
        return notification

    @staticmethod
    def _enforce_cap(recipient_id: str) -> int:
        """Drop the recipient's oldest rows beyond the retention cap."""
        cap = settings.NOTIFICATION_MAX_PER_RECIPIENT
        stale_ids = list(
            Notification.objects.filter(recipient_id=recipient_id)
            .order_by("-created_at", "-id")
            .values_list("id", flat=True)[cap:]
        )
        if not stale_ids:
            return 0
        deleted, _ = Notification.objects.filter(id__in=stale_ids).delete()
        return deleted

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user_notifications(self, recipient_ids: Sequence[str]):
        return Notification.objects.filter(recipient_id__in=list(recipient_ids)).order_by(
            "-created_at", "-id"
        )

    def unread_count(self, recipient_ids: Sequence[str]) -> int:
        return self.get_user_notifications(recipient_ids).filter(is_read=False).count()

    def has_unread_by_type(
        self, recipient_ids: Sequence[str], types: Iterable[str]
    ) -> bool:
        return (
            self.get_user_notifications(recipient_ids)
            .filter(is_read=False, type__in=list(types))
            .exists()
        )

    # ------------------------------------------------------------------
    # Mark as read
    # ------------------------------------------------------------------

    @transaction.atomic
    def mark_as_read(self, recipient_ids: Sequence[str], ids: Iterable[str]) -> int:
        try:
            return (
                self.get_user_notifications(recipient_ids)
                .filter(id__in=list(ids), is_read=False)
                .update(is_read=True, updated_at=timezone.now())
            )
        except (ValueError, ValidationError):
            return 0

    @transaction.atomic
    def mark_all_as_read(self, recipient_ids: Sequence[str]) -> int:
        return (
            self.get_user_notifications(recipient_ids)
            .filter(is_read=False)
            .update(is_read=True, updated_at=timezone.now())
        )

    @transaction.atomic
    def mark_type_as_read(
        self, recipient_ids: Sequence[str], types: Iterable[str]
    ) -> int:
        return (
            self.get_user_notifications(recipient_ids)
            .filter(is_read=False, type__in=list(types))
            .update(is_read=True, updated_at=timezone.now())
        )
