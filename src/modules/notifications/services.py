"""Notification service layer.

``on_status_change`` turns a committed status change into stored
notifications; the remaining operations back the notification bell.
Admins read their own notifications plus the admin broadcasts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional

import structlog
from django.db import transaction

from modules.accounts.constants import UserRole
from modules.notifications.constants import ADMIN_BROADCAST_RECIPIENT
from modules.notifications.dispatch import get_status_notifications

if TYPE_CHECKING:
    from modules.accounts.actor import Actor
    from modules.notifications.models import Notification
    from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


def recipient_ids_for(actor: Actor) -> list[str]:
    recipients = [str(actor.id)]
    if actor.role == UserRole.ADMIN:
        recipients.append(ADMIN_BROADCAST_RECIPIENT)
    return recipients


class NotificationService:
    def __init__(self, repository: INotificationRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    @transaction.atomic
    def on_status_change(
        self, transaction: Any, new_status: str, acting_user_id: Optional[str]
    ) -> List[Notification]:
        drafts = get_status_notifications(transaction, new_status, acting_user_id)
        notifications = [
            self._repo.save_notification(
                recipient_id=draft.recipient_id,
                message=draft.message,
                type=draft.type,
                transaction_id=draft.transaction_id,
            )
            for draft in drafts
        ]
        logger.info(
            "notification.dispatched",
            transaction_id=str(getattr(transaction, "id", "")),
            new_status=new_status,
            count=len(notifications),
        )
        return notifications

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_notifications(self, actor: Actor):
        return self._repo.get_user_notifications(recipient_ids_for(actor))

    def unread_count(self, actor: Actor) -> int:
        return self._repo.unread_count(recipient_ids_for(actor))

    def has_unread(self, actor: Actor, types: Iterable[str]) -> bool:
        return self._repo.has_unread_by_type(recipient_ids_for(actor), types)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def mark_read(
        self,
        actor: Actor,
        ids: Optional[Iterable[str]] = None,
        types: Optional[Iterable[str]] = None,
    ) -> int:
        """Mark by id, or by type when no ids are given."""
        recipients = recipient_ids_for(actor)
        if ids:
            return self._repo.mark_as_read(recipients, ids)
        if types:
            return self._repo.mark_type_as_read(recipients, types)
        return 0

    def mark_all_read(self, actor: Actor) -> int:
        updated = self._repo.mark_all_as_read(recipient_ids_for(actor))
        logger.info("notification.marked_all_read", actor_id=actor.id, count=updated)
        return updated
