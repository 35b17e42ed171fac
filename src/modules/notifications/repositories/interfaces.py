"""Notification store interface.

Read and mark operations take the list of recipient ids the caller
answers to: a profile id, plus the admin broadcast recipient for admins.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from django.db import models

    from modules.notifications.models import Notification


class INotificationRepository(IRepository["Notification"]):
    @abstractmethod
    def save_notification(
        self,
        recipient_id: str,
        message: str,
        type: str,
        transaction_id: Optional[str] = None,
    ) -> Notification:
        """Store a notification.

        An identical (recipient, message) notification created inside the
        dedup window is returned instead of inserting a new row.  After an
        insert the recipient's oldest rows beyond the retention cap are
        removed.
        """

    @abstractmethod
    def get_user_notifications(
        self, recipient_ids: Sequence[str]
    ) -> "models.QuerySet[Notification]":
        """Newest first."""

    @abstractmethod
    def unread_count(self, recipient_ids: Sequence[str]) -> int: ...

    @abstractmethod
    def has_unread_by_type(
        self, recipient_ids: Sequence[str], types: Iterable[str]
    ) -> bool: ...

    @abstractmethod
    def mark_as_read(self, recipient_ids: Sequence[str], ids: Iterable[str]) -> int:
        """Mark the given notifications read; ids owned by others are ignored."""

    @abstractmethod
    def mark_all_as_read(self, recipient_ids: Sequence[str]) -> int: ...

    @abstractmethod
    def mark_type_as_read(
        self, recipient_ids: Sequence[str], types: Iterable[str]
    ) -> int: ...
