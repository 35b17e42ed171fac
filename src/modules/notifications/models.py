"""Notification model.

``recipient_id`` is a profile id, or ``__ADMIN__`` for messages every
admin should see.  It is a plain string rather than a foreign key so the
broadcast recipient fits in the same column.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.notifications.constants import NotificationType


class Notification(BaseModel):
    recipient_id: models.CharField = models.CharField(max_length=64)
    message: models.CharField = models.CharField(max_length=255)
    type: models.CharField = models.CharField(
        max_length=10, choices=NotificationType.choices
    )
    is_read: models.BooleanField = models.BooleanField(default=False)
    transaction: models.ForeignKey = models.ForeignKey(
        "transactions.Transaction",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["recipient_id", "-created_at"],
                name="notifications_recipient_idx",
            ),
            models.Index(
                fields=["recipient_id", "is_read"],
                name="notifications_unread_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.recipient_id}: {self.message}"
