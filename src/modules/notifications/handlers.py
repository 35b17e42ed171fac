"""Event handlers that turn transaction events into notifications."""

from __future__ import annotations

from typing import Optional

import structlog

from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.services import NotificationService
from modules.transactions.events import TransactionStatusChanged
from modules.transactions.repositories.django_repository import (
    TransactionDjangoRepository,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class TransactionStatusChangedHandler(IEventHandler[TransactionStatusChanged]):
    """Re-reads the transaction so the assigned agent written with the status is seen."""

    def __init__(
        self,
        service: Optional[NotificationService] = None,
        transactions: Optional[TransactionDjangoRepository] = None,
    ) -> None:
        self._service = service or NotificationService(NotificationDjangoRepository())
        self._transactions = transactions or TransactionDjangoRepository()

    def handle(self, event: TransactionStatusChanged) -> None:
        tx = self._transactions.get_by_id(str(event.aggregate_id))
        if tx is None:
            logger.warning(
                "notification.transaction_missing",
                transaction_id=str(event.aggregate_id),
            )
            return
        self._service.on_status_change(tx, event.new_status, event.actor_id or None)


transaction_status_changed_handler = TransactionStatusChangedHandler()
