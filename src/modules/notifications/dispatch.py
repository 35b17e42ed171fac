"""Who hears about a status change, and what they are told.

``get_status_notifications`` is a pure function: it never touches the
database and never raises.  Only the party who did *not* cause the
change is notified; admins are addressed through the broadcast
recipient and the assigned agent is always told about a new delivery.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from modules.notifications.constants import (
    ADMIN_BROADCAST_RECIPIENT,
    AGENT_ASSIGNED_MESSAGE,
    AT_HUB_MESSAGE,
    CANCELLED_MESSAGE,
    COMPLETED_MESSAGE,
    DELIVERED_MESSAGE,
    ESCROW_HELD_MESSAGE,
    IN_TRANSIT_MESSAGE,
    OUT_FOR_DELIVERY_MESSAGE,
    REFUNDED_MESSAGE,
    NotificationType,
)
from modules.transactions.constants import TransactionStatus


@dataclass(frozen=True)
class NotificationDraft:
    recipient_id: str
    message: str
    type: str
    transaction_id: Optional[str] = None


SELLER_MESSAGES: dict[str, str] = {
    TransactionStatus.ESCROW_HELD: ESCROW_HELD_MESSAGE,
    TransactionStatus.AT_PROLIST_HUB: AT_HUB_MESSAGE,
    TransactionStatus.COMPLETED: COMPLETED_MESSAGE,
}

BUYER_MESSAGES: dict[str, str] = {
    TransactionStatus.OUT_FOR_DELIVERY: OUT_FOR_DELIVERY_MESSAGE,
    TransactionStatus.DELIVERED_AWAITING_CONFIRMATION: DELIVERED_MESSAGE,
}

# Both parties hear about a side exit.
CLOSING_MESSAGES: dict[str, str] = {
    TransactionStatus.REFUNDED: REFUNDED_MESSAGE,
    TransactionStatus.CANCELLED: CANCELLED_MESSAGE,
}


def _party_id(value: Any) -> str:
    return str(value) if value else ""


def get_status_notifications(
    transaction: Any, new_status: str, acting_user_id: Optional[str]
) -> list[NotificationDraft]:
    tx_id = _party_id(getattr(transaction, "id", None)) or None
    seller_id = _party_id(getattr(transaction, "seller_id", None))
    buyer_id = _party_id(getattr(transaction, "buyer_id", None))
    agent_id = _party_id(getattr(transaction, "assigned_agent_id", None))
    actor_id = _party_id(acting_user_id)

    def notify_party(party_id: str) -> bool:
        return bool(party_id) and party_id != actor_id

    drafts: list[NotificationDraft] = []

    if new_status in SELLER_MESSAGES and notify_party(seller_id):
        drafts.append(
            NotificationDraft(
                seller_id, SELLER_MESSAGES[new_status], NotificationType.SELLER, tx_id
            )
        )

    if new_status in BUYER_MESSAGES and notify_party(buyer_id):
        drafts.append(
            NotificationDraft(
                buyer_id, BUYER_MESSAGES[new_status], NotificationType.BUYER, tx_id
            )
        )

    if new_status == TransactionStatus.IN_TRANSIT_TO_HUB:
        drafts.append(
            NotificationDraft(
                ADMIN_BROADCAST_RECIPIENT,
                IN_TRANSIT_MESSAGE,
                NotificationType.ADMIN,
                tx_id,
            )
        )

    if new_status == TransactionStatus.OUT_FOR_DELIVERY and agent_id:
        drafts.append(
            NotificationDraft(
                agent_id, AGENT_ASSIGNED_MESSAGE, NotificationType.AGENT, tx_id
            )
        )

    if new_status in CLOSING_MESSAGES:
        message = CLOSING_MESSAGES[new_status]
        if notify_party(seller_id):
            drafts.append(
                NotificationDraft(seller_id, message, NotificationType.SELLER, tx_id)
            )
        if notify_party(buyer_id):
            drafts.append(
                NotificationDraft(buyer_id, message, NotificationType.BUYER, tx_id)
            )

    return drafts
