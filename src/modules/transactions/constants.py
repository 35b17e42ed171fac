"""Transaction domain constants.

Defines the status lifecycle, the per-role transition table and the
side exits into ``refunded`` / ``cancelled``.

Canonical forward order::

    pending_setup -> awaiting_payment -> escrow_held -> in_transit_to_hub
    -> at_prolist_hub -> out_for_delivery -> delivered_awaiting_confirmation
    -> completed
"""

from __future__ import annotations

import string

from django.db import models

from modules.accounts.constants import UserRole


class TransactionStatus(models.TextChoices):
    PENDING_SETUP = "pending_setup", "Setting Up"
    AWAITING_PAYMENT = "awaiting_payment", "Awaiting Payment"
    ESCROW_HELD = "escrow_held", "Payment Secured"
    IN_TRANSIT_TO_HUB = "in_transit_to_hub", "Shipped to Hub"
    AT_PROLIST_HUB = "at_prolist_hub", "Received at Hub"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for Delivery"
    DELIVERED_AWAITING_CONFIRMATION = (
        "delivered_awaiting_confirmation",
        "Delivered - Awaiting Confirmation",
    )
    COMPLETED = "completed", "Completed"
    REFUNDED = "refunded", "Refunded"
    CANCELLED = "cancelled", "Cancelled"


STATUS_ORDER: tuple[str, ...] = (
    TransactionStatus.PENDING_SETUP,
    TransactionStatus.AWAITING_PAYMENT,
    TransactionStatus.ESCROW_HELD,
    TransactionStatus.IN_TRANSIT_TO_HUB,
    TransactionStatus.AT_PROLIST_HUB,
    TransactionStatus.OUT_FOR_DELIVERY,
    TransactionStatus.DELIVERED_AWAITING_CONFIRMATION,
    TransactionStatus.COMPLETED,
)

SIDE_EXITS: frozenset[str] = frozenset(
    {TransactionStatus.REFUNDED, TransactionStatus.CANCELLED}
)

TERMINAL_STATES: frozenset[str] = SIDE_EXITS | {TransactionStatus.COMPLETED}

# Moves performed by people, keyed by acting role then current status.
# Any (role, status) pair missing here allows nothing.
ROLE_TRANSITIONS: dict[str, dict[str, frozenset[str]]] = {
    UserRole.BUYER_SELLER: {
        TransactionStatus.ESCROW_HELD: frozenset({TransactionStatus.IN_TRANSIT_TO_HUB}),
        TransactionStatus.DELIVERED_AWAITING_CONFIRMATION: frozenset(
            {TransactionStatus.COMPLETED}
        ),
    },
    UserRole.ADMIN: {
        TransactionStatus.IN_TRANSIT_TO_HUB: frozenset({TransactionStatus.AT_PROLIST_HUB}),
        TransactionStatus.AT_PROLIST_HUB: frozenset({TransactionStatus.OUT_FOR_DELIVERY}),
    },
    UserRole.AGENT: {
        TransactionStatus.OUT_FOR_DELIVERY: frozenset(
            {TransactionStatus.DELIVERED_AWAITING_CONFIRMATION}
        ),
    },
}

# Payment lifecycle moves, driven by the buyer and the payment provider.
PAYMENT_TRANSITIONS: dict[str, str] = {
    TransactionStatus.PENDING_SETUP: TransactionStatus.AWAITING_PAYMENT,
    TransactionStatus.AWAITING_PAYMENT: TransactionStatus.ESCROW_HELD,
}

# No funds collected yet: the sale can simply be called off.
CANCELLABLE_STATES: frozenset[str] = frozenset(
    {TransactionStatus.PENDING_SETUP, TransactionStatus.AWAITING_PAYMENT}
)

# Funds held in escrow and not yet released to the seller.
REFUNDABLE_STATES: frozenset[str] = frozenset(
    {
        TransactionStatus.ESCROW_HELD,
        TransactionStatus.IN_TRANSIT_TO_HUB,
        TransactionStatus.AT_PROLIST_HUB,
        TransactionStatus.OUT_FOR_DELIVERY,
        TransactionStatus.DELIVERED_AWAITING_CONFIRMATION,
    }
)

# Statuses in which an assigned agent must be present.
AGENT_REQUIRED_STATES: frozenset[str] = frozenset(
    {
        TransactionStatus.OUT_FOR_DELIVERY,
        TransactionStatus.DELIVERED_AWAITING_CONFIRMATION,
        TransactionStatus.COMPLETED,
    }
)

# Statuses in which no agent may be assigned yet.
PRE_DELIVERY_STATES: frozenset[str] = frozenset(STATUS_ORDER) - AGENT_REQUIRED_STATES

PERMISSION_DENIED_MESSAGE = (
    "Action not allowed — waiting for the previous step to be completed."
)
STALE_WRITE_MESSAGE = "This order was just updated elsewhere, please refresh."

CONFIRMATION_CODE_LENGTH = 6
CONFIRMATION_CODE_ALPHABET = string.ascii_uppercase + string.digits


def status_index(status: str) -> int:
    """Position in the canonical order; ``-1`` for the side exits."""
    try:
        return STATUS_ORDER.index(status)
    except ValueError:
        return -1
