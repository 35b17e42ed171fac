"""Authorization guard for transaction status changes.

Every function here is a pure predicate over an actor-like object
(``id``, ``role``, ``phone``) and a transaction-like object
(``status``, ``seller_id``, ``buyer_id``, ``buyer_phone``,
``assigned_agent_id``).  None of them raise; an absent user is always
denied.  Callers evaluate the guard against the row they are about to
write, inside the same database transaction.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from modules.accounts.constants import UserRole
from modules.transactions.constants import (
    CANCELLABLE_STATES,
    PAYMENT_TRANSITIONS,
    REFUNDABLE_STATES,
    ROLE_TRANSITIONS,
    STATUS_ORDER,
    TransactionStatus,
    status_index,
)
from modules.transactions.identity import is_assigned_agent, is_buyer, is_seller


class ActorLike(Protocol):
    id: str
    role: str
    phone: str


class TransactionLike(Protocol):
    status: str
    seller_id: Any
    buyer_id: Any
    buyer_phone: str
    assigned_agent_id: Any


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------


def allowed_targets(role: Optional[str], current_status: str) -> frozenset[str]:
    return ROLE_TRANSITIONS.get(role or "", {}).get(current_status, frozenset())


def is_forward_move(current_status: str, target_status: str) -> bool:
    """True when ``target_status`` is exactly one step ahead in the canonical order."""
    current = status_index(current_status)
    return 0 <= current < len(STATUS_ORDER) - 1 and STATUS_ORDER[current + 1] == target_status


# ---------------------------------------------------------------------------
# Guard
# ---------------------------------------------------------------------------


def can_transition(
    user: Optional[ActorLike], transaction: TransactionLike, target_status: str
) -> bool:
    if user is None:
        return False

    if not is_forward_move(transaction.status, target_status):
        return False
    if target_status not in allowed_targets(user.role, transaction.status):
        return False

    if user.role == UserRole.BUYER_SELLER:
        if target_status == TransactionStatus.IN_TRANSIT_TO_HUB and not is_seller(
            user, transaction
        ):
            return False
        if target_status == TransactionStatus.COMPLETED and not is_buyer(
            user, transaction
        ):
            return False

    if user.role == UserRole.AGENT and not is_assigned_agent(user, transaction):
        return False

    return True


# ---------------------------------------------------------------------------
# Payment lifecycle
# ---------------------------------------------------------------------------


def can_request_payment(user: Optional[ActorLike], transaction: TransactionLike) -> bool:
    """Buyer opens payment; an unclaimed request may be claimed by any non-seller."""
    if user is None or user.role != UserRole.BUYER_SELLER:
        return False
    if PAYMENT_TRANSITIONS.get(transaction.status) != TransactionStatus.AWAITING_PAYMENT:
        return False
    if is_seller(user, transaction):
        return False
    return not transaction.buyer_id or is_buyer(user, transaction)


def can_record_payment(user: Optional[ActorLike], transaction: TransactionLike) -> bool:
    if user is None:
        return False
    if PAYMENT_TRANSITIONS.get(transaction.status) != TransactionStatus.ESCROW_HELD:
        return False
    if user.role == UserRole.ADMIN:
        return True
    return user.role == UserRole.BUYER_SELLER and is_buyer(user, transaction)


# ---------------------------------------------------------------------------
# Side exits
# ---------------------------------------------------------------------------


def can_cancel(user: Optional[ActorLike], transaction: TransactionLike) -> bool:
    """Before payment, an admin or either party may call the sale off."""
    if user is None or transaction.status not in CANCELLABLE_STATES:
        return False
    if user.role == UserRole.ADMIN:
        return True
    return user.role == UserRole.BUYER_SELLER and (
        is_seller(user, transaction) or is_buyer(user, transaction)
    )


def can_refund(user: Optional[ActorLike], transaction: TransactionLike) -> bool:
    """Only an admin returns escrowed funds, and only before release."""
    if user is None:
        return False
    return user.role == UserRole.ADMIN and transaction.status in REFUNDABLE_STATES


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------


def can_view_transaction(user: Optional[ActorLike], transaction: TransactionLike) -> bool:
    if user is None:
        return False
    if user.role == UserRole.ADMIN:
        return True
    if user.role == UserRole.AGENT:
        return is_assigned_agent(user, transaction)
    return is_seller(user, transaction) or is_buyer(user, transaction)
