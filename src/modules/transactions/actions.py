"""Next-step resolution for the transaction screens.

``get_available_action`` tells a user what they can do right now on a
transaction: one concrete action, a ``waiting`` marker naming the party
the flow is blocked on, or ``None`` once the transaction is closed.

Every status has exactly one entry in ``_STEPS``; adding a status
without deciding its step fails at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from django.db import models

from modules.accounts.constants import UserRole
from modules.transactions.constants import TransactionStatus
from modules.transactions.identity import is_assigned_agent, is_buyer, is_seller


class ActionType(models.TextChoices):
    SELLER_SHIP = "seller_ship", "Mark In Transit"
    ADMIN_RECEIVE = "admin_receive", "Mark Received at Hub"
    ADMIN_ASSIGN = "admin_assign", "Assign Delivery Agent"
    AGENT_DELIVER = "agent_deliver", "Confirm Delivery"
    BUYER_CONFIRM = "buyer_confirm", "Confirm Received"
    WAITING = "waiting", "Waiting"


class Party(models.TextChoices):
    BUYER = "buyer", "Buyer"
    SELLER = "seller", "Seller"
    ADMIN = "admin", "Admin"
    AGENT = "agent", "Agent"


# Status each actionable type moves the transaction to.
ACTION_TARGETS: dict[str, str] = {
    ActionType.SELLER_SHIP: TransactionStatus.IN_TRANSIT_TO_HUB,
    ActionType.ADMIN_RECEIVE: TransactionStatus.AT_PROLIST_HUB,
    ActionType.ADMIN_ASSIGN: TransactionStatus.OUT_FOR_DELIVERY,
    ActionType.AGENT_DELIVER: TransactionStatus.DELIVERED_AWAITING_CONFIRMATION,
    ActionType.BUYER_CONFIRM: TransactionStatus.COMPLETED,
}


@dataclass(frozen=True)
class Action:
    type: str
    label: str
    waiting_for: Optional[str] = None

    @property
    def is_waiting(self) -> bool:
        return self.type == ActionType.WAITING

    @property
    def target_status(self) -> Optional[str]:
        return ACTION_TARGETS.get(self.type)


@dataclass(frozen=True)
class _Step:
    waiting_label: str
    waiting_for: str
    action: Optional[str] = None
    performed_by: Optional[Callable[[Any, Any], bool]] = None


def _seller(user: Any, tx: Any) -> bool:
    return user.role == UserRole.BUYER_SELLER and is_seller(user, tx)


def _buyer(user: Any, tx: Any) -> bool:
    return user.role == UserRole.BUYER_SELLER and is_buyer(user, tx)


def _admin(user: Any, tx: Any) -> bool:
    return user.role == UserRole.ADMIN


def _assigned_agent(user: Any, tx: Any) -> bool:
    return user.role == UserRole.AGENT and is_assigned_agent(user, tx)


_AWAITING_PAYMENT = _Step("Awaiting Payment", Party.BUYER)

_STEPS: dict[str, Optional[_Step]] = {
    TransactionStatus.PENDING_SETUP: _AWAITING_PAYMENT,
    TransactionStatus.AWAITING_PAYMENT: _AWAITING_PAYMENT,
    TransactionStatus.ESCROW_HELD: _Step(
        "Waiting for seller to ship", Party.SELLER, ActionType.SELLER_SHIP, _seller
    ),
    TransactionStatus.IN_TRANSIT_TO_HUB: _Step(
        "In transit to hub", Party.ADMIN, ActionType.ADMIN_RECEIVE, _admin
    ),
    TransactionStatus.AT_PROLIST_HUB: _Step(
        "At hub, awaiting assignment", Party.ADMIN, ActionType.ADMIN_ASSIGN, _admin
    ),
    TransactionStatus.OUT_FOR_DELIVERY: _Step(
        "Out for delivery", Party.AGENT, ActionType.AGENT_DELIVER, _assigned_agent
    ),
    TransactionStatus.DELIVERED_AWAITING_CONFIRMATION: _Step(
        "Awaiting buyer confirmation", Party.BUYER, ActionType.BUYER_CONFIRM, _buyer
    ),
    TransactionStatus.COMPLETED: None,
    TransactionStatus.REFUNDED: None,
    TransactionStatus.CANCELLED: None,
}

_unmapped = set(TransactionStatus.values) - set(_STEPS)
if _unmapped:
    raise RuntimeError(f"No action step defined for statuses: {sorted(_unmapped)}")


def get_available_action(user: Optional[Any], transaction: Any) -> Optional[Action]:
    if user is None:
        return None
    step = _STEPS.get(transaction.status)
    if step is None:
        return None
    if step.action is not None and step.performed_by(user, transaction):
        return Action(type=step.action, label=ActionType(step.action).label)
    return Action(
        type=ActionType.WAITING,
        label=step.waiting_label,
        waiting_for=step.waiting_for,
    )
