"""Domain events for the Transactions bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class TransactionCreated(DomainEvent):
    seller_id: str = ""
    buyer_id: str = ""


@dataclass(frozen=True)
class TransactionStatusChanged(DomainEvent):
    """A status write committed; ``actor_id`` is the profile that caused it."""

    old_status: str = ""
    new_status: str = ""
    actor_id: str = ""
