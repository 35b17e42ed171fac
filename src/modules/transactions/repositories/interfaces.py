"""Transaction repository interface.

Status writes go through ``update_status``, a conditional update that
only succeeds while the row still holds the status the caller read.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.transactions.models import (
        Invoice,
        Transaction,
        TransactionStatusHistory,
    )


class ITransactionRepository(IRepository["Transaction"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Transaction:
        """Insert a new transaction in ``pending_setup``."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Transaction]":
        """Transactions with parties eager-loaded."""

    @abstractmethod
    def list_visible_to(self, actor: Any) -> "models.QuerySet[Transaction]":
        """Transactions the actor may see (admin: all; agent: assigned; others: own)."""

    @abstractmethod
    def update_status(
        self,
        transaction: Transaction,
        new_status: str,
        fields: Optional[Dict[str, Any]] = None,
    ) -> Transaction:
        """Write ``new_status`` (plus ``fields``) if the stored status is unchanged.

        Raises ``StaleTransaction`` when another writer got there first.
        Pending domain events on the aggregate go to the outbox in the
        same database transaction.
        """

    @abstractmethod
    def add_history(
        self,
        transaction_id: UUID,
        old_status: Optional[str],
        new_status: str,
        actor_id: Optional[str] = None,
        notes: str = "",
    ) -> TransactionStatusHistory:
        """Append an audit row."""

    @abstractmethod
    def attach_invoice(self, transaction: Transaction) -> Invoice:
        """Issue the invoice once; later calls return the existing one."""

    @abstractmethod
    def get_invoice(self, transaction_id: str) -> Optional[Invoice]:
        """The transaction's invoice, if issued."""
