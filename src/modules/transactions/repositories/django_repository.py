"""Django ORM implementation of the Transaction repository.

Concurrency control on status changes is optimistic: ``update_status``
issues ``UPDATE ... WHERE id = ? AND status = <status read>`` and treats
zero affected rows as a stale write.  The caller is never retried
automatically.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction
from django.db.models import Q
from django.utils import timezone

from modules.accounts.constants import UserRole
from modules.core.models import Counter, OutboxEvent
from modules.transactions.exceptions import StaleTransaction
from modules.transactions.identity import normalize_phone
from modules.transactions.invoices import (
    INVOICE_COUNTER,
    format_invoice_number,
    invoice_fields,
)
from modules.transactions.models import Invoice, Transaction, TransactionStatusHistory
from modules.transactions.repositories.interfaces import ITransactionRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "transactions"


class TransactionDjangoRepository(ITransactionRepository):
    """Concrete Transaction repository backed by Django ORM."""

    @staticmethod
    def _queryset():
        return Transaction.objects.select_related(
            "seller", "buyer", "assigned_agent", "listing"
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Transaction]:
        """Transaction with parties and history; ``None`` for unknown or malformed ids."""
        try:
            return (
                self._queryset()
                .prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None):
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_visible_to(self, actor: Any):
        queryset = self._queryset()
        if actor.role == UserRole.ADMIN:
            return queryset
        if actor.role == UserRole.AGENT:
            return queryset.filter(assigned_agent_id=actor.id)

        party = Q(seller_id=actor.id) | Q(buyer_id=actor.id)
        phone = normalize_phone(actor.phone)
        if phone:
            party |= Q(buyer_phone=phone)
        return queryset.filter(party)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @db_transaction.atomic
    def create(self, data: Dict[str, Any]) -> Transaction:
        entity = Transaction(**data)
        return self.save(entity)

    @db_transaction.atomic
    def save(self, entity: Transaction) -> Transaction:
        is_new = entity._state.adding
        entity.save()
        event_count = self._flush_events(entity)
        logger.info(
            "transaction.saved",
            transaction_id=str(entity.id),
            is_new=is_new,
            event_count=event_count,
        )
        return entity

    def delete(self, id: str) -> bool:
        """Transactions are kept as historical records and never removed."""
        logger.warning("transaction.delete_refused", transaction_id=str(id))
        return False

    @db_transaction.atomic
    def update_status(
        self,
        transaction: Transaction,
        new_status: str,
        fields: Optional[Dict[str, Any]] = None,
    ) -> Transaction:
        expected_status = transaction.status
        values = {**(fields or {}), "status": new_status, "updated_at": timezone.now()}

        updated = Transaction.objects.filter(
            id=transaction.id, status=expected_status
        ).update(**values)
        if updated == 0:
            transaction.clear_domain_events()
            logger.warning(
                "transaction.stale_write",
                transaction_id=str(transaction.id),
                expected_status=expected_status,
                new_status=new_status,
            )
            raise StaleTransaction()

        for field, value in values.items():
            setattr(transaction, field, value)
        self._flush_events(transaction)
        return transaction

    @db_transaction.atomic
    def add_history(
        self,
        transaction_id: UUID,
        old_status: Optional[str],
        new_status: str,
        actor_id: Optional[str] = None,
        notes: str = "",
    ) -> TransactionStatusHistory:
        history = TransactionStatusHistory.objects.create(
            transaction_id=transaction_id,
            old_status=old_status,
            new_status=new_status,
            actor_id=actor_id,
            notes=notes,
        )
        logger.info(
            "transaction.history_added",
            transaction_id=str(transaction_id),
            old_status=old_status,
            new_status=new_status,
        )
        return history

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    @db_transaction.atomic
    def attach_invoice(self, transaction: Transaction) -> Invoice:
        existing = Invoice.objects.filter(transaction_id=transaction.id).first()
        if existing:
            return existing

        issued_at = timezone.now()
        sequence = Counter.next_value(INVOICE_COUNTER)
        number = format_invoice_number(timezone.localtime(issued_at).year, sequence)
        invoice = Invoice.objects.create(**invoice_fields(transaction, number, issued_at))
        logger.info(
            "invoice.issued",
            transaction_id=str(transaction.id),
            invoice_number=number,
        )
        return invoice

    def get_invoice(self, transaction_id: str) -> Optional[Invoice]:
        try:
            return Invoice.objects.filter(transaction_id=transaction_id).first()
        except (ValueError, ValidationError):
            return None

    # ------------------------------------------------------------------
    # Outbox
    # ------------------------------------------------------------------

    @staticmethod
    def _flush_events(entity: Transaction) -> int:
        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic=OUTBOX_TOPIC,
            )
        entity.clear_domain_events()
        return len(events)
