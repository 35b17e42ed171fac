"""Transaction, TransactionStatusHistory and Invoice models.

Rules enforced at the database level:
- ``assigned_agent`` is empty before ``out_for_delivery`` and present from
  ``out_for_delivery`` through ``completed``; refunded and cancelled rows
  keep whatever they had.
- Amounts are whole XAF (no minor unit).

Transactions are never deleted.  Status is written only through the
repository's conditional update, never through ``save()`` on a loaded row.
"""

from __future__ import annotations

import secrets

from django.conf import settings
from django.db import models

from modules.core.models import BaseModel
from modules.transactions.constants import (
    AGENT_REQUIRED_STATES,
    CONFIRMATION_CODE_ALPHABET,
    CONFIRMATION_CODE_LENGTH,
    PRE_DELIVERY_STATES,
    SIDE_EXITS,
    TERMINAL_STATES,
    TransactionStatus,
)
from shared.domain.events import DomainEventMixin


def generate_confirmation_code() -> str:
    return "".join(
        secrets.choice(CONFIRMATION_CODE_ALPHABET)
        for _ in range(CONFIRMATION_CODE_LENGTH)
    )


class Transaction(DomainEventMixin, BaseModel):
    """One escrowed sale, from payment request to release or refund."""

    listing: models.ForeignKey = models.ForeignKey(
        "listings.Listing",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="transactions",
    )
    product_name: models.CharField = models.CharField(max_length=200)
    description: models.TextField = models.TextField(blank=True, default="")
    price: models.PositiveIntegerField = models.PositiveIntegerField()
    delivery_fee: models.PositiveIntegerField = models.PositiveIntegerField(default=0)

    # Parties
    seller: models.ForeignKey = models.ForeignKey(
        "accounts.Profile",
        on_delete=models.PROTECT,
        related_name="sales",
    )
    buyer: models.ForeignKey = models.ForeignKey(
        "accounts.Profile",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="purchases",
    )
    assigned_agent: models.ForeignKey = models.ForeignKey(
        "accounts.Profile",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="deliveries",
    )
    buyer_name: models.CharField = models.CharField(max_length=150, blank=True, default="")
    buyer_phone: models.CharField = models.CharField(
        max_length=32, blank=True, default="", db_index=True
    )
    buyer_email: models.EmailField = models.EmailField(blank=True, default="")
    buyer_city: models.CharField = models.CharField(max_length=100, blank=True, default="")

    # Delivery to the buyer
    delivery_city: models.CharField = models.CharField(max_length=100, blank=True, default="")
    delivery_address: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    delivery_notes: models.TextField = models.TextField(blank=True, default="")

    # Seller dropoff to the hub
    dropoff_company: models.CharField = models.CharField(
        max_length=150, blank=True, default=""
    )
    dropoff_city: models.CharField = models.CharField(max_length=100, blank=True, default="")
    dropoff_note: models.TextField = models.TextField(blank=True, default="")

    status: models.CharField = models.CharField(
        max_length=40,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING_SETUP,
    )
    is_pre_order: models.BooleanField = models.BooleanField(default=False)
    expected_arrival: models.DateField = models.DateField(null=True, blank=True)
    pre_order_note: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )

    confirmation_code: models.CharField = models.CharField(
        max_length=CONFIRMATION_CODE_LENGTH,
        default=generate_confirmation_code,
        editable=False,
    )
    payment_reference: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )
    closing_reason: models.TextField = models.TextField(blank=True, default="")

    escrow_held_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    completed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    closed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "transactions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="transactions_status_idx"),
            models.Index(fields=["seller", "-created_at"], name="transactions_seller_idx"),
            models.Index(fields=["buyer", "-created_at"], name="transactions_buyer_idx"),
            models.Index(
                fields=["assigned_agent", "status"],
                name="transactions_agent_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(
                        status__in=sorted(PRE_DELIVERY_STATES),
                        assigned_agent__isnull=True,
                    )
                    | models.Q(
                        status__in=sorted(AGENT_REQUIRED_STATES),
                        assigned_agent__isnull=False,
                    )
                    | models.Q(status__in=sorted(SIDE_EXITS))
                ),
                name="transactions_agent_matches_status",
            ),
        ]

    @property
    def total(self) -> int:
        return self.price + self.delivery_fee

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def payment_link(self) -> str:
        return f"{settings.PAYMENT_LINK_BASE_URL.rstrip('/')}/pay/{self.id}"

    def __str__(self) -> str:
        return f"{self.product_name} [{self.status}] ({self.id})"


class TransactionStatusHistory(BaseModel):
    """Append-only log of status changes; ``actor`` is empty for system writes."""

    transaction: models.ForeignKey = models.ForeignKey(
        "transactions.Transaction",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=40,
        choices=TransactionStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=40,
        choices=TransactionStatus.choices,
    )
    actor: models.ForeignKey = models.ForeignKey(
        "accounts.Profile",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "transaction_status_history"
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["transaction", "created_at"],
                name="tsh_transaction_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.transaction_id} : {self.old_status} -> {self.new_status}"


class Invoice(BaseModel):
    """Receipt issued once escrow is funded; a snapshot, never regenerated."""

    transaction: models.OneToOneField = models.OneToOneField(
        "transactions.Transaction",
        on_delete=models.PROTECT,
        related_name="invoice",
    )
    number: models.CharField = models.CharField(max_length=32, unique=True)
    issued_at: models.DateTimeField = models.DateTimeField()
    seller_name: models.CharField = models.CharField(max_length=150)
    seller_phone: models.CharField = models.CharField(max_length=32, blank=True, default="")
    seller_city: models.CharField = models.CharField(max_length=100, blank=True, default="")
    buyer_name: models.CharField = models.CharField(max_length=150, blank=True, default="")
    buyer_phone: models.CharField = models.CharField(max_length=32, blank=True, default="")
    buyer_city: models.CharField = models.CharField(max_length=100, blank=True, default="")
    item_title: models.CharField = models.CharField(max_length=200)
    item_price: models.PositiveIntegerField = models.PositiveIntegerField()
    delivery_fee: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    total: models.PositiveIntegerField = models.PositiveIntegerField()
    is_pre_order: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "invoices"
        ordering = ["-issued_at"]

    def __str__(self) -> str:
        return self.number
