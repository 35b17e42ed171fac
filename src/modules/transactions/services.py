"""Transaction service layer (Use Cases).

Every command follows the same path inside one database transaction:

1. Load the transaction (``TransactionNotFound``).
2. Validate the action's own inputs (``InvalidSelection``).
3. Resolve referenced entities such as the delivery agent (``AgentNotFound``).
4. Evaluate the guard against the row just read (``TransitionDenied``).
5. Conditionally write the new status (``StaleTransaction``), append the
   history row and publish ``TransactionStatusChanged``.

Notification handlers subscribed to the event bus run synchronously, so
notifications commit or roll back together with the status change.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.accounts.constants import Role, UserRole
from modules.listings.exceptions import ListingNotFound
from modules.transactions.actions import get_available_action
from modules.transactions.constants import TransactionStatus
from modules.transactions.events import TransactionCreated, TransactionStatusChanged
from modules.transactions.exceptions import (
    AgentNotFound,
    InvalidConfirmationCode,
    InvalidSelection,
    InvoiceNotFound,
    TransactionNotFound,
    TransitionDenied,
)
from modules.transactions.identity import normalize_phone, same_id
from modules.transactions.permissions import (
    can_cancel,
    can_record_payment,
    can_refund,
    can_request_payment,
    can_transition,
    can_view_transaction,
)
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.accounts.actor import Actor
    from modules.accounts.repositories.interfaces import IProfileRepository
    from modules.listings.repositories.interfaces import IListingRepository
    from modules.transactions.actions import Action
    from modules.transactions.dtos import (
        AssignAgentDTO,
        CloseTransactionDTO,
        ConfirmationCodeDTO,
        CreateTransactionDTO,
        RecordPaymentDTO,
        ShipDTO,
    )
    from modules.transactions.models import Invoice, Transaction
    from modules.transactions.repositories.interfaces import ITransactionRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class TransactionService:
    """Application service for Transaction use-cases.

    Receives repositories and the event bus via constructor injection.
    """

    def __init__(
        self,
        transaction_repository: ITransactionRepository,
        profile_repository: IProfileRepository,
        listing_repository: IListingRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._tx_repo = transaction_repository
        self._profile_repo = profile_repository
        self._listing_repo = listing_repository
        self._event_bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_transaction(self, actor: Actor, dto: CreateTransactionDTO) -> Transaction:
        """Open a payment request for an active listing.

        A seller opening a request on their own listing leaves the buyer
        unclaimed; the first buyer to request payment claims it.  Anyone
        else becomes the buyer.

        Raises:
            ListingNotFound: listing missing, deleted or inactive.
            TransitionDenied: a non buyer/seller tries to buy.
        """
        log = logger.bind(actor_id=actor.id, listing_id=str(dto.listing_id))

        listing = self._listing_repo.get_by_id(str(dto.listing_id))
        if not listing or not listing.is_active:
            raise ListingNotFound(f"Listing {dto.listing_id} not found.")

        own_listing = same_id(listing.seller_id, actor.id)
        if not own_listing and actor.role != UserRole.BUYER_SELLER:
            log.warning("transaction.create_denied", role=actor.role)
            raise TransitionDenied()

        buyer_phone = normalize_phone(dto.buyer_phone)
        if not own_listing:
            buyer_phone = buyer_phone or normalize_phone(actor.phone)

        tx = self._tx_repo.create(
            {
                "listing_id": listing.id,
                "product_name": listing.title,
                "description": listing.description,
                "price": listing.price,
                "delivery_fee": listing.delivery_fee,
                "seller_id": listing.seller_id,
                "buyer_id": None if own_listing else actor.id,
                "buyer_name": dto.buyer_name,
                "buyer_phone": buyer_phone,
                "buyer_email": dto.buyer_email,
                "buyer_city": dto.buyer_city,
                "delivery_city": dto.delivery_city,
                "delivery_address": dto.delivery_address,
                "delivery_notes": dto.delivery_notes,
                "is_pre_order": listing.is_pre_order,
                "expected_arrival": listing.expected_arrival,
                "pre_order_note": listing.pre_order_note,
            }
        )

        tx.add_domain_event(
            TransactionCreated(
                aggregate_id=tx.id,
                seller_id=str(tx.seller_id),
                buyer_id=str(tx.buyer_id or ""),
            )
        )
        self._tx_repo.save(tx)
        self._tx_repo.add_history(
            transaction_id=tx.id,
            old_status=None,
            new_status=TransactionStatus.PENDING_SETUP,
            actor_id=actor.id,
            notes="Transaction created",
        )

        log.info("transaction.created", transaction_id=str(tx.id))
        return self._tx_repo.get_by_id(str(tx.id)) or tx

    # ------------------------------------------------------------------
    # Payment lifecycle
    # ------------------------------------------------------------------

    @transaction.atomic
    def request_payment(self, id: str, actor: Actor) -> Transaction:
        """``pending_setup -> awaiting_payment``; claims an unclaimed buyer slot."""
        tx = self._load(id)
        permitted = can_request_payment(actor, tx)

        fields: Dict[str, Any] = {}
        if permitted and not tx.buyer_id:
            fields["buyer_id"] = actor.id
            fields["buyer_phone"] = normalize_phone(actor.phone)

        return self._apply(
            tx,
            actor,
            TransactionStatus.AWAITING_PAYMENT,
            permitted,
            fields=fields,
            notes="Payment requested",
        )

    @transaction.atomic
    def record_payment(
        self, id: str, actor: Actor, dto: RecordPaymentDTO
    ) -> Transaction:
        """``awaiting_payment -> escrow_held`` and issue the invoice."""
        tx = self._load(id)
        tx = self._apply(
            tx,
            actor,
            TransactionStatus.ESCROW_HELD,
            can_record_payment(actor, tx),
            fields={
                "payment_reference": dto.reference,
                "escrow_held_at": timezone.now(),
            },
            notes="Payment secured in escrow",
        )
        self._tx_repo.attach_invoice(tx)
        return tx

    # ------------------------------------------------------------------
    # Delivery flow
    # ------------------------------------------------------------------

    @transaction.atomic
    def ship(self, id: str, actor: Actor, dto: ShipDTO) -> Transaction:
        """Seller hands the item to a courier bound for the hub."""
        tx = self._load(id)
        if not dto.dropoff_company:
            raise InvalidSelection("Please select a dropoff company")
        if not dto.dropoff_city:
            raise InvalidSelection("Please select the dropoff city")

        target = TransactionStatus.IN_TRANSIT_TO_HUB
        return self._apply(
            tx,
            actor,
            target,
            can_transition(actor, tx, target),
            fields={
                "dropoff_company": dto.dropoff_company,
                "dropoff_city": dto.dropoff_city,
                "dropoff_note": dto.dropoff_note,
            },
            notes=f"Dropped off with {dto.dropoff_company} ({dto.dropoff_city})",
        )

    @transaction.atomic
    def receive_at_hub(self, id: str, actor: Actor) -> Transaction:
        tx = self._load(id)
        target = TransactionStatus.AT_PROLIST_HUB
        return self._apply(
            tx,
            actor,
            target,
            can_transition(actor, tx, target),
            notes="Received at ProList Hub",
        )

    @transaction.atomic
    def assign_agent(self, id: str, actor: Actor, dto: AssignAgentDTO) -> Transaction:
        """Set the delivery agent and move to ``out_for_delivery`` in one write.

        Raises:
            TransactionNotFound: transaction does not exist.
            InvalidSelection: no agent selected.
            AgentNotFound: unknown profile or profile without the AGENT role.
            TransitionDenied: the guard rejected the move.
            StaleTransaction: the status changed since it was read.
        """
        tx = self._load(id)
        if not dto.agent_id:
            raise InvalidSelection("Please select a delivery agent")

        agent = self._profile_repo.get_by_id(dto.agent_id)
        if not agent or not agent.has_role(Role.AGENT):
            raise AgentNotFound("Agent not found")

        target = TransactionStatus.OUT_FOR_DELIVERY
        return self._apply(
            tx,
            actor,
            target,
            can_transition(actor, tx, target),
            fields={"assigned_agent_id": agent.id},
            notes=f"Assigned to {agent.name or agent.id}",
        )

    @transaction.atomic
    def mark_delivered(
        self, id: str, actor: Actor, dto: ConfirmationCodeDTO
    ) -> Transaction:
        """Assigned agent hands the item over after checking the buyer's code."""
        tx = self._load(id)
        target = TransactionStatus.DELIVERED_AWAITING_CONFIRMATION
        permitted = self._check_code(tx, actor, target, dto.code)
        return self._apply(tx, actor, target, permitted, notes="Delivered to buyer")

    @transaction.atomic
    def confirm_receipt(
        self, id: str, actor: Actor, dto: ConfirmationCodeDTO
    ) -> Transaction:
        """Buyer confirms receipt; escrow is released to the seller."""
        tx = self._load(id)
        target = TransactionStatus.COMPLETED
        permitted = self._check_code(tx, actor, target, dto.code)
        return self._apply(
            tx,
            actor,
            target,
            permitted,
            fields={"completed_at": timezone.now()},
            notes="Buyer confirmed receipt",
        )

    # ------------------------------------------------------------------
    # Side exits
    # ------------------------------------------------------------------

    @transaction.atomic
    def cancel(self, id: str, actor: Actor, dto: CloseTransactionDTO) -> Transaction:
        tx = self._load(id)
        return self._apply(
            tx,
            actor,
            TransactionStatus.CANCELLED,
            can_cancel(actor, tx),
            fields={"closing_reason": dto.reason, "closed_at": timezone.now()},
            notes=dto.reason or "Transaction cancelled",
        )

    @transaction.atomic
    def refund(self, id: str, actor: Actor, dto: CloseTransactionDTO) -> Transaction:
        tx = self._load(id)
        return self._apply(
            tx,
            actor,
            TransactionStatus.REFUNDED,
            can_refund(actor, tx),
            fields={"closing_reason": dto.reason, "closed_at": timezone.now()},
            notes=dto.reason or "Funds returned to the buyer",
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_transaction(self, id: str, actor: Optional[Actor]) -> Transaction:
        """Raises ``TransactionNotFound`` for missing and for invisible transactions."""
        tx = self._tx_repo.get_by_id(id)
        if not tx or not can_view_transaction(actor, tx):
            raise TransactionNotFound(f"Transaction {id} not found.")
        return tx

    def list_transactions(
        self, actor: Actor, filters: Optional[Dict[str, Any]] = None
    ):
        queryset = self._tx_repo.list_visible_to(actor)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_available_action(
        self, actor: Optional[Actor], tx: Transaction
    ) -> Optional[Action]:
        return get_available_action(actor, tx)

    def get_invoice(self, id: str, actor: Actor) -> Invoice:
        tx = self.get_transaction(id, actor)
        invoice = self._tx_repo.get_invoice(str(tx.id))
        if not invoice:
            raise InvoiceNotFound(f"No invoice issued for transaction {id}.")
        return invoice

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self, id: str) -> Transaction:
        tx = self._tx_repo.get_by_id(str(id))
        if not tx:
            raise TransactionNotFound(f"Transaction {id} not found.")
        return tx

    @staticmethod
    def _check_code(tx: Transaction, actor: Actor, target: str, code: str) -> bool:
        """Guard result for a handoff; a wrong code only surfaces when permitted."""
        if not code:
            raise InvalidSelection("Please enter the confirmation code")
        permitted = can_transition(actor, tx, target)
        if permitted and not secrets.compare_digest(
            code.upper(), tx.confirmation_code.upper()
        ):
            logger.warning(
                "transaction.confirmation_code_mismatch",
                transaction_id=str(tx.id),
                actor_id=actor.id,
            )
            raise InvalidConfirmationCode("The confirmation code does not match.")
        return permitted

    def _apply(
        self,
        tx: Transaction,
        actor: Optional[Actor],
        target: str,
        permitted: bool,
        fields: Optional[Dict[str, Any]] = None,
        notes: str = "",
    ) -> Transaction:
        actor_id = getattr(actor, "id", None)
        log = logger.bind(
            transaction_id=str(tx.id),
            actor_id=actor_id,
            role=getattr(actor, "role", None),
            current_status=tx.status,
            new_status=target,
        )
        if not permitted:
            log.warning("transaction.transition_denied")
            raise TransitionDenied()

        old_status = tx.status
        event = TransactionStatusChanged(
            aggregate_id=tx.id,
            old_status=old_status,
            new_status=target,
            actor_id=str(actor_id or ""),
        )
        tx.add_domain_event(event)
        self._tx_repo.update_status(tx, target, fields)
        self._tx_repo.add_history(
            transaction_id=tx.id,
            old_status=old_status,
            new_status=target,
            actor_id=actor_id,
            notes=notes,
        )

        log.info("transaction.status_updated")
        self._event_bus.publish(event)
        return self._tx_repo.get_by_id(str(tx.id)) or tx
