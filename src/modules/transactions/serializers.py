"""Transaction DRF serializers for API input/output.

Output serializers read the acting user from ``context["actor"]`` to
compute ``available_action`` and to decide whether the handoff code may
be shown.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.constants import UserRole
from modules.transactions.actions import get_available_action
from modules.transactions.identity import is_buyer
from modules.transactions.models import Invoice, Transaction, TransactionStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateTransactionSerializer(serializers.Serializer):
    listing_id = serializers.UUIDField()
    buyer_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    buyer_phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    buyer_email = serializers.EmailField(required=False, allow_blank=True)
    buyer_city = serializers.CharField(required=False, allow_blank=True, max_length=100)
    delivery_city = serializers.CharField(
        required=False, allow_blank=True, max_length=100
    )
    delivery_address = serializers.CharField(
        required=False, allow_blank=True, max_length=255
    )
    delivery_notes = serializers.CharField(required=False, allow_blank=True)


class ShipSerializer(serializers.Serializer):
    dropoff_company = serializers.CharField(
        required=False, allow_blank=True, max_length=150
    )
    dropoff_city = serializers.CharField(required=False, allow_blank=True, max_length=100)
    dropoff_note = serializers.CharField(required=False, allow_blank=True)


class AssignAgentSerializer(serializers.Serializer):
    agent_id = serializers.CharField(required=False, allow_blank=True)


class ConfirmationCodeSerializer(serializers.Serializer):
    code = serializers.CharField(required=False, allow_blank=True, max_length=20)


class RecordPaymentSerializer(serializers.Serializer):
    reference = serializers.CharField(required=False, allow_blank=True, max_length=100)


class CloseTransactionSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = TransactionStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "actor_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class ActorContextMixin:
    def _actor(self):
        return self.context.get("actor")

    def get_available_action(self, obj: Transaction):
        action = get_available_action(self._actor(), obj)
        if action is None:
            return None
        return {
            "type": action.type,
            "label": action.label,
            "waiting_for": action.waiting_for,
        }


class TransactionListSerializer(ActorContextMixin, serializers.ModelSerializer):
    """Lightweight serializer for list views (no history)."""

    status_label = serializers.CharField(source="get_status_display", read_only=True)
    total = serializers.IntegerField(read_only=True)
    available_action = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "product_name",
            "price",
            "delivery_fee",
            "total",
            "status",
            "status_label",
            "seller_id",
            "buyer_id",
            "assigned_agent_id",
            "is_pre_order",
            "available_action",
            "created_at",
        ]
        read_only_fields = fields


class TransactionSerializer(ActorContextMixin, serializers.ModelSerializer):
    status_label = serializers.CharField(source="get_status_display", read_only=True)
    total = serializers.IntegerField(read_only=True)
    payment_link = serializers.CharField(read_only=True)
    seller_name = serializers.CharField(source="seller.name", read_only=True)
    seller_city = serializers.CharField(source="seller.city", read_only=True)
    agent_name = serializers.SerializerMethodField()
    confirmation_code = serializers.SerializerMethodField()
    available_action = serializers.SerializerMethodField()
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "listing_id",
            "product_name",
            "description",
            "price",
            "delivery_fee",
            "total",
            "payment_link",
            "status",
            "status_label",
            "seller_id",
            "seller_name",
            "seller_city",
            "buyer_id",
            "buyer_name",
            "buyer_phone",
            "buyer_email",
            "buyer_city",
            "delivery_city",
            "delivery_address",
            "delivery_notes",
            "dropoff_company",
            "dropoff_city",
            "dropoff_note",
            "assigned_agent_id",
            "agent_name",
            "is_pre_order",
            "expected_arrival",
            "pre_order_note",
            "confirmation_code",
            "payment_reference",
            "closing_reason",
            "escrow_held_at",
            "completed_at",
            "closed_at",
            "available_action",
            "status_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_agent_name(self, obj: Transaction) -> str | None:
        agent = obj.assigned_agent
        return agent.name if agent else None

    def get_confirmation_code(self, obj: Transaction) -> str | None:
        """The buyer hands this code to the agent, so only they (and admins) see it."""
        actor = self._actor()
        if actor is None:
            return None
        if actor.role == UserRole.ADMIN or is_buyer(actor, obj):
            return obj.confirmation_code
        return None


class InvoiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Invoice
        fields = [
            "id",
            "transaction_id",
            "number",
            "issued_at",
            "seller_name",
            "seller_phone",
            "seller_city",
            "buyer_name",
            "buyer_phone",
            "buyer_city",
            "item_title",
            "item_price",
            "delivery_fee",
            "total",
            "is_pre_order",
        ]
        read_only_fields = fields
