"""Transaction API views.

Exposes ``TransactionService`` via HTTP.  Each status action is a
``POST /transactions/{id}/<action>/`` endpoint; domain exceptions are
translated into status codes and the uniform ``{"detail": ...}`` body.
The view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Any, Callable

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.repositories.django_repository import ProfileDjangoRepository
from modules.accounts.services import ProfileService
from modules.listings.exceptions import ListingNotFound
from modules.listings.repositories.django_repository import ListingDjangoRepository
from modules.transactions.dtos import (
    AssignAgentDTO,
    CloseTransactionDTO,
    ConfirmationCodeDTO,
    CreateTransactionDTO,
    RecordPaymentDTO,
    ShipDTO,
)
from modules.transactions.exceptions import (
    AgentNotFound,
    InvalidSelection,
    InvoiceNotFound,
    StaleTransaction,
    TransactionNotFound,
    TransitionDenied,
)
from modules.transactions.filters import TransactionFilter
from modules.transactions.models import Transaction
from modules.transactions.repositories.django_repository import (
    TransactionDjangoRepository,
)
from modules.transactions.serializers import (
    AssignAgentSerializer,
    CloseTransactionSerializer,
    ConfirmationCodeSerializer,
    CreateTransactionSerializer,
    InvoiceSerializer,
    RecordPaymentSerializer,
    ShipSerializer,
    TransactionListSerializer,
    TransactionSerializer,
)
from modules.transactions.services import TransactionService

ACTION_NAMES = frozenset(
    {
        "request_payment",
        "pay",
        "ship",
        "receive",
        "assign",
        "deliver",
        "confirm",
        "cancel",
        "refund",
    }
)


class TransactionViewSet(GenericViewSet):
    """ViewSet for Transaction operations.

    All ORM access goes through the service/repository layer; the
    queryset is already scoped to what the caller may see.
    """

    queryset = Transaction.objects.all()
    serializer_class = TransactionSerializer
    filterset_class = TransactionFilter
    search_fields = ["product_name", "buyer_name"]
    ordering_fields = ["created_at", "price", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._profiles = ProfileService(repository=ProfileDjangoRepository())
        self._service = TransactionService(
            transaction_repository=TransactionDjangoRepository(),
            profile_repository=ProfileDjangoRepository(),
            listing_repository=ListingDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "transaction_creation"
        elif self.action in ACTION_NAMES:
            throttle_scope = "transaction_actions"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def _actor(self, request: Request):
        if not request.user.is_authenticated:
            return None
        return self._profiles.get_actor(request.user)

    def get_queryset(self):
        actor = self._actor(self.request)
        if actor is None:
            return Transaction.objects.none()
        return self._service.list_transactions(actor)

    def _render(self, request: Request, tx: Transaction, actor=None, code: int = 200):
        actor = actor or self._actor(request)
        data = TransactionSerializer(tx, context={"actor": actor}).data
        return Response(data, status=code)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/transactions/

        Opens a payment request against a listing.
        """
        serializer = CreateTransactionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = CreateTransactionDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        actor = self._actor(request)
        try:
            tx = self._service.create_transaction(actor, dto)
        except ListingNotFound:
            return Response(
                {"detail": "Listing not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except TransitionDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return self._render(request, tx, actor, status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/transactions/

        Only transactions visible to the caller; filtering by status,
        party and date range is handled by ``TransactionFilter``.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = TransactionListSerializer(
            page, many=True, context={"actor": self._actor(request)}
        )
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/transactions/{pk}/"""
        actor = self._actor(request)
        try:
            tx = self._service.get_transaction(pk or "", actor)
        except TransactionNotFound:
            return Response(
                {"detail": "Transaction not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return self._render(request, tx, actor)

    @action(detail=True, methods=["get"])
    def invoice(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/transactions/{pk}/invoice/"""
        try:
            invoice = self._service.get_invoice(pk or "", self._actor(request))
        except TransactionNotFound:
            return Response(
                {"detail": "Transaction not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvoiceNotFound:
            return Response(
                {"detail": "Invoice not issued yet."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(InvoiceSerializer(invoice).data)

    # ------------------------------------------------------------------
    # Status actions
    # ------------------------------------------------------------------

    def _command(
        self,
        request: Request,
        operation: Callable[..., Transaction],
        pk: str,
        *extra: Any,
    ) -> Response:
        """Run ``operation(pk, actor, *extra)`` and map domain exceptions to responses."""
        actor = self._actor(request)
        try:
            tx = operation(pk, actor, *extra)
        except TransactionNotFound:
            return Response(
                {"detail": "Transaction not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except AgentNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidSelection as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except TransitionDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except StaleTransaction as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return self._render(request, tx, actor)

    @staticmethod
    def _input(serializer_class, request: Request, dto_class):
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return dto_class(**serializer.validated_data)

    @action(detail=True, methods=["post"], url_path="request-payment")
    def request_payment(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/request-payment/"""
        return self._command(request, self._service.request_payment, pk or "")

    @action(detail=True, methods=["post"])
    def pay(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/pay/

        Records the payment provider's confirmation and funds escrow.
        """
        dto = self._input(RecordPaymentSerializer, request, RecordPaymentDTO)
        return self._command(request, self._service.record_payment, pk or "", dto)

    @action(detail=True, methods=["post"])
    def ship(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/ship/"""
        dto = self._input(ShipSerializer, request, ShipDTO)
        return self._command(request, self._service.ship, pk or "", dto)

    @action(detail=True, methods=["post"])
    def receive(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/receive/"""
        return self._command(request, self._service.receive_at_hub, pk or "")

    @action(detail=True, methods=["post"])
    def assign(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/assign/"""
        dto = self._input(AssignAgentSerializer, request, AssignAgentDTO)
        return self._command(request, self._service.assign_agent, pk or "", dto)

    @action(detail=True, methods=["post"])
    def deliver(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/deliver/"""
        dto = self._input(ConfirmationCodeSerializer, request, ConfirmationCodeDTO)
        return self._command(request, self._service.mark_delivered, pk or "", dto)

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/confirm/"""
        dto = self._input(ConfirmationCodeSerializer, request, ConfirmationCodeDTO)
        return self._command(request, self._service.confirm_receipt, pk or "", dto)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/cancel/"""
        dto = self._input(CloseTransactionSerializer, request, CloseTransactionDTO)
        return self._command(request, self._service.cancel, pk or "", dto)

    @action(detail=True, methods=["post"])
    def refund(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/transactions/{pk}/refund/"""
        dto = self._input(CloseTransactionSerializer, request, CloseTransactionDTO)
        return self._command(request, self._service.refund, pk or "", dto)
