"""Listing API views.

Exposes ``ListingService`` over HTTP; domain exceptions become
404 / 403 / 400 responses.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.repositories.django_repository import ProfileDjangoRepository
from modules.accounts.services import ProfileService
from modules.listings.dtos import CreateListingDTO, UpdateListingDTO
from modules.listings.exceptions import ListingNotAllowed, ListingNotFound
from modules.listings.filters import ListingFilter
from modules.listings.models import Listing
from modules.listings.repositories.django_repository import ListingDjangoRepository
from modules.listings.serializers import ListingInputSerializer, ListingSerializer
from modules.listings.services import ListingService


class ListingViewSet(GenericViewSet):
    queryset = Listing.objects.all()
    serializer_class = ListingSerializer
    filterset_class = ListingFilter
    search_fields = ["title", "description"]
    ordering_fields = ["created_at", "price"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ListingService(repository=ListingDjangoRepository())
        self._profiles = ProfileService(repository=ProfileDjangoRepository())

    def _actor(self, request: Request):
        if not request.user.is_authenticated:
            return None
        return self._profiles.get_actor(request.user)

    def get_queryset(self):
        return self._service.list_listings(self._actor(self.request))

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/listings/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(ListingSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            listing = self._service.get_listing(self._actor(request), pk or "")
        except ListingNotFound:
            return Response(
                {"detail": "Listing not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ListingSerializer(listing).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/listings/"""
        serializer = ListingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = CreateListingDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            listing = self._service.create_listing(self._actor(request), dto)
        except ListingNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(ListingSerializer(listing).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/listings/{pk}/"""
        serializer = ListingInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            dto = UpdateListingDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            listing = self._service.update_listing(self._actor(request), pk or "", dto)
        except ListingNotFound:
            return Response(
                {"detail": "Listing not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except ListingNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(ListingSerializer(listing).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/listings/{pk}/"""
        try:
            self._service.delete_listing(self._actor(request), pk or "")
        except ListingNotFound:
            return Response(
                {"detail": "Listing not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except ListingNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)
