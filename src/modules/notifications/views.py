"""Notification API views.

Every endpoint is scoped to the caller; admins also see the admin
broadcasts.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.repositories.django_repository import ProfileDjangoRepository
from modules.accounts.services import ProfileService
from modules.notifications.models import Notification
from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.serializers import (
    MarkReadSerializer,
    NotificationSerializer,
    TypesQuerySerializer,
)
from modules.notifications.services import NotificationService


class NotificationViewSet(GenericViewSet):
    queryset = Notification.objects.all()
    serializer_class = NotificationSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = NotificationService(repository=NotificationDjangoRepository())
        self._profiles = ProfileService(repository=ProfileDjangoRepository())

    def _actor(self, request: Request):
        if not request.user.is_authenticated:
            return None
        return self._profiles.get_actor(request.user)

    def get_queryset(self):
        actor = self._actor(self.request)
        if actor is None:
            return Notification.objects.none()
        return self._service.list_notifications(actor)

    def list(self, request: Request) -> Response:
        """GET /api/v1/notifications/"""
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(NotificationSerializer(page, many=True).data)

    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request: Request) -> Response:
        """GET /api/v1/notifications/unread-count/?types=seller&types=buyer"""
        query = TypesQuerySerializer(data={"types": request.query_params.getlist("types")})
        query.is_valid(raise_exception=True)
        actor = self._actor(request)
        types = query.validated_data.get("types")
        body = {"count": self._service.unread_count(actor)}
        if types:
            body["has_unread"] = self._service.has_unread(actor, types)
        return Response(body)

    @action(detail=False, methods=["post"], url_path="mark-read")
    def mark_read(self, request: Request) -> Response:
        """POST /api/v1/notifications/mark-read/"""
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ids = [str(value) for value in serializer.validated_data.get("ids", [])]
        updated = self._service.mark_read(
            self._actor(request),
            ids=ids,
            types=serializer.validated_data.get("types"),
        )
        return Response({"updated": updated}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request: Request) -> Response:
        """POST /api/v1/notifications/mark-all-read/"""
        updated = self._service.mark_all_read(self._actor(request))
        return Response({"updated": updated}, status=status.HTTP_200_OK)
