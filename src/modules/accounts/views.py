"""Profile API views.

Exposes ``ProfileService`` over HTTP.  Domain exceptions are caught and
translated into status codes; generic exceptions are never swallowed.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import ReviewVerificationDTO, SubmitVerificationDTO
from modules.accounts.exceptions import (
    ProfileNotFound,
    RoleChangeNotAllowed,
    VerificationStateError,
)
from modules.accounts.models import Profile
from modules.accounts.permissions import IsMarketplaceAdmin
from modules.accounts.repositories.django_repository import ProfileDjangoRepository
from modules.accounts.serializers import (
    AgentSerializer,
    GrantRoleSerializer,
    ProfileSerializer,
    RejectVerificationSerializer,
    SubmitVerificationSerializer,
)
from modules.accounts.services import ProfileService


class MeView(APIView):
    """GET /api/v1/me: the caller's profile with roles."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        service = ProfileService(repository=ProfileDjangoRepository())
        profile = service.get_for_user(request.user)
        return Response(ProfileSerializer(profile).data)


class ProfileViewSet(GenericViewSet):
    """Directory and verification endpoints.

    Listing, agent look-up, role grants and verification review are admin-only;
    any authenticated user may submit their own verification.
    """

    queryset = Profile.objects.all()
    serializer_class = ProfileSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProfileService(repository=ProfileDjangoRepository())

    def get_permissions(self):
        if self.action == "verification":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsMarketplaceAdmin()]

    # ------------------------------------------------------------------
    # Directory
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/profiles/?role=AGENT&verification_status=PENDING"""
        filters = {}
        role = request.query_params.get("role")
        if role:
            filters["role_assignments__role"] = role.upper()
        verification_status = request.query_params.get("verification_status")
        if verification_status:
            filters["verification_status"] = verification_status.upper()

        profiles = self._service.list_profiles(filters)
        page = self.paginate_queryset(profiles)
        return self.get_paginated_response(ProfileSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            profile = self._service.get_profile(pk or "")
        except ProfileNotFound:
            return Response(
                {"detail": "Profile not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ProfileSerializer(profile).data)

    @action(detail=False, methods=["get"])
    def agents(self, request: Request) -> Response:
        """GET /api/v1/profiles/agents/"""
        agents = self._service.list_agents()
        return Response(AgentSerializer(agents, many=True).data)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"])
    def verification(self, request: Request) -> Response:
        """POST /api/v1/profiles/verification/ (caller's own profile)"""
        serializer = SubmitVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = SubmitVerificationDTO(**serializer.validated_data)

        profile = self._service.get_for_user(request.user)
        try:
            profile = self._service.submit_verification(str(profile.id), dto)
        except VerificationStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ProfileSerializer(profile).data)

    @action(detail=True, methods=["post"])
    def approve(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/profiles/{pk}/approve/"""
        return self._review(pk, ReviewVerificationDTO(approve=True))

    @action(detail=True, methods=["post"])
    def reject(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/profiles/{pk}/reject/"""
        serializer = RejectVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = ReviewVerificationDTO(
            approve=False, reason=serializer.validated_data["reason"]
        )
        return self._review(pk, dto)

    def _review(self, pk: str | None, dto: ReviewVerificationDTO) -> Response:
        try:
            profile = self._service.review_verification(pk or "", dto)
        except ProfileNotFound:
            return Response(
                {"detail": "Profile not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except VerificationStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        profile = self._service.get_profile(str(profile.id))
        return Response(ProfileSerializer(profile).data)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def roles(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/profiles/{pk}/roles/ {"role": "AGENT"}"""
        serializer = GrantRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        actor = self._service.get_actor(request.user)
        try:
            profile = self._service.grant_role(
                actor, pk or "", serializer.validated_data["role"]
            )
        except RoleChangeNotAllowed as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except ProfileNotFound:
            return Response(
                {"detail": "Profile not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ProfileSerializer(profile).data)
