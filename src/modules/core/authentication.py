"""Supabase Auth JWT authentication backend for Django REST Framework.

Supabase signs user access tokens with the project's JWT secret (HS256)
and the ``authenticated`` audience.  The identity provider stays the
source of truth for credentials; this backend only validates the token
and maps its subject onto a local user + profile row so that role and
verification data can be read from the database.

Security decisions
------------------
* **Fail Closed** — any decode / validation error returns 401.
* ``algorithms`` is pinned to HS256, never taken from the token header.
* Tokens whose audience is not the Supabase audience are left to the
  next backend (SimpleJWT) instead of being rejected here.
"""

from __future__ import annotations

from typing import Any

import jwt as pyjwt
import structlog
from django.conf import settings
from jwt.exceptions import PyJWTError
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)

SUPABASE_ALGORITHM = "HS256"


class SupabaseJWTAuthentication(BaseAuthentication):
    """DRF authentication class that validates Supabase access tokens."""

    keyword = "Bearer"

    # ------------------------------------------------------------------
    # Public API (DRF contract)
    # ------------------------------------------------------------------

    def authenticate(self, request):
        """Return ``(user, token)`` or ``None`` when the token is not ours."""
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None

        token = self._extract_token(header)

        if not settings.SUPABASE_JWT_SECRET:
            return None
        if not self._token_targets_supabase(token):
            return None

        payload = self._decode_token(token)
        user = self._resolve_user(payload)
        logger.info("jwt.authenticated", provider="supabase", sub=payload["sub"])
        return (user, token)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_token(header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise AuthenticationFailed("Invalid Authorization header format.")
        return parts[1]

    @staticmethod
    def _token_targets_supabase(token: str) -> bool:
        try:
            payload = pyjwt.decode(
                token,
                options={
                    "verify_signature": False,
                    "verify_aud": False,
                    "verify_exp": False,
                },
            )
        except PyJWTError:
            return False
        audience = payload.get("aud")
        if isinstance(audience, list):
            return settings.SUPABASE_JWT_AUDIENCE in audience
        return audience == settings.SUPABASE_JWT_AUDIENCE

    @staticmethod
    def _decode_token(token: str) -> dict[str, Any]:
        try:
            payload = pyjwt.decode(
                token,
                settings.SUPABASE_JWT_SECRET,
                algorithms=[SUPABASE_ALGORITHM],
                audience=settings.SUPABASE_JWT_AUDIENCE,
                options={"require": ["sub", "exp"]},
            )
        except PyJWTError as exc:
            logger.warning("jwt.validation_failed", provider="supabase", error=str(exc))
            raise AuthenticationFailed(f"Token validation failed: {exc}") from exc
        return payload

    @staticmethod
    def _resolve_user(payload: dict[str, Any]):
        from modules.accounts.repositories.django_repository import (
            ProfileDjangoRepository,
        )

        metadata = payload.get("user_metadata") or {}
        profile = ProfileDjangoRepository().get_or_create_external(
            external_id=payload["sub"],
            email=payload.get("email") or "",
            phone=payload.get("phone") or "",
            name=metadata.get("name") or metadata.get("full_name") or "",
        )
        if not profile.user.is_active:
            raise AuthenticationFailed("User account is disabled.")
        return profile.user
