"""Integration tests for API authentication.

Validates:
  - /health is public (plain Django view, no DRF).
  - Protected DRF endpoints fail closed with 401.
  - Supabase access tokens provision a local profile on first use.
  - Locally issued SimpleJWT tokens are accepted alongside them.
"""

import time

import jwt
import pytest
from django.conf import settings

from modules.accounts.models import Profile

pytestmark = pytest.mark.integration


def _supabase_token(sub="supabase-user-1", secret=None, aud="authenticated", **claims):
    payload = {
        "sub": sub,
        "aud": aud,
        "exp": int(time.time()) + 3600,
        "email": "ama@example.com",
        "phone": "237677000111",
        "user_metadata": {"name": "Ama Ngono"},
        **claims,
    }
    return jwt.encode(payload, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


class TestPublicEndpoints:
    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestProtectedEndpoints:
    def test_no_token_returns_401(self, api_client):
        assert api_client.get("/api/v1/me").status_code == 401

    def test_invalid_token_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        assert api_client.get("/api/v1/me").status_code == 401

    def test_malformed_auth_header_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Token some-token")
        assert api_client.get("/api/v1/me").status_code == 401

    def test_empty_bearer_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer ")
        assert api_client.get("/api/v1/me").status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/api/v1/me")
        assert "Bearer" in response.get("WWW-Authenticate", "")


class TestSupabaseTokens:
    def test_valid_token_provisions_profile(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {_supabase_token()}")

        response = api_client.get("/api/v1/me")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Ama Ngono"
        assert data["roles"] == ["BUYER"]
        assert Profile.objects.filter(external_id="supabase-user-1").count() == 1

    def test_second_request_reuses_profile(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {_supabase_token()}")
        first = api_client.get("/api/v1/me").json()
        second = api_client.get("/api/v1/me").json()
        assert first["id"] == second["id"]

    def test_wrong_signature_returns_401(self, api_client):
        token = _supabase_token(secret="not-the-project-secret-0123456789abcdef")
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        assert api_client.get("/api/v1/me").status_code == 401

    def test_expired_token_returns_401(self, api_client):
        token = _supabase_token(exp=int(time.time()) - 60)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        assert api_client.get("/api/v1/me").status_code == 401


class TestLocalTokens:
    def test_token_pair_grants_access(self, api_client, seller):
        seller.user.set_password("prolist123")
        seller.user.save()

        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": "abena", "password": "prolist123"},
            format="json",
        )
        assert response.status_code == 200

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.json()['access']}")
        me = api_client.get("/api/v1/me")
        assert me.status_code == 200
        assert me.json()["id"] == str(seller.id)
