import pytest
from django.db import connections

pytestmark = pytest.mark.integration


class TestHealthCheck:
    def test_reports_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_reports_each_dependency(self, client):
        services = client.get("/health").json()["services"]
        for name in ("database", "cache"):
            assert services[name]["status"] == "up"
            assert "response_time_ms" in services[name]

    def test_database_outage_returns_503(self, client, monkeypatch):
        def refuse():
            raise ConnectionError("db down")

        monkeypatch.setattr(connections["default"], "ensure_connection", refuse)
        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["services"]["database"] == {"status": "down"}
