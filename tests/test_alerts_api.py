"""
test_alerts_api.py — HTTP surface of /api/v1/alerts plus health endpoints.

The alert service is swapped through FastAPI dependency overrides so the
routes run against the in-process Nominatim / Supabase fakes.

Run with:
    pytest tests/test_alerts_api.py -v
"""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.app.alerts.alert_service import AlertService
from backend.app.api.v1.alerts import get_alert_service
from backend.app.main import app

CREATE_BODY = {
    "title": "Incêndio na floresta",
    "message": "Fogo avistado próximo ao bairro.",
    "email_notification": "usuario@example.com",
    "street": "Rua das Flores, 123",
    "neighborhood": "Centro",
    "city": "São Paulo",
    "state": "SP",
}


@pytest.fixture
def client(alert_service):
    app.dependency_overrides[get_alert_service] = lambda: alert_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_store_client(nominatim, geocoder_for, repository_for):
    service = AlertService(
        repository=repository_for(lambda request: httpx.Response(500, text="db down")),
        geocoder=geocoder_for(nominatim),
    )
    app.dependency_overrides[get_alert_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestCreate:

    def test_created(self, client, nominatim):
        nominatim.answers["São Paulo, SP, Brasil"] = (-23.5505, -46.6333)

        resp = client.post("/api/v1/alerts", json=CREATE_BODY)

        assert resp.status_code == 201
        data = resp.json()
        assert data["id"] == "1"
        assert data["title"] == "Incêndio na floresta"
        assert data["lat"] == -23.5505
        assert data["long"] == -46.6333
        assert data["created_at"]

    def test_country_defaults_to_brasil(self, client, nominatim):
        nominatim.answers["Rua das Flores, 123, Centro, São Paulo, SP, Brasil"] = (1.0, 2.0)
        resp = client.post("/api/v1/alerts", json=CREATE_BODY)
        assert resp.status_code == 201
        assert nominatim.queries == ["Rua das Flores, 123, Centro, São Paulo, SP, Brasil"]

    def test_unresolvable_address_is_400(self, client, supabase):
        resp = client.post("/api/v1/alerts", json=CREATE_BODY)

        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "INVALID_ADDRESS"
        assert error["details"]["address"]["street"] == "Rua das Flores, 123"
        assert supabase.requests == []

    def test_store_failure_is_500(self, failing_store_client, nominatim):
        nominatim.answers["São Paulo, SP, Brasil"] = (-23.5, -46.6)
        resp = failing_store_client.post("/api/v1/alerts", json=CREATE_BODY)

        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "COMMUNICATION_FAILURE"

    def test_body_validation_is_422(self, client):
        resp = client.post("/api/v1/alerts", json={"title": ["not", "a", "string"]})
        assert resp.status_code == 422


class TestReadUpdateDelete:

    def test_list(self, client, supabase):
        supabase.add(title="a", lat=1.0, long=2.0)
        supabase.add(title="b", lat=3.0, long=4.0)

        resp = client.get("/api/v1/alerts")

        assert resp.status_code == 200
        assert [a["title"] for a in resp.json()] == ["a", "b"]

    def test_list_empty(self, client):
        resp = client.get("/api/v1/alerts")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_get(self, client, supabase):
        supabase.add(id="abc", title="found", lat=1.0, long=2.0)
        resp = client.get("/api/v1/alerts/abc")
        assert resp.status_code == 200
        assert resp.json()["title"] == "found"

    def test_get_missing_is_404(self, client):
        resp = client.get("/api/v1/alerts/missing")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

    def test_update(self, client, supabase):
        supabase.add(id="7", title="old", message="keep")
        resp = client.put("/api/v1/alerts/7", json={"title": "new", "lat": 10.5})

        assert resp.status_code == 200
        assert resp.json()["title"] == "new"
        assert resp.json()["message"] == "keep"
        assert resp.json()["lat"] == 10.5

    def test_update_missing_is_404(self, client):
        resp = client.put("/api/v1/alerts/nope", json={"title": "x"})
        assert resp.status_code == 404

    def test_update_rejects_out_of_range_latitude(self, client):
        resp = client.put("/api/v1/alerts/7", json={"lat": 123.0})
        assert resp.status_code == 422

    def test_delete(self, client, supabase):
        supabase.add(id="9")
        resp = client.delete("/api/v1/alerts/9")

        assert resp.status_code == 204
        assert resp.content == b""
        assert supabase.rows == {}

    def test_store_failure_is_500(self, failing_store_client):
        assert failing_store_client.get("/api/v1/alerts").status_code == 500
        assert failing_store_client.get("/api/v1/alerts/1").status_code == 500
        assert failing_store_client.put("/api/v1/alerts/1", json={"title": "x"}).status_code == 500
        assert failing_store_client.delete("/api/v1/alerts/1").status_code == 500


class TestAmbientEndpoints:

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["docs"] == "/docs"

    def test_liveness(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_health_lists_components(self, client):
        names = {c["name"] for c in client.get("/health").json()["components"]}
        assert names == {"alert_store", "geocoder"}

    def test_request_id_header(self, client):
        resp = client.get("/api/v1/alerts", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"
        assert "X-Process-Time" in resp.headers
