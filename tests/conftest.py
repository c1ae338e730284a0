"""
Shared fixtures: in-process fakes for Nominatim and Supabase.

Both fakes are plain callables plugged into httpx.MockTransport, so the
real GeocodingService / SupabaseAlertRepository code paths run unchanged.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Tuple

import httpx
import pytest

from backend.app.alerts.alert_service import AlertService
from backend.app.alerts.repository import SupabaseAlertRepository
from backend.app.geocoding.geocoding_service import GeocodingService

GEOCODER_URL = "https://geocoder.test/search"
SUPABASE_URL = "https://project.supabase.test"
SUPABASE_KEY = "test-anon-key"


class FakeNominatim:
    """Answers only the queries listed in `answers`; everything else is []."""

    def __init__(self, answers: Optional[Dict[str, Tuple[float, float]]] = None):
        self.answers = answers or {}
        self.queries: List[str] = []
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        query = request.url.params.get("q")
        self.queries.append(query)
        if query in self.answers:
            lat, lon = self.answers[query]
            return httpx.Response(200, json=[{"lat": str(lat), "lon": str(lon)}])
        return httpx.Response(200, json=[])


class FakeSupabase:
    """Minimal PostgREST emulation of the `alerts` table."""

    CREATED_AT = "2025-05-01T12:00:00+00:00"

    def __init__(self, api_key: str = SUPABASE_KEY):
        self.api_key = api_key
        self.rows: Dict[str, dict] = {}
        self.requests: List[httpx.Request] = []
        self._next_id = 1

    def add(self, **row) -> dict:
        row.setdefault("id", str(self._next_id))
        row.setdefault("created_at", self.CREATED_AT)
        self._next_id += 1
        self.rows[row["id"]] = row
        return row

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("apikey") != self.api_key:
            return httpx.Response(401, json={"message": "Invalid API key"})

        id_filter = request.url.params.get("id")
        alert_id = id_filter[len("eq."):] if id_filter else None

        if request.method == "POST":
            return httpx.Response(201, json=[self.add(**json.loads(request.content))])
        if request.method == "GET":
            if alert_id is None:
                return httpx.Response(200, json=list(self.rows.values()))
            row = self.rows.get(alert_id)
            return httpx.Response(200, json=[row] if row else [])
        if request.method == "PATCH":
            row = self.rows.get(alert_id)
            if row is None:
                return httpx.Response(200, json=[])
            row.update(json.loads(request.content))
            return httpx.Response(200, json=[row])
        if request.method == "DELETE":
            self.rows.pop(alert_id, None)
            return httpx.Response(204)
        return httpx.Response(405)


def make_geocoder(handler) -> GeocodingService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeocodingService(api_url=GEOCODER_URL, user_agent="alertae-tests/1.0", client=client)


def make_repository(handler, api_key: str = SUPABASE_KEY) -> SupabaseAlertRepository:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseAlertRepository(base_url=SUPABASE_URL, api_key=api_key, client=client)


@pytest.fixture
def nominatim() -> FakeNominatim:
    return FakeNominatim()


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def alert_service(nominatim: FakeNominatim, supabase: FakeSupabase) -> AlertService:
    return AlertService(
        repository=make_repository(supabase),
        geocoder=make_geocoder(nominatim),
    )


@pytest.fixture
def geocoder_for():
    """Factory: GeocodingService wired to an arbitrary request handler."""
    return make_geocoder


@pytest.fixture
def repository_for():
    """Factory: SupabaseAlertRepository wired to an arbitrary request handler."""
    return make_repository
