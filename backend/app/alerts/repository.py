"""
repository.py — Alert persistence through the Supabase REST API.

Supabase exposes each table through PostgREST:

    Operation    Request                                         Success body
    ─────────    ─────────────────────────────────────────────   ──────────────
    create       POST   /rest/v1/alerts   Prefer: return=repr.   [row]
    list         GET    /rest/v1/alerts                          [row, …]
    get          GET    /rest/v1/alerts?id=eq.<id>                [row] or []
    update       PATCH  /rest/v1/alerts?id=eq.<id> Prefer: …     [row] or []
    delete       DELETE /rest/v1/alerts?id=eq.<id>                (204, empty)

Every request is authenticated with the project key sent twice, as the
`apikey` header and as a bearer token.

Any transport error, non-2xx status or body that is not a JSON array of
objects raises CommunicationError. Unlike geocoding, store failures are
never swallowed.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from backend.app.alerts.models import Alert
from backend.app.core.config import settings
from backend.app.core.errors import CommunicationError

logger = logging.getLogger(__name__)

SERVICE_NAME = "supabase"
ALERTS_PATH = "/rest/v1/alerts"


class SupabaseAlertRepository:
    """CRUD access to the `alerts` table."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.SUPABASE_ANON_KEY
        self.timeout = timeout if timeout is not None else settings.SUPABASE_TIMEOUT
        self._http_client = client

    @property
    def url(self) -> str:
        return self.base_url + ALERTS_PATH

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    def _headers(self, *, returning: bool = False) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }
        if returning:
            headers["Prefer"] = "return=representation"
        return headers

    @staticmethod
    def _by_id(alert_id: str) -> Dict[str, str]:
        return {"id": f"eq.{alert_id}"}

    # ── Operations ──

    async def create(self, alert: Alert) -> Alert:
        rows = await self._request(
            "POST", "create alert",
            json=alert.to_dict(exclude=("id", "created_at")),
            headers=self._headers(returning=True),
        )
        if not rows:
            raise CommunicationError(SERVICE_NAME, "create alert: no data returned")
        created = rows[0]
        logger.info("Alert created: %s", created.id, extra={"alert_id": created.id})
        return created

    async def list(self) -> List[Alert]:
        return await self._request("GET", "list alerts", headers=self._headers())

    async def get_by_id(self, alert_id: str) -> Optional[Alert]:
        rows = await self._request(
            "GET", "get alert",
            params=self._by_id(alert_id),
            headers=self._headers(),
        )
        return rows[0] if rows else None

    async def update(self, alert_id: str, alert: Alert) -> Optional[Alert]:
        rows = await self._request(
            "PATCH", "update alert",
            params=self._by_id(alert_id),
            json=alert.to_dict(exclude=("id",)),
            headers=self._headers(returning=True),
        )
        if not rows:
            logger.info("Update matched no alert: %s", alert_id, extra={"alert_id": alert_id})
            return None
        return rows[0]

    async def delete(self, alert_id: str) -> None:
        await self._request(
            "DELETE", "delete alert",
            params=self._by_id(alert_id),
            headers=self._headers(),
            expect_body=False,
        )
        logger.info("Alert deleted: %s", alert_id, extra={"alert_id": alert_id})

    # ── HTTP plumbing ──

    async def _request(
        self,
        method: str,
        action: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        expect_body: bool = True,
    ) -> List[Alert]:
        client = await self._get_client()
        try:
            response = await client.request(
                method, self.url, params=params, json=json, headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error("Supabase %s request error: %s", action, e)
            raise CommunicationError(SERVICE_NAME, f"{action}: {e}") from e

        if not response.is_success:
            logger.error(
                "Supabase %s failed with status %d: %.300s",
                action, response.status_code, response.text,
                extra={"service": SERVICE_NAME, "status_code": response.status_code},
            )
            raise CommunicationError(
                SERVICE_NAME, f"{action}: {response.text}",
                status_code=response.status_code,
            )

        if not expect_body:
            return []

        try:
            payload = response.json()
        except ValueError as e:
            raise CommunicationError(SERVICE_NAME, f"{action}: response is not JSON") from e

        if not isinstance(payload, list):
            raise CommunicationError(
                SERVICE_NAME, f"{action}: expected a JSON array, got {type(payload).__name__}",
            )

        try:
            return [Alert.from_dict(row) for row in payload]
        except (TypeError, ValueError) as e:
            raise CommunicationError(SERVICE_NAME, f"{action}: malformed alert row ({e})") from e
