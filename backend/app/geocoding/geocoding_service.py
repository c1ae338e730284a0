"""
Address geocoding with tiered fallback.

═══════════════════════════════════════════════════════════════════════════
NOMINATIM SEARCH API
═══════════════════════════════════════════════════════════════════════════

Endpoint: https://nominatim.openstreetmap.org/search

    GET /search?q=<free text>&format=json&limit=1
    User-Agent: <identifying string>   (required by the usage policy)

Response: JSON array of places, each with string `lat` / `lon` fields.

═══════════════════════════════════════════════════════════════════════════
FALLBACK RESOLUTION
═══════════════════════════════════════════════════════════════════════════

Clients send addresses that are often too specific for OpenStreetMap
(house numbers that are not mapped, misspelled streets). The resolver asks
the provider with progressively less specific queries (see address.py)
and returns the first coordinate found.

Tiers run one after the other, never in parallel. A provider failure in
one tier (HTTP error, timeout, bad JSON, empty result) is logged and the
next tier is tried. Only when every tier has come back empty does the
resolver report "not found", which callers treat as bad client input.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from backend.app.core.config import settings
from backend.app.geocoding.address import build_queries
from backend.app.geocoding.models import AddressInput, Coordinate

logger = logging.getLogger(__name__)


class GeocodingService:
    """
    Resolve structured addresses to coordinates.

    Usage:
        service = GeocodingService()
        coord = await service.resolve("Rua das Flores, 123", "Centro",
                                      "São Paulo", "SP", "Brasil")
        if coord is None:
            ...  # no tier matched
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_url = api_url or settings.GEOCODING_API_URL
        self.user_agent = user_agent or settings.GEOCODING_USER_AGENT
        self.timeout = timeout if timeout is not None else settings.GEOCODING_TIMEOUT
        self._http_client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()

    async def resolve(
        self,
        street: Optional[str] = None,
        neighborhood: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Optional[Coordinate]:
        """
        Resolve an address to a coordinate, relaxing it tier by tier.

        Returns:
            The first Coordinate any tier produced, or None if all tiers failed.
        """
        address = AddressInput.build(street, neighborhood, city, state, country)
        queries = build_queries(address)

        for tier, query in queries:
            coord = await self.geocode(query)
            if coord is not None:
                logger.info(
                    "Geocoding succeeded (%s): %s -> %.6f, %.6f",
                    tier.value, query, coord.latitude, coord.longitude,
                    extra={"tier": tier.value, "query": query, "outcome": "success"},
                )
                return coord
            logger.info(
                "Geocoding tier %s found nothing for: %s", tier.value, query,
                extra={"tier": tier.value, "query": query, "outcome": "no_result"},
            )

        logger.warning(
            "No geocoding tier resolved the address: %s (%d attempts)",
            queries[0][1] if queries else "<empty>", len(queries),
            extra={"outcome": "not_found"},
        )
        return None

    async def geocode(self, query: str) -> Optional[Coordinate]:
        """
        Single lookup against the provider.

        Never raises for provider-side problems; every failure is logged
        and reported as None so the caller can fall back to the next tier.
        """
        if not query or not query.strip():
            return None

        params = {"q": query, "format": "json", "limit": 1}
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        client = await self._get_client()
        try:
            response = await client.get(self.api_url, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(
                "Geocoding request error for '%s': %s", query, e,
                extra={"query": query, "outcome": "provider_error"},
            )
            return None

        if not response.is_success:
            logger.warning(
                "Geocoding request failed with status %d for '%s': %s",
                response.status_code, query, response.reason_phrase,
                extra={"query": query, "outcome": "provider_error",
                       "status_code": response.status_code},
            )
            return None

        try:
            data: Any = response.json()
        except ValueError:
            logger.warning(
                "Geocoding response for '%s' is not JSON: %.200s", query, response.text,
                extra={"query": query, "outcome": "malformed"},
            )
            return None

        return self._parse_first_result(query, data)

    def _parse_first_result(self, query: str, data: Any) -> Optional[Coordinate]:
        if not isinstance(data, list) or not data:
            logger.info(
                "No coordinates found for query '%s'", query,
                extra={"query": query, "outcome": "empty"},
            )
            return None

        first = data[0]
        if not isinstance(first, dict):
            logger.warning(
                "Unexpected geocoding result for '%s': %r", query, first,
                extra={"query": query, "outcome": "malformed"},
            )
            return None

        coord = Coordinate.parse(first.get("lat"), first.get("lon"))
        if coord is None:
            logger.warning(
                "Geocoding result for '%s' lacks valid lat/lon: %r", query, first,
                extra={"query": query, "outcome": "malformed"},
            )
        return coord
