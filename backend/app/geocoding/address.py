"""
address.py — Query building for the tiered geocoding fallback.

A structured address is turned into up to four free-text queries, from the
most specific to the most generic:

    Tier              Parts included
    ──────────────    ──────────────────────────────────────────────
    FULL              street, neighborhood, city, state, country
    WITHOUT_NUMBER    street (number removed), neighborhood, city, state, country
    NEIGHBORHOOD      neighborhood, city, state, country
    CITY              city, state, country

A tier is dropped when its query is empty or repeats the FULL query. The
WITHOUT_NUMBER tier is also dropped when removing the number does not change
the street. Later tiers are only compared with FULL, never with each other.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from backend.app.geocoding.models import AddressInput, GeocodingTier

SEPARATOR = ", "

_STANDALONE_NUMBER = re.compile(r"\b\d+\b")
_TRAILING_COMMA = re.compile(r",\s*$")
_NUMBER_MARKER = re.compile(r"\b(nº|n|num|número)\s*\d+\b")
_WHITESPACE = re.compile(r"\s+")


def format_address(
    street: str = "",
    neighborhood: str = "",
    city: str = "",
    state: str = "",
    country: str = "",
) -> str:
    """Join the non-empty parts with ', '."""
    parts = (street, neighborhood, city, state, country)
    return SEPARATOR.join(p for p in parts if p)


def remove_number_from_street(street: str) -> str:
    """
    Strip the house/unit number from a street line.

        "Rua das Flores, 123" -> "Rua das Flores"
        "Avenida Brasil 45"   -> "Avenida Brasil"
        "Avenida Brasil"      -> "Avenida Brasil"
    """
    if not street or not street.strip():
        return ""
    cleaned = _STANDALONE_NUMBER.sub("", street).strip()
    cleaned = _TRAILING_COMMA.sub("", cleaned).strip()
    cleaned = _NUMBER_MARKER.sub("", cleaned).strip()
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return cleaned


def build_queries(address: AddressInput) -> List[Tuple[GeocodingTier, str]]:
    """Return the (tier, query) pairs to try, in order, with skipped tiers removed."""
    full = format_address(
        address.street, address.neighborhood, address.city,
        address.state, address.country,
    )
    queries: List[Tuple[GeocodingTier, str]] = []

    if full:
        queries.append((GeocodingTier.FULL, full))

    street_without_number = remove_number_from_street(address.street)
    if street_without_number and street_without_number != address.street:
        without_number = format_address(
            street_without_number, address.neighborhood, address.city,
            address.state, address.country,
        )
        if without_number and without_number != full:
            queries.append((GeocodingTier.WITHOUT_NUMBER, without_number))

    neighborhood = format_address(
        "", address.neighborhood, address.city, address.state, address.country,
    )
    if neighborhood and neighborhood != full:
        queries.append((GeocodingTier.NEIGHBORHOOD, neighborhood))

    city = format_address("", "", address.city, address.state, address.country)
    if city and city != full:
        queries.append((GeocodingTier.CITY, city))

    return queries
