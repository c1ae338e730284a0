"""
geocoding — Address to coordinate resolution.

Sub-modules:
    models             — AddressInput, Coordinate, GeocodingTier
    address            — query formatting and fallback tier construction
    geocoding_service  — Nominatim client and tiered resolver
"""

from .models import AddressInput, Coordinate, GeocodingTier
from .address import build_queries, format_address, remove_number_from_street
from .geocoding_service import GeocodingService

__all__ = [
    "AddressInput",
    "Coordinate",
    "GeocodingTier",
    "build_queries",
    "format_address",
    "remove_number_from_street",
    "GeocodingService",
]
