"""
models.py — Data structures for address resolution.

Defines:
    • GeocodingTier — fallback levels, most to least specific
    • AddressInput  — the structured address a client submits
    • Coordinate    — a resolved (latitude, longitude) pair
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class GeocodingTier(str, Enum):
    """Fallback levels in the order they are tried."""
    FULL           = "full"            # street, neighborhood, city, state, country
    WITHOUT_NUMBER = "without_number"  # street minus house number, then the rest
    NEIGHBORHOOD   = "neighborhood"    # neighborhood, city, state, country
    CITY           = "city"            # city, state, country


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


@dataclass(frozen=True)
class AddressInput:
    """
    A structured postal address.

    Every field is optional; absent values become empty strings and all
    values are whitespace-trimmed, so downstream formatting never sees None.
    """
    street: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    country: str = ""

    @classmethod
    def build(
        cls,
        street: Optional[str] = None,
        neighborhood: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        country: Optional[str] = None,
    ) -> "AddressInput":
        return cls(
            street=_clean(street),
            neighborhood=_clean(neighborhood),
            city=_clean(city),
            state=_clean(state),
            country=_clean(country),
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Coordinate:
    """A point in WGS84 decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError("Coordinate values must be finite")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    @classmethod
    def parse(cls, lat: Any, lon: Any) -> Optional["Coordinate"]:
        """
        Build a Coordinate from provider values (numbers or numeric strings).

        Returns None when either value is missing, non-numeric, non-finite
        or outside the geographic range.
        """
        try:
            return cls(_to_float(lat), _to_float(lon))
        except (TypeError, ValueError):
            return None

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


def _to_float(value: Any) -> float:
    # bool is an int subclass; a provider sending true/false is malformed
    if value is None or isinstance(value, bool):
        raise TypeError("not a number")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise TypeError(f"unsupported coordinate type: {type(value).__name__}")
