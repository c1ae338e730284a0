"""
models.py — The alert record as stored in Supabase.

Wire format (PostgREST table `alerts`):

    {
        "id": "8d1c…",
        "title": "Incêndio na floresta",
        "message": "Fogo avistado próximo ao bairro.",
        "email_notification": "usuario@example.com",
        "lat": -23.55,
        "long": -46.63,
        "created_at": "2025-05-01T12:00:00+00:00"
    }

`id` and `created_at` are assigned by the store; they are None on records
built locally and left out of the request body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from backend.app.geocoding.models import Coordinate


@dataclass
class Alert:
    id: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    email_notification: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[str] = None

    @classmethod
    def at(
        cls,
        coordinate: Coordinate,
        *,
        title: Optional[str],
        message: Optional[str],
        email_notification: Optional[str],
    ) -> "Alert":
        """New, not yet persisted alert anchored at a coordinate."""
        return cls(
            title=title,
            message=message,
            email_notification=email_notification,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Alert":
        """
        Build an Alert from a store row.

        Raises TypeError/ValueError on rows that are not objects or carry
        non-numeric coordinates.
        """
        if not isinstance(data, dict):
            raise TypeError(f"alert row must be an object, got {type(data).__name__}")
        raw_id = data.get("id")
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            title=data.get("title"),
            message=data.get("message"),
            email_notification=data.get("email_notification"),
            latitude=_optional_float(data.get("lat")),
            longitude=_optional_float(data.get("long")),
            created_at=_optional_str(data.get("created_at")),
        )

    def to_dict(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """Wire representation; None values and excluded keys are dropped."""
        d = {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "email_notification": self.email_notification,
            "lat": self.latitude,
            "long": self.longitude,
            "created_at": self.created_at,
        }
        skip = set(exclude)
        return {k: v for k, v in d.items() if v is not None and k not in skip}


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("boolean is not a coordinate")
    return float(value)


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
