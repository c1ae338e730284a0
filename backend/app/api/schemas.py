"""
Pydantic schemas for the alerts API.

Separated from the route handler so they are reusable across
the codebase (tests, scripts).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from backend.app.alerts.models import Alert
from backend.app.core.config import settings
from backend.app.geocoding.models import AddressInput


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class AlertCreateRequest(BaseModel):
    """
    Alert details plus the address to geocode.

    Coordinates are never accepted here; they are resolved from the address.
    """
    title: Optional[str] = Field(None, max_length=200, examples=["Incêndio na floresta"])
    message: Optional[str] = Field(
        None, max_length=5000,
        examples=["Um incêndio de grandes proporções foi avistado na floresta próxima ao bairro X."],
    )
    email_notification: Optional[str] = Field(None, max_length=320, examples=["usuario@example.com"])
    street: Optional[str] = Field(None, description="Street and number", examples=["Rua das Flores, 123"])
    neighborhood: Optional[str] = Field(None, examples=["Centro"])
    city: Optional[str] = Field(None, examples=["São Paulo"])
    state: Optional[str] = Field(None, description="State abbreviation", examples=["SP"])
    country: Optional[str] = Field(settings.DEFAULT_COUNTRY, examples=["Brasil"])

    def to_address(self) -> AddressInput:
        return AddressInput.build(
            self.street, self.neighborhood, self.city, self.state, self.country,
        )


class AlertUpdateRequest(BaseModel):
    """Partial update; fields left out are not sent to the store."""
    title: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = Field(None, max_length=5000)
    email_notification: Optional[str] = Field(None, max_length=320)
    lat: Optional[float] = Field(None, ge=-90.0, le=90.0, examples=[-23.5505])
    long: Optional[float] = Field(None, ge=-180.0, le=180.0, examples=[-46.6333])

    def to_alert(self) -> Alert:
        return Alert(
            title=self.title,
            message=self.message,
            email_notification=self.email_notification,
            latitude=self.lat,
            longitude=self.long,
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class AlertResponse(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    email_notification: Optional[str] = None
    lat: Optional[float] = None
    long: Optional[float] = None
    created_at: Optional[str] = None

    @classmethod
    def from_alert(cls, alert: Alert) -> "AlertResponse":
        return cls(
            id=alert.id,
            title=alert.title,
            message=alert.message,
            email_notification=alert.email_notification,
            lat=alert.latitude,
            long=alert.longitude,
            created_at=alert.created_at,
        )
