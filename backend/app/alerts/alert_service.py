"""
alert_service.py — Business logic gluing geocoding to the alert store.

    create:  address ──► GeocodingService.resolve ──► Alert ──► store.create
                              │
                              └─ no tier matched ──► InvalidAddressError (400)

    list / get / update / delete pass straight through to the store.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from backend.app.alerts.models import Alert
from backend.app.alerts.repository import SupabaseAlertRepository
from backend.app.core.errors import InvalidAddressError
from backend.app.geocoding.geocoding_service import GeocodingService
from backend.app.geocoding.models import AddressInput

logger = logging.getLogger(__name__)


class AlertService:

    def __init__(
        self,
        repository: SupabaseAlertRepository,
        geocoder: GeocodingService,
    ):
        self.repository = repository
        self.geocoder = geocoder

    async def create_alert(
        self,
        address: AddressInput,
        *,
        title: Optional[str] = None,
        message: Optional[str] = None,
        email_notification: Optional[str] = None,
    ) -> Alert:
        """
        Geocode the address and persist a new alert at that location.

        Raises:
            InvalidAddressError: no fallback tier produced a coordinate.
            CommunicationError: the store rejected the write.
        """
        coordinate = await self.geocoder.resolve(
            address.street,
            address.neighborhood,
            address.city,
            address.state,
            address.country,
        )
        if coordinate is None:
            raise InvalidAddressError(address.to_dict())

        alert = Alert.at(
            coordinate,
            title=title,
            message=message,
            email_notification=email_notification,
        )
        return await self.repository.create(alert)

    async def list_alerts(self) -> List[Alert]:
        return await self.repository.list()

    async def get_alert(self, alert_id: str) -> Optional[Alert]:
        return await self.repository.get_by_id(alert_id)

    async def update_alert(self, alert_id: str, alert: Alert) -> Optional[Alert]:
        return await self.repository.update(alert_id, alert)

    async def delete_alert(self, alert_id: str) -> None:
        await self.repository.delete(alert_id)
