"""
FastAPI route: Alert CRUD.

    POST   /api/v1/alerts        — geocode the address and create an alert
    GET    /api/v1/alerts        — list alerts
    GET    /api/v1/alerts/{id}   — fetch one alert
    PUT    /api/v1/alerts/{id}   — update an alert
    DELETE /api/v1/alerts/{id}   — delete an alert

Errors are raised as AlertaeAPIError subclasses and rendered by the
handlers in core.errors (400 invalid address, 404 not found, 500
communication failure).
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from backend.app.alerts.alert_service import AlertService
from backend.app.alerts.repository import SupabaseAlertRepository
from backend.app.api.schemas import AlertCreateRequest, AlertResponse, AlertUpdateRequest
from backend.app.core.errors import NotFoundError
from backend.app.geocoding.geocoding_service import GeocodingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/alerts", tags=["alerts"])

# ═══════════════════════════════════════════════════════════════════════════
# Shared Services (singleton pattern)
# ═══════════════════════════════════════════════════════════════════════════

_geocoding_service: Optional[GeocodingService] = None
_alert_repository: Optional[SupabaseAlertRepository] = None


def get_geocoding_service() -> GeocodingService:
    global _geocoding_service
    if _geocoding_service is None:
        _geocoding_service = GeocodingService()
    return _geocoding_service


def get_alert_repository() -> SupabaseAlertRepository:
    global _alert_repository
    if _alert_repository is None:
        _alert_repository = SupabaseAlertRepository()
    return _alert_repository


def get_alert_service(
    repository: SupabaseAlertRepository = Depends(get_alert_repository),
    geocoder: GeocodingService = Depends(get_geocoding_service),
) -> AlertService:
    return AlertService(repository=repository, geocoder=geocoder)


async def close_services() -> None:
    """Release the HTTP clients held by the shared services."""
    if _geocoding_service is not None:
        await _geocoding_service.close()
    if _alert_repository is not None:
        await _alert_repository.close()


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@router.post(
    "",
    response_model=AlertResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an alert",
    description=(
        "Creates an alert, geocoding the given address to obtain latitude "
        "and longitude. Coordinates are not accepted in the request."
    ),
    responses={
        400: {"description": "Address could not be geocoded"},
        500: {"description": "Alert store or geocoder communication failure"},
    },
)
async def create_alert(
    body: AlertCreateRequest,
    service: AlertService = Depends(get_alert_service),
):
    alert = await service.create_alert(
        body.to_address(),
        title=body.title,
        message=body.message,
        email_notification=body.email_notification,
    )
    return AlertResponse.from_alert(alert)


@router.get(
    "",
    response_model=List[AlertResponse],
    summary="List alerts",
    responses={500: {"description": "Alert store communication failure"}},
)
async def list_alerts(service: AlertService = Depends(get_alert_service)):
    alerts = await service.list_alerts()
    return [AlertResponse.from_alert(a) for a in alerts]


@router.get(
    "/{alert_id}",
    response_model=AlertResponse,
    summary="Get an alert by id",
    responses={
        404: {"description": "Alert not found"},
        500: {"description": "Alert store communication failure"},
    },
)
async def get_alert(alert_id: str, service: AlertService = Depends(get_alert_service)):
    alert = await service.get_alert(alert_id)
    if alert is None:
        raise NotFoundError("Alert", id=alert_id)
    return AlertResponse.from_alert(alert)


@router.put(
    "/{alert_id}",
    response_model=AlertResponse,
    summary="Update an alert",
    description="Updates the given fields of an existing alert; lat/long may be changed directly.",
    responses={
        404: {"description": "Alert not found"},
        500: {"description": "Alert store communication failure"},
    },
)
async def update_alert(
    alert_id: str,
    body: AlertUpdateRequest,
    service: AlertService = Depends(get_alert_service),
):
    alert = await service.update_alert(alert_id, body.to_alert())
    if alert is None:
        raise NotFoundError("Alert", id=alert_id)
    return AlertResponse.from_alert(alert)


@router.delete(
    "/{alert_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an alert",
    responses={500: {"description": "Alert store communication failure"}},
)
async def delete_alert(alert_id: str, service: AlertService = Depends(get_alert_service)):
    await service.delete_alert(alert_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
