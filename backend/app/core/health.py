"""
Health check aggregation — probe for the service and its collaborators.

Checks:
    • Alert store configuration (Supabase URL + key present)
    • Geocoding provider configuration (endpoint URL + User-Agent)

The checks are configuration-only: they never call the remote services,
so a readiness probe cannot burn Nominatim quota or Supabase requests.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List
from urllib.parse import urlparse

from backend.app.core.config import settings

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"  # partial functionality
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    name: str
    status: HealthStatus = HealthStatus.HEALTHY
    latency_ms: float = 0.0
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "latency_ms": round(self.latency_ms, 2),
        }
        if self.message:
            d["message"] = self.message
        if self.details:
            d["details"] = self.details
        return d


@dataclass
class HealthReport:
    status: HealthStatus = HealthStatus.HEALTHY
    version: str = settings.APP_VERSION
    environment: str = settings.ENVIRONMENT
    timestamp: str = ""
    uptime_seconds: float = 0.0
    components: List[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "version": self.version,
            "environment": self.environment,
            "timestamp": self.timestamp or datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": round(self.uptime_seconds, 1),
            "components": [c.to_dict() for c in self.components],
        }


_start_time = time.monotonic()


def _is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


async def check_alert_store() -> ComponentHealth:
    """Check the Supabase alert store is configured."""
    comp = ComponentHealth(name="alert_store")
    start = time.monotonic()

    if not _is_http_url(settings.SUPABASE_URL):
        comp.status = HealthStatus.UNHEALTHY
        comp.message = "SUPABASE_URL is not a valid http(s) URL"
    elif not settings.SUPABASE_ANON_KEY:
        comp.status = HealthStatus.UNHEALTHY
        comp.message = "SUPABASE_ANON_KEY is not set"
    else:
        comp.message = "Alert store configured"
    comp.details = {"host": urlparse(settings.SUPABASE_URL).netloc}
    comp.latency_ms = (time.monotonic() - start) * 1000
    return comp


async def check_geocoder() -> ComponentHealth:
    """Check the geocoding provider is configured."""
    comp = ComponentHealth(name="geocoder")
    start = time.monotonic()

    if not _is_http_url(settings.GEOCODING_API_URL):
        comp.status = HealthStatus.UNHEALTHY
        comp.message = "GEOCODING_API_URL is not a valid http(s) URL"
    elif not settings.GEOCODING_USER_AGENT:
        # Nominatim rejects anonymous clients
        comp.status = HealthStatus.DEGRADED
        comp.message = "GEOCODING_USER_AGENT is empty"
    else:
        comp.message = "Geocoder configured"
    comp.details = {"url": settings.GEOCODING_API_URL}
    comp.latency_ms = (time.monotonic() - start) * 1000
    return comp


async def run_health_check() -> HealthReport:
    """Run all health checks and aggregate into a report."""
    report = HealthReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=time.monotonic() - _start_time,
    )

    for check in (check_alert_store, check_geocoder):
        report.components.append(await check())

    statuses = [c.status for c in report.components]
    if HealthStatus.UNHEALTHY in statuses:
        report.status = HealthStatus.UNHEALTHY
    elif HealthStatus.DEGRADED in statuses:
        report.status = HealthStatus.DEGRADED
    else:
        report.status = HealthStatus.HEALTHY

    if report.status != HealthStatus.HEALTHY:
        logger.warning("Health check %s: %s", report.status.value, [
            c.message for c in report.components if c.status != HealthStatus.HEALTHY
        ])

    return report
