# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime, timezone

import httpx
from fastapi import APIRouter
from pydantic import BaseModel, Field

from src import __version__
from src.core.config import get_settings
from src.infrastructure.database import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class ComponentsHealth(BaseModel):
    """All components health status."""
    database: ComponentHealth | None = None
    identity_provider: ComponentHealth | None = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    checked_at: datetime = Field(description="When health was checked")
    components: ComponentsHealth = Field(default_factory=ComponentsHealth)


async def check_database() -> ComponentHealth:
    """Check the relational store connection."""
    start = time.time()
    if not await check_database_connection():
        return ComponentHealth(status="unhealthy", message="Database unreachable")
    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


async def check_identity_provider() -> ComponentHealth:
    """Check the identity provider's health endpoint."""
    identity = get_settings().identity
    start = time.time()
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(
                f"{identity.base_url.rstrip('/')}/auth/v1/health",
                headers={"apikey": identity.anon_key.get_secret_value()},
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Identity provider health check failed: %s", str(e))
        return ComponentHealth(status="unhealthy", message=type(e).__name__)

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report overall and per-component health.

    The service is "degraded" rather than down when a collaborator is
    unreachable; requests needing it fail with CollaboratorUnavailable.
    """
    settings = get_settings()

    components = ComponentsHealth(
        database=await check_database(),
        identity_provider=await check_identity_provider(),
    )
    healthy = all(
        component.status == "healthy"
        for component in (components.database, components.identity_provider)
    )

    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        checked_at=datetime.now(timezone.utc),
        components=components,
    )


@router.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "running"}
