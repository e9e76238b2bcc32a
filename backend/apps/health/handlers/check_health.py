"""GET /health - Report reachability of Firestore and blob storage."""

import asyncio
from datetime import UTC, datetime

from fastapi import Depends
from pydantic import BaseModel, Field

from config import Settings, get_settings
from db import BlobStorage, FirestoreService
from dependencies import get_blob_storage, get_firestore_service

# --- Response Schemas ---


class ServiceStatus(BaseModel):
    """Status of one backing service."""

    name: str
    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="healthy, degraded or unhealthy")
    version: str
    environment: str
    services: list[ServiceStatus]
    timestamp: datetime


def overall_status(services: list[ServiceStatus]) -> str:
    """healthy if all are, unhealthy if none are, degraded otherwise."""
    healthy = sum(s.status == "healthy" for s in services)
    if healthy == len(services):
        return "healthy"
    if healthy == 0:
        return "unhealthy"
    return "degraded"


# --- Handler ---


async def check_health(
    settings: Settings = Depends(get_settings),
    firestore: FirestoreService = Depends(get_firestore_service),
    storage: BlobStorage = Depends(get_blob_storage),
) -> HealthResponse:
    firestore_health, storage_health = await asyncio.gather(
        firestore.health_check(), storage.health_check()
    )

    services = [
        ServiceStatus(name="firestore", **firestore_health),
        ServiceStatus(name="storage", **storage_health),
    ]

    return HealthResponse(
        status=overall_status(services),
        version="0.1.0",
        environment=settings.environment,
        services=services,
        timestamp=datetime.now(UTC),
    )
