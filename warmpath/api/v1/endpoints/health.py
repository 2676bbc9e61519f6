"""Health check API endpoints."""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from warmpath.core.config import settings
from warmpath.core.database import db_client

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="healthy, or degraded when the database is unreachable")
    service: str
    version: str
    environment: str
    database: str = Field(..., description="Database check result")
    database_error: Optional[str] = None


@router.get(
    "/",
    response_model=HealthCheckResponse,
    tags=["Health"],
    summary="Service and database health",
    operation_id="get_service_health_status",
)
async def health_check() -> HealthCheckResponse:
    # Always 200; a database outage is reported as "degraded" in the body
    db_health = await db_client.health_check()
    database_status = db_health.get("status", "unhealthy")

    return HealthCheckResponse(
        status="healthy" if database_status == "healthy" else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        database=database_status,
        database_error=db_health.get("error"),
    )
