"""Health endpoints: liveness, readiness and build info."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.config import settings

router = APIRouter(prefix="/health", tags=["health"])

# Readiness check name -> app.state attribute set during startup
READINESS_SERVICES = {
    "calendar": "calendar_server",
    "tools": "tool_client",
    "decisions": "decision_engine",
}


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime


class ProbeResponse(BaseModel):
    status: str
    checks: dict[str, str] | None = None


@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Service name, version and environment."""
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.app_env,
        timestamp=datetime.now(UTC),
    )


@router.get("/live", response_model=ProbeResponse, response_model_exclude_none=True)
async def liveness() -> ProbeResponse:
    return ProbeResponse(status="alive")


@router.get("/ready", response_model=ProbeResponse)
async def readiness(request: Request) -> ProbeResponse:
    """Ready once the calendar tools and the decision engine are wired up."""
    state = request.app.state
    checks = {"api": "ok"}
    for check, attribute in READINESS_SERVICES.items():
        checks[check] = "ok" if hasattr(state, attribute) else "not_initialized"

    status = "ready" if all(v == "ok" for v in checks.values()) else "not_ready"
    return ProbeResponse(status=status, checks=checks)
