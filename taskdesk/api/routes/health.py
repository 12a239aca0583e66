"""Health and diagnostics endpoints."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health probes."""

    status: str = "ok"
    service: str
    version: str


@router.get(
    "/",
    summary="Readiness probe",
    response_model=HealthResponse,
)
def readiness_probe(request: Request) -> HealthResponse:
    """Return a simple readiness response."""
    settings = request.app.state.settings
    return HealthResponse(service=settings.project_name, version=settings.version)
