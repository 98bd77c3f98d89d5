"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from yardtrack.core.config import get_settings
from yardtrack.core.database import check_db_connected, get_db
from yardtrack.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Service status and database connectivity, for load balancers and monitoring. No auth."""
    settings = get_settings()
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        auth_enabled=settings.AUTH_ENABLED,
    )
