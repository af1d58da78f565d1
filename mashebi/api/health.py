"""Health checks: fixed liveness payload and a readiness check with database connectivity."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mashebi.core.config import settings
from mashebi.core.database import check_db_connected, get_db
from mashebi.schemas.health import LivenessResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=LivenessResponse)
def get_health() -> LivenessResponse:
    """Liveness probe for the deployment platform. Never touches the database."""
    return LivenessResponse()


@router.get("/ready", response_model=ReadinessResponse)
def get_ready(db: Session = Depends(get_db)) -> ReadinessResponse:
    """
    Return service status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return ReadinessResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
    )
