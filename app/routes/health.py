"""
Health check endpoints.
Used for deployment readiness checks: process, report store, AI oracle.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.settings import settings
from app.dependencies import get_oracle, get_report_repository
from app.services.moderation.base import TextOracle
from app.services.report_repository import ReportRepository

router = APIRouter(prefix="/health", tags=["Health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
async def health_check(oracle: TextOracle = Depends(get_oracle)):
    """
    Liveness plus moderation mode.

    `moderation: "held_back"` means no oracle is configured and every
    submission will be stored as rejected.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "moderation": "active" if oracle.is_enabled() else "held_back",
        "model": oracle.get_model_info().get("name"),
        "timestamp": _now(),
    }


@router.get("/db")
async def database_health(repository: ReportRepository = Depends(get_report_repository)):
    """Lightweight read against the report store; 503 when it fails."""
    try:
        details = repository.ping()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Report store unreachable: {e}",
        )

    return {"status": "healthy", **details, "timestamp": _now()}
