"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from civic_triage.core.errors import StorageError
from civic_triage.core.settings import settings
from civic_triage.services.engine import TriageEngine, get_triage_engine

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """Returns 200 if the service is running."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/db")
def database_health(engine: TriageEngine = Depends(get_triage_engine)):
    """Problem store connectivity check."""
    try:
        result = engine.health()
    except StorageError as e:
        raise HTTPException(status_code=503, detail=f"Database connection failed: {e.detail}")

    return {
        "status": "healthy",
        **result,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
