# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from items_api.core.config import settings
from items_api.core.dependencies import get_connection_monitor, get_item_repo
from items_api.repositories import DataAccessError, ItemRepository
from items_api.services.connection_monitor import ConnectionMonitor

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check(monitor: ConnectionMonitor = Depends(get_connection_monitor)):
    """Liveness check; reports the monitor's last observation without touching the database."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": {**monitor.state.as_dict(), "max_attempts": monitor.max_attempts},
    }


@router.get("/health/ready")
def readiness_check(repo: ItemRepository = Depends(get_item_repo)):
    """Readiness check — round-trips the database."""
    try:
        latency_ms = repo.ping()
    except DataAccessError as exc:
        raise HTTPException(status_code=503, detail=f"Database unavailable: {exc.message}")
    return {"status": "ok", "database": "connected", "latency_ms": round(latency_ms, 2)}


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
