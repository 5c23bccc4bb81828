# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire repository, service and monitor.
"""

from items_api.core.config import settings
from items_api.repositories import ItemRepository, build_repository
from items_api.services.connection_monitor import ConnectionMonitor
from items_api.services.item_service import ItemService

# ── Singleton instances (one shared repository per process) ──
_repo = build_repository(settings)
_service = ItemService(_repo)
_monitor = ConnectionMonitor(
    _repo,
    interval_seconds=settings.MONITOR_INTERVAL_SECONDS,
    max_attempts=settings.MONITOR_MAX_ATTEMPTS,
)


# ── FastAPI dependency functions ──
def get_item_repo() -> ItemRepository:
    return _repo


def get_item_service() -> ItemService:
    return _service


def get_connection_monitor() -> ConnectionMonitor:
    return _monitor
