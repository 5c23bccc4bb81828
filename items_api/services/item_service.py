# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for items — pass-through to the repository plus metrics."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from items_api.core.logging import get_logger
from items_api.metrics import (
    DATA_ACCESS_ERRORS, ITEMS_CREATED, ITEMS_DELETED, ITEMS_UPDATED,
)
from items_api.repositories import DataAccessError, ItemRepository

logger = get_logger(__name__)


class ItemService:
    def __init__(self, repo: ItemRepository):
        self._repo = repo

    def list_items(self) -> List[Dict[str, Any]]:
        return self._call(self._repo.list_items)

    def get_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        return self._call(self._repo.get_item, item_id)

    def create_item(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        item = self._call(self._repo.create_item, fields)
        ITEMS_CREATED.inc()
        logger.info("Item created", extra={"operation": "create", "item_id": item.get("id")})
        return item

    def update_item(self, item_id: str, name: Any, description: Any) -> Dict[str, Any]:
        result = self._call(self._repo.update_item, item_id, name, description)
        if result is None:
            raise KeyError(f"Item {item_id} not found")
        ITEMS_UPDATED.inc()
        logger.info("Item updated", extra={"operation": "update", "item_id": item_id})
        return result

    def delete_item(self, item_id: str) -> None:
        if not self._call(self._repo.delete_item, item_id):
            raise KeyError(f"Item {item_id} not found")
        ITEMS_DELETED.inc()
        logger.info("Item deleted", extra={"operation": "delete", "item_id": item_id})

    def connection_status(self) -> Tuple[bool, Dict[str, Any]]:
        """Ping the database once and build the status payload."""
        try:
            self._call(self._repo.ping)
        except DataAccessError as exc:
            return False, {
                "status": "disconnected",
                "message": "Database connection error",
                "error": exc.message,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        return True, {
            "status": "connected",
            "message": "Database connection is active",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def _call(self, fn, *args):
        try:
            return fn(*args)
        except DataAccessError as exc:
            DATA_ACCESS_ERRORS.labels(operation=exc.operation).inc()
            logger.warning("Data access failed: %s", exc.message,
                           extra={"operation": exc.operation})
            raise
