# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: in-memory item storage.
Process-local store for running the API without a database.
"""

import itertools
from typing import Any, Dict, List, Optional

from items_api.repositories.base import CREATE_FIELDS, ItemRepository


class InMemoryItemRepository(ItemRepository):
    """Items keyed by their string id; ids are sequential integers."""

    def __init__(self, table: str = "items") -> None:
        super().__init__(table)
        self._store: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)

    # ── Read ──

    def list_items(self) -> List[Dict[str, Any]]:
        return [dict(item) for item in self._store.values()]

    def get_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        item = self._store.get(str(item_id))
        return dict(item) if item else None

    # ── Write ──

    def create_item(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        new_id = next(self._ids)
        item = {"id": new_id, "name": None, "description": None}
        item.update({f: fields.get(f) for f in CREATE_FIELDS})
        self._store[str(new_id)] = item
        return dict(item)

    def update_item(self, item_id: str, name: Any, description: Any) -> Optional[Dict[str, Any]]:
        item = self._store.get(str(item_id))
        if item is None:
            return None
        item["name"] = name
        item["description"] = description
        return {"id": item["id"], "name": name, "description": description}

    def delete_item(self, item_id: str) -> bool:
        return self._store.pop(str(item_id), None) is not None

    # ── Connectivity ──

    def ping(self) -> float:
        return 0.0

    def describe(self) -> str:
        return f"memory://{self._table}"
