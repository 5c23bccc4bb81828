# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for items over a hosted PostgREST endpoint."""
import time
from typing import Any, Dict, List, Optional

import httpx

from items_api.repositories.base import (
    CREATE_FIELDS, UPDATE_FIELDS, DataAccessError, InvalidIdentifierError, ItemRepository,
)

RETURN_REPRESENTATION = {"Prefer": "return=representation"}

# Postgres SQLSTATE relayed by PostgREST when a filter value does not parse
# as the column type, e.g. ``id=eq.abc`` against a bigint id.
INVALID_TEXT_REPRESENTATION = "22P02"


class HostedItemRepository(ItemRepository):
    """Talks to ``<base_url>/<table>`` with PostgREST query syntax.

    The client is owned by the repository and closed in ``dispose``.
    """

    def __init__(self, client: httpx.Client, table: str = "items"):
        super().__init__(table)
        self._client = client

    # ── Read ───────────────────────────────────────────────────────────

    def list_items(self) -> List[Dict[str, Any]]:
        return self._request("list", "GET", params={"select": "*"})

    def get_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        try:
            rows = self._request("get", "GET", params={"select": "*", "id": f"eq.{item_id}"})
        except InvalidIdentifierError:
            return None
        return rows[0] if rows else None

    # ── Write ──────────────────────────────────────────────────────────

    def create_item(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        payload = [{f: fields.get(f) for f in CREATE_FIELDS}]
        rows = self._request("create", "POST", params={"select": "*"},
                             json=payload, headers=RETURN_REPRESENTATION)
        if not rows:
            raise DataAccessError("create", "Insert returned no row")
        return rows[0]

    def update_item(self, item_id: str, name: Any, description: Any) -> Optional[Dict[str, Any]]:
        try:
            rows = self._request(
                "update", "PATCH",
                params={"select": ",".join(("id",) + UPDATE_FIELDS), "id": f"eq.{item_id}"},
                json={"name": name, "description": description},
                headers=RETURN_REPRESENTATION,
            )
        except InvalidIdentifierError:
            return None
        return rows[0] if rows else None

    def delete_item(self, item_id: str) -> bool:
        try:
            rows = self._request("delete", "DELETE",
                                 params={"select": "id", "id": f"eq.{item_id}"},
                                 headers=RETURN_REPRESENTATION)
        except InvalidIdentifierError:
            return False
        return bool(rows)

    # ── Connectivity ───────────────────────────────────────────────────

    def ping(self) -> float:
        start = time.perf_counter()
        self._request("ping", "GET", params={"select": "id", "limit": "1"})
        return (time.perf_counter() - start) * 1000

    def describe(self) -> str:
        return str(self._client.base_url)

    def dispose(self) -> None:
        self._client.close()

    # ── Private ────────────────────────────────────────────────────────

    def _request(self, operation: str, method: str, **kwargs) -> Any:
        try:
            resp = self._client.request(method, f"/{self._table}", **kwargs)
        except httpx.HTTPError as exc:
            raise DataAccessError(operation, str(exc) or type(exc).__name__) from exc
        if resp.status_code >= 400:
            body = _error_body(resp)
            message = _error_message(resp, body)
            if body.get("code") == INVALID_TEXT_REPRESENTATION:
                raise InvalidIdentifierError(operation, message)
            raise DataAccessError(operation, message)
        if not resp.content:
            return []
        try:
            return resp.json()
        except ValueError as exc:
            raise DataAccessError(operation, f"Invalid JSON from database: {exc}") from exc


def _error_body(resp: httpx.Response) -> Dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(resp: httpx.Response, body: Dict[str, Any]) -> str:
    if body.get("message"):
        return str(body["message"])
    return f"HTTP {resp.status_code}: {resp.text[:200]}"
