# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for items over a pooled SQLAlchemy engine."""
import json
import time
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DataError, SQLAlchemyError

from items_api.repositories.base import (
    CREATE_FIELDS, UPDATE_FIELDS, DataAccessError, InvalidIdentifierError, ItemRepository,
)

# Postgres SQLSTATE for "invalid input syntax", e.g. 'abc' against an integer id.
INVALID_TEXT_REPRESENTATION = "22P02"

_JSON_FIELDS = CREATE_FIELDS + UPDATE_FIELDS


@contextmanager
def _translate(operation: str):
    try:
        yield
    except SQLAlchemyError as exc:
        message = (str(exc) or type(exc).__name__).splitlines()[0]
        if isinstance(exc, DataError) and \
                getattr(exc.orig, "pgcode", None) == INVALID_TEXT_REPRESENTATION:
            raise InvalidIdentifierError(operation, message) from exc
        raise DataAccessError(operation, message) from exc


def _encode(value: Any) -> Any:
    """Lists and objects are stored as JSON text; scalars bind as-is."""
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return value


def _decode(row) -> Dict[str, Any]:
    item = dict(row)
    for field in _JSON_FIELDS:
        value = item.get(field)
        if isinstance(value, str) and value[:1] in ("[", "{"):
            try:
                item[field] = json.loads(value)
            except ValueError:
                pass
    return item


class SqlItemRepository(ItemRepository):
    def __init__(self, engine: Engine, table: str = "items"):
        super().__init__(table)
        self._engine = engine

    # ── Read ───────────────────────────────────────────────────────────

    def list_items(self) -> List[Dict[str, Any]]:
        with _translate("list"), self._engine.connect() as conn:
            rows = conn.execute(text(f"SELECT * FROM {self._table}")).mappings().all()
        return [_decode(r) for r in rows]

    def get_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        try:
            with _translate("get"), self._engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT * FROM {self._table} WHERE id = :id"), {"id": item_id},
                ).mappings().first()
        except InvalidIdentifierError:
            return None
        return _decode(row) if row else None

    # ── Write ──────────────────────────────────────────────────────────

    def create_item(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        params = {f: _encode(fields.get(f)) for f in CREATE_FIELDS}
        columns = ", ".join(CREATE_FIELDS)
        placeholders = ", ".join(f":{f}" for f in CREATE_FIELDS)
        with _translate("create"), self._engine.begin() as conn:
            row = conn.execute(
                text(f"INSERT INTO {self._table} ({columns}) VALUES ({placeholders}) RETURNING *"),
                params,
            ).mappings().first()
        return _decode(row)

    def update_item(self, item_id: str, name: Any, description: Any) -> Optional[Dict[str, Any]]:
        try:
            with _translate("update"), self._engine.begin() as conn:
                row = conn.execute(
                    text(f"""
                        UPDATE {self._table}
                        SET name = :name, description = :description
                        WHERE id = :id
                        RETURNING id, name, description
                    """),
                    {"id": item_id, "name": _encode(name), "description": _encode(description)},
                ).mappings().first()
        except InvalidIdentifierError:
            return None
        return _decode(row) if row else None

    def delete_item(self, item_id: str) -> bool:
        try:
            with _translate("delete"), self._engine.begin() as conn:
                deleted = conn.execute(
                    text(f"DELETE FROM {self._table} WHERE id = :id"), {"id": item_id},
                ).rowcount
        except InvalidIdentifierError:
            return False
        return deleted > 0

    # ── Connectivity ───────────────────────────────────────────────────

    def ping(self) -> float:
        start = time.perf_counter()
        with _translate("ping"), self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return (time.perf_counter() - start) * 1000

    def describe(self) -> str:
        return self._engine.url.render_as_string(hide_password=True)

    def dispose(self) -> None:
        self._engine.dispose()
