# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository interface for the items table.
Every backend raises DataAccessError for any driver, network or decoding
failure and signals not-found with None / False.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

CREATE_FIELDS = ("location", "contacts", "image", "call_logs", "sms")
UPDATE_FIELDS = ("name", "description")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DataAccessError(Exception):
    """The backing store could not complete an operation."""

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation
        self.message = message


class InvalidIdentifierError(DataAccessError):
    """The store rejected a lookup key that cannot match its id column type."""


def validate_table_name(table: str) -> str:
    if not table or not _IDENTIFIER.match(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


class ItemRepository(ABC):
    """Data access for a single items table."""

    def __init__(self, table: str = "items"):
        self._table = validate_table_name(table)

    @property
    def table(self) -> str:
        return self._table

    # ── Read ──

    @abstractmethod
    def list_items(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        ...

    # ── Write ──

    @abstractmethod
    def create_item(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert exactly CREATE_FIELDS from ``fields``; return the stored row."""

    @abstractmethod
    def update_item(self, item_id: str, name: Any, description: Any) -> Optional[Dict[str, Any]]:
        """Overwrite name/description; return ``{id, name, description}`` or None."""

    @abstractmethod
    def delete_item(self, item_id: str) -> bool:
        ...

    # ── Connectivity ──

    @abstractmethod
    def ping(self) -> float:
        """Round-trip a trivial query and return its latency in milliseconds."""

    @abstractmethod
    def describe(self) -> str:
        """Printable connection target, credentials masked."""

    def dispose(self) -> None:
        pass
