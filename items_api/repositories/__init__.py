# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package — item storage backends behind one interface."""
from items_api.core.config import Settings
from items_api.core.database import build_engine, build_hosted_client
from items_api.repositories.base import (
    CREATE_FIELDS, UPDATE_FIELDS, DataAccessError, InvalidIdentifierError, ItemRepository,
)
from items_api.repositories.hosted_repository import HostedItemRepository
from items_api.repositories.memory_repository import InMemoryItemRepository
from items_api.repositories.sql_repository import SqlItemRepository

BACKENDS = ("sql", "hosted", "memory")


def build_repository(settings: Settings) -> ItemRepository:
    """Instantiate the backend selected by DB_BACKEND."""
    backend = settings.DB_BACKEND
    if backend == "sql":
        return SqlItemRepository(build_engine(settings), settings.ITEMS_TABLE)
    if backend == "hosted":
        return HostedItemRepository(build_hosted_client(settings), settings.ITEMS_TABLE)
    if backend == "memory":
        return InMemoryItemRepository(settings.ITEMS_TABLE)
    raise ValueError(f"DB_BACKEND must be one of {BACKENDS}, got {backend!r}")


__all__ = [
    "BACKENDS",
    "CREATE_FIELDS",
    "UPDATE_FIELDS",
    "DataAccessError",
    "HostedItemRepository",
    "InMemoryItemRepository",
    "InvalidIdentifierError",
    "ItemRepository",
    "SqlItemRepository",
    "build_repository",
]
