"""
Persistent local store backends for the campus board client.
"""

from typing import Optional

from campus_board.config import Settings, get_settings
from campus_board.storage.base_store import LocalStore, read_json, write_json
from campus_board.storage.memory_store import MemoryStore
from campus_board.storage.sqlalchemy_store import SQLAlchemyStore


def create_store(settings: Optional[Settings] = None) -> LocalStore:
    """Build the store selected by ``settings.storage_backend``."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryStore()
    return SQLAlchemyStore(settings.storage_url, echo=False)


__all__ = [
    "LocalStore",
    "MemoryStore",
    "SQLAlchemyStore",
    "create_store",
    "read_json",
    "write_json",
]
