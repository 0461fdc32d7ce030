"""Defines the LocalStore protocol and JSON helpers shared by every backend."""

import json
from typing import Any, Optional, Protocol, TypeVar

from loguru import logger

T = TypeVar("T")


class LocalStore(Protocol):
    """
    A protocol that defines the interface for persistent local stores.

    Values are JSON-serialized strings. Any backend (in-memory dict, SQLite
    table, browser-like key/value store) can be injected into the caches and
    ledgers interchangeably.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the raw value stored under ``key``, or None when absent."""
        ...

    def set(self, key: str, value: str) -> None:  # noqa: A003
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete ``key``. Removing a missing key is not an error."""
        ...


def read_json(store: LocalStore, key: str, default: T) -> T:
    """
    Read and decode a JSON value from the store.

    Missing keys, malformed JSON and values whose JSON type differs from
    ``default`` all yield ``default``.

    Args:
        store: Store to read from
        key: Store key
        default: Empty value returned when nothing usable is stored

    Returns:
        The decoded value or ``default``
    """
    raw = store.get(key)
    if raw is None:
        return default

    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring malformed JSON under '{key}': {str(e)}")
        return default

    if not isinstance(value, type(default)):
        logger.warning(
            f"Ignoring value under '{key}': expected {type(default).__name__}, "
            f"got {type(value).__name__}"
        )
        return default

    return value


def write_json(store: LocalStore, key: str, value: Any) -> None:
    """Encode ``value`` as JSON and store it under ``key``."""
    store.set(key, json.dumps(value, ensure_ascii=False))
