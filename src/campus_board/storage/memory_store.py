"""In-memory storage implementation."""

from typing import Dict, Optional

from campus_board.storage.base_store import LocalStore


class MemoryStore(LocalStore):
    """Dict-backed implementation of the LocalStore interface."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:  # noqa: A003
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)
