# src/app/infra/storage/base.py
"""
Abstract base class for durable key/value storage.
This interface allows easy swapping between different storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Process-wide string key/value storage surviving restarts.

    Implementations:
    - FileKeyValueStore: one JSON file per key in a local directory
    - InMemoryKeyValueStore: volatile, for tests and throwaway sessions
    - SupabaseKeyValueStore: rows in a Supabase/Postgres table

    Every write replaces the whole value for a key. Backend failures are
    raised as StorageBackendError.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key (e.g. "favoriteRecipes")

        Returns:
            The stored string, or None if the key was never written
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Storage key
            value: Serialized value
        """
        pass


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
