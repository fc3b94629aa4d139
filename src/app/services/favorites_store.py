# src/app/services/favorites_store.py
"""
Favorites store.
Single source of truth for "is this recipe a favorite".
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from src.app.domain.errors import PersistenceFailure, StoreClosedError
from src.app.domain.models import RecipeRecord
from src.app.infra.storage.base import KeyValueStore
from src.app.services.recipe_collection import read_collection, write_collection

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favoriteRecipes"


class FavoritesStore:
    """
    Insertion-ordered set of favorite recipes keyed by identity.

    Responsibilities:
    - Load the persisted set once per session
    - Answer membership by identity
    - Toggle membership, rewriting the whole set on every change

    Toggles are serialized: a toggle computes membership only after the
    previous toggle's write has finished.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        rollback_on_failure: bool = False,
        key: str = FAVORITES_KEY,
    ):
        self._storage = storage
        self.key = key
        self.rollback_on_failure = rollback_on_failure
        self._items: list[RecipeRecord] = []
        self._lock = asyncio.Lock()
        self._closed = False
        self.loaded = False
        self.recovered_from_corruption = False

    async def __aenter__(self) -> "FavoritesStore":
        await self.load()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError("FavoritesStore")

    async def load(self) -> list[RecipeRecord]:
        """
        Read the persisted set. Missing or corrupt data yields an empty set.

        Raises:
            PersistenceFailure: storage could not be read
        """
        self._ensure_open()
        async with self._lock:
            await self._read_persisted()
        return list(self._items)

    async def _read_persisted(self) -> None:
        stored = await read_collection(self._storage, self.key)
        items: list[RecipeRecord] = []
        seen: set[str] = set()
        for record in stored.records:
            if record.identity in seen:
                logger.warning("Ignoring duplicate favorite %s", record.identity)
                continue
            seen.add(record.identity)
            items.append(record)
        self._items = items
        self.recovered_from_corruption = stored.corrupt
        self.loaded = True
        logger.info("Loaded %d favorites", len(items))

    def current(self) -> tuple[RecipeRecord, ...]:
        self._ensure_open()
        return tuple(self._items)

    def is_favorite(self, record: RecipeRecord) -> bool:
        self._ensure_open()
        return any(item.identity == record.identity for item in self._items)

    def get(self, identity: str) -> Optional[RecipeRecord]:
        self._ensure_open()
        for item in self._items:
            if item.identity == identity:
                return item
        return None

    async def toggle(self, record: RecipeRecord) -> bool:
        """
        Flip membership for a recipe and persist the whole set.

        Args:
            record: The recipe whose favorite state changes

        Returns:
            True if the recipe is a favorite afterwards

        Raises:
            PersistenceFailure: the set was never loaded and still cannot be
                read, or the write failed. After a failed write the in-memory
                set keeps the attempted change unless ``rollback_on_failure``
                is set.
        """
        self._ensure_open()
        async with self._lock:
            if not self.loaded:
                await self._read_persisted()
            previous = self._items
            if self.is_favorite(record):
                updated = [item for item in previous if item.identity != record.identity]
                now_favorite = False
            else:
                updated = [*previous, record]
                now_favorite = True

            self._items = updated
            try:
                await write_collection(self._storage, self.key, updated)
            except PersistenceFailure:
                if self.rollback_on_failure:
                    self._items = previous
                logger.exception("Failed to persist favorite toggle for %s", record.identity)
                raise

        logger.info(
            "Favorite %s %s (%d total)",
            record.identity,
            "added" if now_favorite else "removed",
            len(updated),
        )
        return now_favorite

    def close(self) -> None:
        self._items = []
        self._closed = True
