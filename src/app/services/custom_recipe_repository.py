from __future__ import annotations

import asyncio
import logging
from typing import Callable

from src.app.domain.models import RecipeRecord
from src.app.infra.storage.base import KeyValueStore
from src.app.schemas.recipes import CustomRecipeDraft
from src.app.services.recipe_collection import read_collection, write_entries
from src.services.ids import new_recipe_id
from src.services.normalizer import to_storage, validate_custom_draft

logger = logging.getLogger(__name__)

CUSTOM_RECIPES_KEY = "customRecipes"


class CustomRecipeRepository:
    """Append-only collection of user-authored recipes."""

    def __init__(
        self,
        storage: KeyValueStore,
        id_factory: Callable[[], str] = new_recipe_id,
        key: str = CUSTOM_RECIPES_KEY,
    ):
        self._storage = storage
        self._id_factory = id_factory
        self.key = key
        self._lock = asyncio.Lock()

    async def all(self) -> list[RecipeRecord]:
        stored = await read_collection(self._storage, self.key)
        return stored.records

    async def append(self, draft: CustomRecipeDraft) -> RecipeRecord:
        """
        Validate a draft and add it to the stored collection.

        Validation happens before storage is touched, so a rejected draft
        leaves the collection exactly as it was.
        Stored entries that cannot be normalized are written back untouched.

        Raises:
            ValidationFailure: a required field is missing
            PersistenceFailure: storage could not be read or written
        """
        record = validate_custom_draft(draft, identity=self._id_factory())

        async with self._lock:
            stored = await read_collection(self._storage, self.key)
            if stored.corrupt:
                logger.warning("Overwriting unreadable %s with a fresh collection", self.key)
            if stored.rejected_count:
                logger.warning(
                    "Keeping %d unreadable %s entries as stored", stored.rejected_count, self.key
                )
            await write_entries(self._storage, self.key, [*stored.entries, to_storage(record)])

        logger.info(
            "Stored custom recipe %s (%r); %d total", record.identity, record.title, len(stored.records) + 1
        )
        return record
