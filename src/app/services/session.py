"""
One browsing session: the stores and the catalog service sharing a storage.
"""
from __future__ import annotations

import logging
from typing import Callable

from src.app.config import Settings
from src.app.domain.errors import PersistenceFailure
from src.app.infra.storage.base import InMemoryKeyValueStore, KeyValueStore
from src.app.infra.storage.file_provider import FileKeyValueStore
from src.app.infra.storage.supabase_provider import SupabaseKeyValueStore, create_supabase_client
from src.app.services.catalog_service import CatalogService
from src.app.services.custom_recipe_repository import CustomRecipeRepository
from src.app.services.favorites_store import FavoritesStore
from src.services.fetcher import CatalogClient
from src.services.ids import new_recipe_id

logger = logging.getLogger(__name__)


def build_storage(config: Settings) -> KeyValueStore:
    if config.STORAGE_BACKEND == "memory":
        return InMemoryKeyValueStore()
    if config.STORAGE_BACKEND == "supabase":
        url = str(config.SUPABASE_URL) if config.SUPABASE_URL else None
        client = create_supabase_client(url, config.SUPABASE_SERVICE_ROLE_KEY)
        return SupabaseKeyValueStore(client, table_name=config.SUPABASE_KV_TABLE)
    return FileKeyValueStore(config.STORAGE_DIR)


class RecipeBoxSession:
    """
    Constructed at session start, opened once, closed at session end.
    No state lives outside the session object.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        catalog_client: CatalogClient,
        *,
        rollback_on_failure: bool = False,
        id_factory: Callable[[], str] = new_recipe_id,
    ):
        self.storage = storage
        self.catalog_client = catalog_client
        self.favorites = FavoritesStore(storage, rollback_on_failure=rollback_on_failure)
        self.custom_recipes = CustomRecipeRepository(storage, id_factory=id_factory)
        self.catalog = CatalogService(catalog_client, self.custom_recipes)

    @classmethod
    def from_settings(cls, config: Settings) -> "RecipeBoxSession":
        return cls(
            storage=build_storage(config),
            catalog_client=CatalogClient(
                base_url=config.CATALOG_BASE_URL,
                timeout_seconds=config.CATALOG_TIMEOUT_SECONDS,
            ),
            rollback_on_failure=config.FAVORITES_ROLLBACK_ON_FAILURE,
        )

    async def open(self) -> None:
        try:
            await self.favorites.load()
        except PersistenceFailure:
            # retried on the first toggle
            logger.exception("Favorites could not be loaded at session start")
            return
        logger.info("Session opened (%d favorites)", len(self.favorites.current()))

    async def close(self) -> None:
        self.favorites.close()
        await self.catalog_client.aclose()
        logger.info("Session closed")
