# src/app/services/catalog_service.py
"""
Catalog service.
Loads the aggregated working set and derives filtered views from it.
"""
from __future__ import annotations

import logging
from typing import Optional

from src.app.domain.errors import RemoteFetchFailure
from src.app.domain.models import ALL_CATEGORIES, BrowseResult, Catalog, CatalogLoad, RecipeRecord
from src.app.services.custom_recipe_repository import CustomRecipeRepository
from src.services.catalog import aggregate, derive_facets
from src.services.fetcher import CatalogClient
from src.services.search import filter_recipes

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service for the aggregated recipe catalog.

    Responsibilities:
    - Fetch the remote catalog and read custom recipes, then aggregate
    - Degrade to custom-only when the remote fetch fails
    - Serve filtered views of the last aggregation

    The aggregation is not updated incrementally; ``mark_stale`` makes the
    next ``ensure_loaded`` run a fresh pass.
    """

    def __init__(
        self,
        client: CatalogClient,
        custom_recipes: CustomRecipeRepository,
    ):
        self._client = client
        self._custom = custom_recipes
        self._last_load: Optional[CatalogLoad] = None
        self._stale = True

    @property
    def last_load(self) -> Optional[CatalogLoad]:
        return self._last_load

    @property
    def catalog(self) -> Catalog:
        return self._last_load.catalog if self._last_load else Catalog()

    @property
    def stale(self) -> bool:
        return self._stale

    def mark_stale(self) -> None:
        self._stale = True

    async def load(self, query: str = "") -> CatalogLoad:
        """
        Run one aggregation pass.

        A failed catalog fetch is logged and reported on the result; the
        pass still completes with the custom recipes alone.

        Raises:
            PersistenceFailure: custom recipes could not be read
        """
        remote_error: Optional[str] = None
        try:
            remote_raw = await self._client.fetch_recipes(query)
        except RemoteFetchFailure as exc:
            logger.warning("Catalog unavailable, continuing with custom recipes only: %s", exc)
            remote_raw = []
            remote_error = str(exc)

        custom = await self._custom.all()
        catalog = aggregate(remote_raw, custom)

        # last pass to resolve wins
        self._last_load = CatalogLoad(
            catalog=catalog,
            remote_count=len(catalog.recipes) - len(custom),
            custom_count=len(custom),
            remote_error=remote_error,
        )
        self._stale = False
        return self._last_load

    async def ensure_loaded(self, refresh: bool = False) -> CatalogLoad:
        if refresh or self._stale or self._last_load is None:
            return await self.load()
        return self._last_load

    def find(self, identity: str) -> Optional[RecipeRecord]:
        for recipe in self.catalog.recipes:
            if recipe.identity == identity:
                return recipe
        return None

    def browse(self, query: str = "", category: str = ALL_CATEGORIES) -> BrowseResult:
        catalog = self.catalog
        return BrowseResult(
            recipes=filter_recipes(catalog.recipes, query, category),
            facets=catalog.facets,
            query=query,
            category=category,
            remote_error=self._last_load.remote_error if self._last_load else None,
            total=len(catalog.recipes),
        )


def browse_collection(
    recipes: tuple[RecipeRecord, ...] | list[RecipeRecord],
    query: str = "",
    category: str = ALL_CATEGORIES,
) -> BrowseResult:
    """Filtered view over an arbitrary collection, with facets derived from it."""
    return BrowseResult(
        recipes=filter_recipes(recipes, query, category),
        facets=derive_facets(recipes),
        query=query,
        category=category,
        total=len(recipes),
    )
