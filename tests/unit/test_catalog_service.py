from __future__ import annotations

from typing import Any

import pytest

from src.app.domain.errors import RemoteFetchFailure
from src.app.domain.models import RecipeRecord
from src.app.infra.storage.base import InMemoryKeyValueStore
from src.app.schemas.recipes import CustomRecipeDraft
from src.app.services.catalog_service import CatalogService, browse_collection
from src.app.services.custom_recipe_repository import CustomRecipeRepository


class CatalogClientStub:
    def __init__(self, meals: list[dict[str, Any]] | None = None) -> None:
        self.meals = meals or []
        self.error: RemoteFetchFailure | None = None
        self.calls = 0

    async def fetch_recipes(self, query: str = "") -> list[dict[str, Any]]:
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.meals)

    async def aclose(self) -> None:
        return None


MEALS = [
    {"idMeal": "52772", "strMeal": "Teriyaki Chicken Casserole", "strCategory": "Seafood"},
    {"idMeal": "52776", "strMeal": "Chocolate Gateau", "strCategory": "Dessert"},
]


def _draft(name: str, category: str) -> CustomRecipeDraft:
    return CustomRecipeDraft(
        name=name,
        category=category,
        instructions="Mix and bake.",
        ingredients=[{"name": "Flour", "measure": "200 g"}],
    )


def _service(meals: list[dict[str, Any]] | None = None) -> tuple[CatalogService, CatalogClientStub, CustomRecipeRepository]:
    client = CatalogClientStub(meals)
    repository = CustomRecipeRepository(InMemoryKeyValueStore(), id_factory=lambda: "c1")
    return CatalogService(client, repository), client, repository  # type: ignore[arg-type]


class TestLoad:
    @pytest.mark.asyncio
    async def test_aggregates_remote_then_custom(self) -> None:
        service, _, repository = _service(MEALS)
        await repository.append(_draft("Lemon Tart", "Pastry"))

        result = await service.load()

        assert [r.identity for r in result.catalog.recipes] == ["52772", "52776", "c1"]
        assert result.catalog.facets == ("All", "Seafood", "Dessert", "Pastry")
        assert result.remote_count == 2
        assert result.custom_count == 1
        assert result.degraded is False

    @pytest.mark.asyncio
    async def test_remote_failure_degrades_to_custom_only(self) -> None:
        service, client, repository = _service(MEALS)
        client.error = RemoteFetchFailure("https://catalog.test/search.php", "HTTP 500", status_code=500)
        await repository.append(_draft("Lemon Tart", "Dessert"))

        result = await service.load()

        assert [r.identity for r in result.catalog.recipes] == ["c1"]
        assert result.degraded is True
        assert "HTTP 500" in (result.remote_error or "")
        assert service.browse().remote_error == result.remote_error

    @pytest.mark.asyncio
    async def test_not_incremental_until_marked_stale(self) -> None:
        service, client, repository = _service(MEALS)
        await service.ensure_loaded()
        await repository.append(_draft("Lemon Tart", "Dessert"))

        await service.ensure_loaded()
        assert [r.identity for r in service.catalog.recipes] == ["52772", "52776"]
        assert client.calls == 1

        service.mark_stale()
        await service.ensure_loaded()
        assert [r.identity for r in service.catalog.recipes] == ["52772", "52776", "c1"]
        assert client.calls == 2

    @pytest.mark.asyncio
    async def test_refresh_forces_new_pass(self) -> None:
        service, client, _ = _service(MEALS)
        await service.ensure_loaded()
        await service.ensure_loaded(refresh=True)
        assert client.calls == 2


class TestBrowse:
    @pytest.mark.asyncio
    async def test_filters_current_catalog(self) -> None:
        service, _, repository = _service(MEALS)
        await repository.append(_draft("Lemon Tart", "Dessert"))
        await service.load()

        result = service.browse(query="", category="Dessert")

        assert [r.identity for r in result.recipes] == ["52776", "c1"]
        assert result.facets == ("All", "Seafood", "Dessert")
        assert result.total == 3

    def test_before_first_load_is_empty(self) -> None:
        service, _, _ = _service(MEALS)
        result = service.browse()
        assert result.recipes == []
        assert result.facets == ("All",)

    @pytest.mark.asyncio
    async def test_find_by_identity(self) -> None:
        service, _, _ = _service(MEALS)
        await service.load()
        assert service.find("52776").title == "Chocolate Gateau"
        assert service.find("missing") is None


class TestBrowseCollection:
    def test_facets_come_from_the_collection(self) -> None:
        favorites = (
            RecipeRecord(identity="1", title="Fish pie", category="Seafood"),
            RecipeRecord(identity="2", title="Custom", category=None, is_custom=True),
        )

        result = browse_collection(favorites, "fish")

        assert [r.identity for r in result.recipes] == ["1"]
        assert result.facets == ("All", "Seafood")
        assert result.total == 2
