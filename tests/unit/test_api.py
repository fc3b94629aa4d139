from __future__ import annotations

import json
from typing import Any, Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from src.app.domain.errors import RemoteFetchFailure, StorageBackendError
from src.app.infra.storage.base import InMemoryKeyValueStore
from src.app.main import create_app
from src.app.services.favorites_store import FAVORITES_KEY
from src.app.services.session import RecipeBoxSession


class CatalogClientStub:
    def __init__(self, meals: list[dict[str, Any]]) -> None:
        self.meals = meals
        self.error: Optional[RemoteFetchFailure] = None
        self.closed = False

    async def fetch_recipes(self, query: str = "") -> list[dict[str, Any]]:
        if self.error:
            raise self.error
        return list(self.meals)

    async def aclose(self) -> None:
        self.closed = True


class FlakyStore(InMemoryKeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        super().__init__(initial)
        self.fail_writes = False

    async def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageBackendError(key, "read-only filesystem")
        await super().set_item(key, value)


MEALS = [
    {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strCategory": "Seafood",
        "strArea": "Japanese",
        "strIngredient1": "Salt",
        "strIngredient2": "",
        "strIngredient3": "Pepper",
        "strMeasure3": "1 pinch",
    },
    {"idMeal": "52776", "strMeal": "Chocolate Gateau", "strCategory": "Dessert"},
]

DRAFT = {
    "name": "Lemon Tart",
    "category": "Dessert",
    "area": "French",
    "instructions": "Blind bake the shell, fill, bake again.",
    "imageUri": "file:///tmp/tart.jpg",
    "ingredients": [{"name": "Lemons", "measure": "4"}, {"name": "", "measure": ""}],
}


class Harness:
    def __init__(self, client: TestClient, session: RecipeBoxSession, storage: FlakyStore, catalog: CatalogClientStub):
        self.client = client
        self.session = session
        self.storage = storage
        self.catalog = catalog


@pytest.fixture
def harness() -> Iterator[Harness]:
    storage = FlakyStore()
    catalog = CatalogClientStub(MEALS)
    ids = iter(f"17000000000{n:02d}" for n in range(1, 100))
    session = RecipeBoxSession(storage, catalog, id_factory=lambda: next(ids))  # type: ignore[arg-type]
    with TestClient(create_app(session)) as client:
        yield Harness(client, session, storage, catalog)


class TestHealth:
    def test_health(self, harness: Harness) -> None:
        assert harness.client.get("/health").json() == {"ok": True}


class TestRecipes:
    def test_lists_catalog_with_facets(self, harness: Harness) -> None:
        body = harness.client.get("/recipes/").json()

        assert [r["identity"] for r in body["recipes"]] == ["52772", "52776"]
        assert body["facets"] == ["All", "Seafood", "Dessert"]
        assert body["remoteError"] is None
        assert body["recipes"][0]["ingredients"] == [
            {"name": "Salt", "amount": ""},
            {"name": "Pepper", "amount": "1 pinch"},
        ]

    def test_query_and_category(self, harness: Harness) -> None:
        body = harness.client.get("/recipes/", params={"q": "GATEAU", "category": "Dessert"}).json()
        assert [r["identity"] for r in body["recipes"]] == ["52776"]
        assert body["total"] == 2

    def test_new_custom_recipe_appears_after_add(self, harness: Harness) -> None:
        harness.client.get("/recipes/")
        created = harness.client.post("/custom-recipes/", json=DRAFT)
        assert created.status_code == 201

        body = harness.client.get("/recipes/", params={"category": "Dessert"}).json()

        assert [r["identity"] for r in body["recipes"]] == ["52776", "1700000000001"]
        assert body["recipes"][1]["isCustom"] is True

    def test_remote_failure_is_reported_not_fatal(self, harness: Harness) -> None:
        harness.catalog.error = RemoteFetchFailure("https://catalog.test/search.php", "HTTP 502", status_code=502)
        harness.client.post("/custom-recipes/", json=DRAFT)

        body = harness.client.get("/recipes/", params={"refresh": True}).json()

        assert [r["identity"] for r in body["recipes"]] == ["1700000000001"]
        assert "HTTP 502" in body["remoteError"]

    def test_facets_endpoint(self, harness: Harness) -> None:
        assert harness.client.get("/recipes/facets").json() == ["All", "Seafood", "Dessert"]

    def test_detail(self, harness: Harness) -> None:
        body = harness.client.get("/recipes/52772").json()
        assert body["title"] == "Teriyaki Chicken Casserole"
        assert body["area"] == "Japanese"
        assert body["isFavorite"] is False

    def test_detail_not_found(self, harness: Harness) -> None:
        assert harness.client.get("/recipes/nope").status_code == 404


class TestFavorites:
    def test_toggle_round_trip(self, harness: Harness) -> None:
        first = harness.client.post("/favorites/toggle", json=MEALS[0])
        assert first.json() == {"identity": "52772", "isFavorite": True}

        listed = harness.client.get("/recipes/").json()
        assert [r["isFavorite"] for r in listed["recipes"]] == [True, False]

        second = harness.client.post("/favorites/toggle", json=MEALS[0])
        assert second.json() == {"identity": "52772", "isFavorite": False}
        assert json.loads(harness.storage._items[FAVORITES_KEY]) == []

    def test_favorites_view_has_own_facets(self, harness: Harness) -> None:
        harness.client.post("/favorites/toggle", json=MEALS[1])
        harness.client.post(
            "/favorites/toggle",
            json={"id": "c9", "name": "Leek soup", "category": "Starter", "ingredients": [], "isCustom": True},
        )

        body = harness.client.get("/favorites/").json()
        assert [r["identity"] for r in body["recipes"]] == ["52776", "c9"]
        assert body["facets"] == ["All", "Dessert", "Starter"]
        assert all(r["isFavorite"] for r in body["recipes"])

        filtered = harness.client.get("/favorites/", params={"category": "Starter"}).json()
        assert [r["identity"] for r in filtered["recipes"]] == ["c9"]

    def test_favorite_outside_catalog_has_detail(self, harness: Harness) -> None:
        harness.client.post("/favorites/toggle", json={"id": "c9", "name": "Leek soup", "isCustom": True})
        assert harness.client.get("/recipes/c9").json()["isFavorite"] is True

    def test_missing_identity_is_rejected(self, harness: Harness) -> None:
        response = harness.client.post("/favorites/toggle", json={"strMeal": "Anonymous"})
        assert response.status_code == 422
        assert FAVORITES_KEY not in harness.storage._items

    def test_persistence_failure_is_reported(self, harness: Harness) -> None:
        harness.storage.fail_writes = True
        response = harness.client.post("/favorites/toggle", json=MEALS[0])
        assert response.status_code == 503
        assert "favoriteRecipes" in response.json()["detail"]


class TestCustomRecipes:
    def test_create_and_list(self, harness: Harness) -> None:
        created = harness.client.post("/custom-recipes/", json=DRAFT).json()

        assert created["identity"] == "1700000000001"
        assert created["ingredients"] == [{"name": "Lemons", "amount": "4"}]
        assert created["imageRef"] == "file:///tmp/tart.jpg"
        assert [r["title"] for r in harness.client.get("/custom-recipes/").json()] == ["Lemon Tart"]

    def test_validation_failure_names_field(self, harness: Harness) -> None:
        response = harness.client.post("/custom-recipes/", json={**DRAFT, "instructions": " "})

        assert response.status_code == 422
        assert response.json()["detail"]["field"] == "instructions"
        assert harness.client.get("/custom-recipes/").json() == []

    def test_categories(self, harness: Harness) -> None:
        assert harness.client.get("/custom-recipes/categories").json() == [
            "Breakfast",
            "Starter",
            "Main",
            "Dessert",
            "Seafood",
            "Vegetarian",
            "Vegan",
            "Other",
        ]


class TestLifecycle:
    def test_session_loads_persisted_favorites_and_closes(self) -> None:
        storage = FlakyStore({FAVORITES_KEY: json.dumps([{"idMeal": "52776", "strMeal": "Chocolate Gateau"}])})
        catalog = CatalogClientStub(MEALS)
        session = RecipeBoxSession(storage, catalog)  # type: ignore[arg-type]

        with TestClient(create_app(session)) as client:
            body = client.get("/recipes/").json()
            assert [r["isFavorite"] for r in body["recipes"]] == [False, True]

        assert catalog.closed is True

    def test_corrupt_favorites_start_empty(self) -> None:
        storage = FlakyStore({FAVORITES_KEY: "definitely not json"})
        session = RecipeBoxSession(storage, CatalogClientStub(MEALS))  # type: ignore[arg-type]

        with TestClient(create_app(session)) as client:
            assert client.get("/favorites/").json()["recipes"] == []
