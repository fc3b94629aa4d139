# src/app/routers/recipes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.app.deps import get_catalog, get_favorites
from src.app.domain.errors import PersistenceFailure
from src.app.domain.models import ALL_CATEGORIES, BrowseResult, RecipeRecord
from src.app.schemas.recipes import IngredientResponse, RecipeListResponse, RecipeResponse
from src.app.services.catalog_service import CatalogService
from src.app.services.favorites_store import FavoritesStore

router = APIRouter(prefix="/recipes", tags=["recipes"])


def _recipe_response(record: RecipeRecord, favorites: FavoritesStore) -> RecipeResponse:
    return RecipeResponse(
        identity=record.identity,
        title=record.title,
        category=record.category,
        area=record.area,
        imageRef=record.image_ref,
        instructions=record.instructions,
        ingredients=[
            IngredientResponse(name=ingredient.name, amount=ingredient.amount)
            for ingredient in record.ingredients
        ],
        isCustom=record.is_custom,
        isFavorite=favorites.is_favorite(record),
    )


def _list_response(result: BrowseResult, favorites: FavoritesStore) -> RecipeListResponse:
    return RecipeListResponse(
        recipes=[_recipe_response(recipe, favorites) for recipe in result.recipes],
        facets=list(result.facets),
        query=result.query,
        category=result.category,
        total=result.total,
        remoteError=result.remote_error,
    )


@router.get("/", response_model=RecipeListResponse)
async def list_recipes(
    q: str = Query(default=""),
    category: str = Query(default=ALL_CATEGORIES),
    refresh: bool = Query(default=False),
    catalog: CatalogService = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
) -> RecipeListResponse:
    try:
        await catalog.ensure_loaded(refresh=refresh)
    except PersistenceFailure as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return _list_response(catalog.browse(q, category), favorites)


@router.get("/facets", response_model=list[str])
async def list_facets(
    catalog: CatalogService = Depends(get_catalog),
) -> list[str]:
    try:
        await catalog.ensure_loaded()
    except PersistenceFailure as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return list(catalog.catalog.facets)


@router.get("/{identity}", response_model=RecipeResponse)
async def get_recipe(
    identity: str,
    catalog: CatalogService = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
) -> RecipeResponse:
    try:
        await catalog.ensure_loaded()
    except PersistenceFailure as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    record = catalog.find(identity) or favorites.get(identity)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Recipe not found: {identity}")
    return _recipe_response(record, favorites)
