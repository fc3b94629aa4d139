# src/app/routers/custom_recipes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from src.app.deps import get_catalog, get_custom_recipes, get_favorites
from src.app.domain.errors import PersistenceFailure, ValidationFailure
from src.app.domain.models import CUSTOM_RECIPE_CATEGORIES
from src.app.routers.recipes import _recipe_response
from src.app.schemas.recipes import CustomRecipeDraft, RecipeResponse
from src.app.services.catalog_service import CatalogService
from src.app.services.custom_recipe_repository import CustomRecipeRepository
from src.app.services.favorites_store import FavoritesStore

router = APIRouter(prefix="/custom-recipes", tags=["custom-recipes"])


@router.get("/", response_model=list[RecipeResponse])
async def list_custom_recipes(
    repository: CustomRecipeRepository = Depends(get_custom_recipes),
    favorites: FavoritesStore = Depends(get_favorites),
) -> list[RecipeResponse]:
    try:
        records = await repository.all()
    except PersistenceFailure as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return [_recipe_response(record, favorites) for record in records]


@router.get("/categories", response_model=list[str])
async def list_custom_categories() -> list[str]:
    return list(CUSTOM_RECIPE_CATEGORIES)


@router.post("/", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_custom_recipe(
    draft: CustomRecipeDraft,
    repository: CustomRecipeRepository = Depends(get_custom_recipes),
    catalog: CatalogService = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
) -> RecipeResponse:
    try:
        record = await repository.append(draft)
    except ValidationFailure as exc:
        raise HTTPException(
            status_code=422,
            detail={"field": exc.field, "message": str(exc)},
        )
    except PersistenceFailure as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    catalog.mark_stale()
    return _recipe_response(record, favorites)
