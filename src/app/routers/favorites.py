# src/app/routers/favorites.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from src.app.deps import get_favorites
from src.app.domain.errors import PersistenceFailure, RecordRejectedError
from src.app.domain.models import ALL_CATEGORIES
from src.app.routers.recipes import _list_response
from src.app.schemas.recipes import FavoriteToggleResponse, RecipeListResponse
from src.app.services.catalog_service import browse_collection
from src.app.services.favorites_store import FavoritesStore
from src.services.normalizer import normalize

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("/", response_model=RecipeListResponse)
async def list_favorites(
    q: str = Query(default=""),
    category: str = Query(default=ALL_CATEGORIES),
    favorites: FavoritesStore = Depends(get_favorites),
) -> RecipeListResponse:
    result = browse_collection(favorites.current(), q, category)
    return _list_response(result, favorites)


@router.post("/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    payload: dict[str, Any] = Body(...),
    favorites: FavoritesStore = Depends(get_favorites),
) -> FavoriteToggleResponse:
    try:
        record = normalize(payload)
    except RecordRejectedError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    try:
        is_favorite = await favorites.toggle(record)
    except PersistenceFailure as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return FavoriteToggleResponse(identity=record.identity, isFavorite=is_favorite)
