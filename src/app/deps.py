# src/app/deps.py
from __future__ import annotations

from fastapi import Depends, Request

from src.app.services.catalog_service import CatalogService
from src.app.services.custom_recipe_repository import CustomRecipeRepository
from src.app.services.favorites_store import FavoritesStore
from src.app.services.session import RecipeBoxSession


def get_session(request: Request) -> RecipeBoxSession:
    return request.app.state.session


def get_favorites(session: RecipeBoxSession = Depends(get_session)) -> FavoritesStore:
    return session.favorites


def get_custom_recipes(session: RecipeBoxSession = Depends(get_session)) -> CustomRecipeRepository:
    return session.custom_recipes


def get_catalog(session: RecipeBoxSession = Depends(get_session)) -> CatalogService:
    return session.catalog
