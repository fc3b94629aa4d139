from __future__ import annotations

from typing import Iterable, Optional

from src.app.domain.models import ALL_CATEGORIES, RecipeRecord


def matches_query(recipe: RecipeRecord, query: str) -> bool:
    if not query:
        return True
    return query.lower() in (recipe.title or "").lower()


def matches_category(recipe: RecipeRecord, category: Optional[str]) -> bool:
    if not category or category == ALL_CATEGORIES:
        return True
    return (recipe.category or "") == category


def filter_recipes(
    recipes: Iterable[RecipeRecord],
    query: str = "",
    category: Optional[str] = ALL_CATEGORIES,
) -> list[RecipeRecord]:
    """Stable filter: title contains ``query`` (any case) and category matches."""
    return [
        recipe
        for recipe in recipes
        if matches_query(recipe, query) and matches_category(recipe, category)
    ]
