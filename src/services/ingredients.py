from __future__ import annotations

from typing import Any

from src.app.domain.models import Ingredient
from src.app.schemas.recipes import IngredientEntry, RawRecipeRecord

# TheMealDB ships exactly twenty numbered ingredient/measure pairs per meal.
INGREDIENT_SLOTS = range(1, 21)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _from_entries(entries: list[IngredientEntry]) -> list[Ingredient]:
    return [Ingredient(name=entry.name, amount=entry.measure or "") for entry in entries]


def _from_numbered_slots(raw: RawRecipeRecord) -> list[Ingredient]:
    ingredients: list[Ingredient] = []
    for index in INGREDIENT_SLOTS:
        name = _text(raw.slot(f"strIngredient{index}"))
        if not name.strip():
            continue
        measure = _text(raw.slot(f"strMeasure{index}"))
        ingredients.append(Ingredient(name=name, amount=measure))
    return ingredients


def extract_ingredients(raw: RawRecipeRecord) -> list[Ingredient]:
    """
    Ordered ingredient list for a recipe in either schema.

    An explicit ``ingredients`` list (custom schema) wins and is returned as is,
    even when empty. Otherwise the numbered remote slots are scanned in
    ascending order, skipping blank names without renumbering. Names and
    measures are kept exactly as the catalog sent them.
    """
    if raw.ingredients is not None:
        return _from_entries(raw.ingredients)
    return _from_numbered_slots(raw)


def filled_entries(entries: list[IngredientEntry]) -> list[IngredientEntry]:
    """Drop the blank placeholder rows an authoring form leaves behind."""
    return [entry for entry in entries if entry.name.strip()]
