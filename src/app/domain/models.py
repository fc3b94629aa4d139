# src/app/domain/models.py
"""
Domain models for the recipe box.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

ALL_CATEGORIES = "All"

CUSTOM_RECIPE_CATEGORIES: tuple[str, ...] = (
    "Breakfast",
    "Starter",
    "Main",
    "Dessert",
    "Seafood",
    "Vegetarian",
    "Vegan",
    "Other",
)


class RecipeSource(str, Enum):
    """Where a recipe came from."""
    CATALOG = "catalog"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Ingredient:
    """One ingredient line: a name and a free-form amount ("2 tbsp")."""
    name: str
    amount: str = ""


@dataclass(frozen=True)
class RecipeRecord:
    """
    Canonical recipe, whatever schema it was read from.
    Two records are the same recipe iff their identities are equal.
    """
    identity: str
    title: str
    category: Optional[str] = None
    area: Optional[str] = None
    image_ref: Optional[str] = None
    instructions: Optional[str] = None
    ingredients: tuple[Ingredient, ...] = ()
    is_custom: bool = False

    @property
    def source(self) -> RecipeSource:
        return RecipeSource.CUSTOM if self.is_custom else RecipeSource.CATALOG

    def same_recipe(self, other: "RecipeRecord") -> bool:
        return self.identity == other.identity


@dataclass(frozen=True)
class Catalog:
    """Aggregated working set plus the category facets derived from it."""
    recipes: tuple[RecipeRecord, ...] = ()
    facets: tuple[str, ...] = (ALL_CATEGORIES,)


@dataclass
class CatalogLoad:
    """Result of one load pass (catalog fetch + custom repository read)."""
    catalog: Catalog
    remote_count: int = 0
    custom_count: int = 0
    remote_error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.remote_error is not None


@dataclass
class BrowseResult:
    """Visible subset for a query/category pair."""
    recipes: list[RecipeRecord]
    facets: tuple[str, ...]
    query: str = ""
    category: str = ALL_CATEGORIES
    remote_error: Optional[str] = None
    total: int = 0
