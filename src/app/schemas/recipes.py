from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.app.domain.models import ALL_CATEGORIES


class IngredientEntry(BaseModel):
    """Ingredient row in the custom schema. Older values may say ``amount``."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = ""
    measure: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("measure", "amount"),
    )


class RawRecipeRecord(BaseModel):
    """
    Union of the two recipe schemas.

    Remote catalog fields (``idMeal``, ``strMeal``...) and custom fields
    (``id``, ``name``...) are both declared; numbered ``strIngredientN`` /
    ``strMeasureN`` slots are kept as extras.
    """
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    # remote catalog schema
    idMeal: Optional[str] = None
    strMeal: Optional[str] = None
    strCategory: Optional[str] = None
    strArea: Optional[str] = None
    strInstructions: Optional[str] = None
    strMealThumb: Optional[str] = None

    # custom schema
    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    area: Optional[str] = None
    instructions: Optional[str] = None
    imageUri: Optional[str] = None
    ingredients: Optional[list[IngredientEntry]] = None
    isCustom: Optional[bool] = None

    def slot(self, field_name: str) -> Any:
        return (self.model_extra or {}).get(field_name)


class CustomRecipeDraft(BaseModel):
    name: str = ""
    category: str = ""
    area: str = ""
    instructions: str = ""
    imageUri: str = ""
    ingredients: list[IngredientEntry] = Field(
        default_factory=lambda: [IngredientEntry()],
    )


class IngredientResponse(BaseModel):
    name: str
    amount: str = ""


class RecipeResponse(BaseModel):
    identity: str
    title: str
    category: Optional[str] = None
    area: Optional[str] = None
    imageRef: Optional[str] = None
    instructions: Optional[str] = None
    ingredients: list[IngredientResponse] = Field(default_factory=list)
    isCustom: bool = False
    isFavorite: bool = False


class RecipeListResponse(BaseModel):
    recipes: list[RecipeResponse]
    facets: list[str]
    query: str = ""
    category: str = ALL_CATEGORIES
    total: int = 0
    remoteError: Optional[str] = None


class FavoriteToggleResponse(BaseModel):
    identity: str
    isFavorite: bool
