from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def remote_meal() -> dict[str, Any]:
    meal: dict[str, Any] = {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strCategory": "Chicken",
        "strArea": "Japanese",
        "strInstructions": "Preheat oven to 350 F.",
        "strMealThumb": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
        "strTags": "Meat,Casserole",
        "strYoutube": "https://www.youtube.com/watch?v=4aZr5hZXP_s",
    }
    for index in range(1, 21):
        meal[f"strIngredient{index}"] = ""
        meal[f"strMeasure{index}"] = ""
    meal.update(
        {
            "strIngredient1": "soy sauce",
            "strMeasure1": "3/4 cup",
            "strIngredient2": "water",
            "strMeasure2": "1/2 cup",
            "strIngredient3": "brown sugar",
            "strMeasure3": "1/4 cup ",
        }
    )
    return meal


@pytest.fixture
def custom_recipe() -> dict[str, Any]:
    return {
        "id": "1712345678901",
        "name": "Tarte Tatin",
        "category": "Dessert",
        "area": "French",
        "instructions": "Caramelize the apples, cover with pastry, bake.",
        "imageUri": "file:///data/user/0/images/tatin.jpg",
        "ingredients": [
            {"name": "Apples", "measure": "6"},
            {"name": "Butter", "measure": "100 g"},
            {"name": "Sugar", "measure": "150 g"},
        ],
        "isCustom": True,
    }
