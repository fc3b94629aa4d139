from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from src.app.domain.models import ALL_CATEGORIES, Catalog, RecipeRecord
from src.services.normalizer import normalize_many

logger = logging.getLogger(__name__)


def derive_facets(recipes: Iterable[RecipeRecord]) -> tuple[str, ...]:
    """``("All", *distinct categories)`` in first-seen order, exact matching."""
    seen: dict[str, None] = {}
    for recipe in recipes:
        if recipe.category:
            seen.setdefault(recipe.category, None)
    return (ALL_CATEGORIES, *seen)


def aggregate(
    remote_raw: Sequence[Any],
    custom_records: Sequence[RecipeRecord],
) -> Catalog:
    """
    Merge catalog results and custom recipes into one working set.

    Remote entries come first, then custom ones. Nothing is deduplicated:
    a remote and a custom recipe sharing an identity both stay.
    """
    remote = normalize_many(remote_raw, origin="catalog")
    recipes = (*remote, *custom_records)
    logger.info(
        "Aggregated %d recipes (%d catalog, %d custom)",
        len(recipes),
        len(remote),
        len(custom_records),
    )
    return Catalog(recipes=recipes, facets=derive_facets(recipes))
