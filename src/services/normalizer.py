from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from src.app.domain.errors import (
    MalformedRecordError,
    MissingIdentityError,
    RecordRejectedError,
    ValidationFailure,
)
from src.app.domain.models import Ingredient, RecipeRecord
from src.app.schemas.recipes import CustomRecipeDraft, RawRecipeRecord
from src.services.ingredients import extract_ingredients, filled_entries

logger = logging.getLogger(__name__)


def _first_non_empty(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def parse_raw_record(raw: Any) -> RawRecipeRecord:
    if isinstance(raw, RawRecipeRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedRecordError(f"expected an object, got {type(raw).__name__}")
    try:
        return RawRecipeRecord.model_validate(dict(raw))
    except ValidationError as exc:
        raise MalformedRecordError(str(exc.errors()[0].get("msg", exc))) from exc


def resolve_identity(raw: RawRecipeRecord) -> tuple[str, bool]:
    """Return ``(identity, from_custom_field)``; remote id wins over custom id."""
    if raw.idMeal:
        return raw.idMeal, False
    if raw.id:
        return raw.id, True
    raise MissingIdentityError()


def normalize(raw: Any) -> RecipeRecord:
    """
    Map a record in either schema onto a RecipeRecord.

    Each field is the remote-schema value if present and non-empty, else the
    custom-schema value, else None.

    Raises:
        MissingIdentityError: neither ``idMeal`` nor ``id`` is populated
        MalformedRecordError: the value is not a recipe-shaped object
    """
    record = parse_raw_record(raw)
    identity, from_custom_field = resolve_identity(record)
    is_custom = record.isCustom if record.isCustom is not None else from_custom_field

    return RecipeRecord(
        identity=identity,
        title=_first_non_empty(record.strMeal, record.name) or "",
        category=_first_non_empty(record.strCategory, record.category),
        area=_first_non_empty(record.strArea, record.area),
        image_ref=_first_non_empty(record.strMealThumb, record.imageUri),
        instructions=_first_non_empty(record.strInstructions, record.instructions),
        ingredients=tuple(extract_ingredients(record)),
        is_custom=is_custom,
    )


def normalize_many(raw_records: Iterable[Any], *, origin: str) -> list[RecipeRecord]:
    """Normalize a batch, logging and dropping records that are rejected."""
    records: list[RecipeRecord] = []
    for position, raw in enumerate(raw_records):
        try:
            records.append(normalize(raw))
        except RecordRejectedError as exc:
            logger.warning("Dropping %s record #%d: %s", origin, position, exc)
    return records


def validate_custom_draft(draft: CustomRecipeDraft, identity: str) -> RecipeRecord:
    """
    Check a user-authored draft and build the record to store.

    Rules are checked in form order and the first failure is raised.

    Args:
        draft: The candidate as typed by the author
        identity: Identity to assign if the draft is accepted

    Returns:
        The record with blank ingredient rows removed

    Raises:
        ValidationFailure: naming the first missing field
    """
    if _is_blank(draft.name):
        raise ValidationFailure("title")
    if _is_blank(draft.category):
        raise ValidationFailure("category")
    if _is_blank(draft.instructions):
        raise ValidationFailure("instructions")
    entries = filled_entries(draft.ingredients)
    if not entries:
        raise ValidationFailure("ingredients", "At least one ingredient is required")

    return RecipeRecord(
        identity=identity,
        title=draft.name,
        category=draft.category,
        area=draft.area or None,
        image_ref=draft.imageUri or None,
        instructions=draft.instructions,
        ingredients=tuple(
            Ingredient(name=entry.name, amount=entry.measure or "") for entry in entries
        ),
        is_custom=True,
    )


def to_storage(record: RecipeRecord) -> dict[str, Any]:
    """Serialize in the custom schema shape; ``normalize`` reads it back."""
    return {
        "id": record.identity,
        "name": record.title,
        "category": record.category,
        "area": record.area,
        "instructions": record.instructions,
        "imageUri": record.image_ref,
        "ingredients": [
            {"name": ingredient.name, "measure": ingredient.amount}
            for ingredient in record.ingredients
        ],
        "isCustom": record.is_custom,
    }
