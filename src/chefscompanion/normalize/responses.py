"""Decode raw TheMealDB payloads into the domain model."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx
from pydantic import ValidationError

from chefscompanion.errors import MalformedResponse, NotFound
from chefscompanion.logging_config import get_logger
from chefscompanion.models import Category, Ingredient, MealPreview, Recipe
from chefscompanion.schemas import (
    INGREDIENT_SLOTS,
    CategoryPayload,
    MealPayload,
    MealPreviewPayload,
)

logger = get_logger(__name__)

T = TypeVar("T")
P = TypeVar("P", CategoryPayload, MealPreviewPayload, MealPayload)


@dataclass
class DecodeResult(Generic[T]):
    """Entities decoded from a list payload, plus the elements that failed."""

    items: list[T] = field(default_factory=list)
    errors: list[MalformedResponse] = field(default_factory=list)


# =============================================================================
# Field helpers
# =============================================================================


def parse_url(value: str | None) -> str | None:
    """
    Parse an absolute URL, returning None for anything unusable.

    A URL needs a scheme and a host and may not contain whitespace.
    """
    if not value or any(ch.isspace() for ch in value):
        return None
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError, ValueError):
        return None
    if not url.scheme or not url.host:
        return None
    return str(url)


def parse_optional_url(value: str | None) -> str | None:
    """Like :func:`parse_url`, but an empty string is explicitly absent."""
    if value is None or value == "":
        return None
    return parse_url(value)


def split_tags(value: str | None) -> tuple[str, ...]:
    """Split a comma-joined tag string, dropping empty pieces."""
    if not value:
        return ()
    return tuple(tag for piece in value.split(",") if (tag := piece.strip()))


def extract_ingredients(payload: MealPayload) -> tuple[Ingredient, ...]:
    """Collect the populated ingredient slots 1..20 in order."""
    ingredients = []
    for i in range(1, INGREDIENT_SLOTS + 1):
        name, measure = payload.slot(i)

        # Skip empty slots without stopping the scan
        if not name or not name.strip():
            continue

        ingredients.append(Ingredient(name=name.strip(), measure=(measure or "").strip()))
    return tuple(ingredients)


def _validate(schema: type[P], raw: Any) -> P:
    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        raise MalformedResponse(
            f"Invalid {schema.__name__}: {e.error_count()} validation error(s)",
            detail=e.errors(include_url=False),
        ) from e


# =============================================================================
# Single-entity decoders
# =============================================================================


def decode_category(raw: Any) -> Category:
    """Decode one ``categories.php`` entry."""
    payload = _validate(CategoryPayload, raw)
    return Category(
        id=payload.id,
        name=payload.name,
        thumbnail_url=parse_url(payload.thumbnail),
        description=payload.description or "",
    )


def decode_meal_preview(raw: Any) -> MealPreview:
    """Decode one ``filter.php`` entry."""
    payload = _validate(MealPreviewPayload, raw)
    return MealPreview(
        id=payload.id,
        name=payload.name,
        thumbnail_url=parse_url(payload.thumbnail),
    )


def decode_recipe(raw: Any) -> Recipe:
    """
    Decode a full meal object.

    Thumbnails only treat null/missing as absent, while the YouTube and source
    links also treat an empty string as absent.

    Raises:
        MalformedResponse: If ``idMeal`` or ``strMeal`` is missing or not a string.
    """
    payload = _validate(MealPayload, raw)
    return Recipe(
        id=payload.id,
        name=payload.name,
        category=payload.category or "",
        area=payload.area or "",
        instructions=payload.instructions or "",
        thumbnail_url=parse_url(payload.thumbnail),
        youtube_url=parse_optional_url(payload.youtube),
        source_url=parse_optional_url(payload.source),
        tags=split_tags(payload.tags),
        ingredients=extract_ingredients(payload),
    )


# =============================================================================
# Envelope decoders
# =============================================================================


def _envelope_list(payload: Any, key: str, *, nullable: bool) -> list[Any]:
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(payload).__name__}")

    items = payload.get(key)
    if items is None:
        if nullable:
            return []
        raise MalformedResponse(f"Response is missing '{key}'")
    if not isinstance(items, list):
        raise MalformedResponse(f"Expected '{key}' to be a list, got {type(items).__name__}")
    return items


def decode_each(items: list[Any], decoder: Callable[[Any], T]) -> DecodeResult[T]:
    """Decode every element independently, skipping the malformed ones."""
    result: DecodeResult[T] = DecodeResult()
    for index, raw in enumerate(items):
        try:
            result.items.append(decoder(raw))
        except MalformedResponse as e:
            logger.warning(f"Skipping malformed element {index}: {e}")
            result.errors.append(e)
    return result


def decode_categories(payload: Any) -> DecodeResult[Category]:
    """Decode a ``categories.php`` response body."""
    return decode_each(_envelope_list(payload, "categories", nullable=False), decode_category)


def decode_meal_previews(payload: Any) -> DecodeResult[MealPreview]:
    """Decode a ``filter.php`` response body. Null ``meals`` means no results."""
    return decode_each(_envelope_list(payload, "meals", nullable=True), decode_meal_preview)


def decode_recipes(payload: Any) -> DecodeResult[Recipe]:
    """Decode a ``search.php`` response body. Null ``meals`` means no results."""
    return decode_each(_envelope_list(payload, "meals", nullable=True), decode_recipe)


def decode_areas(payload: Any) -> list[str]:
    """Decode a ``list.php?a=list`` response body into area names, skipping blanks."""
    return [
        m["strArea"]
        for m in _envelope_list(payload, "meals", nullable=True)
        if isinstance(m, dict) and isinstance(m.get("strArea"), str) and m["strArea"].strip()
    ]


def first_recipe(payload: Any) -> Recipe:
    """
    Decode the single meal of a ``lookup.php`` or ``random.php`` response.

    Raises:
        NotFound: If ``meals`` is null, missing or empty.
        MalformedResponse: If the envelope or the meal itself is invalid.
    """
    meals = _envelope_list(payload, "meals", nullable=True)
    if not meals:
        raise NotFound("No meal returned")
    return decode_recipe(meals[0])
