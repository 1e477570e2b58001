"""Pydantic schemas for validating raw TheMealDB payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

INGREDIENT_SLOTS = 20


def _string_or_none(v: Any) -> str | None:
    """Optional upstream fields are only trusted when they hold a string."""
    return v if isinstance(v, str) else None


class CategoryPayload(BaseModel):
    """One entry of the ``categories.php`` listing."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: StrictStr = Field(alias="idCategory")
    name: StrictStr = Field(alias="strCategory")
    thumbnail: str | None = Field(default=None, alias="strCategoryThumb")
    description: str | None = Field(default=None, alias="strCategoryDescription")

    @field_validator("thumbnail", "description", mode="before")
    @classmethod
    def optional_strings(cls, v: Any) -> str | None:
        return _string_or_none(v)


class MealPreviewPayload(BaseModel):
    """Summary meal returned by the ``filter.php`` endpoints."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: StrictStr = Field(alias="idMeal")
    name: StrictStr = Field(alias="strMeal")
    thumbnail: str | None = Field(default=None, alias="strMealThumb")

    @field_validator("thumbnail", mode="before")
    @classmethod
    def optional_thumbnail(cls, v: Any) -> str | None:
        return _string_or_none(v)


class MealPayload(MealPreviewPayload):
    """Full meal object from lookup, search and random.

    The twenty ``strIngredientN`` / ``strMeasureN`` pairs are not declared as
    fields; they stay reachable through :meth:`slot`.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    category: str | None = Field(default=None, alias="strCategory")
    area: str | None = Field(default=None, alias="strArea")
    instructions: str | None = Field(default=None, alias="strInstructions")
    youtube: str | None = Field(default=None, alias="strYoutube")
    source: str | None = Field(default=None, alias="strSource")
    tags: str | None = Field(default=None, alias="strTags")

    @field_validator("category", "area", "instructions", "youtube", "source", "tags", mode="before")
    @classmethod
    def optional_strings(cls, v: Any) -> str | None:
        return _string_or_none(v)

    def slot(self, index: int) -> tuple[str | None, str | None]:
        """Return the raw (ingredient, measure) pair for slot ``index`` (1-based)."""
        extra = self.model_extra or {}
        return (
            _string_or_none(extra.get(f"strIngredient{index}")),
            _string_or_none(extra.get(f"strMeasure{index}")),
        )
