"""Domain model for categories, meal previews and recipes."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4

from chefscompanion.normalize.measures import scale_measure

DEFAULT_BASE_SERVINGS = 2


@dataclass(frozen=True)
class Ingredient:
    """A single ingredient line of a recipe.

    Every instance gets its own ``id``, so two "salt" lines in the same recipe
    stay distinct entries.
    """

    name: str
    measure: str
    id: UUID = field(default_factory=uuid4)

    def adjusted(self, for_servings: int, base_servings: int = DEFAULT_BASE_SERVINGS) -> "Ingredient":
        """
        Return this ingredient with its measure scaled to another serving count.

        Args:
            for_servings: Target number of servings.
            base_servings: Servings the original measure is written for.

        Returns:
            ``self`` when the counts match, otherwise a new Ingredient.

        Raises:
            ValueError: If base_servings is not positive.
        """
        if for_servings == base_servings:
            return self
        if base_servings <= 0:
            raise ValueError(f"base_servings must be positive, got {base_servings}")

        multiplier = for_servings / base_servings
        return Ingredient(name=self.name, measure=scale_measure(self.measure, multiplier))


@dataclass(frozen=True)
class Category:
    """A meal category such as Beef, Dessert or Vegan."""

    id: str
    name: str
    thumbnail_url: str | None = None
    description: str = ""


@dataclass(frozen=True)
class Recipe:
    """Full recipe with instructions and ingredients in source order."""

    id: str
    name: str
    category: str = ""
    area: str = ""
    instructions: str = ""
    thumbnail_url: str | None = None
    youtube_url: str | None = None
    source_url: str | None = None
    tags: tuple[str, ...] = ()
    ingredients: tuple[Ingredient, ...] = ()

    def adjusted_ingredients(
        self, for_servings: int, base_servings: int = DEFAULT_BASE_SERVINGS
    ) -> list[Ingredient]:
        """Scale every ingredient, leaving ``self.ingredients`` untouched."""
        return [i.adjusted(for_servings, base_servings) for i in self.ingredients]


@dataclass(frozen=True)
class MealPreview:
    """Lightweight meal projection used in lists and grids."""

    id: str
    name: str
    thumbnail_url: str | None = None

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "MealPreview":
        """Project a full recipe down to its identifying fields."""
        return cls(id=recipe.id, name=recipe.name, thumbnail_url=recipe.thumbnail_url)
