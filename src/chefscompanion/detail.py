"""Recipe detail state: serving size, scaled ingredients and video embed."""

import httpx

from chefscompanion.config import get_settings
from chefscompanion.models import Ingredient, Recipe

YOUTUBE_EMBED_TEMPLATE = "https://www.youtube.com/embed/{video_id}?playsinline=1"


def extract_youtube_video_id(url: str) -> str | None:
    """
    Extract the video ID from a YouTube link.

    Handles formats like:
    - https://www.youtube.com/watch?v=VIDEO_ID
    - https://youtu.be/VIDEO_ID
    - https://www.youtube.com/embed/VIDEO_ID
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError):
        return None

    host = parsed.host
    last_segment = parsed.path.rstrip("/").rsplit("/", 1)[-1]

    if host.endswith("youtube.com") and parsed.path.startswith("/watch"):
        return parsed.params.get("v") or None
    if host == "youtu.be" or (host.endswith("youtube.com") and parsed.path.startswith("/embed/")):
        return last_segment or None
    return None


class RecipeDetail:
    """Serving-size state for one displayed recipe."""

    def __init__(
        self,
        recipe: Recipe,
        base_servings: int | None = None,
        min_servings: int | None = None,
        max_servings: int | None = None,
    ):
        settings = get_settings()
        self.recipe = recipe
        self.base_servings = base_servings or settings.base_servings
        self.min_servings = min_servings or settings.min_servings
        self.max_servings = max_servings or settings.max_servings
        self.servings = self.base_servings

    def set_servings(self, servings: int) -> None:
        """Set the serving count, clamped to the allowed range."""
        self.servings = max(self.min_servings, min(self.max_servings, servings))

    def increment(self) -> None:
        if self.servings < self.max_servings:
            self.servings += 1

    def decrement(self) -> None:
        if self.servings > self.min_servings:
            self.servings -= 1

    def reset(self) -> None:
        self.servings = self.base_servings

    @property
    def adjusted_ingredients(self) -> list[Ingredient]:
        return self.recipe.adjusted_ingredients(self.servings, self.base_servings)

    @property
    def formatted_instructions(self) -> str:
        """Instructions with normalized line endings."""
        return self.recipe.instructions.replace("\r\n", "\n").replace("\r", "\n").strip()

    @property
    def youtube_embed_url(self) -> str | None:
        if not self.recipe.youtube_url:
            return None
        video_id = extract_youtube_video_id(self.recipe.youtube_url)
        if not video_id:
            return None
        return YOUTUBE_EMBED_TEMPLATE.format(video_id=video_id)
