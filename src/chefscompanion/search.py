"""Recipe search by name or by fridge ingredients, latest query wins."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum

from chefscompanion.config import get_settings
from chefscompanion.connectors.mealdb import MealDBConnector
from chefscompanion.errors import ConnectorError
from chefscompanion.logging_config import LoggingContext, get_logger
from chefscompanion.models import MealPreview, Recipe

logger = get_logger(__name__)


class SearchMode(str, Enum):
    """What the search text is matched against."""

    BY_NAME = "by_name"
    BY_INGREDIENT = "by_ingredient"

    @property
    def placeholder(self) -> str:
        if self is SearchMode.BY_NAME:
            return "Search recipes..."
        return "Chicken, Rice, Garlic..."


def parse_ingredient_list(text: str) -> list[str]:
    """Split comma-separated fridge contents into trimmed, non-empty names."""
    return [name for piece in text.split(",") if (name := piece.strip())]


@dataclass
class SearchOutcome:
    """Result of one search generation."""

    generation: int
    query: str
    mode: SearchMode
    recipes: list[Recipe] = field(default_factory=list)
    previews: list[MealPreview] = field(default_factory=list)
    error: ConnectorError | None = None

    @property
    def has_results(self) -> bool:
        if self.mode is SearchMode.BY_NAME:
            return bool(self.recipes)
        return bool(self.previews)

    @property
    def error_message(self) -> str | None:
        return self.error.user_message if self.error else None


class RecipeSearch:
    """
    Search state for one user session.

    Every new search bumps a generation counter. A search only publishes its
    outcome to ``latest`` if no newer search was started while it ran, so a
    slow, superseded request can never overwrite newer results.
    """

    def __init__(self, connector: MealDBConnector, debounce: float | None = None):
        self.connector = connector
        self.debounce = get_settings().search_debounce_seconds if debounce is None else debounce
        self.mode = SearchMode.BY_NAME
        self.latest: SearchOutcome | None = None
        self._generation = 0
        self._pending: asyncio.Task | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def search(self, query: str, mode: SearchMode | None = None) -> SearchOutcome | None:
        """
        Run a search immediately.

        Returns:
            The outcome, or None if the query was blank or the search was
            superseded before it finished.
        """
        self._cancel_pending()
        return await self._run(query, mode or self.mode, self._next_generation())

    def submit(self, query: str, mode: SearchMode | None = None) -> asyncio.Task | None:
        """
        Schedule a debounced search, cancelling any pending one.

        Blank queries clear the results right away and schedule nothing.
        """
        generation = self._next_generation()
        self._cancel_pending()

        if not query.strip():
            self.latest = None
            return None

        self._pending = asyncio.create_task(self._debounced(query, mode or self.mode, generation))
        return self._pending

    async def _debounced(
        self, query: str, mode: SearchMode, generation: int
    ) -> SearchOutcome | None:
        await asyncio.sleep(self.debounce)
        return await self._run(query, mode, generation)

    async def _run(self, query: str, mode: SearchMode, generation: int) -> SearchOutcome | None:
        if not query.strip():
            if self.is_current(generation):
                self.latest = None
            return None

        with LoggingContext(search_generation=generation):
            outcome = SearchOutcome(generation=generation, query=query, mode=mode)
            try:
                if mode is SearchMode.BY_NAME:
                    outcome.recipes = await self.connector.search_meals_by_name(query.strip())
                else:
                    outcome.previews = await self.connector.search_by_ingredients(
                        parse_ingredient_list(query)
                    )
            except ConnectorError as e:
                logger.warning(f"Search for '{query}' failed: {e}")
                outcome.error = e

            if not self.is_current(generation):
                logger.debug(f"Discarding stale results for '{query}'")
                return None

            self.latest = outcome
            return outcome

    def clear(self) -> None:
        """Drop results and abandon anything in flight."""
        self._next_generation()
        self._cancel_pending()
        self.latest = None

    def switch_mode(self, mode: SearchMode) -> None:
        """Change search mode, clearing results if it actually changed."""
        if mode is not self.mode:
            self.mode = mode
            self.clear()
