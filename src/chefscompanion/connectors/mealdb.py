"""TheMealDB API connector for recipe data."""

import asyncio
import time
from collections.abc import Iterable
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from chefscompanion.config import Settings, get_settings
from chefscompanion.connectors.base import ConnectorResponse
from chefscompanion.errors import (
    HttpStatusFailure,
    InvalidRequest,
    MalformedResponse,
    TransportFailure,
)
from chefscompanion.logging_config import LoggingContext, get_logger
from chefscompanion.models import Category, MealPreview, Recipe
from chefscompanion.normalize.responses import (
    decode_areas,
    decode_categories,
    decode_meal_previews,
    decode_recipes,
    first_recipe,
)

logger = get_logger(__name__)


class MealDBConnector:
    """Connector for TheMealDB API.

    Create one per application and pass it to whatever needs it.
    """

    BACKOFF_BASE = 1
    BACKOFF_MAX = 30

    def __init__(
        self,
        settings: Settings | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        request_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = settings or get_settings()
        if base_url is None:
            base_url = f"{settings.mealdb_base_url}/{api_key}" if api_key else settings.mealdb_url
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or settings.mealdb_timeout
        self.max_retries = max_retries or settings.mealdb_max_retries
        self.request_delay = (
            settings.mealdb_request_delay if request_delay is None else request_delay
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._last_request_time: float = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Accept": "application/json",
                    "User-Agent": "ChefsCompanion/1.0",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _throttle(self) -> None:
        """Apply rate limiting between requests."""
        elapsed = time.monotonic() - self._last_request_time
        if elapsed < self.request_delay:
            await asyncio.sleep(self.request_delay - elapsed)
        self._last_request_time = time.monotonic()

    def build_url(self, endpoint: str, params: dict[str, str] | None = None) -> httpx.URL:
        """
        Build the request URL with percent-encoded query parameters.

        Raises:
            InvalidRequest: If the URL cannot be constructed.
        """
        try:
            url = httpx.URL(f"{self.base_url}/{endpoint}", params=params)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise InvalidRequest(f"Invalid URL for {endpoint}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidRequest(f"Invalid URL for {endpoint}: {url}")
        return url

    async def _request(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> ConnectorResponse:
        """Make an HTTP request with retry logic."""
        url = self.build_url(endpoint, params)
        await self._throttle()
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
            reraise=True,
        )
        async def _do_request() -> httpx.Response:
            return await client.get(url)

        try:
            response = await _do_request()
        except httpx.UnsupportedProtocol as e:
            raise InvalidRequest(f"Unsupported URL: {url}") from e
        except httpx.TransportError as e:
            logger.error(f"Request failed after {self.max_retries} attempts: {url}: {e}")
            raise TransportFailure(
                f"Request failed after {self.max_retries} attempts: {e.__class__.__name__}",
                response=str(e),
            ) from e

        if not response.is_success:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"API error {response.status_code} for {url}: {error_detail}")
            raise HttpStatusFailure(response.status_code, response=error_detail)

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Failed to parse JSON response from {url}: {e}")
            raise MalformedResponse("Response body is not valid JSON", detail=str(e)) from e

        return ConnectorResponse(
            data=data,
            status_code=response.status_code,
            headers=dict(response.headers),
            url=str(url),
        )

    async def get_categories(self) -> list[Category]:
        """
        Fetch all meal categories.

        Returns:
            Categories in upstream order.
        """
        logger.info("Fetching meal categories")
        response = await self._request("categories.php")

        result = decode_categories(response.data)
        logger.info(f"Fetched {len(result.items)} categories")
        return result.items

    async def get_areas(self) -> list[str]:
        """
        Fetch all cuisine areas/regions.

        Returns:
            List of area names (e.g., "Italian", "Mexican").
        """
        logger.info("Fetching meal areas/cuisines")
        response = await self._request("list.php", params={"a": "list"})

        areas = decode_areas(response.data)
        logger.info(f"Fetched {len(areas)} areas")
        return areas

    async def filter_by_category(self, category: str) -> list[MealPreview]:
        """
        Filter meals by category.

        Args:
            category: Category name (e.g., "Seafood", "Dessert").

        Returns:
            Meal previews, empty if the category has none.
        """
        logger.info(f"Filtering meals by category: {category}")
        response = await self._request("filter.php", params={"c": category})

        result = decode_meal_previews(response.data)
        logger.info(f"Found {len(result.items)} meals in category '{category}'")
        return result.items

    async def filter_by_area(self, area: str) -> list[MealPreview]:
        """Filter meals by area/cuisine (e.g., "Italian", "Japanese")."""
        logger.info(f"Filtering meals by area: {area}")
        response = await self._request("filter.php", params={"a": area})

        result = decode_meal_previews(response.data)
        logger.info(f"Found {len(result.items)} meals from '{area}'")
        return result.items

    async def filter_by_ingredient(self, ingredient: str) -> list[MealPreview]:
        """
        Filter meals by main ingredient.

        Note: This returns summary data only (id, name, thumb).
        Use get_meal_by_id for full details.
        """
        ingredient = ingredient.strip()
        logger.info(f"Filtering meals by ingredient: {ingredient}")
        response = await self._request("filter.php", params={"i": ingredient})

        result = decode_meal_previews(response.data)
        logger.info(f"Found {len(result.items)} meals with '{ingredient}'")
        return result.items

    async def search_by_ingredients(self, ingredients: Iterable[str]) -> list[MealPreview]:
        """
        Search meals for a "fridge" list of ingredients.

        The upstream filter only accepts one ingredient, so only the first
        non-empty name is sent. No client-side intersection is performed.
        """
        first = next((i.strip() for i in ingredients if i and i.strip()), None)
        if first is None:
            return []
        return await self.filter_by_ingredient(first)

    async def search_meals_by_name(self, query: str) -> list[Recipe]:
        """
        Search meals by name.

        Args:
            query: Meal name to search for.

        Returns:
            List of matching meals.
        """
        logger.info(f"Searching meals by name: {query}")
        response = await self._request("search.php", params={"s": query})

        result = decode_recipes(response.data)
        logger.info(f"Found {len(result.items)} meals for '{query}'")
        return result.items

    async def get_meal_by_id(self, meal_id: str) -> Recipe:
        """
        Get full meal details by ID.

        Raises:
            NotFound: If no meal has this ID.
        """
        with LoggingContext(meal_id=meal_id):
            logger.debug(f"Fetching meal by ID: {meal_id}")
            response = await self._request("lookup.php", params={"i": meal_id})
            return first_recipe(response.data)

    async def get_random_meal(self) -> Recipe:
        """
        Get a random meal.

        Raises:
            NotFound: If the API returned no meal.
        """
        logger.debug("Fetching random meal")
        response = await self._request("random.php")
        return first_recipe(response.data)

    async def health_check(self) -> bool:
        """
        Check if TheMealDB API is reachable.

        Returns:
            True if healthy, False otherwise.
        """
        try:
            await self._request("categories.php")
            return True
        except Exception as e:
            logger.warning(f"Health check failed: {e}")
            return False

    async def __aenter__(self) -> "MealDBConnector":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
