"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from chefscompanion.connectors.mealdb import MealDBConnector
from chefscompanion.models import Recipe
from chefscompanion.normalize.responses import decode_recipe

MEALDB_TEST_URL = "https://www.themealdb.com/api/json/v1/1"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# MealDB Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_mealdb_categories_response():
    """Sample categories response from MealDB API."""
    return {
        "categories": [
            {
                "idCategory": "1",
                "strCategory": "Beef",
                "strCategoryThumb": "https://www.themealdb.com/images/category/beef.png",
                "strCategoryDescription": "Beef is the culinary name...",
            },
            {
                "idCategory": "2",
                "strCategory": "Chicken",
                "strCategoryThumb": "https://www.themealdb.com/images/category/chicken.png",
                "strCategoryDescription": "Chicken is a type of...",
            },
            {
                "idCategory": "3",
                "strCategory": "Dessert",
                "strCategoryThumb": None,
            },
        ]
    }


@pytest.fixture
def mock_mealdb_filter_response():
    """Sample filter.php response with meal previews."""
    return {
        "meals": [
            {
                "strMeal": "Beef and Mustard Pie",
                "strMealThumb": "https://www.themealdb.com/images/media/meals/sytuqu1511553755.jpg",
                "idMeal": "52874",
            },
            {
                "strMeal": "Beef and Oyster pie",
                "strMealThumb": "https://www.themealdb.com/images/media/meals/wrssvt1511556563.jpg",
                "idMeal": "52878",
            },
        ]
    }


@pytest.fixture
def mock_mealdb_meal():
    """Sample full meal object from MealDB API."""
    return {
        "idMeal": "52772",
        "strMeal": "Teriyaki Chicken Casserole",
        "strDrinkAlternate": None,
        "strCategory": "Chicken",
        "strArea": "Japanese",
        "strInstructions": "Preheat oven to 350° F.\r\nSpray a 9x13-inch baking pan...\r\n",
        "strMealThumb": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
        "strTags": "Meat,Casserole",
        "strYoutube": "https://www.youtube.com/watch?v=4aZr5hZXP_s",
        "strIngredient1": "soy sauce",
        "strIngredient2": "water",
        "strIngredient3": "brown sugar",
        "strIngredient4": "ground ginger",
        "strIngredient5": "minced garlic",
        "strIngredient6": "cornstarch",
        "strIngredient7": "chicken breasts",
        "strIngredient8": "stir-fry vegetables",
        "strIngredient9": "brown rice",
        **{f"strIngredient{i}": "" for i in range(10, 21)},
        "strMeasure1": "3/4 cup",
        "strMeasure2": "1/2 cup",
        "strMeasure3": "1/4 cup",
        "strMeasure4": "1/2 teaspoon",
        "strMeasure5": "1/2 teaspoon",
        "strMeasure6": "4 Tablespoons",
        "strMeasure7": "2",
        "strMeasure8": "1 (12 oz.)",
        "strMeasure9": "3 cups",
        **{f"strMeasure{i}": "" for i in range(10, 21)},
        "strSource": "",
        "strImageSource": None,
        "strCreativeCommonsConfirmed": None,
        "dateModified": None,
    }


@pytest.fixture
def mock_mealdb_meal_response(mock_mealdb_meal):
    """Sample lookup.php response with a single meal."""
    return {"meals": [mock_mealdb_meal]}


@pytest.fixture
def mock_mealdb_search_response(mock_mealdb_meal):
    """Sample search response with multiple meals."""
    return {
        "meals": [
            mock_mealdb_meal,
            {
                "idMeal": "52773",
                "strMeal": "Honey Teriyaki Salmon",
                "strCategory": "Seafood",
                "strArea": "Japanese",
                "strInstructions": "Mix all sauce...",
                "strMealThumb": "https://example.com/thumb2.jpg",
                "strTags": "Fish",
                "strYoutube": None,
                "strIngredient1": "salmon",
                "strIngredient2": "honey",
                "strIngredient3": "soy sauce",
                "strMeasure1": "2 fillets",
                "strMeasure2": "2 tbsp",
                "strMeasure3": "1/4 cup",
                "strSource": None,
            },
        ]
    }


@pytest.fixture
def sample_recipe(mock_mealdb_meal) -> Recipe:
    """Decoded Teriyaki Chicken Casserole."""
    return decode_recipe(mock_mealdb_meal)


# =============================================================================
# Connector Fixtures
# =============================================================================


@pytest.fixture
def connector():
    """Create a connector instance that never sleeps between requests."""
    return MealDBConnector(base_url=MEALDB_TEST_URL, request_delay=0, max_retries=1)


@pytest.fixture
def make_transport_connector() -> Callable[..., MealDBConnector]:
    """Build a connector whose HTTP traffic goes to a request handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> MealDBConnector:
        kwargs.setdefault("base_url", MEALDB_TEST_URL)
        return MealDBConnector(
            request_delay=0,
            max_retries=1,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return _make


@pytest.fixture
def fake_connector():
    """Async mock standing in for MealDBConnector."""
    return AsyncMock(spec=MealDBConnector)
