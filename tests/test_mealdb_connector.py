"""Tests for TheMealDB API connector."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from chefscompanion.config import Settings
from chefscompanion.connectors.base import ConnectorResponse
from chefscompanion.connectors.mealdb import MealDBConnector
from chefscompanion.errors import (
    ConnectorError,
    HttpStatusFailure,
    InvalidRequest,
    MalformedResponse,
    NotFound,
    TransportFailure,
)
from chefscompanion.models import Category, MealPreview, Recipe


def ok(data) -> ConnectorResponse:
    return ConnectorResponse(data=data, status_code=200, headers={})


class TestMealDBConnector:
    """Tests for MealDBConnector API calls."""

    @pytest.mark.asyncio
    async def test_get_categories(self, connector, mock_mealdb_categories_response):
        """Test fetching categories."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_categories_response)

            categories = await connector.get_categories()

            assert len(categories) == 3
            assert isinstance(categories[0], Category)
            assert categories[0].name == "Beef"
            mock_request.assert_called_once_with("categories.php")

    @pytest.mark.asyncio
    async def test_get_areas(self, connector):
        """Test fetching areas/cuisines."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(
                {"meals": [{"strArea": "Italian"}, {"strArea": ""}, {"strArea": "Japanese"}]}
            )

            areas = await connector.get_areas()

            assert areas == ["Italian", "Japanese"]
            mock_request.assert_called_once_with("list.php", params={"a": "list"})

    @pytest.mark.asyncio
    async def test_filter_by_category(self, connector, mock_mealdb_filter_response):
        """Test filtering meals by category."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_filter_response)

            meals = await connector.filter_by_category("Beef")

            assert len(meals) == 2
            assert isinstance(meals[0], MealPreview)
            mock_request.assert_called_once_with("filter.php", params={"c": "Beef"})

    @pytest.mark.asyncio
    async def test_filter_by_category_null_meals(self, connector):
        """A null meals list is an empty result, not an error."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok({"meals": None})

            assert await connector.filter_by_category("Nothing") == []

    @pytest.mark.asyncio
    async def test_filter_by_area(self, connector, mock_mealdb_filter_response):
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_filter_response)

            meals = await connector.filter_by_area("British")

            assert len(meals) == 2
            mock_request.assert_called_once_with("filter.php", params={"a": "British"})

    @pytest.mark.asyncio
    async def test_filter_by_ingredient_trims(self, connector, mock_mealdb_filter_response):
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_filter_response)

            await connector.filter_by_ingredient("  chicken breast ")

            mock_request.assert_called_once_with("filter.php", params={"i": "chicken breast"})

    @pytest.mark.asyncio
    async def test_search_by_ingredients_uses_first_non_empty(self, connector):
        """Only the first non-empty ingredient is sent upstream."""
        with patch.object(
            connector, "filter_by_ingredient", new_callable=AsyncMock
        ) as mock_filter:
            mock_filter.return_value = []

            await connector.search_by_ingredients(["", "  ", " Chicken ", "Rice"])

            mock_filter.assert_awaited_once_with("Chicken")

    @pytest.mark.asyncio
    async def test_search_by_ingredients_empty(self, connector):
        """No usable ingredient means no request."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            assert await connector.search_by_ingredients([]) == []
            assert await connector.search_by_ingredients(["", " "]) == []
            mock_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_meals_by_name(self, connector, mock_mealdb_search_response):
        """Test searching meals by name."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_search_response)

            meals = await connector.search_meals_by_name("Teriyaki")

            assert len(meals) == 2
            assert isinstance(meals[0], Recipe)
            assert meals[0].name == "Teriyaki Chicken Casserole"
            mock_request.assert_called_once_with("search.php", params={"s": "Teriyaki"})

    @pytest.mark.asyncio
    async def test_search_skips_malformed_meals(self, connector, mock_mealdb_search_response):
        """One broken meal does not drop the rest of the results."""
        mock_mealdb_search_response["meals"][0].pop("idMeal")
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_search_response)

            meals = await connector.search_meals_by_name("Teriyaki")

            assert [m.id for m in meals] == ["52773"]

    @pytest.mark.asyncio
    async def test_get_meal_by_id(self, connector, mock_mealdb_meal_response):
        """Test getting a single meal by ID."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_meal_response)

            meal = await connector.get_meal_by_id("52772")

            assert meal.id == "52772"
            assert meal.name == "Teriyaki Chicken Casserole"
            mock_request.assert_called_once_with("lookup.php", params={"i": "52772"})

    @pytest.mark.asyncio
    async def test_get_meal_by_id_not_found(self, connector):
        """Test getting a non-existent meal."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok({"meals": None})

            with pytest.raises(NotFound):
                await connector.get_meal_by_id("99999")

    @pytest.mark.asyncio
    async def test_get_random_meal(self, connector, mock_mealdb_meal_response):
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok(mock_mealdb_meal_response)

            meal = await connector.get_random_meal()

            assert meal.id == "52772"
            mock_request.assert_called_once_with("random.php")

    @pytest.mark.asyncio
    async def test_health_check_success(self, connector):
        """Test successful health check."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = ok({"categories": []})

            assert await connector.health_check() is True
            mock_request.assert_called_once_with("categories.php")

    @pytest.mark.asyncio
    async def test_health_check_failure(self, connector):
        """Test failed health check."""
        with patch.object(connector, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = TransportFailure("Connection failed")

            assert await connector.health_check() is False

    @pytest.mark.asyncio
    async def test_connector_context_manager(self, connector):
        """Test using connector as async context manager."""
        with patch.object(connector, "_get_client", new_callable=AsyncMock):
            with patch.object(connector, "close", new_callable=AsyncMock) as mock_close:
                async with connector as conn:
                    assert conn is connector
                mock_close.assert_called_once()


class TestMealDBTransport:
    """Tests for request construction and failure classification."""

    @pytest.mark.asyncio
    async def test_query_is_percent_encoded(self, make_transport_connector):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"meals": None})

        async with make_transport_connector(handler) as connector:
            await connector.filter_by_ingredient("chicken breast & rice")

        url = seen[0].url
        assert url.path == "/api/json/v1/1/filter.php"
        assert url.params["i"] == "chicken breast & rice"
        assert " " not in str(url)
        assert "&rice" not in str(url)

    @pytest.mark.asyncio
    async def test_http_status_failure(self, make_transport_connector):
        connector = make_transport_connector(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(HttpStatusFailure) as exc_info:
            await connector.get_categories()
        await connector.close()

        assert exc_info.value.status_code == 500
        assert "500" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_invalid_json_is_malformed(self, make_transport_connector):
        connector = make_transport_connector(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(MalformedResponse):
            await connector.get_categories()
        await connector.close()

    @pytest.mark.asyncio
    async def test_transport_failure(self, make_transport_connector):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        connector = make_transport_connector(handler)

        with pytest.raises(TransportFailure) as exc_info:
            await connector.get_categories()
        await connector.close()

        assert isinstance(exc_info.value, ConnectorError)

    @pytest.mark.asyncio
    async def test_lookup_not_found_is_not_a_failure(self, make_transport_connector):
        connector = make_transport_connector(
            lambda request: httpx.Response(200, json={"meals": None})
        )

        with pytest.raises(NotFound) as exc_info:
            await connector.get_meal_by_id("0")
        await connector.close()

        assert not isinstance(exc_info.value, ConnectorError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response,expected",
        [
            (httpx.Response(200, json={"categories": []}), True),
            (httpx.Response(500, text="down"), False),
            (httpx.Response(200, text="<html>"), False),
        ],
    )
    async def test_health_check_reflects_request(self, make_transport_connector, response, expected):
        connector = make_transport_connector(lambda request: response)

        assert await connector.health_check() is expected
        await connector.close()

    @pytest.mark.asyncio
    async def test_invalid_base_url(self, make_transport_connector):
        connector = make_transport_connector(
            lambda request: httpx.Response(200, json={}), base_url="not a url"
        )

        with pytest.raises(InvalidRequest):
            await connector.get_categories()

    def test_base_url_from_api_key(self):
        connector = MealDBConnector(api_key="abc")
        assert connector.base_url.endswith("/abc")

    def test_base_url_from_settings(self):
        settings = Settings(mealdb_base_url="https://example.com/api/json/v1", mealdb_api_key="xyz")
        connector = MealDBConnector(settings=settings)
        assert connector.base_url == "https://example.com/api/json/v1/xyz"
