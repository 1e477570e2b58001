"""API routes for browsing, searching and scaling recipes."""

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field

from chefscompanion.config import get_settings
from chefscompanion.connectors.mealdb import MealDBConnector
from chefscompanion.detail import RecipeDetail
from chefscompanion.errors import (
    HttpStatusFailure,
    InvalidRequest,
    MalformedResponse,
    MealDBError,
    NotFound,
    TransportFailure,
)
from chefscompanion.logging_config import get_logger
from chefscompanion.models import Recipe
from chefscompanion.search import parse_ingredient_list

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["recipes"])

_settings = get_settings()


# Response schemas
class CategoryOut(BaseModel):
    """Meal category."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    thumbnail_url: str | None = None
    description: str = ""


class MealPreviewOut(BaseModel):
    """Meal summary for lists."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    thumbnail_url: str | None = None


class IngredientOut(BaseModel):
    """Ingredient line."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    measure: str


class RecipeOut(BaseModel):
    """Full recipe."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    area: str
    instructions: str
    thumbnail_url: str | None = None
    youtube_url: str | None = None
    source_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    ingredients: list[IngredientOut] = Field(default_factory=list)


class CategoryListResponse(BaseModel):
    """List of categories."""

    categories: list[CategoryOut]
    total: int


class AreaListResponse(BaseModel):
    """List of areas/cuisines."""

    areas: list[str]
    total: int


class MealPreviewListResponse(BaseModel):
    """List of meal previews."""

    meals: list[MealPreviewOut]
    total: int


class RecipeListResponse(BaseModel):
    """List of full recipes."""

    recipes: list[RecipeOut]
    total: int


class RecipeDetailResponse(BaseModel):
    """Recipe scaled to a serving count."""

    recipe: RecipeOut
    servings: int
    base_servings: int
    ingredients: list[IngredientOut]
    instructions: str
    youtube_embed_url: str | None = None


def get_connector(request: Request) -> MealDBConnector:
    """Get the connector created at application startup."""
    return request.app.state.connector


Connector = Annotated[MealDBConnector, Depends(get_connector)]
Servings = Annotated[
    int | None,
    Query(ge=_settings.min_servings, le=_settings.max_servings, description="Servings to scale to"),
]


def _raise_http_error(error: MealDBError) -> NoReturn:
    """Translate an API layer error into an HTTP response."""
    if isinstance(error, NotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.user_message)
    if isinstance(error, InvalidRequest):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, TransportFailure):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(error, (HttpStatusFailure, MalformedResponse)):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    logger.error(f"Upstream request failed: {error}")
    raise HTTPException(status_code=code, detail=error.user_message)


def _detail_response(recipe: Recipe, servings: int | None) -> RecipeDetailResponse:
    detail = RecipeDetail(recipe)
    if servings is not None:
        detail.set_servings(servings)
    return RecipeDetailResponse(
        recipe=RecipeOut.model_validate(recipe),
        servings=detail.servings,
        base_servings=detail.base_servings,
        ingredients=[IngredientOut.model_validate(i) for i in detail.adjusted_ingredients],
        instructions=detail.formatted_instructions,
        youtube_embed_url=detail.youtube_embed_url,
    )


# =============================================================================
# Browse Endpoints
# =============================================================================


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(connector: Connector) -> CategoryListResponse:
    """List all meal categories."""
    try:
        categories = await connector.get_categories()
    except MealDBError as e:
        _raise_http_error(e)

    return CategoryListResponse(
        categories=[CategoryOut.model_validate(c) for c in categories],
        total=len(categories),
    )


@router.get("/categories/{category}/meals", response_model=MealPreviewListResponse)
async def list_category_meals(category: str, connector: Connector) -> MealPreviewListResponse:
    """List meal previews in a category."""
    try:
        meals = await connector.filter_by_category(category)
    except MealDBError as e:
        _raise_http_error(e)

    return MealPreviewListResponse(
        meals=[MealPreviewOut.model_validate(m) for m in meals],
        total=len(meals),
    )


@router.get("/areas", response_model=AreaListResponse)
async def list_areas(connector: Connector) -> AreaListResponse:
    """List all cuisine areas."""
    try:
        areas = await connector.get_areas()
    except MealDBError as e:
        _raise_http_error(e)

    return AreaListResponse(areas=areas, total=len(areas))


@router.get("/areas/{area}/meals", response_model=MealPreviewListResponse)
async def list_area_meals(area: str, connector: Connector) -> MealPreviewListResponse:
    """List meal previews from a cuisine area."""
    try:
        meals = await connector.filter_by_area(area)
    except MealDBError as e:
        _raise_http_error(e)

    return MealPreviewListResponse(
        meals=[MealPreviewOut.model_validate(m) for m in meals],
        total=len(meals),
    )


# =============================================================================
# Search Endpoints
# =============================================================================


@router.get("/recipes/search", response_model=RecipeListResponse)
async def search_recipes(
    connector: Connector,
    q: Annotated[str, Query(min_length=1, description="Recipe name to search for")],
) -> RecipeListResponse:
    """Search full recipes by name."""
    try:
        recipes = await connector.search_meals_by_name(q)
    except MealDBError as e:
        _raise_http_error(e)

    return RecipeListResponse(
        recipes=[RecipeOut.model_validate(r) for r in recipes],
        total=len(recipes),
    )


@router.get("/recipes/by-ingredients", response_model=MealPreviewListResponse)
async def search_by_ingredients(
    connector: Connector,
    ingredients: Annotated[str, Query(description="Comma-separated ingredient names")],
) -> MealPreviewListResponse:
    """
    Find meals for what is in the fridge.

    Only the first ingredient is sent upstream.
    """
    try:
        meals = await connector.search_by_ingredients(parse_ingredient_list(ingredients))
    except MealDBError as e:
        _raise_http_error(e)

    return MealPreviewListResponse(
        meals=[MealPreviewOut.model_validate(m) for m in meals],
        total=len(meals),
    )


# =============================================================================
# Recipe Endpoints
# =============================================================================


@router.get("/recipes/random", response_model=RecipeDetailResponse)
async def random_recipe(
    connector: Connector, servings: Servings = None
) -> RecipeDetailResponse:
    """Get a random recipe, optionally scaled."""
    try:
        recipe = await connector.get_random_meal()
    except MealDBError as e:
        _raise_http_error(e)

    return _detail_response(recipe, servings)


@router.get("/recipes/{meal_id}", response_model=RecipeDetailResponse)
async def get_recipe(
    meal_id: str, connector: Connector, servings: Servings = None
) -> RecipeDetailResponse:
    """Get a recipe by ID with ingredients scaled to ``servings``."""
    logger.info(f"Getting recipe {meal_id} for servings={servings}")
    try:
        recipe = await connector.get_meal_by_id(meal_id)
    except MealDBError as e:
        _raise_http_error(e)

    return _detail_response(recipe, servings)
