"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from chefscompanion import __version__
from chefscompanion.config import get_settings
from chefscompanion.connectors.mealdb import MealDBConnector
from chefscompanion.logging_config import LoggingContext, configure_logging, get_logger
from chefscompanion.routers import recipes_router

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared MealDB connector for the app's lifetime."""
    logger.info("Starting ChefsCompanion API")
    app.state.connector = MealDBConnector(settings=settings)

    yield

    logger.info("Shutting down ChefsCompanion API")
    await app.state.connector.close()


app = FastAPI(
    title="ChefsCompanion API",
    description="Recipe discovery, fridge search and serving scaling",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def assign_request_id(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with a request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(recipes_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "chefscompanion-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "ChefsCompanion API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
