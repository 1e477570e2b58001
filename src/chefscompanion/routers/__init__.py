"""API routers for the chefscompanion application."""

from chefscompanion.routers.recipes import router as recipes_router

__all__ = [
    "recipes_router",
]
