"""Connector for the TheMealDB recipe API."""

from chefscompanion.connectors.base import ConnectorResponse
from chefscompanion.connectors.mealdb import MealDBConnector

__all__ = [
    "ConnectorResponse",
    "MealDBConnector",
]
