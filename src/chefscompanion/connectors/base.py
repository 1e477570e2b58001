"""Shared response type for upstream API calls."""

from dataclasses import dataclass
from typing import Any


@dataclass
class ConnectorResponse:
    """Standardized response from connector API calls."""

    data: Any
    status_code: int
    headers: dict[str, str]
    url: str = ""
