"""Error taxonomy for the recipe API layer."""

from typing import Any


class MealDBError(Exception):
    """Base exception for everything the recipe API layer can report."""

    user_message = "Something went wrong."

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(MealDBError):
    """A lookup returned no result. Expected, not a request failure."""

    user_message = "No results found."


class ConnectorError(MealDBError):
    """Base exception for failed requests."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class InvalidRequest(ConnectorError):
    """The request URL could not be constructed."""

    user_message = "The URL is invalid."


class TransportFailure(ConnectorError):
    """The request could not complete (connectivity, timeout)."""

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"Network error: {self.message}"


class HttpStatusFailure(ConnectorError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, response: Any = None):
        super().__init__(
            f"API request failed with status {status_code}",
            status_code=status_code,
            response=response,
        )

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"Server returned error code: {self.status_code}"


class MalformedResponse(ConnectorError):
    """The payload could not be decoded into the expected shape."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message, response=detail)
        self.detail = detail

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"Failed to decode response: {self.message}"
