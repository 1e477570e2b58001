"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # TheMealDB
    mealdb_api_key: str = "1"  # Public test key
    mealdb_base_url: str = "https://www.themealdb.com/api/json/v1"
    mealdb_timeout: float = 30.0  # request timeout in seconds
    mealdb_max_retries: int = 3
    mealdb_request_delay: float = 0.1  # seconds between requests

    # Serving scaling
    base_servings: int = 2  # Upstream recipes carry no yield, assume 2
    min_servings: int = 1
    max_servings: int = 12

    # Search
    search_debounce_seconds: float = 0.3

    # Application
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def mealdb_url(self) -> str:
        """Get the full MealDB API URL with API key."""
        return f"{self.mealdb_base_url}/{self.mealdb_api_key}"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
