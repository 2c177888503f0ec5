"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    max_nested_recipe_depth: int = 3
    suggestion_limit: int = 20
    suggestion_excluded_categories: str | None = "Ingredient"
    expiring_soon_days: int = 3
    upcoming_days: int = 7
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_categories(raw: str | None) -> list[str]:
    """Parse a comma-separated category list from env."""
    if raw is None:
        return []
    categories: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and value not in categories:
            categories.append(value)
    return categories
