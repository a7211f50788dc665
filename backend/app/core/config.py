# backend/app/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    app_name: str = "LeetSync"
    environment: str = "development"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://localhost:5432/leetsync"

    # Security
    secret_key: str = "dev-secret-key-change-in-production"
    encryption_key: str | None = None  # Fernet key; derived from secret_key when unset

    # LeetCode GraphQL
    leetcode_graphql_url: str = "https://leetcode.com/graphql/"
    leetcode_timeout_seconds: float = 10.0

    # Problem metadata cache
    metadata_cache_ttl_days: int = 7

    recent_submissions_limit: int = 10

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
