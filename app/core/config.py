from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.version import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    APP_NAME: str = "Afterspace"
    APP_ENV: Literal["development", "production", "test"] = "production"

    REDIS_URL: str = "redis://redis:6379/0"
    # Maximum number of connections Redis client will open per process
    REDIS_MAX_CONNECTIONS: int = 20
    REDIS_PROFILE_KEY: str = "afterspace:profile:"
    REDIS_EXPERIENCE_KEY: str = "afterspace:experience:"
    REDIS_EXPERIENCE_LIST_KEY: str = "afterspace:experiences"
    REDIS_GEO_INDEX_KEY: str = "afterspace:geo:"
    REDIS_INTEREST_KEY: str = "afterspace:interest:"

    # Header set by the API gateway after it has verified the caller
    USER_ID_HEADER: str = "X-User-Id"

    # Optional JSON file replacing the built-in questionnaire catalog
    CATALOG_PATH: str | None = None
    # Reject multiple/single choice answers that are not among the declared options
    ANSWER_OPTION_VALIDATION: bool = False
    PROFILE_UPDATE_MAX_RETRIES: int = 5
    EXPERIENCE_UPDATE_MAX_RETRIES: int = 5

    GEOHASH_PRECISION: int = 6  # ~1.2km x 0.6km cells
    NEARBY_DEFAULT_RADIUS_KM: float = 5.0


settings = Settings()

APP_VERSION = __version__
