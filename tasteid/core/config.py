from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from tasteid.core.version import __version__


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    APP_ENV: Literal["development", "production", "test"] = "production"
    LOG_LEVEL: str = "INFO"

    # Below this many ratings a user stays "unclassified"
    MIN_REVIEWS_FOR_ARCHETYPE: int = 20

    # Size of the top-artist sets compared by the compatibility matcher
    COMPATIBILITY_TOP_ARTISTS: int = 20

    # Compatibility is a pure function; caching is opt-in
    COMPATIBILITY_CACHE_ENABLED: bool = False
    COMPATIBILITY_CACHE_TTL_SECONDS: int = 3600
    COMPATIBILITY_CACHE_MAXSIZE: int = 1024


settings = Settings()

APP_VERSION = __version__
