"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Runtime settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="POLYVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Rendering
    render_timeout: float = Field(default=5.0, gt=0.0, description="Concurrent render budget (seconds)")
    enabled_platforms: list[str] = Field(
        default_factory=lambda: ["terminal", "desktop", "web"],
        description="Platforms used by render_all",
    )
    default_platform: str | None = Field(default=None, description="Skip auto-detection when set")

    # Caching
    enable_cache: bool = Field(default=True, description="Memoize compiled documents")
    cache_size: int = Field(default=64, gt=0, description="Compiled document cache size")
    cache_ttl: int | None = Field(default=None, gt=0, description="Cache TTL (seconds)")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
