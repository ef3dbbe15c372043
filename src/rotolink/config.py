"""
Configuration management for rotolink.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. Upstream URLs and cache policy can
be overridden via environment variables or a .env file.

Usage:
    from rotolink.config import settings
    print(settings.rotowire_lineups_url)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # Upstream Sources
    # ==========================================================================

    rotowire_lineups_url: str = Field(
        default="https://www.rotowire.com/soccer/lineups.php",
        description="Server-rendered RotoWire predicted lineups page",
    )
    fpl_bootstrap_url: str = Field(
        default="https://fantasy.premierleague.com/api/bootstrap-static/",
        description="FPL bootstrap endpoint holding the canonical player roster",
    )
    fpl_referer: str = Field(
        default="https://fantasy.premierleague.com/",
        description="Referer header sent with FPL requests",
    )
    http_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
        ),
        description="User-Agent sent to both upstream sources",
    )
    http_timeout_seconds: Optional[float] = Field(
        default=None,
        description=(
            "Per-request timeout in seconds. None leaves deadlines to the caller "
            "(cancellation of the awaiting task still propagates)."
        ),
    )

    # ==========================================================================
    # Lookup Tables
    # ==========================================================================

    tables_path: Optional[str] = Field(
        default=None,
        description=(
            "Path to a JSON file overriding the bundled team alias, position "
            "and letter substitution tables"
        ),
    )

    # ==========================================================================
    # Edge Cache Policy
    # ==========================================================================

    cache_max_age: int = Field(
        default=3600,
        description="s-maxage (seconds) for the lineups response",
    )
    cache_stale_while_revalidate: int = Field(
        default=7200,
        description="Grace window (seconds) during which a stale response may be served",
    )

    # ==========================================================================
    # API Configuration
    # ==========================================================================

    api_host: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to",
    )
    api_port: int = Field(
        default=8000,
        description="Port for the API server",
    )
    api_reload: bool = Field(
        default=False,
        description="Enable auto-reload for development",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="logging.basicConfig format string used by scripts and the server",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("cache_max_age", "cache_stale_while_revalidate")
    @classmethod
    def validate_cache_window(cls, v: int) -> int:
        """Cache windows are whole, non-negative seconds."""
        if v < 0:
            raise ValueError("cache windows must be >= 0")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
