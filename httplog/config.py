"""Configuration for the request logging middleware.

Options are loaded from environment variables using pydantic-settings
(prefix ``HTTPLOG_``) and are immutable once constructed.

Environment variables:
- HTTPLOG_CONCISE: Log the entry line and header/body detail (default: false)
- HTTPLOG_JSON_FORMAT: Render JSON records and keep raw stack traces (default: false)
- HTTPLOG_SKIP_HEADERS: JSON list of extra header names to redact
- HTTPLOG_LOG_LEVEL: Minimum level for the log sink (default: info)
- HTTPLOG_TAGS: JSON object of static fields bound by ``new_logger``
- HTTPLOG_TIME_FORMAT: structlog TimeStamper format (default: iso)
- HTTPLOG_BODY_LIMIT: Bytes of response body captured for errors (default: 512)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class Options(BaseSettings):
    """Request logger options.

    ``json_format`` carries the ``json`` switch: it decides whether panic stack
    traces are logged raw (and records rendered as JSON) or replaced by a
    placeholder while a pretty stack is printed to the console.
    """

    concise: bool = Field(default=False)
    json_format: bool = Field(default=False)
    skip_headers: list[str] = Field(default_factory=list)
    log_level: str = Field(default="info")
    tags: dict[str, str] = Field(default_factory=dict)
    time_format: str = Field(default="iso")
    body_limit: int = Field(
        default=512,
        ge=0,
        description="Capacity of the response body capture buffer"
    )

    model_config = SettingsConfigDict(
        env_prefix="HTTPLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("skip_headers")
    @classmethod
    def lowercase_headers(cls, v: list[str]) -> list[str]:
        return [name.strip().lower() for name in v if name.strip()]

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.strip().lower()
        if level == "warn":
            level = "warning"
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache
def get_options() -> Options:
    """Get cached options instance (singleton).

    Cached to avoid re-reading environment variables on every request.

    Returns:
        Options instance with validated configuration

    Raises:
        ValidationError: If an environment value is invalid
    """
    return Options()
