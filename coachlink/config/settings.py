from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_storage_path() -> str:
    """Absolute path of the JSON file used by the file-backed store."""
    return str((Path.cwd() / "coachlink_store.json").resolve())


class Settings(BaseSettings):
    api_base_url: str = Field(
        default="http://localhost:8000/api",  # Default for local dev; set to the deployed API in production
        validation_alias="API_BASE_URL",
    )
    api_timeout_seconds: float = Field(default=15.0, validation_alias="API_TIMEOUT_SECONDS")
    api_max_retries: int = Field(
        default=2,
        validation_alias="API_MAX_RETRIES",
        description="Retries for rate-limited (HTTP 429) requests",
    )
    api_retry_delay_seconds: float = Field(
        default=0.5,
        validation_alias="API_RETRY_DELAY_SECONDS",
        description="Initial backoff delay, doubled on every retry",
    )
    storage_backend: Literal["memory", "file", "redis"] = Field(
        default="memory",
        validation_alias="STORAGE_BACKEND",
    )
    storage_path: str = Field(
        default_factory=get_default_storage_path,
        validation_alias="STORAGE_PATH",
    )
    redis_url: str = Field(default="redis://localhost:6379/0", validation_alias="REDIS_URL")
    storage_namespace: str = Field(
        default="coachlink:",
        validation_alias="STORAGE_NAMESPACE",
        description="Key prefix applied by the redis store",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, value: str) -> str:
        """Strip the trailing slash so paths can always start with '/'."""
        if not value.startswith(("http://", "https://")):
            logger.warning(f"API_BASE_URL should be an http(s) URL, but got: {value}. Requests will likely fail.")
        return value.rstrip("/")

    @field_validator("api_max_retries")
    @classmethod
    def validate_api_max_retries(cls, value: int) -> int:
        if value < 0:
            logger.warning(f"API_MAX_RETRIES cannot be negative (got {value}). Defaulting to 0.")
            return 0
        return value


settings = Settings()
