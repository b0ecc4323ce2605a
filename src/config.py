"""
Configuration module for AI Code Reviewer.

Uses pydantic-settings for configuration management with environment variables.
"""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_INSTRUCTION = """You are a senior code reviewer. Review the provided code with:
- clarity and readability improvements
- performance and optimization suggestions
- security issues
- best practices
- proper structure
Return your response in a clean, formatted manner."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key for the review model",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model identifier sent with every review request",
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        description="Alternate OpenAI-compatible API base URL",
    )
    openai_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Temperature for model responses (lower = more consistent)",
    )
    openai_max_tokens: int = Field(
        default=2000,
        ge=100,
        le=8000,
        description="Maximum tokens for model responses",
    )
    system_instruction: str = Field(
        default=DEFAULT_SYSTEM_INSTRUCTION,
        min_length=1,
        description="System instruction configuring the reviewer persona",
    )
    upstream_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout in seconds for a single model call",
    )

    # Application Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    # Review Client Settings
    review_api_url: str = Field(
        default="http://localhost:8000/ai/getReview",
        description="Endpoint the review client posts code to",
    )
    client_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total attempts the review client makes per review",
    )
    client_backoff_base: float = Field(
        default=1.0,
        ge=0.0,
        description="Backoff unit in seconds; delay is 2^attempt * base",
    )
    client_timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="Timeout in seconds for a single client attempt",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def is_openai_configured(self) -> bool:
        """Check if OpenAI is properly configured."""
        return bool(self.openai_api_key and self.openai_api_key != "your_openai_api_key_here")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """
    Configure application logging.

    Args:
        settings: Optional settings instance. If not provided, uses cached settings.

    Returns:
        logging.Logger: Configured logger instance.
    """
    if settings is None:
        settings = get_settings()

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Get logger for the application
    logger = logging.getLogger("code_reviewer")
    logger.setLevel(getattr(logging, settings.log_level))

    return logger
