"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the package.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI / OpenRouter
    openai_api_key: str = Field(
        default="",
        description="API key for the chat completions endpoint.",
    )
    openai_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible API base URL.",
    )
    openai_model: str = Field(
        default="openai/gpt-4o",
        description="Chat model used by every AI collaborator.",
    )
    openai_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Request timeout in seconds.",
    )
    generation_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for text generation.",
    )

    # Strategy Selection
    detector_type: str = Field(
        default="openai",
        description="Semantic variable detector: 'openai' or 'none'.",
    )
    generator_type: str = Field(
        default="openai",
        description="Text generator: 'openai' or 'none'.",
    )
    rule_suggester_type: str = Field(
        default="openai",
        description="Rule suggester: 'openai' or 'none'.",
    )

    # Limits
    detector_max_chars: int = Field(
        default=10000,
        gt=0,
        description="Leading characters of a document sent to the semantic detector.",
    )
    generator_context_chars: int = Field(
        default=1000,
        ge=0,
        description="Leading characters of a document passed as generation context.",
    )

    # Deduplication
    similarity_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Minimum similarity for two profile values to be merged.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Directory for info.log and error.log. Console only when unset.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("detector_type", "generator_type", "rule_suggester_type")
    @classmethod
    def normalize_strategy_type(cls, v: str) -> str:
        return v.strip().lower()

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            level=level,
        )

        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
