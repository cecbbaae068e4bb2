"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CODESTRUCT__SECTION__KEY)
3. Built-in defaults (this file)

Examples:
    CODESTRUCT__LOGGING__LEVEL=DEBUG
    CODESTRUCT__SCAN__DOC_WINDOW=30
    CODESTRUCT__SCAN__LABELS__DESCRIPTION="Summary:"
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from codestruct.core.exceptions import ConfigError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class PseudoLabels(BaseModel):
    """Names given to synthesized documentation nodes under callables."""

    model_config = ConfigDict(frozen=True)

    description: str = "Description:"
    parameters: str = "Parameters:"
    returns: str = "Returns:"


class ScanSettings(BaseModel):
    """Scanner tuning.

    Env vars:
        CODESTRUCT__SCAN__DOC_WINDOW: Lines searched upward for a /// block
        CODESTRUCT__SCAN__COMMENT_WINDOW: Lines searched upward for a plain comment
    """

    model_config = ConfigDict(frozen=True)

    doc_window: int = Field(
        default=20,
        ge=1,
        description="Lookback for documentation blocks, which may span many lines.",
    )
    comment_window: int = Field(
        default=5,
        ge=1,
        description="Lookback for a plain // or /* */ comment above a declaration.",
    )
    labels: PseudoLabels = Field(default_factory=PseudoLabels)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CODESTRUCT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        CODESTRUCT__LOGGING__JSON_FORMAT: Emit JSON lines instead of console format
    """

    level: LogLevel = "WARNING"
    json_format: bool = False


class CodestructConfig(BaseSettings):
    """Root configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CODESTRUCT__",
        env_nested_delimiter="__",
        extra="ignore",
    )

    scan: ScanSettings = Field(default_factory=ScanSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(**overrides: Any) -> CodestructConfig:
    """Load configuration from env vars, with kwargs taking precedence.

    Raises:
        ConfigError: If any value fails validation.
    """
    try:
        return CodestructConfig(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
