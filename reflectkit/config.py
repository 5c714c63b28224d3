"""Shared configuration management using pydantic-settings.

Provides centralized configuration with environment variable support.

Environment Variables:
    REFLECTKIT_LOG_LEVEL - Logging level (default: INFO)
    REFLECTKIT_LOG_FORMAT - Log format: json or console (default: console)
    REFLECTKIT_LOG_FILE - Optional log file path (default: stderr)
    REFLECTKIT_STRICT_METHOD_RESOLUTION - Raise on ambiguous generic method
        lookups instead of taking the first match (default: false)
    REFLECTKIT_NONE_TEXT - Text rendered for None in string sets (default: "")

Example:
    export REFLECTKIT_LOG_LEVEL=DEBUG
    export REFLECTKIT_STRICT_METHOD_RESOLUTION=true
"""

from pydantic_settings import BaseSettings
from pydantic import field_validator, Field
from pathlib import Path
from typing import Optional, Literal

from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_NONE_TEXT,
    ENV_PREFIX,
)


class ReflectKitConfig(BaseSettings):
    """Configuration shared by every reflectkit module."""

    # Logging configuration
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: Literal["json", "console"] = "console"
    log_file: Optional[Path] = None

    # Generic method resolution
    strict_method_resolution: bool = Field(
        default=False,
        description="Raise AmbiguousMethodError when several generic methods match"
    )

    # String projection
    none_text: str = Field(
        default=DEFAULT_NONE_TEXT,
        description="Text rendered for None member values"
    )

    @field_validator('log_level', mode='after')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level name."""
        return v.upper()

    model_config = {
        "env_prefix": ENV_PREFIX,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    def get_log_level(self) -> str:
        """Get log level string for structlog."""
        return self.log_level.upper()

    def __str__(self) -> str:
        """String representation for debugging."""
        return (
            f"ReflectKitConfig(log_level={self.log_level}, "
            f"strict_method_resolution={self.strict_method_resolution})"
        )


# Global configuration instance
config = ReflectKitConfig()
