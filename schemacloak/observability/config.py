"""Configuration for logging and tracing."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..core.exceptions import ConfigurationError

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format (json or text)")
    enable_tracing: bool = Field(default=True, description="Enable operation tracing")
    enable_correlation: bool = Field(default=True, description="Enable correlation IDs")
    output: str = Field(default="stdout", description="Log output (stdout, stderr or file)")
    file_path: str | None = Field(default=None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate and normalize the log level name."""
        level = v.upper()
        if level not in _VALID_LEVELS:
            raise ValueError(f"Invalid log level '{v}'. Valid levels: {sorted(_VALID_LEVELS)}")
        return level

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate the renderer format."""
        if v not in ("json", "text"):
            raise ValueError(f"Log format must be 'json' or 'text', got '{v}'")
        return v

    @field_validator("output")
    @classmethod
    def validate_output(cls, v: str) -> str:
        """Validate the log destination."""
        if v not in ("stdout", "stderr", "file"):
            raise ValueError(f"Log output must be 'stdout', 'stderr' or 'file', got '{v}'")
        return v


class ObservabilityConfig(BaseModel):
    """Main configuration for observability."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path | str) -> ObservabilityConfig:
        """Load configuration from a YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {config_path}: {e}", config_file=str(config_path)
            ) from e

        observability_data = config_data.get("observability", {}) if isinstance(config_data, dict) else {}
        try:
            return cls(**observability_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid observability configuration in {config_path}: {e}",
                config_file=str(config_path),
                config_section="observability",
            ) from e

    @classmethod
    def from_env(cls) -> ObservabilityConfig:
        """Load configuration from environment variables."""
        config = cls()

        try:
            config.logging = LoggingConfig(
                level=os.getenv("SCHEMACLOAK_LOG_LEVEL", config.logging.level),
                format=os.getenv("SCHEMACLOAK_LOG_FORMAT", config.logging.format),
                enable_tracing=os.getenv("SCHEMACLOAK_LOG_TRACING", "true").lower() == "true",
                output=config.logging.output,
                file_path=os.getenv("SCHEMACLOAK_LOG_FILE"),
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid logging environment configuration: {e}", config_section="logging"
            ) from e

        if config.logging.file_path:
            config.logging.output = "file"

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()


# Global configuration instance
_config: ObservabilityConfig | None = None


def get_config() -> ObservabilityConfig:
    """Get the global observability configuration."""
    global _config
    if _config is None:
        _config = ObservabilityConfig.from_env()
    return _config


def set_config(config: ObservabilityConfig | None) -> None:
    """Set the global observability configuration; None reloads from the environment on next use."""
    global _config
    _config = config


def load_config(config_path: Path | str | None = None) -> ObservabilityConfig:
    """Load and set the global configuration."""
    if config_path:
        config = ObservabilityConfig.from_file(config_path)
    else:
        config = ObservabilityConfig.from_env()
    set_config(config)
    return config
