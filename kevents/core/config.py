"""Configuration management for kevents emitters."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from .exceptions import ConfigurationError


class EmitterConfig(BaseSettings):
    """
    Configuration for a KEvents emitter.

    Can be loaded from:
    - Environment variables (prefix: KEVENTS_)
    - YAML file
    - Direct initialization

    Example:
        >>> config = EmitterConfig(name="orders", debug=True)
        >>> config = EmitterConfig.from_yaml("kevents.yaml")
        >>> config = EmitterConfig()
    """

    model_config = SettingsConfigDict(
        env_prefix="KEVENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    name: str = Field(
        default="kevents",
        description="Debug name included in trace records",
    )
    debug: bool = Field(
        default=False,
        description="Record subscribe/emit/clear operations in the emitter's tracer",
    )
    max_trace_events: int = Field(
        default=1000,
        ge=0,
        description="Max trace events kept in memory (0=unlimited)",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank debug names."""
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()

    @classmethod
    def from_yaml(cls, path: Path | str) -> EmitterConfig:
        """
        Load configuration from a YAML file.

        Environment variables take precedence over values in the file.

        Args:
            path: Path to YAML configuration file

        Returns:
            EmitterConfig instance

        Raises:
            ConfigurationError: If the file is missing or not a YAML mapping
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        if not isinstance(yaml_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")

        result_data = {}
        for key, value in yaml_data.items():
            if f"KEVENTS_{key.upper()}" in os.environ:
                continue
            result_data[key] = value

        return cls(**result_data)

    def to_yaml(self, path: Path | str) -> None:
        """
        Save configuration to a YAML file.

        Args:
            path: Path to save YAML configuration
        """
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    def __repr__(self) -> str:
        return f"EmitterConfig(name={self.name!r}, debug={self.debug})"
