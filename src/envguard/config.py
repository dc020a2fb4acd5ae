"""Application configuration using pydantic-settings.

Values resolve from, highest precedence first: explicit overrides (command
line flags), ``ENVGUARD_*`` environment variables, a YAML config file, and
the defaults declared here.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from envguard.domain.models.scan import Severity
from envguard.infrastructure.terraform.executor import (
    DEFAULT_PLAN_FILE,
    DEFAULT_TIMEOUT_SECONDS,
)


CONFIG_FILE_NAME = ".envguard.yaml"


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class TerraformSettings(BaseModel):
    """Terraform invocation settings."""

    dir: str = "."
    binary: str = "terraform"
    plan_file: str = DEFAULT_PLAN_FILE
    timeout_seconds: float | None = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=0)

    model_config = {"extra": "ignore"}


class OutputSettings(BaseModel):
    """Report rendering and exit code policy."""

    format: OutputFormat = OutputFormat.TEXT
    fail_on_severity: Severity = Severity.WARNING

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _accept_camel_case(cls, data: Any) -> Any:
        # Config files spell this key failOnSeverity; snake_case keys come from
        # higher-precedence sources and win.
        if isinstance(data, dict) and "failOnSeverity" in data:
            data = dict(data)
            legacy = data.pop("failOnSeverity")
            data.setdefault("fail_on_severity", legacy)
        return data


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = "WARNING"

    model_config = {"extra": "ignore"}


class Settings(BaseSettings):
    """Main application settings."""

    terraform: TerraformSettings = Field(default_factory=TerraformSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    verbose: bool = False

    model_config = SettingsConfigDict(
        env_prefix="ENVGUARD_",
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.verbose else self.observability.log_level


class ConfigFileNotFoundError(Exception):
    """Raised when an explicitly requested config file does not exist."""


class InvalidConfigFileError(Exception):
    """Raised when a config file does not hold a YAML mapping."""


def find_config_file(explicit: str | None = None) -> str | None:
    """Locate the config file to load.

    An explicit path must exist. Otherwise the first ``.envguard.yaml`` found
    in the current directory, then the home directory, is used.
    """
    if explicit:
        if not os.path.isfile(explicit):
            raise ConfigFileNotFoundError(f"config file not found: {explicit}")
        return os.path.abspath(explicit)

    for directory in (os.getcwd(), os.path.expanduser("~")):
        candidate = os.path.join(directory, CONFIG_FILE_NAME)
        if os.path.isfile(candidate):
            return candidate
    return None


def load_settings(config_file: str | None = None, **overrides: Any) -> Settings:
    """Resolve effective settings from overrides, environment and config file."""
    path = find_config_file(config_file)
    if path is None:
        return Settings(**overrides)

    with open(path, encoding="utf-8") as fh:
        document = yaml.safe_load(fh)
    if document is not None and not isinstance(document, dict):
        raise InvalidConfigFileError(
            f"{path}: expected a mapping at the top level, got {type(document).__name__}"
        )

    class FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=path)

    return FileSettings(**overrides)
