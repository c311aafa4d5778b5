# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Settings and per-declaration overrides for BindWeaver.

Overrides are keyed by container name and selector. Property accessors are
looked up by their getter selector (`title`) and setter selector
(`setTitle:`), so a property's two halves can be configured independently.
"""

from __future__ import annotations

import logging

from pathlib import Path
from typing import Annotated, Any, Self

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from bindweaver.config.logging import LoggingSettings
from bindweaver.core.types import FROZEN_BASEDMODEL_CONFIG, BasedModel
from bindweaver.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class MethodData(BasedModel):
    """Override record for a single method or property accessor."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    skipped: Annotated[bool, Field(description="Drop the declaration entirely.")] = False
    unsafe: Annotated[
        bool, Field(description="Expose the binding only behind an explicit `unsafe` marker.")
    ] = True
    mutating: Annotated[
        bool, Field(description="Take the receiver as a mutable borrow.")
    ] = False


class ContainerData(BasedModel):
    """Overrides for every declaration in one class, protocol or category."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    skipped: bool = False
    default: MethodData = Field(default_factory=MethodData)
    methods: dict[str, MethodData] = Field(default_factory=dict)

    def method_data(self, selector: str) -> MethodData:
        return self.methods.get(selector, self.default)


class BindWeaverSettings(BaseSettings):
    """Main configuration model following pydantic-settings patterns.

    Configuration precedence (highest to lowest):
    1. Direct initialization arguments
    2. Environment variables (BINDWEAVER_*)
    3. `bindweaver.toml` then `bindweaver.json` in the working directory
    4. Defaults
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_prefix="BINDWEAVER_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
        str_strip_whitespace=True,
        use_attribute_docstrings=True,
        validate_by_alias=True,
        validate_by_name=True,
        toml_file="bindweaver.toml",
        json_file="bindweaver.json",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    """How diagnostics are logged."""
    fail_fast: bool = True
    """Abort the run on the first consistency fault.

    When false, the offending declaration is dropped and recorded as an error.
    """
    containers: dict[str, ContainerData] = Field(default_factory=dict)
    """Per-container overrides keyed by container name."""

    @field_validator("containers", mode="before")
    @classmethod
    def _drop_empty(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {name: data for name, data in value.items() if data is not None}
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read init arguments, then environment, then the config files."""
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
            JsonConfigSettingsSource(settings_cls),
        )

    @classmethod
    def from_config(cls, path: Path, **kwargs: Any) -> Self:
        """Create settings from a specific `.toml` or `.json` file.

        Raises:
            ConfigurationError: if the file type is unsupported, missing or invalid.
        """
        if not path.exists():
            raise ConfigurationError(
                f"configuration file {path} does not exist", details={"path": str(path)}
            )
        match path.suffix.lower():
            case ".toml":
                source_config = SettingsConfigDict(toml_file=path, json_file=None)
            case ".json":
                source_config = SettingsConfigDict(json_file=path, toml_file=None)
            case extension:
                raise ConfigurationError(
                    f"Unsupported configuration file format: {extension}",
                    details={"path": str(path)},
                    suggestions=["Use a .toml or .json file"],
                )

        class FileSettings(cls):  # type: ignore[valid-type, misc]
            model_config = cls.model_config | source_config

        try:
            return FileSettings(**kwargs)
        except ValidationError as e:
            raise ConfigurationError(
                f"invalid configuration in {path}",
                details={"path": str(path), "errors": e.errors()},
            ) from e

    def container_data(self, container: str) -> ContainerData:
        return self.containers.get(container) or ContainerData()

    def method_data(self, container: str, selector: str) -> MethodData:
        """Return the override record for `selector` in `container`."""
        return self.container_data(container).method_data(selector)


_settings: BindWeaverSettings | None = None
"""The global settings instance. Use `get_settings()` to access it."""


def get_settings(config_file: Path | None = None) -> BindWeaverSettings:
    """Get the global settings instance, creating it on first use."""
    global _settings
    if config_file is not None:
        _settings = BindWeaverSettings.from_config(config_file)
        logger.debug("Loaded settings from %s", config_file)
    elif _settings is None:
        _settings = BindWeaverSettings()
    return _settings


def reset_settings() -> None:
    """Forget the global settings; the next `get_settings()` reloads them."""
    global _settings
    _settings = None


__all__ = (
    "BindWeaverSettings",
    "ContainerData",
    "MethodData",
    "get_settings",
    "reset_settings",
)
