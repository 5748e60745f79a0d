"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (MDZVIEW__COMPRESSION__LEVEL=9)
  2. mdzview.yaml           (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("mdzview")
_CONFIG_FILENAME = "mdzview.yaml"


def _find_config_file() -> str | None:
    """Return the path of the first mdzview.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILENAME),
        Path(_DEFAULT_CONFIG_DIR) / _CONFIG_FILENAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CompressionSettings(BaseModel):
    extension: str = "mdz"
    level: int = Field(default=6, ge=1, le=9)

    @field_validator("extension")
    @classmethod
    def _normalise_extension(cls, value: str) -> str:
        value = value.strip().removeprefix(".")
        if not value or "/" in value:
            raise ValueError("extension must be a bare file suffix such as 'mdz'")
        if value == "md":
            raise ValueError("extension must differ from the markdown extension")
        return value


class OutlineSettings(BaseModel):
    # Open the outline panel when a compressed document becomes active
    auto_show: bool = True
    # Close it again when a plain file becomes active
    auto_hide: bool = True
    follow_cursor: bool = False


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: MDZVIEW__OUTLINE__AUTO_SHOW=false
        env_prefix="MDZVIEW__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    compression: CompressionSettings = CompressionSettings()
    outline: OutlineSettings = OutlineSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
