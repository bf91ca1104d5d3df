"""Runtime configuration for the afterlife world manager."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from afterlife_world.models import DEFAULT_BORDER_SIZE, DEFAULT_WORLD_NAME, Environment, WorldConfig

_logger = logging.getLogger("afterlife_world.config")


class Settings(BaseSettings):
    """Environment-driven process settings."""

    model_config = SettingsConfigDict(env_prefix="AFTERLIFE_", env_file=".env", extra="ignore")

    app_name: str = "afterlife-world"
    log_level: str = "INFO"
    world_container: Path = Field(
        default=Path("worlds"),
        description="Directory holding one storage folder per world name.",
    )
    config_file: Path = Field(
        default=Path("config.json"),
        description="JSON document with the afterlife.* keys.",
    )
    default_world: str = "world"


settings = Settings()


class ConfigSource(Protocol):
    """Read-only key/value store with typed getters."""

    def get_bool(self, key: str, default: bool) -> bool:
        """Return a boolean value or ``default`` when the key is unset."""

    def get_str(self, key: str, default: str) -> str:
        """Return a string value or ``default`` when the key is unset."""

    def get_int(self, key: str, default: int | None) -> int | None:
        """Return an integer value or ``default`` when unset or not an integer."""


class MappingConfigSource:
    """Config source over a mapping with dotted keys or nested sections."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = {}
        if values:
            self._flatten(values, prefix="")

    def _flatten(self, values: Mapping[str, Any], prefix: str) -> None:
        for key, value in values.items():
            dotted = f"{prefix}{key}"
            if isinstance(value, Mapping):
                self._flatten(value, prefix=f"{dotted}.")
            else:
                self._values[dotted] = value

    def get_bool(self, key: str, default: bool) -> bool:
        value = self._values.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
            return value.strip().lower() == "true"
        return default

    def get_str(self, key: str, default: str) -> str:
        value = self._values.get(key)
        if value is None:
            return default
        return str(value)

    def get_int(self, key: str, default: int | None) -> int | None:
        value = self._values.get(key)
        if isinstance(value, bool) or value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            _logger.warning("config_value_not_integer", extra={"key": key, "value": value})
            return default


def load_config_source(path: str | Path) -> MappingConfigSource:
    """Read a JSON config document; a missing file yields an empty source."""
    config_path = Path(path)
    if not config_path.exists():
        return MappingConfigSource()
    payload = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Config document must be a JSON object: {config_path}")
    return MappingConfigSource(payload)


def is_enabled(source: ConfigSource) -> bool:
    return source.get_bool("afterlife.enabled", False)


def resolve_world_config(source: ConfigSource) -> WorldConfig:
    """Build a fresh ``WorldConfig`` snapshot from ``source``."""
    border_size = source.get_int("afterlife.border-size", DEFAULT_BORDER_SIZE)
    if border_size is None or border_size <= 0:
        _logger.warning("afterlife_border_size_invalid", extra={"border_size": border_size})
        border_size = DEFAULT_BORDER_SIZE

    return WorldConfig(
        world_name=source.get_str("afterlife.world-name", DEFAULT_WORLD_NAME),
        environment=Environment.parse(source.get_str("afterlife.environment", Environment.NORMAL.value)),
        generator=source.get_str("afterlife.generator", "default"),
        seed=source.get_int("afterlife.seed", None),
        border_size=border_size,
        spawn_y=source.get_int("afterlife.spawn-y", None),
        allow_pvp=source.get_bool("afterlife.allow-pvp", False),
        mob_spawning=source.get_bool("afterlife.mob-spawning", True),
    )
