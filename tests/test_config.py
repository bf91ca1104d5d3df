from __future__ import annotations

import json
from pathlib import Path

import pytest

from afterlife_world.config import MappingConfigSource, Settings, is_enabled, load_config_source, resolve_world_config
from afterlife_world.models import Environment, WorldConfig


def test_defaults_when_nothing_is_configured() -> None:
    config = resolve_world_config(MappingConfigSource())

    assert config == WorldConfig()
    assert config.world_name == "afterlife"
    assert config.border_size == 256
    assert config.spawn_y is None
    assert config.allow_pvp is False
    assert config.mob_spawning is True
    assert is_enabled(MappingConfigSource()) is False


def test_nested_and_dotted_keys_resolve_the_same() -> None:
    nested = MappingConfigSource({"afterlife": {"world-name": "limbo", "border-size": 500}})
    dotted = MappingConfigSource({"afterlife.world-name": "limbo", "afterlife.border-size": 500})

    assert resolve_world_config(nested) == resolve_world_config(dotted)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("NETHER", Environment.NETHER),
        ("nether", Environment.NETHER),
        (" Nether ", Environment.NETHER),
        ("NORMAL", Environment.NORMAL),
        ("the_end", Environment.NORMAL),
        ("", Environment.NORMAL),
    ],
)
def test_environment_parsing(raw: str, expected: Environment) -> None:
    config = resolve_world_config(MappingConfigSource({"afterlife.environment": raw}))

    assert config.environment is expected


@pytest.mark.parametrize(
    ("environment", "generator", "custom"),
    [
        ("NORMAL", "default", False),
        ("NORMAL", "DEFAULT", False),
        ("NORMAL", "void", True),
        ("NETHER", "custom", False),
        ("NETHER", "default", False),
    ],
)
def test_custom_generator_only_for_normal_environment(environment: str, generator: str, custom: bool) -> None:
    source = MappingConfigSource({"afterlife": {"environment": environment, "generator": generator}})

    assert resolve_world_config(source).uses_custom_generator is custom


@pytest.mark.parametrize("border", [0, -10, "wide"])
def test_invalid_border_size_falls_back_to_default(border) -> None:
    config = resolve_world_config(MappingConfigSource({"afterlife.border-size": border}))

    assert config.border_size == 256


def test_optional_integers_and_string_booleans() -> None:
    source = MappingConfigSource(
        {"afterlife": {"enabled": "true", "spawn-y": "100", "seed": 42, "allow-pvp": "yes please"}}
    )
    config = resolve_world_config(source)

    assert is_enabled(source) is True
    assert config.spawn_y == 100
    assert config.seed == 42
    assert config.allow_pvp is False


def test_load_config_source_reads_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"afterlife": {"enabled": True, "world-name": "purgatory"}}), encoding="utf-8")

    source = load_config_source(path)

    assert is_enabled(source) is True
    assert resolve_world_config(source).world_name == "purgatory"


def test_load_config_source_missing_file_is_empty(tmp_path: Path) -> None:
    source = load_config_source(tmp_path / "missing.json")

    assert resolve_world_config(source) == WorldConfig()


def test_load_config_source_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config_source(path)


def test_settings_read_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AFTERLIFE_WORLD_CONTAINER", str(tmp_path))
    monkeypatch.setenv("AFTERLIFE_LOG_LEVEL", "DEBUG")

    current = Settings()

    assert current.world_container == tmp_path
    assert current.log_level == "DEBUG"
