from __future__ import annotations

from pathlib import Path

import pytest

from afterlife_world.config import MappingConfigSource
from afterlife_world.host import LocalStorageTree, MemoryWorldRegistry
from afterlife_world.lifecycle import AfterlifeWorldManager
from afterlife_world.models import WorldCreateOptions
from afterlife_world.notify import NotifyLevel


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[NotifyLevel, str]] = []

    def emit(self, level: NotifyLevel, text: str) -> None:
        self.messages.append((level, text))


@pytest.fixture
def registry(tmp_path: Path) -> MemoryWorldRegistry:
    registry = MemoryWorldRegistry(tmp_path / "worlds")
    registry.create(WorldCreateOptions(name="world"))
    return registry


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_manager(registry: MemoryWorldRegistry):
    def _make(values: dict | None = None, *, storage=None, target_registry=None) -> AfterlifeWorldManager:
        target = target_registry or registry
        return AfterlifeWorldManager(
            config=MappingConfigSource(values or {}),
            registry=target,
            world_container=target.container,
            storage=storage or LocalStorageTree(),
        )

    return _make
