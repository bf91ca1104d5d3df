from __future__ import annotations

import json
from pathlib import Path

from afterlife_world.host import LocalStorageTree, MemoryWorldRegistry
from afterlife_world.lifecycle import (
    DELETE_FAILED_MESSAGE,
    EVACUATION_FAILED_MESSAGE,
    UNLOAD_FAILED_MESSAGE,
)
from afterlife_world.models import Location, RegenerationFailure
from afterlife_world.notify import NotifyLevel


class SpyStorage(LocalStorageTree):
    def __init__(self, fail_on: str | None = None) -> None:
        super().__init__()
        self.fail_on = fail_on
        self.removed: list[str] = []
        self.touched = False

    def exists(self, path: Path) -> bool:
        self.touched = True
        return super().exists(path)

    def remove(self, path: Path) -> bool:
        if self.fail_on is not None and path.name == self.fail_on:
            return False
        self.removed.append(path.name)
        return super().remove(path)


class StickyRegistry(MemoryWorldRegistry):
    """Reports a successful unload but keeps the world loaded."""

    def unload(self, world, save: bool) -> bool:
        return True


def _level_seed(registry: MemoryWorldRegistry) -> int:
    payload = json.loads((registry.container / "afterlife" / "level.json").read_text(encoding="utf-8"))
    return payload["seed"]


def test_regenerate_end_to_end(registry: MemoryWorldRegistry, make_manager, notifier) -> None:
    manager = make_manager({"afterlife.enabled": True})
    assert manager.get_world() is None

    manager.init(seed=1)
    old_world = manager.get_world()
    folder = registry.container / "afterlife"
    (folder / "region").mkdir()
    (folder / "region" / "r.0.0.mca").write_bytes(b"chunk")
    assert _level_seed(registry) == 1

    outcome = manager.regenerate_world(notifier, seed=2)

    assert outcome
    assert outcome.success is True
    assert outcome.reason is None
    new_world = manager.get_world()
    assert new_world is not None
    assert new_world is not old_world
    assert old_world.unloaded is True
    assert new_world.seed == 2
    assert _level_seed(registry) == 2
    assert sorted(path.name for path in folder.iterdir()) == ["level.json"]
    assert new_world.border.size == 256
    assert notifier.messages == [(NotifyLevel.INFO, "Afterlife world regenerated.")]


def test_regenerate_moves_occupants_to_default_world(registry: MemoryWorldRegistry, make_manager) -> None:
    manager = make_manager()
    manager.init(force=True)
    ghost = registry.add_player("ghost", Location("afterlife", 3.0, 70.0, 3.0))
    living = registry.add_player("living", Location("world", 10.0, 64.0, 10.0))

    outcome = manager.regenerate_world()

    assert outcome.success is True
    assert ghost.location == registry.find("world").spawn_location
    assert living.location == Location("world", 10.0, 64.0, 10.0)


def test_regenerate_without_fallback_world_fails_evacuation(tmp_path: Path, make_manager, notifier) -> None:
    lonely = MemoryWorldRegistry(tmp_path / "lonely")
    manager = make_manager(target_registry=lonely)
    manager.init(force=True)
    lonely.add_player("ghost", Location("afterlife", 0.5, 64.0, 0.5))

    outcome = manager.regenerate_world(notifier)

    assert outcome.success is False
    assert outcome.reason is RegenerationFailure.EVACUATION_FAILED
    assert lonely.find("afterlife") is not None
    assert notifier.messages == [(NotifyLevel.ERROR, EVACUATION_FAILED_MESSAGE)]


def test_empty_afterlife_regenerates_without_fallback_world(tmp_path: Path, make_manager) -> None:
    lonely = MemoryWorldRegistry(tmp_path / "lonely")
    manager = make_manager(target_registry=lonely)
    manager.init(force=True)

    assert manager.regenerate_world().success is True


def test_unload_failure_leaves_storage_untouched(registry: MemoryWorldRegistry, make_manager, notifier) -> None:
    storage = SpyStorage()
    manager = make_manager(storage=storage)
    manager.init(force=True)
    marker = registry.container / "afterlife" / "marker.txt"
    marker.write_text("keep", encoding="utf-8")
    registry.hold("afterlife")

    outcome = manager.regenerate_world(notifier, seed=3)

    assert outcome.success is False
    assert outcome.reason is RegenerationFailure.UNLOAD_FAILED
    assert outcome.reason.value == "unload failed"
    assert storage.touched is False
    assert marker.read_text(encoding="utf-8") == "keep"
    assert registry.find("afterlife") is not None
    assert notifier.messages == [(NotifyLevel.ERROR, UNLOAD_FAILED_MESSAGE)]


def test_still_loaded_world_is_never_deleted(tmp_path: Path, make_manager, notifier) -> None:
    sticky = StickyRegistry(tmp_path / "sticky")
    storage = SpyStorage()
    manager = make_manager(storage=storage, target_registry=sticky)
    manager.init(force=True)

    outcome = manager.regenerate_world(notifier)

    assert outcome.reason is RegenerationFailure.STILL_LOADED
    assert storage.touched is False
    assert (sticky.container / "afterlife" / "level.json").exists()
    assert notifier.messages[0][0] is NotifyLevel.ERROR


def test_delete_failure_stops_before_recreate(registry: MemoryWorldRegistry, make_manager, notifier) -> None:
    storage = SpyStorage(fail_on="locked.dat")
    manager = make_manager(storage=storage)
    manager.init(force=True)
    (registry.container / "afterlife" / "locked.dat").write_text("x", encoding="utf-8")

    outcome = manager.regenerate_world(notifier)

    assert outcome.success is False
    assert outcome.reason is RegenerationFailure.DELETE_FAILED
    assert manager.get_world() is None
    assert (registry.container / "afterlife" / "locked.dat").exists()
    assert "afterlife" not in storage.removed
    assert notifier.messages == [(NotifyLevel.ERROR, DELETE_FAILED_MESSAGE)]


def test_regenerate_when_world_was_never_created(registry: MemoryWorldRegistry, make_manager) -> None:
    manager = make_manager()

    outcome = manager.regenerate_world(seed=5)

    assert outcome.success is True
    assert manager.get_world().seed == 5


def test_recreate_failure_is_only_signalled_by_result(registry: MemoryWorldRegistry, make_manager, notifier) -> None:
    manager = make_manager()
    manager.init(force=True)
    registry.refuse_create("afterlife")

    outcome = manager.regenerate_world(notifier)

    assert bool(outcome) is False
    assert outcome.reason is RegenerationFailure.RECREATE_FAILED
    assert notifier.messages == []
    assert not (registry.container / "afterlife").exists()
