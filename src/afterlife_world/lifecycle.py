"""Lifecycle of the afterlife world where players with no lives left are sent."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from afterlife_world.config import ConfigSource, is_enabled, resolve_world_config
from afterlife_world.generator import TerrainGenerator, create_generator
from afterlife_world.host.interfaces import StorageTree, WorldHandle, WorldRegistry
from afterlife_world.host.storage import LocalStorageTree, delete_tree
from afterlife_world.models import (
    BORDER_WARNING_DISTANCE,
    GameRule,
    Location,
    RegenerationFailure,
    RegenerationOutcome,
    WorldConfig,
    WorldCreateOptions,
    WorldType,
)
from afterlife_world.notify import Notifier, NotifyLevel
from afterlife_world.safe_spawn import find_safe_spawn

UNLOAD_FAILED_MESSAGE = "Failed to unload afterlife world. Make sure no plugins are locking it."
DELETE_FAILED_MESSAGE = "Failed to delete afterlife world folder."
EVACUATION_FAILED_MESSAGE = "No other world is loaded to move afterlife players to."
STILL_LOADED_MESSAGE = "Afterlife world is still loaded, refusing to delete it."


class AfterlifeWorldManager:
    """Creates, configures and regenerates the afterlife world.

    Handles are never kept between calls: every operation resolves the world by
    its configured name, so an unloaded world is never touched again. Callers
    must not run two operations for the same world concurrently.
    """

    def __init__(
        self,
        *,
        config: ConfigSource,
        registry: WorldRegistry,
        world_container: str | Path,
        storage: StorageTree | None = None,
        generator_factory: Callable[[str], TerrainGenerator] = create_generator,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._registry = registry
        self._world_container = Path(world_container)
        self._storage = storage or LocalStorageTree()
        self._generator_factory = generator_factory
        self._logger = logger or logging.getLogger("afterlife_world.lifecycle")

    def init(self, force: bool = False, seed: int | None = None) -> None:
        """Load or create the afterlife world and apply its configuration.

        Without ``force`` nothing happens unless ``afterlife.enabled`` is set.
        ``seed`` only matters when the world has to be generated; it overrides
        ``afterlife.seed``.
        """
        if not force and not is_enabled(self._config):
            self._logger.debug("afterlife_disabled")
            return

        config = resolve_world_config(self._config)
        world = self._registry.find(config.world_name)

        if world is None:
            world = self._create_world(config, seed if seed is not None else config.seed)
            if world is None:
                self._logger.error("afterlife_world_create_failed", extra={"world_name": config.world_name})
                return

        self._configure_world(world, config)

        spawn_y = config.spawn_y if config.spawn_y is not None else world.spawn_location.block_y
        world.set_spawn_location(Location(world.name, 0.5, float(spawn_y), 0.5))

        self._logger.info(
            "afterlife_world_initialized",
            extra={
                "world_name": config.world_name,
                "environment": config.environment.value,
                "border_size": config.border_size,
                "spawn_y": spawn_y,
            },
        )

    def get_world(self) -> WorldHandle | None:
        return self._registry.find(resolve_world_config(self._config).world_name)

    def get_spawn_location(self) -> Location | None:
        """Safe spawn in the afterlife world, or ``None`` when it is not loaded."""
        world = self.get_world()
        if world is None:
            return None
        return find_safe_spawn(world, world.spawn_location)

    def is_overflow_world(self, world: WorldHandle | None) -> bool:
        if world is None:
            return False
        return world.name == resolve_world_config(self._config).world_name

    def regenerate_world(self, notifier: Notifier | None = None, seed: int | None = None) -> RegenerationOutcome:
        """Evacuate, unload, delete and recreate the afterlife world.

        Unload and delete failures stop the protocol without retrying and are
        reported to ``notifier``. Success means the world is loaded afterwards.
        """
        world_name = resolve_world_config(self._config).world_name
        world = self._registry.find(world_name)

        if world is not None:
            if not self._evacuate(world):
                return self._fail(
                    RegenerationFailure.EVACUATION_FAILED, notifier, world_name, EVACUATION_FAILED_MESSAGE
                )
            if not self._registry.unload(world, False):
                return self._fail(RegenerationFailure.UNLOAD_FAILED, notifier, world_name, UNLOAD_FAILED_MESSAGE)

        if self._registry.find(world_name) is not None:
            return self._fail(RegenerationFailure.STILL_LOADED, notifier, world_name, STILL_LOADED_MESSAGE)

        folder = self._world_container / world_name
        if not delete_tree(self._storage, folder):
            return self._fail(RegenerationFailure.DELETE_FAILED, notifier, world_name, DELETE_FAILED_MESSAGE)
        self._logger.info("afterlife_world_deleted", extra={"world_name": world_name, "path": str(folder)})

        self.init(force=True, seed=seed)
        if self._registry.find(world_name) is None:
            return self._fail(RegenerationFailure.RECREATE_FAILED, None, world_name)

        self._logger.info("afterlife_world_regenerated", extra={"world_name": world_name, "seed": seed})
        if notifier is not None:
            notifier.emit(NotifyLevel.INFO, "Afterlife world regenerated.")
        return RegenerationOutcome(success=True)

    def _create_world(self, config: WorldConfig, seed: int | None) -> WorldHandle | None:
        self._logger.info(
            "afterlife_world_creating",
            extra={"world_name": config.world_name, "environment": config.environment.value},
        )
        options = WorldCreateOptions(
            name=config.world_name,
            environment=config.environment,
            world_type=WorldType.NORMAL,
            seed=seed,
        )
        # Custom terrain is only supported for the overworld environment.
        if config.uses_custom_generator:
            options.generator = self._generator_factory(config.generator)
        return self._registry.create(options)

    def _configure_world(self, world: WorldHandle, config: WorldConfig) -> None:
        world.set_pvp(config.allow_pvp)
        world.set_keep_spawn_loaded(True)
        world.set_game_rule(GameRule.DO_DAYLIGHT_CYCLE, True)
        world.set_game_rule(GameRule.DO_MOB_SPAWNING, config.mob_spawning)
        world.set_game_rule(GameRule.KEEP_INVENTORY, True)

        border = world.border
        border.set_center(0, 0)
        border.size = config.border_size
        border.warning_distance = BORDER_WARNING_DISTANCE

    def _evacuate(self, world: WorldHandle) -> bool:
        occupants = world.players()
        if not occupants:
            return True

        fallback = next((other for other in self._registry.list_all() if other.name != world.name), None)
        if fallback is None:
            self._logger.error(
                "afterlife_evacuation_no_fallback",
                extra={"world_name": world.name, "occupants": len(occupants)},
            )
            return False

        target = fallback.spawn_location
        for player in occupants:
            player.teleport(target)
        self._logger.info(
            "afterlife_world_evacuated",
            extra={"world_name": world.name, "occupants": len(occupants), "fallback": fallback.name},
        )
        return True

    def _fail(
        self,
        reason: RegenerationFailure,
        notifier: Notifier | None,
        world_name: str,
        message: str | None = None,
    ) -> RegenerationOutcome:
        self._logger.error("afterlife_regeneration_failed", extra={"world_name": world_name, "reason": reason.value})
        if notifier is not None and message is not None:
            notifier.emit(NotifyLevel.ERROR, message)
        return RegenerationOutcome(success=False, reason=reason)
