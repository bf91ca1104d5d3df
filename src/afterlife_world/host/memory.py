"""In-process world host backed by a world container directory.

Worlds live in memory while loaded; each world's metadata is persisted to
``<container>/<name>/level.json`` so a later process loads it back. Used by the
CLI and by tests where no game server is available.
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import asdict
from pathlib import Path

from afterlife_world.generator import TerrainGenerator, create_generator, native_terrain
from afterlife_world.models import (
    AIR,
    Block,
    Environment,
    GameRule,
    Location,
    WorldBorder,
    WorldCreateOptions,
)

LEVEL_FILE = "level.json"

_MAX_HEIGHT = {Environment.NORMAL: 320, Environment.NETHER: 256}


class MemoryPlayer:
    def __init__(self, name: str, location: Location, registry: MemoryWorldRegistry) -> None:
        self.name = name
        self.location = location
        self._registry = registry

    def teleport(self, location: Location) -> bool:
        if self._registry.find(location.world) is None:
            return False
        self.location = location
        return True


class MemoryWorld:
    """A loaded world whose blocks come from a generator plus explicit edits."""

    def __init__(
        self,
        *,
        name: str,
        environment: Environment,
        seed: int,
        generator: TerrainGenerator,
        folder: Path,
        registry: MemoryWorldRegistry,
        custom_generator: bool = False,
    ) -> None:
        self._name = name
        self._environment = environment
        self.seed = seed
        self.generator = generator
        self.folder = folder
        self.custom_generator = custom_generator
        self._registry = registry
        self._spawn = Location(name, 0.0, float(generator.spawn_y()), 0.0)
        self._border = WorldBorder()
        self._blocks: dict[tuple[int, int, int], Block] = {}
        self.pvp = True
        self.keep_spawn_loaded = False
        self.game_rules: dict[GameRule, bool] = {}
        self.unloaded = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def max_height(self) -> int:
        return _MAX_HEIGHT[self._environment]

    @property
    def spawn_location(self) -> Location:
        return self._spawn

    @property
    def border(self) -> WorldBorder:
        return self._border

    def set_spawn_location(self, location: Location) -> None:
        self._spawn = Location(self._name, location.x, location.y, location.z)

    def block_at(self, x: int, y: int, z: int) -> Block:
        if y < 0 or y >= self.max_height:
            return AIR
        return self._blocks.get((x, y, z)) or self.generator.block_at(x, y, z)

    def set_block(self, x: int, y: int, z: int, block: Block) -> None:
        self._blocks[(x, y, z)] = block

    def players(self) -> list[MemoryPlayer]:
        return self._registry.players_in(self._name)

    def set_pvp(self, allowed: bool) -> None:
        self.pvp = allowed

    def set_keep_spawn_loaded(self, keep: bool) -> None:
        self.keep_spawn_loaded = keep

    def set_game_rule(self, rule: GameRule, value: bool) -> None:
        self.game_rules[rule] = value

    def to_level_data(self) -> dict:
        return {
            "name": self._name,
            "environment": self._environment.value,
            "seed": self.seed,
            "generator": self.generator.name if self.custom_generator else None,
            "spawn": {"x": self._spawn.x, "y": self._spawn.y, "z": self._spawn.z},
            "pvp": self.pvp,
            "keep_spawn_loaded": self.keep_spawn_loaded,
            "game_rules": {rule.value: value for rule, value in self.game_rules.items()},
            "border": asdict(self._border),
        }

    def restore_level_data(self, payload: dict) -> None:
        spawn = payload.get("spawn")
        if spawn:
            self._spawn = Location(self._name, spawn["x"], spawn["y"], spawn["z"])
        self.pvp = payload.get("pvp", self.pvp)
        self.keep_spawn_loaded = payload.get("keep_spawn_loaded", self.keep_spawn_loaded)
        self.game_rules = {GameRule(rule): value for rule, value in payload.get("game_rules", {}).items()}
        if payload.get("border"):
            self._border = WorldBorder(**payload["border"])

    def save(self) -> None:
        self.folder.mkdir(parents=True, exist_ok=True)
        (self.folder / LEVEL_FILE).write_text(json.dumps(self.to_level_data(), indent=2), encoding="utf-8")


class MemoryWorldRegistry:
    """``WorldRegistry`` keeping loaded worlds in memory, storage under ``container``."""

    def __init__(self, container: str | Path, logger: logging.Logger | None = None) -> None:
        self.container = Path(container)
        self._logger = logger or logging.getLogger("afterlife_world.host")
        self._worlds: dict[str, MemoryWorld] = {}
        self._players: dict[str, MemoryPlayer] = {}
        self._held: set[str] = set()
        self._refused: set[str] = set()

    def find(self, name: str) -> MemoryWorld | None:
        return self._worlds.get(name)

    def create(self, options: WorldCreateOptions) -> MemoryWorld | None:
        if options.name in self._refused:
            self._logger.error("world_create_refused", extra={"world_name": options.name})
            return None
        existing = self._worlds.get(options.name)
        if existing is not None:
            return existing

        folder = self.container / options.name
        level_path = folder / LEVEL_FILE
        payload = json.loads(level_path.read_text(encoding="utf-8")) if level_path.exists() else None

        if payload is not None:
            environment = Environment.parse(payload.get("environment"))
            seed = payload["seed"]
            generator_name = payload.get("generator")
            generator = create_generator(generator_name) if generator_name else native_terrain(environment)
            custom = generator_name is not None
        else:
            environment = options.environment
            seed = options.seed if options.seed is not None else random.getrandbits(63)
            generator = options.generator or native_terrain(environment)
            custom = options.generator is not None

        world = MemoryWorld(
            name=options.name,
            environment=environment,
            seed=seed,
            generator=generator,
            folder=folder,
            registry=self,
            custom_generator=custom,
        )
        if payload is not None:
            world.restore_level_data(payload)
        else:
            world.save()

        self._worlds[options.name] = world
        self._logger.info(
            "world_loaded",
            extra={"world_name": options.name, "environment": environment.value, "generated": payload is None},
        )
        return world

    def unload(self, world: MemoryWorld, save: bool) -> bool:
        if self._worlds.get(world.name) is not world:
            return False
        if world.name in self._held or world.players():
            self._logger.warning("world_unload_refused", extra={"world_name": world.name})
            return False
        if save:
            world.save()
        del self._worlds[world.name]
        world.unloaded = True
        self._logger.info("world_unloaded", extra={"world_name": world.name, "saved": save})
        return True

    def list_all(self) -> list[MemoryWorld]:
        return list(self._worlds.values())

    def load_existing(self) -> list[MemoryWorld]:
        """Load every world folder under the container that has level data."""
        if not self.container.is_dir():
            return []
        loaded = []
        for folder in sorted(self.container.iterdir()):
            if (folder / LEVEL_FILE).is_file():
                world = self.create(WorldCreateOptions(name=folder.name))
                if world is not None:
                    loaded.append(world)
        return loaded

    def save_all(self) -> None:
        for world in self._worlds.values():
            world.save()

    def hold(self, name: str) -> None:
        """Keep ``name`` open so unload requests are refused."""
        self._held.add(name)

    def release(self, name: str) -> None:
        self._held.discard(name)

    def refuse_create(self, name: str) -> None:
        self._refused.add(name)

    def add_player(self, name: str, location: Location) -> MemoryPlayer:
        player = MemoryPlayer(name, location, self)
        self._players[name] = player
        return player

    def players_in(self, world_name: str) -> list[MemoryPlayer]:
        return [player for player in self._players.values() if player.location.world == world_name]
