from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from afterlife_world.generator import TerrainGenerator

DEFAULT_WORLD_NAME = "afterlife"
DEFAULT_BORDER_SIZE = 256
BORDER_WARNING_DISTANCE = 20

_AIR_MATERIALS = frozenset({"air", "cave_air", "void_air"})


class Environment(str, Enum):
    """Coarse dimension category of a world."""

    NORMAL = "NORMAL"
    NETHER = "NETHER"

    @classmethod
    def parse(cls, value: str | None) -> Environment:
        if value and value.strip().upper() == cls.NETHER.value:
            return cls.NETHER
        return cls.NORMAL


class WorldType(str, Enum):
    NORMAL = "NORMAL"


class GameRule(str, Enum):
    DO_DAYLIGHT_CYCLE = "doDaylightCycle"
    DO_MOB_SPAWNING = "doMobSpawning"
    KEEP_INVENTORY = "keepInventory"


@dataclass(slots=True, frozen=True)
class WorldConfig:
    """Snapshot of the afterlife settings taken at the start of an operation."""

    world_name: str = DEFAULT_WORLD_NAME
    environment: Environment = Environment.NORMAL
    generator: str = "default"
    seed: int | None = None
    border_size: int = DEFAULT_BORDER_SIZE
    spawn_y: int | None = None
    allow_pvp: bool = False
    mob_spawning: bool = True

    @property
    def uses_custom_generator(self) -> bool:
        return self.environment is Environment.NORMAL and self.generator.lower() != "default"


@dataclass(slots=True, frozen=True)
class Location:
    world: str
    x: float
    y: float
    z: float

    @property
    def block_x(self) -> int:
        return math.floor(self.x)

    @property
    def block_y(self) -> int:
        return math.floor(self.y)

    @property
    def block_z(self) -> int:
        return math.floor(self.z)

    def centered(self) -> Location:
        """Center horizontally on the block and drop the vertical fraction."""
        return replace(self, x=self.block_x + 0.5, y=float(self.block_y), z=self.block_z + 0.5)

    def with_y(self, y: float) -> Location:
        return replace(self, y=float(y))


@dataclass(slots=True, frozen=True)
class Block:
    material: str
    passable: bool = False

    @property
    def is_air(self) -> bool:
        return self.material in _AIR_MATERIALS


AIR = Block("air", passable=True)
STONE = Block("stone")
BEDROCK = Block("bedrock")
NETHERRACK = Block("netherrack")


@dataclass(slots=True)
class WorldBorder:
    center_x: float = 0.0
    center_z: float = 0.0
    size: float = 60_000_000.0
    warning_distance: int = 5

    def set_center(self, x: float, z: float) -> None:
        self.center_x = x
        self.center_z = z


@dataclass(slots=True)
class WorldCreateOptions:
    """Parameters handed to the host registry when a world must be created."""

    name: str
    environment: Environment = Environment.NORMAL
    world_type: WorldType = WorldType.NORMAL
    generator: TerrainGenerator | None = None
    seed: int | None = None


class RegenerationFailure(str, Enum):
    EVACUATION_FAILED = "evacuation failed"
    UNLOAD_FAILED = "unload failed"
    STILL_LOADED = "still loaded, refusing delete"
    DELETE_FAILED = "delete failed"
    RECREATE_FAILED = "world not present after recreate attempt"


@dataclass(slots=True, frozen=True)
class RegenerationOutcome:
    success: bool
    reason: RegenerationFailure | None = None

    def __bool__(self) -> bool:
        return self.success
