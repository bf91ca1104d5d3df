"""Terrain generators referenced by the afterlife world configuration.

Only the contract matters to the lifecycle controller; the terrains below are
deliberately simple so worlds can be queried block by block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from afterlife_world.models import AIR, BEDROCK, NETHERRACK, STONE, Block, Environment


class TerrainGenerator(Protocol):
    """Produces the block at any coordinate of a freshly generated world."""

    name: str

    def block_at(self, x: int, y: int, z: int) -> Block:
        """Return the generated block at the given cell."""

    def spawn_y(self) -> int:
        """Return the natural spawn height for this terrain."""


@dataclass(slots=True)
class FlatTerrain:
    """Host-native overworld terrain: solid below ``surface_y``."""

    surface_y: int = 64
    name: str = "native-flat"

    def block_at(self, x: int, y: int, z: int) -> Block:
        if y <= 0:
            return BEDROCK
        return STONE if y < self.surface_y else AIR

    def spawn_y(self) -> int:
        return self.surface_y


@dataclass(slots=True)
class CavernTerrain:
    """Host-native nether terrain: a single open layer between floor and roof."""

    floor_y: int = 32
    roof_y: int = 120
    name: str = "native-cavern"

    def block_at(self, x: int, y: int, z: int) -> Block:
        if y <= 0 or y >= self.roof_y:
            return BEDROCK
        return NETHERRACK if y < self.floor_y else AIR

    def spawn_y(self) -> int:
        return self.floor_y


@dataclass(slots=True)
class AfterlifePlatformGenerator:
    """Void terrain with a single square stone platform around the origin."""

    platform_y: int = 64
    radius: int = 16
    name: str = "afterlife-platform"

    def block_at(self, x: int, y: int, z: int) -> Block:
        if y == self.platform_y - 1 and abs(x) <= self.radius and abs(z) <= self.radius:
            return STONE
        return AIR

    def spawn_y(self) -> int:
        return self.platform_y


def native_terrain(environment: Environment) -> TerrainGenerator:
    if environment is Environment.NETHER:
        return CavernTerrain()
    return FlatTerrain()


def create_generator(mode: str) -> TerrainGenerator:
    """Return the custom afterlife generator for a non-default generator mode."""
    return AfterlifePlatformGenerator(name=mode.lower())
