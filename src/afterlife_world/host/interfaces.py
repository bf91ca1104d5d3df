"""Boundary between the afterlife manager and the hosting game server."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from afterlife_world.models import Block, Environment, GameRule, Location, WorldBorder, WorldCreateOptions


class Player(Protocol):
    name: str

    def teleport(self, location: Location) -> bool:
        """Move the player to ``location``; returns whether the host accepted it."""


class WorldHandle(Protocol):
    """A loaded world owned by the host. Invalid once unloaded."""

    @property
    def name(self) -> str: ...

    @property
    def environment(self) -> Environment: ...

    @property
    def max_height(self) -> int: ...

    @property
    def spawn_location(self) -> Location: ...

    @property
    def border(self) -> WorldBorder: ...

    def set_spawn_location(self, location: Location) -> None: ...

    def block_at(self, x: int, y: int, z: int) -> Block: ...

    def players(self) -> list[Player]: ...

    def set_pvp(self, allowed: bool) -> None: ...

    def set_keep_spawn_loaded(self, keep: bool) -> None: ...

    def set_game_rule(self, rule: GameRule, value: bool) -> None: ...


class WorldRegistry(Protocol):
    """Host facility that looks up, creates and unloads worlds by name."""

    def find(self, name: str) -> WorldHandle | None:
        """Return the loaded world called ``name``, if any."""

    def create(self, options: WorldCreateOptions) -> WorldHandle | None:
        """Load or generate a world; ``None`` when the host could not create it."""

    def unload(self, world: WorldHandle, save: bool) -> bool:
        """Unload ``world``; ``False`` when the host refused."""

    def list_all(self) -> list[WorldHandle]:
        """Return loaded worlds, default world first."""


class StorageTree(Protocol):
    """Directory-tree operations used to wipe persisted world data."""

    def exists(self, path: Path) -> bool: ...

    def is_directory(self, path: Path) -> bool: ...

    def list_children(self, path: Path) -> list[Path]: ...

    def remove(self, path: Path) -> bool:
        """Remove a file or an empty directory; ``False`` on failure."""
