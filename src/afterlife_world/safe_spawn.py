"""Spawn placement that keeps arriving players out of solid blocks."""

from __future__ import annotations

from afterlife_world.host.interfaces import WorldHandle
from afterlife_world.models import Location

FALLBACK_LIFT = 3


def is_safe_location(world: WorldHandle, x: int, y: int, z: int) -> bool:
    """Feet and head cells must both be passable or air."""
    feet = world.block_at(x, y, z)
    head = world.block_at(x, y + 1, z)
    return (feet.passable or feet.is_air) and (head.passable or head.is_air)


def find_safe_spawn(world: WorldHandle, origin: Location) -> Location:
    """Return ``origin`` centered on its block, lifted to the first safe height.

    Scans straight up from the origin height. When no height below
    ``max_height - 2`` is safe, the origin is raised by three blocks without
    any guarantee.
    """
    spawn = origin.centered()
    x, y, z = spawn.block_x, spawn.block_y, spawn.block_z

    if is_safe_location(world, x, y, z):
        return spawn

    for candidate in range(y, world.max_height - 2):
        if is_safe_location(world, x, candidate, z):
            return spawn.with_y(candidate)

    return spawn.with_y(y + FALLBACK_LIFT)
