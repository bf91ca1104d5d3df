"""Host game-server capabilities consumed by the afterlife manager."""

from .interfaces import Player, StorageTree, WorldHandle, WorldRegistry
from .memory import MemoryPlayer, MemoryWorld, MemoryWorldRegistry
from .storage import LocalStorageTree, delete_tree

__all__ = [
    "LocalStorageTree",
    "MemoryPlayer",
    "MemoryWorld",
    "MemoryWorldRegistry",
    "Player",
    "StorageTree",
    "WorldHandle",
    "WorldRegistry",
    "delete_tree",
]
