"""Persisted world storage helpers."""

from __future__ import annotations

import logging
from pathlib import Path

from afterlife_world.host.interfaces import StorageTree

_logger = logging.getLogger("afterlife_world.storage")


class LocalStorageTree:
    """``StorageTree`` over the local filesystem."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def exists(self, path: Path) -> bool:
        return path.exists() or path.is_symlink()

    def is_directory(self, path: Path) -> bool:
        return path.is_dir() and not path.is_symlink()

    def list_children(self, path: Path) -> list[Path]:
        try:
            return sorted(path.iterdir())
        except OSError:
            self._logger.warning("storage_list_failed", extra={"path": str(path)})
            return []

    def remove(self, path: Path) -> bool:
        try:
            if self.is_directory(path):
                path.rmdir()
            else:
                path.unlink()
        except OSError as exc:
            self._logger.error("storage_remove_failed", extra={"path": str(path), "error": str(exc)})
            return False
        return True


def delete_tree(storage: StorageTree, root: Path) -> bool:
    """Remove ``root`` depth-first, children before their directory.

    Stops at the first failed removal; whatever was already removed stays removed.
    """
    if not storage.exists(root):
        return True
    if storage.is_directory(root):
        for child in storage.list_children(root):
            if not delete_tree(storage, child):
                return False
    return storage.remove(root)
