"""Feedback channels for whoever triggered an afterlife operation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from rich.console import Console


class NotifyLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


class Notifier(Protocol):
    """Receives single-line operator feedback."""

    def emit(self, level: NotifyLevel, text: str) -> None:
        """Deliver ``text`` at ``level``."""


class LoggingNotifier:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("afterlife_world.notify")

    def emit(self, level: NotifyLevel, text: str) -> None:
        self._logger.log(logging.ERROR if level is NotifyLevel.ERROR else logging.INFO, text)


class ConsoleNotifier:
    """Prints feedback to the terminal, errors in red."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def emit(self, level: NotifyLevel, text: str) -> None:
        style = "bold red" if level is NotifyLevel.ERROR else "green"
        self._console.print(text, style=style, markup=False, highlight=False)
