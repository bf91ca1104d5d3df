"""CLI entrypoint for the afterlife world manager."""

from __future__ import annotations

import logging
from dataclasses import asdict

import typer
from rich import print

from afterlife_world.config import load_config_source, resolve_world_config, settings
from afterlife_world.host import LocalStorageTree, MemoryWorldRegistry
from afterlife_world.lifecycle import AfterlifeWorldManager
from afterlife_world.models import WorldCreateOptions
from afterlife_world.notify import ConsoleNotifier

app = typer.Typer(help="Afterlife world manager")


def _configure_logging() -> None:
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s %(message)s")


def _build_registry() -> MemoryWorldRegistry:
    registry = MemoryWorldRegistry(settings.world_container)
    registry.load_existing()
    if registry.find(settings.default_world) is None:
        registry.create(WorldCreateOptions(name=settings.default_world))
    return registry


def _build_manager(registry: MemoryWorldRegistry) -> AfterlifeWorldManager:
    return AfterlifeWorldManager(
        config=load_config_source(settings.config_file),
        registry=registry,
        world_container=settings.world_container,
        storage=LocalStorageTree(),
    )


@app.callback()
def main() -> None:
    _configure_logging()


@app.command()
def start() -> None:
    """Show runtime configuration."""
    config = resolve_world_config(load_config_source(settings.config_file))
    print(
        {
            "app_name": settings.app_name,
            "world_container": str(settings.world_container),
            "config_file": str(settings.config_file),
            "afterlife": asdict(config),
        }
    )


@app.command()
def init(
    force: bool = typer.Option(False, help="Create the world even when afterlife.enabled is false"),
    seed: int | None = typer.Option(None, help="Fixed seed used if the world has to be generated"),
) -> None:
    """Load or create the afterlife world and apply its settings."""
    registry = _build_registry()
    manager = _build_manager(registry)
    manager.init(force=force, seed=seed)
    registry.save_all()

    world = manager.get_world()
    print({"afterlife_world": world.name if world else None})


@app.command()
def spawn() -> None:
    """Print the safe spawn location in the afterlife world."""
    manager = _build_manager(_build_registry())
    location = manager.get_spawn_location()
    if location is None:
        print({"spawn_location": None, "error": "Afterlife world is not loaded"})
        raise typer.Exit(code=1)
    print({"spawn_location": asdict(location)})


@app.command()
def status() -> None:
    """List loaded worlds and whether each is the afterlife world."""
    registry = _build_registry()
    manager = _build_manager(registry)
    print(
        {
            "worlds": [
                {"name": world.name, "afterlife": manager.is_overflow_world(world), "seed": world.seed}
                for world in registry.list_all()
            ]
        }
    )


@app.command()
def regenerate(seed: int | None = typer.Option(None, help="Seed for the regenerated world")) -> None:
    """Wipe the afterlife world and generate it again."""
    registry = _build_registry()
    manager = _build_manager(registry)
    outcome = manager.regenerate_world(ConsoleNotifier(), seed=seed)
    registry.save_all()

    print({"regenerated": outcome.success, "reason": outcome.reason.value if outcome.reason else None})
    if not outcome:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
