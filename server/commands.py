"""
server/commands.py
==================
Command schemas shared by the WebSocket and REST endpoints.

Clients send ``{"action": ...}`` objects.  ``config`` carries a ``data``
object with speeds in km/h and ``timescale`` carries a numeric ``value``.
Everything is validated here so the world only ever sees well-formed
numbers.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sim.world import World

log = logging.getLogger("server")

ACTIONS = ("start", "stop", "reset", "config", "timescale")


class UnknownActionError(ValueError):
    """Raised for an ``action`` the simulation does not understand."""


class ConfigPayload(BaseModel):
    """Spawn settings as sent by clients (speeds in km/h)."""
    model_config = ConfigDict(populate_by_name=True)

    spawn_interval: float = Field(alias="spawnInterval")
    min_speed: float = Field(alias="minSpeed")
    max_speed: float = Field(alias="maxSpeed")
    max_cars: int = Field(default=0, alias="maxCars")


class Command(BaseModel):
    """One control message from a client."""
    action: Literal["start", "stop", "reset", "config", "timescale"]
    data: Optional[ConfigPayload] = None
    value: Optional[float] = None

    @model_validator(mode="after")
    def _check_arguments(self) -> "Command":
        if self.action == "config" and self.data is None:
            raise ValueError("'config' requires a 'data' object")
        if self.action == "timescale" and self.value is None:
            raise ValueError("'timescale' requires a numeric 'value'")
        return self


def parse_command(raw: dict) -> Command:
    """Validate a decoded JSON object.

    Raises
    ------
    UnknownActionError
        If ``action`` is missing or not one of :data:`ACTIONS`.
    pydantic.ValidationError
        If the arguments do not match the action.
    """
    action = raw.get("action") if isinstance(raw, dict) else None
    if action not in ACTIONS:
        raise UnknownActionError(f"unknown action: {action!r}")
    return Command.model_validate(raw)


def apply_command(world: World, command: Command) -> None:
    """Dispatch a validated command to the world."""
    log.info("command action=%s", command.action)
    if command.action == "start":
        world.start()
    elif command.action == "stop":
        world.stop()
    elif command.action == "reset":
        world.reset()
    elif command.action == "config":
        cfg = command.data
        world.update_config(
            spawn_interval=cfg.spawn_interval,
            min_speed_kmh=cfg.min_speed,
            max_speed_kmh=cfg.max_speed,
            max_cars=cfg.max_cars,
        )
    elif command.action == "timescale":
        world.set_time_scale(command.value)
