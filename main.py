#!/usr/bin/env python3
"""
main.py
=======
Run the road simulation server.

Builds one :class:`~sim.world.World`, the :class:`~sim.sim_bridge.SimBridge`
that ticks and broadcasts it, and the FastAPI app that exposes it, then
serves with uvicorn.

Environment overrides
---------------------
``TRAFFIC_TICK_MS``, ``TRAFFIC_BROADCAST_MS``, ``TRAFFIC_HOST``,
``TRAFFIC_PORT``, ``TRAFFIC_SEED``, ``TRAFFIC_LOG_LEVEL``.
"""

import logging
import os
from typing import Callable, Optional, TypeVar

import uvicorn

import config
from logging_setup import setup_logging
from bus.state_bus import StateBus
from server.api import create_app
from sim.sim_bridge import SimBridge
from sim.world import World

log = logging.getLogger("main")

T = TypeVar("T")


def _env(name: str, default: T, cast: Callable[[str], T]) -> T:
    """Read *name* from the environment, falling back to *default* if unset or invalid."""
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        log.warning("Invalid %s=%r, using default %r", name, raw, default)
        return default


def build(tick_ms: int, broadcast_ms: int, seed: Optional[int] = None):
    """Wire world, bus, bridge and app together; returns ``(world, bridge, app)``."""
    world = World(seed=seed)
    bus = StateBus()
    bridge = SimBridge(
        world,
        bus,
        tick_interval_s=tick_ms / 1000.0,
        broadcast_interval_s=broadcast_ms / 1000.0,
    )
    app = create_app(world, bridge=bridge, bus=bus)
    return world, bridge, app


def main() -> None:
    level_name = os.environ.get("TRAFFIC_LOG_LEVEL", "INFO").upper()
    setup_logging(getattr(logging, level_name, logging.INFO))

    tick_ms = _env("TRAFFIC_TICK_MS", config.DEFAULT_TICK_INTERVAL_MS, int)
    broadcast_ms = _env("TRAFFIC_BROADCAST_MS", config.DEFAULT_BROADCAST_INTERVAL_MS, int)
    host = _env("TRAFFIC_HOST", config.SERVER_HOST, str)
    port = _env("TRAFFIC_PORT", config.SERVER_PORT, int)

    _, _, app = build(tick_ms, broadcast_ms, seed=_env("TRAFFIC_SEED", None, int))

    log.info("Server running on http://%s:%d (WebSocket at /ws)", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
