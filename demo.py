#!/usr/bin/env python3
"""
Quick demo — runs the simulation and the Pygame road view in one process,
without the network server.

Usage:
    python3 demo.py
"""

import logging

import config
from logging_setup import setup_logging
from bus.state_bus import StateBus
from sim.sim_bridge import SimBridge
from sim.world import World


def main() -> None:
    setup_logging(logging.INFO)
    world = World()
    bridge = SimBridge(
        world,
        StateBus(),
        tick_interval_s=config.DEFAULT_TICK_INTERVAL_MS / 1000.0,
        broadcast_interval_s=config.DEFAULT_BROADCAST_INTERVAL_MS / 1000.0,
    )
    bridge.start()
    try:
        from ui import run_road_view

        run_road_view(
            world,
            width=config.WINDOW_WIDTH,
            height=config.WINDOW_HEIGHT,
            fps=config.TARGET_FPS,
        )
    finally:
        bridge.stop()


if __name__ == "__main__":
    print("Starting road simulation demo...")
    print("Controls: SPACE=start/stop  R=reset  +/-=time scale  L=legend  ESC=quit")
    main()
