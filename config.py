#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf — it never imports from
other project packages.
"""

# ── Driving loops ────────────────────────────────────────────────────────────
DEFAULT_TICK_INTERVAL_MS: int = 50
DEFAULT_BROADCAST_INTERVAL_MS: int = 50

# ── Simulation defaults ──────────────────────────────────────────────────────
DEFAULT_SPAWN_INTERVAL_S: float = 2.0
DEFAULT_MIN_SPEED_KMH: float = 50.0
DEFAULT_MAX_SPEED_KMH: float = 80.0
DEFAULT_MAX_CARS: int = 100
DEFAULT_TIME_SCALE: float = 1.0

# ── Server defaults ──────────────────────────────────────────────────────────
SERVER_HOST: str = "0.0.0.0"
SERVER_PORT: int = 8080
CLIENT_QUEUE_SIZE: int = 8

# ── UI defaults ──────────────────────────────────────────────────────────────
WINDOW_WIDTH: int = 1000
WINDOW_HEIGHT: int = 700
TARGET_FPS: int = 60

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_FILE: str = "traffic.log"
WORLD_DEBUG_LOG_FILE: str = "world_debug.log"
