"""
ui/helpers.py
=============
Pure utility functions shared across UI modules: colour parsing,
road-to-screen mapping and HUD formatting.  Nothing here touches pygame,
so it can be tested without a display.
"""

from __future__ import annotations

from typing import Tuple

from ui.types import ColorRGB, RoadLayout


def hex_to_rgb(color: str, default: ColorRGB = (255, 255, 255)) -> ColorRGB:
    """Parse ``#RRGGBB`` into an RGB tuple, returning *default* on bad input."""
    value = color.lstrip("#")
    if len(value) != 6:
        return default
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError:
        return default


def road_to_screen(position_m: float, layout: RoadLayout) -> Tuple[int, int]:
    """Screen pixel of the lane centre at *position_m* along the road."""
    per_row = layout.metres_per_row
    clamped = min(max(position_m, 0.0), layout.road_length_m)
    row = min(int(clamped // per_row), layout.rows - 1)
    along = clamped - row * per_row
    x = layout.margin_x + along * layout.pixels_per_meter
    y = layout.top_y + row * layout.row_spacing
    return int(round(x)), y


def format_clock(seconds: float) -> str:
    """``MM:SS.s`` for the HUD."""
    minutes, secs = divmod(max(0.0, seconds), 60.0)
    return f"{int(minutes):02d}:{secs:04.1f}"


def step_time_scale(current: float, faster: bool) -> float:
    """Double or halve the time scale; the world clamps the result."""
    return current * 2.0 if faster else current / 2.0
