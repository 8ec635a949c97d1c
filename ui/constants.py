#!/usr/bin/env python3
"""Visual constants shared across all renderers."""

from __future__ import annotations

from typing import Sequence, Tuple

from .types import ColorRGB


class ViewConstants:
    """Mixin providing every visual / layout constant."""

    BG_COLOR: ColorRGB = (15, 15, 15)
    ROAD_COLOR: ColorRGB = (30, 30, 30)
    LANE_DASH_COLOR: ColorRGB = (58, 58, 58)
    LANE_EDGE_COLOR: ColorRGB = (42, 42, 42)
    HUD_BG_COLOR: ColorRGB = (22, 22, 22)
    HUD_BORDER_COLOR: ColorRGB = (42, 42, 42)
    TEXT_COLOR: ColorRGB = (200, 200, 200)
    BRAKE_COLOR: ColorRGB = (255, 60, 60)
    ACCEL_COLOR: ColorRGB = (0, 255, 127)
    ENTRY_ZONE_COLOR: ColorRGB = (60, 45, 20)

    ROAD_ROWS = 5
    CAR_MIN_WIDTH_PX = 4
    DASH_EVERY_M = 100.0
    KM_MARK_EVERY_M = 1000.0

    LEGEND_ITEMS: Sequence[Tuple[str, ColorRGB]] = (
        ("BRAKING", (255, 60, 60)),
        ("ACCELERATING", (0, 255, 127)),
    )
