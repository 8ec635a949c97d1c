#!/usr/bin/env python3

from .types import ColorRGB, RoadLayout
from .constants import ViewConstants
from .draw_road import RoadRenderer
from .hud import HudRenderer
from .road_view import RoadView, run_road_view

__all__ = [
    "ColorRGB",
    "RoadLayout",
    "ViewConstants",
    "RoadRenderer",
    "HudRenderer",
    "RoadView",
    "run_road_view",
]
