"""
ui/types.py
===========
Lightweight data containers used across every UI module.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

ColorRGB = Tuple[int, int, int]


@dataclass(frozen=True)
class RoadLayout:
    """How the straight road is folded into horizontal strips on screen.

    The road enters at the left of the top strip; each strip continues
    where the previous one ended.
    """
    screen_w: int
    road_length_m: float
    rows: int = 5
    margin_x: int = 40
    top_y: int = 90
    row_spacing: int = 110
    lane_height: int = 26

    @property
    def metres_per_row(self) -> float:
        return self.road_length_m / self.rows

    @property
    def row_width_px(self) -> int:
        return self.screen_w - 2 * self.margin_x

    @property
    def pixels_per_meter(self) -> float:
        return self.row_width_px / self.metres_per_row
