#!/usr/bin/env python3
"""Road strips, distance markers and cars (mixin)."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import pygame

from .helpers import hex_to_rgb, road_to_screen
from .types import RoadLayout


class RoadRenderer:
    """Mixin that draws the folded road and every car on it."""

    def draw_road(self, surface: pygame.Surface, layout: RoadLayout, clear_zone_m: float) -> None:
        half = layout.lane_height // 2
        for row in range(layout.rows):
            _, y = road_to_screen(row * layout.metres_per_row, layout)
            rect = pygame.Rect(layout.margin_x, y - half, layout.row_width_px, layout.lane_height)
            pygame.draw.rect(surface, self.ROAD_COLOR, rect)
            pygame.draw.line(surface, self.LANE_EDGE_COLOR, rect.topleft, rect.topright)
            pygame.draw.line(surface, self.LANE_EDGE_COLOR, rect.bottomleft, rect.bottomright)

        # Spawn gate keeps this stretch clear before a new car enters.
        x0, y0 = road_to_screen(0.0, layout)
        zone_w = max(1, int(clear_zone_m * layout.pixels_per_meter))
        pygame.draw.rect(
            surface, self.ENTRY_ZONE_COLOR,
            pygame.Rect(x0, y0 - half, zone_w, layout.lane_height),
        )

        position = self.DASH_EVERY_M
        while position < layout.road_length_m:
            x, y = road_to_screen(position, layout)
            pygame.draw.line(surface, self.LANE_DASH_COLOR, (x, y - 3), (x, y + 3))
            if self.font_tiny is not None and position % self.KM_MARK_EVERY_M < 1e-6:
                label = self.font_tiny.render(f"{position / 1000:.0f} km", True, self.TEXT_COLOR)
                surface.blit(label, (x - label.get_width() // 2, y + half + 4))
            position += self.DASH_EVERY_M

    def draw_cars(
        self,
        surface: pygame.Surface,
        cars: Sequence[Mapping[str, Any]],
        layout: RoadLayout,
        car_length_m: float,
    ) -> None:
        width = max(self.CAR_MIN_WIDTH_PX, int(car_length_m * layout.pixels_per_meter))
        height = layout.lane_height - 8
        for car in cars:
            x, y = road_to_screen(float(car["position"]), layout)
            # Cars are drawn rear-to-front, ending at their front bumper.
            rect = pygame.Rect(x - width, y - height // 2, width, height)
            pygame.draw.rect(surface, hex_to_rgb(str(car.get("color", ""))), rect)
            state = car.get("state")
            if state == "braking":
                pygame.draw.rect(surface, self.BRAKE_COLOR, rect.inflate(4, 4), width=2)
            elif state == "accelerating":
                pygame.draw.rect(surface, self.ACCEL_COLOR, rect.inflate(4, 4), width=1)
