#!/usr/bin/env python3
"""
Main view class — combines all UI mixins into one runnable Pygame window.

Module layout
─────────────
    ui/
    ├── types.py           – ColorRGB, RoadLayout
    ├── constants.py       – ViewConstants mixin (all class-level constants)
    ├── helpers.py         – pure layout / formatting helpers
    ├── draw_road.py       – RoadRenderer mixin (road strips, cars)
    ├── hud.py             – HudRenderer mixin  (HUD, legend, pause banner)
    └── road_view.py       – RoadView (this file – main loop)

The view only reads :meth:`World.snapshot` and calls the world's public
lifecycle operations, exactly like a remote client would.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import pygame

from sim.world import World

from .constants import ViewConstants
from .draw_road import RoadRenderer
from .helpers import step_time_scale
from .hud import HudRenderer
from .types import RoadLayout

log = logging.getLogger("ui")


class RoadView(ViewConstants, RoadRenderer, HudRenderer):
    """Single-lane road visualiser powered by Pygame."""

    def __init__(self, world: World, width: int = 1000, height: int = 700, fps: int = 60):
        self.world = world
        self.width = width
        self.height = height
        self.fps = fps

        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font_small: Optional[pygame.font.Font] = None
        self.font_tiny: Optional[pygame.font.Font] = None
        self.font_title: Optional[pygame.font.Font] = None

        self.show_legend = True
        self.layout = self._make_layout()

    def _make_layout(self) -> RoadLayout:
        return RoadLayout(
            screen_w=self.width,
            road_length_m=self.world.policy.road_length_m,
            rows=self.ROAD_ROWS,
        )

    # ------------------------------------------------------------------ #
    #  Input                                                               #
    # ------------------------------------------------------------------ #
    def _handle_key(self, key: int, state: Dict[str, Any]) -> bool:
        """React to one key press; returns False when the view should close."""
        if key == pygame.K_ESCAPE:
            return False
        if key == pygame.K_SPACE:
            if state.get("running"):
                self.world.stop()
            else:
                self.world.start()
        elif key == pygame.K_r:
            self.world.reset()
        elif key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
            self.world.set_time_scale(step_time_scale(state.get("timeScale", 1.0), True))
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.world.set_time_scale(step_time_scale(state.get("timeScale", 1.0), False))
        elif key == pygame.K_l:
            self.show_legend = not self.show_legend
        return True

    def _banner_label(self) -> str:
        return "ALL CARS COMPLETED" if self.world.is_finished() else "STOPPED"

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption("ROAD TRAFFIC SIM")
        self.screen = pygame.display.set_mode((self.width, self.height))
        self.clock = pygame.time.Clock()
        self.font_small = pygame.font.SysFont("monospace", 13)
        self.font_tiny = pygame.font.SysFont("monospace", 11)
        self.font_title = pygame.font.SysFont("monospace", 28, bold=True)
        log.info("Road view opened (%dx%d)", self.width, self.height)

        running = True
        while running:
            self.clock.tick(self.fps)
            state = self.world.snapshot().as_dict()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = self._handle_key(event.key, state)

            self.screen.fill(self.BG_COLOR)
            self.draw_road(self.screen, self.layout, self.world.policy.spawn_clear_zone_m)
            self.draw_cars(self.screen, state["cars"], self.layout, self.world.policy.car_length_m)
            self.draw_hud(self.screen, state)
            if self.show_legend:
                self._draw_legend(self.screen)
            if not state["running"]:
                self._draw_pause_banner(self.screen, self._banner_label())
            pygame.display.flip()

        pygame.quit()
        log.info("Road view closed")


# ---------------------------------------------------------------------- #
#  Convenience entry point                                                 #
# ---------------------------------------------------------------------- #
def run_road_view(world: World, width: int = 1000, height: int = 700, fps: int = 60) -> None:
    view = RoadView(world=world, width=width, height=height, fps=fps)
    view.run()


if __name__ == "__main__":
    raise SystemExit(
        "road_view.py needs a world. Run `python demo.py` "
        "or call run_road_view(your_world)."
    )
