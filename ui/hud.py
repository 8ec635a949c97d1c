#!/usr/bin/env python3
"""HUD panel, legend and pause banner (mixin)."""

from __future__ import annotations

from typing import Any, Mapping

import pygame

from .helpers import format_clock


class HudRenderer:
    """Mixin that draws every overlay / HUD element."""

    # ------------------------------------------------------------------ #
    #  Main HUD panel                                                      #
    # ------------------------------------------------------------------ #

    def draw_hud(self, surface: pygame.Surface, state: Mapping[str, Any]) -> None:
        if self.font_small is None:
            return

        cars = state.get("cars", [])
        braking = sum(1 for car in cars if car.get("state") == "braking")
        brakes = sum(int(car.get("brakeCount", 0)) for car in cars)
        lines = (
            f"TIME {format_clock(float(state.get('time', 0.0)))}"
            f"   x{float(state.get('timeScale', 1.0)):.1f}"
            f"   {'RUNNING' if state.get('running') else 'STOPPED'}",
            f"ON ROAD {len(cars)}   BRAKING {braking}   BRAKE EVENTS {brakes}",
            f"SPAWNED {state.get('totalCarsMade', 0)}/{state.get('maxCars', 0)}"
            f"   COMPLETED {state.get('carsCompleted', 0)}",
        )

        panel_rect = pygame.Rect(16, 12, 420, 16 + 18 * len(lines))
        pygame.draw.rect(surface, self.HUD_BG_COLOR, panel_rect, border_radius=6)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, panel_rect, width=1, border_radius=6)
        y = panel_rect.y + 8
        for line in lines:
            text = self.font_small.render(line, True, (240, 240, 240))
            surface.blit(text, (panel_rect.x + 10, y))
            y += 18

    # ------------------------------------------------------------------ #
    #  Legend                                                               #
    # ------------------------------------------------------------------ #

    def _draw_legend(self, surface: pygame.Surface) -> None:
        if self.font_tiny is None:
            return
        x = self.width - 140
        y = 20
        for label, color in self.LEGEND_ITEMS:
            pygame.draw.rect(surface, color, (x, y + 2, 10, 10), width=2)
            text = self.font_tiny.render(label, True, self.TEXT_COLOR)
            surface.blit(text, (x + 16, y))
            y += 18
        hint = self.font_tiny.render("SPACE run  R reset  +/- speed", True, (120, 120, 120))
        surface.blit(hint, (self.width - hint.get_width() - 16, self.height - 24))

    def _draw_pause_banner(self, surface: pygame.Surface, label: str = "STOPPED") -> None:
        overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 100))
        surface.blit(overlay, (0, 0))
        if self.font_title:
            text = self.font_title.render(label, True, (220, 220, 220))
            surface.blit(text, text.get_rect(center=(self.width // 2, self.height - 60)))
