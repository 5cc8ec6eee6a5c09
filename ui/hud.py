#!/usr/bin/env python3
"""Status line overlay (mixin)."""

from __future__ import annotations

from typing import Any, Mapping

import pygame

from .helpers import render_text


class HudRenderer:
    """Mixin that draws the feed status in the top-left corner."""

    def hud_text(self, status: Mapping[str, Any]) -> str:
        if status.get("startup_error"):
            return f"TOPOLOGY UNAVAILABLE: {status['startup_error']}"
        return (
            f"FEED {status.get('connection', '?')}   "
            f"VEHICLES {status.get('vehicles', 0)}   "
            f"MALFORMED {status.get('malformed', 0)}   "
            f"DROPPED {status.get('dropped', 0)}"
        )

    def draw_hud(self, surface: pygame.Surface, status: Mapping[str, Any]) -> None:
        if self.font_small is None:
            return
        failing = bool(status.get("startup_error")) or status.get("connection") in (
            "CLOSED", "ERRORED",
        )
        color = self.HUD_WARNING_COLOR if failing else self.HUD_TEXT_COLOR
        render_text(surface, self.font_small, self.hud_text(status), (8, 8), color)
