"""
ui/helpers.py
=============
Pure utility functions shared across UI modules:
font loading and text drawing.
"""

from __future__ import annotations

from typing import Optional, Tuple

import pygame


# ── Text helper ──────────────────────────────────────────────────────────────

def render_text(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: Tuple[int, int],
    color: Tuple[int, ...] = (40, 40, 40),
    anchor: str = "topleft",
) -> pygame.Rect:
    """Render text with flexible *anchor* ('topleft', 'center', 'midright' …)."""
    img = font.render(text, True, color)
    rect = img.get_rect(**{anchor: pos})
    surface.blit(img, rect)
    return rect


class ViewHelpers:
    """Mixin with static helpers used by the view."""

    @staticmethod
    def _load_font(size: int, bold: bool = False) -> Optional[pygame.font.Font]:
        if not pygame.font.get_init():
            return None
        font = pygame.font.SysFont("dejavusansmono,consolas,monospace", size, bold=bold)
        return font or pygame.font.Font(None, size)

    @staticmethod
    def _screen_point(x: float, y: float) -> Tuple[int, int]:
        return int(round(x)), int(round(y))
