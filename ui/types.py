"""
ui/types.py
===========
Lightweight data containers used across every UI module.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

ColorRGB = Tuple[int, int, int]


@dataclass
class Viewport:
    """Size of the drawing surface; the only state kept between frames.

    World coordinates map 1:1 to screen pixels, so resizing only changes
    how much of the network is visible.
    """
    width: int
    height: int
    min_width: int = 200
    min_height: int = 150

    def resize(self, width: int, height: int) -> Tuple[int, int]:
        self.width = max(self.min_width, width)
        self.height = max(self.min_height, height)
        return self.width, self.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height
