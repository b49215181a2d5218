"""Pixel buffer with depth values and basic 2D drawing primitives."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field
from typing import List

from .constants import SCREEN_HEIGHT, SCREEN_WIDTH, ZFAR
from .textures import IndexTexture, Palette


class Framebuffer:
    """ARGB pixels and per-pixel depth, stored row by row."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid framebuffer size {width}x{height}")
        self.width = width
        self.height = height
        size = width * height
        self._blank = array("I", bytes(4 * size))
        self._far = array("d", [ZFAR]) * size
        self.pixels = array("I", self._blank)
        self.depth = array("d", self._far)

    def clear(self) -> None:
        """Set every pixel to 0."""
        self.pixels[:] = self._blank

    def reset_depth(self) -> None:
        """Set every depth value to the far plane."""
        self.depth[:] = self._far

    def put(self, x: int, y: int, color: int) -> None:
        """Write a pixel; positions outside the buffer are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color

    def get(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside framebuffer")
        return self.pixels[y * self.width + x]

    def vertical_line(self, x: int, y0: int, y1: int, color: int) -> None:
        """Draw column x from y0 to y1 inclusive."""
        if y0 > y1:
            y0, y1 = y1, y0
        for y in range(y0, y1 + 1):
            self.put(x, y, color)

    def line(self, x0: int, y0: int, x1: int, y1: int, color: int) -> None:
        """Bresenham line including both end points."""
        dx, sx = abs(x1 - x0), (1 if x0 < x1 else -1)
        dy, sy = abs(y1 - y0), (1 if y0 < y1 else -1)
        err = int((dx if dx > dy else -dy) / 2)
        while True:
            self.put(x0, y0, color)
            if x0 == x1 and y0 == y1:
                return
            e2 = 2 * err
            if e2 > -dx:
                err -= dy
                x0 += sx
            if e2 < dy:
                err += dx
                y0 += sy

    def square(self, x0: int, y0: int, size: int, color: int) -> None:
        """Outline of a square with its top-left corner at (x0, y0)."""
        for y in range(y0, y0 + size):
            self.put(x0, y, color)
            self.put(x0 + size, y, color)
        for x in range(x0, x0 + size):
            self.put(x, y0, color)
            self.put(x, y0 + size, color)

    def fill_square(self, x0: int, y0: int, size: int, color: int) -> None:
        self.fill_rectangle(x0, y0, x0 + size, y0 + size, color)

    def fill_rectangle(self, x0: int, y0: int, x1: int, y1: int, color: int) -> None:
        """Fill the half-open box between two corners, in any order."""
        x0, x1 = min(x0, x1), max(x0, x1)
        y0, y1 = min(y0, y1), max(y0, y1)
        for y in range(y0, y1):
            for x in range(x0, x1):
                self.put(x, y, color)

    def ellipse(self, x0: int, y0: int, a: int, b: int, color: int) -> None:
        """Bresenham ellipse outline with semi-axes a and b."""
        if a == 0 and b == 0:
            return
        dx, dy = 0, b
        a2, b2 = a * a, b * b
        err = b2 - (2 * b - 1) * a2
        while True:
            self.put(x0 + dx, y0 + dy, color)
            self.put(x0 + dx, y0 - dy, color)
            self.put(x0 - dx, y0 - dy, color)
            self.put(x0 - dx, y0 + dy, color)
            e2 = 2 * err
            if e2 < (2 * dx + 1) * b2:
                dx += 1
                err += (2 * dx + 1) * b2
            if e2 > -(2 * dy - 1) * a2:
                dy -= 1
                err -= (2 * dy - 1) * a2
            if dy < 0:
                break
        while dx < a:
            dx += 1
            self.put(x0 + dx, y0, color)
            self.put(x0 - dx, y0, color)


@dataclass
class RenderContext:
    """Everything the 3D drawing code writes to and reads from."""

    framebuffer: Framebuffer
    palette: Palette
    textures: List[IndexTexture] = field(default_factory=list)

    def put_shaded(self, x: int, y: int, index: int, shade: int) -> None:
        """Write palette colour ``index`` at the given shade."""
        self.framebuffer.put(x, y, self.palette.colors[index][shade])