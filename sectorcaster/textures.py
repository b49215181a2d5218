"""Colour lightmap and palette-indexed textures."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Union

from PIL import Image

from .constants import alpha, blue, green, red

COLOR_COUNT = 256
SHADE_COUNT = 32

_LEVELS = (0, 51, 102, 153, 204, 255)
_GRAY_TONES = 39

TEXTURE_FILES = (
    "test.bmp",
    "blech.bmp",
    "lever.bmp",
    "metalmesh.bmp",
    "meteor.bmp",
    "meteor_red.bmp",
    "spritetest.bmp",
    "vein.bmp",
    "zombie.bmp",
)


def _f32(value: float) -> float:
    """Round a float to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _blank_colors() -> List[List[int]]:
    return [[0] * SHADE_COUNT for _ in range(COLOR_COUNT)]


@dataclass
class Palette:
    """256 colours, each with 32 shades from full brightness to dark.

    Index 0 is reserved for transparent pixels.
    """

    colors: List[List[int]] = field(default_factory=_blank_colors)


@dataclass
class IndexTexture:
    """A texture whose pixels are palette indices, stored row by row."""

    width: int
    height: int
    indices: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid texture size {self.width}x{self.height}")
        if len(self.indices) != self.width * self.height:
            raise ValueError("index data does not match texture size")


def _shaded(channel: int, step: float, shade: int) -> int:
    return channel - int(_f32(step * shade))


def create_lightmap() -> Palette:
    """Build the palette: a 6x6x6 colour cube followed by 39 gray tones."""
    palette = Palette()
    colors = palette.colors
    colors[0] = [0] * SHADE_COUNT

    for x, r in enumerate(_LEVELS):
        for y, g in enumerate(_LEVELS):
            for z, b in enumerate(_LEVELS):
                r_step = _f32(r / 31.0)
                g_step = _f32(g / 31.0)
                b_step = _f32(b / 31.0)
                number = z + 6 * y + 36 * x + 1
                colors[number] = [
                    (0xFF << 24)
                    | (_shaded(r, r_step, s) << 16)
                    | (_shaded(g, g_step, s) << 8)
                    | _shaded(b, b_step, s)
                    for s in range(SHADE_COUNT)
                ]

    gray_unit = _f32(255 / 39.0)
    for tone in range(1, _GRAY_TONES + 1):
        gray = int(_f32(gray_unit * tone)) & 0xFF
        gray_step = gray / 32.0
        shades = []
        for s in range(SHADE_COUNT):
            level = _shaded(gray, gray_step, s)
            shades.append((0xFF << 24) | (level << 16) | (level << 8) | level)
        colors[6 * 6 * 6 + tone] = shades
    return palette


def find_closest_color_index(color: int, palette: Palette) -> int:
    """Palette index whose unshaded colour is nearest; 0 for transparent input."""
    if alpha(color) == 0:
        return 0
    r1, g1, b1 = red(color), green(color), blue(color)
    closest = 0
    best = None
    for index, shades in enumerate(palette.colors[1:], 1):
        base = shades[0]
        dr = r1 - red(base)
        dg = g1 - green(base)
        db = b1 - blue(base)
        distance = dr * dr + dg * dg + db * db
        if best is None or distance < best:
            best = distance
            closest = index
    return closest


def index_texture_from_pixels(
    width: int, height: int, pixels: Iterable[int], palette: Palette
) -> IndexTexture:
    """Convert packed ARGB pixels (row by row) into a palette-indexed texture."""
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid texture size {width}x{height}")
    cache: Dict[int, int] = {}
    indices = bytearray()
    for color in pixels:
        index = cache.get(color)
        if index is None:
            index = cache[color] = find_closest_color_index(color, palette)
        indices.append(index)
    if len(indices) != width * height:
        raise ValueError(
            f"expected {width * height} pixels for {width}x{height}, got {len(indices)}"
        )
    return IndexTexture(width=width, height=height, indices=bytes(indices))


def load_textures(
    paths: Sequence[Union[str, Path]], palette: Palette
) -> List[IndexTexture]:
    """Load image files and index them against the palette, in order."""
    textures = []
    for path in paths:
        with Image.open(path) as image:
            rgba = image.convert("RGBA")
            width, height = rgba.size
            raw = rgba.tobytes()
        pixels = (
            (a << 24) | (r << 16) | (g << 8) | b
            for r, g, b, a in zip(raw[0::4], raw[1::4], raw[2::4], raw[3::4])
        )
        textures.append(index_texture_from_pixels(width, height, pixels, palette))
    return textures