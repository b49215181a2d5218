"""Light shading and texture coordinate stepping for column and span drawing."""

from __future__ import annotations

import math
from typing import Tuple

from .geometry import clamp

MAX_RENDER_DISTANCE = 200.0
MAX_SHADE = 31


def _fdiv(numerator: float, denominator: float) -> float:
    """Division that yields inf or nan on a zero denominator instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def calculate_shade(distance: float, lightlevel: int) -> int:
    """Lightmap shade index (0 brightest to 31 darkest) for a distance and light level."""
    lightlevel = int(lightlevel) & 0xFF
    distance = clamp(distance, 0.0, MAX_RENDER_DISTANCE)
    distance_shade = int(distance / MAX_RENDER_DISTANCE * 255.0) & 0xFF
    return clamp(((255 - lightlevel) + distance_shade) // 8, 0, MAX_SHADE)


def tex_start_and_step(
    true_low: int, true_high: int, low: int, high: int, tex_size: int, scale: float
) -> Tuple[float, float, float]:
    """Texture coordinate at ``low`` and ``high`` and the step per pixel.

    ``true_low``/``true_high`` span the whole object, ``low``/``high`` the
    visible part. Textures are anchored at the bottom.
    """
    span = true_high - true_low
    t0 = (1.0 - _fdiv(low - true_low, span)) * (tex_size - 1) * scale
    t1 = (1.0 - _fdiv(high - true_low, span)) * (tex_size - 1) * scale
    step = _fdiv(t1 - t0, high - low)
    return t0, t1, step


def tex_low_high_and_step(
    true_low: int, true_high: int, low: int, high: int, tex_size: int, scale: float
) -> Tuple[float, float, float]:
    """Start coordinates for a texture anchored at the bottom and at the top, and the step."""
    step = -_fdiv(tex_size, true_high - true_low)
    start_low = (low - true_low) * step - 1
    start_high = (true_high - low) * -step - 1
    return start_low * scale, start_high * scale, step * scale


def tex_start_and_step_abs(
    true_abs_low: int,
    true_low: int,
    true_high: int,
    low: int,
    high: int,
    tex_size: int,
    scale: float,
) -> Tuple[float, float]:
    """Start and step for a texture anchored at an absolute bottom line."""
    step = -_fdiv(tex_size, true_high - true_abs_low)
    start_low = (low - true_abs_low) * step - 1
    return start_low * scale, step * scale