"""2D vector maths and screen-space projection helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .constants import HFOV, PI, PI_2, PI_4, SCREEN_WIDTH


@dataclass(frozen=True)
class Vec2:
    """Immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        return Vec2(self.x * factor, self.y * factor)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalize(self) -> Vec2:
        """Unit vector in the same direction, or the zero vector."""
        length = self.length()
        if length == 0:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / length, self.y / length)

    def rotate(self, angle: float) -> Vec2:
        """Rotate counter-clockwise by ``angle`` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Vec2(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)


@dataclass
class Vec3:
    """Mutable 3D vector, used for velocities."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


def clamp(value, low, high):
    """Clamp ``value`` into ``[low, high]``; ``high`` wins if the bounds cross."""
    if value > high:
        return high
    if value < low:
        return low
    return value


def point_side(point: Vec2, a: Vec2, b: Vec2) -> float:
    """Signed area telling on which side of the line a->b the point lies."""
    return (b.x - a.x) * (point.y - a.y) - (b.y - a.y) * (point.x - a.x)


def line_intersection(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2) -> Optional[Vec2]:
    """Intersection point of segments p0-p1 and p2-p3, or None."""
    s1x, s1y = p1.x - p0.x, p1.y - p0.y
    s2x, s2y = p3.x - p2.x, p3.y - p2.y
    denom = -s2x * s1y + s1x * s2y
    if denom == 0:
        return None
    s = (-s1y * (p0.x - p2.x) + s1x * (p0.y - p2.y)) / denom
    t = (s2x * (p0.y - p2.y) - s2y * (p0.x - p2.x)) / denom
    if 0 <= s <= 1 and 0 <= t <= 1:
        return Vec2(p0.x + t * s1x, p0.y + t * s1y)
    return None


def world_to_camera(pos: Vec2, cam_pos: Vec2, camsin: float, camcos: float) -> Vec2:
    """Convert a world position into camera space (y points forward)."""
    ux = pos.x - cam_pos.x
    uy = pos.y - cam_pos.y
    return Vec2(ux * camsin - uy * camcos, ux * camcos + uy * camsin)


def camera_to_world(pos: Vec2, cam_pos: Vec2, camsin: float, camcos: float) -> Vec2:
    """Convert a camera-space position back into world space."""
    rx = pos.x * camsin + pos.y * camcos
    ry = -pos.x * camcos + pos.y * camsin
    return Vec2(rx + cam_pos.x, ry + cam_pos.y)


def screen_angle_to_x(angle: float) -> int:
    """Map a view angle in [-HFOV/2, HFOV/2] to a screen column."""
    t = 1.0 - math.tan(((angle + HFOV / 2.0) / HFOV) * PI_2 - PI_4)
    return int((SCREEN_WIDTH // 2) * t)


def screen_x_to_angle(x: int) -> float:
    """Map a screen column back to its view angle."""
    at = math.atan((-2 * x) / SCREEN_WIDTH + 1)
    return (2 * HFOV * at) / PI


def ease_in_out_cubic(x: float) -> float:
    """Ease-in-out curve on [0, 1]."""
    if x < 0.5:
        return 2.0 * x * x
    return 1.0 - ((-2.0 * x + 2.0) ** 2) / 2.0