"""Overhead map of all walls and the player, drawn in a screen corner."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import RED, WHITE
from .raster import Framebuffer
from .world import World

if TYPE_CHECKING:
    from .player import Player

_REFERENCE_WIDTH = 1280.0
_REFERENCE_HEIGHT = 720.0
_PLAYER_RADIUS = 3
_DIRECTION_LENGTH = 10


def draw_minimap(framebuffer: Framebuffer, world: World, player: "Player") -> None:
    """Draw every wall in white and the player with its view direction in red."""
    offset_x = framebuffer.width // 20
    offset_y = framebuffer.height - framebuffer.height // 4
    scale = (framebuffer.width / _REFERENCE_WIDTH + framebuffer.height / _REFERENCE_HEIGHT) / 2

    def to_screen(x: float, y: float):
        return int(x * scale + offset_x), int(y * scale + offset_y)

    for sector in world.sectors:
        for wall in world.walls_of(sector):
            framebuffer.line(*to_screen(wall.a.x, wall.a.y), *to_screen(wall.b.x, wall.b.y), WHITE)

    center = to_screen(player.pos.x, player.pos.y)
    radius = int(_PLAYER_RADIUS * scale)
    framebuffer.ellipse(*center, radius, radius, RED)
    tip = to_screen(
        player.anglecos * _DIRECTION_LENGTH + player.pos.x,
        player.anglesin * _DIRECTION_LENGTH + player.pos.y,
    )
    framebuffer.line(*center, *tip, RED)