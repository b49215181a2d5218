"""Billboard drawing of entities, depth-tested against the scene."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Container, Iterable

from .constants import HFOV, PI, PI_2, PI_4
from .entity import Entity, EntityType
from .raster import RenderContext
from .shading import calculate_shade, tex_start_and_step

if TYPE_CHECKING:
    from .player import Player

_PROJECTILE_HIDE_DISTANCE = 4.0
_SPRITE_ASPECT = 9.0 / 16.0
_SPRITE_TEXTURE_SIZE = 256


def _trunc(value: float) -> int:
    return int(value) if math.isfinite(value) else 0


def _trunc_half(value: int) -> int:
    """Integer halving that rounds towards zero."""
    return int(value / 2)


def _angle_to_x(angle: float, width: int) -> int:
    t = 1.0 - math.tan(((angle + HFOV / 2.0) / HFOV) * PI_2 - PI_4)
    return int((width // 2) * t)


def _clamp(value: int, low: int, high: int) -> int:
    return high if value > high else low if value < low else value


def draw_sprites(
    context: RenderContext,
    player: "Player",
    handler: Iterable[Entity],
    drawn_sectors: Container[int],
) -> None:
    """Draw every entity standing in one of ``drawn_sectors``."""
    fb = context.framebuffer
    width, height = fb.width, fb.height

    for entity in handler:
        if entity.sector not in drawn_sectors or not entity.sprites:
            continue
        if entity.type is EntityType.PROJECTILE:
            dx = entity.pos.x - player.pos.x
            dy = entity.pos.y - player.pos.y
            if math.sqrt(dx * dx + dy * dy) < _PROJECTILE_HIDE_DISTANCE:
                continue
        rel = entity.rel_cam_pos
        if rel.y <= 0:
            continue

        vmove = -height * (entity.z - player.z)
        sprite_angle = math.atan2(rel.y, rel.x) - PI / 2
        screen_x = _angle_to_x(sprite_angle, width)
        vmove_screen = _trunc(vmove / rel.y)

        tex = context.textures[entity.sprites[0]]

        sprite_height = _trunc((height / rel.y) * entity.scale.y)
        y0 = -_trunc_half(sprite_height) + height // 2 - vmove_screen
        y1 = _trunc_half(sprite_height) + height // 2 - vmove_screen
        y0c = _clamp(y0, 0, height)
        y1c = _clamp(y1, 0, height)
        ty, _, step_y = tex_start_and_step(y0, y1, y0c, y1c, tex.height, 1.0)

        sprite_width = _trunc((width / rel.y) * entity.scale.x * _SPRITE_ASPECT)
        x0 = -_trunc_half(sprite_width) + screen_x
        x1 = _trunc_half(sprite_width) + screen_x
        x0c = _clamp(x0, 0, width)
        x1c = _clamp(x1, 0, width)
        tx0, _, step_x = tex_start_and_step(x0, x1, x0c, x1c, tex.width, 1.0)
        tx_start = _SPRITE_TEXTURE_SIZE - tx0
        step_x = -step_x

        lightlevel = player.world.sector(entity.sector).lightlevel
        shade = calculate_shade(rel.y, lightlevel)

        for y in range(y0c, min(y1c, height)):
            ty += step_y
            tx = tx_start
            row = (_trunc(ty) % tex.height) * tex.width
            for x in range(x0c, min(x1c, width)):
                offset = y * width + x
                if fb.depth[offset] > rel.y:
                    index = tex.indices[row + _trunc(tx) % tex.width]
                    if index:
                        context.put_shaded(x, y, index, shade)
                        fb.depth[offset] = rel.y
                tx += step_x