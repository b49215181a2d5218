"""Textured drawing of a single vertical wall column, with decals."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Set, Tuple

from .raster import RenderContext
from .shading import tex_low_high_and_step, tex_start_and_step, tex_start_and_step_abs
from .textures import IndexTexture
from .world import Decal, Wall, WallSection, World

SOLID_TEXTURE_SCALE = 30.0
TRANSPARENT_TEXTURE_SCALE = 10.0


@dataclass
class WallSlice:
    """One screen column of a wall section.

    ``y0``/``y1`` are the clipped rows to draw, ``yf``/``yc`` the unclipped
    bottom and top of the section and ``ayf`` the bottom the wall would have
    at its original floor height. ``u`` is the horizontal texture position.
    """

    world: World
    wall: Wall
    x: int
    y0: int
    y1: int
    yf: int
    yc: int
    ayf: int
    u: float
    shade: int
    distance: float
    zfloor: float
    zfloor_old: float
    wallheight: float
    wallwidth: float
    section: WallSection = WallSection.WALL
    backside: bool = False


def _trunc(value: float) -> int:
    """Truncate towards zero; non-finite values become 0."""
    return int(value) if math.isfinite(value) else 0


def _texel(tex: IndexTexture, row: int, col: int) -> int:
    """Palette index at a texture position, wrapping around the edges."""
    return tex.indices[(row % tex.height) * tex.width + (col % tex.width)]


def _depth(context: RenderContext, x: int, y: int) -> float:
    fb = context.framebuffer
    if 0 <= x < fb.width and 0 <= y < fb.height:
        return fb.depth[y * fb.width + x]
    return -math.inf


def _plot(context: RenderContext, x: int, y: int, index: int, shade: int, distance: float) -> None:
    fb = context.framebuffer
    if 0 <= x < fb.width and 0 <= y < fb.height:
        context.put_shaded(x, y, index, shade)
        fb.depth[y * fb.width + x] = distance


def _decal_texels(
    wall_slice: WallSlice, decal: Decal, wall_pos_x: float, textures: List[IndexTexture]
) -> Iterator[Tuple[int, int]]:
    """Rows of the column covered by a decal, with the decal's palette index."""
    s = wall_slice
    world, wall = s.world, s.wall
    if decal.wall_type is not s.section or decal.front == s.backside:
        return
    rel_height = world.decal_wall_height(decal, wall, s.zfloor)
    if decal.wall_type is WallSection.PORTAL_UPPER:
        rel_height -= world.sector(wall.portal).zceil
    if rel_height > s.wallheight or rel_height < -decal.size.y:
        return
    if not decal.wallpos.x < wall_pos_x < decal.wallpos.x + decal.size.x:
        return
    if s.wallheight == 0:
        return

    tex = textures[decal.tex_num]
    tx = _trunc((wall_pos_x - decal.wallpos.x) / decal.size.x * tex.width)
    top_y = (rel_height + decal.size.y) / s.wallheight
    bot_y = rel_height / s.wallheight
    top_ty = _trunc(top_y * (s.yc - s.yf) + s.yf)
    bot_ty = _trunc(bot_y * (s.yc - s.yf) + s.yf)
    bot_clamp = min(max(bot_ty, s.y0), s.y1) if bot_ty <= s.y1 else s.y1
    top_clamp = min(max(top_ty, s.y0), s.y1) if top_ty <= s.y1 else s.y1

    ty, _, step = tex_start_and_step(bot_ty, top_ty, bot_clamp, top_clamp, tex.height, 1.0)
    for y in range(bot_clamp, top_clamp):
        yield y, _texel(tex, _trunc(ty), tx)
        ty += step


def draw_wall_column(context: RenderContext, wall_slice: WallSlice) -> None:
    """Draw one column of a wall section, its decals and depth values."""
    s = wall_slice
    wall = s.wall
    textures = context.textures
    u = 1.0 - s.u if s.backside else s.u
    wall_pos_x = u * s.wallwidth
    drawn: Set[int] = set()

    if not wall.transparent:
        for decal in wall.decals:
            for y, index in _decal_texels(s, decal, wall_pos_x, textures):
                if index:
                    _plot(context, s.x, y, index, s.shade, s.distance)
                    drawn.add(y)

    tex = textures[wall.tex]
    scale = TRANSPARENT_TEXTURE_SCALE if wall.transparent else SOLID_TEXTURE_SCALE
    texheight = s.wallheight / scale
    texwidth = s.wallwidth / scale
    tx = _trunc(u * texwidth * (tex.width - 1)) % tex.width

    if wall.portal >= 0:
        start_low, start_high, step = tex_low_high_and_step(
            s.yf, s.yc, s.y0, s.y1, tex.height, texheight
        )
        # lower parts are anchored at the top, upper parts at the bottom
        ty = start_low if s.section is WallSection.PORTAL_UPPER else start_high
    else:
        abs_wallheight = s.wallheight + (s.zfloor - s.zfloor_old)
        ty, step = tex_start_and_step_abs(
            s.ayf, s.yf, s.yc, s.y0, s.y1, tex.height, abs_wallheight / scale
        )

    for y in range(s.y0, s.y1 + 1):
        if wall.transparent:
            if y not in drawn and _depth(context, s.x, y) > s.distance:
                index = _texel(tex, _trunc(ty), tx)
                if index:
                    _plot(context, s.x, y, index, s.shade, s.distance)
                    drawn.add(y)
        elif y not in drawn:
            index = _texel(tex, _trunc(ty - 1), tx)
            _plot(context, s.x, y, index, s.shade, s.distance)
            drawn.add(y)
        ty += step

    if wall.transparent:
        for decal in wall.decals:
            for y, index in _decal_texels(s, decal, wall_pos_x, textures):
                if y in drawn and index:
                    _plot(context, s.x, y, index, s.shade, s.distance)