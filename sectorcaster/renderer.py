"""Portal renderer: walls sector by sector, then planes, see-through walls, sprites and the map."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, Iterable, List, Optional, Set

from .constants import (
    CEILTEXTURE,
    FLOORTEXTURE,
    GREEN,
    HFOV,
    PI_2,
    PI_4,
    VFOV,
    ZFAR,
    ZNEAR,
)
from .entity import Entity
from .geometry import Vec2, line_intersection, world_to_camera
from .minimap import draw_minimap
from .raster import RenderContext
from .shading import calculate_shade
from .sprites import draw_sprites
from .visplanes import PlaneRenderer, Visplane, VisplaneSet
from .walls import WallSlice, draw_wall_column
from .world import Sector, Wall, WallSection

if TYPE_CHECKING:
    from .player import Player

MAX_PORTAL_DEPTH = 32
_FRUSTUM_SLACK = 0.01
_CROSSHAIR_LENGTH = 8
_CROSSHAIR_THICKNESS = 1


def _trunc(value: float) -> int:
    """Truncate towards zero; non-finite values become 0."""
    return int(value) if math.isfinite(value) else 0


def _clamp(value: int, low: int, high: int) -> int:
    return high if value > high else low if value < low else value


@dataclass
class _Projection:
    """A wall in camera space: clipped ends p1/p2, original ends tp1/tp2, view angles."""

    p1: Vec2
    p2: Vec2
    tp1: Vec2
    tp2: Vec2
    a1: float
    a2: float

    def cutoff(self) -> tuple:
        """Fractions of the wall clipped away on the left and right."""
        total = (self.tp1 - self.tp2).length()
        return (
            abs((self.p1 - self.tp1).length() / total),
            abs((self.p2 - self.tp2).length() / total),
        )

    def texture_u(self, a: float) -> float:
        """Perspective-correct horizontal texture position at fraction ``a`` across."""
        left, right = self.cutoff()
        u0, u1 = left, 1.0 - right
        z0, z1 = self.p1.y, self.p2.y
        return ((1.0 - a) * (u0 / z0) + a * (u1 / z1)) / ((1.0 - a) / z0 + a / z1)

    def distance(self, u: float) -> float:
        return self.tp1.y * (1 - u) + self.tp2.y * u


class Renderer:
    """Draws a whole frame of the level as seen by the player."""

    def __init__(self, context: RenderContext) -> None:
        self.context = context
        self.framebuffer = context.framebuffer
        self._width = self.framebuffer.width
        self._height = self.framebuffer.height
        self.planes = VisplaneSet(self._width, self._height)
        self.plane_renderer = PlaneRenderer(context)
        self.drawn_sectors: Set[int] = set()
        self._ceiling_clip: List[int] = []
        self._floor_clip: List[int] = []

        left = Vec2(0.0, 1.0).rotate(HFOV / 2.0)
        right = Vec2(0.0, 1.0).rotate(-HFOV / 2.0)
        self._near_left = left * ZNEAR
        self._near_right = right * ZNEAR
        self._far_left = left * ZFAR
        self._far_right = right * ZFAR
        self._begin_frame()

    def _begin_frame(self) -> None:
        self.framebuffer.reset_depth()
        self._ceiling_clip = [self._height - 1] * self._width
        self._floor_clip = [0] * self._width
        self.planes.clear()
        self.drawn_sectors = set()

    def draw_3d(self, player: "Player", handler: Iterable[Entity]) -> None:
        """Draw walls, floors and ceilings, see-through walls, sprites and the minimap."""
        self._begin_frame()
        self.draw_sector_walls(player, player.sector, 0, self._width - 1, frozenset(), 0)
        self.plane_renderer.draw(self.planes, player)
        self.draw_transparent_walls(player)
        draw_sprites(self.context, player, handler, self.drawn_sectors)
        draw_minimap(self.framebuffer, player.world, player)

    def draw_2d(self) -> None:
        """Draw the crosshair in the middle of the screen."""
        cx, cy = self._width // 2, self._height // 2
        length, thick = _CROSSHAIR_LENGTH, _CROSSHAIR_THICKNESS
        self.framebuffer.fill_rectangle(cx - length, cy - thick, cx + length, cy + thick, GREEN)
        self.framebuffer.fill_rectangle(cx - thick, cy - length, cx + thick, cy + length, GREEN)

    def _angle_to_x(self, angle: float) -> int:
        t = 1.0 - math.tan(((angle + HFOV / 2.0) / HFOV) * PI_2 - PI_4)
        return _trunc((self._width // 2) * t)

    def _project(self, a: Vec2, b: Vec2, player: "Player") -> Optional[_Projection]:
        """Transform a wall into camera space and clip it to the view frustum."""
        p1 = world_to_camera(a, player.pos, player.anglesin, player.anglecos)
        p2 = world_to_camera(b, player.pos, player.anglesin, player.anglecos)
        tp1, tp2 = p1, p2
        a1 = math.atan2(p1.y, p1.x) - PI_2
        a2 = math.atan2(p2.y, p2.x) - PI_2
        half = HFOV / 2.0

        if p1.y <= ZNEAR or p2.y <= ZNEAR or a1 >= half or a2 <= -half:
            hit_left = line_intersection(p1, p2, self._near_left, self._far_left)
            hit_right = line_intersection(p1, p2, self._near_right, self._far_right)
            if hit_left is not None and hit_right is not None and p1.x - p2.x > 0:
                return None
            if hit_left is not None:
                p1 = hit_left
                a1 = math.atan2(p1.y, p1.x) - PI_2
            if hit_right is not None:
                p2 = hit_right
                a2 = math.atan2(p2.y, p2.x) - PI_2

        if a1 < a2 or a2 < -half - _FRUSTUM_SLACK or a1 > half + _FRUSTUM_SLACK:
            return None
        if p1.y <= 0 or p2.y <= 0 or (tp1 - tp2).length() == 0:
            return None
        return _Projection(p1, p2, tp1, tp2, a1, a2)

    def _row(self, height: float, player: "Player", scale: float) -> int:
        return self._height // 2 + _trunc((height - player.z) * scale)

    def _plane_for(self, height: float, picnum: int, lightlevel: int, start: int, stop: int) -> Visplane:
        plane = self.planes.find(height, picnum, lightlevel)
        if plane is not None:
            plane = self.planes.check(plane, start, stop)
        if plane is None:
            raise RuntimeError("visplane limit reached")
        return plane

    def draw_sector_walls(
        self,
        player: "Player",
        sector_index: int,
        sx1: int,
        sx2: int,
        rendered_walls: AbstractSet[int],
        depth: int,
    ) -> None:
        """Draw the walls of a sector between columns sx1 and sx2, recursing through portals."""
        if depth > MAX_PORTAL_DEPTH:
            return
        world = player.world
        sector = world.sector(sector_index)
        ceil_clip, floor_clip = self._ceiling_clip, self._floor_clip
        top_row = self._height - 1

        for i in range(sector.index, sector.index + sector.num_walls):
            wall = world.walls[i]
            proj = self._project(wall.a, wall.b, player)
            if proj is None:
                continue

            tx1 = self._angle_to_x(proj.a1)
            tx2 = self._angle_to_x(proj.a2)
            if tx1 != 0:
                tx1 += 1
            if tx1 > sx2 or tx2 < sx1:
                continue
            x1 = _clamp(tx1, sx1, sx2)
            x2 = _clamp(tx2, sx1, sx2)
            if x1 >= x2:
                continue

            # drop columns already closed by nearer walls
            for column in range(x1, x2):
                if ceil_clip[column] != 0:
                    break
                x1 = column
            for column in range(x2, x1, -1):
                if ceil_clip[column] != 0:
                    break
                x2 = column

            floor_plane = self._plane_for(sector.zfloor, FLOORTEXTURE, sector.lightlevel, x1, x2)
            ceil_plane = self._plane_for(sector.zceil, CEILTEXTURE, sector.lightlevel, x1, x2)

            nzfloor, nzceil = sector.zfloor, sector.zceil
            if wall.portal >= 0:
                neighbour = world.sector(wall.portal)
                nzfloor, nzceil = neighbour.zfloor, neighbour.zceil

            sy0 = (VFOV * self._height) / proj.p1.y
            sy1 = (VFOV * self._height) / proj.p2.y
            yf0, yf1 = self._row(sector.zfloor, player, sy0), self._row(sector.zfloor, player, sy1)
            yc0, yc1 = self._row(sector.zceil, player, sy0), self._row(sector.zceil, player, sy1)
            yaf0 = self._row(sector.zfloor_old, player, sy0)
            yaf1 = self._row(sector.zfloor_old, player, sy1)
            pf0, pf1 = self._row(nzfloor, player, sy0), self._row(nzfloor, player, sy1)
            pc0, pc1 = self._row(nzceil, player, sy0), self._row(nzceil, player, sy1)
            wallwidth = (wall.a - wall.b).length()

            for x in range(x1, x2 + 1):
                xp = (x - tx1) / (tx2 - tx1)
                tyf = _trunc(xp * (yf1 - yf0)) + yf0
                tyc = _trunc(xp * (yc1 - yc0)) + yc0
                tayf = _trunc(xp * (yaf1 - yaf0)) + yaf0
                yf = _clamp(tyf, floor_clip[x], ceil_clip[x])
                yc = _clamp(tyc, floor_clip[x], ceil_clip[x])

                if yc < ceil_clip[x]:
                    ceil_plane.bottom[x] = yc
                    ceil_plane.top[x] = ceil_clip[x]
                if yf > floor_clip[x]:
                    floor_plane.bottom[x] = floor_clip[x]
                    floor_plane.top[x] = yf

                u = proj.texture_u(xp)
                distance = proj.distance(u)
                shade = calculate_shade(distance, sector.lightlevel)

                def column(y0, y1, bottom, top, height, section):
                    draw_wall_column(
                        self.context,
                        WallSlice(
                            world=world,
                            wall=wall,
                            x=x,
                            y0=y0,
                            y1=y1,
                            yf=bottom,
                            yc=top,
                            ayf=tayf,
                            u=u,
                            shade=shade,
                            distance=distance,
                            zfloor=sector.zfloor,
                            zfloor_old=sector.zfloor_old,
                            wallheight=height,
                            wallwidth=wallwidth,
                            section=section,
                            backside=False,
                        ),
                    )

                if wall.transparent:
                    pass
                elif wall.portal == -1:
                    if yc > tyf and yf < tyc:
                        column(yf, yc, tyf, tyc, sector.zceil - sector.zfloor, WallSection.WALL)
                    ceil_clip[x] = 0
                    floor_clip[x] = top_row
                else:
                    tpyf = _trunc(xp * (pf1 - pf0)) + pf0
                    pyf = _clamp(tpyf, yf, yc)
                    tpyc = _trunc(xp * (pc1 - pc0)) + pc0
                    pyc = _clamp(tpyc, yf, yc)
                    if pyf > yf:
                        column(yf, pyf, tyf, tpyf, nzfloor - sector.zfloor, WallSection.PORTAL_LOWER)
                    if pyc < yc:
                        column(pyc, yc, tpyc, tyc, sector.zceil - nzceil, WallSection.PORTAL_UPPER)
                    ceil_clip[x] = _clamp(pyc, 0, ceil_clip[x])
                    floor_clip[x] = _clamp(pyf, floor_clip[x], top_row)

            self.drawn_sectors.add(sector_index)
            if wall.portal >= 0 and i not in rendered_walls:
                depth += 1
                self.draw_sector_walls(player, wall.portal, x1, x2, rendered_walls | {i}, depth)

    def draw_transparent_walls(self, player: "Player") -> None:
        """Draw both sides of see-through walls in sectors drawn this frame."""
        world = player.world
        for index, sector in enumerate(world.sectors):
            if index not in self.drawn_sectors:
                continue
            for wall in world.walls_of(sector):
                if not wall.transparent:
                    continue
                self._draw_transparent_side(player, sector, wall, wall.a, wall.b, False)
                self._draw_transparent_side(player, sector, wall, wall.b, wall.a, True)

    def _draw_transparent_side(
        self, player: "Player", sector: Sector, wall: Wall, a: Vec2, b: Vec2, backside: bool
    ) -> None:
        proj = self._project(a, b, player)
        if proj is None:
            return
        x1 = self._angle_to_x(proj.a1)
        x2 = self._angle_to_x(proj.a2)
        if x2 <= x1:
            return

        sy0 = (VFOV * self._height) / proj.p1.y
        sy1 = (VFOV * self._height) / proj.p2.y
        yf0, yf1 = self._row(sector.zfloor, player, sy0), self._row(sector.zfloor, player, sy1)
        yc0, yc1 = self._row(sector.zceil, player, sy0), self._row(sector.zceil, player, sy1)
        yaf0 = self._row(sector.zfloor_old, player, sy0)
        yaf1 = self._row(sector.zfloor_old, player, sy1)
        wallwidth = (a - b).length()
        top_row = self._height - 1

        for x in range(max(x1, 0), min(x2, self._width - 1) + 1):
            xp = (x - x1) / (x2 - x1)
            tyf = _trunc(xp * (yf1 - yf0)) + yf0
            tyc = _trunc(xp * (yc1 - yc0)) + yc0
            tayf = _trunc(xp * (yaf1 - yaf0)) + yaf0
            yf = _clamp(tyf, 0, top_row)
            yc = _clamp(tyc, 0, top_row)
            if not (yc > tyf and yf < tyc):
                continue
            u = proj.texture_u(xp)
            distance = proj.distance(u)
            draw_wall_column(
                self.context,
                WallSlice(
                    world=player.world,
                    wall=wall,
                    x=x,
                    y0=yf,
                    y1=yc,
                    yf=tyf,
                    yc=tyc,
                    ayf=tayf,
                    u=u,
                    shade=calculate_shade(distance, sector.lightlevel),
                    distance=distance,
                    zfloor=sector.zfloor,
                    zfloor_old=sector.zfloor_old,
                    wallheight=sector.zceil - sector.zfloor,
                    wallwidth=wallwidth,
                    section=WallSection.WALL,
                    backside=backside,
                ),
            )