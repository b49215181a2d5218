"""Floor and ceiling planes collected during wall drawing and drawn as spans."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional

from .constants import HFOV, MAXVISPLANES, PI, PI_2, SCREEN_HEIGHT, SCREEN_WIDTH, VFOV
from .geometry import Vec2, camera_to_world
from .raster import RenderContext
from .shading import calculate_shade

if TYPE_CHECKING:
    from .player import Player

PLANE_TEXTURE_SCALE = 30.0
_HORIZON_SLOPE = 1000.0


@dataclass(eq=False)
class Visplane:
    """Screen region of a floor or ceiling: per column, rows ``bottom`` to ``top``."""

    height: float
    picnum: int
    lightlevel: int
    minx: int
    maxx: int
    top: List[int] = field(default_factory=list)
    bottom: List[int] = field(default_factory=list)


class VisplaneSet:
    """Bounded collection of visplanes for one frame."""

    def __init__(
        self,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        capacity: int = MAXVISPLANES,
    ) -> None:
        self.width = width
        self.height = height
        self.capacity = capacity
        self._planes: List[Visplane] = []

    def clear(self) -> None:
        """Drop every plane."""
        self._planes.clear()

    def _new_plane(self, height: float, picnum: int, lightlevel: int, minx: int, maxx: int) -> Visplane:
        plane = Visplane(
            height=height,
            picnum=picnum,
            lightlevel=lightlevel,
            minx=minx,
            maxx=maxx,
            top=[0] * self.width,
            bottom=[self.height + 1] * self.width,
        )
        self._planes.append(plane)
        return plane

    def find(self, height: float, picnum: int, lightlevel: int) -> Optional[Visplane]:
        """Newest plane with these properties, or a fresh empty one; None when full."""
        for plane in reversed(self._planes):
            if plane.height == height and plane.picnum == picnum and plane.lightlevel == lightlevel:
                return plane
        if len(self._planes) >= self.capacity:
            return None
        return self._new_plane(height, picnum, lightlevel, self.width - 1, -1)

    def check(self, plane: Visplane, start: int, stop: int) -> Optional[Visplane]:
        """Extend ``plane`` to cover columns start..stop, or split off a new plane.

        A new plane is needed if any column in the overlap is already in use.
        Returns None when no new plane can be made.
        """
        if start < plane.minx:
            intrl, unionl = plane.minx, start
        else:
            intrl, unionl = start, plane.minx
        if stop > plane.maxx:
            intrh, unionh = plane.maxx, stop
        else:
            intrh, unionh = stop, plane.maxx

        unused = self.height + 1
        if all(plane.bottom[x] == unused for x in range(intrl, intrh + 1)):
            plane.minx = unionl
            plane.maxx = unionh
            return plane
        if len(self._planes) >= self.capacity:
            return None
        return self._new_plane(plane.height, plane.picnum, plane.lightlevel, start, stop)

    def __iter__(self) -> Iterator[Visplane]:
        return iter(list(self._planes))

    def __len__(self) -> int:
        return len(self._planes)


class PlaneRenderer:
    """Draws visplanes as horizontal, perspective-textured spans."""

    def __init__(self, context: RenderContext) -> None:
        self.context = context
        fb = context.framebuffer
        half = fb.height / 2.0
        self.yslope = [
            (fb.height * VFOV) / (y - half) if y != half else _HORIZON_SLOPE
            for y in range(fb.height)
        ]
        self.yslope[fb.height // 2] = _HORIZON_SLOPE
        self.xtoangle = [
            (2 * HFOV * math.atan((-2 * x) / fb.width + 1)) / PI for x in range(fb.width)
        ]
        self._span_start = [0] * (fb.height + 2)

    def draw(self, planes: VisplaneSet, player: "Player") -> None:
        """Draw every non-empty plane."""
        rows = self.context.framebuffer.height
        for plane in planes:
            if plane.minx > plane.maxx:
                continue
            top, bottom = plane.top, plane.bottom
            self._make_spans(plane.minx, 0, rows + 1, top[plane.minx], bottom[plane.minx], plane, player)
            for x in range(plane.minx, plane.maxx):
                self._make_spans(x, top[x], bottom[x], top[x + 1], bottom[x + 1], plane, player)
            self._make_spans(plane.maxx, top[plane.maxx], bottom[plane.maxx], 0, rows + 1, plane, player)

    def _make_spans(
        self, x: int, t1: int, b1: int, t2: int, b2: int, plane: Visplane, player: "Player"
    ) -> None:
        # finish rows that end in this column
        while t1 > t2 and t1 >= b1:
            self.map_plane(t1, self._span_start[t1], x, plane, player)
            t1 -= 1
        while b1 < b2 and b1 <= t1:
            self.map_plane(b1, self._span_start[b1], x, plane, player)
            b1 += 1
        # start rows that begin in the next column
        while t2 > t1 and t2 >= b2:
            self._span_start[t2] = x
            t2 -= 1
        while b2 < b1 and b2 <= t2:
            self._span_start[b2] = x
            b2 += 1

    def map_plane(self, y: int, x1: int, x2: int, plane: Visplane, player: "Player") -> None:
        """Draw row ``y`` of a plane from column x1 to x2 inclusive."""
        fb = self.context.framebuffer
        if not 0 <= y < fb.height or not 0 <= x1 < fb.width:
            return
        tex = self.context.textures[plane.picnum]
        factor_x = tex.width / PLANE_TEXTURE_SCALE
        factor_y = tex.height / PLANE_TEXTURE_SCALE

        angle = self.xtoangle[x1]
        distance = abs((player.z - plane.height) * self.yslope[y])
        xt = -math.sin(angle) * distance / math.cos(angle)
        yt = math.cos(angle) * distance / math.cos(angle)
        point = camera_to_world(Vec2(xt, yt), player.pos, player.anglesin, player.anglecos)
        px = point.x * factor_x
        py = point.y * factor_y

        step = distance / (fb.width // 2)
        xstep = step * math.cos(player.angle - PI_2) * factor_x
        ystep = step * math.sin(player.angle - PI_2) * factor_y
        shade = calculate_shade(distance, plane.lightlevel)

        mask = tex.width - 1
        texels = len(tex.indices)
        for x in range(x1, min(x2, fb.width - 1) + 1):
            tx = int(px) & mask
            ty = int(py) & mask
            index = tex.indices[((tex.height - 1 - ty) * tex.width + tx) % texels]
            self.context.put_shaded(x, y, index, shade)
            fb.depth[y * fb.width + x] = distance
            px += xstep
            py += ystep