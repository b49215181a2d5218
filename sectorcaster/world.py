"""Level geometry: sectors, walls, decals, level loading and ray casting."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

from .constants import SECONDS_PER_UPDATE, SECTOR_MAX, WALL_MAX, WALLTEXTURE
from .geometry import Vec2, line_intersection, point_side

if TYPE_CHECKING:
    from .platforms import PlatType

_NO_STEP_LOW = 10e10
_NO_STEP_HIGH = -10e10


class WallSection(enum.Enum):
    """Which part of a wall a point or decal belongs to."""

    WALL = 0
    PORTAL_LOWER = 1
    PORTAL_UPPER = 2
    NONE = 3


@dataclass
class Decal:
    """A texture stuck on a wall; ``wallpos`` is its bottom-left corner."""

    wall_type: WallSection
    tex_num: int
    wallpos: Vec2
    size: Vec2
    front: bool
    tag: int = 0
    tag_action: Optional["PlatType"] = None


@dataclass(eq=False)
class Sector:
    """A convex or concave room with a floor and a ceiling height."""

    id: int
    index: int
    num_walls: int
    zfloor: float
    zceil: float
    lightlevel: int = 0
    tag: int = 0
    zfloor_old: Optional[float] = None
    specialdata: Optional[object] = None

    def __post_init__(self) -> None:
        if self.zfloor_old is None:
            self.zfloor_old = self.zfloor


@dataclass(eq=False)
class Wall:
    """A wall segment from ``a`` to ``b``; ``portal`` is the sector behind it or -1."""

    a: Vec2
    b: Vec2
    portal: int = -1
    transparent: bool = False
    tex: int = WALLTEXTURE
    distance: float = 0.0
    decals: List[Decal] = field(default_factory=list)


@dataclass
class RaycastResult:
    """Outcome of a ray cast; ``wall_pos`` is relative to the wall's start."""

    hit: bool = False
    front: bool = False
    wall_pos: Vec2 = field(default_factory=Vec2)
    distance: float = 0.0
    wall: Optional[Wall] = None
    wall_sec: Optional[Sector] = None


def wall_section_at(wallpos: Vec2, wall: Wall, step_low: float, step_high: float) -> WallSection:
    """Classify a height on a wall as solid wall, lower or upper portal part."""
    if wall.portal == -1:
        return WallSection.WALL
    if step_low > wallpos.y:
        return WallSection.PORTAL_LOWER
    if step_high < wallpos.y:
        return WallSection.PORTAL_UPPER
    return WallSection.NONE


def move_sector_plane(sector: Sector, speed: float, dest: float, floor: bool, up: bool) -> bool:
    """Move a sector's floor or ceiling one update towards ``dest``; True once reached."""
    step = speed * SECONDS_PER_UPDATE * (1 if up else -1)
    attr = "zfloor" if floor else "zceil"
    new_height = getattr(sector, attr) + step
    reached = new_height > dest if up else new_height < dest
    setattr(sector, attr, dest if reached else new_height)
    return reached


@dataclass
class World:
    """All sectors and walls of a level."""

    sectors: List[Sector] = field(default_factory=list)
    walls: List[Wall] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> World:
        """Parse level data made of ``{S`` sector and ``{W`` wall sections."""
        world = cls()
        mode: Optional[str] = None
        for line in text.splitlines():
            stripped = line.lstrip()
            if not stripped or stripped.startswith("#"):
                continue
            if stripped.startswith("{"):
                marker = stripped[1:2]
                if marker == "S":
                    mode = "sector"
                    continue
                if marker == "W":
                    mode = "wall"
                    continue
                mode = None
            if mode == "sector":
                world._parse_sector(stripped)
            elif mode == "wall":
                world._parse_wall(stripped)
            else:
                break
        return world

    @classmethod
    def load(cls, path: Union[str, Path]) -> World:
        """Read a level file."""
        return cls.from_text(Path(path).read_text())

    def _parse_sector(self, line: str) -> None:
        fields = line.split()
        if len(fields) < 6:
            raise ValueError(f"malformed sector line: {line!r}")
        if len(self.sectors) >= SECTOR_MAX:
            raise ValueError("too many sectors")
        try:
            sector_id, num_walls = int(fields[0]), int(fields[1])
            zfloor, zceil = float(fields[2]), float(fields[3])
            lightlevel, tag = int(fields[4]), int(fields[5])
        except ValueError as exc:
            raise ValueError(f"malformed sector line: {line!r}") from exc
        if sector_id == 0 or not self.sectors:
            index = 0
        else:
            previous = self.sectors[-1]
            index = previous.index + previous.num_walls
        self.sectors.append(
            Sector(
                id=sector_id,
                index=index,
                num_walls=num_walls,
                zfloor=zfloor,
                zceil=zceil,
                lightlevel=lightlevel,
                tag=tag,
            )
        )

    def _parse_wall(self, line: str) -> None:
        fields = line.split()
        if len(fields) < 5:
            raise ValueError(f"malformed wall line: {line!r}")
        if len(self.walls) >= WALL_MAX:
            raise ValueError("too many walls")
        try:
            ax, ay, bx, by = (float(value) for value in fields[:4])
            portal = int(fields[4])
        except ValueError as exc:
            raise ValueError(f"malformed wall line: {line!r}") from exc
        self.walls.append(Wall(a=Vec2(ax, ay), b=Vec2(bx, by), portal=portal))

    def sector(self, index: int) -> Sector:
        """Sector at a list position."""
        if not 0 <= index < len(self.sectors):
            raise IndexError(f"no sector at index {index}")
        return self.sectors[index]

    def sector_by_id(self, sector_id: int) -> Optional[Sector]:
        """Sector carrying the given id, or None."""
        return next((s for s in self.sectors if s.id == sector_id), None)

    def walls_of(self, sector: Sector) -> List[Wall]:
        """Walls belonging to a sector, in their current order."""
        return self.walls[sector.index : sector.index + sector.num_walls]

    def point_inside_sector(self, sector_index: int, point: Vec2) -> bool:
        """True if the point lies on the inner side of every wall of the sector."""
        sector = self.sector(sector_index)
        return all(point_side(point, w.a, w.b) <= 0 for w in self.walls_of(sector))

    def sort_walls(self, cam_pos: Vec2) -> None:
        """Order each sector's walls from nearest to farthest from the camera."""
        for wall in self.walls:
            mid = Vec2((wall.a.x + wall.b.x) / 2.0, (wall.a.y + wall.b.y) / 2.0)
            delta = mid - cam_pos
            wall.distance = delta.x * delta.x + delta.y * delta.y
        for sector in self.sectors:
            start, end = sector.index, sector.index + sector.num_walls
            self.walls[start:end] = sorted(self.walls[start:end], key=lambda w: w.distance)

    def _steps(self, wall: Wall) -> tuple:
        if wall.portal >= 0:
            neighbour = self.sector(wall.portal)
            return neighbour.zfloor, neighbour.zceil
        return _NO_STEP_LOW, _NO_STEP_HIGH

    def spawn_decal(
        self, wallpos: Vec2, wall: Wall, size: Vec2, tex_id: int, front: bool
    ) -> Optional[Decal]:
        """Attach a decal centred on ``wallpos``; None where the wall is open."""
        step_low, step_high = self._steps(wall)
        section = wall_section_at(wallpos, wall, step_low, step_high)
        if section is WallSection.NONE:
            return None
        if section is WallSection.WALL:
            height = wallpos.y
        elif section is WallSection.PORTAL_LOWER:
            height = wallpos.y - step_low
        else:
            height = wallpos.y - step_high
        decal = Decal(
            wall_type=section,
            tex_num=tex_id,
            wallpos=Vec2(wallpos.x - size.x / 2.0, height - size.y / 2.0),
            size=size,
            front=front,
        )
        wall.decals.append(decal)
        return decal

    def decal_wall_height(self, decal: Decal, wall: Wall, floor_z: float) -> float:
        """Height of a decal's bottom relative to the current sector floor."""
        if decal.wall_type is WallSection.WALL:
            return decal.wallpos.y - floor_z
        if decal.wall_type is WallSection.PORTAL_LOWER:
            return decal.wallpos.y + self.sector(wall.portal).zfloor - floor_z
        if decal.wall_type is WallSection.PORTAL_UPPER:
            return decal.wallpos.y + self.sector(wall.portal).zceil
        return 0.0

    def raycast(self, sector: Sector, pos: Vec2, target: Vec2, z: float) -> RaycastResult:
        """Cast a horizontal ray at height ``z``, following portals it fits through."""
        if sector.zceil < z or sector.zfloor > z:
            return RaycastResult()
        i = sector.index
        while i < sector.index + sector.num_walls:
            wall = self.walls[i]
            i += 1
            front = point_side(pos, wall.a, wall.b) < 0
            hit_point = line_intersection(pos, target, wall.a, wall.b)
            if hit_point is None or wall.transparent:
                continue
            if wall.portal >= 0:
                neighbour = self.sector(wall.portal)
                if neighbour.zfloor <= z <= neighbour.zceil:
                    if point_side(target, wall.a, wall.b) > 0:
                        sector = neighbour
                        i = sector.index + 1
                        pos = hit_point
                    continue
            return RaycastResult(
                hit=True,
                front=front,
                wall_pos=hit_point - wall.a,
                distance=(hit_point - pos).length(),
                wall=wall,
                wall_sec=sector,
            )
        return RaycastResult()