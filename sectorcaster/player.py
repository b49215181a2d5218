"""The player: input handling, movement, shooting and interaction."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, MutableSet, Optional, Tuple

from .constants import (
    EYEHEIGHT,
    GRAVITY,
    HEADMARGIN,
    PI_2,
    PLAYERSNEAKSPEED,
    PLAYERSPEED,
    SECONDS_PER_UPDATE,
    SNEAKHEIGHT,
    STEPHEIGHT,
)
from .entity import create_bullet
from .geometry import Vec2, Vec3, line_intersection, point_side
from .world import Wall, World

if TYPE_CHECKING:
    from .entityhandler import EntityHandler
    from .platforms import PlatformManager

_NO_STEP_LOW = 10e10
_NO_STEP_HIGH = -10e10
_RESPAWN = Vec2(25.0, 20.0)
_RAY_LENGTH = 1000.0
_INTERACT_RANGE = 15.0


class Key(enum.Enum):
    W = "w"
    A = "a"
    S = "s"
    D = "d"
    E = "e"
    R = "r"
    SPACE = "space"
    LSHIFT = "lshift"


def _portal_steps(world: World, wall: Wall) -> Tuple[float, float]:
    if wall.portal >= 0:
        neighbour = world.sector(wall.portal)
        return neighbour.zfloor, neighbour.zceil
    return _NO_STEP_LOW, _NO_STEP_HIGH


@dataclass(eq=False)
class Player:
    """Camera and body of the player."""

    world: World = field(repr=False)
    platforms: Optional["PlatformManager"] = field(default=None, repr=False)
    pos: Vec2 = field(default_factory=Vec2)
    z: float = EYEHEIGHT
    velocity: Vec3 = field(default_factory=Vec3)
    angle: float = PI_2
    speed: float = PLAYERSPEED
    sector: int = 0
    shoot: bool = False
    airborne: bool = False
    dead: bool = False
    sneak: bool = False
    weapon: int = 0
    anglecos: float = field(init=False, default=0.0)
    anglesin: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.set_angle(self.angle)

    def set_angle(self, angle: float) -> None:
        """Turn the player and refresh the cached sine and cosine."""
        self.angle = angle
        self.anglecos = math.cos(angle)
        self.anglesin = math.sin(angle)

    def tick(self, keys: MutableSet[Key], handler: "EntityHandler") -> None:
        """One game update; consumes the one-shot keys E and R."""
        if Key.E in keys:
            self.interact()
            keys.discard(Key.E)

        self.sneak = Key.LSHIFT in keys
        self.speed = PLAYERSNEAKSPEED if self.sneak else PLAYERSPEED

        self.compute_velocity(keys)
        self.try_move()
        self.check_shoot(handler)

        if Key.R in keys or self.dead:
            self.pos = _RESPAWN
            self.z = EYEHEIGHT
            self.sector = 0
            keys.discard(Key.R)
            self.dead = False

    def compute_velocity(self, keys: MutableSet[Key]) -> None:
        """Update velocity from movement keys and jumping."""
        movespeed = self.speed * SECONDS_PER_UPDATE
        if Key.SPACE in keys and not self.airborne:
            self.airborne = True
            self.velocity.z = 30.0

        dx = dy = 0.0
        if Key.W in keys:
            dx += self.anglecos
            dy += self.anglesin
        if Key.S in keys:
            dx -= self.anglecos
            dy -= self.anglesin
        if Key.A in keys:
            dx -= self.anglesin
            dy += self.anglecos
        if Key.D in keys:
            dx += self.anglesin
            dy -= self.anglecos

        moved = any(k in keys for k in (Key.W, Key.S, Key.A, Key.D))
        acceleration = 0.4 if moved else 0.3
        self.velocity.x = self.velocity.x * (1 - acceleration) + dx * acceleration * movespeed
        self.velocity.y = self.velocity.y * (1 - acceleration) + dy * acceleration * movespeed

    def check_shoot(self, handler: "EntityHandler") -> None:
        """Fire the current weapon if a shot was requested."""
        if not self.shoot:
            return
        self.shoot = False
        if self.weapon == 0:
            bullet = create_bullet(
                self.world,
                handler.tickers,
                self.pos,
                self.z,
                Vec2(self.anglecos, self.anglesin),
                80.0,
                Vec2(2.0, 2.0),
                self.sector,
                None,
                2.0,
                6,
            )
            handler.add(bullet)
        elif self.weapon == 1:
            result = self.world.raycast(
                self.world.sector(self.sector), self.pos, self._aim_point(), self.z
            )
            if result.hit and result.wall is not None:
                wallpos = Vec2(result.wall_pos.length(), self.z)
                self.world.spawn_decal(wallpos, result.wall, Vec2(2.0, 2.0), 6, result.front)

    def _aim_point(self) -> Vec2:
        return Vec2(
            self.pos.x + self.anglecos * _RAY_LENGTH,
            self.pos.y + self.anglesin * _RAY_LENGTH,
        )

    def interact(self) -> None:
        """Press a tagged decal in front of the player, starting its platforms."""
        current = self.world.sector(self.sector)
        result = self.world.raycast(current, self.pos, self._aim_point(), self.z)
        if not result.hit or result.wall is None:
            return
        if result.distance > _INTERACT_RANGE:
            return
        along = result.wall_pos.length()
        for decal in list(result.wall.decals):
            inside = (
                decal.wallpos.x < along < decal.wallpos.x + decal.size.x
                and decal.wallpos.y < self.z < decal.wallpos.y + decal.size.y
            )
            if inside and self.platforms is not None and decal.tag_action is not None:
                self.platforms.create(decal.tag, decal.tag_action, True, 0, 0.0)

    def try_move(self) -> None:
        """Apply gravity and velocity with floor, ceiling, wall and portal collision."""
        world = self.world
        gravity = -GRAVITY * SECONDS_PER_UPDATE
        current = world.sector(self.sector)
        eye = SNEAKHEIGHT if self.sneak else EYEHEIGHT

        if current.zfloor < self.z - eye and not self.airborne:
            self.z = eye + current.zfloor
        elif current.zfloor > self.z - eye:
            self.z = eye + current.zfloor
        if current.zceil < self.z + HEADMARGIN:
            self.z = current.zceil - HEADMARGIN
        if current.zceil - current.zfloor < eye + HEADMARGIN:
            self.dead = True
            return

        if self.airborne:
            self.velocity.z += gravity
            dvel = self.velocity.z * SECONDS_PER_UPDATE
            if self.velocity.z < 0 and self.z + dvel < current.zfloor + eye:
                self.velocity.z = 0.0
                self.airborne = False
                self.z = current.zfloor + eye
            elif self.velocity.z > 0 and self.z + dvel > current.zceil - HEADMARGIN:
                self.velocity.z = 0.0
                self.z = current.zceil - HEADMARGIN
            else:
                self.z += dvel

        collided = False
        saved = (self.pos, self.z, Vec3(self.velocity.x, self.velocity.y, self.velocity.z),
                 self.sector, self.airborne)
        for _ in range(3):
            for wall in world.walls_of(current):
                step = Vec2(self.velocity.x, self.velocity.y)
                if line_intersection(self.pos, self.pos + step, wall.a, wall.b) is None:
                    continue
                step_low, step_high = _portal_steps(world, wall)
                blocked = (
                    step_low > self.z - eye + STEPHEIGHT
                    or step_high < self.z + HEADMARGIN
                    or step_high - step_low < eye + HEADMARGIN
                    or (self.sneak and not self.airborne and current.zfloor - step_low > 0.0)
                )
                if blocked:
                    if collided:
                        self.pos, self.z, velocity, self.sector, self.airborne = saved
                        self.velocity = Vec3(0.0, 0.0, velocity.z)
                        break
                    normal = Vec2(wall.b.x - wall.a.x, wall.b.y - wall.a.y).normalize()
                    nx, ny = -normal.y, normal.x
                    dot = self.velocity.x * nx + self.velocity.y * ny
                    self.velocity.x -= dot * nx
                    self.velocity.y -= dot * ny
                    collided = True
                elif wall.portal >= 0 and point_side(self.pos + step, wall.a, wall.b) > 0:
                    collided = True
                    current = world.sector(wall.portal)
                    self.sector = current.id
                    if self.z < eye + current.zfloor:
                        self.z = eye + current.zfloor
                    elif self.z > eye + current.zfloor:
                        self.airborne = True
                    break

        self.pos = Vec2(self.pos.x + self.velocity.x, self.pos.y + self.velocity.y)