"""Items, enemies and projectiles living in the level."""

from __future__ import annotations

import enum
import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

from .constants import GRAVITY, HEADMARGIN, SECONDS_PER_UPDATE, STEPHEIGHT
from .geometry import (
    Vec2,
    Vec3,
    ease_in_out_cubic,
    line_intersection,
    point_side,
    world_to_camera,
)
from .ticker import TickerList
from .world import Wall, World

if TYPE_CHECKING:
    from .player import Player

_NO_STEP_LOW = 10e10
_NO_STEP_HIGH = -10e10

_ITEM_SPEED = 150.0 * SECONDS_PER_UPDATE
_ITEM_TICKS_TOTAL = 240
_ITEM_MAX_Z_OFFSET = 0.8

_DECAL_SIZE = Vec2(2.0, 2.0)
_DECAL_TEXTURE = 6

_WANDER_DIRECTIONS = {
    0: Vec2(0.0, 1.0),
    1: Vec2(0.707, 0.707),
    2: Vec2(1.0, 0.0),
    3: Vec2(0.707, -0.707),
    4: Vec2(0.0, -1.0),
    5: Vec2(-0.707, -0.707),
    6: Vec2(-1.0, 0.0),
    7: Vec2(-0.707, 0.707),
}


class EntityType(enum.Enum):
    ENEMY = 0
    ITEM = 1
    PROJECTILE = 2


@dataclass(eq=False)
class Entity:
    """Anything in the level that is not a wall or the player."""

    type: EntityType
    pos: Vec2 = field(default_factory=Vec2)
    z: float = 0.0
    world: Optional[World] = field(default=None, repr=False)
    rel_cam_pos: Vec2 = field(default_factory=Vec2)
    direction: Vec2 = field(default_factory=Vec2)
    velocity: Vec3 = field(default_factory=Vec3)
    sprites: List[int] = field(default_factory=list)
    scale: Vec2 = field(default_factory=Vec2)
    health: float = 0.0
    damage: float = 0.0
    speed: float = 0.0
    animation_tick: float = 0.0
    sector: int = 0
    airborne: bool = False
    target: Optional["Player"] = field(default=None, repr=False)
    dirty: bool = False
    rng: Any = field(default=None, repr=False)

    def _require_world(self) -> World:
        if self.world is None:
            raise RuntimeError("entity is not placed in a world")
        return self.world

    def tick(self) -> None:
        """Run the behaviour that belongs to this entity's type."""
        if self.type is EntityType.ITEM:
            tick_item(self)
        elif self.type is EntityType.ENEMY:
            tick_enemy(self, self.rng)
        else:
            tick_bullet(self)

    def try_move(self, gravity_active: bool) -> bool:
        """Apply velocity with wall, portal and (optionally) vertical collision.

        Returns True if a wall was hit.
        """
        world = self._require_world()
        current = world.sector(self.sector)

        if gravity_active and self.airborne:
            self.velocity.z += -GRAVITY
            dvel = self.velocity.z
            if self.velocity.z < 0 and self.z + dvel < current.zfloor + self.scale.y:
                self.velocity.z = 0.0
                self.airborne = False
                self.z = current.zfloor + self.scale.y
            elif self.velocity.z > 0 and self.z + dvel > current.zceil - HEADMARGIN:
                self.velocity.z = 0.0
                self.z = current.zceil - HEADMARGIN
            else:
                self.z += dvel

        hit = False
        i = current.index
        while i < current.index + current.num_walls:
            wall = world.walls[i]
            i += 1
            pos = self.pos
            step = Vec2(self.velocity.x, self.velocity.y)
            intersection = line_intersection(pos, pos + step, wall.a, wall.b)
            if intersection is None:
                continue
            step_low, step_high = _portal_steps(world, wall)
            if self.type is EntityType.PROJECTILE:
                along = (intersection - wall.a).length()
                front = point_side(pos, wall.a, wall.b) < 0
                decal = world.spawn_decal(
                    Vec2(along, self.z), wall, _DECAL_SIZE, _DECAL_TEXTURE, front
                )
                if decal is not None:
                    hit = True
                    break
            elif (
                step_low > self.z - self.scale.y + STEPHEIGHT
                or step_high < self.z + HEADMARGIN
            ):
                wx = wall.b.x - wall.a.x
                wy = wall.b.y - wall.a.y
                factor = (self.velocity.x * wx + self.velocity.y * wy) / (wx * wx + wy * wy)
                self.velocity.x = factor * wx
                self.velocity.y = factor * wy
                hit = True
                break

            if wall.portal >= 0 and point_side(pos + step, wall.a, wall.b) > 0:
                current = world.sector(wall.portal)
                self.sector = current.id
                i = current.index + 1
                if self.type is EntityType.PROJECTILE:
                    continue
                if self.z < self.scale.y + current.zfloor:
                    self.z = self.scale.y + current.zfloor
                elif self.z > self.scale.y + current.zfloor:
                    self.airborne = True

        self.pos = Vec2(self.pos.x + self.velocity.x, self.pos.y + self.velocity.y)
        return hit


def _portal_steps(world: World, wall: Wall) -> Tuple[float, float]:
    if wall.portal >= 0:
        neighbour = world.sector(wall.portal)
        return neighbour.zfloor, neighbour.zceil
    return _NO_STEP_LOW, _NO_STEP_HIGH


def tick_item(item: Entity) -> None:
    """Bob an item up and down."""
    half = _ITEM_TICKS_TOTAL // 2
    current = int(item.animation_tick)
    if current > half:
        current = _ITEM_TICKS_TOTAL - current
    progress = current / half
    item.z = int(item.z) + ease_in_out_cubic(progress) * _ITEM_MAX_Z_OFFSET
    item.animation_tick += _ITEM_SPEED
    if item.animation_tick > _ITEM_TICKS_TOTAL:
        item.animation_tick -= _ITEM_TICKS_TOTAL


def tick_enemy(enemy: Entity, rng: Any = None) -> None:
    """Chase the target when close, otherwise wander at random."""
    source = rng if rng is not None else random
    player = enemy.target
    direction = Vec2(0.0, 0.0)
    acceleration = 0.3
    movespeed = enemy.speed * SECONDS_PER_UPDATE
    chasing = False

    if player is not None and abs(enemy.z - player.z) < 10.0:
        dx = player.pos.x - enemy.pos.x
        dy = player.pos.y - enemy.pos.y
        distance = math.sqrt(dx * dx + dy * dy)
        if 0 < distance < 15.0:
            acceleration = 0.4
            chasing = True
            direction = Vec2(dx / distance, dy / distance)

    if not chasing:
        direction = _WANDER_DIRECTIONS.get(source.randrange(100), direction)

    keep = 1 - acceleration
    enemy.velocity.x = enemy.velocity.x * keep + direction.x * acceleration * movespeed
    enemy.velocity.y = enemy.velocity.y * keep + direction.y * acceleration * movespeed
    enemy.try_move(True)


def tick_bullet(bullet: Entity) -> None:
    """Fly straight; mark the bullet dirty on hitting a wall, floor or ceiling."""
    bullet.velocity.x = bullet.direction.x * bullet.speed * SECONDS_PER_UPDATE
    bullet.velocity.y = bullet.direction.y * bullet.speed * SECONDS_PER_UPDATE
    hit_wall = bullet.try_move(False)
    sector = bullet._require_world().sector(bullet.sector)
    if hit_wall or sector.zfloor > bullet.z or sector.zceil < bullet.z:
        bullet.dirty = True


def calculate_relative_camera_positions(handler: Iterable[Entity], player: "Player") -> None:
    """Store each entity's position in the player's camera space."""
    for entity in handler:
        entity.rel_cam_pos = world_to_camera(
            entity.pos, player.pos, player.anglesin, player.anglecos
        )


def check_collisions(handler: Iterable[Entity], player: "Player") -> None:
    """Resolve projectile hits on enemies and item pickups."""
    entities = list(handler)
    for entity in entities:
        if entity.dirty:
            continue
        if entity.type is EntityType.PROJECTILE:
            if entity.target is not None:
                continue
            for target in entities:
                if target.dirty or target.type is not EntityType.ENEMY:
                    continue
                if entity.z - target.z >= 10.0:
                    continue
                dx = target.pos.x - entity.pos.x
                dy = target.pos.y - entity.pos.y
                if math.sqrt(dx * dx + dy * dy) < target.scale.x / 2.0:
                    target.health -= entity.damage
                    if target.health <= 0:
                        target.dirty = True
                    entity.dirty = True
        elif entity.type is EntityType.ITEM:
            rel = entity.rel_cam_pos
            reach = rel.x * rel.x + rel.y + rel.y
            if reach >= 0 and math.sqrt(reach) < 3.0:
                entity.dirty = True


def create_bullet(
    world: World,
    tickers: TickerList,
    pos: Vec2,
    z: float,
    direction: Vec2,
    speed: float,
    scale: Vec2,
    sector: int,
    target: Optional["Player"],
    damage: float,
    texture: int,
) -> Entity:
    """Create a projectile and register it with the tickers."""
    bullet = Entity(
        type=EntityType.PROJECTILE,
        pos=pos,
        z=z,
        world=world,
        direction=direction,
        velocity=Vec3(),
        sprites=[texture],
        scale=scale,
        damage=damage,
        speed=speed,
        sector=sector,
        target=target,
    )
    tickers.add(bullet)
    return bullet