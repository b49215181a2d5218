import pytest

from sectorcaster.entity import Entity, EntityType, calculate_relative_camera_positions
from sectorcaster.entityhandler import EntityHandler
from sectorcaster.geometry import Vec2
from sectorcaster.player import Player
from sectorcaster.raster import Framebuffer, RenderContext
from sectorcaster.shading import calculate_shade
from sectorcaster.sprites import draw_sprites
from sectorcaster.textures import IndexTexture, create_lightmap
from sectorcaster.ticker import TickerList
from sectorcaster.world import Sector, World

SPRITE_INDEX = 5
LIGHT = 255


@pytest.fixture
def scene():
    world = World(
        sectors=[Sector(id=0, index=0, num_walls=0, zfloor=0.0, zceil=20.0, lightlevel=LIGHT)]
    )
    player = Player(world=world)
    handler = EntityHandler(TickerList())
    texture = IndexTexture(width=4, height=4, indices=bytes([SPRITE_INDEX]) * 16)
    context = RenderContext(Framebuffer(64, 48), create_lightmap(), [texture])
    return world, player, handler, context


def _add(handler, player, entity_type, pos):
    entity = Entity(
        type=entity_type, pos=pos, z=player.z, sprites=[0], scale=Vec2(4.0, 4.0), sector=0
    )
    handler.add(entity)
    calculate_relative_camera_positions(handler, player)
    return entity


def test_sprite_in_drawn_sector_is_visible(scene):
    _, player, handler, context = scene
    entity = _add(handler, player, EntityType.ITEM, Vec2(0.0, 10.0))
    draw_sprites(context, player, handler, {0})
    fb = context.framebuffer
    expected = context.palette.colors[SPRITE_INDEX][calculate_shade(entity.rel_cam_pos.y, LIGHT)]
    assert fb.get(32, 24) == expected
    assert fb.depth[24 * fb.width + 32] == pytest.approx(entity.rel_cam_pos.y)
    assert fb.get(0, 0) == 0


def test_sprite_in_undrawn_sector_is_hidden(scene):
    _, player, handler, context = scene
    _add(handler, player, EntityType.ITEM, Vec2(0.0, 10.0))
    draw_sprites(context, player, handler, set())
    assert set(context.framebuffer.pixels) == {0}


def test_sprite_behind_camera_is_hidden(scene):
    _, player, handler, context = scene
    _add(handler, player, EntityType.ITEM, Vec2(0.0, -10.0))
    draw_sprites(context, player, handler, {0})
    assert set(context.framebuffer.pixels) == {0}


def test_nearer_geometry_hides_sprite(scene):
    _, player, handler, context = scene
    _add(handler, player, EntityType.ITEM, Vec2(0.0, 10.0))
    fb = context.framebuffer
    for i in range(len(fb.depth)):
        fb.depth[i] = 5.0
    draw_sprites(context, player, handler, {0})
    assert set(fb.pixels) == {0}
    assert set(fb.depth) == {5.0}


def test_projectile_close_to_player_is_hidden(scene):
    _, player, handler, context = scene
    _add(handler, player, EntityType.PROJECTILE, Vec2(0.0, 3.0))
    draw_sprites(context, player, handler, {0})
    assert set(context.framebuffer.pixels) == {0}


def test_distant_projectile_is_drawn(scene):
    _, player, handler, context = scene
    entity = _add(handler, player, EntityType.PROJECTILE, Vec2(0.0, 10.0))
    draw_sprites(context, player, handler, {0})
    expected = context.palette.colors[SPRITE_INDEX][calculate_shade(entity.rel_cam_pos.y, LIGHT)]
    assert context.framebuffer.get(32, 24) == expected