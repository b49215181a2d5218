"""Game state, the fixed-step update loop and the window front end."""

from __future__ import annotations

import argparse
import sys
from array import array
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

import pygame

from .constants import EYEHEIGHT, MS_PER_UPDATE, PI_2, PLAYER_ROTATION_SPEED
from .entity import (
    Entity,
    EntityType,
    calculate_relative_camera_positions,
    check_collisions,
)
from .entityhandler import EntityHandler
from .geometry import Vec2
from .platforms import PlatformManager, PlatType
from .player import Key, Player
from .raster import Framebuffer, RenderContext
from .renderer import Renderer
from .textures import TEXTURE_FILES, IndexTexture, Palette, create_lightmap, load_textures
from .ticker import TickerList
from .world import World

_START_POS = Vec2(100.0, 40.0)
_ITEM_POS = Vec2(35.0, 29.0)
_ITEM_SPRITE = 6

_KEYMAP = {
    pygame.K_w: Key.W,
    pygame.K_a: Key.A,
    pygame.K_s: Key.S,
    pygame.K_d: Key.D,
    pygame.K_e: Key.E,
    pygame.K_r: Key.R,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_LSHIFT: Key.LSHIFT,
}


class Game:
    """Everything that makes up one running level."""

    def __init__(self, world: World, palette: Palette, textures: Iterable[IndexTexture]) -> None:
        self.world = world
        self.tickers = TickerList()
        self.framebuffer = Framebuffer()
        self.context = RenderContext(self.framebuffer, palette, list(textures))
        self.renderer = Renderer(self.context)
        self.handler = EntityHandler(self.tickers)
        self.platforms = PlatformManager(world, self.tickers)
        self.keys: Set[Key] = set()

        start = world.sector(0)
        self.player = Player(
            world=world,
            platforms=self.platforms,
            pos=_START_POS,
            z=EYEHEIGHT + start.zfloor,
            angle=PI_2,
            sector=0,
        )

        item = Entity(
            type=EntityType.ITEM,
            pos=_ITEM_POS,
            z=5.0,
            world=world,
            sprites=[_ITEM_SPRITE],
            scale=Vec2(4.0, 4.0),
            speed=10.0,
            sector=0,
        )
        self.tickers.add(item)
        self.handler.add(item)

        self.platforms.create(2, PlatType.INFINITE_UP_DOWN, False, 0, 0.0)

    def update(self) -> None:
        """Advance the game by one fixed step."""
        self.world.sort_walls(self.player.pos)
        self.player.tick(self.keys, self.handler)
        calculate_relative_camera_positions(self.handler, self.player)
        self.tickers.run()
        check_collisions(self.handler, self.player)
        self.handler.remove_dirty()

    def render(self) -> Framebuffer:
        """Draw a frame and return the framebuffer holding it."""
        self.framebuffer.clear()
        self.renderer.draw_3d(self.player, self.handler)
        self.renderer.draw_2d()
        return self.framebuffer

    def handle_mouse_motion(self, dx: float) -> None:
        """Turn the player by a horizontal mouse movement."""
        self.player.set_angle(self.player.angle - dx * PLAYER_ROTATION_SPEED)

    def press(self, key: Key) -> None:
        self.keys.add(key)

    def release(self, key: Key) -> None:
        self.keys.discard(key)


def _present(screen: "pygame.Surface", framebuffer: Framebuffer) -> None:
    data = array("I", framebuffer.pixels)
    if sys.byteorder == "little":
        data.byteswap()
    size = (framebuffer.width, framebuffer.height)
    surface = pygame.image.frombuffer(data.tobytes(), size, "ARGB")
    screen.blit(pygame.transform.flip(surface, False, True), (0, 0))
    pygame.display.flip()


def run(level_path: Union[str, Path], asset_dir: Union[str, Path]) -> None:
    """Load a level and its textures and play it in a window until it is closed."""
    world = World.load(level_path)
    palette = create_lightmap()
    paths: List[Path] = [Path(asset_dir) / name for name in TEXTURE_FILES]
    game = Game(world, palette, load_textures(paths, palette))

    pygame.init()
    try:
        fb = game.framebuffer
        screen = pygame.display.set_mode((fb.width, fb.height))
        pygame.display.set_caption("sectorcaster")
        pygame.event.set_grab(True)
        pygame.mouse.set_visible(False)

        accumulated = 0.0
        previous = pygame.time.get_ticks()
        last_render = previous
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEMOTION:
                    game.handle_mouse_motion(event.rel[0])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    game.player.shoot = True
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    key = _KEYMAP.get(event.key)
                    if key is None:
                        continue
                    if event.type == pygame.KEYDOWN:
                        game.press(key)
                    else:
                        game.release(key)
            if not running:
                break

            now = pygame.time.get_ticks()
            accumulated += now - previous
            previous = now
            if accumulated >= MS_PER_UPDATE:
                while accumulated > MS_PER_UPDATE:
                    game.update()
                    accumulated -= MS_PER_UPDATE
                _present(screen, game.render())
                elapsed = now - last_render
                last_render = now
                if elapsed > 0:
                    print(f"FPS: {1000.0 / elapsed:f}")
    finally:
        pygame.quit()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="sectorcaster", description="Play a sector-based level.")
    parser.add_argument("--level", default="Levels/save.txt", help="level data file")
    parser.add_argument("--assets", default="Assets", help="directory holding the textures")
    args = parser.parse_args(argv)
    run(args.level, args.assets)
    return 0