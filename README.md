# sectorcaster

A sector-and-portal software renderer with a small first person shooter on top
of it. A level is made of sectors joined by portal walls. Walls are drawn
column by column, sector by sector through the portals; floors and ceilings
are collected as visplanes and drawn as horizontal spans; sprites are
depth-tested against the scene. Every pixel is shaded through a 256-colour,
32-shade lightmap according to distance and sector light level.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Playing

```
sectorcaster
```

By default the level is read from `Levels/save.txt` and the textures from the
`Assets/` directory, both relative to the working directory. Both can be
changed:

```
sectorcaster --level path/to/level.txt --assets path/to/textures
```

The texture directory must hold the nine files named in
`sectorcaster.textures.TEXTURE_FILES` (`test.bmp`, `blech.bmp`, `lever.bmp`,
`metalmesh.bmp`, `meteor.bmp`, `meteor_red.bmp`, `spritetest.bmp`,
`vein.bmp`, `zombie.bmp`); they are read with Pillow and matched to the
nearest palette colour. Fully transparent pixels become palette index 0 and
are not drawn on sprites and decals.

Controls:

- mouse: turn
- `W` `A` `S` `D`: move
- `Space`: jump
- left shift: sneak (lower eye height, slower, won't step down ledges)
- left mouse button: shoot a bullet, which leaves a decal where it hits a wall
- `E`: use a tagged decal on the wall in front of you, within 15 units
- `R`: go back to the respawn point

Closing the window ends the game. The frame rate is printed to standard
output after each frame; the game logic runs at a fixed 10 ms step.

## Level format

A level is plain text. Blank lines and lines starting with `#` are ignored.
A line starting with `{S` starts the sector block and one starting with `{W`
starts the wall block. Any other line starting with `{`, or a data line
outside both blocks, ends the level.

Each sector line holds:

```
id num_walls floor_height ceiling_height light_level tag
```

Each wall line holds:

```
ax ay bx by portal [front]
```

`portal` is the index of the sector behind the wall, or `-1` for a solid
wall; a trailing sixth field is accepted and ignored. The walls of a sector
follow one another in the wall block, in sector order. Malformed lines, more
than 256 sectors or more than 2048 walls raise `ValueError`.

## Using the engine from Python

```python
from pathlib import Path

from sectorcaster.game import Game
from sectorcaster.textures import TEXTURE_FILES, create_lightmap, load_textures
from sectorcaster.world import World

world = World.load("Levels/save.txt")
palette = create_lightmap()
textures = load_textures([Path("Assets") / name for name in TEXTURE_FILES], palette)
game = Game(world, palette, textures)

game.update()                 # one 10 ms game step
framebuffer = game.render()   # ARGB pixels in framebuffer.pixels, row by row
```

`Game` sets up the player at the start position, one bobbing item and a
floor-to-ceiling platform on the sectors tagged `2`. Input is fed in with
`Game.press`, `Game.release` (taking `sectorcaster.player.Key` values) and
`Game.handle_mouse_motion`.

The pieces can also be used on their own:

- `sectorcaster.geometry`: `Vec2`, `Vec3`, segment intersection, camera
  transforms and screen projection
- `sectorcaster.world`: `World` with level loading, wall sorting, ray casts
  and decals, plus `move_sector_plane`
- `sectorcaster.platforms`: `PlatformManager` and `Platform` for moving
  floors and ceilings (`PlatType.INFINITE_UP_DOWN`, `PlatType.RAISE_STAIRS`)
- `sectorcaster.ticker`: `TickerList`, the ordered list of things ticked each
  step
- `sectorcaster.entity` and `sectorcaster.entityhandler`: items, enemies,
  projectiles and their container
- `sectorcaster.player`: `Player` movement, collision, shooting and
  interaction
- `sectorcaster.textures`: the lightmap `Palette` and `IndexTexture`
- `sectorcaster.raster`: `Framebuffer` with pixel and depth buffers and
  line, rectangle, square and ellipse drawing
- `sectorcaster.renderer`: `Renderer`, which draws a full 3D frame and the
  crosshair

## What it does not do

There is no sound, no menu, no saving and no level editor. The game places
no enemies by itself: enemy behaviour exists in `sectorcaster.entity`, but
`Game` only spawns one item. Picking up an item removes it without giving the
player anything, and enemy projectiles do no harm. No decals carry tags
unless code sets `tag` and `tag_action` on them, so `E` only starts platforms
in levels set up that way from Python.