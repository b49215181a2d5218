"""Engine-wide constants and colour helpers."""

PI = 3.14159265359
PI_2 = 1.57079632679
PI_4 = 0.78539816339

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720

EYEHEIGHT = 6.0
SNEAKHEIGHT = 4.5
HEADMARGIN = 1.0
STEPHEIGHT = 2.0
PLAYERSPEED = 25.0
PLAYERSNEAKSPEED = 10.0

HFOV = PI_2
VFOV = 1.0
LIGHTDIMINISHINGDFACTOR = 0.1
PLAYER_ROTATION_SPEED = 0.001

ZNEAR = 0.0
ZFAR = 32768.0

SECTOR_MAX = 256
WALL_MAX = 2048
MAXVISPLANES = 4096

MAXPLATFORMS = 100

SCREEN_FPS = 240
MS_PER_UPDATE = 10.0
SECONDS_PER_UPDATE = MS_PER_UPDATE / 1000

RED = 0xFFFF0000
GREEN = 0xFF00FF00
BLUE = 0xFF0000FF
YELLOW = 0xFFE9FA34
PURPLE = 0xFFCD22F0
BLACK = 0xFF000000
ORANGE = 0xFFD19617
LIGHTGRAY = 0xFF757575
DARKGRAY = 0xFF424242
WHITE = 0xFFFFFFFF

LIGHTING = 0

GRAVITY = 80.0

WALLTEXTURE = 7
FLOORTEXTURE = 5
CEILTEXTURE = 7


def alpha(color: int) -> int:
    """Alpha channel of a packed ARGB colour."""
    return (color >> 24) & 0xFF


def red(color: int) -> int:
    """Red channel of a packed ARGB colour."""
    return (color >> 16) & 0xFF


def green(color: int) -> int:
    """Green channel of a packed ARGB colour."""
    return (color >> 8) & 0xFF


def blue(color: int) -> int:
    """Blue channel of a packed ARGB colour."""
    return color & 0xFF