import pytest

from sectorcaster.constants import (
    BLACK,
    BLUE,
    GREEN,
    RED,
    WHITE,
    alpha,
    blue,
    green,
    red,
)


@pytest.mark.parametrize(
    "a, r, g, b",
    [(0, 0, 0, 0), (255, 1, 2, 3), (17, 200, 100, 50), (128, 255, 0, 255)],
)
def test_channels_round_trip(a, r, g, b):
    color = (a << 24) | (r << 16) | (g << 8) | b
    assert (alpha(color), red(color), green(color), blue(color)) == (a, r, g, b)


def test_primary_colours_have_single_channel():
    assert (red(RED), green(RED), blue(RED)) == (red(WHITE), 0, 0)
    assert (red(GREEN), green(GREEN), blue(GREEN)) == (0, green(WHITE), 0)
    assert (red(BLUE), green(BLUE), blue(BLUE)) == (0, 0, blue(WHITE))


def test_black_is_opaque_with_no_colour():
    assert alpha(BLACK) == alpha(WHITE)
    assert red(BLACK) + green(BLACK) + blue(BLACK) == 0


def test_channels_ignore_bits_above_32():
    color = (1 << 40) | (7 << 24) | (9 << 16)
    assert alpha(color) == 7
    assert red(color) == 9