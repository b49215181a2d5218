import math

import pytest

from sectorcaster.constants import GREEN, RED, WHITE, ZFAR
from sectorcaster.raster import Framebuffer, RenderContext
from sectorcaster.textures import create_lightmap


def lit(fb):
    return {
        (x, y)
        for y in range(fb.height)
        for x in range(fb.width)
        if fb.get(x, y)
    }


def test_put_and_get():
    fb = Framebuffer(8, 6)
    fb.put(3, 2, RED)
    assert fb.get(3, 2) == RED
    assert lit(fb) == {(3, 2)}


def test_put_outside_is_ignored():
    fb = Framebuffer(4, 4)
    fb.put(-1, 0, RED)
    fb.put(0, 4, RED)
    assert lit(fb) == set()


def test_get_outside_raises():
    fb = Framebuffer(4, 4)
    with pytest.raises(IndexError):
        fb.get(4, 0)


def test_invalid_size():
    with pytest.raises(ValueError):
        Framebuffer(0, 3)


def test_clear():
    fb = Framebuffer(4, 4)
    fb.fill_rectangle(0, 0, 4, 4, WHITE)
    fb.clear()
    assert lit(fb) == set()


def test_reset_depth():
    fb = Framebuffer(3, 3)
    fb.depth[4] = 1.5
    fb.reset_depth()
    assert all(d == ZFAR for d in fb.depth)
    assert len(fb.depth) == 9


def test_vertical_line_swapped_ends():
    fb = Framebuffer(5, 10)
    fb.vertical_line(2, 7, 3, GREEN)
    assert lit(fb) == {(2, y) for y in range(3, 8)}


@pytest.mark.parametrize("end", [(9, 3), (2, 9), (0, 0), (9, 9), (5, 0)])
def test_line_endpoints_and_length(end):
    fb = Framebuffer(10, 10)
    x0, y0 = 0, 5
    x1, y1 = end
    fb.line(x0, y0, x1, y1, WHITE)
    points = lit(fb)
    assert (x0, y0) in points and (x1, y1) in points
    assert len(points) == max(abs(x1 - x0), abs(y1 - y0)) + 1


def test_line_is_symmetric():
    a = Framebuffer(10, 10)
    a.line(1, 1, 8, 1, WHITE)
    b = Framebuffer(10, 10)
    b.line(8, 1, 1, 1, WHITE)
    assert lit(a) == lit(b)


def test_fill_rectangle_any_corner_order():
    a = Framebuffer(10, 10)
    a.fill_rectangle(1, 2, 5, 7, WHITE)
    b = Framebuffer(10, 10)
    b.fill_rectangle(5, 7, 1, 2, WHITE)
    assert lit(a) == lit(b)
    assert len(lit(a)) == (5 - 1) * (7 - 2)


def test_fill_square():
    fb = Framebuffer(10, 10)
    fb.fill_square(2, 3, 4, WHITE)
    assert lit(fb) == {(x, y) for x in range(2, 6) for y in range(3, 7)}


def test_square_outline():
    fb = Framebuffer(10, 10)
    fb.square(1, 1, 4, WHITE)
    points = lit(fb)
    assert (1, 1) in points and (5, 1) in points and (1, 5) in points
    assert (3, 3) not in points
    assert all(x in (1, 5) or y in (1, 5) for x, y in points)


def test_ellipse_zero_draws_nothing():
    fb = Framebuffer(10, 10)
    fb.ellipse(5, 5, 0, 0, WHITE)
    assert lit(fb) == set()


def test_ellipse_is_symmetric_and_near_curve():
    fb = Framebuffer(30, 30)
    cx, cy, a, b = 15, 15, 8, 5
    fb.ellipse(cx, cy, a, b, WHITE)
    points = lit(fb)
    assert (cx + a, cy) in points and (cx, cy + b) in points
    for x, y in points:
        assert (2 * cx - x, y) in points
        assert (x, 2 * cy - y) in points
        value = ((x - cx) / a) ** 2 + ((y - cy) / b) ** 2
        assert math.isclose(value, 1.0, abs_tol=0.5)


def test_put_shaded_uses_palette():
    palette = create_lightmap()
    ctx = RenderContext(Framebuffer(4, 4), palette)
    ctx.put_shaded(1, 1, 216, 3)
    assert ctx.framebuffer.get(1, 1) == palette.colors[216][3]