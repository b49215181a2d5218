import math

import pytest

from sectorcaster.shading import (
    MAX_SHADE,
    calculate_shade,
    tex_low_high_and_step,
    tex_start_and_step,
    tex_start_and_step_abs,
)


def test_brightest_shade():
    assert calculate_shade(0.0, 255) == 0


def test_darkest_shade_is_capped():
    assert calculate_shade(200.0, 0) == MAX_SHADE


def test_distance_is_clamped():
    assert calculate_shade(500.0, 128) == calculate_shade(200.0, 128)
    assert calculate_shade(-20.0, 128) == calculate_shade(0.0, 128)


def test_shade_grows_with_distance():
    shades = [calculate_shade(d, 200) for d in range(0, 220, 10)]
    assert shades == sorted(shades)
    assert all(0 <= s <= MAX_SHADE for s in shades)


def test_shade_falls_with_light():
    shades = [calculate_shade(50.0, light) for light in range(0, 256, 15)]
    assert shades == sorted(shades, reverse=True)


@pytest.mark.parametrize("low,high", [(10, 50), (20, 40), (0, 100)])
def test_tex_start_and_step_consistent(low, high):
    t0, t1, step = tex_start_and_step(0, 100, low, high, 64, 2.0)
    assert math.isclose(t0 + step * (high - low), t1, abs_tol=1e-9)


def test_tex_start_and_step_full_range():
    t0, t1, _ = tex_start_and_step(10, 90, 10, 90, 64, 1.0)
    assert t0 == 63.0
    assert t1 == 0.0


def test_tex_start_and_step_empty_range_has_no_number_step():
    t0, t1, step = tex_start_and_step(0, 10, 5, 5, 16, 1.0)
    assert t0 == t1
    assert math.isnan(step)


def test_tex_low_high_step_covers_texture():
    _, _, step = tex_low_high_and_step(20, 60, 20, 60, 32, 1.5)
    assert math.isclose(step * (60 - 20), -32 * 1.5)


def test_tex_low_high_unclipped_starts():
    start_low, start_high, step = tex_low_high_and_step(0, 40, 0, 40, 16, 1.0)
    assert start_low == -1.0
    assert math.isclose(start_high, -step * 40 - 1)


def test_tex_start_and_step_abs():
    start, step = tex_start_and_step_abs(10, 20, 60, 10, 60, 32, 2.0)
    assert start == -2.0
    assert math.isclose(step * (60 - 10), -32 * 2.0)


def test_tex_start_and_step_abs_clipped_start_follows_step():
    start_clipped, step = tex_start_and_step_abs(0, 0, 50, 10, 50, 16, 1.0)
    start_full, _ = tex_start_and_step_abs(0, 0, 50, 0, 50, 16, 1.0)
    assert math.isclose(start_clipped, start_full + 10 * step)