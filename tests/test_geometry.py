import math

import pytest

from sectorcaster.constants import HFOV, PI_2, SCREEN_WIDTH
from sectorcaster.geometry import (
    Vec2,
    Vec3,
    camera_to_world,
    clamp,
    ease_in_out_cubic,
    line_intersection,
    point_side,
    screen_angle_to_x,
    screen_x_to_angle,
    world_to_camera,
)


def test_add_sub_round_trip():
    a = Vec2(1.5, -2.0)
    b = Vec2(3.25, 7.0)
    assert (a + b) - b == a


def test_mul_scales_length():
    v = Vec2(3.0, 4.0)
    assert (v * 2.0).length() == pytest.approx(2.0 * v.length())


def test_normalize_gives_unit_length():
    v = Vec2(-7.0, 2.5).normalize()
    assert v.length() == pytest.approx(1.0)


def test_normalize_zero_vector():
    assert Vec2(0.0, 0.0).normalize() == Vec2(0.0, 0.0)


def test_rotate_round_trip_and_preserves_length():
    v = Vec2(2.0, 1.0)
    r = v.rotate(0.7)
    assert r.length() == pytest.approx(v.length())
    back = r.rotate(-0.7)
    assert back.x == pytest.approx(v.x)
    assert back.y == pytest.approx(v.y)


def test_vec3_is_mutable():
    v = Vec3()
    v.z = 4.0
    assert (v.x, v.y, v.z) == (0.0, 0.0, 4.0)


@pytest.mark.parametrize("value, low, high, expected", [(5, 0, 3, 3), (-1, 0, 3, 0), (2, 0, 3, 2)])
def test_clamp(value, low, high, expected):
    assert clamp(value, low, high) == expected


def test_point_side_signs():
    a, b = Vec2(0.0, 0.0), Vec2(4.0, 0.0)
    left = point_side(Vec2(1.0, 2.0), a, b)
    right = point_side(Vec2(1.0, -2.0), a, b)
    assert left * right < 0
    assert point_side(Vec2(2.0, 0.0), a, b) == 0


def test_line_intersection_crossing():
    hit = line_intersection(Vec2(0, 0), Vec2(2, 2), Vec2(0, 2), Vec2(2, 0))
    assert hit == Vec2(1.0, 1.0)


def test_line_intersection_parallel_and_disjoint():
    assert line_intersection(Vec2(0, 0), Vec2(1, 0), Vec2(0, 1), Vec2(1, 1)) is None
    assert line_intersection(Vec2(0, 0), Vec2(1, 1), Vec2(5, 0), Vec2(6, -1)) is None


def test_camera_world_round_trip():
    angle = 0.9
    s, c = math.sin(angle), math.cos(angle)
    cam = Vec2(10.0, -3.0)
    p = Vec2(4.0, 8.0)
    back = camera_to_world(world_to_camera(p, cam, s, c), cam, s, c)
    assert back.x == pytest.approx(p.x)
    assert back.y == pytest.approx(p.y)


def test_point_ahead_of_camera_has_depth_equal_to_distance():
    angle = 1.2
    s, c = math.sin(angle), math.cos(angle)
    cam = Vec2(1.0, 2.0)
    distance = 7.0
    ahead = cam + Vec2(c, s) * distance
    rel = world_to_camera(ahead, cam, s, c)
    assert rel.x == pytest.approx(0.0, abs=1e-9)
    assert rel.y == pytest.approx(distance)


def test_screen_angle_to_x_edges_and_centre():
    assert abs(screen_angle_to_x(0.0) - SCREEN_WIDTH // 2) <= 1
    assert 0 <= screen_angle_to_x(HFOV / 2) <= 1
    assert abs(screen_angle_to_x(-HFOV / 2) - SCREEN_WIDTH) <= 1


def test_screen_angle_to_x_decreasing():
    angles = [-0.7, -0.3, 0.0, 0.3, 0.7]
    xs = [screen_angle_to_x(a) for a in angles]
    assert xs == sorted(xs, reverse=True)


def test_screen_x_to_angle_edges():
    assert screen_x_to_angle(SCREEN_WIDTH // 2) == pytest.approx(0.0)
    assert screen_x_to_angle(0) == pytest.approx(HFOV / 2, rel=1e-6)
    assert HFOV == PI_2


@pytest.mark.parametrize("x", [10, 200, 640, 1000, 1270])
def test_screen_x_angle_round_trip(x):
    assert abs(screen_angle_to_x(screen_x_to_angle(x)) - x) <= 1


def test_ease_endpoints():
    assert ease_in_out_cubic(0.0) == 0.0
    assert ease_in_out_cubic(1.0) == 1.0


@pytest.mark.parametrize("x", [0.1, 0.25, 0.4, 0.45])
def test_ease_is_symmetric(x):
    assert ease_in_out_cubic(x) + ease_in_out_cubic(1.0 - x) == pytest.approx(1.0)


def test_ease_is_monotonic():
    values = [ease_in_out_cubic(i / 20) for i in range(21)]
    assert values == sorted(values)