from __future__ import annotations

import pytest

from map_geometry import (
    AffineTransform,
    NonInvertibleTransformError,
    Rect,
    round_away,
    union_all,
)


def test_rect_properties():
    rect = Rect.from_size(10, 20, 100, 50)
    assert rect == Rect(10, 20, 110, 70)
    assert rect.width == 100
    assert rect.height == 50
    assert rect.center == (60, 45)
    assert rect.area == 5000
    assert not rect.is_empty
    assert Rect().is_empty


def test_rect_contains_is_inclusive():
    rect = Rect(0, 0, 10, 10)
    assert rect.contains((0, 0))
    assert rect.contains((10, 10))
    assert not rect.contains((10.01, 5))


def test_from_points_of_nothing_is_empty():
    assert Rect.from_points([]) == Rect()
    assert Rect.from_points([(3, 4), (-1, 8)]) == Rect(-1, 4, 3, 8)


def test_union_all_with_and_without_seed():
    rects = [Rect(100, 100, 200, 200), Rect(150, 50, 300, 120)]
    assert union_all(rects) == Rect(100, 50, 300, 200)
    assert union_all(rects, seed=Rect()) == Rect(0, 0, 300, 200)
    assert union_all([]) == Rect()


@pytest.mark.parametrize(
    "value, expected",
    [(999.5, 1000), (999.4999, 999), (-0.5, -1), (-1.2, -1), (0.0, 0)],
)
def test_round_away_from_zero(value, expected):
    assert round_away(value) == expected


def test_rounded_rect():
    assert Rect(142.857, -0.5, 857.14, 999.9999).rounded() == Rect(143, -1, 857, 1000)


def test_scale_keeps_pivot_fixed():
    transform = AffineTransform.scale(3, pivot_x=50, pivot_y=20)
    assert transform.map_point((50, 20)) == (50, 20)
    assert transform.map_point((51, 21)) == (53, 23)


def test_then_applies_left_transform_first():
    scale_then_move = AffineTransform.scale(2).then(AffineTransform.translation(10, 0))
    move_then_scale = AffineTransform.translation(10, 0).then(AffineTransform.scale(2))
    assert scale_then_move.map_point((1, 1)) == (12, 2)
    assert move_then_scale.map_point((1, 1)) == (22, 2)


def test_map_rect_with_negative_scale_keeps_edges_ordered():
    flipped = AffineTransform(-1, 1, 0, 0)
    assert flipped.map_rect(Rect(10, 0, 20, 5)) == Rect(-20, 0, -10, 5)


def test_invert_round_trips():
    transform = AffineTransform(2.5, 4, -30, 12)
    inverse = transform.invert()
    x, y = inverse.map_point(transform.map_point((7, -3)))
    assert x == pytest.approx(7)
    assert y == pytest.approx(-3)


def test_invert_zero_scale_raises():
    with pytest.raises(NonInvertibleTransformError):
        AffineTransform(0, 1, 0, 0).invert()
    assert not AffineTransform(1, 0, 0, 0).is_invertible
