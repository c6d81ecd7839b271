from __future__ import annotations

import math

from polytri.geometry import (BOTTOM, EPS, TOP, Point, cross, equal_to, greater_than,
                              greater_than_equal_to, less_than, max_point, min_point)


def test_ordering_is_y_primary_with_x_tiebreak() -> None:
    a, b = Point(0.0, 1.0), Point(5.0, 0.0)
    assert greater_than(a, b)
    assert less_than(b, a)

    left, right = Point(0.0, 2.0), Point(1.0, 2.0)
    assert greater_than(right, left)
    assert not greater_than(left, right)


def test_tolerance_applies_to_y() -> None:
    p, q = Point(1.0, 0.0), Point(0.0, EPS / 2)
    # within EPS on y, so x decides
    assert greater_than(p, q)
    assert equal_to(Point(0.0, 0.0), Point(EPS / 2, -EPS / 2))
    assert not equal_to(Point(0.0, 0.0), Point(0.0, 1e-3))


def test_greater_than_equal_to() -> None:
    p = Point(3.0, 4.0)
    assert greater_than_equal_to(p, p)
    assert not greater_than(p, p)


def test_sentinels_bound_everything() -> None:
    p = Point(1e12, -1e12)
    assert greater_than(TOP, p)
    assert greater_than(p, BOTTOM)
    assert math.isinf(TOP.y) and math.isinf(BOTTOM.y)


def test_max_min_point() -> None:
    a, b = Point(0.0, 0.0), Point(1.0, 0.0)
    assert max_point(a, b) == b
    assert min_point(a, b) == a
    c = Point(-3.0, 2.0)
    assert max_point(a, c) == c
    assert min_point(c, a) == a


def test_cross_sign() -> None:
    o, a = Point(0.0, 0.0), Point(1.0, 0.0)
    assert cross(o, a, Point(0.0, 1.0)) > 0
    assert cross(o, a, Point(0.0, -1.0)) < 0
    assert cross(o, a, Point(2.0, 0.0)) == 0
