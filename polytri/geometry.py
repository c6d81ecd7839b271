"""
Point type and the y-primary ordering used throughout the trapezoidation.

A point is "above" another if its y is larger (beyond EPS), ties on y are
broken by x. All comparisons use the same absolute tolerance so that the
builder, the locator and the extractor agree on what "the same vertex" means.
"""

from __future__ import annotations

import math
from typing import NamedTuple

EPS = 1.0e-7


class Point(NamedTuple):
    x: float
    y: float


TOP = Point(math.inf, math.inf)
BOTTOM = Point(-math.inf, -math.inf)


def fp_equal(s: float, t: float) -> bool:
    return abs(s - t) <= EPS


def greater_than(a: Point, b: Point) -> bool:
    if a.y > b.y + EPS:
        return True
    if a.y < b.y - EPS:
        return False
    return a.x > b.x


def greater_than_equal_to(a: Point, b: Point) -> bool:
    if a.y > b.y + EPS:
        return True
    if a.y < b.y - EPS:
        return False
    return a.x >= b.x


def less_than(a: Point, b: Point) -> bool:
    if a.y < b.y - EPS:
        return True
    if a.y > b.y + EPS:
        return False
    return a.x < b.x


def equal_to(a: Point, b: Point) -> bool:
    return fp_equal(a.y, b.y) and fp_equal(a.x, b.x)


def max_point(a: Point, b: Point) -> Point:
    """Higher of two points under the y-primary ordering."""
    if a.y > b.y + EPS:
        return a
    if fp_equal(a.y, b.y):
        return a if a.x > b.x + EPS else b
    return b


def min_point(a: Point, b: Point) -> Point:
    """Lower of two points under the y-primary ordering."""
    if a.y < b.y - EPS:
        return a
    if fp_equal(a.y, b.y):
        return a if a.x < b.x else b
    return b


def cross(o: Point, a: Point, b: Point) -> float:
    """Signed cross product of vectors (o->a) and (o->b)."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)
