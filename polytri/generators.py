"""
Deterministic polygon generators for tests and benchmarks.

Every generator returns a single contour; ensure_ccw orients it for use as
an outer boundary. Polygons with holes are built by square_with_hole and
ring_polygon.
"""

import math
import random
from typing import List, Tuple

from .segments import signed_area

Pt = Tuple[float, float]


def rotate_points(points: List[Pt], angle_rad: float) -> List[Pt]:
    ca = math.cos(angle_rad)
    sa = math.sin(angle_rad)
    return [(ca * x - sa * y, sa * x + ca * y) for (x, y) in points]


def ensure_ccw(points: List[Pt]) -> List[Pt]:
    return list(points) if signed_area(points) > 0 else list(reversed(points))


def ensure_cw(points: List[Pt]) -> List[Pt]:
    return list(points) if signed_area(points) < 0 else list(reversed(points))


def convex_polygon(n: int, radius: float = 1.0) -> List[Pt]:
    return [
        (
            radius * math.cos(2 * math.pi * i / n),
            radius * math.sin(2 * math.pi * i / n),
        )
        for i in range(n)
    ]


def star_polygon(points: int, outer: float = 2.0, inner: float = 0.8) -> List[Pt]:
    pts = []
    for i in range(points * 2):
        angle = math.pi / 2 + i * math.pi / points
        r = outer if i % 2 == 0 else inner
        pts.append((r * math.cos(angle), r * math.sin(angle)))
    return pts


def l_shape() -> List[Pt]:
    return [(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)]


def arrow_shape() -> List[Pt]:
    return [(0, 1), (2, 1), (2, 0), (4, 1.5), (2, 3), (2, 2), (0, 2)]


def comb_polygon(teeth: int) -> List[Pt]:
    pts = [(0, 0), (teeth * 2, 0), (teeth * 2, 1)]
    for i in range(teeth - 1, -1, -1):
        x = i * 2 + 1
        pts.extend([(x + 0.5, 1), (x, 2), (x - 0.5, 1)])
    pts.append((0, 1))
    return pts


def paper_example() -> List[Pt]:
    """Twelve-vertex example with several split and merge vertices (clockwise)."""
    return [
        (0.0, 2.5), (1.2, 5.5), (2.5, 3.8), (4.0, 6.5),
        (5.5, 4.8), (7.0, 7.0), (8.0, 5.5), (6.5, 3.5),
        (8.0, 1.5), (5.0, 2.5), (3.0, 0.0), (1.5, 1.5),
    ]


def spiral_polygon(n: int) -> List[Pt]:
    """Star-burst with n/2 outer and n/2 inner points; simple, about half the vertices reflex."""
    if n < 6:
        n = 6
    half = n // 2
    pts = []
    for i in range(half):
        angle = 2 * math.pi * i / half
        pts.append((100 * math.cos(angle), 100 * math.sin(angle)))
        inner_angle = angle + math.pi / half
        pts.append((30 * math.cos(inner_angle), 30 * math.sin(inner_angle)))
    return pts


def random_polygon(n: int, radius: float = 100.0, seed: int = 42) -> List[Pt]:
    """Star-shaped polygon around the origin with random radii; simple for any seed."""
    rng = random.Random(seed + n)
    angles = sorted(rng.random() * 2 * math.pi for _ in range(n))
    pts = []
    for a in angles:
        r = radius * (0.4 + 0.6 * rng.random())
        pts.append((r * math.cos(a), r * math.sin(a)))
    # small fixed rotation keeps generated y values apart
    return rotate_points(pts, 0.123456789)


def square_with_hole() -> List[List[Pt]]:
    outer = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0), (0.0, 4.0)]
    hole = [(1.0, 1.0), (1.0, 3.0), (3.0, 3.0), (3.0, 1.0)]
    return [outer, hole]


def ring_polygon(n: int, holes: int = 1, radius: float = 100.0) -> List[List[Pt]]:
    """Convex n-gon with `holes` small convex holes spread along a circle of half its radius."""
    outer = rotate_points(convex_polygon(n, radius), 0.1)
    contours = [outer]
    hole_r = radius * min(0.15, 0.8 / max(holes, 1))
    for k in range(holes):
        angle = 2 * math.pi * k / holes + 0.05
        cx, cy = 0.5 * radius * math.cos(angle), 0.5 * radius * math.sin(angle)
        hole = [(cx + x, cy + y) for x, y in rotate_points(convex_polygon(6, hole_r), 0.2 + k)]
        contours.append(ensure_cw(hole))
    return contours
