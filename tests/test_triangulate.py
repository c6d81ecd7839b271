from __future__ import annotations

import pytest

from polytri.errors import MonotonicityError
from polytri.geometry import Point, cross
from polytri.triangulate import split_chains, triangulate_monotone


def pts(*coords):
    return [Point(float(x), float(y)) for x, y in coords]


def area(points, tri):
    a, b, c = (points[i] for i in tri)
    return cross(a, b, c) / 2


def test_single_triangle_is_made_ccw() -> None:
    points = pts((0, 0), (0, 1), (1, 0))
    tris = triangulate_monotone(points, [0, 1, 2])
    assert len(tris) == 1
    assert area(points, tris[0]) == pytest.approx(0.5)


def test_split_chains() -> None:
    # counter-clockwise hexagon, top at index 2, bottom at index 5
    points = pts((0, -1), (1, 0), (0.5, 2), (-1, 1), (-1.2, 0.2), (-0.2, -2))
    loop = [0, 1, 2, 3, 4, 5]
    left, right = split_chains(points, loop)
    assert left == [2, 3, 4, 5]
    assert right == [2, 1, 0, 5]


@pytest.mark.parametrize(
    "coords",
    [
        # convex
        [(0, 0), (2, 0), (3, 1), (2, 3), (0, 2)],
        # reflex vertices on the right chain
        [(0, 0), (1, 1), (0.5, 2), (1, 3), (0.4, 4), (1, 5), (0, 6), (-1, 3)],
        # reflex vertices on the left chain
        [(0, 0), (2, 3), (0, 6), (-1, 5), (-0.5, 4), (-1, 3), (-0.5, 2), (-1, 1)],
        # zig-zag between both chains
        [(0, 0), (1, 0.5), (0.8, 1.5), (1.2, 2.5), (0, 3), (-1.1, 2), (-0.9, 1.2), (-1.3, 0.7)],
    ],
)
def test_monotone_loop_triangulation(coords) -> None:
    points = pts(*coords)
    loop = list(range(len(points)))
    tris = triangulate_monotone(points, loop)
    assert len(tris) == len(points) - 2

    total = 0.0
    for tri in tris:
        a = area(points, tri)
        assert a > 0
        total += a
    shoelace = sum(
        points[i].x * points[(i + 1) % len(points)].y - points[(i + 1) % len(points)].x * points[i].y
        for i in range(len(points))
    ) / 2
    assert total == pytest.approx(shoelace)


def test_start_position_does_not_matter() -> None:
    coords = [(0, 0), (2, 0), (3, 1), (2, 3), (0, 2)]
    points = pts(*coords)
    tris = triangulate_monotone(points, [3, 4, 0, 1, 2])
    assert len(tris) == 3
    assert all(area(points, t) > 0 for t in tris)


def test_non_monotone_loop_raises() -> None:
    # notch in the top edge gives two local maxima
    points = pts((0, 0), (2, 0), (2, 2), (1, 1), (0, 2))
    with pytest.raises(MonotonicityError):
        triangulate_monotone(points, [0, 1, 2, 3, 4])


def test_too_short_loop_raises() -> None:
    points = pts((0, 0), (1, 0))
    with pytest.raises(MonotonicityError):
        triangulate_monotone(points, [0, 1])
