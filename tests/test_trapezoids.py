from __future__ import annotations

import random

import pytest

from polytri.context import BuildContext, Capacity, NodeKind
from polytri.generators import ensure_ccw, random_polygon, square_with_hole
from polytri.geometry import Point, greater_than_equal_to
from polytri.query import locate
from polytri.segments import build_segments, random_ordering
from polytri.trapezoids import construct_trapezoids, init_query_structure, logstar, phase_end

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def make_context(contours) -> BuildContext:
    segments, ids = build_segments(contours)
    return BuildContext(segments=segments, capacity=Capacity.for_segments(len(segments)),
                        vertex_ids=ids)


@pytest.mark.parametrize("n, expected", [(1, 0), (2, 1), (4, 2), (16, 3), (65536, 4)])
def test_logstar(n, expected) -> None:
    assert logstar(n) == expected


def test_phase_end() -> None:
    assert phase_end(16, 0) == 1
    assert [phase_end(16, h) for h in (1, 2, 3)] == [4, 8, 16]
    n = 1000
    ends = [phase_end(n, h) for h in range(logstar(n) + 1)]
    assert ends == sorted(ends)
    assert ends[-1] <= n


def test_init_query_structure() -> None:
    ctx = make_context([UNIT_SQUARE])
    root = init_query_structure(ctx, 0)
    ctx.root = root
    assert len(ctx.trapezoids) == 4
    assert len(ctx.nodes) == 7
    assert ctx.nodes[root].kind is NodeKind.Y
    assert ctx.segments[0].is_inserted

    above = locate(ctx, Point(0.5, 5.0))
    below = locate(ctx, Point(0.5, -5.0))
    assert ctx.trapezoids[above].lseg is None and ctx.trapezoids[above].rseg is None
    assert ctx.trapezoids[below].lseg is None and ctx.trapezoids[below].rseg is None
    assert above != below


@pytest.mark.parametrize("contours", [
    [UNIT_SQUARE],
    square_with_hole(),
    [ensure_ccw(random_polygon(80, seed=6))],
])
def test_every_valid_trapezoid_owns_its_sink(contours) -> None:
    ctx = make_context(contours)
    construct_trapezoids(ctx, random_ordering(len(ctx.segments), random.Random(1)))
    assert all(s.is_inserted for s in ctx.segments)
    valid = ctx.valid_trapezoids()
    for i in valid:
        node = ctx.nodes[ctx.trapezoids[i].sink]
        assert node.kind is NodeKind.SINK
        assert node.trnum == i


def test_locate_returns_trapezoid_spanning_the_point() -> None:
    contours = [ensure_ccw(random_polygon(60, seed=3))]
    ctx = make_context(contours)
    construct_trapezoids(ctx, random_ordering(len(ctx.segments), random.Random(4)))
    rng = random.Random(0)
    for _ in range(200):
        p = Point(rng.uniform(-120, 120), rng.uniform(-120, 120))
        t = ctx.trapezoids[locate(ctx, p)]
        assert t.valid
        assert greater_than_equal_to(t.hi, p)
        assert greater_than_equal_to(p, t.lo)


def test_merged_trapezoids_are_tombstoned() -> None:
    ctx = make_context(square_with_hole())
    construct_trapezoids(ctx, list(range(8)))
    invalid = [t for t in ctx.trapezoids if not t.valid]
    # tombstones stay in the arena
    assert len(invalid) + len(ctx.valid_trapezoids()) == len(ctx.trapezoids)
    # n segments with distinct-endpoint vertices give at most 3n + 1 trapezoids
    assert len(ctx.valid_trapezoids()) <= 3 * len(ctx.segments) + 1
