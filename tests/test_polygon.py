from __future__ import annotations

import pytest

from polytri import (Capacity, CapacityError, DegenerateInputError, StructureError,
                     TriangulationConfig, build_structure, is_point_inside_polygon,
                     triangulate_contours, triangulate_polygon)
from polytri.context import BuildContext
from polytri.generators import (arrow_shape, comb_polygon, convex_polygon, ensure_ccw,
                                l_shape, paper_example, random_polygon, ring_polygon,
                                spiral_polygon, square_with_hole, star_polygon)
from polytri.segments import build_segments
from polytri.validate import (edges_cross, is_y_monotone, polygon_area, triangle_area,
                              verify_triangulation)

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def check(contours, seed=0):
    tri = triangulate_contours(contours, seed=seed)
    ok, msg = verify_triangulation(contours, tri.triangles)
    assert ok, msg
    return tri


def test_unit_square() -> None:
    tri = check([UNIT_SQUARE])
    pts = UNIT_SQUARE
    assert len(tri.triangles) == 2
    assert [triangle_area(pts, t) for t in tri.triangles] == pytest.approx([0.5, 0.5])


def test_unit_square_inclusion() -> None:
    tri = triangulate_polygon([4], UNIT_SQUARE, seed=3)
    assert is_point_inside_polygon((0.5, 0.5), tri.structure)
    assert not is_point_inside_polygon((2.0, 2.0), tri.structure)
    assert tri.contains((0.25, 0.75))
    assert not tri.contains((-0.5, 0.5))


def test_square_with_hole() -> None:
    contours = square_with_hole()
    tri = check(contours)
    assert len(tri.triangles) == 8
    pts = [p for c in contours for p in c]
    assert sum(triangle_area(pts, t) for t in tri.triangles) == pytest.approx(12.0)

    # inside the ring, inside the hole, outside everything
    assert tri.contains((0.5, 2.0))
    assert tri.contains((3.5, 3.5))
    assert not tri.contains((2.0, 2.0))
    assert not tri.contains((5.0, 2.0))


def test_triangulate_polygon_flat_input() -> None:
    outer, hole = square_with_hole()
    tri = triangulate_polygon([4, 4], outer + hole, seed=11)
    assert len(tri) == 8


def test_counts_must_match_vertices() -> None:
    with pytest.raises(DegenerateInputError):
        triangulate_polygon([4, 4], UNIT_SQUARE)


FAMILIES = [
    ("convex3", [convex_polygon(3)]),
    ("convex10", [convex_polygon(10)]),
    ("convex64", [convex_polygon(64, 50.0)]),
    ("star5", [star_polygon(5)]),
    ("star12", [star_polygon(12)]),
    ("l_shape", [l_shape()]),
    ("arrow", [arrow_shape()]),
    ("comb1", [comb_polygon(1)]),
    ("comb6", [comb_polygon(6)]),
    ("paper", [ensure_ccw(paper_example())]),
    ("spiral40", [spiral_polygon(40)]),
    ("random20", [ensure_ccw(random_polygon(20, seed=1))]),
    ("random200", [ensure_ccw(random_polygon(200, seed=2))]),
    ("ring1", ring_polygon(16, holes=1)),
    ("ring5", ring_polygon(40, holes=5)),
]


@pytest.mark.parametrize("name, contours", FAMILIES, ids=[f[0] for f in FAMILIES])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_generated_polygons(name, contours, seed) -> None:
    tri = check(contours, seed=seed)
    n = sum(len(c) for c in contours)
    holes = len(contours) - 1
    assert len(tri.triangles) == n + 2 * holes - 2
    pts = [p for c in contours for p in c]
    assert sum(triangle_area(pts, t) for t in tri.triangles) == pytest.approx(polygon_area(contours))
    assert all(triangle_area(pts, t) > 0 for t in tri.triangles)


@pytest.mark.parametrize("contours", [
    [l_shape()],
    [arrow_shape()],
    [comb_polygon(3)],
    [ensure_ccw(paper_example())],
    square_with_hole(),
])
def test_no_crossing_edges(contours) -> None:
    tri = check(contours, seed=5)
    pts = [p for c in contours for p in c]
    assert edges_cross(pts, tri.triangles) == []


@pytest.mark.parametrize("contours", [
    [ensure_ccw(paper_example())],
    [spiral_polygon(30)],
    [comb_polygon(4)],
    ring_polygon(24, holes=2),
])
def test_monotone_pieces(contours) -> None:
    tri = check(contours, seed=9)
    part = tri.partition
    assert all(is_y_monotone(part.points, loop) for loop in part.loops)
    assert sum(len(loop) - 2 for loop in part.loops) == len(tri.triangles)
    assert len(part.polygons()) == len(part)


@pytest.mark.parametrize("points", [
    star_polygon(7),
    spiral_polygon(50),
    ensure_ccw(random_polygon(100, seed=4)),
])
def test_center_inside_and_far_point_outside(points) -> None:
    # all of these are star-shaped around the origin
    tri = check([points], seed=2)
    assert tri.contains((0.0, 0.0))
    assert not tri.contains((1e4, 1e4))
    assert not tri.contains((-1e4, 3.0))


def test_seed_is_reproducible() -> None:
    contours = [ensure_ccw(random_polygon(150, seed=8))]
    a = triangulate_contours(contours, seed=42)
    b = triangulate_contours(contours, seed=42)
    assert a.triangles == b.triangles
    assert a.seed == 42


def test_different_seeds_give_valid_results() -> None:
    contours = [spiral_polygon(60)]
    for seed in range(10):
        check(contours, seed=seed)


def test_config_seed_and_keyword_override() -> None:
    contours = [star_polygon(9)]
    cfg = TriangulationConfig(seed=5)
    a = triangulate_contours(contours, config=cfg)
    b = triangulate_contours(contours, seed=5)
    assert a.triangles == b.triangles
    c = triangulate_contours(contours, seed=6, config=cfg)
    assert c.seed == 6


def test_indices_follow_caller_order_when_winding_is_fixed() -> None:
    outer, hole = square_with_hole()
    contours = [outer[::-1], hole[::-1]]
    with pytest.raises(DegenerateInputError):
        triangulate_contours(contours)

    tri = triangulate_contours(contours, config=TriangulationConfig(fix_winding=True))
    ok, msg = verify_triangulation(contours, tri.triangles)
    assert ok, msg


def test_capacity_error() -> None:
    with pytest.raises(CapacityError) as exc:
        triangulate_contours([star_polygon(6)], seed=1, capacity=Capacity(12, 6, 200))
    assert exc.value.arena == "trapezoid"

    with pytest.raises(CapacityError):
        triangulate_contours([UNIT_SQUARE], capacity=Capacity(3, 100, 100))


LARGE_INPUTS = {
    "random": lambda seed: [ensure_ccw(random_polygon(1000, seed=seed))],
    "holes": lambda seed: ring_polygon(1000, holes=5),
}


@pytest.mark.parametrize("family", sorted(LARGE_INPUTS))
def test_default_capacity_fits_large_inputs(family) -> None:
    for seed in range(20):
        contours = LARGE_INPUTS[family](seed)
        tri = triangulate_contours(contours, seed=seed)
        ok, msg = verify_triangulation(contours, tri.triangles)
        assert ok, f"{family} seed={seed}: {msg}"


def test_structure_must_be_built() -> None:
    segments, _ = build_segments([UNIT_SQUARE])
    ctx = BuildContext(segments=segments, capacity=Capacity.for_segments(4))
    with pytest.raises(StructureError):
        is_point_inside_polygon((0.5, 0.5), ctx)


def test_build_structure_only() -> None:
    ctx = build_structure([UNIT_SQUARE], seed=1)
    assert ctx.built
    assert all(s.is_inserted for s in ctx.segments)
    assert is_point_inside_polygon((0.5, 0.5), ctx)
