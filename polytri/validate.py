"""
Correctness checks for triangulations of polygons with holes.

verify_triangulation checks:
1. Triangle count: n + 2h - 2 for n vertices over all contours and h holes
2. Valid indices
3. No degenerate triangles, all counter-clockwise
4. Area preservation: sum of triangle areas == outer area - hole areas
"""

from __future__ import annotations

from typing import List, Sequence, Set, Tuple

from .geometry import Point, greater_than
from .segments import signed_area

EPS = 1e-12

Pt = Tuple[float, float]


def polygon_area(contours: Sequence[Sequence[Pt]]) -> float:
    """Area enclosed by the outer contour minus the holes."""
    outer = abs(signed_area(contours[0]))
    return outer - sum(abs(signed_area(c)) for c in contours[1:])


def triangle_area(pts: Sequence[Pt], tri: Tuple[int, int, int]) -> float:
    """Signed area of a triangle, positive when counter-clockwise."""
    a, b, c = pts[tri[0]], pts[tri[1]], pts[tri[2]]
    return ((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])) / 2


def expected_triangles(contours: Sequence[Sequence[Pt]]) -> int:
    n = sum(len(c) for c in contours)
    return n + 2 * (len(contours) - 1) - 2


def verify_triangulation(contours: Sequence[Sequence[Pt]],
                         triangles: Sequence[Tuple[int, int, int]]) -> Tuple[bool, str]:
    """Verify a triangulation whose indices refer to the concatenated contours."""
    pts = [p for c in contours for p in c]
    n = len(pts)

    expected = expected_triangles(contours)
    if len(triangles) != expected:
        return False, f"Wrong count: {len(triangles)} != {expected}"

    for tri in triangles:
        for v in tri:
            if v < 0 or v >= n:
                return False, f"Invalid vertex index: {v}"

    for tri in triangles:
        area = triangle_area(pts, tri)
        if area <= EPS:
            return False, f"Degenerate or clockwise triangle: {tri} (area {area:.3g})"

    poly_a = polygon_area(contours)
    tri_a = sum(triangle_area(pts, tri) for tri in triangles)
    if abs(poly_a - tri_a) > 1e-6 * max(1, poly_a):
        return False, f"Area mismatch: {poly_a:.6f} vs {tri_a:.6f}"

    return True, "OK"


def is_y_monotone(points: Sequence[Pt], loop: Sequence[int]) -> bool:
    """True if walking the loop meets exactly one local maximum and one local minimum."""
    m = len(loop)
    p = [Point(*points[v]) for v in loop]
    maxima = minima = 0
    for k in range(m):
        prev, cur, nxt = p[k - 1], p[k], p[(k + 1) % m]
        if greater_than(cur, prev) and greater_than(cur, nxt):
            maxima += 1
        elif greater_than(prev, cur) and greater_than(nxt, cur):
            minima += 1
    return maxima == 1 and minima == 1


def orient(a: Pt, b: Pt, c: Pt) -> float:
    ax, ay = a
    bx, by = b
    cx, cy = c
    return (bx - ax) * (cy - ay) - (by - ay) * (cx - ax)


def segments_cross(a: Pt, b: Pt, c: Pt, d: Pt) -> bool:
    """Proper crossing of ab and cd (touching at endpoints does not count)."""
    def sgn(x: float) -> int:
        if x > EPS:
            return 1
        if x < -EPS:
            return -1
        return 0

    s1, s2 = sgn(orient(a, b, c)), sgn(orient(a, b, d))
    s3, s4 = sgn(orient(c, d, a)), sgn(orient(c, d, b))
    return s1 * s2 < 0 and s3 * s4 < 0


def edges_cross(pts: Sequence[Pt],
                triangles: Sequence[Tuple[int, int, int]]) -> List[Tuple[Tuple[int, int], Tuple[int, int]]]:
    """All pairs of triangle edges that cross; quadratic, meant for small instances."""
    edges: Set[Tuple[int, int]] = set()
    for a, b, c in triangles:
        for u, v in ((a, b), (b, c), (c, a)):
            edges.add((u, v) if u < v else (v, u))
    edges_list = sorted(edges)
    out = []
    for i, (u1, v1) in enumerate(edges_list):
        for u2, v2 in edges_list[i + 1:]:
            if len({u1, v1, u2, v2}) < 4:
                continue
            if segments_cross(pts[u1], pts[v1], pts[u2], pts[v2]):
                out.append(((u1, v1), (u2, v2)))
    return out
