"""
Segment store: polygon edges with their contour adjacency.

Segment i runs from vertex i to the next vertex of the same contour, so the
vertex and segment numberings coincide. Segments keep contour direction; the
inclusion test depends on it.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .errors import DegenerateInputError
from .geometry import Point, cross, equal_to, fp_equal, greater_than

logger = logging.getLogger(__name__)

Contour = Sequence[Tuple[float, float]]


@dataclass(eq=False)
class Segment:
    v0: Point
    v1: Point
    prev: int
    next: int
    is_inserted: bool = False
    # Query-structure nodes from which the endpoints are located
    root0: int = 0
    root1: int = 0

    @property
    def upward(self) -> bool:
        """True if contour direction runs from the lower to the upper endpoint."""
        return greater_than(self.v1, self.v0)

    @property
    def lower(self) -> Point:
        return self.v0 if self.upward else self.v1

    @property
    def upper(self) -> Point:
        return self.v1 if self.upward else self.v0


def is_left_of(s: Segment, v: Point) -> bool:
    """True if v lies strictly left of s, with horizontal ties decided by x."""
    if s.upward:
        a, b = s.v0, s.v1
    else:
        a, b = s.v1, s.v0
    if fp_equal(s.v1.y, v.y):
        area = 1.0 if v.x < s.v1.x else -1.0
    elif fp_equal(s.v0.y, v.y):
        area = 1.0 if v.x < s.v0.x else -1.0
    else:
        area = cross(a, b, v)
    return area > 0.0


def signed_area(points: Sequence[Point]) -> float:
    n = len(points)
    return sum(
        points[i][0] * points[(i + 1) % n][1] - points[(i + 1) % n][0] * points[i][1]
        for i in range(n)
    ) / 2.0


def validate_contours(contours: Sequence[Contour], fix_winding: bool = False) -> List[List[int]]:
    """
    Check the input contract and return, per contour, the order in which its
    points should be read (reversed where the winding was fixed).

    Raises DegenerateInputError on short contours, non-finite coordinates,
    repeated points, zero area, or wrong winding when fix_winding is off.
    """
    if not contours:
        raise DegenerateInputError("no contours given")
    orders: List[List[int]] = []
    for c, contour in enumerate(contours):
        n = len(contour)
        if n < 3:
            raise DegenerateInputError(f"needs at least 3 points, got {n}", contour=c)
        pts = [Point(float(x), float(y)) for x, y in contour]
        for i, p in enumerate(pts):
            if not (math.isfinite(p.x) and math.isfinite(p.y)):
                raise DegenerateInputError(f"non-finite coordinate at point {i}", contour=c)
        if len(set(pts)) != n:
            raise DegenerateInputError("repeated point", contour=c)
        for i in range(n):
            if equal_to(pts[i], pts[(i + 1) % n]):
                raise DegenerateInputError(f"zero-length segment at point {i}", contour=c)

        area = signed_area(pts)
        if fp_equal(area, 0.0):
            raise DegenerateInputError("zero area", contour=c)
        # outer contour counter-clockwise, holes clockwise
        wrong = area < 0 if c == 0 else area > 0
        order = list(range(n))
        if wrong:
            expected = "counter-clockwise" if c == 0 else "clockwise"
            if not fix_winding:
                raise DegenerateInputError(f"must be wound {expected}", contour=c)
            logger.warning("contour %d reoriented to %s winding", c, expected)
            order.reverse()
        orders.append(order)
    return orders


def build_segments(contours: Sequence[Contour],
                   orders: Optional[Sequence[Sequence[int]]] = None) -> Tuple[List[Segment], List[int]]:
    """
    Build the cyclic segment list of every contour.

    Returns the segments and, for each internal vertex, the index of the
    caller's point it came from (identity unless a contour was reoriented).
    """
    segments: List[Segment] = []
    vertex_ids: List[int] = []
    offset = 0
    for c, contour in enumerate(contours):
        order = orders[c] if orders is not None else range(len(contour))
        first = len(segments)
        npoints = len(contour)
        last = first + npoints - 1
        for j, k in enumerate(order):
            x, y = contour[k]
            i = first + j
            segments.append(Segment(
                v0=Point(float(x), float(y)),
                v1=Point(float(x), float(y)),
                prev=last if i == first else i - 1,
                next=first if i == last else i + 1,
            ))
            vertex_ids.append(offset + k)
        offset += npoints
    for s in segments:
        s.v1 = segments[s.next].v0
    return segments, vertex_ids


def random_ordering(n: int, rng: random.Random) -> List[int]:
    """Uniformly random insertion order of the segment indices 0..n-1."""
    order = list(range(n))
    rng.shuffle(order)
    return order
