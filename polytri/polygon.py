"""
Entry points: triangulate a polygon with holes, and test points against it.

    >>> tri = triangulate_contours([[(0, 0), (1, 0), (1, 1), (0, 1)]], seed=1)
    >>> len(tri.triangles)
    2
    >>> is_point_inside_polygon((0.5, 0.5), tri.structure)
    True
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_CONFIG, TriangulationConfig
from .context import BuildContext, Capacity
from .errors import DegenerateInputError
from .geometry import Point, greater_than_equal_to
from .monotone import MonotonePartition, monotonate_trapezoids
from .query import locate
from .segments import Contour, build_segments, random_ordering, validate_contours
from .trapezoids import construct_trapezoids
from .triangulate import Triangle, triangulate_monotone_polygons

logger = logging.getLogger(__name__)


@dataclass
class Triangulation:
    # vertex indices refer to the caller's concatenated vertex sequence
    triangles: List[Triangle]
    structure: BuildContext
    partition: MonotonePartition
    seed: Optional[int] = None

    def __len__(self):
        return len(self.triangles)

    def contains(self, point: Tuple[float, float]) -> bool:
        return is_point_inside_polygon(point, self.structure)


def split_contours(counts: Sequence[int], vertices: Sequence[Tuple[float, float]]) -> List[Contour]:
    """Cut a concatenated vertex sequence into contours of the given sizes."""
    if sum(counts) != len(vertices):
        raise DegenerateInputError(
            f"contour sizes add up to {sum(counts)} but {len(vertices)} vertices were given"
        )
    contours, i = [], 0
    for n in counts:
        contours.append(list(vertices[i:i + n]))
        i += n
    return contours


def build_structure(contours: Sequence[Contour], *, seed: Optional[int] = None,
                    capacity: Optional[Capacity] = None,
                    config: Optional[TriangulationConfig] = None) -> BuildContext:
    """Validate the contours and build their trapezoidation and query structure."""
    cfg = (config or DEFAULT_CONFIG).with_overrides(seed=seed)
    orders = None
    if cfg.validate_input:
        orders = validate_contours(contours, fix_winding=cfg.fix_winding)
    segments, vertex_ids = build_segments(contours, orders)

    n = len(segments)
    if capacity is None:
        capacity = Capacity.for_segments(n, cfg.trapezoid_factor, cfg.node_factor,
                                         cfg.capacity_slack)
    ctx = BuildContext(segments=segments, capacity=capacity, vertex_ids=vertex_ids)

    rng = random.Random(cfg.seed)
    order = random_ordering(n, rng)
    logger.debug("building trapezoidation: %d segments, %d contours, seed=%s",
                 n, len(contours), cfg.seed)
    construct_trapezoids(ctx, order)
    return ctx


def triangulate_contours(contours: Sequence[Contour], *, seed: Optional[int] = None,
                         capacity: Optional[Capacity] = None,
                         config: Optional[TriangulationConfig] = None) -> Triangulation:
    """
    Triangulate a polygon given as contours: the outer boundary first,
    counter-clockwise, then every hole clockwise.
    """
    cfg = (config or DEFAULT_CONFIG).with_overrides(seed=seed)
    ctx = build_structure(contours, capacity=capacity, config=cfg)
    partition = monotonate_trapezoids(ctx)
    internal = triangulate_monotone_polygons(partition.points, partition.loops)
    ids = ctx.vertex_ids
    triangles = [(ids[a], ids[b], ids[c]) for a, b, c in internal]
    logger.debug("%d monotone pieces, %d triangles", len(partition.loops), len(triangles))
    return Triangulation(triangles=triangles, structure=ctx, partition=partition, seed=cfg.seed)


def triangulate_polygon(counts: Sequence[int], vertices: Sequence[Tuple[float, float]], *,
                        seed: Optional[int] = None, capacity: Optional[Capacity] = None,
                        config: Optional[TriangulationConfig] = None) -> Triangulation:
    """
    Triangulate a polygon whose contours are concatenated in `vertices`;
    contour i holds the next counts[i] points.
    """
    return triangulate_contours(split_contours(counts, vertices), seed=seed,
                                capacity=capacity, config=config)


def is_point_inside_polygon(point: Tuple[float, float], structure: BuildContext) -> bool:
    """
    True if the point lies in the polygon the structure was built from.

    Points strictly inside or strictly outside are always classified
    correctly; the answer for points on the boundary is not specified.
    """
    structure.require_built()
    v = Point(float(point[0]), float(point[1]))
    t = structure.trapezoids[locate(structure, v)]
    if not t.valid:
        return False
    if t.lseg is None or t.rseg is None:
        return False
    s = structure.segments[t.rseg]
    return greater_than_equal_to(s.v1, s.v0)
