"""
polytri: triangulation of polygons with holes via Seidel's randomized
trapezoidal decomposition.
"""

from .config import DEFAULT_CONFIG, TriangulationConfig
from .context import BuildContext, Capacity
from .errors import (CapacityError, DegenerateInputError, MonotonicityError,
                     StructureError, TriangulationError)
from .geometry import EPS, Point
from .monotone import MonotonePartition, monotonate_trapezoids
from .polygon import (Triangulation, build_structure, is_point_inside_polygon,
                      triangulate_contours, triangulate_polygon)
from .query import locate
from .triangulate import triangulate_monotone

__version__ = "0.1.0"

__all__ = [
    "BuildContext",
    "Capacity",
    "CapacityError",
    "DEFAULT_CONFIG",
    "DegenerateInputError",
    "EPS",
    "MonotonePartition",
    "MonotonicityError",
    "Point",
    "StructureError",
    "Triangulation",
    "TriangulationConfig",
    "TriangulationError",
    "build_structure",
    "is_point_inside_polygon",
    "locate",
    "monotonate_trapezoids",
    "triangulate_contours",
    "triangulate_monotone",
    "triangulate_polygon",
]
