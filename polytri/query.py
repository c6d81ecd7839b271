"""
Point location in the query structure.

The search structure is a DAG of X-nodes (split by a segment), Y-nodes (split
by a point) and sinks (one per trapezoid). Descent is iterative; the DAG can
be deep for adversarial insertion orders.
"""

from __future__ import annotations

from typing import Optional

from .context import BuildContext, NodeKind
from .errors import StructureError
from .geometry import Point, equal_to, fp_equal, greater_than
from .segments import is_left_of


def locate(ctx: BuildContext, v: Point, other: Optional[Point] = None,
           root: Optional[int] = None) -> int:
    """
    Return the index of the trapezoid containing v.

    `other` disambiguates v when it coincides with a vertex already in the
    structure: it is the opposite endpoint of the segment being inserted, so
    v is classified on the side the segment leaves it from. Without context
    (other = v) a point equal to an inserted vertex is classified below it
    and to the right of every segment through it.
    """
    if other is None:
        other = v
    r = ctx.root if root is None else root
    if r is None:
        raise StructureError("query structure has not been built")

    nodes = ctx.nodes
    segments = ctx.segments
    while True:
        node = nodes[r]
        if node.kind is NodeKind.SINK:
            return node.trnum

        if node.kind is NodeKind.Y:
            if greater_than(v, node.yval):
                r = node.right
            elif equal_to(v, node.yval):
                r = node.right if greater_than(other, node.yval) else node.left
            else:
                r = node.left
            continue

        s = segments[node.segnum]
        if equal_to(v, s.v0) or equal_to(v, s.v1):
            if fp_equal(v.y, other.y):
                # horizontal segment
                r = node.left if other.x < v.x else node.right
            elif is_left_of(s, other):
                r = node.left
            else:
                r = node.right
        elif is_left_of(s, v):
            r = node.left
        else:
            r = node.right
