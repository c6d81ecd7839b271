"""
Monotone decomposition from a finished trapezoidation.

Every inside trapezoid whose top and bottom vertices do not lie on the same
bounding segment yields a diagonal between those two vertices. Diagonals are
spliced into a doubly linked "monotone chain" structure that starts out as
the polygon's contours; each splice cuts one loop in two. When the traversal
is over, every loop is a y-monotone polygon.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from .context import BuildContext, Trapezoid
from .errors import StructureError
from .geometry import Point, equal_to, greater_than

logger = logging.getLogger(__name__)


class Direction(Enum):
    FROM_UP = auto()     # entered from an upper neighbour
    FROM_DOWN = auto()   # entered from a lower neighbour


@dataclass(eq=False)
class ChainLink:
    vnum: int
    next: int
    prev: int
    marked: bool = False


@dataclass(eq=False)
class VertexChains:
    """The loops passing through one vertex: next vertex and link position per loop."""
    pt: Point
    vnext: List[int] = field(default_factory=list)
    vpos: List[int] = field(default_factory=list)


@dataclass
class MonotonePartition:
    points: List[Point]
    loops: List[List[int]]
    diagonals: List[Tuple[int, int]]
    # trapezoid index -> monotone polygon id it was assigned to
    assignment: Dict[int, int]

    def __len__(self):
        return len(self.loops)

    def polygons(self) -> List[List[Point]]:
        """Loops as counter-clockwise point lists."""
        return [[self.points[v] for v in loop] for loop in self.loops]


def inside_polygon(ctx: BuildContext, t: Trapezoid) -> bool:
    """True for a valid inside trapezoid that is a triangle (a seed for the traversal)."""
    if not t.valid:
        return False
    if t.lseg is None or t.rseg is None:
        return False
    if (t.u0 is None and t.u1 is None) or (t.d0 is None and t.d1 is None):
        s = ctx.segments[t.rseg]
        return greater_than(s.v1, s.v0)
    return False


def _angle(p0: Point, pnext: Point, p1: Point) -> float:
    """Monotone key for the angle swept from (p0, pnext) to (p0, p1); larger is tighter."""
    ax, ay = pnext.x - p0.x, pnext.y - p0.y
    bx, by = p1.x - p0.x, p1.y - p0.y
    cos = (ax * bx + ay * by) / math.hypot(ax, ay) / math.hypot(bx, by)
    if ax * by - bx * ay >= 0:
        return cos
    return -cos - 2.0


class MonotoneExtractor:
    def __init__(self, ctx: BuildContext):
        ctx.require_built()
        self.ctx = ctx
        segs = ctx.segments
        self.chain: List[ChainLink] = [
            ChainLink(vnum=i, next=s.next, prev=s.prev) for i, s in enumerate(segs)
        ]
        self.vert: List[VertexChains] = [
            VertexChains(pt=s.v0, vnext=[s.next], vpos=[i]) for i, s in enumerate(segs)
        ]
        # any link position on each monotone polygon; vertex 0 is on the outer contour
        self.mon: List[int] = [0]
        self.visited: Dict[int, int] = {}
        self.diagonals: List[Tuple[int, int]] = []

    def _vertex_positions(self, v0: int, v1: int) -> Tuple[int, int]:
        """
        Which loop at v0 (and at v1) the diagonal (v0, v1) cuts: scanning from
        the diagonal, the first outgoing edge at the vertex identifies it.
        """
        vp0, vp1 = self.vert[v0], self.vert[v1]

        def best(vp: VertexChains, target: Point) -> int:
            angle, pick = -4.0, None
            for i, nxt in enumerate(vp.vnext):
                a = _angle(vp.pt, self.vert[nxt].pt, target)
                if a > angle:
                    angle, pick = a, i
            return pick

        return best(vp0, vp1.pt), best(vp1, vp0.pt)

    def _new_link(self, vnum: int) -> int:
        self.chain.append(ChainLink(vnum=vnum, next=-1, prev=-1))
        return len(self.chain) - 1

    def split(self, mcur: int, v0: int, v1: int) -> int:
        """
        Cut monotone polygon mcur along the diagonal (v0, v1), given in
        counter-clockwise order with respect to mcur. Returns the new polygon id.
        """
        ch = self.chain
        ip, iq = self._vertex_positions(v0, v1)
        vp0, vp1 = self.vert[v0], self.vert[v1]
        p = vp0.vpos[ip]
        q = vp1.vpos[iq]

        i = self._new_link(v0)
        j = self._new_link(v1)

        ch[i].next = ch[p].next
        ch[ch[p].next].prev = i
        ch[i].prev = j
        ch[j].next = i
        ch[j].prev = ch[q].prev
        ch[ch[q].prev].next = j
        ch[p].next = q
        ch[q].prev = p

        vp0.vnext[ip] = v1
        vp0.vpos.append(i)
        vp0.vnext.append(ch[ch[i].next].vnum)
        vp1.vpos.append(j)
        vp1.vnext.append(v0)

        self.diagonals.append((v0, v1))
        self.mon[mcur] = p
        self.mon.append(i)
        return len(self.mon) - 1

    def _visit(self, mcur: int, trnum: int, src: Optional[int], direction: Direction):
        """Handle one trapezoid; returns the neighbour visits to make, in order."""
        tr = self.ctx.trapezoids
        segs = self.ctx.segments
        t = tr[trnum]
        UP, DN = Direction.FROM_UP, Direction.FROM_DOWN

        def everything(m):
            return [(m, t.u0, DN), (m, t.u1, DN), (m, t.d0, UP), (m, t.d1, UP)]

        # triangles with cusps at the opposite ends
        if t.u0 is None and t.u1 is None:
            if t.d0 is not None and t.d1 is not None:
                # downward opening triangle
                v0, v1 = tr[t.d1].lseg, t.lseg
                if src == t.d1:
                    mnew = self.split(mcur, v1, v0)
                    return [(mcur, t.d1, UP), (mnew, t.d0, UP)]
                mnew = self.split(mcur, v0, v1)
                return [(mcur, t.d0, UP), (mnew, t.d1, UP)]
            return everything(mcur)

        if t.d0 is None and t.d1 is None:
            if t.u0 is not None and t.u1 is not None:
                # upward opening triangle
                v0, v1 = t.rseg, tr[t.u0].rseg
                if src == t.u1:
                    mnew = self.split(mcur, v1, v0)
                    return [(mcur, t.u1, DN), (mnew, t.u0, DN)]
                mnew = self.split(mcur, v0, v1)
                return [(mcur, t.u0, DN), (mnew, t.u1, DN)]
            return everything(mcur)

        if t.u0 is not None and t.u1 is not None:
            if t.d0 is not None and t.d1 is not None:
                # downward and upward cusps
                v0, v1 = tr[t.d1].lseg, tr[t.u0].rseg
                if (direction is DN and t.d1 == src) or (direction is UP and t.u1 == src):
                    mnew = self.split(mcur, v1, v0)
                    return [(mcur, t.u1, DN), (mcur, t.d1, UP),
                            (mnew, t.u0, DN), (mnew, t.d0, UP)]
                mnew = self.split(mcur, v0, v1)
                return [(mcur, t.u0, DN), (mcur, t.d0, UP),
                        (mnew, t.u1, DN), (mnew, t.d1, UP)]

            # only a downward cusp
            if equal_to(t.lo, segs[t.lseg].v1):
                v0, v1 = tr[t.u0].rseg, segs[t.lseg].next
                if direction is UP and t.u0 == src:
                    mnew = self.split(mcur, v1, v0)
                    return [(mcur, t.u0, DN), (mnew, t.d0, UP),
                            (mnew, t.u1, DN), (mnew, t.d1, UP)]
                mnew = self.split(mcur, v0, v1)
                return [(mcur, t.u1, DN), (mcur, t.d0, UP),
                        (mcur, t.d1, UP), (mnew, t.u0, DN)]

            v0, v1 = t.rseg, tr[t.u0].rseg
            if direction is UP and t.u1 == src:
                mnew = self.split(mcur, v1, v0)
                return [(mcur, t.u1, DN), (mnew, t.d1, UP),
                        (mnew, t.d0, UP), (mnew, t.u0, DN)]
            mnew = self.split(mcur, v0, v1)
            return [(mcur, t.u0, DN), (mcur, t.d0, UP),
                    (mcur, t.d1, UP), (mnew, t.u1, DN)]

        # a single upper neighbour from here on
        if t.d0 is not None and t.d1 is not None:
            # only an upward cusp
            if equal_to(t.hi, segs[t.lseg].v0):
                v0, v1 = tr[t.d1].lseg, t.lseg
                if not (direction is DN and t.d0 == src):
                    mnew = self.split(mcur, v1, v0)
                    return [(mcur, t.u1, DN), (mcur, t.d1, UP),
                            (mcur, t.u0, DN), (mnew, t.d0, UP)]
                mnew = self.split(mcur, v0, v1)
                return [(mcur, t.d0, UP), (mnew, t.u0, DN),
                        (mnew, t.u1, DN), (mnew, t.d1, UP)]

            v0, v1 = tr[t.d1].lseg, segs[t.rseg].next
            if direction is DN and t.d1 == src:
                mnew = self.split(mcur, v1, v0)
                return [(mcur, t.d1, UP), (mnew, t.u1, DN),
                        (mnew, t.u0, DN), (mnew, t.d0, UP)]
            mnew = self.split(mcur, v0, v1)
            return [(mcur, t.u0, DN), (mcur, t.u1, DN),
                    (mcur, t.d0, UP), (mnew, t.d1, UP)]

        # no cusp
        if equal_to(t.hi, segs[t.lseg].v0) and equal_to(t.lo, segs[t.rseg].v0):
            v0, v1 = t.rseg, t.lseg
        elif equal_to(t.hi, segs[t.rseg].v1) and equal_to(t.lo, segs[t.lseg].v1):
            v0, v1 = segs[t.rseg].next, segs[t.lseg].next
        else:
            # no split possible
            return [(mcur, t.u0, DN), (mcur, t.d0, UP), (mcur, t.u1, DN), (mcur, t.d1, UP)]

        if direction is UP:
            mnew = self.split(mcur, v1, v0)
            return [(mcur, t.u0, DN), (mcur, t.u1, DN),
                    (mnew, t.d1, UP), (mnew, t.d0, UP)]
        mnew = self.split(mcur, v0, v1)
        return [(mcur, t.d1, UP), (mcur, t.d0, UP),
                (mnew, t.u0, DN), (mnew, t.u1, DN)]

    def traverse(self, start: int) -> None:
        """Depth-first walk over the inside trapezoids from a seed triangle."""
        tr = self.ctx.trapezoids
        t = tr[start]
        if t.u0 is not None:
            stack = [(0, start, t.u0, Direction.FROM_UP)]
        elif t.d0 is not None:
            stack = [(0, start, t.d0, Direction.FROM_DOWN)]
        else:
            raise StructureError(f"seed trapezoid {start} has no neighbours")

        while stack:
            mcur, trnum, src, direction = stack.pop()
            if trnum is None or trnum in self.visited:
                continue
            self.visited[trnum] = mcur
            calls = self._visit(mcur, trnum, src, direction)
            for m, nxt, d in reversed(calls):
                stack.append((m, nxt, trnum, d))

    def loops(self) -> List[List[int]]:
        """Walk every monotone polygon once, skipping ids that ended up on an already walked loop."""
        ch = self.chain
        for link in ch:
            link.marked = False
        out: List[List[int]] = []
        for start in self.mon:
            first = ch[start].vnum
            ch[start].marked = True
            loop = [first]
            p = ch[start].next
            duplicate = False
            while ch[p].vnum != first:
                if ch[p].marked:
                    duplicate = True
                    break
                ch[p].marked = True
                loop.append(ch[p].vnum)
                p = ch[p].next
            if not duplicate:
                out.append(loop)
        return out

    def run(self) -> MonotonePartition:
        tr = self.ctx.trapezoids
        start = next((i for i, t in enumerate(tr) if inside_polygon(self.ctx, t)), None)
        if start is None:
            raise StructureError("no inside triangular trapezoid to start from")
        self.traverse(start)
        loops = self.loops()
        logger.debug("%d diagonals, %d monotone polygons", len(self.diagonals), len(loops))
        return MonotonePartition(
            points=[v.pt for v in self.vert],
            loops=loops,
            diagonals=list(self.diagonals),
            assignment=dict(self.visited),
        )


def monotonate_trapezoids(ctx: BuildContext) -> MonotonePartition:
    """Partition the polygon held in ctx into y-monotone loops."""
    return MonotoneExtractor(ctx).run()
