"""
Randomized incremental trapezoidation (Seidel, 1991).

Segments are inserted one at a time in random order. Each insertion splits
the trapezoids holding its endpoints horizontally, threads the segment from
its upper endpoint to its lower one splitting every trapezoid it crosses into
a left and a right part, then merges vertically adjacent parts on each side
that ended up bounded by the same pair of segments.

Insertion runs in log*(n) phases; between phases every segment that is not
yet inserted relocates its endpoints and caches the sinks it found, so later
point locations start deep in the DAG instead of at its root. This gives the
expected O(n log* n) construction time.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from .context import BuildContext, NodeKind, Side, TrapState
from .errors import StructureError
from .geometry import (
    BOTTOM,
    TOP,
    Point,
    equal_to,
    fp_equal,
    greater_than,
    greater_than_equal_to,
    less_than,
    max_point,
    min_point,
)
from .query import locate
from .segments import is_left_of

logger = logging.getLogger(__name__)


def logstar(n: int) -> int:
    """Number of times log2 can be applied to n before it drops below 1, minus one."""
    i, v = 0, float(n)
    while v >= 1:
        v = math.log2(v)
        i += 1
    return i - 1


def phase_end(n: int, h: int) -> int:
    """Number of segments inserted once phase h is complete: ceil(n / log^(h) n)."""
    v = float(n)
    for _ in range(h):
        v = math.log2(v)
    return int(math.ceil(n / v))


def init_query_structure(ctx: BuildContext, segnum: int) -> int:
    """
    Seed the structure with the first segment: four trapezoids (above, below,
    left, right), two Y-nodes for its endpoints and one X-node for itself.
    Returns the root node.
    """
    s = ctx.segments[segnum]
    tr = ctx.trapezoids
    qs = ctx.nodes

    hi = max_point(s.v0, s.v1)
    lo = min_point(s.v0, s.v1)

    root = ctx.new_node(kind=NodeKind.Y, yval=hi)
    i2 = ctx.new_node(kind=NodeKind.SINK, parent=root)
    i3 = ctx.new_node(kind=NodeKind.Y, yval=lo, parent=root)
    qs[root].right = i2
    qs[root].left = i3
    i4 = ctx.new_node(kind=NodeKind.SINK, parent=i3)
    i5 = ctx.new_node(kind=NodeKind.X, segnum=segnum, parent=i3)
    qs[i3].left = i4
    qs[i3].right = i5
    i6 = ctx.new_node(kind=NodeKind.SINK, parent=i5)
    i7 = ctx.new_node(kind=NodeKind.SINK, parent=i5)
    qs[i5].left = i6
    qs[i5].right = i7

    t1 = ctx.new_trapezoid()  # middle left
    t2 = ctx.new_trapezoid()  # middle right
    t3 = ctx.new_trapezoid()  # bottom-most
    t4 = ctx.new_trapezoid()  # topmost

    tr[t1].hi = tr[t2].hi = tr[t4].lo = hi
    tr[t1].lo = tr[t2].lo = tr[t3].hi = lo
    tr[t4].hi = TOP
    tr[t3].lo = BOTTOM
    tr[t1].rseg = tr[t2].lseg = segnum
    tr[t1].u0 = tr[t2].u0 = t4
    tr[t1].d0 = tr[t2].d0 = t3
    tr[t4].d0 = tr[t3].u0 = t1
    tr[t4].d1 = tr[t3].u1 = t2

    tr[t1].sink, qs[i6].trnum = i6, t1
    tr[t2].sink, qs[i7].trnum = i7, t2
    tr[t3].sink, qs[i4].trnum = i4, t3
    tr[t4].sink, qs[i2].trnum = i2, t4

    s.is_inserted = True
    return root


def _split_at_endpoint(ctx: BuildContext, segnum: int, v: Point, other: Point, root: int):
    """
    Insert vertex v by cutting its trapezoid in two at v.y. The sink of the
    old trapezoid becomes a Y-node over two new sinks. Returns (upper, lower).
    """
    tr = ctx.trapezoids
    qs = ctx.nodes

    tu = locate(ctx, v, other, root)
    tl = ctx.new_trapezoid(tr[tu])
    TU, TL = tr[tu], tr[tl]
    TU.lo = TL.hi = v
    TU.d0, TU.d1 = tl, None
    TL.u0, TL.u1 = tu, None

    for d in (TL.d0, TL.d1):
        if d is not None:
            if tr[d].u0 == tu:
                tr[d].u0 = tl
            if tr[d].u1 == tu:
                tr[d].u1 = tl

    sk = TU.sink
    i1 = ctx.new_node(kind=NodeKind.SINK, trnum=tu, parent=sk)  # upper
    i2 = ctx.new_node(kind=NodeKind.SINK, trnum=tl, parent=sk)  # lower
    node = qs[sk]
    node.kind = NodeKind.Y
    node.yval = v
    node.segnum = segnum
    node.trnum = None
    node.left = i2
    node.right = i1
    TU.sink = i1
    TL.sink = i2
    return tu, tl


def _link_upper(ctx: BuildContext, t: int, tn: int, lo_pt: Point) -> None:
    """Fix the upper neighbours of t (left part) and tn (right part) after a split."""
    tr = ctx.trapezoids
    T, TN = tr[t], tr[tn]

    if T.u0 is not None and T.u1 is not None:
        # continuation of a chain from above
        if T.usave is not None:
            # three upper neighbours
            if T.uside is Side.LEFT:
                TN.u0 = T.u1
                T.u1 = None
                TN.u1 = T.usave
                tr[T.u0].d0 = t
                tr[TN.u0].d0 = tn
                tr[TN.u1].d0 = tn
            else:
                TN.u1 = None
                TN.u0 = T.u1
                T.u1 = T.u0
                T.u0 = T.usave
                tr[T.u0].d0 = t
                tr[T.u1].d0 = t
                tr[TN.u0].d0 = tn
            T.usave = TN.usave = None
        else:
            TN.u0 = T.u1
            T.u1 = TN.u1 = None
            tr[TN.u0].d0 = tn
        return

    # fresh segment or upward cusp
    if T.u0 is None:
        return
    up = tr[T.u0]
    if up.d0 is not None and up.d1 is not None:
        # upward cusp
        rseg = tr[up.d0].rseg
        if rseg is not None and not is_left_of(ctx.segments[rseg], lo_pt):
            T.u0 = T.u1 = TN.u1 = None
            tr[TN.u0].d1 = tn
        else:
            # cusp going leftwards
            TN.u0 = TN.u1 = T.u1 = None
            tr[T.u0].d0 = t
    else:
        up.d0 = t
        up.d1 = tn


def _link_single_lower(ctx: BuildContext, t: int, tn: int, d: int, tlast: int,
                       tribot: bool, bottom_seg: int, hi_pt: Point) -> None:
    """Fix the lower neighbours when exactly one trapezoid d lies below t."""
    tr = ctx.trapezoids
    T, TN = tr[t], tr[tn]

    if equal_to(T.lo, tr[tlast].lo) and tribot:
        # bottom forms a triangle
        if is_left_of(ctx.segments[bottom_seg], hi_pt):
            # L-R downward cusp
            tr[d].u0 = t
            TN.d0 = TN.d1 = None
        else:
            # R-L downward cusp
            tr[d].u1 = tn
            T.d0 = T.d1 = None
    else:
        D = tr[d]
        if D.u0 is not None and D.u1 is not None:
            if D.u0 == t:
                # passes through the left-hand side
                D.usave, D.uside = D.u1, Side.LEFT
            else:
                D.usave, D.uside = D.u0, Side.RIGHT
        D.u0 = t
        D.u1 = tn


def add_segment(ctx: BuildContext, segnum: int) -> None:
    """Insert one segment into an already consistent trapezoidation."""
    segs = ctx.segments
    tr = ctx.trapezoids
    qs = ctx.nodes
    seg = segs[segnum]

    # work with the higher endpoint first
    hi_pt, lo_pt = seg.v0, seg.v1
    hi_root, lo_root = seg.root0, seg.root1
    is_swapped = greater_than(lo_pt, hi_pt)
    if is_swapped:
        hi_pt, lo_pt = lo_pt, hi_pt
        hi_root, lo_root = lo_root, hi_root
    hi_neighbour = seg.next if is_swapped else seg.prev
    lo_neighbour = seg.prev if is_swapped else seg.next

    tritop = segs[hi_neighbour].is_inserted
    if not tritop:
        _, tfirst = _split_at_endpoint(ctx, segnum, hi_pt, lo_pt, hi_root)
    else:
        # topmost trapezoid crossed by the segment
        tfirst = locate(ctx, hi_pt, lo_pt, hi_root)

    tribot = segs[lo_neighbour].is_inserted
    if not tribot:
        tlast, _ = _split_at_endpoint(ctx, segnum, lo_pt, hi_pt, lo_root)
    else:
        # lowermost trapezoid crossed by the segment
        tlast = locate(ctx, lo_pt, hi_pt, lo_root)

    tfirstr = tlastr = None
    t = tfirst
    while t is not None and greater_than_equal_to(tr[t].lo, tr[tlast].lo):
        T = tr[t]
        sk = T.sink
        tn = ctx.new_trapezoid(T)
        i1 = ctx.new_node(kind=NodeKind.SINK, trnum=t, parent=sk)   # left, reuses t
        i2 = ctx.new_node(kind=NodeKind.SINK, trnum=tn, parent=sk)  # right, new
        node = qs[sk]
        node.kind = NodeKind.X
        node.segnum = segnum
        node.trnum = None
        node.left = i1
        node.right = i2

        if t == tfirst:
            tfirstr = tn
        if equal_to(T.lo, tr[tlast].lo):
            tlastr = tn

        TN = tr[tn]
        T.sink = i1
        TN.sink = i2
        t_sav, tn_sav = t, tn

        if T.d0 is None and T.d1 is None:
            raise StructureError(f"segment {segnum}: trapezoid {t} has no lower neighbour")

        if T.d0 is not None and T.d1 is None:
            # only one trapezoid below
            _link_upper(ctx, t, tn, lo_pt)
            _link_single_lower(ctx, t, tn, T.d0, tlast, tribot, lo_neighbour, hi_pt)
            t = T.d0
        elif T.d0 is None and T.d1 is not None:
            _link_upper(ctx, t, tn, lo_pt)
            _link_single_lower(ctx, t, tn, T.d1, tlast, tribot, lo_neighbour, hi_pt)
            t = T.d1
        else:
            # two trapezoids below: find the one the segment goes through
            if fp_equal(T.lo.y, hi_pt.y):
                i_d0 = T.lo.x > hi_pt.x
            else:
                y0 = T.lo.y
                yt = (y0 - hi_pt.y) / (lo_pt.y - hi_pt.y)
                crossing = Point(hi_pt.x + yt * (lo_pt.x - hi_pt.x), y0)
                i_d0 = less_than(crossing, T.lo)

            _link_upper(ctx, t, tn, lo_pt)
            d0, d1 = T.d0, T.d1

            if equal_to(T.lo, tr[tlast].lo) and tribot:
                # only at tlast, when the lower endpoint was already present
                tr[d0].u0, tr[d0].u1 = t, None
                tr[d1].u0, tr[d1].u1 = tn, None
                TN.d0 = d1
                T.d1 = TN.d1 = None
                t = None
            elif i_d0:
                tr[d0].u0, tr[d0].u1 = t, tn
                tr[d1].u0, tr[d1].u1 = tn, None
                T.d1 = None
                t = d0
            else:
                tr[d0].u0, tr[d0].u1 = t, None
                tr[d1].u0, tr[d1].u1 = t, tn
                TN.d0, TN.d1 = d1, None
                t = d1

        tr[t_sav].rseg = segnum
        tr[tn_sav].lseg = segnum

    merge_trapezoids(ctx, segnum, tfirst, tlast, Side.LEFT)
    merge_trapezoids(ctx, segnum, tfirstr, tlastr, Side.RIGHT)
    seg.is_inserted = True


def merge_trapezoids(ctx: BuildContext, segnum: int, tfirst: Optional[int],
                     tlast: Optional[int], side: Side) -> None:
    """
    Merge the trapezoids on one side of a freshly inserted segment that are
    vertically adjacent and bounded by the same two segments. The lower one is
    tombstoned and its parent redirected to the upper one's sink; this works
    because every trapezoid split by the segment has exactly one parent.
    """
    if tfirst is None or tlast is None:
        return
    tr = ctx.trapezoids
    qs = ctx.nodes

    def flanks(i: Optional[int]) -> bool:
        if i is None:
            return False
        return (tr[i].rseg if side is Side.LEFT else tr[i].lseg) == segnum

    t = tfirst
    while t is not None and greater_than_equal_to(tr[t].lo, tr[tlast].lo):
        T = tr[t]
        tnext = T.d0
        if not flanks(tnext):
            tnext = T.d1
            if not flanks(tnext):
                t = tnext
                continue

        TN = tr[tnext]
        if T.lseg != TN.lseg or T.rseg != TN.rseg:
            t = tnext
            continue

        # good neighbours: keep t, drop tnext
        parent = qs[qs[TN.sink].parent]
        if parent.left == TN.sink:
            parent.left = T.sink
        else:
            parent.right = T.sink

        T.d0 = TN.d0
        if T.d0 is not None:
            if tr[T.d0].u0 == tnext:
                tr[T.d0].u0 = t
            elif tr[T.d0].u1 == tnext:
                tr[T.d0].u1 = t
        T.d1 = TN.d1
        if T.d1 is not None:
            if tr[T.d1].u0 == tnext:
                tr[T.d1].u0 = t
            elif tr[T.d1].u1 == tnext:
                tr[T.d1].u1 = t

        T.lo = TN.lo
        TN.state = TrapState.INVALID


def find_new_roots(ctx: BuildContext, segnum: int) -> None:
    """Cache the sinks holding both endpoints of a segment not yet inserted."""
    s = ctx.segments[segnum]
    if s.is_inserted:
        return
    tr = ctx.trapezoids
    s.root0 = tr[locate(ctx, s.v0, s.v1, s.root0)].sink
    s.root1 = tr[locate(ctx, s.v1, s.v0, s.root1)].sink


def construct_trapezoids(ctx: BuildContext, order: Iterable[int]) -> int:
    """Build the trapezoidation of ctx.segments, inserting them in the given order."""
    segs = ctx.segments
    n = len(segs)
    pending = iter(order)

    root = init_query_structure(ctx, next(pending))
    ctx.root = root
    for s in segs:
        s.root0 = s.root1 = root

    phases = logstar(n)
    for h in range(1, phases + 1):
        count = phase_end(n, h) - phase_end(n, h - 1)
        for _ in range(count):
            add_segment(ctx, next(pending))
        for i in range(n):
            find_new_roots(ctx, i)
        logger.debug("phase %d/%d: %d segments inserted", h, phases, phase_end(n, h))

    for segnum in pending:
        add_segment(ctx, segnum)

    ctx.log_usage()
    return root
