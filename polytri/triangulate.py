"""
Linear-time triangulation of y-monotone polygons.

The loop is split at its top and bottom vertices into a left and a right
chain, the chains are merged into top-to-bottom order, and a stack of
vertices still waiting for a triangle is swept downwards:

- a vertex on the opposite chain from the stack top sees every stacked
  vertex, so the whole stack is fanned off;
- a vertex on the same chain cuts ears off the stack top while the corner
  there is convex.

An m-vertex loop always yields m - 2 triangles.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .errors import MonotonicityError
from .geometry import Point, cross, greater_than

Triangle = Tuple[int, int, int]

LEFT, RIGHT = 0, 1


def _ccw(points: Sequence[Point], a: int, b: int, c: int) -> Triangle:
    if cross(points[a], points[b], points[c]) < 0:
        return (a, c, b)
    return (a, b, c)


def split_chains(points: Sequence[Point], loop: Sequence[int]) -> Tuple[List[int], List[int]]:
    """
    Split a counter-clockwise loop into its left and right chains, both
    listed top to bottom and both including the top and bottom vertex.
    """
    m = len(loop)
    top = bottom = 0
    for k in range(1, m):
        if greater_than(points[loop[k]], points[loop[top]]):
            top = k
        if greater_than(points[loop[bottom]], points[loop[k]]):
            bottom = k

    # counter-clockwise from the top runs down the left side
    left = [loop[top]]
    k = top
    while k != bottom:
        k = (k + 1) % m
        left.append(loop[k])
    right = [loop[top]]
    k = top
    while k != bottom:
        k = (k - 1) % m
        right.append(loop[k])

    for chain in (left, right):
        for a, b in zip(chain, chain[1:]):
            if not greater_than(points[a], points[b]):
                raise MonotonicityError(f"loop {list(loop)} is not y-monotone at vertex {b}")
    return left, right


def triangulate_monotone(points: Sequence[Point], loop: Sequence[int]) -> List[Triangle]:
    """Triangulate one y-monotone loop; triangles come out counter-clockwise."""
    m = len(loop)
    if m < 3:
        raise MonotonicityError(f"monotone piece with {m} vertices")
    if m == 3:
        return [_ccw(points, loop[0], loop[1], loop[2])]

    left, right = split_chains(points, loop)

    # merge both chains (without their shared ends) in top-to-bottom order
    order = [(left[0], LEFT)]
    i, j = 1, 1
    while i < len(left) - 1 or j < len(right) - 1:
        if j >= len(right) - 1 or (
            i < len(left) - 1 and greater_than(points[left[i]], points[right[j]])
        ):
            order.append((left[i], LEFT))
            i += 1
        else:
            order.append((right[j], RIGHT))
            j += 1
    order.append((left[-1], LEFT))

    triangles: List[Triangle] = []
    stack = [order[0], order[1]]
    for k in range(2, m - 1):
        v, side = order[k]
        if side != stack[-1][1]:
            # opposite chain: fan off the whole stack
            while len(stack) > 1:
                u, _ = stack.pop()
                triangles.append(_ccw(points, v, u, stack[-1][0]))
            stack.pop()
            stack.append(order[k - 1])
            stack.append(order[k])
        else:
            last = stack.pop()
            while stack:
                w = stack[-1][0]
                turn = cross(points[w], points[last[0]], points[v])
                convex = turn > 0 if side == LEFT else turn < 0
                if not convex:
                    break
                triangles.append(_ccw(points, v, last[0], w))
                last = stack.pop()
            stack.append(last)
            stack.append(order[k])

    v = order[-1][0]
    while len(stack) > 1:
        u, _ = stack.pop()
        triangles.append(_ccw(points, v, u, stack[-1][0]))

    if len(triangles) != m - 2:
        raise MonotonicityError(f"loop of {m} vertices gave {len(triangles)} triangles")
    return triangles


def triangulate_monotone_polygons(points: Sequence[Point],
                                  loops: Sequence[Sequence[int]]) -> List[Triangle]:
    triangles: List[Triangle] = []
    for loop in loops:
        triangles.extend(triangulate_monotone(points, loop))
    return triangles
