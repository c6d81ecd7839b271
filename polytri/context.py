"""
Build context: the arenas one triangulation call owns.

Query nodes and trapezoids live in lists and refer to each other by index.
Slots are never reused during a build; a superseded trapezoid stays in its
arena marked INVALID so stale indices remain safe to read.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from .errors import CapacityError, StructureError
from .geometry import BOTTOM, TOP, Point
from .segments import Segment

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    X = auto()      # split by segment: left / right
    Y = auto()      # split by point: right is above, left is below
    SINK = auto()   # leaf, owns one trapezoid


class TrapState(Enum):
    VALID = auto()
    INVALID = auto()


class Side(Enum):
    LEFT = auto()
    RIGHT = auto()


@dataclass(eq=False)
class Node:
    kind: NodeKind = NodeKind.SINK
    segnum: Optional[int] = None
    yval: Optional[Point] = None
    trnum: Optional[int] = None
    left: Optional[int] = None
    right: Optional[int] = None
    parent: Optional[int] = None


@dataclass(eq=False)
class Trapezoid:
    lseg: Optional[int] = None
    rseg: Optional[int] = None
    hi: Point = TOP
    lo: Point = BOTTOM
    u0: Optional[int] = None
    u1: Optional[int] = None
    d0: Optional[int] = None
    d1: Optional[int] = None
    # third upper neighbour while a segment is being threaded through
    usave: Optional[int] = None
    uside: Optional[Side] = None
    sink: Optional[int] = None
    state: TrapState = TrapState.VALID

    @property
    def valid(self) -> bool:
        return self.state is TrapState.VALID


@dataclass(frozen=True)
class Capacity:
    segments: int
    trapezoids: int
    nodes: int

    @classmethod
    def for_segments(cls, n: int, trapezoid_factor: int = 8, node_factor: int = 16,
                     slack: int = 32) -> "Capacity":
        return cls(segments=n, trapezoids=trapezoid_factor * n + slack,
                   nodes=node_factor * n + 2 * slack)


@dataclass(eq=False)
class BuildContext:
    segments: List[Segment]
    capacity: Capacity
    vertex_ids: List[int] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)
    trapezoids: List[Trapezoid] = field(default_factory=list)
    root: Optional[int] = None

    def __post_init__(self):
        if len(self.segments) > self.capacity.segments:
            raise CapacityError("segment", self.capacity.segments)
        if not self.vertex_ids:
            self.vertex_ids = list(range(len(self.segments)))

    @property
    def built(self) -> bool:
        return self.root is not None

    def require_built(self) -> None:
        if self.root is None:
            raise StructureError("query structure has not been built")

    def new_node(self, **kwargs) -> int:
        if len(self.nodes) >= self.capacity.nodes:
            raise CapacityError("node", self.capacity.nodes)
        self.nodes.append(Node(**kwargs))
        return len(self.nodes) - 1

    def new_trapezoid(self, template: Optional[Trapezoid] = None) -> int:
        """Allocate a trapezoid, copying every field of template if given."""
        if len(self.trapezoids) >= self.capacity.trapezoids:
            raise CapacityError("trapezoid", self.capacity.trapezoids)
        t = dataclasses.replace(template) if template is not None else Trapezoid()
        t.state = TrapState.VALID
        self.trapezoids.append(t)
        return len(self.trapezoids) - 1

    def valid_trapezoids(self):
        return [i for i, t in enumerate(self.trapezoids) if t.valid]

    def log_usage(self) -> None:
        logger.debug(
            "arenas: %d/%d trapezoids (%d valid), %d/%d nodes",
            len(self.trapezoids), self.capacity.trapezoids,
            len(self.valid_trapezoids()), len(self.nodes), self.capacity.nodes,
        )
