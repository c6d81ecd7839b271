"""
Drawing of triangulations and trapezoidal maps.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import PatchCollection
from matplotlib.patches import Polygon as MplPolygon

from .context import BuildContext
from .geometry import greater_than

TRI_COLOR = '#377eb8'
TRAP_COLOR = '#ff7f00'


def _x_at(seg, y):
    (x0, y0), (x1, y1) = seg.v0, seg.v1
    if y1 == y0:
        return min(x0, x1)
    return x0 + (y - y0) * (x1 - x0) / (y1 - y0)


def trapezoid_outline(ctx: BuildContext, tnum: int):
    """Corner points of a bounded trapezoid, counter-clockwise, or None if it is open."""
    t = ctx.trapezoids[tnum]
    if t.lseg is None or t.rseg is None:
        return None
    lo_y, hi_y = t.lo.y, t.hi.y
    if not (np.isfinite(lo_y) and np.isfinite(hi_y)):
        return None
    left, right = ctx.segments[t.lseg], ctx.segments[t.rseg]
    return np.array([
        (_x_at(left, lo_y), lo_y),
        (_x_at(right, lo_y), lo_y),
        (_x_at(right, hi_y), hi_y),
        (_x_at(left, hi_y), hi_y),
    ])


def plot_triangulation(contours, triangles, ax, title=None, color=TRI_COLOR):
    """Plot a triangulation over its contours; indices refer to the concatenated contours."""
    vertices = np.array([p for c in contours for p in c], dtype=float)
    patches = [MplPolygon(vertices[list(tri)], closed=True) for tri in triangles]
    p = PatchCollection(patches, alpha=0.4, facecolor=color, edgecolor='#333333', linewidth=0.5)
    ax.add_collection(p)

    for contour in contours:
        pts = np.array(contour, dtype=float)
        closed = np.vstack([pts, pts[0]])
        ax.plot(closed[:, 0], closed[:, 1], 'k-', linewidth=1.5)
    ax.scatter(vertices[:, 0], vertices[:, 1], c='black', s=12, zorder=5)

    ax.set_aspect('equal')
    ax.autoscale_view()
    if title:
        ax.set_title(title)


def plot_trapezoids(ctx: BuildContext, ax, inside_only=True, color=TRAP_COLOR):
    """Outline the valid bounded trapezoids; with inside_only, only those in the polygon."""
    patches = []
    for i in ctx.valid_trapezoids():
        t = ctx.trapezoids[i]
        if inside_only:
            if t.rseg is None:
                continue
            s = ctx.segments[t.rseg]
            if not greater_than(s.v1, s.v0):
                continue
        outline = trapezoid_outline(ctx, i)
        if outline is not None:
            patches.append(MplPolygon(outline, closed=True))
    p = PatchCollection(patches, facecolor='none', edgecolor=color, linewidth=0.6, linestyle='--')
    ax.add_collection(p)
    return len(patches)


def save_triangulation_png(contours, triangulation, path, show_trapezoids=False, title=None):
    fig, ax = plt.subplots(figsize=(7, 7))
    plot_triangulation(contours, triangulation.triangles, ax,
                       title=title or f'Seidel: {len(triangulation.triangles)} triangles')
    if show_trapezoids:
        plot_trapezoids(triangulation.structure, ax)
    plt.tight_layout()
    plt.savefig(Path(path), dpi=150, bbox_inches='tight')
    plt.close(fig)
