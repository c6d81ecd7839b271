"""
Polygon and triangulation files.

.poly (single contour)          contour file (polygon with holes)
    N                               ncontours
    x0 y0                           npoints
    ...                             x0 y0
                                    ...
                                    npoints
                                    ...

Blank lines and lines starting with '#' are ignored on input.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .errors import DegenerateInputError

Contours = List[List[Tuple[float, float]]]


def _data_lines(path: Path) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        return [ln.strip() for ln in f if ln.strip() and not ln.lstrip().startswith("#")]


def _read_points(lines: List[str], i: int, n: int, path: Path) -> List[Tuple[float, float]]:
    if i + n > len(lines):
        raise DegenerateInputError(f"{path}: expected {n} points, file ends early")
    pts = []
    for line in lines[i:i + n]:
        parts = line.split()
        if len(parts) != 2:
            raise DegenerateInputError(f"{path}: bad point line {line!r}")
        x, y = map(float, parts)
        pts.append((x, y))
    return pts


def read_poly(path: Path) -> Contours:
    lines = _data_lines(Path(path))
    if not lines:
        raise DegenerateInputError(f"{path}: empty file")
    n = int(lines[0])
    return [_read_points(lines, 1, n, path)]


def read_contours(path: Path) -> Contours:
    lines = _data_lines(Path(path))
    if not lines:
        raise DegenerateInputError(f"{path}: empty file")
    ncontours = int(lines[0])
    contours: Contours = []
    i = 1
    for _ in range(ncontours):
        if i >= len(lines):
            raise DegenerateInputError(f"{path}: expected {ncontours} contours")
        npoints = int(lines[i])
        contours.append(_read_points(lines, i + 1, npoints, path))
        i += 1 + npoints
    return contours


def load_polygon(path: Path, fmt: Optional[str] = None) -> Contours:
    """Read a polygon; the format defaults to 'poly' for .poly files, 'contours' otherwise."""
    path = Path(path)
    if fmt is None:
        fmt = "poly" if path.suffix == ".poly" else "contours"
    if fmt == "poly":
        return read_poly(path)
    if fmt == "contours":
        return read_contours(path)
    raise ValueError(f"unknown polygon format: {fmt}")


def write_poly(points: Sequence[Tuple[float, float]], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{len(points)}\n")
        for x, y in points:
            # high precision avoids accidental equal y after rounding
            f.write(f"{x:.17g} {y:.17g}\n")


def write_contours(contours: Sequence[Sequence[Tuple[float, float]]], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"{len(contours)}\n")
        for contour in contours:
            f.write(f"{len(contour)}\n")
            for x, y in contour:
                f.write(f"{x:.17g} {y:.17g}\n")


def write_triangulation(vertices: Sequence[Tuple[float, float]],
                        triangles: Sequence[Tuple[int, int, int]], path: Path) -> None:
    """Write a .tri file: the vertices followed by the triangle index triples."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# vertices\n")
        f.write(f"{len(vertices)}\n")
        for x, y in vertices:
            f.write(f"{x} {y}\n")
        f.write("# triangles\n")
        f.write(f"{len(triangles)}\n")
        for t in triangles:
            f.write(f"{t[0]} {t[1]} {t[2]}\n")


def read_triangulation(path: Path) -> Tuple[List[Tuple[float, float]], List[Tuple[int, int, int]]]:
    lines = _data_lines(Path(path))
    n = int(lines[0])
    pts = _read_points(lines, 1, n, path)
    k = 1 + n
    m = int(lines[k]) if k < len(lines) else 0
    tris = [tuple(map(int, lines[k + 1 + i].split())) for i in range(m)]
    return pts, tris


def mesh_dict(vertices: Sequence[Tuple[float, float]],
              triangles: Sequence[Tuple[int, int, int]]) -> dict:
    """Flat position/index arrays (z = 0) as consumed by WebGL mesh viewers."""
    positions: List[float] = []
    for x, y in vertices:
        positions.extend((x, y, 0.0))
    indices = [i for t in triangles for i in t]
    return {"vertices": positions, "indices": indices}


def write_mesh_json(vertices: Sequence[Tuple[float, float]],
                    triangles: Sequence[Tuple[int, int, int]], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(mesh_dict(vertices, triangles), f)
