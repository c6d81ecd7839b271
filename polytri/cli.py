#!/usr/bin/env python3
"""
Seidel trapezoidation-based polygon triangulation (command line).

Reads a .poly file (one contour) or a contour file (outer boundary followed
by holes), triangulates it and prints one key-value summary line:

    seidel,vertices=N,contours=C,triangles=M,time_ms=T
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import TriangulationConfig
from .errors import DegenerateInputError, TriangulationError
from .polygon import is_point_inside_polygon, triangulate_contours
from .polyio import load_polygon, write_mesh_json, write_triangulation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Seidel polygon triangulation')
    parser.add_argument('--input', '-i', required=True, type=Path, help='Input polygon file')
    parser.add_argument('--output', '-o', type=Path, help='Output triangulation file (.tri)')
    parser.add_argument('--json', type=Path, help='Write the mesh as JSON vertices/indices')
    parser.add_argument('--format', choices=['poly', 'contours'],
                        help='Input format (default: poly for .poly files, contours otherwise)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the segment insertion order')
    parser.add_argument('--fix-winding', action='store_true',
                        help='Reorient contours with the wrong winding instead of failing')
    parser.add_argument('--inside', nargs=2, type=float, action='append', metavar=('X', 'Y'),
                        help='Report whether the point lies inside the polygon (repeatable)')
    parser.add_argument('--plot', type=Path, help='Save a PNG of the triangulation')
    parser.add_argument('--plot-trapezoids', action='store_true',
                        help='Overlay the trapezoidal decomposition on the plot')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )
    config = TriangulationConfig(seed=args.seed, fix_winding=args.fix_winding)

    try:
        contours = load_polygon(args.input, args.format)
        n = sum(len(c) for c in contours)

        start = time.perf_counter()
        tri = triangulate_contours(contours, config=config)
        end = time.perf_counter()
    except (DegenerateInputError, OSError, ValueError) as e:
        logger.error("invalid input %s: %s", args.input, e)
        return 2
    except TriangulationError as e:
        logger.error("triangulation failed: %s", e)
        return 1

    elapsed_ms = (end - start) * 1000
    vertices = [p for c in contours for p in c]

    if args.output:
        write_triangulation(vertices, tri.triangles, args.output)
    if args.json:
        write_mesh_json(vertices, tri.triangles, args.json)
    if args.plot:
        from .plot import save_triangulation_png
        save_triangulation_png(contours, tri, args.plot, show_trapezoids=args.plot_trapezoids)

    print(f"seidel,vertices={n},contours={len(contours)},triangles={len(tri.triangles)},time_ms={elapsed_ms}")
    for x, y in args.inside or []:
        result = is_point_inside_polygon((x, y), tri.structure)
        print(f"inside,x={x},y={y},result={result}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
