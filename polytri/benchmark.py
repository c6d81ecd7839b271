#!/usr/bin/env python3
"""
Benchmark runner for the Seidel triangulator.

Times triangulate_contours over several polygon families, sizes and seeds,
checks every result, and fits the empirical scaling law T = a * n^b per
family.

Outputs:
- raw CSV: one row per run
- summary CSV: mean / std per (family, n) with the fitted exponent
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.optimize import curve_fit

from .generators import (comb_polygon, convex_polygon, ensure_ccw, random_polygon,
                         ring_polygon, rotate_points, spiral_polygon)
from .polygon import triangulate_contours
from .validate import expected_triangles

logger = logging.getLogger(__name__)

Contours = List[List[Tuple[float, float]]]

FAMILIES: Dict[str, Callable[[int, int], Contours]] = {
    "convex": lambda n, seed: [rotate_points(convex_polygon(n, 100.0), 0.1 + seed)],
    "random": lambda n, seed: [ensure_ccw(random_polygon(n, seed=seed))],
    "star": lambda n, seed: [rotate_points(spiral_polygon(n), 0.05 * (seed + 1))],
    "comb": lambda n, seed: [comb_polygon(max(1, (n - 4) // 3))],
    "holes": lambda n, seed: ring_polygon(max(n, 8), holes=max(1, n // 50)),
}


def power_law(x, a, b):
    return a * (x ** b)


def log_power_law(x, log_a, b):
    return log_a + b * np.log(x)


def time_one(contours: Contours, seed: int) -> Tuple[float, int]:
    start = time.perf_counter()
    tri = triangulate_contours(contours, seed=seed)
    elapsed_ms = (time.perf_counter() - start) * 1000
    expected = expected_triangles(contours)
    if len(tri.triangles) != expected:
        raise RuntimeError(f"got {len(tri.triangles)} triangles, expected {expected}")
    return elapsed_ms, len(tri.triangles)


def run_benchmark(sizes: List[int], families: List[str], seeds: int = 3) -> pd.DataFrame:
    """One row per (family, size, seed) run."""
    rows = []
    for family in families:
        make = FAMILIES[family]
        for n in sizes:
            for seed in range(seeds):
                contours = make(n, seed)
                time_ms, triangles = time_one(contours, seed)
                rows.append({
                    "family": family,
                    "num_vertices": sum(len(c) for c in contours),
                    "contours": len(contours),
                    "seed": seed,
                    "triangles": triangles,
                    "time_ms": time_ms,
                })
            logger.info("%s n=%d done", family, n)
    return pd.DataFrame(rows)


def fit_scaling_law(n_values, time_values) -> Optional[Dict[str, float]]:
    """
    Fit T = a * n^b by least squares on log T.
    Returns {'a', 'b', 'r2'}, or None with fewer than two usable sizes.
    """
    x = np.asarray(n_values, dtype=float)
    y = np.asarray(time_values, dtype=float)
    keep = y > 0
    x, y = x[keep], y[keep]
    if len(np.unique(x)) < 2:
        return None
    popt, _ = curve_fit(log_power_law, x, np.log(y), p0=[np.log(y[0]), 1])
    log_a_fit, b_fit = popt
    a_fit = np.exp(log_a_fit)

    y_pred = power_law(x, a_fit, b_fit)
    ss_res = np.sum((np.log(y) - np.log(y_pred)) ** 2)
    ss_tot = np.sum((np.log(y) - np.mean(np.log(y))) ** 2)
    r_squared = 1 - (ss_res / ss_tot) if ss_tot > 0 else 0
    return {"a": float(a_fit), "b": float(b_fit), "r2": float(r_squared)}


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    summary = (
        df.groupby(["family", "num_vertices"])["time_ms"]
        .agg(["mean", "std"])
        .reset_index()
        .rename(columns={"mean": "time_ms_mean", "std": "time_ms_std"})
    )
    exponents = {}
    for family, part in summary.groupby("family"):
        fit = fit_scaling_law(part["num_vertices"], part["time_ms_mean"])
        exponents[family] = fit["b"] if fit else np.nan
    summary["exponent"] = summary["family"].map(exponents)
    return summary


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description="Benchmark Seidel polygon triangulation.")
    ap.add_argument("--sizes", nargs="+", type=int, default=[100, 500, 1000, 2000, 5000])
    ap.add_argument("--families", nargs="+", default=list(FAMILIES), choices=list(FAMILIES))
    ap.add_argument("--seeds", type=int, default=3, help="Runs (seeds) per family and size.")
    ap.add_argument("--out-csv", type=Path, default=Path("results") / "benchmark_summary.csv")
    ap.add_argument("--out-raw-csv", type=Path, default=None)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    df = run_benchmark(args.sizes, args.families, seeds=args.seeds)
    summary = summarize(df)

    args.out_csv.parent.mkdir(parents=True, exist_ok=True)
    summary.to_csv(args.out_csv, index=False)
    if args.out_raw_csv is not None:
        args.out_raw_csv.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.out_raw_csv, index=False)

    for row in summary.itertuples(index=False):
        print(f"seidel,family={row.family},vertices={row.num_vertices},"
              f"time_ms={row.time_ms_mean:.3f},exponent={row.exponent:.3f}")
    logger.info("summary written to %s", args.out_csv)


if __name__ == "__main__":
    main()
