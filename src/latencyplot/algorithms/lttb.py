"""Largest Triangle Three Buckets (LTTB) downsampling.

Reduces an ordered set of (x, y) points to at most ``threshold`` points while
keeping the visual shape of the curve. The first and last points are always
kept; every bucket in between contributes the point forming the largest
triangle with the previously selected point and the average of the next
bucket.

Reference: Sveinn Steinarsson, "Downsampling Time Series for Visual
Representation", 2013.
"""

from __future__ import annotations

from itertools import chain
from typing import Iterable, NamedTuple

import numpy as np

from latencyplot.errors import ReductionError

MIN_THRESHOLD = 3


class ReducedPoint(NamedTuple):
    x: float
    y: float


def downsample(n: int, threshold: int, points: Iterable[tuple[float, float]]) -> list[ReducedPoint]:
    """Downsample ``n`` points to at most ``threshold`` points.

    Args:
        n: Number of points ``points`` yields.
        threshold: Maximum number of output points, at least 3.
        points: (x, y) pairs with non-decreasing x. Consumed once.

    Returns:
        All points unchanged when ``n <= threshold``, otherwise exactly
        ``threshold`` points including the first and last input points.

    Raises:
        ReductionError: If threshold < 3 or ``points`` does not yield ``n`` items.
    """
    if threshold < MIN_THRESHOLD:
        raise ReductionError(f"threshold must be >= {MIN_THRESHOLD}, got {threshold}")
    if n < 0:
        raise ReductionError(f"point count must be >= 0, got {n}")

    flat = np.fromiter(chain.from_iterable(points), dtype=np.float64)
    if flat.size != 2 * n:
        raise ReductionError(f"expected {n} points, got {flat.size / 2:g}")
    data = flat.reshape(n, 2)
    x, y = data[:, 0], data[:, 1]

    if n <= threshold:
        return [ReducedPoint(float(px), float(py)) for px, py in data]

    every = (n - 2) / (threshold - 2)
    selected = [0]
    a = 0

    for i in range(threshold - 2):
        avg_start = int((i + 1) * every) + 1
        avg_end = min(int((i + 2) * every) + 1, n)
        avg_x = x[avg_start:avg_end].mean()
        avg_y = y[avg_start:avg_end].mean()

        start = int(i * every) + 1
        end = int((i + 1) * every) + 1
        xa, ya = x[a], y[a]
        # twice the triangle area; the factor does not change the argmax
        areas = np.abs((xa - avg_x) * (y[start:end] - ya) - (xa - x[start:end]) * (avg_y - ya))
        a = start + int(np.argmax(areas))
        selected.append(a)

    selected.append(n - 1)
    return [ReducedPoint(float(x[j]), float(y[j])) for j in selected]
