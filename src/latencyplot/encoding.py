"""Alignment of reduced series onto one time axis, and its text encoding.

The aligned matrix has one row per reduced point and one column per series
plus a leading time column. Each row carries exactly one series value; all
other series columns hold NaN so the chart can treat every series as an
independent sparse column. Rows are concatenated series by series, not
merged by time.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from latencyplot.algorithms.lttb import ReducedPoint

TIME_LABEL = "Seconds"
MISSING = "NaN"


@dataclass
class PlotData:
    """Aligned matrix plus its column labels.

    Attributes:
        matrix: float64 array of shape (rows, 1 + series); NaN marks missing values.
        labels: ``"Seconds"`` followed by one ``"<target>: <outcome>"`` per series.
    """
    matrix: np.ndarray
    labels: list[str]

    @property
    def series_count(self) -> int:
        return len(self.labels) - 1

    def encode(self) -> str:
        return encode_matrix(self.matrix)


def align(reduced: Sequence[tuple[str, Sequence[ReducedPoint]]]) -> PlotData:
    """Lay out reduced series side by side.

    Args:
        reduced: (label, points) per series, in column order.

    Returns:
        PlotData whose row ``k`` belonging to series ``i`` holds the point's x
        in column 0 and its y in column ``i + 1``.
    """
    columns = 1 + len(reduced)
    rows = sum(len(points) for _, points in reduced)
    matrix = np.full((rows, columns), np.nan, dtype=np.float64)
    labels = [TIME_LABEL]

    row = 0
    for i, (label, points) in enumerate(reduced):
        k = len(points)
        if k:
            block = np.asarray(points, dtype=np.float64).reshape(k, 2)
            matrix[row:row + k, 0] = block[:, 0]
            matrix[row:row + k, i + 1] = block[:, 1]
        row += k
        labels.append(label)

    return PlotData(matrix=matrix, labels=labels)


def format_value(value: float) -> str:
    """Shortest round-trippable text for ``value``; NaN becomes a bare ``NaN`` token."""
    if math.isnan(value):
        return MISSING
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def encode_matrix(matrix: np.ndarray) -> str:
    """Render the matrix as a nested numeric array literal.

    The output is valid JavaScript and is accepted by ``json.loads``.
    """
    if len(matrix) == 0:
        return "[]"
    rows = ("[" + ",".join(format_value(v) for v in r) + "]" for r in matrix.tolist())
    return "[\n  " + ",\n  ".join(rows) + "\n]"


def encode_labels(labels: Sequence[str]) -> str:
    return json.dumps(list(labels))
