"""Per-series downsampling."""

from __future__ import annotations

from typing import Iterable

from latencyplot.algorithms.lttb import ReducedPoint, downsample
from latencyplot.timeseries import TimeSeries
from latencyplot.utils.logging import get_logger

logger = get_logger(__name__)


def reduce_series(series: TimeSeries, threshold: int) -> list[ReducedPoint]:
    """Reduce one series to at most ``threshold`` points.

    Raises:
        ReductionError: If the threshold is below 3 or the series breaks the
            reduction contract.
    """
    points = downsample(len(series), threshold, series.points())
    logger.debug(f"reduced {series.label!r}: {len(series)} -> {len(points)} points")
    return points


def reduce_all(
    series: Iterable[TimeSeries], threshold: int
) -> list[tuple[TimeSeries, list[ReducedPoint]]]:
    """Reduce every non-empty series in order.

    The first failure propagates; nothing is returned for the others.
    """
    reduced = []
    for s in series:
        if len(s) == 0:
            continue
        reduced.append((s, reduce_series(s, threshold)))
    return reduced
