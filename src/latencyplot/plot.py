"""Latency-over-time plot of load-test measurements.

LatencyPlot is driven in three strictly sequential phases:

1. ``add()`` every measurement (routed into per-target OK/Error series),
2. ``close()`` once,
3. ``build_plot_data()`` and/or ``write_to()``.

Series are ordered by target name, OK before Error, so the column order of
the output is the same on every run.
"""

from __future__ import annotations

from typing import BinaryIO, Iterable, Optional

from latencyplot.algorithms.lttb import MIN_THRESHOLD
from latencyplot.encoding import PlotData, align
from latencyplot.errors import ReductionError
from latencyplot.measurement import Measurement
from latencyplot.reducer import reduce_all
from latencyplot.render import PlotOptions, PlotRenderer
from latencyplot.timeseries import SeriesGroup, TimeSeries
from latencyplot.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 4000


class LatencyPlot:
    """Aggregates measurements into downsampled, aligned latency series.

    Attributes:
        title: Plot title.
        threshold: Maximum number of points kept per series.
        options: Display options handed to the renderer untouched.
    """

    def __init__(
        self,
        title: str,
        threshold: int = DEFAULT_THRESHOLD,
        *,
        options: Optional[PlotOptions] = None,
        renderer: Optional[PlotRenderer] = None,
    ) -> None:
        """
        Raises:
            ReductionError: If threshold is below 3.
        """
        if threshold < MIN_THRESHOLD:
            raise ReductionError(f"threshold must be >= {MIN_THRESHOLD}, got {threshold}")
        self.title = title
        self.threshold = threshold
        self.options = options if options is not None else PlotOptions(title=title)
        self._renderer = renderer
        self._groups: dict[str, SeriesGroup] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, measurement: Measurement) -> None:
        """Route one measurement into its target's OK or Error series."""
        if self._closed:
            raise RuntimeError("cannot add measurements to a closed plot")
        group = self._groups.get(measurement.target)
        if group is None:
            group = SeriesGroup(measurement.target)
            self._groups[measurement.target] = group
        group.route(measurement)

    def add_all(self, measurements: Iterable[Measurement]) -> int:
        """Add every measurement; returns how many were added."""
        count = 0
        for m in measurements:
            self.add(m)
            count += 1
        return count

    def close(self) -> None:
        """Mark the end of input. Must be called exactly once."""
        if self._closed:
            raise RuntimeError("plot is already closed")
        for s in self.series():
            s.finish()
        self._closed = True
        logger.info(f"closed plot {self.title!r}: {len(self._groups)} targets, {len(self.series())} series")

    def series(self) -> list[TimeSeries]:
        """Live series sorted by target name, OK before Error."""
        out: list[TimeSeries] = []
        for target in sorted(self._groups):
            out.extend(self._groups[target].series())
        return out

    def build_plot_data(self) -> PlotData:
        """Downsample every series and align them on one time axis.

        Raises:
            RuntimeError: If the plot is not closed yet.
            ReductionError: If any series fails to reduce.
        """
        if not self._closed:
            raise RuntimeError("close() the plot before building its data")
        reduced = reduce_all(self.series(), self.threshold)
        return align([(s.label, points) for s, points in reduced])

    def write_to(self, sink: BinaryIO) -> int:
        """Render the complete HTML document into ``sink``.

        Returns:
            Number of bytes written.

        Raises:
            ReductionError: If building the plot data fails; nothing is written.
            SinkError: If the sink fails, carrying the partial byte count.
        """
        plot_data = self.build_plot_data()
        if self._renderer is None:
            self._renderer = PlotRenderer()
        return self._renderer.write(sink, plot_data.encode(), plot_data.labels, self.options)
