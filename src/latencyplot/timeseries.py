"""Per-target, per-outcome latency series.

This module defines the Outcome enum, the Sample tuple, the append-only
TimeSeries and the SeriesGroup that routes measurements of one target into
its OK or Error series.
"""

from __future__ import annotations

from array import array
from datetime import datetime
from enum import Enum
from typing import Iterator, NamedTuple, Optional

import numpy as np

from latencyplot.measurement import Measurement
from latencyplot.utils.logging import get_logger

logger = get_logger(__name__)


class Outcome(Enum):
    """Whether a measurement succeeded or failed."""
    OK = "OK"
    ERROR = "Error"


class Sample(NamedTuple):
    elapsed_ms: int
    value: float


class TimeSeries:
    """Append-only, time-ordered samples of one (target, outcome) stream.

    Samples are kept in two typed buffers so hundreds of thousands of points
    stay compact. ``finish()`` freezes the buffers into numpy arrays; after
    that the series is read-only.

    Attributes:
        target: Target name the series belongs to.
        outcome: OK or ERROR.
        began: Origin instant; elapsed times are measured from it.
    """

    def __init__(self, target: str, outcome: Outcome, began: datetime) -> None:
        self.target = target
        self.outcome = outcome
        self.began = began
        self._elapsed = array("q")
        self._values = array("d")
        self._finished = False

    @property
    def label(self) -> str:
        return f"{self.target}: {self.outcome.value}"

    @property
    def finished(self) -> bool:
        return self._finished

    def add(self, elapsed_ms: int, value: float) -> None:
        """Append one sample.

        Raises:
            RuntimeError: If the series was already finished.
        """
        if self._finished:
            raise RuntimeError(f"series {self.label!r} is finished; no more samples accepted")
        self._elapsed.append(elapsed_ms)
        self._values.append(value)

    def finish(self) -> None:
        """Close the series for writing. Idempotent."""
        if self._finished:
            return
        self._elapsed = np.array(self._elapsed, dtype=np.int64)
        self._values = np.array(self._values, dtype=np.float64)
        self._finished = True

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Sample]:
        for t, v in zip(self._elapsed, self._values):
            yield Sample(int(t), float(v))

    def points(self) -> Iterator[tuple[float, float]]:
        """Yield (seconds, value) pairs in insertion order."""
        for t, v in zip(self._elapsed, self._values):
            yield int(t) / 1000.0, float(v)

    def __repr__(self) -> str:
        return f"TimeSeries({self.label!r}, n={len(self)})"


class SeriesGroup:
    """The OK and Error series of a single target.

    Either series exists only once a measurement with that outcome was routed.
    """

    def __init__(self, target: str) -> None:
        self.target = target
        self.ok: Optional[TimeSeries] = None
        self.error: Optional[TimeSeries] = None

    def route(self, measurement: Measurement) -> TimeSeries:
        """Append ``measurement`` to its outcome's series, creating it on first use."""
        if measurement.is_error:
            if self.error is None:
                self.error = self._create(Outcome.ERROR, measurement)
            series = self.error
        else:
            if self.ok is None:
                self.ok = self._create(Outcome.OK, measurement)
            series = self.ok

        series.add(measurement.elapsed_ms(series.began), measurement.value_ms)
        return series

    def _create(self, outcome: Outcome, measurement: Measurement) -> TimeSeries:
        logger.debug(f"new series {self.target!r}/{outcome.value} starting at {measurement.timestamp}")
        return TimeSeries(self.target, outcome, measurement.timestamp)

    def series(self) -> list[TimeSeries]:
        """Live series, OK before Error."""
        return [s for s in (self.ok, self.error) if s is not None]
