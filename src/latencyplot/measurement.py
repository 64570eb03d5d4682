"""Measurement record consumed by the latency plot.

A Measurement is one result of a load-test request: which target it hit,
when it was sent, how long it took and whether it failed. Only ``target``,
``timestamp``, ``latency`` and ``error`` drive the plot; the remaining fields
are carried through untouched for callers that want them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True)
class Measurement:
    """One timestamped latency observation.

    Attributes:
        target: Name the measurement is grouped by (e.g. the attack name).
        timestamp: When the request was issued. ``pandas.Timestamp`` is
            accepted as well and keeps nanosecond precision.
        latency: Request duration as a ``timedelta`` (or ``pandas.Timedelta``).
        error: Error text; empty string means the request succeeded.
    """
    target: str
    timestamp: datetime
    latency: timedelta
    error: str = ""
    code: int = 0
    seq: int = 0
    method: str = ""
    url: str = ""
    bytes_in: int = 0
    bytes_out: int = 0

    @property
    def is_error(self) -> bool:
        return bool(self.error)

    @property
    def value_ms(self) -> float:
        """Latency in milliseconds."""
        return float(self.latency / _ONE_MS)

    def elapsed_ms(self, origin: Optional[datetime]) -> int:
        """Whole milliseconds between ``origin`` and this measurement, truncated."""
        if origin is None:
            return 0
        delta = self.timestamp - origin
        if delta < timedelta(0):
            return -int(-delta // _ONE_MS)
        return int(delta // _ONE_MS)
