"""Exception types raised by latencyplot."""

from __future__ import annotations


class LatencyPlotError(Exception):
    """Base class for latencyplot errors."""


class ReductionError(LatencyPlotError, ValueError):
    """Downsampling failed: bad threshold or a broken input contract.

    Fatal to a whole plot build; no partial matrix is ever returned.
    """


class SinkError(LatencyPlotError, OSError):
    """The output sink failed while the plot document was being written.

    Attributes:
        bytes_written: Number of bytes the sink accepted before failing.
    """

    def __init__(self, message: str, bytes_written: int) -> None:
        super().__init__(message)
        self.bytes_written = bytes_written

    def __str__(self) -> str:
        return f"{self.args[0]} (after {self.bytes_written} bytes)"
