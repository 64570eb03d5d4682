"""
latencyplot: downsampled latency-over-time plots of load-test results.

This package provides:
- LatencyPlot: groups measurements per target and outcome, downsamples each
  series with LTTB and aligns them into one sparse matrix
- Readers for CSV and JSON-lines load-test results
- An HTML renderer embedding plotly.js
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from latencyplot.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from latencyplot.utils.logging import configure_logging, get_logger

from latencyplot.encoding import PlotData
from latencyplot.errors import LatencyPlotError, ReductionError, SinkError
from latencyplot.measurement import Measurement
from latencyplot.plot import LatencyPlot
from latencyplot.render import PlotAssets, PlotOptions, PlotRenderer

# NullHandler so records don't reach the root logger when no application
# has configured logging.
_logger = logging.getLogger("latencyplot")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "LatencyPlot",
    "LatencyPlotError",
    "Measurement",
    "PlotAssets",
    "PlotData",
    "PlotOptions",
    "PlotRenderer",
    "ReductionError",
    "SinkError",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
