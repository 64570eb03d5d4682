"""Render a latency plot from a CSV results file.

Usage:
    python examples/plot_results.py results.csv plot.html
"""

import sys
from pathlib import Path

from latencyplot.config import PlotConfig
from latencyplot.results import read_csv_results, results_from_frame
from latencyplot.utils.logging import configure_logging, get_logger

configure_logging(level="INFO")
logger = get_logger(__name__)

src, dst = Path(sys.argv[1]), Path(sys.argv[2])

cfg = PlotConfig.load()
plot = cfg.make_plot(title=src.stem)
count = plot.add_all(results_from_frame(read_csv_results(src)))
plot.close()

with dst.open("wb") as f:
    n = plot.write_to(f)

logger.info(f"{count} results from {src} -> {n} bytes in {dst}")
