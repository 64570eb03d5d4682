"""HTML rendering of an aligned latency plot.

The rendered document is self-contained: it embeds the plotly.js bundle, the
display options as JSON and the encoded data matrix. The Jinja2 environment
and the chart assets are explicit objects built once by the caller and passed
in; nothing here is a module-level singleton.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, BinaryIO, Iterator, Optional, Sequence

from jinja2 import Environment, PackageLoader, select_autoescape
from plotly.offline import get_plotlyjs

from latencyplot.errors import SinkError
from latencyplot.utils.logging import get_logger

logger = get_logger(__name__)

TEMPLATE_NAME = "plot.html"
LEGEND_MODES = ("always", "onmouseover", "follow", "never")


@dataclass
class PlotOptions:
    """Display options passed through to the chart unchanged."""
    title: str = "Latency plot"
    xlabel: str = "Seconds elapsed"
    ylabel: str = "Latency (ms)"
    legend: str = "always"
    log_scale: bool = True
    stroke_width: float = 1.3

    def to_json_dict(self, labels: Sequence[str] = ()) -> dict[str, Any]:
        """Chart options keyed the way the page script reads them."""
        return {
            "title": self.title,
            "labels": list(labels),
            "xlabel": self.xlabel,
            "ylabel": self.ylabel,
            "legend": self.legend,
            "logScale": self.log_scale,
            "strokeWidth": self.stroke_width,
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlotOptions":
        """Build options from a dict, falling back to defaults for missing keys.

        Raises:
            ValueError: If ``legend`` is not a known legend mode.
        """
        defaults = cls()
        legend = str(data.get("legend", defaults.legend))
        if legend not in LEGEND_MODES:
            raise ValueError(f"legend must be one of {LEGEND_MODES}, got {legend!r}")
        return cls(
            title=str(data.get("title", defaults.title)),
            xlabel=str(data.get("xlabel", defaults.xlabel)),
            ylabel=str(data.get("ylabel", defaults.ylabel)),
            legend=legend,
            log_scale=bool(data.get("log_scale", defaults.log_scale)),
            stroke_width=float(data.get("stroke_width", defaults.stroke_width)),
        )


@dataclass(frozen=True)
class PlotAssets:
    """JavaScript embedded into every rendered page."""
    chart_js: str

    @classmethod
    def from_plotly(cls) -> "PlotAssets":
        """Assets backed by the plotly.js bundle that ships with the plotly package."""
        return cls(chart_js=get_plotlyjs())


class CountingWriter:
    """Wraps a binary sink and counts the bytes it accepts."""

    def __init__(self, sink: BinaryIO) -> None:
        self.sink = sink
        self.n = 0

    def write(self, data: bytes) -> int:
        view = memoryview(data)
        while view:
            written = self.sink.write(view)
            if written is None:
                written = len(view)
            if written <= 0:
                raise OSError("sink accepted no bytes")
            self.n += written
            view = view[written:]
        return len(data)


def default_environment() -> Environment:
    return Environment(
        loader=PackageLoader("latencyplot", "templates"),
        autoescape=select_autoescape(["html"]),
    )


class PlotRenderer:
    """Renders plot data into an HTML document.

    Attributes:
        assets: Chart JavaScript embedded in the page.
        environment: Jinja2 environment the page template is loaded from.
    """

    def __init__(
        self,
        assets: Optional[PlotAssets] = None,
        environment: Optional[Environment] = None,
    ) -> None:
        self.assets = assets if assets is not None else PlotAssets.from_plotly()
        self.environment = environment if environment is not None else default_environment()
        self._template = self.environment.get_template(TEMPLATE_NAME)

    def render_chunks(self, data: str, labels: Sequence[str], options: PlotOptions) -> Iterator[str]:
        """Stream the document text."""
        return self._template.generate(
            title=options.title,
            chart_js=self.assets.chart_js,
            opts=options.to_json_dict(labels),
            data=data,
        )

    def render(self, data: str, labels: Sequence[str], options: PlotOptions) -> str:
        return "".join(self.render_chunks(data, labels, options))

    def write(self, sink: BinaryIO, data: str, labels: Sequence[str], options: PlotOptions) -> int:
        """Write the UTF-8 document to ``sink``.

        Returns:
            Number of bytes written.

        Raises:
            SinkError: If the sink fails; ``bytes_written`` holds the count the
                sink accepted before failing.
        """
        cw = CountingWriter(sink)
        for chunk in self.render_chunks(data, labels, options):
            try:
                cw.write(chunk.encode("utf-8"))
            except (OSError, ValueError) as e:
                # ValueError: write to a closed file object
                raise SinkError(f"writing plot failed: {e}", bytes_written=cw.n) from e
        logger.debug(f"wrote {cw.n} bytes of plot {options.title!r}")
        return cw.n
