"""Unit tests for PlotRenderer, PlotOptions and sink handling."""

import io
import json
import re

import pytest

from latencyplot.errors import SinkError
from latencyplot.render import CountingWriter, PlotAssets, PlotOptions


class FailingSink:
    """Accepts up to ``limit`` bytes, then raises."""

    def __init__(self, limit):
        self.limit = limit
        self.buf = bytearray()

    def write(self, data):
        room = self.limit - len(self.buf)
        if room <= 0:
            raise OSError("disk full")
        chunk = bytes(data[:room])
        self.buf += chunk
        return len(chunk)


class TrickleSink:
    """Accepts at most 7 bytes per call, like a short-writing raw stream."""

    def __init__(self):
        self.buf = bytearray()

    def write(self, data):
        chunk = bytes(data[:7])
        self.buf += chunk
        return len(chunk)


def _opts_from_html(text):
    match = re.search(r"var opts = (.*);\n", text)
    assert match is not None
    return json.loads(match.group(1))


def test_plot_options_pass_through(stub_renderer):
    """Display options reach the page unchanged, with the labels."""
    options = PlotOptions(title="run", legend="never", log_scale=False, stroke_width=2.5)
    text = stub_renderer.render("[]", ["Seconds", "A: OK"], options)
    opts = _opts_from_html(text)
    assert opts == {
        "title": "run",
        "labels": ["Seconds", "A: OK"],
        "xlabel": "Seconds elapsed",
        "ylabel": "Latency (ms)",
        "legend": "never",
        "logScale": False,
        "strokeWidth": 2.5,
    }


def test_data_is_embedded_verbatim(stub_renderer):
    data = "[\n  [0,1,NaN],\n  [0,NaN,2]\n]"
    text = stub_renderer.render(data, ["Seconds", "A: OK", "A: Error"], PlotOptions())
    assert f"var data = {data};" in text


def test_write_counts_bytes(stub_renderer):
    sink = io.BytesIO()
    n = stub_renderer.write(sink, "[]", ["Seconds"], PlotOptions(title="Latência"))
    assert n == len(sink.getvalue())
    assert "Latência" in sink.getvalue().decode("utf-8")


def test_write_handles_short_writes(stub_renderer):
    sink = TrickleSink()
    n = stub_renderer.write(sink, "[]", ["Seconds"], PlotOptions())
    assert n == len(sink.buf)
    assert bytes(sink.buf).decode("utf-8") == stub_renderer.render("[]", ["Seconds"], PlotOptions())


def test_sink_failure_reports_partial_count(stub_renderer):
    """SinkError carries the bytes the sink accepted and chains its error."""
    sink = FailingSink(limit=25)
    with pytest.raises(SinkError) as exc_info:
        stub_renderer.write(sink, "[]", ["Seconds"], PlotOptions())
    assert exc_info.value.bytes_written == 25
    assert len(sink.buf) == 25
    assert isinstance(exc_info.value.__cause__, OSError)
    assert "after 25 bytes" in str(exc_info.value)


def test_closed_sink_raises_sink_error(stub_renderer):
    sink = io.BytesIO()
    sink.close()
    with pytest.raises(SinkError) as exc_info:
        stub_renderer.write(sink, "[]", ["Seconds"], PlotOptions())
    assert exc_info.value.bytes_written == 0


def test_counting_writer_rejects_stalled_sink():
    class Stalled:
        def write(self, data):
            return 0

    with pytest.raises(OSError):
        CountingWriter(Stalled()).write(b"abc")


def test_plot_options_from_dict_defaults_and_validation():
    assert PlotOptions.from_dict({}) == PlotOptions()
    assert PlotOptions.from_dict({"log_scale": False}).log_scale is False
    with pytest.raises(ValueError):
        PlotOptions.from_dict({"legend": "sometimes"})


def test_plotly_assets_bundle():
    """Default assets embed the plotly.js bundle from the plotly package."""
    assets = PlotAssets.from_plotly()
    assert "Plotly" in assets.chart_js
    assert len(assets.chart_js) > 100_000
