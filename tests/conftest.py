# tests/conftest.py
"""Pytest configuration shared by all latencyplot tests."""
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure latencyplot is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def make_measurement():
    """Factory: make_measurement(target, offset_ms, latency_ms, error="")."""
    from latencyplot.measurement import Measurement

    def _make(target: str, offset_ms: float, latency_ms: float, error: str = "") -> Measurement:
        return Measurement(
            target=target,
            timestamp=T0 + timedelta(milliseconds=offset_ms),
            latency=timedelta(milliseconds=latency_ms),
            error=error,
        )

    return _make


@pytest.fixture
def stub_renderer():
    """PlotRenderer with a tiny chart script instead of the plotly.js bundle."""
    from latencyplot.render import PlotAssets, PlotRenderer

    return PlotRenderer(assets=PlotAssets(chart_js="/* chart-js */"))
