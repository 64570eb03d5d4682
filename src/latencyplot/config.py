"""
Latency plot config persistence (platformdirs + JSON).

Persisted items (schema v1):
- threshold: maximum points per downsampled series
- title: default plot title
- options: PlotOptions dict representation

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from latencyplot.algorithms.lttb import MIN_THRESHOLD
from latencyplot.plot import DEFAULT_THRESHOLD, LatencyPlot
from latencyplot.render import PlotOptions, PlotRenderer
from latencyplot.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

DEFAULT_TITLE = "Latency plot"


@dataclass
class PlotConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly: primitives, lists, dicts.
    """
    schema_version: int = SCHEMA_VERSION
    threshold: int = DEFAULT_THRESHOLD
    title: str = DEFAULT_TITLE
    options: Dict[str, Any] = field(default_factory=dict)

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "threshold": self.threshold,
            "title": self.title,
            "options": self.options,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "PlotConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - falls back to defaults for missing or invalid values
        """
        try:
            schema_version = int(d.get("schema_version", -1))
        except (TypeError, ValueError):
            logger.warning(f"schema_version {d.get('schema_version')!r} is not an integer")
            schema_version = -1

        threshold = DEFAULT_THRESHOLD
        if "threshold" in d:
            try:
                threshold = int(d["threshold"])
            except (TypeError, ValueError):
                logger.warning(f"threshold {d['threshold']!r} is not an integer, using {DEFAULT_THRESHOLD}")
                threshold = DEFAULT_THRESHOLD
            if threshold < MIN_THRESHOLD:
                logger.warning(f"threshold {threshold} is below {MIN_THRESHOLD}, using {DEFAULT_THRESHOLD}")
                threshold = DEFAULT_THRESHOLD

        title = str(d.get("title", DEFAULT_TITLE))

        options: Dict[str, Any] = {}
        raw_options = d.get("options", {})
        if isinstance(raw_options, dict):
            options = dict(raw_options)
        else:
            logger.warning("options is not a dict, using empty dict")

        known_keys = {"schema_version", "threshold", "title", "options"}
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in latency plot config, ignoring")

        return cls(
            schema_version=schema_version,
            threshold=threshold,
            title=title,
            options=options,
        )


class PlotConfig:
    """
    Manager for loading/saving PlotConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[PlotConfigData] = None):
        self.path = path
        self.data = data if data is not None else PlotConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = "latencyplot",
        filename: str = "plot_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/latencyplot/plot_config.json
        Linux:   ~/.config/latencyplot/plot_config.json
        Windows: %APPDATA%\\latencyplot\\plot_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "latencyplot",
        filename: str = "plot_config.json",
        app_author: str | None = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "PlotConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        default_data = PlotConfigData(schema_version=schema_version)

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"Latency plot config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Latency plot config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading latency plot config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

        if not isinstance(parsed, dict):
            logger.warning(f"Latency plot config file at {path} does not contain a dict, using defaults")
            return cls(path=path, data=default_data)

        loaded = PlotConfigData.from_json_dict(parsed)
        if loaded.schema_version != schema_version:
            if reset_on_version_mismatch:
                logger.warning(
                    f"Latency plot config schema version mismatch: loaded={loaded.schema_version}, "
                    f"expected={schema_version}, resetting to defaults"
                )
                return cls(path=path, data=default_data)
            loaded.schema_version = schema_version

        return cls(path=path, data=loaded)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data.to_json_dict(), indent=2), encoding="utf-8")
            logger.info(f"Saved latency plot config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving latency plot config to {self.path}: {e}")
            raise

    def get_threshold(self) -> int:
        return self.data.threshold

    def set_threshold(self, threshold: int) -> None:
        """Set the downsample threshold.

        Raises:
            ValueError: If threshold is below 3.
        """
        if threshold < MIN_THRESHOLD:
            raise ValueError(f"threshold must be >= {MIN_THRESHOLD}, got {threshold}")
        self.data.threshold = int(threshold)

    def get_plot_options(self) -> PlotOptions:
        """PlotOptions from config; invalid stored options fall back to defaults."""
        raw = {"title": self.data.title, **self.data.options}
        try:
            return PlotOptions.from_dict(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid plot options in config: {e}, using defaults")
            return PlotOptions(title=self.data.title)

    def set_plot_options(self, options: PlotOptions) -> None:
        d = options.to_dict()
        self.data.title = d.pop("title")
        self.data.options = d

    def make_plot(self, title: Optional[str] = None, renderer: Optional[PlotRenderer] = None) -> LatencyPlot:
        """Build a LatencyPlot from this config."""
        options = self.get_plot_options()
        if title is not None:
            options.title = title
        return LatencyPlot(options.title, self.data.threshold, options=options, renderer=renderer)
