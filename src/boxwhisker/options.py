"""
Box visual options and their persistence (platformdirs + JSON).

Persisted items (schema v1):
- options: VisualOptions dict representation

Behavior:
- If the options file is missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded values but update the version
- Unknown keys in loaded JSON are ignored with warnings
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from boxwhisker.stats.engine import QuantileConfig
from boxwhisker.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1


@dataclass
class VisualOptions:
    """User-facing options of the box visual.

    Quantile defaults are 0.05 / 0.25 / 0.75 / 0.95; outlier_factor X flags values
    beyond low_whisker - X * (q3 - q1) and high_whisker + X * (q3 - q1).
    """

    low_whisker: float = 0.05
    q1: float = 0.25
    q3: float = 0.75
    high_whisker: float = 0.95
    outlier_factor: float = 0.0
    y_title: str = ""
    time_bucket: float = 60
    goal: Optional[float] = None

    def quantile_config(self) -> QuantileConfig:
        """QuantileConfig for these options (not validated)."""
        return QuantileConfig(
            low_whisker=self.low_whisker,
            q1=self.q1,
            q3=self.q3,
            high_whisker=self.high_whisker,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize VisualOptions to a JSON-friendly dict."""
        return {
            "low_whisker": self.low_whisker,
            "q1": self.q1,
            "q3": self.q3,
            "high_whisker": self.high_whisker,
            "outlier_factor": self.outlier_factor,
            "y_title": self.y_title,
            "time_bucket": self.time_bucket,
            "goal": self.goal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VisualOptions":
        """
        Tolerant loader:
        - ignores unknown keys (with a warning)
        - falls back to the default for missing or unparseable values
        """
        defaults = cls()
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning(f"Unknown key '{key}' in visual options, ignoring")

        def _float(name: str) -> float:
            try:
                return float(data.get(name, getattr(defaults, name)))
            except (TypeError, ValueError):
                logger.warning(f"Invalid value for '{name}' in visual options, using default")
                return getattr(defaults, name)

        goal = data.get("goal")
        if goal is not None:
            try:
                goal = float(goal)
            except (TypeError, ValueError):
                logger.warning("Invalid value for 'goal' in visual options, ignoring")
                goal = None

        return cls(
            low_whisker=_float("low_whisker"),
            q1=_float("q1"),
            q3=_float("q3"),
            high_whisker=_float("high_whisker"),
            outlier_factor=_float("outlier_factor"),
            y_title=str(data.get("y_title", defaults.y_title) or ""),
            time_bucket=_float("time_bucket"),
            goal=goal,
        )


class OptionsStore:
    """
    Manager for loading/saving VisualOptions to disk.
    """

    def __init__(self, *, path: Path, options: Optional[VisualOptions] = None):
        self.path = path
        self.options = options if options is not None else VisualOptions()

    @staticmethod
    def default_path(
        app_name: str = "boxwhisker",
        filename: str = "visual_options.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/boxwhisker/visual_options.json
        Linux:   ~/.config/boxwhisker/visual_options.json
        Windows: %APPDATA%\\boxwhisker\\visual_options.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        path: Optional[Path] = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
    ) -> "OptionsStore":
        """
        Load options from disk.

        If the file doesn't exist or is unreadable -> defaults.
        If the schema version differs:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded values
        """
        path = path or cls.default_path()
        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"Visual options file not found at {path}, using defaults")
            return cls(path=path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Visual options file at {path} is unreadable: {e}, using defaults")
            return cls(path=path)

        if not isinstance(parsed, dict):
            logger.warning(f"Visual options file at {path} does not contain a dict, using defaults")
            return cls(path=path)

        loaded_version = parsed.get("schema_version", -1)
        if loaded_version != schema_version and reset_on_version_mismatch:
            logger.warning(
                f"Visual options schema version mismatch: loaded={loaded_version}, "
                f"expected={schema_version}, resetting to defaults"
            )
            return cls(path=path)

        raw = parsed.get("options", {})
        if not isinstance(raw, dict):
            logger.warning("options is not a dict, using defaults")
            raw = {}
        return cls(path=path, options=VisualOptions.from_dict(raw))

    def save(self) -> None:
        """Write options to disk."""
        payload: Dict[str, Any] = {
            "schema_version": SCHEMA_VERSION,
            "options": self.options.to_dict(),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            logger.info(f"Saved visual options to {self.path}")
        except OSError as e:
            logger.error(f"Error saving visual options to {self.path}: {e}")
            raise

    def get_options(self) -> VisualOptions:
        return self.options

    def set_options(self, options: VisualOptions) -> None:
        self.options = options
