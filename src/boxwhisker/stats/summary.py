"""Immutable records produced by the statistics engine.

GroupSummary holds everything needed to draw one box; PlotDataset bundles the
summaries of one render cycle with the chart titles and an optional goal line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class GroupSummary:
    """Box-and-whisker statistics for one group.

    ``points`` is sorted ascending. On the time-bucketed path adjacent duplicates
    are removed; the generic path keeps them.

    ``low_whisker``/``high_whisker`` are the configured whisker quantiles. They are
    not guaranteed to bracket [q1, q3] when a custom quartile strategy is used.

    ``whiskers`` is the pair drawn as whisker lines, or None when no whiskers
    should be drawn.

    ``outliers`` may hold the same value more than once: the index walk and the
    value rule are concatenated without de-duplication.
    """

    label: str
    q1: float
    median: float
    q3: float
    minimum: float
    maximum: float
    mean: float
    low_whisker: float
    high_whisker: float
    count: int
    points: tuple[float, ...]
    outliers: tuple[float, ...]
    outlier_indexes: tuple[int, int]
    whiskers: Optional[tuple[float, float]] = None

    @property
    def quartiles(self) -> tuple[float, float, float]:
        """(q1, median, q3) in drawing order."""
        return (self.q1, self.median, self.q3)

    def non_outliers(self) -> list[float]:
        """Distinct points that are not flagged as outliers, ascending."""
        flagged = set(self.outliers)
        return sorted({p for p in self.points if p not in flagged})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "label": self.label,
            "q1": self.q1,
            "median": self.median,
            "q3": self.q3,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "mean": self.mean,
            "low_whisker": self.low_whisker,
            "high_whisker": self.high_whisker,
            "count": self.count,
            "points": list(self.points),
            "outliers": list(self.outliers),
            "outlier_indexes": list(self.outlier_indexes),
            "whiskers": list(self.whiskers) if self.whiskers is not None else None,
        }


@dataclass(frozen=True)
class PlotDataset:
    """All summaries of one render cycle plus titles and goal."""

    title: str = ""
    x_axis_title: str = ""
    y_axis_title: str = ""
    groups: tuple[GroupSummary, ...] = field(default_factory=tuple)
    goal: Optional[float] = None

    @property
    def labels(self) -> list[str]:
        return [g.label for g in self.groups]
