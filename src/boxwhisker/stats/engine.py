"""
Box statistics engine (pure numpy).

Turns raw per-group arrays into immutable GroupSummary records:

  1. Parse and sort the points (drop adjacent duplicates on the bucketed path).
  2. Quartiles from the quartile strategy (default: configured q1, 0.5, q3).
  3. Whisker values at the configured low/high whisker quantiles.
  4. Outliers from two OR-combined rules, concatenated without de-duplication:
       a. index walk inward from both ends while v <= low - of / v >= high + of,
          where of = (q3 - q1) * outlier_factor;
       b. every v <= low_whisker or v >= high_whisker.

Strategies are plain callables injected at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

import numpy as np

from boxwhisker.errors import ConfigurationError, DuplicateLabelError
from boxwhisker.stats.quantiles import mean, quantile, sorted_points
from boxwhisker.stats.summary import GroupSummary
from boxwhisker.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class QuantileConfig:
    """Quantile probabilities for whiskers and quartiles.

    Must satisfy 0 <= low_whisker <= q1 <= q3 <= high_whisker <= 1.
    """

    low_whisker: float = 0.05
    q1: float = 0.25
    q3: float = 0.75
    high_whisker: float = 0.95

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.low_whisker, self.q1, self.q3, self.high_whisker)

    def validate(self) -> "QuantileConfig":
        """Raise ConfigurationError unless all probabilities are in [0, 1] and non-decreasing."""
        probs = self.as_tuple()
        for p in probs:
            if not isinstance(p, (int, float)) or not 0.0 <= p <= 1.0:
                raise ConfigurationError(
                    "Quantiles need to be between 0 and 1 and in increasing order from 1st to 4th "
                    f"(got {probs})"
                )
        if not all(a <= b for a, b in zip(probs, probs[1:])):
            raise ConfigurationError(
                "Quantiles need to be between 0 and 1 and in increasing order from 1st to 4th "
                f"(got {probs})"
            )
        return self


@dataclass(frozen=True)
class SummaryInput:
    """What a whisker strategy sees: the group label and its sorted points."""

    label: str
    points: tuple[float, ...]


QuartileStrategy = Callable[[Sequence[float], QuantileConfig], tuple[float, float, float]]
WhiskerStrategy = Callable[[SummaryInput, int], Optional[tuple[int, int]]]


def box_quartiles(points: Sequence[float], quantiles: QuantileConfig) -> tuple[float, float, float]:
    """Default quartiles: (Q(q1), Q(0.5), Q(q3)); [Q(.25), Q(.5), Q(.75)] with default config."""
    return (
        quantile(points, quantiles.q1),
        quantile(points, 0.5),
        quantile(points, quantiles.q3),
    )


def box_whiskers(data: SummaryInput, index: int) -> Optional[tuple[int, int]]:
    """Default whiskers: at the extremes, indexes (0, n - 1)."""
    return (0, len(data.points) - 1)


def classify_outliers(
    points: np.ndarray,
    low_whisker: float,
    high_whisker: float,
    offset: float,
) -> tuple[list[float], tuple[int, int]]:
    """
    Apply both outlier rules and return (outliers, (i, j)).

    ``i`` is the first index the low-end walk did not consume, ``j`` the last index
    the high-end walk did not consume. The two walks may overlap on tiny arrays;
    their output is kept as is, as is the overlap with the value rule.
    """
    n = len(points)
    outliers: list[float] = []

    i = 0
    while i < n and points[i] <= low_whisker - offset:
        outliers.append(float(points[i]))
        i += 1
    j = n - 1
    while j >= 0 and points[j] >= high_whisker + offset:
        outliers.append(float(points[j]))
        j -= 1

    for v in points:
        if v <= low_whisker or v >= high_whisker:
            outliers.append(float(v))

    return outliers, (i, j)


class StatisticsEngine:
    """Builds GroupSummary records from raw arrays.

    Attributes:
        quantiles: Validated QuantileConfig.
        outlier_factor: Multiplier X in of = X * (q3 - q1).
        quartile_strategy: Callable producing (q1, median, q3).
        whisker_strategy: Callable producing whisker indexes on the generic path.
    """

    def __init__(
        self,
        quantiles: Optional[QuantileConfig] = None,
        *,
        outlier_factor: float = 0.0,
        quartile_strategy: QuartileStrategy = box_quartiles,
        whisker_strategy: WhiskerStrategy = box_whiskers,
    ) -> None:
        """Initialize and validate.

        Raises:
            ConfigurationError: If the quantile probabilities are invalid.
        """
        self.quantiles = (quantiles or QuantileConfig()).validate()
        self.outlier_factor = float(outlier_factor)
        self.quartile_strategy = quartile_strategy
        self.whisker_strategy = whisker_strategy

    def summarize_series(self, label: Any, values: Sequence[Any]) -> GroupSummary:
        """Summarize one time-bucketed group: duplicates dropped, whiskers at the quantiles.

        Raises:
            DataError: If any value is not numeric.
            InsufficientDataError: If there are no values.
        """
        points = sorted_points(values, unique=True)
        return self._summarize(str(label), points, whisker_indexes=None, from_quantiles=True)

    def summarize_points(self, label: Any, values: Sequence[Any], index: int = 0) -> GroupSummary:
        """Summarize one group on the generic path: duplicates kept, whiskers from the strategy.

        Raises:
            DataError: If any value is not numeric.
            InsufficientDataError: If there are no values.
        """
        points = sorted_points(values, unique=False)
        whisker_indexes = None
        if points.size:
            whisker_indexes = self.whisker_strategy(
                SummaryInput(label=str(label), points=tuple(float(p) for p in points)),
                index,
            )
        return self._summarize(str(label), points, whisker_indexes=whisker_indexes, from_quantiles=False)

    def summarize_groups(
        self,
        groups: Mapping[Any, Sequence[Any]],
        *,
        unique: bool = True,
    ) -> list[GroupSummary]:
        """Summarize every group in order, skipping groups with no points.

        Args:
            groups: Label -> raw values.
            unique: True for the time-bucketed path, False for the generic path.

        Raises:
            DataError: If any value in any group is not numeric. No summaries are
                returned in that case.
            DuplicateLabelError: If two group keys have the same string form
                (``1`` and ``"1"``).
        """
        seen: dict[str, Any] = {}
        for label in groups:
            text = str(label)
            if text in seen:
                raise DuplicateLabelError(
                    f"group labels {seen[text]!r} and {label!r} both render as {text!r}"
                )
            seen[text] = label

        summaries: list[GroupSummary] = []
        for index, (label, values) in enumerate(groups.items()):
            if len(values) == 0:
                logger.debug(f"group {label!r} has no points, skipping")
                continue
            if unique:
                summaries.append(self.summarize_series(label, values))
            else:
                summaries.append(self.summarize_points(label, values, index))
        return summaries

    def _summarize(
        self,
        label: str,
        points: np.ndarray,
        *,
        whisker_indexes: Optional[tuple[int, int]],
        from_quantiles: bool,
    ) -> GroupSummary:
        q1, med, q3 = self.quartile_strategy(points, self.quantiles)
        low_whisker = quantile(points, self.quantiles.low_whisker)
        high_whisker = quantile(points, self.quantiles.high_whisker)
        offset = (q3 - q1) * self.outlier_factor
        outliers, outlier_indexes = classify_outliers(points, low_whisker, high_whisker, offset)

        if from_quantiles:
            whiskers: Optional[tuple[float, float]] = (low_whisker, high_whisker)
        elif whisker_indexes is None:
            whiskers = None
        else:
            last = len(points) - 1
            lo = min(max(int(whisker_indexes[0]), 0), last)
            hi = min(max(int(whisker_indexes[1]), 0), last)
            whiskers = (float(points[lo]), float(points[hi]))

        return GroupSummary(
            label=label,
            q1=float(q1),
            median=float(med),
            q3=float(q3),
            minimum=float(points[0]),
            maximum=float(points[-1]),
            mean=mean(points),
            low_whisker=low_whisker,
            high_whisker=high_whisker,
            count=int(points.size),
            points=tuple(float(p) for p in points),
            outliers=tuple(outliers),
            outlier_indexes=outlier_indexes,
            whiskers=whiskers,
        )
