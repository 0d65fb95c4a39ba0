"""Scales: value -> pixel mapping for boxes and the y axis, band layout for groups.

create_plot_and_axes_scales() derives the box and axis domains from a PlotDataset.
It anchors on the median of all group medians and compresses values far above
the whisker band, so a single large outlier does not squash every box into the
bottom of the chart:

    scale = max(0.30, median_of_medians / max)
    top   = min(max, high_whisker + 0.5 * (high_whisker - median_of_medians))

Domains and ranges must always have the same number of elements; LinearScale
refuses anything else.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from boxwhisker.errors import InsufficientDataError
from boxwhisker.stats.quantiles import median
from boxwhisker.stats.summary import PlotDataset
from boxwhisker.utils.logging import get_logger

logger = get_logger(__name__)

MIN_SCALE = 0.30


class LinearScale:
    """Piecewise-linear mapping from a numeric domain to a numeric range.

    Domain and range need the same length (>= 2). A domain segment of zero width
    maps to the segment's first range value.
    """

    def __init__(self, domain: Sequence[float], range: Sequence[float]) -> None:
        if len(domain) != len(range):
            raise ValueError(
                f"domain and range must have the same length, got {len(domain)} and {len(range)}"
            )
        if len(domain) < 2:
            raise ValueError("domain and range need at least two elements")
        d = [float(v) for v in domain]
        r = [float(v) for v in range]
        if d[-1] < d[0]:
            d.reverse()
            r.reverse()
        self._domain = d
        self._range = r

    @property
    def domain(self) -> tuple[float, ...]:
        return tuple(self._domain)

    @property
    def range(self) -> tuple[float, ...]:
        return tuple(self._range)

    def __call__(self, value: float) -> float:
        d, r = self._domain, self._range
        k = len(d) - 1
        i = bisect_right(d, float(value), 1, k) - 1
        span = d[i + 1] - d[i]
        t = 0.0 if span == 0 else (float(value) - d[i]) / span
        return r[i] + t * (r[i + 1] - r[i])

    def ticks(self, count: int = 10) -> list[float]:
        """Round tick values covering the domain (roughly ``count`` of them)."""
        start, stop = self._domain[0], self._domain[-1]
        span = stop - start
        if span <= 0 or count <= 0 or not math.isfinite(span):
            return [start]
        step = 10 ** math.floor(math.log10(span / count))
        err = count / span * step
        if err <= 0.15:
            step *= 10
        elif err <= 0.35:
            step *= 5
        elif err <= 0.75:
            step *= 2
        first = math.ceil(start / step) * step
        last = math.floor(stop / step) * step + step * 0.5
        return [float(round(v, 10)) for v in np.arange(first, last, step)]


class BandScale:
    """Ordinal band layout (rounded bands with inner and outer padding).

    Positions ``labels`` across ``extent`` the way a rounded ordinal band scale
    does: step = floor(width / (n - padding + 2 * outer_padding)), leftover pixels
    split evenly on both sides, band width = round(step * (1 - padding)).
    """

    def __init__(
        self,
        labels: Sequence[str],
        extent: tuple[float, float],
        padding: float = 0.7,
        outer_padding: float = 0.3,
    ) -> None:
        self.labels = list(labels)
        start, stop = float(extent[0]), float(extent[1])
        reverse = stop < start
        if reverse:
            start, stop = stop, start
        n = len(self.labels)
        if n == 0:
            self._positions: dict[str, float] = {}
            self.bandwidth = 0.0
            self.step = 0.0
            return
        step = math.floor((stop - start) / (n - padding + 2 * outer_padding))
        error = stop - start - (n - padding) * step
        first = start + round(error / 2)
        positions = [first + step * i for i in range(n)]
        if reverse:
            positions.reverse()
        self._positions = dict(zip(self.labels, positions))
        self.step = float(step)
        self.bandwidth = float(round(step * (1 - padding)))

    def position(self, label: str) -> float:
        """Left edge of the band for ``label``. Raises KeyError for unknown labels."""
        return float(self._positions[label])

    def center(self, label: str) -> float:
        return self.position(label) + self.bandwidth / 2


@dataclass(frozen=True)
class ScaleMapping:
    """Domain/range pairs for the box scale and the y-axis scale."""

    box_domain: tuple[float, float]
    box_range: tuple[float, float]
    axis_domain: tuple[float, float]
    axis_range: tuple[float, float]
    scale: float = MIN_SCALE

    def box_scale(self) -> LinearScale:
        return LinearScale(self.box_domain, self.box_range)

    def axis_scale(self) -> LinearScale:
        return LinearScale(self.axis_domain, self.axis_range)


def create_plot_and_axes_scales(
    dataset: PlotDataset,
    height: float,
    top_margin: float,
) -> ScaleMapping:
    """
    Compute the box and y-axis scales for a dataset.

    Args:
        dataset: Summaries of the current cycle (at least one group).
        height: Plot height in pixels.
        top_margin: Top margin in pixels (shifts the axis range).

    Returns:
        ScaleMapping with box_domain == axis_domain == (min, top).

    Raises:
        InsufficientDataError: If the dataset has no groups.
    """
    groups = dataset.groups
    if not groups:
        raise InsufficientDataError("cannot derive scales from a dataset without groups")

    goal = dataset.goal
    lo = goal if goal is not None else math.inf
    hi = goal if goal is not None else -math.inf
    high_whisker = groups[0].high_whisker
    medians = []
    for g in groups:
        medians.append(g.median)
        lo = min(lo, g.minimum)
        hi = max(hi, g.maximum)
        high_whisker = max(high_whisker, g.high_whisker)

    median_of_medians = median(sorted(medians))
    scale = median_of_medians / hi if hi != 0 else MIN_SCALE
    if not scale >= MIN_SCALE:
        scale = MIN_SCALE

    top = min(hi, high_whisker + 0.5 * (high_whisker - median_of_medians))
    height_with_margin = height + top_margin

    logger.debug(
        f"scales: min={lo}, max={hi}, top={top}, median_of_medians={median_of_medians}, scale={scale:.3f}"
    )
    return ScaleMapping(
        box_domain=(lo, top),
        box_range=(float(height), 0.0),
        axis_domain=(lo, top),
        axis_range=(float(height_with_margin), float(top_margin)),
        scale=scale,
    )
