"""Tooltip descriptors for rendered elements."""

from __future__ import annotations

from boxwhisker.formatting import TickFormatter, quantile_label
from boxwhisker.render.elements import TooltipItem
from boxwhisker.stats.engine import QuantileConfig


def point_tooltip(label: str, value: float, formatter: TickFormatter) -> list[TooltipItem]:
    """Outlier or raw data point: the group label and the formatted value."""
    return [TooltipItem(display_name=label, value=formatter(value))]


def box_tooltip(
    quartiles: tuple[float, float, float],
    quantiles: QuantileConfig,
    formatter: TickFormatter,
) -> list[TooltipItem]:
    """Box: upper quartile, median, lower quartile (top to bottom)."""
    q1, med, q3 = quartiles
    return [
        TooltipItem(display_name=quantile_label(quantiles.q3), value=formatter(q3)),
        TooltipItem(display_name="median", value=formatter(med)),
        TooltipItem(display_name=quantile_label(quantiles.q1), value=formatter(q1)),
    ]


def mean_tooltip(value: float, formatter: TickFormatter) -> list[TooltipItem]:
    return [TooltipItem(display_name="Mean", value=formatter(value))]


def whisker_tooltip(
    index: int,
    value: float,
    quantiles: QuantileConfig,
    formatter: TickFormatter,
) -> list[TooltipItem]:
    """Whisker line or tick: even index is the low whisker, odd index the high one."""
    probability = quantiles.low_whisker if index % 2 == 0 else quantiles.high_whisker
    return [TooltipItem(display_name=quantile_label(probability), value=formatter(value))]
