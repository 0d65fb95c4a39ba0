"""Box statistics: quantiles, group summaries and the statistics engine."""

from boxwhisker.stats.engine import (
    QuantileConfig,
    StatisticsEngine,
    SummaryInput,
    box_quartiles,
    box_whiskers,
)
from boxwhisker.stats.quantiles import mean, median, quantile
from boxwhisker.stats.summary import GroupSummary, PlotDataset

__all__ = [
    "GroupSummary",
    "PlotDataset",
    "QuantileConfig",
    "StatisticsEngine",
    "SummaryInput",
    "box_quartiles",
    "box_whiskers",
    "mean",
    "median",
    "quantile",
]
