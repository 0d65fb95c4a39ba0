"""
boxwhisker: Animated box-and-whisker charts for grouped numeric data.

This package provides:
- StatisticsEngine: quantiles, whiskers and outliers per group
- create_plot_and_axes_scales: outlier-robust value -> pixel scales
- RenderDiffEngine: keyed enter/update/exit diff with timed transitions
- BoxWhiskerVisual: one host render cycle, errors surfaced as warnings
- Logging utilities for library and application use

The NiceGUI widget lives in ``boxwhisker.widget``.

For logging configuration in standalone scripts/demos:
    ```python
    from boxwhisker.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library (imported by other applications), logging is
automatically handled by the parent application's configuration.
"""

import logging

from boxwhisker.utils.logging import configure_logging, get_logger

from boxwhisker.chart_config import ChartConfig, ChartSettings
from boxwhisker.errors import (
    BoxWhiskerError,
    ConfigurationError,
    DataError,
    DuplicateLabelError,
    InsufficientDataError,
)
from boxwhisker.options import OptionsStore, VisualOptions
from boxwhisker.render.diff_engine import RenderDiffEngine, RenderResult
from boxwhisker.scale import BandScale, LinearScale, ScaleMapping, create_plot_and_axes_scales
from boxwhisker.stats import GroupSummary, PlotDataset, QuantileConfig, StatisticsEngine
from boxwhisker.visual import BoxWhiskerVisual, RenderOutcome, Viewport, VisualWarning

# Ensure boxwhisker logger has NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("boxwhisker")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "BandScale",
    "BoxWhiskerError",
    "BoxWhiskerVisual",
    "ChartConfig",
    "ChartSettings",
    "ConfigurationError",
    "DataError",
    "DuplicateLabelError",
    "GroupSummary",
    "InsufficientDataError",
    "LinearScale",
    "OptionsStore",
    "PlotDataset",
    "QuantileConfig",
    "RenderDiffEngine",
    "RenderOutcome",
    "RenderResult",
    "ScaleMapping",
    "StatisticsEngine",
    "Viewport",
    "VisualOptions",
    "VisualWarning",
    "configure_logging",
    "create_plot_and_axes_scales",
    "get_logger",
]

__version__ = "0.1.0"
