"""
One render cycle of the box visual: host data in, element diff and figure out.

A cycle is:

  1. clear host warnings
  2. validate quantiles        -> "InvalidQuantiles" warning on failure
  3. extract per-group arrays  -> "NonNumericData" or "DuplicateGroupLabel" warning on failure
  4. summarize groups (empty groups are skipped)
  5. derive scales, margins and the band layout from the viewport
  6. reconcile the render tree (RenderDiffEngine.render)

Configuration and data errors never escape update(): they become exactly one
VisualWarning, the render tree is cleared and an empty RenderOutcome is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import pandas as pd
import plotly.graph_objects as go

from boxwhisker.chart_config import ChartConfig, ChartSettings
from boxwhisker.data.extraction import extract_groups
from boxwhisker.errors import ConfigurationError, DataError, DuplicateLabelError
from boxwhisker.options import VisualOptions
from boxwhisker.render.diff_engine import RenderDiffEngine, RenderResult
from boxwhisker.render.figure import ChartLayout, Margin, box_figure
from boxwhisker.scale import BandScale, ScaleMapping, create_plot_and_axes_scales
from boxwhisker.stats.engine import StatisticsEngine
from boxwhisker.stats.summary import GroupSummary, PlotDataset
from boxwhisker.utils.logging import get_logger

logger = get_logger(__name__)

MIN_PLOT_HEIGHT = 100
SCROLLBAR_ALLOWANCE = 8
MIN_BOX_WIDTH = 100
BOX_WIDTH_PER_CHAR = 20
BAND_PADDING = 0.7
BAND_OUTER_PADDING = 0.3
DEFAULT_TRANSITION_MS = 1000


@dataclass(frozen=True)
class Viewport:
    """Host viewport size in pixels."""

    width: float
    height: float


ViewportLike = Union[Viewport, Sequence[float]]


@dataclass(frozen=True)
class VisualWarning:
    """Host-visible warning for a rejected render cycle."""

    code: str
    title: str
    message: str


OnWarnings = Callable[[list[VisualWarning]], None]


@dataclass
class RenderOutcome:
    """Everything one cycle produced. Empty (all None) when the cycle was rejected."""

    result: Optional[RenderResult] = None
    dataset: Optional[PlotDataset] = None
    scales: Optional[ScaleMapping] = None
    layout: Optional[ChartLayout] = None
    warnings: list[VisualWarning] = field(default_factory=list)

    @property
    def rendered(self) -> bool:
        return self.result is not None


def _as_viewport(viewport: ViewportLike) -> Viewport:
    if isinstance(viewport, Viewport):
        return viewport
    width, height = viewport
    return Viewport(width=float(width), height=float(height))


class BoxWhiskerVisual:
    """Drives render cycles against one render tree.

    Attributes:
        engine: RenderDiffEngine holding the live element registry.
        chart: ChartConfig the per-cycle settings are derived from. Its
            duration_ms is the update/exit transition time of every cycle.
        warnings: Warnings of the most recent cycle.
    """

    def __init__(
        self,
        engine: Optional[RenderDiffEngine] = None,
        chart: Optional[ChartConfig] = None,
        on_warnings: Optional[OnWarnings] = None,
        transition_ms: float = DEFAULT_TRANSITION_MS,
    ) -> None:
        """
        Args:
            engine: Render tree to drive. A fresh one by default.
            chart: Chart configuration. When omitted, a default ChartConfig with
                duration_ms = transition_ms is created.
            on_warnings: Called with the warning list at the start and on
                rejection of every cycle.
            transition_ms: Transition time for the default ChartConfig only. A
                caller-supplied chart keeps its own duration_ms.
        """
        self.engine = engine or RenderDiffEngine()
        self.chart = chart if chart is not None else ChartConfig().set_duration_ms(transition_ms)
        self.warnings: list[VisualWarning] = []
        self._on_warnings = on_warnings
        self._layout: Optional[ChartLayout] = None
        self._settings: Optional[ChartSettings] = None

    # -----------------------------
    # Public API
    # -----------------------------
    def update(
        self,
        frame: pd.DataFrame,
        options: Optional[VisualOptions] = None,
        viewport: ViewportLike = Viewport(800, 400),
    ) -> RenderOutcome:
        """Render a wide host frame (time-bucketed path, duplicates dropped)."""
        options = options or VisualOptions()
        return self._cycle(
            options,
            viewport,
            lambda stats: stats.summarize_groups(extract_groups(frame, options.time_bucket), unique=True),
        )

    def update_points(
        self,
        groups: Mapping[Any, Sequence[Any]],
        options: Optional[VisualOptions] = None,
        viewport: ViewportLike = Viewport(800, 400),
    ) -> RenderOutcome:
        """Render label -> values groups (generic path, duplicates kept)."""
        options = options or VisualOptions()
        return self._cycle(
            options,
            viewport,
            lambda stats: stats.summarize_groups(groups, unique=False),
        )

    def figure(self) -> dict:
        """Plotly figure dict of the current registry state."""
        if self._layout is None or self._settings is None:
            return go.Figure().to_dict()
        return box_figure(self.engine, self._layout, self._settings.tick_formatter)

    def step(self, now: Optional[float] = None) -> int:
        """Advance running transitions; returns how many are still in flight."""
        return self.engine.step(now)

    @property
    def is_animating(self) -> bool:
        return self.engine.is_animating

    # -----------------------------
    # Cycle
    # -----------------------------
    def _cycle(
        self,
        options: VisualOptions,
        viewport: ViewportLike,
        summarize: Callable[[StatisticsEngine], list[GroupSummary]],
    ) -> RenderOutcome:
        self._set_warnings([])
        base = self.chart.snapshot()

        try:
            stats = StatisticsEngine(
                options.quantile_config(),
                outlier_factor=options.outlier_factor,
                quartile_strategy=base.quartile_strategy,
                whisker_strategy=base.whisker_strategy,
            )
        except ConfigurationError as e:
            return self._reject("InvalidQuantiles", "Invalid Quantile Multiplier", str(e))

        try:
            summaries = summarize(stats)
        except DuplicateLabelError as e:
            return self._reject("DuplicateGroupLabel", "Duplicate Group Label", str(e))
        except DataError as e:
            return self._reject("NonNumericData", "Non-numeric Data", str(e))
        except ConfigurationError as e:
            return self._reject("InvalidTimeBucket", "Invalid Time Bucket", str(e))

        if not summaries:
            logger.info("no groups with data points, nothing to render")
            self._reset()
            return RenderOutcome()

        dataset = PlotDataset(
            y_axis_title=options.y_title,
            groups=tuple(summaries),
            goal=options.goal,
        )
        vp = _as_viewport(viewport)
        margin = Margin()
        h = max(MIN_PLOT_HEIGHT, vp.height - margin.top - margin.bottom - SCROLLBAR_ALLOWANCE)
        scales = create_plot_and_axes_scales(dataset, h, margin.top)

        # Left margin grows with the widest y tick label (the domain top).
        top_text = base.tick_formatter(scales.box_domain[1])
        margin = margin.with_left_for(top_text)
        min_width = (MIN_BOX_WIDTH + BOX_WIDTH_PER_CHAR * len(top_text)) * len(summaries)
        w = max(min_width, vp.width - margin.left - margin.right)

        band = BandScale(dataset.labels, (0.0, w), BAND_PADDING, BAND_OUTER_PADDING)
        settings = replace(
            base,
            width=band.bandwidth,
            height=h,
            domain=scales.box_domain,
            range=scales.box_range,
        )
        offsets = {label: (band.position(label), margin.top) for label in dataset.labels}

        result = self.engine.render(summaries, settings, quantiles=stats.quantiles, offsets=offsets)
        layout = ChartLayout(
            width=w,
            height=h,
            margin=margin,
            scales=scales,
            band_centers={label: band.center(label) for label in dataset.labels},
            y_title=options.y_title,
            goal=options.goal,
        )
        self._layout = layout
        self._settings = settings

        logger.info(
            f"rendered {len(summaries)} group(s) into {w:g}x{h:g}: "
            f"entered={result.entered_count()}, updated={result.updated_count()}, "
            f"exited={result.exited_count()}"
        )
        return RenderOutcome(result=result, dataset=dataset, scales=scales, layout=layout)

    def _reject(self, code: str, title: str, message: str) -> RenderOutcome:
        warning = VisualWarning(code=code, title=title, message=message)
        logger.warning(f"{title}: {message}")
        self._reset()
        self._set_warnings([warning])
        return RenderOutcome(warnings=[warning])

    def _reset(self) -> None:
        self.engine.clear()
        self._layout = None
        self._settings = None

    def _set_warnings(self, warnings: list[VisualWarning]) -> None:
        self.warnings = list(warnings)
        if self._on_warnings is not None:
            self._on_warnings(list(warnings))
