"""Box chart widget.

Self-contained NiceGUI widget: a ui.plotly showing the live element registry and
a ui.timer that advances running transitions one frame at a time. Uses Plotly
dicts only for ui.plotly (never go.Figure).
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence

import pandas as pd
from nicegui import ui

from boxwhisker.options import VisualOptions
from boxwhisker.utils.logging import get_logger
from boxwhisker.visual import BoxWhiskerVisual, RenderOutcome, Viewport, ViewportLike

logger = get_logger(__name__)


def _safe_call(func: Callable, *args, **kwargs) -> Any:
    """Safely call a function, catching 'client deleted' RuntimeErrors only."""
    try:
        return func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise
        return None


class BoxWhiskerWidget:
    """Reusable box-and-whisker chart widget.

    set_data() / set_points() run one render cycle and push the new figure;
    transitions then play out on the frame timer. Warnings of a rejected cycle
    are shown with ui.notify.
    """

    def __init__(
        self,
        visual: Optional[BoxWhiskerVisual] = None,
        options: Optional[VisualOptions] = None,
        frame_interval_s: float = 1 / 30,
    ) -> None:
        self._visual = visual or BoxWhiskerVisual()
        self._options = options or VisualOptions()
        self._frame_interval_s = frame_interval_s
        self._viewport: ViewportLike = Viewport(800, 400)

        self._plot: Optional[ui.plotly] = None
        self._timer: Optional[ui.timer] = None

    @property
    def visual(self) -> BoxWhiskerVisual:
        return self._visual

    def get_options(self) -> VisualOptions:
        return self._options

    def set_options(self, options: VisualOptions) -> None:
        """Replace the options; takes effect on the next set_data()/set_points()."""
        self._options = options

    def render(self) -> None:
        """Create the plot and the frame timer inside the current container."""
        self._plot = ui.plotly(self._visual.figure()).classes("w-full")
        self._timer = ui.timer(self._frame_interval_s, self._on_frame)

    def set_data(self, frame: pd.DataFrame, viewport: Optional[ViewportLike] = None) -> RenderOutcome:
        """Run a cycle on a wide host frame and refresh the plot."""
        if viewport is not None:
            self._viewport = viewport
        outcome = self._visual.update(frame, self._options, self._viewport)
        self._after_cycle(outcome)
        return outcome

    def set_points(
        self,
        groups: Mapping[Any, Sequence[Any]],
        viewport: Optional[ViewportLike] = None,
    ) -> RenderOutcome:
        """Run a cycle on label -> values groups and refresh the plot."""
        if viewport is not None:
            self._viewport = viewport
        outcome = self._visual.update_points(groups, self._options, self._viewport)
        self._after_cycle(outcome)
        return outcome

    def _after_cycle(self, outcome: RenderOutcome) -> None:
        for warning in outcome.warnings:
            _safe_call(ui.notify, f"{warning.title}: {warning.message}", type="warning")
        self._update_plot()

    def _on_frame(self) -> None:
        if not self._visual.is_animating:
            return
        self._visual.step()
        self._update_plot()

    def _update_plot(self) -> None:
        if self._plot is None:
            return
        _safe_call(self._plot.update_figure, self._visual.figure())
