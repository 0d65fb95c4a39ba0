"""Plotly figure for the live element registry.

Returns Plotly figure dicts (never go.Figure) for ui.plotly / update_figure.

The figure is drawn in pixel space: every element's attributes are container-local
pixels, shifted by the container offset. Axes are pinned to the chart extent with
the y axis reversed (pixel 0 at the top) and relabelled with data values through
the axis scale. Calling this between transition steps draws the in-flight state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

import plotly.graph_objects as go

from boxwhisker.formatting import TickFormatter, format_number
from boxwhisker.render.diff_engine import RenderDiffEngine
from boxwhisker.render.elements import ElementCategory, LiveElement
from boxwhisker.scale import ScaleMapping

BOX_FILL = "rgba(70, 130, 180, 0.35)"
LINE_COLOR = "#000000"
OUTLIER_COLOR = "rgba(214, 39, 40, 0.9)"
DATAPOINT_COLOR = "rgba(31, 119, 180, 0.6)"
MEAN_COLOR = "rgba(44, 160, 44, 0.9)"
GOAL_COLOR = "rgba(255, 127, 14, 0.9)"

_POINT_STYLES = {
    ElementCategory.MEAN_POINT: ("Mean", MEAN_COLOR),
    ElementCategory.OUTLIER_POINT: ("Outliers", OUTLIER_COLOR),
    ElementCategory.DATA_POINT: ("Data points", DATAPOINT_COLOR),
}


BASE_LEFT_MARGIN = 50.0
LEFT_MARGIN_PER_CHAR = 5.0


@dataclass(frozen=True)
class Margin:
    """Plot margins in pixels.

    ``left`` defaults to the bare base margin; a render cycle widens it for the
    y tick labels with with_left_for().
    """

    top: float = 5.0
    right: float = 5.0
    bottom: float = 40.0
    left: float = BASE_LEFT_MARGIN

    def with_left_for(self, tick_text: str) -> "Margin":
        """Copy with left = BASE_LEFT_MARGIN + LEFT_MARGIN_PER_CHAR * len(tick_text)."""
        return replace(self, left=BASE_LEFT_MARGIN + LEFT_MARGIN_PER_CHAR * len(tick_text))


@dataclass(frozen=True)
class ChartLayout:
    """Chart-level geometry of one render cycle."""

    width: float
    height: float
    margin: Margin
    scales: ScaleMapping
    band_centers: dict[str, float] = field(default_factory=dict)
    y_title: str = ""
    goal: Optional[float] = None


def _hovertext(element: LiveElement) -> str:
    return "<br>".join(f"{t.display_name}: {t.value}" for t in element.tooltip)


def _line_shape(x0: float, y0: float, x1: float, y1: float, opacity: float, dash: str = "solid") -> dict:
    return dict(
        type="line", xref="x", yref="y",
        x0=x0, y0=y0, x1=x1, y1=y1,
        line=dict(color=LINE_COLOR, width=1, dash=dash),
        opacity=opacity,
    )


def box_figure(
    engine: RenderDiffEngine,
    layout: ChartLayout,
    formatter: TickFormatter = format_number,
) -> dict:
    """
    Build the figure for the current registry state.

    Args:
        engine: Render engine whose live elements are drawn.
        layout: Chart geometry (size, margins, scales, band centers).
        formatter: Tick formatter for the y axis labels.

    Returns:
        Plotly figure dict.
    """
    shapes: list[dict] = []
    annotations: list[dict] = []
    points: dict[ElementCategory, dict[str, list]] = {
        c: {"x": [], "y": [], "r": [], "opacity": [], "text": []} for c in _POINT_STYLES
    }

    for label, container in engine.containers.items():
        ox, oy = container.offset
        for category, elements in container.elements.items():
            for element in elements.values():
                a = element.attrs
                opacity = a.get("opacity", 1.0)
                if category is ElementCategory.CENTER_LINE:
                    shapes.append(
                        _line_shape(ox + a["x1"], oy + a["y1"], ox + a["x2"], oy + a["y2"], opacity, dash="dash")
                    )
                elif category in (ElementCategory.MEDIAN_LINE, ElementCategory.WHISKER_LINE):
                    shapes.append(_line_shape(ox + a["x1"], oy + a["y1"], ox + a["x2"], oy + a["y2"], opacity))
                elif category is ElementCategory.BOX:
                    shapes.append(
                        dict(
                            type="rect", xref="x", yref="y",
                            x0=ox + a["x"], x1=ox + a["x"] + a["width"],
                            y0=oy + a["y"], y1=oy + a["y"] + a["height"],
                            line=dict(color=LINE_COLOR, width=1),
                            fillcolor=BOX_FILL,
                            opacity=opacity,
                            layer="below",
                        )
                    )
                elif category in _POINT_STYLES:
                    bucket = points[category]
                    bucket["x"].append(ox + a["cx"])
                    bucket["y"].append(oy + a["cy"])
                    bucket["r"].append(a.get("r", 3.0) * 2)
                    bucket["opacity"].append(opacity)
                    bucket["text"].append(_hovertext(element))
                else:
                    anchor = element.text.get("anchor", "start")
                    annotations.append(
                        dict(
                            x=ox + a["x"], y=oy + a["y"], xref="x", yref="y",
                            xshift=a.get("dx", 0.0),
                            text=element.text.get("label", ""),
                            xanchor="left" if anchor == "start" else "right",
                            showarrow=False,
                            opacity=opacity,
                            font=dict(size=10),
                        )
                    )

    fig = go.Figure()
    for category, (name, color) in _POINT_STYLES.items():
        bucket = points[category]
        if not bucket["x"]:
            continue
        fig.add_trace(
            go.Scatter(
                x=bucket["x"],
                y=bucket["y"],
                mode="markers",
                name=name,
                hovertext=bucket["text"],
                hoverinfo="text",
                marker=dict(size=bucket["r"], color=color, opacity=bucket["opacity"]),
            )
        )

    total_width = layout.width + layout.margin.left + layout.margin.right
    total_height = layout.height + layout.margin.top + layout.margin.bottom

    if layout.goal is not None:
        gy = layout.scales.axis_scale()(layout.goal)
        shapes.append(
            dict(
                type="line", xref="x", yref="y",
                x0=0, x1=layout.width, y0=gy, y1=gy,
                line=dict(color=GOAL_COLOR, width=2, dash="dot"),
            )
        )

    axis = layout.scales.axis_scale()
    tick_values = axis.ticks(10)
    centers = layout.band_centers

    fig.update_layout(
        template="plotly_white",
        shapes=shapes,
        annotations=annotations,
        showlegend=False,
        width=total_width,
        height=total_height,
        margin=dict(l=layout.margin.left, r=layout.margin.right, t=layout.margin.top, b=layout.margin.bottom),
        xaxis=dict(
            range=[0, layout.width],
            tickvals=list(centers.values()),
            ticktext=list(centers.keys()),
            showgrid=False,
            zeroline=False,
        ),
        yaxis=dict(
            range=[layout.height + layout.margin.top, layout.margin.top],
            tickvals=[axis(t) for t in tick_values],
            ticktext=[formatter(t) for t in tick_values],
            title=layout.y_title,
            zeroline=False,
        ),
    )
    return fig.to_dict()
