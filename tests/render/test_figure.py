"""Tests for the Plotly figure builder (dicts only)."""

from __future__ import annotations

from boxwhisker.chart_config import ChartSettings
from boxwhisker.render.figure import BASE_LEFT_MARGIN, LEFT_MARGIN_PER_CHAR, ChartLayout, Margin, box_figure
from boxwhisker.scale import create_plot_and_axes_scales
from boxwhisker.stats.summary import PlotDataset


def _layout(summary, goal=None) -> ChartLayout:
    scales = create_plot_and_axes_scales(PlotDataset(groups=(summary,), goal=goal), 100, 5)
    return ChartLayout(
        width=200,
        height=100,
        margin=Margin(),
        scales=scales,
        band_centers={summary.label: 20.0},
        y_title="Minutes",
        goal=goal,
    )


def test_box_figure_returns_dict(render_engine, make_summary, example_values) -> None:
    summary = make_summary("A", example_values)
    render_engine.render([summary], ChartSettings(width=20, height=100), offsets={"A": (10.0, 5.0)})
    d = box_figure(render_engine, _layout(summary))
    assert isinstance(d, dict)
    assert "data" in d
    assert "layout" in d


def test_box_figure_draws_every_category(render_engine, make_summary, example_values) -> None:
    summary = make_summary("A", example_values)
    render_engine.render([summary], ChartSettings(width=20, height=100), offsets={"A": (10.0, 5.0)})
    d = box_figure(render_engine, _layout(summary))
    names = [trace["name"] for trace in d["data"]]
    assert names == ["Mean", "Outliers", "Data points"]
    outliers = d["data"][1]
    assert len(outliers["x"]) == 4
    # center line, box, median line, two whisker lines
    assert len(d["layout"]["shapes"]) == 5
    # three box ticks, two whisker ticks
    assert len(d["layout"]["annotations"]) == 5
    assert list(d["layout"]["xaxis"]["ticktext"]) == ["A"]


def test_box_figure_goal_line(render_engine, make_summary, example_values) -> None:
    summary = make_summary("A", example_values)
    render_engine.render([summary], ChartSettings(width=20, height=100))
    d = box_figure(render_engine, _layout(summary, goal=6.0))
    assert len(d["layout"]["shapes"]) == 6
    goal = d["layout"]["shapes"][-1]
    assert goal["y0"] == goal["y1"]


def test_box_figure_empty_registry(render_engine, make_summary) -> None:
    d = box_figure(render_engine, _layout(make_summary("A", [1, 2, 3])))
    assert len(d["data"]) == 0
    assert "layout" in d


def test_margin_left_starts_at_base_and_widens_per_char() -> None:
    assert Margin().left == BASE_LEFT_MARGIN
    widened = Margin().with_left_for("12.5")
    assert widened.left == BASE_LEFT_MARGIN + 4 * LEFT_MARGIN_PER_CHAR
    assert (widened.top, widened.right, widened.bottom) == (5.0, 5.0, 40.0)
