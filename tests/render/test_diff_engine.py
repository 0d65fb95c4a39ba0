"""Tests for the keyed enter/update/exit diff."""

from __future__ import annotations

from dataclasses import replace

import pytest

from boxwhisker.chart_config import ChartSettings
from boxwhisker.render.diff_engine import RenderDiffEngine
from boxwhisker.render.elements import ElementCategory
from boxwhisker.render.layout import EXIT_OPACITY, occurrence_keys
from boxwhisker.stats.engine import StatisticsEngine

# center 1, box 1, median 1, mean 1, whisker lines 2, outliers 4,
# data points 3, box ticks 3, whisker ticks 2
EXAMPLE_ELEMENTS = 18


@pytest.fixture
def settings() -> ChartSettings:
    return ChartSettings(width=20, height=100, duration_ms=1000)


def test_first_render_enters_everything(render_engine: RenderDiffEngine, make_summary, example_values, settings) -> None:
    result = render_engine.render([make_summary("A", example_values)], settings)
    assert result.entered_count() == EXAMPLE_ELEMENTS
    assert result.updated_count() == 0
    assert result.exited_count() == 0
    assert render_engine.element_count() == EXAMPLE_ELEMENTS
    # entering elements are not animated
    assert render_engine.scheduler.active == 0


def test_second_identical_render_is_idempotent(render_engine, make_summary, example_values, settings) -> None:
    summaries = [make_summary("A", example_values), make_summary("B", [1, 3, 5, 7])]
    render_engine.render(summaries, settings)
    result = render_engine.render(summaries, settings)
    assert result.entered_count() == 0
    assert result.exited_count() == 0
    assert result.updated_count() == render_engine.element_count()


def test_duplicate_outliers_get_distinct_elements(render_engine, make_summary, example_values, settings) -> None:
    render_engine.render([make_summary("A", example_values)], settings)
    keys = sorted(e.key for _, e in render_engine.elements(ElementCategory.OUTLIER_POINT))
    assert keys == ["2", "2#1", "9", "9#1"]


def test_occurrence_keys() -> None:
    assert occurrence_keys([5, 5, 7, 5]) == ["5", "5#1", "7", "5#2"]


def test_element_geometry(render_engine, make_summary, example_values) -> None:
    settings = ChartSettings(width=20, height=100, domain=(0, 10), range=(100, 0))
    render_engine.render([make_summary("A", example_values)], settings)
    box = render_engine.get_element("A", ElementCategory.BOX, "A")
    assert box.attrs["y"] == pytest.approx(45.0)  # q3 = 5.5
    assert box.attrs["height"] == pytest.approx(15.0)  # q1 = 4
    assert box.attrs["width"] == 20
    mean = render_engine.get_element("A", ElementCategory.MEAN_POINT, "5")
    assert mean.attrs["cx"] == pytest.approx(15.0)
    assert mean.attrs["cy"] == pytest.approx(50.0)
    low = render_engine.get_element("A", ElementCategory.WHISKER_LINE, "low")
    assert low.attrs["y1"] == pytest.approx(80.0)


def test_box_tooltip_is_reported(render_engine, make_summary, example_values, settings) -> None:
    result = render_engine.render([make_summary("A", example_values)], settings)
    items = result.tooltips[("A", ElementCategory.BOX, "A")]
    assert [i.display_name for i in items] == ["75th quantile", "median", "25th quantile"]
    assert render_engine.tooltip("A", ElementCategory.MEAN_POINT, "5")[0].display_name == "Mean"
    assert render_engine.tooltip("A", ElementCategory.MEDIAN_LINE, "A") == []


def test_update_animates_to_new_target(render_engine, make_summary, clock, settings) -> None:
    settings = replace(settings, domain=(0, 100), range=(100, 0))
    render_engine.render([make_summary("A", [10, 20, 30, 40, 50])], settings)
    render_engine.render([make_summary("A", [10, 20, 60, 40, 50])], settings)
    median = render_engine.get_element("A", ElementCategory.MEDIAN_LINE, "A")
    assert median.attrs["y1"] == pytest.approx(70.0)
    assert render_engine.is_animating

    render_engine.step(clock.t + 1.0)
    assert median.attrs["y1"] == pytest.approx(60.0)
    assert not render_engine.is_animating


def test_exit_fades_then_removes(render_engine, make_summary, example_values, clock, settings) -> None:
    render_engine.render([make_summary("A", example_values)], settings)
    result = render_engine.render([], settings)
    assert result.exited_count() == EXAMPLE_ELEMENTS
    assert "A" in render_engine.containers
    assert all(e.exiting for _, e in render_engine.elements())

    render_engine.step(clock.t + 1.0)
    assert render_engine.element_count() == 0
    assert "A" not in render_engine.containers


def test_exit_reaches_collapsed_opacity(render_engine, make_summary, clock, settings) -> None:
    render_engine.render([make_summary("A", [1, 2, 3, 4, 5, 6])], settings)
    render_engine.render([make_summary("A", [1, 2, 3, 4, 5, 7])], settings)
    point = render_engine.get_element("A", ElementCategory.DATA_POINT, "6")
    if point is None:
        point = render_engine.get_element("A", ElementCategory.OUTLIER_POINT, "6")
    assert point is not None and point.exiting
    render_engine.step(clock.t + 0.999)
    assert point.attrs["opacity"] == pytest.approx(EXIT_OPACITY, abs=1e-3)


def test_reentry_during_exit_becomes_update(render_engine, make_summary, example_values, clock, settings) -> None:
    summary = make_summary("A", example_values)
    render_engine.render([summary], settings)
    render_engine.render([], settings)
    clock.t = 0.4
    render_engine.step()

    result = render_engine.render([summary], settings)
    assert result.entered_count() == 0
    assert result.exited_count() == 0
    assert result.updated_count() == EXAMPLE_ELEMENTS
    assert not any(e.exiting for _, e in render_engine.elements())

    render_engine.step(clock.t + 2.0)
    assert render_engine.element_count() == EXAMPLE_ELEMENTS
    box = render_engine.get_element("A", ElementCategory.BOX, "A")
    assert box.attrs["opacity"] == pytest.approx(1.0)


def test_rerender_while_exiting_is_not_reported_twice(render_engine, make_summary, example_values, settings) -> None:
    render_engine.render([make_summary("A", example_values)], settings)
    render_engine.render([], settings)
    result = render_engine.render([], settings)
    assert result.exited_count() == 0
    assert render_engine.element_count() == EXAMPLE_ELEMENTS


def test_reentrant_cycle_retargets_one_transition_per_element(
    render_engine, make_summary, clock, settings
) -> None:
    settings = replace(settings, domain=(0, 100), range=(100, 0))
    median_id = ("A", ElementCategory.MEDIAN_LINE, "A")
    render_engine.render([make_summary("A", [10, 20, 30])], settings)
    render_engine.render([make_summary("A", [10, 40, 50])], settings)
    first = render_engine.scheduler.get(median_id)
    assert first.end["y1"] == pytest.approx(60.0)

    clock.t = 0.3
    reached = first.value_at(0.3)["y1"]
    render_engine.render([make_summary("A", [10, 60, 70])], settings)
    second = render_engine.scheduler.get(median_id)
    assert second is not first
    assert second.start["y1"] == pytest.approx(reached)
    assert second.end["y1"] == pytest.approx(40.0)
    assert render_engine.scheduler.active <= render_engine.element_count()


def test_show_labels_off_removes_ticks(render_engine, make_summary, example_values) -> None:
    settings = ChartSettings(width=20, height=100)
    render_engine.render([make_summary("A", example_values)], settings)
    result = render_engine.render([make_summary("A", example_values)], replace(settings, show_labels=False))
    assert result.exited_count(ElementCategory.BOX_TICK) == 3
    assert result.exited_count(ElementCategory.WHISKER_TICK) == 2
    assert render_engine.element_count(ElementCategory.BOX_TICK) == 0
    assert render_engine.element_count(ElementCategory.WHISKER_TICK) == 0


def test_show_data_points_off_exits_points(render_engine, make_summary, example_values) -> None:
    settings = ChartSettings(width=20, height=100)
    render_engine.render([make_summary("A", example_values)], settings)
    assert render_engine.element_count(ElementCategory.DATA_POINT) == 3
    result = render_engine.render([make_summary("A", example_values)], replace(settings, show_data_points=False))
    assert result.exited_count(ElementCategory.DATA_POINT) == 3
    assert render_engine.element_count(ElementCategory.DATA_POINT) == 0


def test_no_whiskers_means_no_center_line(render_engine) -> None:
    summary = StatisticsEngine(whisker_strategy=lambda d, i: None).summarize_points("A", [1, 2, 3, 4])
    render_engine.render([summary], ChartSettings(width=10, height=50))
    assert render_engine.element_count(ElementCategory.CENTER_LINE) == 0
    assert render_engine.element_count(ElementCategory.WHISKER_LINE) == 0
    assert render_engine.element_count(ElementCategory.WHISKER_TICK) == 0
    assert render_engine.element_count(ElementCategory.BOX) == 1


def test_stale_container_exits_and_zero_duration_removes(render_engine, make_summary) -> None:
    settings = ChartSettings(width=10, height=50)
    render_engine.render([make_summary("A", [1, 2, 3]), make_summary("B", [4, 5, 6])], settings)
    result = render_engine.render([make_summary("B", [4, 5, 6])], settings)
    assert result.exited_count() > 0
    assert set(result.diffs) == {"A", "B"}
    assert list(render_engine.containers) == ["B"]


def test_offsets_are_stored(render_engine, make_summary) -> None:
    render_engine.render(
        [make_summary("A", [1, 2, 3])],
        ChartSettings(width=10, height=50),
        offsets={"A": (32.0, 5.0)},
    )
    assert render_engine.containers["A"].offset == (32.0, 5.0)


def test_clear_drops_everything(render_engine, make_summary, example_values, settings) -> None:
    render_engine.render([make_summary("A", example_values)], settings)
    render_engine.render([make_summary("A", [1, 2])], settings)
    render_engine.clear()
    assert render_engine.element_count() == 0
    assert not render_engine.is_animating
