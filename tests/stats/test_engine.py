"""Tests for QuantileConfig validation and StatisticsEngine summaries."""

from __future__ import annotations

import numpy as np
import pytest

from boxwhisker.errors import ConfigurationError, DataError, DuplicateLabelError
from boxwhisker.stats.engine import (
    QuantileConfig,
    StatisticsEngine,
    SummaryInput,
    box_quartiles,
    box_whiskers,
    classify_outliers,
)


# --- QuantileConfig ---


@pytest.mark.parametrize(
    "probs",
    [
        (0.05, 0.25, 0.75, 0.95),
        (0.0, 0.0, 1.0, 1.0),
        (0.25, 0.25, 0.25, 0.25),
        (0.1, 0.2, 0.3, 0.4),
    ],
)
def test_engine_accepts_ordered_quantiles(probs) -> None:
    engine = StatisticsEngine(QuantileConfig(*probs))
    assert engine.quantiles.as_tuple() == probs


@pytest.mark.parametrize(
    "probs",
    [
        (0.95, 0.75, 0.25, 0.05),
        (0.05, 0.8, 0.75, 0.95),
        (-0.1, 0.25, 0.75, 0.95),
        (0.05, 0.25, 0.75, 1.1),
        (0.3, 0.25, 0.75, 0.95),
    ],
)
def test_engine_rejects_bad_quantiles(probs) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        StatisticsEngine(QuantileConfig(*probs))
    assert "increasing order" in str(exc_info.value)


def test_configuration_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        QuantileConfig(0.5, 0.4, 0.6, 0.7).validate()


def test_quantile_config_is_frozen() -> None:
    cfg = QuantileConfig()
    with pytest.raises(Exception):  # FrozenInstanceError
        cfg.q1 = 0.3  # type: ignore[misc]


# --- default strategies ---


def test_box_quartiles_default() -> None:
    assert box_quartiles(list(range(1, 11)), QuantileConfig()) == pytest.approx((3.25, 5.5, 7.75))


def test_box_whiskers_default() -> None:
    assert box_whiskers(SummaryInput(label="A", points=(1.0, 2.0, 3.0)), 0) == (0, 2)


# --- generic path ---


def test_end_to_end_example(example_values) -> None:
    """[2,4,4,4,5,5,7,9] with default quantiles."""
    s = StatisticsEngine().summarize_points("A", example_values)
    assert s.median == pytest.approx(4.5)
    assert s.mean == pytest.approx(5.0)
    assert s.q1 == pytest.approx(4.0)
    assert s.q3 == pytest.approx(5.5)
    assert s.low_whisker == pytest.approx(2.7)
    assert s.high_whisker == pytest.approx(8.3)
    assert s.minimum == 2.0
    assert s.maximum == 9.0
    assert s.count == 8
    # index walk gives [2, 9], value rule gives [2, 9] again
    assert s.outliers == (2.0, 9.0, 2.0, 9.0)
    assert s.outlier_indexes == (1, 6)
    assert s.whiskers == (2.0, 9.0)
    assert s.non_outliers() == [4.0, 5.0, 7.0]


def test_generic_path_keeps_duplicates(example_values) -> None:
    s = StatisticsEngine().summarize_points("A", example_values)
    assert s.points == (2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0)


def test_custom_whisker_strategy_indexes_are_clamped() -> None:
    engine = StatisticsEngine(whisker_strategy=lambda data, index: (1, 99))
    s = engine.summarize_points("A", [1, 2, 3, 4])
    assert s.whiskers == (2.0, 4.0)


def test_whisker_strategy_none_means_no_whiskers() -> None:
    engine = StatisticsEngine(whisker_strategy=lambda data, index: None)
    s = engine.summarize_points("A", [1, 2, 3, 4])
    assert s.whiskers is None


def test_whisker_strategy_receives_label_and_index() -> None:
    seen = []

    def strategy(data: SummaryInput, index: int):
        seen.append((data.label, data.points, index))
        return (0, len(data.points) - 1)

    StatisticsEngine(whisker_strategy=strategy).summarize_points("B", [3, 1, 2], index=4)
    assert seen == [("B", (1.0, 2.0, 3.0), 4)]


def test_custom_quartile_strategy() -> None:
    engine = StatisticsEngine(quartile_strategy=lambda points, q: (1.0, 2.0, 3.0))
    s = engine.summarize_points("A", [10, 20, 30])
    assert s.quartiles == (1.0, 2.0, 3.0)


# --- bucketed path ---


def test_series_path_drops_duplicates(example_values) -> None:
    s = StatisticsEngine().summarize_series("A", example_values)
    assert s.points == (2.0, 4.0, 5.0, 7.0, 9.0)
    assert s.count == 5
    assert s.median == pytest.approx(5.0)
    assert s.whiskers == (s.low_whisker, s.high_whisker)


def test_summarize_groups_skips_empty_groups() -> None:
    summaries = StatisticsEngine().summarize_groups({"A": [1, 2, 3], "B": [], "C": [4, 5]})
    assert [s.label for s in summaries] == ["A", "C"]


def test_summarize_groups_non_numeric_raises() -> None:
    with pytest.raises(DataError):
        StatisticsEngine().summarize_groups({"A": [1, 2, 3], "B": [4, "five"]}, unique=False)


def test_summarize_groups_rejects_colliding_labels() -> None:
    with pytest.raises(DuplicateLabelError, match="'1'"):
        StatisticsEngine().summarize_groups({1: [1, 2, 3], "1": [10, 20, 30]}, unique=False)


def test_summarize_groups_collision_with_empty_group_raises() -> None:
    with pytest.raises(DuplicateLabelError):
        StatisticsEngine().summarize_groups({1: [], "1": [10, 20, 30]})


# --- outliers ---


def test_outlier_factor_widens_the_walk() -> None:
    points = np.array([1.0, 10.0, 11.0, 12.0, 13.0, 14.0, 40.0])
    outliers, (i, j) = classify_outliers(points, low_whisker=5.0, high_whisker=20.0, offset=3.0)
    # walk: 1 <= 2 and 40 >= 23; value rule: 1 <= 5 and 40 >= 20
    assert outliers == [1.0, 40.0, 1.0, 40.0]
    assert (i, j) == (1, 5)


def test_duplicate_outlier_values_are_kept() -> None:
    s = StatisticsEngine().summarize_points("A", [1, 1, 5, 6, 7, 8, 20, 20])
    assert s.outliers.count(1.0) >= 2
    assert s.outliers.count(20.0) >= 2


def test_no_outlier_strictly_inside_whiskers() -> None:
    """With outlier_factor 0, nothing strictly between the whiskers is an outlier."""
    rng = np.random.default_rng(1234)
    engine = StatisticsEngine()
    for trial in range(200):
        values = rng.normal(loc=50, scale=20, size=rng.integers(1, 60)).round(1)
        for s in (engine.summarize_points("g", values), engine.summarize_series("g", values)):
            for v in s.outliers:
                assert not (s.low_whisker < v < s.high_whisker), (trial, v)


def test_summary_to_dict(example_values) -> None:
    d = StatisticsEngine().summarize_points("A", example_values).to_dict()
    assert d["label"] == "A"
    assert d["whiskers"] == [2.0, 9.0]
    assert d["outlier_indexes"] == [1, 6]
