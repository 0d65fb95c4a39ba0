"""Shared fixtures for boxwhisker tests."""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from boxwhisker.render.diff_engine import RenderDiffEngine
from boxwhisker.render.transitions import TransitionScheduler
from boxwhisker.stats.engine import StatisticsEngine
from boxwhisker.stats.summary import GroupSummary


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> TransitionScheduler:
    return TransitionScheduler(clock=clock)


@pytest.fixture
def render_engine(scheduler: TransitionScheduler) -> RenderDiffEngine:
    return RenderDiffEngine(scheduler)


@pytest.fixture
def make_summary() -> Callable[..., GroupSummary]:
    """Build a GroupSummary on the generic path with default quantiles."""

    def _make(label: str, values: Sequence[float], *, outlier_factor: float = 0.0) -> GroupSummary:
        return StatisticsEngine(outlier_factor=outlier_factor).summarize_points(label, values)

    return _make


@pytest.fixture
def example_values() -> list[float]:
    return [2, 4, 4, 4, 5, 5, 7, 9]
