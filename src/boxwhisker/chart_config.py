"""Chart configuration.

ChartConfig is the mutable configuration surface of a box chart. Every setter
returns the same instance so calls can be chained:

    cfg = ChartConfig().set_height(300).set_width(40).set_duration_ms(1000)

Each render takes an immutable ChartSettings snapshot (``cfg.snapshot()``), so a
render never observes a half-edited configuration. No semantic validation happens
here; quantile checks live in the statistics engine.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence, Union

from boxwhisker.formatting import TickFormatter, format_number
from boxwhisker.render.transitions import Easing, ease_cubic_in_out
from boxwhisker.stats.engine import QuartileStrategy, WhiskerStrategy, box_quartiles, box_whiskers
from boxwhisker.stats.summary import GroupSummary

PairFn = Callable[[GroupSummary, int], Sequence[float]]
PairOverride = Union[None, Sequence[float], PairFn]


def resolve_pair(override: PairOverride, summary: GroupSummary, index: int) -> Optional[tuple[float, ...]]:
    """Evaluate a domain/range override: a constant pair, a callable, or None."""
    if override is None:
        return None
    value = override(summary, index) if callable(override) else override
    if value is None:
        return None
    return tuple(float(v) for v in value)


@dataclass(frozen=True)
class ChartSettings:
    """Immutable snapshot of a ChartConfig used for one render."""

    width: float = 1.0
    height: float = 1.0
    duration_ms: float = 0.0
    domain: PairOverride = None
    range: PairOverride = None
    show_labels: bool = True
    show_data_points: bool = True
    tick_formatter: TickFormatter = format_number
    whisker_strategy: WhiskerStrategy = box_whiskers
    quartile_strategy: QuartileStrategy = box_quartiles
    easing: Easing = ease_cubic_in_out

    def domain_for(self, summary: GroupSummary, index: int) -> tuple[float, ...]:
        """Box scale domain for a group; defaults to the group's [minimum, maximum]."""
        return resolve_pair(self.domain, summary, index) or (summary.minimum, summary.maximum)

    def range_for(self, summary: GroupSummary, index: int) -> tuple[float, ...]:
        """Box scale range for a group; defaults to [height, 0]."""
        return resolve_pair(self.range, summary, index) or (float(self.height), 0.0)


class ChartConfig:
    """Mutable, chainable chart configuration with explicit getters and setters."""

    def __init__(self, settings: Optional[ChartSettings] = None) -> None:
        self._settings = settings or ChartSettings()

    def snapshot(self) -> ChartSettings:
        """Return the current immutable settings."""
        return self._settings

    def _set(self, **changes) -> "ChartConfig":
        self._settings = replace(self._settings, **changes)
        return self

    def get_width(self) -> float:
        return self._settings.width

    def set_width(self, width: float) -> "ChartConfig":
        return self._set(width=width)

    def get_height(self) -> float:
        return self._settings.height

    def set_height(self, height: float) -> "ChartConfig":
        return self._set(height=height)

    def get_duration_ms(self) -> float:
        return self._settings.duration_ms

    def set_duration_ms(self, duration_ms: float) -> "ChartConfig":
        return self._set(duration_ms=duration_ms)

    def get_domain(self) -> PairOverride:
        return self._settings.domain

    def set_domain(self, domain: PairOverride) -> "ChartConfig":
        """Set the box domain: a (lo, hi) pair, a callable (summary, index) -> pair, or None."""
        return self._set(domain=domain)

    def get_range(self) -> PairOverride:
        return self._settings.range

    def set_range(self, range: PairOverride) -> "ChartConfig":
        """Set the box range: a (lo, hi) pair, a callable (summary, index) -> pair, or None."""
        return self._set(range=range)

    def get_show_labels(self) -> bool:
        return self._settings.show_labels

    def set_show_labels(self, show: bool) -> "ChartConfig":
        return self._set(show_labels=bool(show))

    def get_show_data_points(self) -> bool:
        return self._settings.show_data_points

    def set_show_data_points(self, show: bool) -> "ChartConfig":
        return self._set(show_data_points=bool(show))

    def get_tick_formatter(self) -> TickFormatter:
        return self._settings.tick_formatter

    def set_tick_formatter(self, formatter: TickFormatter) -> "ChartConfig":
        return self._set(tick_formatter=formatter)

    def get_whisker_strategy(self) -> WhiskerStrategy:
        return self._settings.whisker_strategy

    def set_whisker_strategy(self, strategy: WhiskerStrategy) -> "ChartConfig":
        return self._set(whisker_strategy=strategy)

    def get_quartile_strategy(self) -> QuartileStrategy:
        return self._settings.quartile_strategy

    def set_quartile_strategy(self, strategy: QuartileStrategy) -> "ChartConfig":
        return self._set(quartile_strategy=strategy)

    def get_easing(self) -> Easing:
        return self._settings.easing

    def set_easing(self, easing: Easing) -> "ChartConfig":
        return self._set(easing=easing)
