"""
Keyed enter/update/exit reconciliation of box chart elements.

The engine keeps a registry of live elements: one container per group label,
and inside each container one ``key -> LiveElement`` map per ElementCategory.
Each render() call diffs the freshly computed target records against that
registry, category by category:

  - entering keys are inserted with their target attributes, no animation;
  - updating keys animate from their current attributes to the target;
  - exiting keys animate to a faded, collapsed state and are removed from the
    registry when that transition ends.

Categories are independent of each other. A render issued while transitions are
still running retargets them through the TransitionScheduler; an exiting element
whose key comes back is silently turned into an update.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Mapping, Optional, Sequence

from boxwhisker.render.elements import (
    CATEGORY_ORDER,
    ElementCategory,
    ElementId,
    ElementRecord,
    LiveElement,
    TooltipItem,
)
from boxwhisker.render.layout import YScale, build_targets, collapsed_attrs
from boxwhisker.render.transitions import TransitionScheduler
from boxwhisker.scale import LinearScale
from boxwhisker.stats.engine import QuantileConfig
from boxwhisker.stats.summary import GroupSummary
from boxwhisker.utils.logging import get_logger

if TYPE_CHECKING:
    from boxwhisker.chart_config import ChartSettings

logger = get_logger(__name__)


@dataclass
class CategoryDiff:
    """Keys classified by one diff pass of one category."""

    entered: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    exited: list[str] = field(default_factory=list)


@dataclass
class RenderResult:
    """Outcome of one render() call."""

    diffs: dict[str, dict[ElementCategory, CategoryDiff]] = field(default_factory=dict)
    tooltips: dict[ElementId, list[TooltipItem]] = field(default_factory=dict)

    def _count(self, attr: str, category: Optional[ElementCategory]) -> int:
        total = 0
        for per_category in self.diffs.values():
            for cat, diff in per_category.items():
                if category is None or cat is category:
                    total += len(getattr(diff, attr))
        return total

    def entered_count(self, category: Optional[ElementCategory] = None) -> int:
        return self._count("entered", category)

    def updated_count(self, category: Optional[ElementCategory] = None) -> int:
        return self._count("updated", category)

    def exited_count(self, category: Optional[ElementCategory] = None) -> int:
        return self._count("exited", category)


class Container:
    """Live elements of one group, plus where the group sits in the chart."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.offset: tuple[float, float] = (0.0, 0.0)
        self.width: Optional[float] = None
        self.stale = False
        self.elements: dict[ElementCategory, dict[str, LiveElement]] = {c: {} for c in CATEGORY_ORDER}

    def is_empty(self) -> bool:
        return not any(self.elements.values())

    def __len__(self) -> int:
        return sum(len(v) for v in self.elements.values())


class RenderDiffEngine:
    """Registry of live elements and the keyed diff that maintains it.

    Attributes:
        scheduler: TransitionScheduler driving update/exit animations.
    """

    def __init__(self, scheduler: Optional[TransitionScheduler] = None) -> None:
        self.scheduler = scheduler or TransitionScheduler()
        self._containers: dict[str, Container] = {}

    # -----------------------------
    # Registry access
    # -----------------------------
    @property
    def containers(self) -> Mapping[str, Container]:
        return self._containers

    @property
    def is_animating(self) -> bool:
        return self.scheduler.active > 0

    def elements(self, category: Optional[ElementCategory] = None) -> Iterator[tuple[str, LiveElement]]:
        """Yield (container label, element) for every live element."""
        for label, container in self._containers.items():
            for cat in CATEGORY_ORDER:
                if category is not None and cat is not category:
                    continue
                for element in container.elements[cat].values():
                    yield label, element

    def element_count(self, category: Optional[ElementCategory] = None) -> int:
        return sum(1 for _ in self.elements(category))

    def get_element(self, label: str, category: ElementCategory, key: str) -> Optional[LiveElement]:
        container = self._containers.get(label)
        if container is None:
            return None
        return container.elements[category].get(key)

    def tooltip(self, label: str, category: ElementCategory, key: str) -> list[TooltipItem]:
        element = self.get_element(label, category, key)
        return list(element.tooltip) if element is not None else []

    def step(self, now: Optional[float] = None) -> int:
        """Advance running transitions; returns how many are still in flight."""
        return self.scheduler.step(now)

    def clear(self) -> None:
        """Drop every element and transition at once (no exit animation)."""
        self.scheduler.clear()
        self._containers.clear()

    # -----------------------------
    # Diff
    # -----------------------------
    def render(
        self,
        summaries: Sequence[GroupSummary],
        settings: "ChartSettings",
        *,
        quantiles: Optional[QuantileConfig] = None,
        offsets: Optional[Mapping[str, tuple[float, float]]] = None,
    ) -> RenderResult:
        """
        Reconcile the registry with the summaries of the current cycle.

        Args:
            summaries: One GroupSummary per container, in drawing order.
            settings: Immutable chart settings for this cycle.
            quantiles: Probabilities used for tooltip labels.
            offsets: Container label -> (x, y) position in the chart.

        Returns:
            RenderResult with per-container, per-category diffs and tooltips.
        """
        quantiles = quantiles or QuantileConfig()
        offsets = offsets or {}
        result = RenderResult()
        current: dict[str, Container] = {}

        for index, summary in enumerate(summaries):
            label = summary.label
            container = self._containers.get(label) or Container(label)
            container.stale = False
            container.offset = tuple(offsets.get(label, (0.0, 0.0)))
            container.width = float(settings.width)
            current[label] = container

            y = LinearScale(settings.domain_for(summary, index), settings.range_for(summary, index))
            targets = build_targets(summary, settings, y, quantiles)
            per_category: dict[ElementCategory, CategoryDiff] = {}
            for category in CATEGORY_ORDER:
                per_category[category] = self._diff_category(
                    container, category, targets[category], settings, y
                )
            result.diffs[label] = per_category

        # Previous containers with no group this cycle exit everything they hold.
        for label, container in list(self._containers.items()):
            if label in current:
                continue
            container.stale = True
            current[label] = container
            result.diffs[label] = {
                category: self._diff_category(container, category, [], settings, None)
                for category in CATEGORY_ORDER
            }

        self._containers = {label: c for label, c in current.items() if not (c.stale and c.is_empty())}

        for label, element in self.elements():
            if element.tooltip and not element.exiting:
                result.tooltips[(label, element.category, element.key)] = list(element.tooltip)

        logger.debug(
            f"render: containers={len(self._containers)}, entered={result.entered_count()}, "
            f"updated={result.updated_count()}, exited={result.exited_count()}, "
            f"in_flight={self.scheduler.active}"
        )
        return result

    def _diff_category(
        self,
        container: Container,
        category: ElementCategory,
        records: Sequence[ElementRecord],
        settings: "ChartSettings",
        y: Optional[YScale],
    ) -> CategoryDiff:
        live = container.elements[category]
        diff = CategoryDiff()
        wanted = {record.key: record for record in records}

        for key, record in wanted.items():
            element = live.get(key)
            if element is None:
                live[key] = LiveElement.from_record(record)
                diff.entered.append(key)
                continue
            element.exiting = False
            element.text = dict(record.text)
            element.tooltip = list(record.tooltip)
            element.datum = record.datum
            element.index = record.index
            self.scheduler.schedule(
                (container.label, category, key),
                element.attrs,
                record.attrs,
                settings.duration_ms,
                element.set_attrs,
                easing=settings.easing,
            )
            diff.updated.append(key)

        for key, element in list(live.items()):
            if key in wanted:
                continue
            newly_exiting = not element.exiting
            element.exiting = True
            width = float(settings.width) if y is not None else None
            self.scheduler.schedule(
                (container.label, category, key),
                element.attrs,
                collapsed_attrs(element, width, y),
                settings.duration_ms,
                element.set_attrs,
                easing=settings.easing,
                on_end=self._remover(container, category, key, element),
            )
            if newly_exiting:
                diff.exited.append(key)

        return diff

    def _remover(self, container: Container, category: ElementCategory, key: str, element: LiveElement):
        def _remove() -> None:
            live = container.elements[category]
            if live.get(key) is element:
                del live[key]
            if container.stale and container.is_empty():
                if self._containers.get(container.label) is container:
                    del self._containers[container.label]

        return _remove
