"""
Target element records for one box.

For each of the nine categories this computes the data array of the current
cycle and the attributes each element should end up with. Coordinates are local
to the group's container: x runs 0..width across the band, y comes from the
group's box scale (pixel 0 at the top).

Join keys:
  - center line, box, median line: the group label
  - mean point: its value
  - whisker lines/ticks: "low" / "high"
  - box ticks: "q1" / "median" / "q3"
  - outlier and raw data points: their value, with "#n" appended to the n-th
    repeat so duplicate outliers keep separate elements
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from boxwhisker.render.elements import CATEGORY_ORDER, ElementCategory, ElementRecord, LiveElement
from boxwhisker.render.tooltips import box_tooltip, mean_tooltip, point_tooltip, whisker_tooltip
from boxwhisker.stats.engine import QuantileConfig
from boxwhisker.stats.summary import GroupSummary

if TYPE_CHECKING:
    from boxwhisker.chart_config import ChartSettings

YScale = Callable[[float], float]

EXIT_OPACITY = 1e-6
MEAN_RADIUS = 4.0
POINT_RADIUS = 3.0
TICK_OFFSET = 6.0

WHISKER_KEYS = ("low", "high")
BOX_TICK_KEYS = ("q1", "median", "q3")


def value_key(value: float) -> str:
    return format(float(value), ".12g")


def occurrence_keys(values: Iterable[float]) -> list[str]:
    """Value keys with "#n" appended to repeats: [5, 5, 7] -> ["5", "5#1", "7"]."""
    seen: Counter[str] = Counter()
    keys = []
    for v in values:
        k = value_key(v)
        n = seen[k]
        seen[k] += 1
        keys.append(k if n == 0 else f"{k}#{n}")
    return keys


def element_attrs(
    category: ElementCategory,
    datum: Any,
    index: int,
    width: float,
    y: YScale,
) -> dict[str, float]:
    """Geometry of one element given its datum (without opacity)."""
    if category is ElementCategory.CENTER_LINE:
        lo, hi = datum
        return {"x1": width / 2, "x2": width / 2, "y1": y(lo), "y2": y(hi)}
    if category is ElementCategory.BOX:
        q1, _, q3 = datum
        return {"x": 0.0, "width": width, "y": y(q3), "height": y(q1) - y(q3)}
    if category in (ElementCategory.MEDIAN_LINE, ElementCategory.WHISKER_LINE):
        return {"x1": 0.0, "x2": width, "y1": y(datum), "y2": y(datum)}
    if category is ElementCategory.MEAN_POINT:
        return {"cx": width * 3 / 4, "cy": y(datum), "r": MEAN_RADIUS}
    if category in (ElementCategory.OUTLIER_POINT, ElementCategory.DATA_POINT):
        return {"cx": width / 2, "cy": y(datum), "r": POINT_RADIUS}
    if category is ElementCategory.BOX_TICK:
        odd = index & 1
        return {
            "x": width if odd else 0.0,
            "dx": TICK_OFFSET if odd else -TICK_OFFSET,
            "y": y(datum),
        }
    if category is ElementCategory.WHISKER_TICK:
        return {"x": width, "dx": TICK_OFFSET, "y": y(datum)}
    raise ValueError(f"unknown element category {category!r}")


def collapsed_attrs(element: LiveElement, width: Optional[float], y: Optional[YScale]) -> dict[str, float]:
    """Exit state: faded out, positioned on the new scale when there is one."""
    if y is None or width is None:
        attrs = dict(element.attrs)
    else:
        attrs = element_attrs(element.category, element.datum, element.index, width, y)
    attrs["opacity"] = EXIT_OPACITY
    return attrs


def _record(
    category: ElementCategory,
    key: str,
    datum: Any,
    index: int,
    width: float,
    y: YScale,
    **extra: Any,
) -> ElementRecord:
    attrs = element_attrs(category, datum, index, width, y)
    attrs["opacity"] = 1.0
    return ElementRecord(category=category, key=key, attrs=attrs, datum=datum, index=index, **extra)


def build_targets(
    summary: GroupSummary,
    settings: "ChartSettings",
    y: YScale,
    quantiles: Optional[QuantileConfig] = None,
) -> dict[ElementCategory, list[ElementRecord]]:
    """Compute the target records of every category for one group."""
    quantiles = quantiles or QuantileConfig()
    fmt = settings.tick_formatter
    width = float(settings.width)
    label = summary.label
    targets: dict[ElementCategory, list[ElementRecord]] = {c: [] for c in CATEGORY_ORDER}
    whiskers = summary.whiskers

    if whiskers is not None:
        targets[ElementCategory.CENTER_LINE].append(
            _record(ElementCategory.CENTER_LINE, label, tuple(whiskers), 0, width, y)
        )
        for i, (key, value) in enumerate(zip(WHISKER_KEYS, whiskers)):
            targets[ElementCategory.WHISKER_LINE].append(
                _record(
                    ElementCategory.WHISKER_LINE, key, value, i, width, y,
                    tooltip=whisker_tooltip(i, value, quantiles, fmt),
                )
            )

    targets[ElementCategory.BOX].append(
        _record(
            ElementCategory.BOX, label, summary.quartiles, 0, width, y,
            tooltip=box_tooltip(summary.quartiles, quantiles, fmt),
        )
    )
    targets[ElementCategory.MEDIAN_LINE].append(
        _record(ElementCategory.MEDIAN_LINE, label, summary.median, 0, width, y)
    )
    targets[ElementCategory.MEAN_POINT].append(
        _record(
            ElementCategory.MEAN_POINT, value_key(summary.mean), summary.mean, 0, width, y,
            tooltip=mean_tooltip(summary.mean, fmt),
        )
    )

    for i, (key, value) in enumerate(zip(occurrence_keys(summary.outliers), summary.outliers)):
        targets[ElementCategory.OUTLIER_POINT].append(
            _record(
                ElementCategory.OUTLIER_POINT, key, value, i, width, y,
                tooltip=point_tooltip(label, value, fmt),
            )
        )

    if settings.show_data_points:
        for i, value in enumerate(summary.non_outliers()):
            targets[ElementCategory.DATA_POINT].append(
                _record(
                    ElementCategory.DATA_POINT, value_key(value), value, i, width, y,
                    tooltip=point_tooltip(label, value, fmt),
                )
            )

    if settings.show_labels:
        for i, (key, value) in enumerate(zip(BOX_TICK_KEYS, summary.quartiles)):
            targets[ElementCategory.BOX_TICK].append(
                _record(
                    ElementCategory.BOX_TICK, key, value, i, width, y,
                    text={"label": fmt(value), "anchor": "start" if i & 1 else "end"},
                )
            )
        if whiskers is not None:
            for i, (key, value) in enumerate(zip(WHISKER_KEYS, whiskers)):
                targets[ElementCategory.WHISKER_TICK].append(
                    _record(
                        ElementCategory.WHISKER_TICK, key, value, i, width, y,
                        text={"label": fmt(value), "anchor": "start"},
                        tooltip=whisker_tooltip(i, value, quantiles, fmt),
                    )
                )

    return targets
