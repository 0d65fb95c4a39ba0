"""Visual element records managed by the render-diff engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ElementCategory(str, Enum):
    """The nine element categories of one box."""

    CENTER_LINE = "center-line"
    BOX = "box"
    MEDIAN_LINE = "median-line"
    MEAN_POINT = "mean-point"
    WHISKER_LINE = "whisker-line"
    WHISKER_TICK = "whisker-tick"
    BOX_TICK = "box-tick"
    OUTLIER_POINT = "outlier-point"
    DATA_POINT = "raw-datapoint"


# Diff/draw order inside a container.
CATEGORY_ORDER: tuple[ElementCategory, ...] = (
    ElementCategory.CENTER_LINE,
    ElementCategory.BOX,
    ElementCategory.MEDIAN_LINE,
    ElementCategory.MEAN_POINT,
    ElementCategory.WHISKER_LINE,
    ElementCategory.OUTLIER_POINT,
    ElementCategory.DATA_POINT,
    ElementCategory.BOX_TICK,
    ElementCategory.WHISKER_TICK,
)

# (container label, category, key)
ElementId = tuple[str, ElementCategory, str]


@dataclass(frozen=True)
class TooltipItem:
    """One row of a tooltip."""

    display_name: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"displayName": self.display_name, "value": self.value}


@dataclass
class ElementRecord:
    """Target state of one element for the current cycle.

    ``attrs`` are numeric and animate; ``text`` values (labels, anchors) switch
    at once. ``datum`` is the bound value, ``index`` its position within the
    category's data array.
    """

    category: ElementCategory
    key: str
    attrs: dict[str, float]
    text: dict[str, str] = field(default_factory=dict)
    tooltip: list[TooltipItem] = field(default_factory=list)
    datum: Any = None
    index: int = 0


@dataclass
class LiveElement:
    """An element currently in the registry."""

    category: ElementCategory
    key: str
    attrs: dict[str, float]
    text: dict[str, str] = field(default_factory=dict)
    tooltip: list[TooltipItem] = field(default_factory=list)
    datum: Any = None
    index: int = 0
    exiting: bool = False

    @classmethod
    def from_record(cls, record: ElementRecord) -> "LiveElement":
        return cls(
            category=record.category,
            key=record.key,
            attrs=dict(record.attrs),
            text=dict(record.text),
            tooltip=list(record.tooltip),
            datum=record.datum,
            index=record.index,
        )

    def set_attrs(self, attrs: dict[str, float]) -> None:
        self.attrs.update(attrs)
