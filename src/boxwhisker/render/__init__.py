"""Element registry, keyed diff and transitions for box charts.

Import the engine from ``boxwhisker.render.diff_engine`` and the figure builder
from ``boxwhisker.render.figure``; this package only re-exports the leaf types.
"""

from boxwhisker.render.elements import ElementCategory, ElementRecord, LiveElement, TooltipItem
from boxwhisker.render.transitions import (
    Transition,
    TransitionScheduler,
    ease_cubic_in_out,
    ease_linear,
)

__all__ = [
    "ElementCategory",
    "ElementRecord",
    "LiveElement",
    "TooltipItem",
    "Transition",
    "TransitionScheduler",
    "ease_cubic_in_out",
    "ease_linear",
]
