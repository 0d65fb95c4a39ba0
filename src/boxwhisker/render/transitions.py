"""Timed attribute transitions keyed by element identity.

A TransitionScheduler owns at most one Transition per element. Scheduling a new
transition for an element that is still animating retargets it: the new
transition starts from the attributes the old one had reached at that instant.
Nothing here knows about frames; whoever drives the chart calls ``step()`` at its
own frame boundary (a NiceGUI ``ui.timer``, a test with a fake clock, ...).
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Callable, Hashable, Optional

from boxwhisker.utils.logging import get_logger

logger = get_logger(__name__)

Easing = Callable[[float], float]
Attrs = dict[str, float]
ApplyFn = Callable[[Attrs], None]


def ease_linear(t: float) -> float:
    return t


def ease_cubic_in_out(t: float) -> float:
    """Cubic ease-in-out on [0, 1]."""
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate_attrs(start: Attrs, end: Attrs, t: float) -> Attrs:
    """Blend two attribute dicts; keys missing from ``start`` jump to ``end``."""
    out: Attrs = {}
    for key, b in end.items():
        a = start.get(key, b)
        out[key] = a + (b - a) * t
    return out


@dataclass
class Transition:
    """One running interpolation from ``start`` to ``end``."""

    start: Attrs
    end: Attrs
    duration_ms: float
    started_at: float
    easing: Easing = ease_cubic_in_out
    on_end: Optional[Callable[[], None]] = None
    apply: Optional[ApplyFn] = field(default=None, repr=False)

    def progress(self, now: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        elapsed_ms = (now - self.started_at) * 1000.0
        return min(max(elapsed_ms / self.duration_ms, 0.0), 1.0)

    def value_at(self, now: float) -> Attrs:
        return interpolate_attrs(self.start, self.end, self.easing(self.progress(now)))

    def finished(self, now: float) -> bool:
        return self.progress(now) >= 1.0


class TransitionScheduler:
    """Cancellable, retargetable transitions keyed by element id.

    Args:
        clock: Returns the current time in seconds. Defaults to time.monotonic.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._tasks: dict[Hashable, Transition] = {}

    @property
    def active(self) -> int:
        """Number of transitions still in flight."""
        return len(self._tasks)

    def now(self) -> float:
        return self._clock()

    def is_animating(self, element_id: Hashable) -> bool:
        return element_id in self._tasks

    def get(self, element_id: Hashable) -> Optional[Transition]:
        return self._tasks.get(element_id)

    def schedule(
        self,
        element_id: Hashable,
        start: Attrs,
        end: Attrs,
        duration_ms: float,
        apply: ApplyFn,
        *,
        easing: Easing = ease_cubic_in_out,
        on_end: Optional[Callable[[], None]] = None,
    ) -> Optional[Transition]:
        """
        Start (or retarget) the transition of ``element_id``.

        If the element is already animating, the previous transition is dropped
        without firing its ``on_end`` and the new one starts from the attributes
        it had reached. With ``duration_ms <= 0`` the end state is applied at once,
        ``on_end`` fires immediately and None is returned.
        """
        now = self._clock()
        previous = self._tasks.pop(element_id, None)
        if previous is not None:
            start = {**start, **previous.value_at(now)}
            logger.debug(f"retargeting in-flight transition for {element_id!r}")

        if duration_ms <= 0:
            apply(dict(end))
            if on_end is not None:
                on_end()
            return None

        transition = Transition(
            start=dict(start),
            end=dict(end),
            duration_ms=float(duration_ms),
            started_at=now,
            easing=easing,
            on_end=on_end,
            apply=apply,
        )
        self._tasks[element_id] = transition
        return transition

    def cancel(self, element_id: Hashable) -> bool:
        """Drop a transition silently. Returns True if one was running."""
        return self._tasks.pop(element_id, None) is not None

    def step(self, now: Optional[float] = None) -> int:
        """
        Advance every transition to ``now`` (default: the clock).

        Finished transitions apply their end state, are removed, and then fire
        ``on_end``. Returns the number still in flight.
        """
        if now is None:
            now = self._clock()
        finished: list[Transition] = []
        for element_id, transition in list(self._tasks.items()):
            if transition.apply is not None:
                transition.apply(transition.value_at(now))
            if transition.finished(now):
                del self._tasks[element_id]
                finished.append(transition)
        for transition in finished:
            if transition.on_end is not None:
                transition.on_end()
        return len(self._tasks)

    def flush(self) -> None:
        """Jump every transition to its end state."""
        self.step(math.inf)

    def clear(self) -> None:
        """Drop every transition without applying or firing anything."""
        self._tasks.clear()
