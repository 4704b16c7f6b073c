"""
Step scroller: synchronous callback registration for scroll steps.

The scroller does not measure anything itself. Whoever knows which step
is centered (a browser bridge, a test, a script walking the steps) calls
notify(index); registered callbacks run immediately, in registration
order. Missed steps are never replayed: the chart's state machine covers
skipped sections on its own.
"""

import logging
from collections import defaultdict
from typing import Any, Callable

from scrollvis.essays.chart import ScrollVis

logger = logging.getLogger(__name__)

EVENTS = ("active", "progress")

ACTIVE_STEP_OPACITY = 1.0
INACTIVE_STEP_OPACITY = 0.1


class Scroller:
    """Dispatches step activation and progress events."""

    def __init__(self, step_count: int = 0):
        self.step_count = step_count
        self._callbacks: dict[str, list[Callable[..., Any]]] = defaultdict(list)

    def steps(self, count: int) -> "Scroller":
        """Set the number of steps. Returns self."""
        if count < 0:
            raise ValueError("Step count cannot be negative")
        self.step_count = count
        return self

    def on(self, event: str, callback: Callable[..., Any]) -> "Scroller":
        """Register a callback for 'active' (index) or 'progress' (index, progress)."""
        if event not in EVENTS:
            raise ValueError(f"Unknown scroller event {event!r}; expected one of {EVENTS}")
        self._callbacks[event].append(callback)
        return self

    def _check(self, index: int) -> None:
        if not 0 <= index < self.step_count:
            raise IndexError(f"Step {index} outside [0, {self.step_count - 1}]")

    def notify(self, index: int) -> None:
        """Report the currently centered step."""
        self._check(index)
        logger.debug(f"Step {index} active")
        for callback in self._callbacks["active"]:
            callback(index)

    def notify_progress(self, index: int, progress: float) -> None:
        """Report how far the reader has scrolled within a step."""
        self._check(index)
        for callback in self._callbacks["progress"]:
            callback(index, progress)


class StepHighlighter:
    """Keeps the opacity of each narrative step: the active one opaque, the rest faded."""

    def __init__(self, step_count: int):
        self.opacities = [INACTIVE_STEP_OPACITY] * step_count

    def __call__(self, index: int) -> None:
        self.opacities = [
            ACTIVE_STEP_OPACITY if i == index else INACTIVE_STEP_OPACITY
            for i in range(len(self.opacities))
        ]


def display(chart: ScrollVis, scroller: Scroller) -> StepHighlighter:
    """Wire a scroller to a drawn chart.

    Active steps highlight their narrative text and activate the chart
    section of the same index; progress events go to the chart's update.

    Returns:
        The step highlighter, exposing the current step opacities
    """
    highlighter = StepHighlighter(scroller.step_count)
    scroller.on("active", highlighter)
    scroller.on("active", chart.activate)
    scroller.on("progress", chart.update)
    return highlighter
