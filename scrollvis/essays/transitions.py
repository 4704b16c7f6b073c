"""
Transition director: declarative section targets applied to the surface.

Each section is described by the full target state of every managed
group, as data. Applying a section animates every element of every group
to its absolute target, so the result never depends on which section was
shown before, and applying a section twice changes nothing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from scrollvis.essays.base import SectionState
from scrollvis.essays.surface import Surface

logger = logging.getLogger(__name__)

HIDDEN = 0.0
SHOWN = 1.0
DIMMED = 0.1

# d3's default transition duration, used where a section does not set one
DEFAULT_TRANSITION_MS = 250


class Group(str, Enum):
    """Visual groups managed by the sections, with their surface class."""

    TITLE = "apple-title"
    CLOSING_TEXT = "bottomline"
    LINE = "line"
    HIGHLIGHTED_DOTS = "dot"
    DIMMED_DOTS = "dots"
    ANNOTATIONS = "annotation"
    LINE_AXES = "line-axis"
    BARS = "bar"
    BAR_TEXT = "bar-text"
    BAR_AXES = "bar-axis"

    @property
    def selector(self) -> str:
        return self.value


@dataclass(frozen=True)
class Target:
    """Target opacity of a group and the duration to reach it (None = section default)."""

    opacity: float
    duration: int | None = None


def _t(opacity: float, duration: int | None = None) -> Target:
    return Target(opacity, duration)


SECTION_TARGETS: dict[SectionState, dict[Group, Target]] = {
    SectionState.TITLE: {
        Group.TITLE: _t(SHOWN),
        Group.CLOSING_TEXT: _t(HIDDEN),
        Group.LINE: _t(HIDDEN),
        Group.HIGHLIGHTED_DOTS: _t(HIDDEN),
        Group.DIMMED_DOTS: _t(DIMMED),
        Group.ANNOTATIONS: _t(HIDDEN),
        Group.LINE_AXES: _t(HIDDEN),
        Group.BARS: _t(HIDDEN),
        Group.BAR_TEXT: _t(HIDDEN),
        Group.BAR_AXES: _t(HIDDEN),
    },
    SectionState.LINE: {
        Group.TITLE: _t(HIDDEN, 0),
        Group.CLOSING_TEXT: _t(HIDDEN),
        Group.LINE: _t(SHOWN),
        Group.HIGHLIGHTED_DOTS: _t(SHOWN),
        Group.DIMMED_DOTS: _t(SHOWN, DEFAULT_TRANSITION_MS),
        Group.ANNOTATIONS: _t(SHOWN),
        Group.LINE_AXES: _t(SHOWN),
        Group.BARS: _t(HIDDEN),
        Group.BAR_TEXT: _t(HIDDEN),
        Group.BAR_AXES: _t(HIDDEN),
    },
    SectionState.ANNOTATED: {
        Group.TITLE: _t(HIDDEN),
        Group.CLOSING_TEXT: _t(HIDDEN),
        Group.LINE: _t(SHOWN),
        Group.HIGHLIGHTED_DOTS: _t(HIDDEN),
        Group.DIMMED_DOTS: _t(HIDDEN),
        Group.ANNOTATIONS: _t(HIDDEN),
        Group.LINE_AXES: _t(SHOWN),
        Group.BARS: _t(HIDDEN, DEFAULT_TRANSITION_MS),
        Group.BAR_TEXT: _t(HIDDEN),
        Group.BAR_AXES: _t(HIDDEN),
    },
    SectionState.BARS: {
        Group.TITLE: _t(HIDDEN),
        Group.CLOSING_TEXT: _t(HIDDEN),
        Group.LINE: _t(HIDDEN),
        Group.HIGHLIGHTED_DOTS: _t(HIDDEN, 300),
        Group.DIMMED_DOTS: _t(HIDDEN),
        Group.ANNOTATIONS: _t(HIDDEN),
        Group.LINE_AXES: _t(HIDDEN),
        Group.BARS: _t(SHOWN),
        Group.BAR_TEXT: _t(SHOWN),
        Group.BAR_AXES: _t(SHOWN),
    },
    SectionState.CLOSING: {
        Group.TITLE: _t(HIDDEN),
        Group.CLOSING_TEXT: _t(SHOWN),
        Group.LINE: _t(HIDDEN),
        Group.HIGHLIGHTED_DOTS: _t(HIDDEN, 300),
        Group.DIMMED_DOTS: _t(HIDDEN),
        Group.ANNOTATIONS: _t(HIDDEN),
        Group.LINE_AXES: _t(HIDDEN),
        Group.BARS: _t(HIDDEN, DEFAULT_TRANSITION_MS),
        Group.BAR_TEXT: _t(SHOWN),
        Group.BAR_AXES: _t(HIDDEN),
    },
}


class TransitionDirector:
    """Issues the opacity animations that put the surface into a section's state.

    Args:
        surface: Surface holding the chart elements
        default_duration: Duration for targets without their own (ms)
        before_show: Callbacks run before a group fades in, e.g. redrawing
            axes from the current scales
        targets: Section table (defaults to SECTION_TARGETS)
    """

    def __init__(
        self,
        surface: Surface,
        *,
        default_duration: int = 600,
        before_show: dict[Group, Callable[[], None]] | None = None,
        targets: dict[SectionState, dict[Group, Target]] | None = None,
    ):
        self.surface = surface
        self.default_duration = default_duration
        self.before_show = before_show or {}
        self.targets = targets or SECTION_TARGETS

    def targets_for(self, state: SectionState) -> dict[Group, Target]:
        return self.targets[SectionState(state)]

    def apply_group(self, group: Group, target: Target) -> int:
        """Animate every element of a group to its target. Returns the element count."""
        if target.opacity > 0 and group in self.before_show:
            self.before_show[group]()

        duration = self.default_duration if target.duration is None else target.duration
        elements = self.surface.select(group.selector)
        for element in elements:
            self.surface.animate(element, {"opacity": target.opacity}, duration)
        return len(elements)

    def apply(self, state: SectionState) -> None:
        """Animate all managed groups to the section's targets."""
        state = SectionState(state)
        for group, target in self.targets_for(state).items():
            self.apply_group(group, target)
        logger.debug(f"Applied section targets for {state.label}")
