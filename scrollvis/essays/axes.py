"""
Axis generators.

An axis is drawn as a `group` element whose `ticks` attribute holds
(position, label) pairs computed from its scale. Calling an axis on its
element recomputes the ticks from the scale's current domain, which is
how the line axes follow the range selector.
"""

from dataclasses import dataclass
from typing import Any

from scrollvis.essays.scales import BandScale, LinearScale, TimeScale
from scrollvis.essays.surface import Surface, VisualElement

ORIENTATIONS = ("bottom", "left")


@dataclass
class Axis:
    """Tick layout for one scale."""

    scale: Any
    orient: str = "bottom"
    tick_count: int = 3
    tick_size_inner: int = 6
    tick_size_outer: int = 6

    def __post_init__(self) -> None:
        if self.orient not in ORIENTATIONS:
            raise ValueError(f"Unsupported axis orientation: {self.orient!r}")

    def tick_layout(self) -> list[tuple[float, str]]:
        """(pixel position, label) for every tick."""
        if isinstance(self.scale, BandScale):
            offset = self.scale.bandwidth / 2
            return [(self.scale(c) + offset, c) for c in self.scale.ticks()]

        if isinstance(self.scale, TimeScale):
            values = self.scale.ticks(self.tick_count)
            labels = self.scale.tick_format(self.tick_count)
            return [(self.scale(v), label) for v, label in zip(values, labels, strict=True)]

        if isinstance(self.scale, LinearScale):
            values = self.scale.ticks(self.tick_count)
            labels = self.scale.tick_format(self.tick_count)
            return [(self.scale(v), label) for v, label in zip(values, labels, strict=True)]

        raise TypeError(f"Unsupported scale type: {type(self.scale).__name__}")

    def attrs(self) -> dict[str, Any]:
        return {
            "ticks": self.tick_layout(),
            "orient": self.orient,
            "tick_size_inner": self.tick_size_inner,
            "tick_size_outer": self.tick_size_outer,
            "extent": list(self.scale.range),
        }

    def __call__(self, surface: Surface, element: VisualElement) -> None:
        """Redraw ticks on the axis element immediately."""
        surface.set(element, **self.attrs())

    def transition(self, surface: Surface, element: VisualElement, duration: float) -> None:
        """Move the axis to ticks of the current domain over a duration."""
        surface.animate(element, {"ticks": self.tick_layout()}, duration)
