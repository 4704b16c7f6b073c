"""
Retained drawing surface with timed attribute animations.

The surface keeps an ordered list of visual elements (paths, circles,
rects, texts, axis groups) and a virtual clock. Attribute changes are
either applied immediately or animated over a duration; animations are
fire-and-forget and only advance when the owner moves the clock
(advance/settle), which keeps every caller single-threaded and
deterministic.

Superseding rule: a new animation of an attribute replaces any in-flight
animation of the same attribute on the same element, starting from the
element's current value. An animation whose attributes have all been
taken over is cancelled and its on_end callback never runs.
"""

import logging
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable

logger = logging.getLogger(__name__)

ELEMENT_KINDS = frozenset({"path", "circle", "rect", "text", "group", "clip"})

# Guard against on_end callbacks that keep scheduling work forever
MAX_SETTLE_ROUNDS = 1000


# =============================================================================
# ELEMENTS
# =============================================================================


@dataclass(eq=False)
class VisualElement:
    """Handle to a drawn primitive with mutable presentation attributes."""

    element_id: int
    kind: str
    classes: tuple[str, ...]
    attrs: dict[str, Any] = field(default_factory=dict)
    key: str | None = None
    datum: Any = None
    text: str | None = None
    removed: bool = False

    def has_class(self, *classes: str) -> bool:
        """True if the element carries every given class."""
        return all(c in self.classes for c in classes)

    @property
    def opacity(self) -> float:
        return float(self.attrs.get("opacity", 1.0))

    def __repr__(self) -> str:
        key = f" key={self.key!r}" if self.key is not None else ""
        return f"<{self.kind}#{self.element_id} .{'.'.join(self.classes)}{key}>"


@dataclass(frozen=True)
class Timing:
    """Shared timing context for a batch of animations."""

    duration: float
    delay: float = 0.0


# =============================================================================
# ANIMATIONS
# =============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Animation:
    """A timed change of one or more attributes of one element."""

    def __init__(
        self,
        element: VisualElement,
        targets: dict[str, Any],
        *,
        created_at: float,
        duration: float,
        delay: float = 0.0,
        on_end: Callable[[VisualElement], None] | None = None,
    ):
        self.element = element
        self.targets = dict(targets)
        self.begin = created_at + delay
        self.duration = max(0.0, duration)
        self.on_end = on_end
        self.start_values: dict[str, Any] | None = None
        self.cancelled = False
        self.finished = False

    @property
    def end(self) -> float:
        return self.begin + self.duration

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.finished)

    def release(self, attrs: list[str] | set[str]) -> None:
        """Hand attributes over to a newer animation."""
        for attr in attrs:
            self.targets.pop(attr, None)
        if not self.targets:
            self.cancel()

    def cancel(self) -> None:
        self.cancelled = True
        self.on_end = None

    def step(self, now: float) -> bool:
        """Apply the animation at time `now`. Returns True when it completes."""
        if not self.active or now < self.begin:
            return False

        if self.start_values is None:
            self.start_values = {a: self.element.attrs.get(a) for a in self.targets}

        t = 1.0 if self.duration == 0 else min(1.0, (now - self.begin) / self.duration)

        for attr, end_value in self.targets.items():
            start_value = self.start_values.get(attr)
            if t >= 1.0:
                self.element.attrs[attr] = end_value
            elif _is_number(start_value) and _is_number(end_value):
                self.element.attrs[attr] = start_value + (end_value - start_value) * t

        if t >= 1.0:
            self.finished = True
            return True
        return False

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "finished" if self.finished else "active"
        return f"Animation({self.element!r}, {sorted(self.targets)}, {state})"


# =============================================================================
# SURFACE
# =============================================================================


class Surface:
    """
    In-memory drawing surface.

    Usage:
        surface = Surface(width=800, height=520)
        dot = surface.create("circle", ("dot",), {"cx": 10, "cy": 10, "opacity": 0})
        surface.animate(dot, {"opacity": 1}, 600)
        surface.settle()
    """

    def __init__(self, width: int, height: int, *, margin: dict[str, int] | None = None):
        self.width = width
        self.height = height
        self.margin = margin or {"top": 0, "left": 0, "bottom": 0, "right": 0}
        self.elements: list[VisualElement] = []
        self.now: float = 0.0
        self._animations: list[Animation] = []
        self._ids = count(1)

    # -------------------------------------------------------------------------
    # Element lifecycle
    # -------------------------------------------------------------------------

    def create(
        self,
        kind: str,
        classes: tuple[str, ...] | list[str] | str,
        attrs: dict[str, Any] | None = None,
        *,
        key: str | None = None,
        datum: Any = None,
        text: str | None = None,
    ) -> VisualElement:
        """Create a new element and append it to the drawing order."""
        if kind not in ELEMENT_KINDS:
            raise ValueError(f"Unknown element kind: {kind!r}")
        if isinstance(classes, str):
            classes = tuple(classes.split())

        element = VisualElement(
            element_id=next(self._ids),
            kind=kind,
            classes=tuple(classes),
            attrs=dict(attrs or {}),
            key=key,
            datum=datum,
            text=text,
        )
        self.elements.append(element)
        return element

    def remove(self, element: VisualElement) -> None:
        """Remove an element, releasing its in-flight animations first."""
        for animation in self._animations:
            if animation.element is element and animation.active:
                animation.cancel()
        if not element.removed:
            self.elements.remove(element)
            element.removed = True

    def select(self, *classes: str) -> list[VisualElement]:
        """Live elements carrying every given class, in drawing order."""
        return [e for e in self.elements if e.has_class(*classes)]

    def select_one(self, *classes: str) -> VisualElement | None:
        """First live element carrying every given class."""
        for element in self.elements:
            if element.has_class(*classes):
                return element
        return None

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    def set(self, element: VisualElement, **attrs: Any) -> None:
        """Apply attributes immediately, overriding in-flight animations of them."""
        self._supersede(element, attrs.keys())
        element.attrs.update(attrs)

    def animate(
        self,
        element: VisualElement,
        attrs: dict[str, Any],
        duration: float | None = None,
        *,
        delay: float = 0.0,
        timing: Timing | None = None,
        on_end: Callable[[VisualElement], None] | None = None,
    ) -> Animation:
        """Schedule an animation of attributes towards target values.

        Args:
            element: Element to animate
            attrs: Target attribute values
            duration: Duration in ms (ignored when timing is given)
            delay: Delay in ms before the animation starts
            timing: Shared timing context for a batch of animations
            on_end: Called with the element once the animation completes

        Returns:
            The scheduled Animation
        """
        if element.removed:
            raise ValueError(f"Cannot animate removed element {element!r}")
        if timing is not None:
            duration, delay = timing.duration, timing.delay
        if duration is None:
            raise ValueError("animate() needs a duration or a timing context")

        self._supersede(element, attrs.keys())
        animation = Animation(
            element,
            attrs,
            created_at=self.now,
            duration=duration,
            delay=delay,
            on_end=on_end,
        )
        self._animations.append(animation)
        return animation

    def _supersede(self, element: VisualElement, attrs: Any) -> None:
        names = set(attrs)
        for animation in self._animations:
            if animation.element is element and animation.active:
                animation.release(names & set(animation.targets))

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    def pending(self, element: VisualElement | None = None) -> list[Animation]:
        """Animations still in flight, optionally for one element."""
        return [
            a for a in self._animations
            if a.active and (element is None or a.element is element)
        ]

    def advance(self, ms: float) -> None:
        """Move the clock forward and apply animation progress."""
        if ms < 0:
            raise ValueError("The clock cannot move backwards")
        self.now += ms

        completed = []
        for animation in list(self._animations):
            if animation.step(self.now):
                completed.append(animation)

        for animation in completed:
            callback = animation.on_end
            animation.on_end = None
            if callback is not None:
                callback(animation.element)

        self._animations = [a for a in self._animations if a.active]

    def settle(self) -> None:
        """Run the clock until no animation is in flight."""
        for _ in range(MAX_SETTLE_ROUNDS):
            active = self.pending()
            if not active:
                return
            horizon = max(a.end for a in active)
            self.advance(max(0.0, horizon - self.now))
        raise RuntimeError("Surface did not settle; animations keep rescheduling")
