"""
Keyed data join for data-bound chart elements.

A join binds target records to rendered elements by a stable key and
splits the keys three ways:

- enter:  key in the target set, not rendered yet -> create, then grow in
- update: key in both -> animate the existing element, never recreate it
- exit:   key rendered, absent from the target set -> shrink, then remove

All three groups animate under one shared Timing. Exiting elements stay
in the key map until their exit animation removes them, so a key that
comes back before that is treated as an update and its animation takes
over from the pending removal.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Hashable, Sequence, TypeVar

from scrollvis.data.schemas import BarDatum, bar_key
from scrollvis.essays.scales import BandScale, LinearScale
from scrollvis.essays.surface import Surface, Timing, VisualElement
from scrollvis.exceptions import ReconciliationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class JoinResult:
    """Key partition produced by one reconcile call."""

    enter: list[Hashable] = field(default_factory=list)
    update: list[Hashable] = field(default_factory=list)
    exit: list[Hashable] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[Any]]:
        return {"enter": list(self.enter), "update": list(self.update), "exit": list(self.exit)}


def partition_keys(target_keys: Sequence[Hashable], rendered_keys: Sequence[Hashable]) -> JoinResult:
    """Split keys into enter/update/exit.

    Enter and update keep target order; exit keeps rendered order.
    """
    rendered = set(rendered_keys)
    target = set(target_keys)
    return JoinResult(
        enter=[k for k in target_keys if k not in rendered],
        update=[k for k in target_keys if k in rendered],
        exit=[k for k in rendered_keys if k not in target],
    )


class KeyedJoin(Generic[T]):
    """
    Reconcile a collection of records with keyed elements on a surface.

    Subclasses provide the three element operations:
    - enter_element(record, key) -> elements created for a new key
    - update_element(elements, record) -> animate existing elements
    - exit_element(elements, on_done) -> animate out, call on_done when finished
    """

    def __init__(self, surface: Surface, *, timing: Timing):
        self.surface = surface
        self.timing = timing
        self.rendered: dict[Hashable, list[VisualElement]] = {}
        self._exiting: set[Hashable] = set()

    def keys(self) -> list[Hashable]:
        """Keys currently owning elements on the surface (including exiting ones)."""
        return list(self.rendered)

    def reconcile(self, target_records: Sequence[T], key_fn: Callable[[T], Hashable]) -> JoinResult:
        """Bring rendered elements in line with target_records.

        Args:
            target_records: Records to display; may be empty (everything exits)
            key_fn: Stable identity of a record

        Returns:
            JoinResult with the enter/update/exit keys of this call

        Raises:
            ReconciliationError: If two target records share a key
        """
        keyed: dict[Hashable, T] = {}
        duplicates = []
        for record in target_records:
            key = key_fn(record)
            if key in keyed:
                duplicates.append(key)
            keyed[key] = record
        if duplicates:
            raise ReconciliationError(
                f"Duplicate keys in target records: {duplicates}",
                duplicate_keys=[str(k) for k in duplicates],
            )

        result = partition_keys(list(keyed), list(self.rendered))
        logger.debug(f"Join partition: {result.to_dict()}")

        for key in result.exit:
            if key in self._exiting:
                continue
            self._exiting.add(key)
            self.exit_element(self.rendered[key], self._remover(key))

        for key in result.update:
            self._exiting.discard(key)
            self.update_element(self.rendered[key], keyed[key])

        for key in result.enter:
            self.rendered[key] = self.enter_element(keyed[key], key)

        return result

    def _remover(self, key: Hashable) -> Callable[[], None]:
        def remove() -> None:
            if key not in self._exiting:
                return
            self._exiting.discard(key)
            for element in self.rendered.pop(key, []):
                self.surface.remove(element)
            logger.debug(f"Removed elements for key {key!r}")

        return remove

    # -------------------------------------------------------------------------
    # Element operations
    # -------------------------------------------------------------------------

    def enter_element(self, record: T, key: Hashable) -> list[VisualElement]:
        raise NotImplementedError

    def update_element(self, elements: list[VisualElement], record: T) -> None:
        raise NotImplementedError

    def exit_element(self, elements: list[VisualElement], on_done: Callable[[], None]) -> None:
        raise NotImplementedError


# =============================================================================
# BAR CHART JOIN
# =============================================================================


class BarJoin(KeyedJoin[BarDatum]):
    """Revenue bars keyed by product: one rect and one value label per key."""

    LABEL_OFFSET = 6

    def __init__(
        self,
        surface: Surface,
        x: BandScale,
        y: LinearScale,
        *,
        plot_height: float,
        timing: Timing,
        offset_x: float = 0.0,
    ):
        super().__init__(surface, timing=timing)
        self.x = x
        self.y = y
        self.plot_height = plot_height
        self.offset_x = offset_x

    def reconcile_bars(self, data: Sequence[BarDatum]) -> JoinResult:
        """Reconcile bars with revenue data for one year."""
        return self.reconcile(data, bar_key)

    def _geometry(self, datum: BarDatum) -> dict[str, float]:
        top = self.y(datum.value)
        return {"y": top, "height": self.plot_height - top}

    def _label(self, datum: BarDatum) -> str:
        return f"${datum.value:,}M"

    def enter_element(self, record: BarDatum, key: Hashable) -> list[VisualElement]:
        # Horizontal slot comes from the category scale, not from record order
        left = self.x(record.product)
        rect = self.surface.create(
            "rect",
            ("bar",),
            {
                "x": left,
                "width": self.x.bandwidth,
                "y": self.plot_height,
                "height": 0.0,
                "opacity": 1.0,
                "transform": f"translate({self.offset_x},0)",
            },
            key=str(key),
            datum=record,
        )
        label = self.surface.create(
            "text",
            ("bar-text",),
            {
                "x": left + self.x.bandwidth / 2,
                "y": self.plot_height - self.LABEL_OFFSET,
                "opacity": 1.0,
                "transform": f"translate({self.offset_x},0)",
            },
            key=str(key),
            datum=record,
            text=self._label(record),
        )
        geometry = self._geometry(record)
        self.surface.animate(rect, geometry, timing=self.timing)
        self.surface.animate(label, {"y": geometry["y"] - self.LABEL_OFFSET}, timing=self.timing)
        return [rect, label]

    def update_element(self, elements: list[VisualElement], record: BarDatum) -> None:
        rect, label = elements
        rect.datum = record
        label.datum = record
        label.text = self._label(record)
        geometry = self._geometry(record)
        self.surface.animate(rect, geometry, timing=self.timing)
        self.surface.animate(label, {"y": geometry["y"] - self.LABEL_OFFSET}, timing=self.timing)

    def exit_element(self, elements: list[VisualElement], on_done: Callable[[], None]) -> None:
        rect, label = elements
        self.surface.animate(
            rect,
            {"y": self.plot_height, "height": 0.0},
            timing=self.timing,
            on_end=lambda _: on_done(),
        )
        self.surface.animate(label, {"y": self.plot_height - self.LABEL_OFFSET}, timing=self.timing)
