"""
Section state machine.

Scrolling activates sections by index. Activation walks every section
between the last active one and the target, in scroll direction, and runs
each visited section's routine exactly once. Skipping from section 0 to 3
therefore runs sections 1, 2 and 3 in turn, so every section's entry
effects are applied even when the reader never settles on it.
"""

import logging
from numbers import Integral
from typing import Callable, Sequence

from scrollvis.essays.base import ActiveIndexCursor, SectionState
from scrollvis.essays.transitions import TransitionDirector
from scrollvis.exceptions import InvalidSectionIndexError

logger = logging.getLogger(__name__)

SectionRoutine = Callable[[], None]
ProgressHandler = Callable[[float], None]


def traversal(last: int, target: int) -> list[int]:
    """Sections to visit when moving from `last` to `target`.

    `last` is excluded and `target` included; the walk goes up when
    target >= last and down otherwise. Equal indices visit nothing.
    """
    sign = 1 if target >= last else -1
    return list(range(last + sign, target + sign, sign))


class SectionStateMachine:
    """
    Runs section routines for scroll activations.

    Usage:
        machine = SectionStateMachine(routines)
        machine.activate(0)   # runs routine 0
        machine.activate(3)   # runs routines 1, 2, 3
        machine.activate(3)   # runs nothing
    """

    def __init__(
        self,
        routines: Sequence[SectionRoutine],
        cursor: ActiveIndexCursor | None = None,
    ):
        if not routines:
            raise ValueError("A state machine needs at least one section routine")
        self.routines = list(routines)
        self.cursor = cursor if cursor is not None else ActiveIndexCursor()
        self._progress_handlers: dict[int, ProgressHandler] = {}

    @property
    def section_count(self) -> int:
        return len(self.routines)

    def _validate(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, Integral) or not 0 <= index < self.section_count:
            raise InvalidSectionIndexError(
                f"Section index {index!r} outside [0, {self.section_count - 1}]",
                index=index,
                section_count=self.section_count,
            )

    def activate(self, index: int) -> list[int]:
        """Activate a section, running every section passed on the way.

        Args:
            index: Target section index

        Returns:
            Indices whose routines ran, in order

        Raises:
            InvalidSectionIndexError: If index is out of range (nothing changes)
        """
        self._validate(index)

        self.cursor.current = index
        visited = traversal(self.cursor.last, index)
        for i in visited:
            self.routines[i]()
        self.cursor.last = index

        logger.debug(f"Activated section {index}, visited {visited}")
        return visited

    def on_progress(self, index: int, handler: ProgressHandler) -> None:
        """Register a handler for scroll progress within a section."""
        self._validate(index)
        self._progress_handlers[index] = handler

    def update(self, index: int, progress: float) -> None:
        """Forward scroll progress in [0, 1] to the section's handler, if any."""
        self._validate(index)
        if not 0.0 <= progress <= 1.0:
            raise ValueError(f"Progress must be within [0, 1], got {progress}")
        handler = self._progress_handlers.get(index)
        if handler is not None:
            handler(progress)


def build_section_routines(
    director: TransitionDirector,
    *,
    on_enter: dict[SectionState, Callable[[], None]] | None = None,
) -> list[SectionRoutine]:
    """One routine per section: apply its targets, then run its entry hook.

    Args:
        director: Applies the section's declarative targets
        on_enter: Extra side effects per section (e.g. reconciling bars)

    Returns:
        Routines ordered by SectionState
    """
    hooks = on_enter or {}

    def make(state: SectionState) -> SectionRoutine:
        def routine() -> None:
            director.apply(state)
            hook = hooks.get(state)
            if hook is not None:
                hook()

        routine.__name__ = f"show_{state.name.lower()}"
        return routine

    return [make(state) for state in SectionState]
