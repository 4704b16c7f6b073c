"""
Base dataclasses for the scroll-driven essay.

This module defines the core data structures shared by the chart and the
renderers:
- SectionState: The five ordered visual states of the chart
- ActiveIndexCursor: Which section was activated last, per chart instance
- ScrollyStep: One step of narrative text tied to a section
- Essay: The complete page (title, steps) handed to the HTML renderer
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any


class SectionState(IntEnum):
    """Visual states of the chart, in scroll order."""

    TITLE = 0
    LINE = 1
    ANNOTATED = 2
    BARS = 3
    CLOSING = 4

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass
class ActiveIndexCursor:
    """Tracks the last activated section of one chart instance.

    `last` starts at -1 so the very first activation includes section 0.
    """

    last: int = -1
    current: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"last": self.last, "current": self.current}


@dataclass
class ScrollyStep:
    """A single step in a scrollytelling sequence."""

    step_number: int
    narrative_text: str  # Text shown alongside the chart
    chart_action: str | None = None  # Section the step activates (e.g., "bars")
    headline: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "step": self.step_number,
            "headline": self.headline,
            "text": self.narrative_text,
            "action": self.chart_action,
        }


@dataclass
class Essay:
    """A complete scroll-driven essay.

    This is the top-level structure that gets rendered to HTML.
    """

    essay_id: str
    title: str
    subtitle: str

    # Steps in scroll order, one per section
    steps: list[ScrollyStep]

    # Metadata
    generated_at: datetime = field(default_factory=datetime.now)
    data_points: int = 0
    skipped_rows: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "essay_id": self.essay_id,
            "title": self.title,
            "subtitle": self.subtitle,
            "steps": [s.to_dict() for s in self.steps],
            "generated_at": self.generated_at.isoformat(),
            "data_points": self.data_points,
            "skipped_rows": self.skipped_rows,
        }
