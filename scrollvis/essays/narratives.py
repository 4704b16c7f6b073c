"""
Narrative text for the scroll steps.

One step per chart section. Text is partly data-driven (price range and
revenue figures come from the actual data) and can be replaced per step
through YAML overrides (see overrides.py).
"""

from scrollvis.data.schemas import APPLE_REVENUE, RevenueRecord, TimeSeriesPoint
from scrollvis.essays.base import Essay, ScrollyStep, SectionState

ESSAY_TITLE = "How does the stock market hype about the iPhone's?"
ESSAY_SUBTITLE = "Apple's closing price around three iPhone launches, and where the revenue comes from"


def _revenue_share(revenue: tuple[RevenueRecord, ...] | list[RevenueRecord], product: str, year: str) -> float:
    total = sum(r.value_for(year) or 0 for r in revenue)
    if total == 0:
        return 0.0
    for record in revenue:
        if record.product == product:
            return (record.value_for(year) or 0) / total
    return 0.0


def default_steps(
    points: list[TimeSeriesPoint] | None = None,
    revenue: tuple[RevenueRecord, ...] | list[RevenueRecord] = APPLE_REVENUE,
    *,
    year: str = "2016",
) -> list[ScrollyStep]:
    """Build the five narrative steps.

    Args:
        points: Closing price series, used for the price range sentence
        revenue: Revenue table, used for the iPhone share sentence
        year: Year shown in the bar chart

    Returns:
        Steps in section order
    """
    if points:
        low = min(p.close for p in points)
        high = max(p.close for p in points)
        first = min(p.date for p in points)
        last = max(p.date for p in points)
        line_text = (
            f"Between {first:%B %Y} and {last:%B %Y} Apple's stock closed as low as "
            f"${low:,.2f} and as high as ${high:,.2f}."
        )
    else:
        line_text = "This is Apple's daily closing price."

    iphone_share = _revenue_share(revenue, "iPhone", year) * 100

    return [
        ScrollyStep(
            step_number=int(SectionState.TITLE),
            headline="The hype",
            narrative_text=(
                "Every September Apple announces a new iPhone. "
                "Does the market get excited, or does it already know?"
            ),
            chart_action=SectionState.TITLE.name.lower(),
        ),
        ScrollyStep(
            step_number=int(SectionState.LINE),
            headline="Three years of closing prices",
            narrative_text=line_text,
            chart_action=SectionState.LINE.name.lower(),
        ),
        ScrollyStep(
            step_number=int(SectionState.ANNOTATED),
            headline="Launch days",
            narrative_text=(
                "The iPhone 6, 6S and 7 launches sit on ordinary-looking days. "
                "Take the markers away and the launches disappear into the trend."
            ),
            chart_action=SectionState.ANNOTATED.name.lower(),
        ),
        ScrollyStep(
            step_number=int(SectionState.BARS),
            headline="Where the money is",
            narrative_text=(
                f"In {year} the iPhone brought in {iphone_share:.0f}% of the revenue "
                f"of Apple's three main product lines."
            ),
            chart_action=SectionState.BARS.name.lower(),
        ),
        ScrollyStep(
            step_number=int(SectionState.CLOSING),
            headline="Your turn",
            narrative_text="What will the next launch do to the stock?",
            chart_action=SectionState.CLOSING.name.lower(),
        ),
    ]


def build_essay(
    points: list[TimeSeriesPoint],
    steps: list[ScrollyStep] | None = None,
    *,
    skipped_rows: int = 0,
    year: str = "2016",
) -> Essay:
    """Assemble the Essay handed to the HTML renderer."""
    return Essay(
        essay_id="iphone-hype",
        title=ESSAY_TITLE,
        subtitle=ESSAY_SUBTITLE,
        steps=steps if steps is not None else default_steps(points, year=year),
        data_points=len(points),
        skipped_rows=skipped_rows,
    )
