"""
ScrollVis: the scroll-driven chart.

Owns one drawing surface, its scales, the persistent scene, the bar join
and the section state machine. Several instances can coexist; nothing is
shared between them.

Example usage:
    from scrollvis.data.local_loader import load_series
    from scrollvis.essays.chart import ScrollVis

    chart = ScrollVis()
    chart.draw(load_series("data/data.csv").points)
    chart.activate(0)
    chart.activate(3)      # runs Line, Annotated, Bars in turn
    chart.surface.settle()
"""

import logging
import random
from typing import Callable

from scrollvis.data.schemas import (
    APPLE_REVENUE,
    DEFAULT_RELEASE_MARKERS,
    ReleaseMarker,
    RevenueRecord,
    TimeSeriesPoint,
    product_names,
    records_for_year,
)
from scrollvis.essays.base import ActiveIndexCursor, SectionState
from scrollvis.essays.interactions import RandomSource, RangeSelector
from scrollvis.essays.reconcile import BarJoin, JoinResult
from scrollvis.essays.scales import BAR_VALUE_DOMAIN, BandScale, LinearScale, TimeScale, extent
from scrollvis.essays.scene import ChartAxes, ChartScales, Scene, SceneBuilder
from scrollvis.essays.sections import SectionStateMachine, build_section_routines
from scrollvis.essays.surface import Surface, Timing
from scrollvis.essays.transitions import Group, TransitionDirector
from scrollvis.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_scales(
    settings: Settings,
    revenue: tuple[RevenueRecord, ...] | list[RevenueRecord] = APPLE_REVENUE,
) -> ChartScales:
    """Scales with their ranges set; line domains are set once data is drawn."""
    return ChartScales(
        x=TimeScale(range_=(0, settings.width), round_output=True),
        y=LinearScale(range_=(settings.height, 0), round_output=True),
        x_bar=BandScale(
            product_names(revenue),
            (0, settings.width),
            padding=settings.bar_padding,
        ),
        y_bar=LinearScale(
            BAR_VALUE_DOMAIN,
            (settings.height, 0),
            round_output=True,
        ),
    )


def fit_line_domains(scales: ChartScales, points: list[TimeSeriesPoint]) -> None:
    """Time extent for x; closing price extent, niced, for y."""
    dates = [p.date for p in points]
    scales.x.domain = (min(dates), max(dates))
    scales.y.domain = extent(p.close for p in points)
    scales.y.nice()


class ScrollVis:
    """
    Scroll-driven chart with five sections.

    Args:
        settings: Layout and timing settings (default: get_settings())
        surface: Drawing surface (default: a new Surface sized from settings)
        rng: Random source for the range selector
        revenue: Revenue table for the bar chart
        markers: Release markers for highlighted dots and annotations
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        surface: Surface | None = None,
        rng: RandomSource = random.random,
        revenue: tuple[RevenueRecord, ...] | list[RevenueRecord] = APPLE_REVENUE,
        markers: tuple[ReleaseMarker, ...] = DEFAULT_RELEASE_MARKERS,
    ):
        self.settings = settings or get_settings()
        self.surface = surface or Surface(
            self.settings.outer_width,
            self.settings.outer_height,
            margin=self.settings.margin.model_dump(),
        )
        self.rng = rng
        self.revenue = revenue
        self.markers = markers
        self.cursor = ActiveIndexCursor()

        self.scales = build_scales(self.settings, revenue)
        self.axes = ChartAxes.for_scales(self.scales, tick_count=self.settings.axis_ticks)

        self.builder: SceneBuilder | None = None
        self.bars: BarJoin | None = None
        self.director: TransitionDirector | None = None
        self.machine: SectionStateMachine | None = None
        self.selector: RangeSelector | None = None

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def draw(self, points: list[TimeSeriesPoint]) -> Scene:
        """Build the scene and the sections for a prepared series.

        Args:
            points: Non-empty closing price series

        Returns:
            The built Scene
        """
        if not points:
            raise ValueError("Cannot draw an empty series")
        if self.builder is not None:
            raise RuntimeError("Chart already drawn")

        fit_line_domains(self.scales, points)

        self.builder = SceneBuilder(
            self.surface, self.scales, self.axes, self.settings, markers=self.markers
        )
        scene = self.builder.build(points)

        self.bars = BarJoin(
            self.surface,
            self.scales.x_bar,
            self.scales.y_bar,
            plot_height=self.settings.height,
            timing=Timing(self.settings.bar_duration_ms),
        )

        self.director = TransitionDirector(
            self.surface,
            default_duration=self.settings.section_duration_ms,
            before_show={Group.LINE_AXES: self._redraw_line_axes},
        )
        routines = build_section_routines(
            self.director,
            on_enter={SectionState.BARS: self.render_bars},
        )
        self.machine = SectionStateMachine(routines, self.cursor)

        self.selector = RangeSelector(
            self.surface,
            self.builder,
            self.scales,
            self.axes,
            duration=self.settings.zoom_duration_ms,
            rng=self.rng,
        )
        return scene

    def _require_drawn(self) -> None:
        if self.machine is None:
            raise RuntimeError("Call draw() before interacting with the chart")

    def _redraw_line_axes(self) -> None:
        scene = self.scene
        self.axes.x(self.surface, scene.x_axis)
        self.axes.y(self.surface, scene.y_axis)

    @property
    def scene(self) -> Scene:
        if self.builder is None or self.builder.scene is None:
            raise RuntimeError("Chart not drawn")
        return self.builder.scene

    # -------------------------------------------------------------------------
    # Scroll interface
    # -------------------------------------------------------------------------

    def activate(self, index: int) -> list[int]:
        """Activate a section by index. Returns the sections visited."""
        self._require_drawn()
        return self.machine.activate(index)

    def update(self, index: int, progress: float) -> None:
        """Forward scroll progress within a section."""
        self._require_drawn()
        self.machine.update(index, progress)

    def on_progress(self, index: int, handler: Callable[[float], None]) -> None:
        self._require_drawn()
        self.machine.on_progress(index, handler)

    @property
    def active_section(self) -> SectionState | None:
        """Section shown after the last activation, or None before any."""
        return SectionState(self.cursor.last) if self.cursor.last >= 0 else None

    # -------------------------------------------------------------------------
    # Bars and interactions
    # -------------------------------------------------------------------------

    def render_bars(self, year: str | None = None) -> JoinResult:
        """Reconcile the bars with one year of revenue (default year from settings)."""
        self._require_drawn()
        year = str(year or self.settings.default_year)
        result = self.bars.reconcile_bars(records_for_year(year, self.revenue))
        logger.debug(f"Rendered bars for {year}: {result.to_dict()}")
        return result

    def click(self) -> tuple[int, int]:
        """Zoom the line chart onto a random range."""
        self._require_drawn()
        return self.selector.click()

    def rebuild_dimmed_dots(self) -> None:
        """Bring back the dimmed dots removed by a click, in the active section's state."""
        self._require_drawn()
        dots = self.builder.rebuild_dimmed_dots()
        state = self.active_section
        if state is not None:
            target = self.director.targets_for(state)[Group.DIMMED_DOTS]
            for dot in dots:
                self.surface.set(dot, opacity=target.opacity)
