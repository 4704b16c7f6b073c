"""
Scene builder: creates every persistent chart element exactly once.

All elements start in their hidden default state (the dimmed dots at
0.1). Sections never create or destroy these elements; they only retarget
attributes. Bars are not part of the scene; the bar join owns them.
"""

import logging
from dataclasses import dataclass, field

from scrollvis.data.schemas import DEFAULT_RELEASE_MARKERS, ReleaseMarker, TimeSeriesPoint
from scrollvis.essays.axes import Axis
from scrollvis.essays.scales import BandScale, LinearScale, TimeScale
from scrollvis.essays.surface import Surface, VisualElement
from scrollvis.settings import Settings

logger = logging.getLogger(__name__)

TITLE_TEXT = "How does the stock market"
SUBTITLE_TEXT = "hype about the iPhone's"
CLOSING_TEXT = "How do you think the iPhone will disrupt the markets based off of this historical data?"

DIMMED_OPACITY = 0.1
ANNOTATION_DX = 10
ANNOTATION_DCLOSE = 10


@dataclass
class ChartScales:
    """All scales of one chart instance."""

    x: TimeScale
    y: LinearScale
    x_bar: BandScale
    y_bar: LinearScale


@dataclass
class ChartAxes:
    """Axis generators bound to the chart scales."""

    x: Axis
    y: Axis
    x_bar: Axis
    y_bar: Axis

    @classmethod
    def for_scales(cls, scales: ChartScales, *, tick_count: int = 3) -> "ChartAxes":
        return cls(
            x=Axis(scales.x, "bottom", tick_count, tick_size_inner=10, tick_size_outer=7),
            y=Axis(scales.y, "left", tick_count, tick_size_inner=-10, tick_size_outer=7),
            x_bar=Axis(scales.x_bar, "bottom"),
            y_bar=Axis(scales.y_bar, "left", tick_count),
        )


@dataclass
class Scene:
    """Handles to the persistent elements of the chart."""

    points: list[TimeSeriesPoint]
    title: VisualElement
    subtitle: VisualElement
    closing: VisualElement
    clip: VisualElement
    x_axis: VisualElement
    y_axis: VisualElement
    x_bar_axis: VisualElement
    y_bar_axis: VisualElement
    line: VisualElement
    highlighted: list[VisualElement] = field(default_factory=list)
    dimmed: list[VisualElement] = field(default_factory=list)
    annotations: list[VisualElement] = field(default_factory=list)


def _fmt(value: float) -> str:
    rounded = round(float(value), 2)
    return str(int(rounded)) if rounded == int(rounded) else f"{rounded:g}"


def line_path(points: list[TimeSeriesPoint], x: TimeScale, y: LinearScale) -> str:
    """SVG path data joining the points in order."""
    if not points:
        return ""
    xs = x.map_many(p.date for p in points)
    ys = y.map_many(p.close for p in points)
    commands = [f"{_fmt(px)},{_fmt(py)}" for px, py in zip(xs, ys, strict=True)]
    return "M" + "L".join(commands)


class SceneBuilder:
    """Builds the scene on a surface and keeps it consistent with the scales."""

    def __init__(
        self,
        surface: Surface,
        scales: ChartScales,
        axes: ChartAxes,
        settings: Settings,
        *,
        markers: tuple[ReleaseMarker, ...] = DEFAULT_RELEASE_MARKERS,
    ):
        self.surface = surface
        self.scales = scales
        self.axes = axes
        self.settings = settings
        self.markers = markers
        self.scene: Scene | None = None

    @property
    def _shift(self) -> str:
        return f"translate({self.settings.margin.left},0)"

    def highlighted_points(self, points: list[TimeSeriesPoint]) -> list[tuple[TimeSeriesPoint, ReleaseMarker]]:
        """Points matching a release marker, in series order."""
        matches = []
        for point in points:
            for marker in self.markers:
                if marker.matches(point):
                    matches.append((point, marker))
                    break
        return matches

    def build(self, points: list[TimeSeriesPoint]) -> Scene:
        """Create every scene element in its default state.

        Args:
            points: The prepared closing price series

        Returns:
            Scene with handles to the created elements
        """
        if self.scene is not None:
            raise RuntimeError("Scene already built; elements are created only once")

        s = self.surface
        width, height = self.settings.width, self.settings.height

        title = s.create(
            "text", "title apple-title",
            {"x": width / 2, "y": height / 3, "opacity": 0.0},
            text=TITLE_TEXT,
        )
        subtitle = s.create(
            "text", "sub-title apple-title",
            {"x": width / 2, "y": height / 3 + height / 5, "opacity": 0.0},
            text=SUBTITLE_TEXT,
        )
        closing = s.create(
            "text", "title bottomline",
            {"x": width / 2, "y": height / 3 + height / 5, "opacity": 0.0},
            text=CLOSING_TEXT,
        )

        clip = s.create("clip", "clip", {"id": "clip", "width": width, "height": height})

        x_axis = s.create("group", "x axis line-axis", {"transform": f"translate(0,{height})", "opacity": 0.0})
        self.axes.x(s, x_axis)
        y_axis = s.create("group", "y axis line-axis", {"opacity": 0.0})
        self.axes.y(s, y_axis)
        x_bar_axis = s.create("group", "x bar axis bar-axis", {"transform": f"translate(0,{height})", "opacity": 0.0})
        self.axes.x_bar(s, x_bar_axis)
        y_bar_axis = s.create("group", "y bar axis bar-axis", {"opacity": 0.0})
        self.axes.y_bar(s, y_bar_axis)

        line = s.create(
            "path", "line",
            {
                "d": line_path(points, self.scales.x, self.scales.y),
                "clip-path": "url(#clip)",
                "transform": self._shift,
                "opacity": 0.0,
            },
        )

        highlighted = []
        annotations = []
        for point, marker in self.highlighted_points(points):
            highlighted.append(s.create(
                "circle", "dot",
                {
                    "cx": self.scales.x(point.date),
                    "cy": self.scales.y(point.close),
                    "transform": self._shift,
                    "opacity": 0.0,
                },
                datum=point,
            ))
            annotations.append(s.create(
                "text", "annotation text",
                {
                    "x": self.scales.x(point.date) + ANNOTATION_DX,
                    "y": self.scales.y(point.close - ANNOTATION_DCLOSE),
                    "opacity": 0.0,
                },
                datum=point,
                text=marker.label,
            ))

        self.scene = Scene(
            points=points,
            title=title,
            subtitle=subtitle,
            closing=closing,
            clip=clip,
            x_axis=x_axis,
            y_axis=y_axis,
            x_bar_axis=x_bar_axis,
            y_bar_axis=y_bar_axis,
            line=line,
            highlighted=highlighted,
            annotations=annotations,
        )
        self.scene.dimmed = self._create_dimmed_dots(points)

        logger.info(
            f"Built scene: {len(points)} points, {len(highlighted)} highlighted, "
            f"{len(s.elements)} elements"
        )
        return self.scene

    def _create_dimmed_dots(self, points: list[TimeSeriesPoint]) -> list[VisualElement]:
        return [
            self.surface.create(
                "circle", "dots",
                {
                    "cx": self.scales.x(point.date),
                    "cy": self.scales.y(point.close),
                    "transform": self._shift,
                    "opacity": DIMMED_OPACITY,
                },
                datum=point,
            )
            for point in points
        ]

    def current_line_path(self) -> str:
        """Line path for the current scale domains."""
        if self.scene is None:
            raise RuntimeError("Scene not built")
        return line_path(self.scene.points, self.scales.x, self.scales.y)

    def rebuild_dimmed_dots(self) -> list[VisualElement]:
        """Re-create the dimmed dots after they were removed.

        Dots still on the surface are left alone, so this never duplicates them.
        """
        if self.scene is None:
            raise RuntimeError("Scene not built")
        if any(not dot.removed for dot in self.scene.dimmed):
            return self.scene.dimmed
        self.scene.dimmed = self._create_dimmed_dots(self.scene.points)
        logger.debug(f"Rebuilt {len(self.scene.dimmed)} dimmed dots")
        return self.scene.dimmed
