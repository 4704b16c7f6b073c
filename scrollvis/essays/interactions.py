"""
Click-to-zoom range selector for the line chart.

A click picks a random sub-range of the series, restricts the time scale
to it and animates the line axes and the line path to the new domain.
The dimmed dots are removed (they would sit at stale positions) until
they are explicitly rebuilt.

The random source is injectable so the choice can be reproduced in tests;
in normal use every click picks a fresh range.
"""

import logging
import math
import random
from typing import Callable

from scrollvis.essays.scene import ChartAxes, ChartScales, SceneBuilder
from scrollvis.essays.surface import Surface

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]


def pick_range(n_points: int, rng: RandomSource = random.random) -> tuple[int, int]:
    """Pick indices i < j of a random sub-range of the series.

    With n = n_points - 1: i = floor(r1 * n / 2) and j = i + floor(r2 * n / 2) + 1,
    so i falls in the first half and j at most n.

    Args:
        n_points: Length of the series (at least 2)
        rng: Returns floats in [0, 1)

    Returns:
        (i, j) with 0 <= i < j <= n_points - 1
    """
    if n_points < 2:
        raise ValueError(f"Need at least 2 points to pick a range, got {n_points}")

    n = n_points - 1
    i = math.floor(rng() * n / 2)
    j = i + math.floor(rng() * n / 2) + 1
    return i, j


class RangeSelector:
    """Zooms the line chart onto a random date range on click."""

    def __init__(
        self,
        surface: Surface,
        builder: SceneBuilder,
        scales: ChartScales,
        axes: ChartAxes,
        *,
        duration: int = 200,
        rng: RandomSource = random.random,
    ):
        self.surface = surface
        self.builder = builder
        self.scales = scales
        self.axes = axes
        self.duration = duration
        self.rng = rng

    def click(self) -> tuple[int, int]:
        """Zoom onto a freshly picked range. Returns the chosen (i, j)."""
        scene = self.builder.scene
        if scene is None:
            raise RuntimeError("Scene not built")

        points = scene.points
        i, j = pick_range(len(points), self.rng)
        self.scales.x.domain = (points[i].date, points[j].date)

        self.axes.x.transition(self.surface, scene.x_axis, self.duration)
        self.axes.y.transition(self.surface, scene.y_axis, self.duration)
        self.surface.animate(scene.line, {"d": self.builder.current_line_path()}, self.duration)

        for dot in scene.dimmed:
            if not dot.removed:
                self.surface.remove(dot)

        logger.info(f"Zoomed to {points[i].date.isoformat()} .. {points[j].date.isoformat()}")
        return i, j
