"""
Essays module for the scroll-driven chart.

Key components:
- scales: Linear, time and band scales
- surface: In-memory drawing surface with timed animations
- reconcile: Keyed data join (enter/update/exit) and the bar join
- scene: Persistent chart elements built once per chart
- transitions: Per-section opacity targets and the transition director
- sections: Section state machine
- interactions: Random range zoom on click
- chart: ScrollVis, tying all of the above together
- scroller: Step event dispatch
- narratives / overrides: Step text, with YAML overrides
- renderers: SVG frames and scrollytelling HTML

Example usage:
    from scrollvis.data import load_series
    from scrollvis.essays import ScrollVis

    chart = ScrollVis()
    chart.draw(load_series("data/data.csv").points)
    chart.activate(2)
"""

from scrollvis.essays.base import ActiveIndexCursor, Essay, ScrollyStep, SectionState
from scrollvis.essays.chart import ScrollVis
from scrollvis.essays.scroller import Scroller, display

__all__ = [
    "ActiveIndexCursor",
    "Essay",
    "ScrollyStep",
    "SectionState",
    "ScrollVis",
    "Scroller",
    "display",
]
