#!/usr/bin/env python3
"""Quick start example for scrollvis.

Draws the chart on a synthetic series, scrolls through every section and
prints which elements are visible after each step.

Usage:
    python examples/quick_start.py
"""

from scrollvis.data.synthetic_generator import SyntheticSeriesGenerator
from scrollvis.essays.chart import ScrollVis
from scrollvis.essays.scroller import Scroller, display

GROUPS = ("apple-title", "line", "dot", "dots", "annotation", "bar", "bar-text", "bottomline")


def main() -> None:
    """Scroll through the five sections and click once."""
    print("=" * 60)
    print("scrollvis - Quick Start Demo")
    print("=" * 60)

    points = SyntheticSeriesGenerator(seed=42).generate()
    print(f"\nGenerated {len(points)} trading days")

    chart = ScrollVis()
    chart.draw(points)
    scroller = Scroller().steps(5)
    highlighter = display(chart, scroller)

    for index in range(scroller.step_count):
        scroller.notify(index)
        chart.surface.settle()

        print(f"\nSection {index}: {chart.active_section.label}")
        print(f"  Step opacities: {highlighter.opacities}")
        for cls in GROUPS:
            elements = chart.surface.select(cls)
            visible = sum(1 for e in elements if e.opacity > 0)
            print(f"  {cls:<12} {visible}/{len(elements)} visible")

    scroller.notify(1)
    chart.surface.settle()
    i, j = chart.click()
    chart.surface.settle()
    print(f"\nZoomed into {points[i].date} .. {points[j].date}")


if __name__ == "__main__":
    main()
