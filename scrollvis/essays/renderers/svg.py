"""
SVG serialization of a drawing surface.

Turns the current attribute state of every element into SVG markup.
Hidden elements (opacity 0) are kept so frames of different sections
share the same structure.
"""

from html import escape
from typing import Any

from scrollvis.essays.surface import Surface, VisualElement

DEFAULT_DOT_RADIUS = 3.5

# Attributes describing an axis layout rather than SVG attributes
AXIS_LAYOUT_ATTRS = {"ticks", "orient", "tick_size_inner", "tick_size_outer", "extent"}


def _fmt(value: Any) -> str:
    if isinstance(value, float):
        rounded = round(value, 2)
        return str(int(rounded)) if rounded == int(rounded) else f"{rounded:g}"
    return str(value)


def _attrs_html(element: VisualElement, skip: set[str] | None = None) -> str:
    skip = skip or set()
    parts = [f'class="{escape(" ".join(element.classes))}"']
    if element.key is not None:
        parts.append(f'data-key="{escape(element.key)}"')
    for name, value in element.attrs.items():
        if name in skip or value is None:
            continue
        parts.append(f'{name}="{escape(_fmt(value))}"')
    return " ".join(parts)


def axis_html(element: VisualElement) -> str:
    """Render an axis group with its domain line and ticks."""
    orient = element.attrs.get("orient", "bottom")
    inner = float(element.attrs.get("tick_size_inner", 6))
    outer = float(element.attrs.get("tick_size_outer", 6))
    r0, r1 = element.attrs.get("extent", [0, 0])

    if orient == "bottom":
        domain = f"M{_fmt(r0)},{_fmt(outer)}V0H{_fmt(r1)}V{_fmt(outer)}"
    else:
        domain = f"M{_fmt(-outer)},{_fmt(r0)}H0V{_fmt(r1)}H{_fmt(-outer)}"

    ticks = []
    for position, label in element.attrs.get("ticks", []):
        if orient == "bottom":
            ticks.append(
                f'<g class="tick" transform="translate({_fmt(float(position))},0)">'
                f'<line stroke="currentColor" y2="{_fmt(inner)}"></line>'
                f'<text fill="currentColor" y="{_fmt(max(inner, 0) + 3)}" dy="0.71em">{escape(str(label))}</text></g>'
            )
        else:
            ticks.append(
                f'<g class="tick" transform="translate(0,{_fmt(float(position))})">'
                f'<line stroke="currentColor" x2="{_fmt(-inner)}"></line>'
                f'<text fill="currentColor" x="{_fmt(-(max(inner, 0) + 3))}" dy="0.32em">{escape(str(label))}</text></g>'
            )

    return (
        f'<g {_attrs_html(element, AXIS_LAYOUT_ATTRS)}>'
        f'<path class="domain" stroke="currentColor" fill="none" d="{domain}"></path>'
        f'{"".join(ticks)}</g>'
    )


def element_html(element: VisualElement) -> str:
    """Render one surface element."""
    if element.kind == "group":
        return axis_html(element)

    if element.kind == "clip":
        clip_id = escape(str(element.attrs.get("id", "clip")))
        width = _fmt(element.attrs.get("width", 0))
        height = _fmt(element.attrs.get("height", 0))
        return f'<clipPath id="{clip_id}"><rect width="{width}" height="{height}"></rect></clipPath>'

    if element.kind == "circle" and "r" not in element.attrs:
        return f'<circle {_attrs_html(element)} r="{_fmt(DEFAULT_DOT_RADIUS)}"></circle>'

    if element.kind == "text":
        return f'<text {_attrs_html(element)}>{escape(element.text or "")}</text>'

    return f'<{element.kind} {_attrs_html(element)}></{element.kind}>'


def render_svg(surface: Surface, *, svg_id: str | None = None) -> str:
    """Render the whole surface as an <svg> document fragment.

    Args:
        surface: Surface to serialize
        svg_id: Optional id attribute for the <svg> element

    Returns:
        SVG markup
    """
    margin = surface.margin
    id_attr = f' id="{escape(svg_id)}"' if svg_id else ""
    body = "".join(element_html(e) for e in surface.elements)
    return (
        f'<svg{id_attr} xmlns="http://www.w3.org/2000/svg" '
        f'width="{surface.width}" height="{surface.height}">'
        f'<g transform="translate({margin.get("left", 0)},{margin.get("top", 0)})">'
        f"{body}</g></svg>"
    )
