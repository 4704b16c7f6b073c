"""
Rendering for the scroll essay.

SVG snapshots of the drawing surface, and Jinja2-based scrollytelling HTML
with one frame per step.
"""

from scrollvis.essays.renderers.html import render_essay_html, save_essay_html
from scrollvis.essays.renderers.svg import render_svg

__all__ = ["render_essay_html", "render_svg", "save_essay_html"]
