"""
HTML renderer for the scroll essay using Jinja2 templates.

Renders an Essay plus a drawn chart to a complete HTML document with:
- Scrollytelling structure (sticky graphic, one text step per section)
- One pre-rendered SVG frame per step
- Scrollama inclusion to switch frames while scrolling
"""

import logging
from pathlib import Path

from jinja2 import Environment, select_autoescape

from scrollvis.essays.base import Essay, ScrollyStep
from scrollvis.essays.chart import ScrollVis
from scrollvis.essays.renderers.svg import render_svg
from scrollvis.exceptions import RenderError

logger = logging.getLogger(__name__)


# =============================================================================
# TEMPLATE LOADING
# =============================================================================


def get_template_env() -> Environment:
    """Jinja2 environment for the inline essay templates."""
    env = Environment(
        autoescape=select_autoescape(default_for_string=True, default=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_number"] = _format_number
    return env


def _format_number(value: float | int, decimals: int = 0) -> str:
    """Format number with thousand separators."""
    if isinstance(value, int) or decimals == 0:
        return f"{int(value):,}"
    return f"{value:,.{decimals}f}"


# =============================================================================
# FRAME CAPTURE
# =============================================================================


def capture_frames(chart: ScrollVis, steps: list[ScrollyStep]) -> list[str]:
    """Activate each step's section in order and snapshot the settled surface.

    Args:
        chart: A drawn chart
        steps: Narrative steps; step_number selects the section

    Returns:
        One SVG string per step

    Raises:
        RenderError: If the chart has not been drawn
    """
    if chart.machine is None:
        raise RenderError("Chart must be drawn before capturing frames", output="svg")

    frames = []
    for step in steps:
        chart.activate(step.step_number)
        chart.surface.settle()
        frames.append(render_svg(chart.surface, svg_id=f"frame-{step.step_number}"))
        logger.debug(f"Captured frame for step {step.step_number} ({step.chart_action})")
    return frames


# =============================================================================
# HTML RENDERING
# =============================================================================


def render_essay_html(
    chart: ScrollVis,
    essay: Essay,
    *,
    cdn_base: str = "https://cdn.jsdelivr.net/npm",
) -> str:
    """Render an essay to complete HTML.

    Args:
        chart: A drawn chart; its sections are activated while capturing frames
        essay: The Essay to render
        cdn_base: Base URL for CDN assets

    Returns:
        Complete HTML document as string
    """
    frames = capture_frames(chart, essay.steps)

    context = {
        "essay": essay,
        "steps": list(zip(essay.steps, frames)),
        "first_step": essay.steps[0].step_number if essay.steps else 0,
        "scrollama_url": f"{cdn_base}/scrollama@3/build/scrollama.min.js",
        "essay_css": _get_essay_css(),
        "essay_js": _get_essay_js(),
    }

    env = get_template_env()
    template = env.from_string(_get_main_template())
    return template.render(**context)


# =============================================================================
# INLINE TEMPLATES
# =============================================================================


def _get_main_template() -> str:
    """Get the main essay HTML template."""
    return '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ essay.title }}</title>
    <style>
{{ essay_css | safe }}
    </style>
</head>
<body>
    <header class="essay-banner">
        <h1>{{ essay.title }}</h1>
        <p class="subtitle">{{ essay.subtitle }}</p>
        <div class="metadata">
            <span>{{ essay.data_points | format_number }} trading days</span>
            {% if essay.skipped_rows %}
            <span class="separator">|</span>
            <span>{{ essay.skipped_rows | format_number }} rows skipped</span>
            {% endif %}
            <span class="separator">|</span>
            <span>Generated {{ essay.generated_at.strftime('%B %d, %Y') }}</span>
        </div>
    </header>

    <main id="graphic" class="scrolly-container">
        <div class="scrolly-graphic" id="vis">
            {% for step, frame in steps %}
            <div class="frame{% if step.step_number == first_step %} is-active{% endif %}" data-frame="{{ step.step_number }}">
                {{ frame | safe }}
            </div>
            {% endfor %}
        </div>

        <div class="scrolly-text" id="sections">
            {% for step, frame in steps %}
            <section class="step" data-step="{{ step.step_number }}">
                <div class="step-content">
                    {% if step.headline %}
                    <h3>{{ step.headline }}</h3>
                    {% endif %}
                    <p>{{ step.narrative_text }}</p>
                </div>
            </section>
            {% endfor %}
        </div>
    </main>

    <footer class="essay-footer">
        <p>Generated by scrollvis</p>
    </footer>

    <script src="{{ scrollama_url }}"></script>
    <script>
{{ essay_js | safe }}
    </script>
</body>
</html>'''


def _get_essay_css() -> str:
    """Get embedded CSS for the essay."""
    return '''
body {
    font-family: -apple-system, BlinkMacSystemFont, "Helvetica Neue", Arial, sans-serif;
    margin: 0;
    color: #222;
}

.essay-banner {
    padding: 48px 24px 24px;
    text-align: center;
}

.essay-banner .subtitle {
    color: #666;
}

.metadata {
    font-size: 0.85em;
    color: #888;
}

.metadata .separator {
    margin: 0 8px;
}

.scrolly-container {
    display: flex;
    flex-direction: row-reverse;
    gap: 24px;
    padding: 0 24px;
}

.scrolly-graphic {
    position: sticky;
    top: 10vh;
    flex: 0 0 830px;
    height: 560px;
}

.frame {
    position: absolute;
    top: 0;
    left: 0;
    display: none;
}

.frame.is-active {
    display: block;
}

.scrolly-text {
    flex: 1;
}

.step {
    min-height: 80vh;
    opacity: 0.1;
    transition: opacity 0.3s;
}

.step.is-active {
    opacity: 1;
}

.line {
    fill: none;
    stroke: steelblue;
    stroke-width: 2px;
}

.dot, .dots {
    fill: steelblue;
}

.bar {
    fill: #8aa8c8;
}

.title {
    font-size: 32px;
    text-anchor: middle;
}

.sub-title {
    font-size: 18px;
}

.annotation, .bar-text {
    font-size: 12px;
}

.bar-text {
    text-anchor: middle;
}

.essay-footer {
    padding: 24px;
    text-align: center;
    color: #888;
}
'''


def _get_essay_js() -> str:
    """Get embedded JavaScript for the essay."""
    return '''
document.addEventListener('DOMContentLoaded', function() {
    const scroller = scrollama();

    scroller
        .setup({
            step: '.step',
            offset: 0.5,
        })
        .onStepEnter(response => {
            const step = response.element.dataset.step;

            document.querySelectorAll('.step').forEach(s => s.classList.remove('is-active'));
            response.element.classList.add('is-active');

            document.querySelectorAll('.frame').forEach(f => {
                f.classList.toggle('is-active', f.dataset.frame === step);
            });
        });

    window.addEventListener('resize', scroller.resize);
});
'''


# =============================================================================
# FILE OUTPUT
# =============================================================================


def save_essay_html(html: str, output_path: Path | str) -> None:
    """Save rendered HTML to file.

    Args:
        html: The rendered HTML string
        output_path: Path to write HTML file

    Raises:
        RenderError: If the file cannot be written
    """
    output_path = Path(output_path)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html)
    except OSError as e:
        raise RenderError(f"Could not write essay: {e}", output=str(output_path)) from e

    logger.info(f"Saved essay to {output_path}")
