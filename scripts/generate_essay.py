#!/usr/bin/env python3
"""
Generate the scroll-driven iPhone hype essay.

This script loads Apple's daily closing prices, draws the five-section chart,
captures one frame per scroll step and writes a scrollytelling HTML page.

Usage:
    # Generate from the default CSV
    python scripts/generate_essay.py --data data/data.csv --output-dir output/essays

    # Generate from a synthetic series (no CSV needed)
    python scripts/generate_essay.py --synthetic --seed 7

    # Apply manual step text overrides
    python scripts/generate_essay.py --overrides config/step_overrides.yaml

    # Export the generated step text (to edit and use as overrides)
    python scripts/generate_essay.py --export-steps config/steps_draft.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from scrollvis.data.local_loader import SeriesLoadResult, load_series
from scrollvis.data.synthetic_generator import SyntheticSeriesGenerator
from scrollvis.essays.chart import ScrollVis
from scrollvis.essays.narratives import build_essay, default_steps
from scrollvis.essays.overrides import apply_overrides, export_steps_to_yaml, load_overrides
from scrollvis.essays.renderers.html import render_essay_html, save_essay_html
from scrollvis.exceptions import ScrollVisError
from scrollvis.settings import get_settings, load_settings


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate the scroll-driven iPhone hype essay",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="CSV with date,close columns (default: data_path from settings)",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the output HTML file (default: output_dir from settings)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML settings file",
    )

    parser.add_argument(
        "--year",
        type=str,
        default=None,
        help="Revenue year shown in the bar chart (default: default_year from settings)",
    )

    parser.add_argument(
        "--overrides",
        type=str,
        default=None,
        help="Path to YAML file with step text overrides",
    )

    parser.add_argument(
        "--export-steps",
        type=str,
        default=None,
        help="Export the generated step text to a YAML file for editing",
    )

    parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Use a synthetic closing price series instead of a CSV",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the synthetic series (default: 42)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args()


def load_points(args: argparse.Namespace, data_path: str, date_format: str) -> SeriesLoadResult:
    """Load the closing price series from CSV, or generate one."""
    if args.synthetic:
        print(f"Generating synthetic series (seed {args.seed})...")
        points = SyntheticSeriesGenerator(seed=args.seed).generate()
        return SeriesLoadResult(points=points, total_rows=len(points))

    print(f"Loading data from {data_path}...")
    result = load_series(data_path, date_format=date_format)
    print(f"  Loaded {result.valid_rows:,} of {result.total_rows:,} rows")
    if result.skipped_rows:
        print(f"  Skipped {result.skipped_rows:,} malformed rows")
    return result


def generate(args: argparse.Namespace) -> Path:
    """Run the whole generation and return the written HTML path."""
    settings = load_settings(args.config) if args.config else get_settings()
    year = args.year or settings.default_year
    if year != settings.default_year:
        settings = settings.model_copy(update={"default_year": year})

    result = load_points(args, args.data or settings.data_path, settings.date_format)

    steps = default_steps(result.points, year=year)

    if args.export_steps:
        export_steps_to_yaml(steps, args.export_steps)
        print(f"Exported step text to: {args.export_steps}")

    if args.overrides:
        print(f"Applying overrides from: {args.overrides}")
        apply_overrides(steps, load_overrides(args.overrides))

    print("Drawing chart...")
    chart = ScrollVis(settings)
    chart.draw(result.points)

    essay = build_essay(result.points, steps, skipped_rows=result.skipped_rows, year=year)

    print("Rendering HTML...")
    html = render_essay_html(chart, essay)

    output_path = Path(args.output_dir or settings.output_dir) / f"{essay.essay_id}.html"
    save_essay_html(html, output_path)
    print(f"Saved essay to: {output_path}")
    return output_path


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.verbose:
        print("Essay Generator")
        print("=" * 40)

    try:
        generate(args)
    except KeyboardInterrupt:
        print("\nCancelled by user")
        sys.exit(1)
    except (ScrollVisError, FileNotFoundError) as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
