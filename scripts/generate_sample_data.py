#!/usr/bin/env python3
"""
Write a synthetic closing price CSV for local runs.

Usage:
    python scripts/generate_sample_data.py --output data/data.csv --seed 42
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from scrollvis.data.synthetic_generator import SyntheticSeriesGenerator


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Write a synthetic closing price CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--output", type=str, default="data/data.csv", help="Output CSV path")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    generator = SyntheticSeriesGenerator(seed=args.seed)
    points = generator.generate()
    path = generator.write_csv(args.output, points)
    print(f"Wrote {len(points):,} rows to {path}")


if __name__ == "__main__":
    main()
