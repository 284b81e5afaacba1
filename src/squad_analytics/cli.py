"""Command-line argument parsing for the squad analytics report."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import OUTPUT_FORMATS, STANDUP_PERIODS


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for a dashboard build.

    Returns:
        Parsed CLI arguments containing the snapshot path, output format,
        optional as-of date, optional standup period and verbosity flag.
    """
    parser = argparse.ArgumentParser(
        prog="squad-analytics",
        description=(
            "Build squad dashboard analytics (velocity, activity heatmap, "
            "swimlanes, milestone burndown) from a JSON snapshot."
        ),
    )

    parser.add_argument(
        "--snapshot",
        required=True,
        help="Path to the JSON snapshot of members, tasks, logs and issues.",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format: human-readable report or JSON payload (default: text).",
    )
    parser.add_argument(
        "--as-of",
        dest="as_of",
        default=None,
        help=(
            "Pin 'now' to a date (YYYY-MM-DD) or ISO-8601 timestamp. "
            "Defaults to SQUAD_ANALYTICS_AS_OF or the current time."
        ),
    )
    parser.add_argument(
        "--standup",
        dest="standup",
        choices=STANDUP_PERIODS,
        default=None,
        help="Print a standup summary for the last day or week instead of the dashboard.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)
