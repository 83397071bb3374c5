"""
Command-line interface for the API timeline builder.
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from .database import ReleaseDatabase
from .reporting import export_resources_csv, export_worksheets, print_summary, save_timeline_json
from .time_utils import parse_timestamp
from .timeline import NUM_RECENT_RELEASES, create_timeline


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a timeline of the Kubernetes API surface from per-release snapshots"
    )

    parser.add_argument(
        "--data-dir",
        default="./data",
        help="Directory containing release-*.json snapshots and releases.json. Default: ./data"
    )

    parser.add_argument(
        "--output-dir",
        default="./output",
        help="Output directory for results. Default: ./output"
    )

    parser.add_argument(
        "--now",
        default=None,
        help="Reference time for support status (YYYY-MM-DD or ISO 8601). Default: now"
    )

    parser.add_argument(
        "--recent-releases",
        type=int,
        default=NUM_RECENT_RELEASES,
        help=f"Number of most recent releases that are not archived. Default: {NUM_RECENT_RELEASES}"
    )

    parser.add_argument(
        "--detect-maturity-changes",
        action="store_true",
        help="Also flag releases in which an API group gains a more mature version"
    )

    parser.add_argument(
        "--export-csv",
        action="store_true",
        help="Export a flat table of all API resources as CSV"
    )

    parser.add_argument(
        "--get-worksheets",
        action="store_true",
        help="Export the timeline to an Excel file with one sheet per API group"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.recent_releases < 0:
        parser.error("--recent-releases must not be negative")

    if args.now:
        try:
            now = parse_timestamp(args.now)
        except ValueError:
            print("Error: Invalid --now format. Use YYYY-MM-DD or ISO 8601", file=sys.stderr)
            sys.exit(1)
    else:
        now = datetime.now(timezone.utc)

    output_dir = Path(args.output_dir)

    try:
        database = ReleaseDatabase(Path(args.data_dir))
        releases = database.releases()

        timeline = create_timeline(
            releases,
            now,
            recent_releases=args.recent_releases,
            detect_maturity_changes=args.detect_maturity_changes,
        )
        print_summary(timeline)

        timeline_file = save_timeline_json(timeline, output_dir)
        logger.info("Timeline saved to: %s", timeline_file)

        if args.export_csv:
            csv_file = export_resources_csv(timeline, output_dir)
            logger.info("Resource table saved to: %s", csv_file)

        if args.get_worksheets:
            excel_file = export_worksheets(timeline, output_dir)
            if excel_file is not None:
                logger.info("Worksheets saved to: %s", excel_file)

    except Exception as e:
        print(f"\nError while building timeline: {e}", file=sys.stderr)
        logger.debug("Traceback", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
