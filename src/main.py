"""
Command-line entry point for the Google Jobs scraper.

Run-mode and browser options given here override the values loaded from the
environment / .env file.
"""

import sys
from typing import List, Optional

from src.GJOBS import config
from src.GJOBS import gjobs_scraper


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description='Extract job listings from the Google Jobs view',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summary of the last few jobs (default)
  python -m src.main

  # Custom query, clicking through every job for full details
  python -m src.main --query "Data Analyst jobs in Colombo" --full-detail

  # Headless run that keeps the window open for inspection afterwards
  python -m src.main --headless --keep-open 60
        """
    )

    parser.add_argument(
        '--query', '-q',
        default=config.SEARCH_QUERY,
        help=f'Search query (default: "{config.SEARCH_QUERY}")'
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        '--full-detail', '-f',
        dest='summary_only',
        action='store_false',
        help='Click through every job and capture its detail pane'
    )
    mode.add_argument(
        '--summary-only', '-s',
        dest='summary_only',
        action='store_true',
        help=f'Only report the last {config.SUMMARY_LIMIT} jobs'
    )
    parser.set_defaults(summary_only=config.SUMMARY_ONLY_OUTPUT)

    parser.add_argument(
        '--headless',
        action='store_true',
        default=config.HEADLESS,
        help='Run the browser without a window'
    )

    parser.add_argument(
        '--keep-open',
        type=int,
        default=config.KEEP_OPEN_SECONDS,
        metavar='SECONDS',
        help='Keep the browser open this long after the report'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with command-line argument handling."""
    args = build_parser().parse_args(argv)

    result = gjobs_scraper.main(
        query=args.query,
        summary_only=args.summary_only,
        headless=args.headless,
        keep_open_seconds=args.keep_open,
    )

    # Non-zero exit only when the run never got going
    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(main())
