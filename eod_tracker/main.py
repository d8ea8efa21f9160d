#!/usr/bin/env python3
"""
Command-line entry point for the EOD tracker.

Collects the day's GitHub push activity for the configured users and
repositories, prints it and writes the report files plus the condensed
end-of-day summary.

Usage (example):
    python -m eod_tracker.main --date 2024-05-01 --outputFormat detailed --output md
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .config import FILE_FORMATS, OUTPUT_FORMATS, ConfigError, load_config
from .dates import format_iso_date
from .fetcher import GitHubFetcher
from .pipeline import build_contributions, check_token
from .reporter import Reporter

logger = logging.getLogger("eod-tracker")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize a day's GitHub push activity.")
    parser.add_argument("--date", help="Date to check (YYYY-MM-DD)")
    parser.add_argument("--outputFormat", choices=OUTPUT_FORMATS, help="Console/txt format (simple or detailed)")
    parser.add_argument("--noFiles", action="store_true", default=None, help="Skip writing report files")
    parser.add_argument("--output", choices=FILE_FORMATS, default="txt", help="Report file format")
    return parser


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # PyGithub and urllib3 are noisy at debug level
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def run(argv: Optional[List[str]] = None, fetcher: Optional[GitHubFetcher] = None) -> int:
    """
    Execute one report run. Returns the process exit code.

    Args:
        argv: CLI arguments (defaults to ``sys.argv[1:]``)
        fetcher: Pre-built client, mainly for tests
    """
    args = build_parser().parse_args(argv)
    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = load_config(args, os.environ)
    except ConfigError as e:
        setup_logging(False)
        logger.error("Configuration error: %s", e)
        return 1

    setup_logging(config.debug)

    try:
        if fetcher is None:
            fetcher = GitHubFetcher(token=config.token, debug=config.debug)
        check_token(fetcher)

        report_date, contributions = build_contributions(fetcher, config)
        date_str = format_iso_date(report_date)

        if not contributions:
            print(f"\nNo contributions found for {date_str}")
            return 0

        reporter = Reporter(output_format=config.output_format, output_dir=config.output_dir,
                            no_files=config.no_files)
        reporter.print_report(contributions, date_str)
        reporter.write_to_file(contributions, date_str, config.output)

        summary = reporter.generate_minimal_eod_report(contributions, report_date)
        reporter.write_minimal_eod_report_file(summary, date_str)
        return 0

    except KeyboardInterrupt:
        logger.info("Run interrupted by user")
        print("\nOperation cancelled by user")
        return 1
    except Exception as e:
        logger.error("EOD report failed: %s", e, exc_info=config.debug)
        return 1


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
