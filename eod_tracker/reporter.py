"""
Report rendering module.

This module contains the Reporter class responsible for turning Contribution
records into console output, report files (txt/json/md) and the condensed
end-of-day summary consumed by the notifier.
"""

import datetime
import json
import logging
import os
from typing import List, Optional, Tuple

from .dates import as_aware, format_full_timestamp, format_human_date
from .models import Commit, Contribution
from .ordered import OrderedKeySet

logger = logging.getLogger("eod-tracker.reporter")

LATEST_SUMMARY_NAME = "eod-summary.txt"


def sort_and_dedup(commits: List[Commit]) -> List[Commit]:
    """
    Newest first, then drop repeated short hashes keeping the newest.

    Returns a new list; the input is left untouched. Keyed on the 7-char hash,
    so two distinct commits sharing a prefix would collapse into one line.
    """
    ordered = sorted(commits, key=lambda c: as_aware(c.timestamp), reverse=True)
    return OrderedKeySet(key=lambda c: c.hash, items=ordered).to_list()


class Reporter:
    """
    Render contributions for the console and for files under ``output_dir``.

    Every rendering goes through :func:`sort_and_dedup`.

    Args:
        output_format: "simple" (one line per commit) or "detailed"
        output_dir: Directory report files are written to
        no_files: Suppress all file writes
    """

    def __init__(self, output_format: str = "simple", output_dir: str = "reports", no_files: bool = False) -> None:
        self.output_format = output_format
        self.output_dir = output_dir or "reports"
        self.no_files = no_files

    def _format_commit(self, commit: Commit) -> str:
        if self.output_format == "detailed":
            return (
                f"- {commit.hash}\n"
                f"  Author: {commit.author}\n"
                f"  Date: {format_full_timestamp(commit.timestamp)}\n"
                f"  Message:\n"
                f"  {commit.message}\n"
            )
        return f"- {commit.hash}: {commit.first_line} ({commit.author})"

    def render(self, contributions: List[Contribution], date_str: str) -> str:
        """Plain-text report used for both the console and ``.txt`` files."""
        lines: List[str] = [f"Contributions for {date_str}:\n"]
        for c in contributions:
            lines.append(f"\n{c.repo}:")
            for commit in sort_and_dedup(c.commits):
                lines.append(self._format_commit(commit))
        return "\n".join(lines)

    def render_markdown(self, contributions: List[Contribution], date_str: str) -> str:
        lines: List[str] = [f"# Contributions for {date_str}"]
        for c in contributions:
            lines.append(f"\n## {c.repo}")
            for commit in sort_and_dedup(c.commits):
                lines.append(
                    f"- `{commit.hash}` - **{commit.author}** on {format_full_timestamp(commit.timestamp)}\n"
                    f"  > {commit.message}"
                )
        return "\n".join(lines)

    def render_json(self, contributions: List[Contribution]) -> str:
        data = [
            Contribution(repo=c.repo, commits=sort_and_dedup(c.commits)).to_dict()
            for c in contributions
        ]
        return json.dumps(data, indent=2, ensure_ascii=False)

    def print_report(self, contributions: List[Contribution], date_str: str) -> None:
        print("\n" + self.render(contributions, date_str))

    def _write(self, filename: str, content: str) -> Optional[str]:
        if self.no_files:
            return None
        os.makedirs(self.output_dir, exist_ok=True)
        path = os.path.join(self.output_dir, filename)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def write_to_file(self, contributions: List[Contribution], date_str: str, fmt: str = "txt") -> Optional[str]:
        """
        Write the full report to ``contributions-<date>.<fmt>``, overwriting it.

        Args:
            contributions: Contributions to render
            date_str: Report date (YYYY-MM-DD), used in the filename and title
            fmt: "txt", "json" or "md"

        Returns:
            Path of the written file, or None when file output is disabled
        """
        if fmt == "json":
            content = self.render_json(contributions)
        elif fmt == "md":
            content = self.render_markdown(contributions, date_str)
        else:
            fmt = "txt"
            content = self.render(contributions, date_str)

        path = self._write(f"contributions-{date_str}.{fmt}", content)
        if path:
            logger.info("Report written to %s", path)
        return path

    def generate_minimal_eod_report(self, contributions: List[Contribution],
                                    date: Optional[datetime.date] = None) -> str:
        """Condensed summary: a header, then one bullet per commit under each repository."""
        lines: List[str] = [f"📝 EOD Summary - {format_human_date(date or datetime.date.today())}\n"]
        for c in contributions:
            lines.append(f"📁 Repository: {c.repo}")
            for commit in sort_and_dedup(c.commits):
                lines.append(f"• {commit.first_line} ({commit.author})")
            lines.append("")
        return "\n".join(lines)

    def write_minimal_eod_report_file(self, message: str, date_str: str) -> Optional[Tuple[str, str]]:
        """
        Write the summary to ``eod-summary-<date>.txt`` and to the fixed ``eod-summary.txt``.

        Returns:
            (dated path, latest path), or None when file output is disabled
        """
        dated = self._write(f"eod-summary-{date_str}.txt", message)
        if dated is None:
            return None
        latest = self._write(LATEST_SUMMARY_NAME, message)
        logger.debug("EOD summary written to %s", dated)
        return dated, latest
