"""
Delivery formatting for the end-of-day summary.

The transport is any object with a ``send(body)`` method (see
``send.TwilioNotifier``); this module only prepares and sequences the
message parts.
"""

import datetime
import logging
import os
import time
from typing import Any, List, Optional, Protocol

from .dates import format_human_date

logger = logging.getLogger("eod-tracker.notifier")

MAX_MESSAGE_LENGTH = 1500
SUMMARY_PREFIX = "eod-summary"


class Notifier(Protocol):
    def send(self, body: str) -> Any:
        ...


def format_message_parts(content: str, date: Optional[datetime.date] = None) -> List[str]:
    """
    Prefix the summary with a header and split it to fit the message limit.

    Splits prefer the last newline inside the limit when it sits past the
    halfway point; otherwise the content is cut at the limit.
    """
    date_str = format_human_date(date or datetime.date.today())
    header = f"*EOD Summary - {date_str}*\n\n"

    if len(header) + len(content) <= MAX_MESSAGE_LENGTH:
        return [header + content]

    def part_header(current, total) -> str:
        return f"*EOD Summary - {date_str} (Part {current}/{total})*\n\n"

    max_content = MAX_MESSAGE_LENGTH - len(part_header(99, 99))

    chunks: List[str] = []
    remaining = content
    while remaining:
        end = min(max_content, len(remaining))
        if end < len(remaining):
            newline = remaining.rfind("\n", 0, max_content)
            if newline > max_content / 2:
                end = newline + 1
        chunks.append(remaining[:end])
        remaining = remaining[end:]

    total = len(chunks)
    return [part_header(i, total) + chunk for i, chunk in enumerate(chunks, start=1)]


def find_latest_summary(output_dir: str) -> Optional[str]:
    """Return the lexicographically last ``eod-summary*`` file in ``output_dir``."""
    if not os.path.isdir(output_dir):
        return None
    names = sorted((n for n in os.listdir(output_dir) if n.startswith(SUMMARY_PREFIX)), reverse=True)
    if not names:
        return None
    return os.path.join(output_dir, names[0])


def send_summary(notifier: Notifier, content: str, date: Optional[datetime.date] = None,
                 delay: float = 1.0) -> List[Any]:
    """Send every part in order, pausing ``delay`` seconds between parts."""
    parts = format_message_parts(content, date)
    if len(parts) > 1:
        logger.info("Sending message in %d parts...", len(parts))

    results = []
    for i, part in enumerate(parts, start=1):
        logger.debug("Sending part %d of %d (%d chars)", i, len(parts), len(part))
        results.append(notifier.send(part))
        if i < len(parts) and delay > 0:
            time.sleep(delay)
    return results
