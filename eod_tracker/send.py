#!/usr/bin/env python3
"""
Command-line entry point that delivers the latest end-of-day summary.

Reads the newest ``eod-summary*`` file from the report directory and sends it
as one or more WhatsApp messages through the Twilio REST API.

Usage (example):
    python -m eod_tracker.send
"""

import logging
import os
import sys
from typing import Any, Dict, Optional

import requests
from dotenv import find_dotenv, load_dotenv

from .config import DEFAULT_OUTPUT_DIR, ConfigError, NotifierConfig, load_notifier_config
from .main import setup_logging
from .notifier import Notifier, find_latest_summary, send_summary

logger = logging.getLogger("eod-tracker.send")

TWILIO_API_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


class TwilioNotifier:
    """WhatsApp transport backed by Twilio's Messages endpoint."""

    def __init__(self, config: NotifierConfig, timeout: int = 30):
        self.config = config
        self.timeout = timeout
        self.url = TWILIO_API_URL.format(sid=config.account_sid)

    def send(self, body: str) -> Dict[str, Any]:
        response = requests.post(
            self.url,
            auth=(self.config.account_sid, self.config.auth_token),
            data={
                "From": _whatsapp(self.config.from_number),
                "To": _whatsapp(self.config.to_number),
                "Body": body,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        message = response.json()
        logger.debug("Message %s queued", message.get("sid"))
        return message


def _whatsapp(number: str) -> str:
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


def run(notifier: Optional[Notifier] = None) -> int:
    """
    Send the latest summary. Returns the process exit code.

    Args:
        notifier: Pre-built transport, mainly for tests
    """
    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = load_notifier_config(os.environ)
    except ConfigError as e:
        setup_logging(False)
        logger.error("Configuration error: %s", e)
        return 1

    setup_logging(config.debug)

    output_dir = os.environ.get("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR
    path = find_latest_summary(output_dir)
    if path is None:
        logger.error("No EOD summary found in %s", output_dir)
        return 1

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        if notifier is None:
            notifier = TwilioNotifier(config)
        logger.info("Sending %s", path)
        send_summary(notifier, content)
        logger.info("EOD summary sent")
        return 0

    except Exception as e:
        logger.error("Sending EOD summary failed: %s", e, exc_info=config.debug)
        return 1


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
