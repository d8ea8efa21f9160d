"""Tests for delivering the latest summary through the messaging transport."""

from unittest.mock import MagicMock

import pytest
import requests

from eod_tracker import send
from eod_tracker.config import NotifierConfig


@pytest.fixture
def notifier_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "AC123")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "secret")
    monkeypatch.setenv("TWILIO_WHATSAPP_FROM", "+14155238886")
    monkeypatch.setenv("WHATSAPP_TO", "whatsapp:+15550001111")
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "reports"))
    return tmp_path / "reports"


@pytest.fixture(autouse=True)
def no_sleep(mocker):
    return mocker.patch("eod_tracker.notifier.time.sleep")


class TestTwilioNotifier:

    def test_posts_whatsapp_message(self, mocker) -> None:
        post = mocker.patch("eod_tracker.send.requests.post")
        post.return_value.json.return_value = {"sid": "SM1"}
        config = NotifierConfig(account_sid="AC123", auth_token="secret",
                                from_number="+14155238886", to_number="whatsapp:+15550001111")

        result = send.TwilioNotifier(config).send("hello")

        assert result == {"sid": "SM1"}
        args, kwargs = post.call_args
        assert args[0] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
        assert kwargs["auth"] == ("AC123", "secret")
        assert kwargs["data"] == {"From": "whatsapp:+14155238886", "To": "whatsapp:+15550001111", "Body": "hello"}
        assert kwargs["timeout"] == 30
        post.return_value.raise_for_status.assert_called_once()

    def test_http_error_propagates(self, mocker) -> None:
        post = mocker.patch("eod_tracker.send.requests.post")
        post.return_value.raise_for_status.side_effect = requests.HTTPError("401")
        config = NotifierConfig(account_sid="AC123", auth_token="bad", from_number="+1", to_number="+2")

        with pytest.raises(requests.HTTPError):
            send.TwilioNotifier(config).send("hello")


class TestRun:

    def test_missing_config_exits_nonzero(self) -> None:
        notifier = MagicMock()
        assert send.run(notifier=notifier) == 1
        notifier.send.assert_not_called()

    def test_no_summary_file_exits_nonzero(self, notifier_env) -> None:
        notifier = MagicMock()
        assert send.run(notifier=notifier) == 1
        notifier.send.assert_not_called()

    def test_sends_latest_summary_in_parts(self, notifier_env) -> None:
        notifier_env.mkdir()
        (notifier_env / "eod-summary-2024-04-30.txt").write_text("old", encoding="utf-8")
        content = ("• " + "s" * 97 + "\n") * 30
        (notifier_env / "eod-summary.txt").write_text(content, encoding="utf-8")
        notifier = MagicMock()

        assert send.run(notifier=notifier) == 0

        sent = [call.args[0] for call in notifier.send.call_args_list]
        assert len(sent) == 3
        assert "(Part 1/3)" in sent[0]
        assert "".join(p.split("\n\n", 1)[1] for p in sent) == content

    def test_builds_twilio_transport_from_environment(self, notifier_env, mocker) -> None:
        notifier_env.mkdir()
        (notifier_env / "eod-summary.txt").write_text("short", encoding="utf-8")
        post = mocker.patch("eod_tracker.send.requests.post")
        post.return_value.json.return_value = {"sid": "SM1"}

        assert send.run() == 0
        assert post.call_args.kwargs["data"]["To"] == "whatsapp:+15550001111"
        assert post.call_args.kwargs["data"]["Body"].endswith("\n\nshort")

    def test_transport_failure_exits_nonzero(self, notifier_env) -> None:
        notifier_env.mkdir()
        (notifier_env / "eod-summary.txt").write_text("short", encoding="utf-8")
        notifier = MagicMock()
        notifier.send.side_effect = requests.ConnectionError("down")

        assert send.run(notifier=notifier) == 1
