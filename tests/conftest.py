"""Shared pytest fixtures for the EOD tracker test suite."""

import pytest

from eod_tracker.config import AppConfig

from tests.helpers import DAY


@pytest.fixture
def make_config():
    """Factory for AppConfig with test defaults; keyword overrides win."""
    def _make(**overrides) -> AppConfig:
        values = dict(token="test-token", date=DAY)
        values.update(overrides)
        return AppConfig(**values)
    return _make


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every test from an empty directory so no stray .env or reports leak in."""
    monkeypatch.chdir(tmp_path)
    for name in ("GITHUB_TOKEN", "TARGET_REPOS", "TARGET_USERS", "GITHUB_ORG", "TARGET_DATE",
                 "CHECK_PREVIOUS_DAY", "OUTPUT_FORMAT", "NO_FILES", "OUTPUT_DIR", "DEBUG", "MAX_BRANCHES",
                 "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_WHATSAPP_FROM", "WHATSAPP_TO"):
        monkeypatch.delenv(name, raising=False)
    yield tmp_path
