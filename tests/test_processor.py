"""Tests for EODProcessor filtering and grouping."""

import datetime

import pytest

from eod_tracker.dates import end_of_day, start_of_day
from eod_tracker.models import EventCommit, RawEvent
from eod_tracker.processor import EODProcessor

from tests.helpers import DAY, local_time, push_event

ONE_MS = datetime.timedelta(milliseconds=1)
NOON = local_time(DAY, 12)


class TestDateWindow:

    @pytest.mark.parametrize("created_at, included", [
        (start_of_day(DAY), True),
        (end_of_day(DAY), True),
        (start_of_day(DAY) - ONE_MS, False),
        (end_of_day(DAY) + ONE_MS, False),
    ])
    def test_boundaries_are_inclusive(self, created_at, included) -> None:
        event = push_event("o/r", [("a" * 40, "alice")], created_at)

        result = EODProcessor(date=DAY).process([event])

        assert bool(result) is included

    def test_naive_timestamps_are_treated_as_utc(self) -> None:
        utc_noon = start_of_day(DAY).astimezone(datetime.timezone.utc) + datetime.timedelta(hours=12)
        naive = utc_noon.replace(tzinfo=None)
        event = push_event("o/r", [("a" * 40, "alice")], naive)

        assert EODProcessor(date=DAY).process([event])


class TestFiltering:

    def test_non_push_events_are_ignored(self) -> None:
        event = push_event("o/r", [("a" * 40, "alice")], NOON, event_type="IssuesEvent")
        assert EODProcessor(date=DAY).process([event]) == []

    def test_repo_filter(self) -> None:
        events = [
            push_event("o/kept", [("a" * 40, "alice")], NOON),
            push_event("o/other", [("b" * 40, "alice")], NOON),
        ]

        result = EODProcessor(target_repos=["o/kept"], date=DAY).process(events)

        assert [c.repo for c in result] == ["o/kept"]

    def test_only_target_authors_commits_are_kept(self) -> None:
        event = push_event("o/r", [("a" * 40, "alice"), ("b" * 40, "bob")], NOON)

        result = EODProcessor(target_users=["alice"], date=DAY).process([event])

        assert len(result) == 1
        assert [c.author for c in result[0].commits] == ["alice"]
        assert result[0].commits[0].hash == "a" * 7

    def test_actor_match_qualifies_event_but_commits_still_filtered(self) -> None:
        # Actor matches, but no commit author does: the event qualifies and then
        # contributes nothing, so no Contribution is created.
        event = push_event("o/r", [("a" * 40, "Alice Smith")], NOON, actor="alice")

        processor = EODProcessor(target_users=["alice"], date=DAY)

        assert processor.qualifies(event)
        assert processor.process([event]) == []

    def test_unmatched_user_is_dropped(self) -> None:
        event = push_event("o/r", [("a" * 40, "carol")], NOON, actor="carol")
        assert EODProcessor(target_users=["alice"], date=DAY).process([event]) == []

    def test_event_without_commits_adds_nothing(self) -> None:
        event = push_event("o/r", [], NOON)
        assert EODProcessor(date=DAY).process([event]) == []

    def test_empty_targets_keep_everything(self) -> None:
        event = push_event("o/r", [("a" * 40, "alice"), ("b" * 40, "bob")], NOON)

        result = EODProcessor(date=DAY).process([event])

        assert [c.author for c in result[0].commits] == ["alice", "bob"]


class TestGrouping:

    def test_one_contribution_per_repo_sorted_by_name(self) -> None:
        events = [
            push_event("zeta/r", [("a" * 40, "alice")], NOON),
            push_event("Alpha/r", [("b" * 40, "alice")], NOON),
            push_event("zeta/r", [("c" * 40, "alice")], NOON),
            push_event("alpha/r", [("d" * 40, "alice")], NOON),
        ]

        result = EODProcessor(date=DAY).process(events)

        # Case-sensitive ordering: upper case sorts first
        assert [c.repo for c in result] == ["Alpha/r", "alpha/r", "zeta/r"]
        assert [c.hash for c in result[2].commits] == ["a" * 7, "c" * 7]

    def test_commit_timestamp_prefers_commit_date(self) -> None:
        commit_time = local_time(DAY, 16)
        event = RawEvent(
            type="PushEvent",
            created_at=start_of_day(DAY),
            repo_name="o/r",
            commits=[EventCommit(sha="a" * 40, message="m", author_name="alice", timestamp=commit_time)],
        )

        result = EODProcessor(date=DAY).process([event])

        assert result[0].commits[0].timestamp == commit_time

    def test_commit_timestamp_falls_back_to_event_time(self) -> None:
        event = push_event("o/r", [("a" * 40, "alice")], NOON)

        result = EODProcessor(date=DAY).process([event])

        assert result[0].commits[0].timestamp == NOON
