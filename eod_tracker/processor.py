"""
Contribution filtering and grouping.

This module turns the mixed event stream (real push events plus synthetic ones
built from commit listings) into per-repository Contribution records for a
single calendar day.
"""

import datetime
import logging
from typing import Dict, List, Optional

from .dates import as_aware, end_of_day, start_of_day
from .models import Commit, Contribution, EventCommit, RawEvent

logger = logging.getLogger("eod-tracker.processor")

SHORT_HASH_LENGTH = 7


class EODProcessor:
    """
    Filter events down to one day's push activity and group it by repository.

    Args:
        target_repos: Full repo names to keep; empty keeps all
        target_users: Author names or actor logins to keep; empty keeps all
        date: Local calendar day to report on
    """

    def __init__(self, target_repos: Optional[List[str]] = None, target_users: Optional[List[str]] = None,
                 date: Optional[datetime.date] = None) -> None:
        self.target_repos = list(target_repos or [])
        self.target_users = list(target_users or [])
        self.date = date or datetime.date.today()
        self._start = start_of_day(self.date)
        self._end = end_of_day(self.date)

    def is_date_in_range(self, ts: datetime.datetime) -> bool:
        """Inclusive on both ends of the local day."""
        return self._start <= as_aware(ts) <= self._end

    def _repo_matches(self, event: RawEvent) -> bool:
        return not self.target_repos or event.repo_name in self.target_repos

    def _author_matches(self, commit: EventCommit) -> bool:
        return not self.target_users or commit.author_name in self.target_users

    def _user_matches(self, event: RawEvent) -> bool:
        if not self.target_users:
            return True
        if any(c.author_name in self.target_users for c in event.commits):
            return True
        return event.actor_login is not None and event.actor_login in self.target_users

    def qualifies(self, event: RawEvent) -> bool:
        if not event.is_push:
            return False
        if not self.is_date_in_range(event.created_at):
            logger.debug("Event date out of range: %s", event.created_at.isoformat())
            return False
        return self._repo_matches(event) and self._user_matches(event)

    def process(self, events: List[RawEvent]) -> List[Contribution]:
        """
        Return one Contribution per repository, sorted by repo name.

        Events whose commits are all filtered out by author do not produce an
        entry.
        """
        filtered = [e for e in events if self.qualifies(e)]
        logger.debug("Filtered %d of %d events", len(filtered), len(events))

        by_repo: Dict[str, Contribution] = {}
        for event in filtered:
            commits = [
                Commit(
                    hash=c.sha[:SHORT_HASH_LENGTH],
                    message=c.message,
                    author=c.author_name,
                    timestamp=as_aware(c.timestamp or event.created_at),
                )
                for c in event.commits
                if self._author_matches(c)
            ]
            if not commits:
                continue
            entry = by_repo.setdefault(event.repo_name, Contribution(repo=event.repo_name))
            entry.commits.extend(commits)

        return sorted(by_repo.values(), key=lambda c: c.repo)
