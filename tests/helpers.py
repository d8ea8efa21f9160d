"""Factories and an in-memory GitHubFetcher stand-in shared by the tests."""

import datetime
from typing import Dict, List, Optional, Tuple

from eod_tracker.dates import start_of_day
from eod_tracker.fetcher import GitHubAPIError
from eod_tracker.models import PUSH_EVENT, EventCommit, RawEvent, RemoteCommit

DAY = datetime.date(2024, 5, 1)


def local_time(day: datetime.date, hour: int, minute: int = 0) -> datetime.datetime:
    return start_of_day(day) + datetime.timedelta(hours=hour, minutes=minute)


def remote_commit(sha: str, author: str = "alice", day: datetime.date = DAY, hour: int = 12,
                  message: Optional[str] = None, login: Optional[str] = None) -> RemoteCommit:
    return RemoteCommit(
        sha=sha,
        message=message or f"commit {sha}",
        author_name=author,
        author_login=login,
        date=local_time(day, hour),
    )


def push_event(repo: str, commits: List[Tuple[str, str]], created_at: datetime.datetime,
               actor: Optional[str] = None, event_type: str = PUSH_EVENT) -> RawEvent:
    """Build an event from (sha, author) pairs."""
    return RawEvent(
        type=event_type,
        created_at=created_at,
        repo_name=repo,
        commits=[EventCommit(sha=sha, message=f"message for {sha}", author_name=author) for sha, author in commits],
        actor_login=actor,
    )


class FakeFetcher:
    """
    Serves canned data keyed the way GitHubFetcher's methods are called.

    ``commits`` maps (repo, branch) to a list of RemoteCommit; the window
    filter compares each commit's date against [since, until].
    ``failures`` maps a call description to a status code to raise.
    """

    def __init__(self, user_repos=None, org_repos=None, branches=None, commits=None,
                 public_events=None, events=None, failures=None) -> None:
        self.user_repos: List[str] = user_repos or []
        self.org_repos: Dict[str, List[str]] = org_repos or {}
        self.branches: Dict[str, List[str]] = branches or {}
        self.commits: Dict[Tuple[str, str], List[RemoteCommit]] = commits or {}
        self.public_events: Dict[str, List[RawEvent]] = public_events or {}
        self.events: Dict[str, List[RawEvent]] = events or {}
        self.failures: Dict[str, Optional[int]] = failures or {}
        self.calls: List[str] = []

    def _check(self, call: str) -> None:
        self.calls.append(call)
        if call in self.failures:
            raise GitHubAPIError(f"failed: {call}", status=self.failures[call])

    def get_authenticated_user(self) -> str:
        self._check("user")
        return "alice"

    def get_token_scopes(self) -> List[str]:
        self._check("scopes")
        return ["repo"]

    def get_org_repos(self, org):
        self._check(f"org:{org}")
        return list(self.org_repos.get(org, []))

    def get_user_repos(self):
        self._check("user_repos")
        return list(self.user_repos)

    def get_branches(self, repo):
        self._check(f"branches:{repo}")
        return list(self.branches.get(repo, []))

    def get_commits(self, repo, since, until, sha=None):
        self._check(f"commits:{repo}:{sha}")
        return [c for c in self.commits.get((repo, sha), []) if since <= c.date <= until]

    def get_user_public_events(self, user):
        self._check(f"public_events:{user}")
        return list(self.public_events.get(user, []))

    def get_user_events(self, user):
        self._check(f"events:{user}")
        return list(self.events.get(user, []))


