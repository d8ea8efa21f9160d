"""
Branch sampling and per-repository commit aggregation.

A repository's activity for a window is the union of the commits listed on
each sampled branch, merged by full SHA so a commit reachable from several
branches is reported once.
"""

import datetime
import logging
from typing import List, Optional, Sequence

from .fetcher import GitHubAPIError, GitHubFetcher
from .models import PUSH_EVENT, EventCommit, RawEvent, RemoteCommit
from .ordered import OrderedKeySet

logger = logging.getLogger("eod-tracker.aggregator")

DEFAULT_BRANCHES = ("main", "master")


def sample_branches(branches: Sequence[str], max_branches: int) -> List[str]:
    """
    Limit ``branches`` to ``max_branches`` entries.

    ``main`` (or failing that ``master``) is always kept; the remaining slots are
    filled from the other branches in listing order, not by recency.
    """
    if len(branches) <= max_branches:
        return list(branches)

    default = next((b for b in DEFAULT_BRANCHES if b in branches), None)
    others = [b for b in branches if b not in DEFAULT_BRANCHES]

    sampled = [default] if default else []
    sampled.extend(others[:max(max_branches - len(sampled), 0)])
    return sampled


class CommitAggregator:
    """
    Merge commits across a repository's branches.

    Args:
        fetcher: GitHubFetcher (or anything with ``get_branches``/``get_commits``)
        max_branches: Default branch cap per repository
    """

    def __init__(self, fetcher: GitHubFetcher, max_branches: int = 10) -> None:
        self.fetcher = fetcher
        self.max_branches = max_branches

    def aggregate(self, repo: str, since: datetime.datetime, until: datetime.datetime,
                  max_branches: Optional[int] = None) -> List[RemoteCommit]:
        """
        Fetch commits for every sampled branch of ``repo`` and merge them.

        Per-branch failures are logged and skipped. A failure listing the
        branches propagates to the caller.

        Returns:
            Commits deduplicated by full SHA, first seen wins
        """
        cap = max_branches if max_branches is not None else self.max_branches
        branches = self.fetcher.get_branches(repo)

        sampled = sample_branches(branches, cap)
        if len(sampled) < len(branches):
            logger.debug("Limiting from %d to %d branches for %s", len(branches), len(sampled), repo)
        logger.debug("Checking %d branches for %s: %s", len(sampled), repo, ", ".join(sampled))

        merged: OrderedKeySet[RemoteCommit] = OrderedKeySet(key=lambda c: c.sha)
        for branch in sampled:
            try:
                commits = self.fetcher.get_commits(repo, since, until, sha=branch)
            except GitHubAPIError as e:
                logger.debug("Error fetching commits for branch %s in %s: %s", branch, repo, e)
                continue
            merged.extend(commits)

        return merged.to_list()


def to_push_event(repo: str, commits: List[RemoteCommit], created_at: datetime.datetime) -> RawEvent:
    """Wrap aggregated commits in a synthetic push event for the processor."""
    first = commits[0] if commits else None
    return RawEvent(
        type=PUSH_EVENT,
        created_at=created_at,
        repo_name=repo,
        commits=[
            EventCommit(
                sha=c.sha,
                message=c.message,
                author_name=c.author_name,
                author_email=c.author_email,
                timestamp=c.date,
            )
            for c in commits
        ],
        actor_login=first.author_login if first else None,
    )
