"""
Event collection and the day-fallback controller.

Everything here runs sequentially: one repository, branch or user at a time,
each remote call finishing before the next starts.
"""

import datetime
import logging
from typing import List, Tuple

from .aggregator import CommitAggregator, to_push_event
from .config import AppConfig
from .dates import end_of_day, format_iso_date, previous_day, start_of_day
from .fetcher import GitHubAPIError, GitHubFetcher
from .models import Contribution, RawEvent
from .ordered import OrderedKeySet
from .processor import EODProcessor
from .repos import resolve_repositories

logger = logging.getLogger("eod-tracker.pipeline")


def event_key(event: RawEvent) -> Tuple[str, datetime.datetime, str]:
    first_sha = event.commits[0].sha if event.commits else ""
    return event.type, event.created_at, first_sha


def check_token(fetcher: GitHubFetcher) -> None:
    """Log who the token belongs to and warn about missing repo scopes. Never fatal."""
    try:
        logger.info("Authenticated as: %s", fetcher.get_authenticated_user())
    except GitHubAPIError as e:
        logger.error("Failed to get authenticated user info. Check your token. (%s)", e)

    try:
        scopes = fetcher.get_token_scopes()
    except GitHubAPIError as e:
        logger.warning("Could not read token scopes: %s", e)
        return

    logger.info("Token scopes: %s", ", ".join(scopes) or "none")
    if "repo" in scopes:
        return
    if "public_repo" in scopes:
        logger.warning("Token only has 'public_repo' scope. Private repositories will not be accessible.")
    else:
        logger.warning("Token may not have sufficient permissions to access repository data "
                       "(private repositories need the 'repo' scope).")


def collect_events(fetcher: GitHubFetcher, config: AppConfig, day: datetime.date) -> List[RawEvent]:
    """
    Gather push activity for ``day`` from commit listings and user event feeds.

    A failing repository or user is logged and skipped; a 404 on a repository
    is skipped without a warning.
    """
    since = start_of_day(day)
    until = end_of_day(day)

    events: OrderedKeySet[RawEvent] = OrderedKeySet(key=event_key)
    repos = resolve_repositories(fetcher, config.organization, config.target_repos)
    aggregator = CommitAggregator(fetcher, max_branches=config.max_branches)

    for repo in repos:
        try:
            commits = aggregator.aggregate(repo, since, until)
        except GitHubAPIError as e:
            if e.status != 404:
                logger.warning("Failed to fetch commits for %s: %s", repo, e)
            continue
        if commits:
            logger.debug("Found %d commits across all branches for %s", len(commits), repo)
            events.add(to_push_event(repo, commits, since))

    for user in config.target_users:
        try:
            events.extend(fetcher.get_user_public_events(user))
        except GitHubAPIError as e:
            logger.warning("Failed to fetch events for user %s: %s", user, e)
            continue
        try:
            events.extend(fetcher.get_user_events(user))
        except GitHubAPIError as e:
            logger.debug("Full event feed unavailable for %s: %s", user, e)

    logger.debug("Collected %d unique events for %s", len(events), format_iso_date(day))
    return events.to_list()


def contributions_for_day(fetcher: GitHubFetcher, config: AppConfig, day: datetime.date) -> List[Contribution]:
    events = collect_events(fetcher, config, day)
    processor = EODProcessor(target_repos=config.target_repos, target_users=config.target_users, date=day)
    return processor.process(events)


def build_contributions(fetcher: GitHubFetcher, config: AppConfig) -> Tuple[datetime.date, List[Contribution]]:
    """
    Run the pipeline for the configured date, falling back to the previous day once.

    Returns:
        (report date, contributions). When both days are empty the configured
        date is returned with an empty list.
    """
    contributions = contributions_for_day(fetcher, config, config.date)
    if contributions or not config.check_previous_day:
        return config.date, contributions

    prev = previous_day(config.date)
    logger.info("No contributions found for %s. Checking previous day...", format_iso_date(config.date))
    fallback = contributions_for_day(fetcher, config, prev)
    if fallback:
        return prev, fallback
    return config.date, []
