"""Working-set resolution: which repositories a run inspects."""

import logging
from typing import List, Optional

from .fetcher import GitHubAPIError, GitHubFetcher
from .ordered import OrderedKeySet

logger = logging.getLogger("eod-tracker.repos")


def is_full_repo_name(name: str) -> bool:
    parts = name.split("/")
    return len(parts) == 2 and all(parts)


def resolve_repositories(fetcher: GitHubFetcher, organization: Optional[str] = None,
                         explicit: Optional[List[str]] = None) -> List[str]:
    """
    Union of the organization's repos, the account's repos, and explicit names.

    Listing failures are logged and skipped. Bare explicit names are expanded
    with the organization when one is set, otherwise skipped with a warning.
    Each full name appears once; no ordering is promised.
    """
    repos: OrderedKeySet[str] = OrderedKeySet(key=lambda r: r)

    if organization:
        try:
            repos.extend(fetcher.get_org_repos(organization))
        except GitHubAPIError as e:
            logger.warning("Failed to fetch repositories for organization %s: %s", organization, e)

    try:
        repos.extend(fetcher.get_user_repos())
    except GitHubAPIError as e:
        logger.warning("Failed to fetch user repositories: %s", e)

    for name in explicit or []:
        if not name:
            continue
        if "/" not in name and organization:
            name = f"{organization}/{name}"
        if not is_full_repo_name(name):
            logger.warning("Skipping invalid repo format: %s", name)
            continue
        repos.add(name)

    logger.debug("Repositories to fetch commits from:\n%s", "\n".join(repos))
    return repos.to_list()
