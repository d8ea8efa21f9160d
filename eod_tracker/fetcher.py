"""
GitHub data fetching module.

This module handles all GitHub API interactions needed to reconstruct a day's
push activity, using PyGithub. Every list operation requests a single page of
up to 100 items; nothing here follows further pages or retries failed calls.
"""

import datetime
import logging
from typing import Any, Dict, List, Optional, Type

import requests

from .models import EventCommit, RawEvent, RemoteCommit, parse_timestamp

# External libs
try:
    from github import Auth, Github, GithubException
    from github.Branch import Branch
    from github.Commit import Commit
    from github.Event import Event
    from github.PaginatedList import PaginatedList
    from github.Repository import Repository
except Exception as e:
    raise RuntimeError("PyGithub is required. Install with: pip install PyGithub") from e

# Set up logging
logger = logging.getLogger("eod-tracker.fetcher")

PER_PAGE = 100
DEFAULT_TIMEOUT = 30


class GitHubAPIError(RuntimeError):
    """An upstream call failed. ``status`` is the HTTP status when one was received."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


def split_repo(full_name: str) -> List[str]:
    parts = full_name.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid repo format: {full_name}")
    return parts


def _iso_utc(ts: datetime.datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=datetime.timezone.utc)
    return ts.astimezone(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_event(data: Dict[str, Any]) -> RawEvent:
    """
    Convert an event payload from the REST API into a RawEvent.

    Raises:
        KeyError, TypeError, ValueError: If required fields are missing or malformed
    """
    payload = data.get("payload") or {}
    commits = []
    for c in payload.get("commits") or []:
        author = c.get("author") or {}
        commits.append(EventCommit(
            sha=c["sha"],
            message=c.get("message") or "",
            author_name=author.get("name") or "",
            author_email=author.get("email"),
        ))
    actor = data.get("actor") or {}
    created_at = data["created_at"]
    if isinstance(created_at, str):
        created_at = parse_timestamp(created_at)
    return RawEvent(
        type=data["type"],
        created_at=created_at,
        repo_name=data["repo"]["name"],
        commits=commits,
        actor_login=actor.get("login"),
    )


def to_remote_commit(c: Commit) -> RemoteCommit:
    """Convert a PyGithub commit-list entry without triggering extra requests."""
    git_commit = c.commit
    git_author = git_commit.author
    login = c.author.login if c.author else None
    return RemoteCommit(
        sha=c.sha,
        message=git_commit.message or "",
        author_name=(git_author.name if git_author else None) or login or "",
        author_email=git_author.email if git_author else None,
        author_login=login,
        date=git_author.date if git_author else None,
    )


class GitHubFetcher:
    """
    Read-only access to the GitHub endpoints the tracker needs.

    Failures surface as GitHubAPIError carrying the HTTP status; deciding whether
    a 404 means "skip" is left to the caller.

    Args:
        token: Personal access token.
        debug: Log every request at debug level.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, token: str, debug: bool = False, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.debug = debug
        try:
            self._g = Github(auth=Auth.Token(token), per_page=PER_PAGE, timeout=timeout, retry=None)
            logger.debug("GitHub client initialized (timeout=%ss)", timeout)
        except Exception as e:
            logger.error("Failed to initialize GitHub client: %s", e)
            raise RuntimeError(f"GitHub client initialization failed: {e}") from e

    def _call(self, what: str, fn, *args, **kwargs):
        if self.debug:
            logger.debug("-> %s", what)
        try:
            result = fn(*args, **kwargs)
        except GithubException as e:
            if self.debug:
                logger.debug("<- %s from %s", e.status, what)
            raise GitHubAPIError(f"GitHub API error {e.status} for {what}", status=e.status) from e
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"Request failed for {what}: {e}") from e
        if self.debug:
            logger.debug("<- ok from %s", what)
        return result

    def _first_page(self, content_class: Type, url: str, params: Optional[Dict[str, Any]] = None) -> list:
        pages = PaginatedList(content_class, self._g.requester, url, params)
        return self._call(f"GET {url}", pages.get_page, 0)

    def get_authenticated_user(self) -> str:
        """Return the login of the token's owner."""
        return self._call("GET /user", lambda: self._g.get_user().login)

    def get_token_scopes(self) -> List[str]:
        """Return the OAuth scopes granted to the token (empty for fine-grained tokens)."""
        headers, _ = self._call("GET /", self._g.requester.requestJsonAndCheck, "GET", "/")
        raw = ""
        for key, value in (headers or {}).items():
            if key.lower() == "x-oauth-scopes":
                raw = value or ""
                break
        return [s.strip() for s in raw.split(",") if s.strip()]

    def get_org_repos(self, org: str) -> List[str]:
        repos = self._first_page(Repository, f"/orgs/{org}/repos")
        return [r.full_name for r in repos]

    def get_user_repos(self) -> List[str]:
        repos = self._first_page(Repository, "/user/repos")
        return [r.full_name for r in repos]

    def get_branches(self, repo_full_name: str) -> List[str]:
        owner, name = split_repo(repo_full_name)
        branches = self._first_page(Branch, f"/repos/{owner}/{name}/branches")
        return [b.name for b in branches]

    def get_commits(self, repo_full_name: str, since: datetime.datetime, until: datetime.datetime,
                    sha: Optional[str] = None) -> List[RemoteCommit]:
        """
        Fetch one page of commits in ``[since, until)``, optionally on branch ``sha``.

        Args:
            repo_full_name: Repository in ``owner/name`` form
            since: Window start (sent as UTC)
            until: Window end (sent as UTC)
            sha: Branch name or commit SHA to list from

        Returns:
            List of RemoteCommit in the order the API returned them
        """
        owner, name = split_repo(repo_full_name)
        params: Dict[str, Any] = {"since": _iso_utc(since), "until": _iso_utc(until)}
        if sha:
            params["sha"] = sha
        commits = self._first_page(Commit, f"/repos/{owner}/{name}/commits", params)
        return [to_remote_commit(c) for c in commits]

    def get_repo_events(self, repo_full_name: str) -> List[RawEvent]:
        owner, name = split_repo(repo_full_name)
        return self._events(f"/repos/{owner}/{name}/events")

    def get_user_events(self, username: str) -> List[RawEvent]:
        return self._events(f"/users/{username}/events")

    def get_user_public_events(self, username: str) -> List[RawEvent]:
        return self._events(f"/users/{username}/events/public")

    def _events(self, url: str) -> List[RawEvent]:
        result: List[RawEvent] = []
        for event in self._first_page(Event, url):
            try:
                result.append(parse_event(event.raw_data))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("Skipping malformed event from %s: %s", url, e)
        return result
