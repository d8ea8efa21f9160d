"""
Data models for the EOD tracker.

This module contains the shared data structures used across all modules:
the report-side ``Commit``/``Contribution`` records and the typed shapes the
GitHub client produces from upstream payloads.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PUSH_EVENT = "PushEvent"


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse an ISO-8601 timestamp, accepting GitHub's trailing ``Z``."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(value)


@dataclass(frozen=True)
class Commit:
    """A single commit as it appears in a report."""
    hash: str
    message: str
    author: str
    timestamp: datetime.datetime

    @property
    def first_line(self) -> str:
        lines = self.message.splitlines()
        return lines[0] if lines else ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "hash": self.hash,
            "message": self.message,
            "author": self.author,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        return cls(
            hash=data["hash"],
            message=data["message"],
            author=data["author"],
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass
class Contribution:
    """Commits grouped under one repository ("owner/name")."""
    repo: str
    commits: List[Commit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"repo": self.repo, "commits": [c.to_dict() for c in self.commits]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contribution":
        return cls(repo=data["repo"], commits=[Commit.from_dict(c) for c in data["commits"]])


@dataclass(frozen=True)
class EventCommit:
    """Commit entry carried inside a push event payload."""
    sha: str
    message: str
    author_name: str
    author_email: Optional[str] = None
    # Only known for commits that came from the commit-list endpoint
    timestamp: Optional[datetime.datetime] = None


@dataclass(frozen=True)
class RawEvent:
    """Upstream activity event, validated at the client boundary."""
    type: str
    created_at: datetime.datetime
    repo_name: str
    commits: List[EventCommit] = field(default_factory=list)
    actor_login: Optional[str] = None

    @property
    def is_push(self) -> bool:
        return self.type == PUSH_EVENT


@dataclass(frozen=True)
class RemoteCommit:
    """Entry returned by the repository commit-list endpoint."""
    sha: str
    message: str
    author_name: str
    author_email: Optional[str] = None
    author_login: Optional[str] = None
    date: Optional[datetime.datetime] = None
