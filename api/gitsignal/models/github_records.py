"""Typed GitHub payload records, validated at the fetch boundary.

Each resource kind gets its own record; unknown keys in the payload are ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CommitActivityItem(_Record):
    """GET /repos/{owner}/{repo}/stats/commit_activity entry."""

    week: int
    total: int = Field(default=0, ge=0)
    days: list[int] = Field(default_factory=lambda: [0] * 7)  # Sun..Sat


class StarItem(_Record):
    """GET /repos/{owner}/{repo}/stargazers entry (star+json media type)."""

    starred_at: Optional[datetime] = None


class IssueItem(_Record):
    """GET /repos/{owner}/{repo}/issues entry. Pull requests come back from this endpoint too."""

    number: Optional[int] = None
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    pull_request: Optional[dict[str, Any]] = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None


class ContributorAuthor(_Record):
    login: str


class ContributorWeekItem(_Record):
    w: int
    c: int = 0
    a: int = 0
    d: int = 0


class ContributorStatsItem(_Record):
    """GET /repos/{owner}/{repo}/stats/contributors entry."""

    author: Optional[ContributorAuthor] = None
    total: int = 0
    weeks: list[ContributorWeekItem] = Field(default_factory=list)
