"""Weekly series models: buckets, points and the series query responses."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SeriesKind(str, Enum):
    COMMITS = "commits"
    CONTRIBUTORS = "contributors"
    STARS = "stars"
    ISSUES_OPENED = "issues_opened"
    ISSUES_CLOSED = "issues_closed"


class TimeSeriesPoint(BaseModel):
    """One bucket of a dense weekly series."""

    week: int  # unix seconds of the bucket start
    value: int = Field(ge=0)
    label: str = ""


class ContributorWeek(BaseModel):
    week: int
    commit_count: int = 0


class ContributorActivity(BaseModel):
    """Weekly commit counts of one contributor, as reported by the stats endpoint."""

    contributor_id: str
    weeks: list[ContributorWeek] = Field(default_factory=list)


class WeeklySeries(BaseModel):
    """GET /api/repos/{owner}/{repo}/series/{kind} response."""

    owner: str
    repo: str
    kind: SeriesKind
    generated_at: str
    points: list[TimeSeriesPoint]


class SeriesBundle(BaseModel):
    """Several series kinds for one repository computed at the same instant."""

    owner: str
    repo: str
    generated_at: str
    series: dict[SeriesKind, list[TimeSeriesPoint]]


class RepoSeries(BaseModel):
    owner: str
    repo: str
    color: str
    points: list[TimeSeriesPoint]


class SeriesComparison(BaseModel):
    """One series kind for several repositories, each with its chart color."""

    kind: SeriesKind
    generated_at: str
    repos: list[RepoSeries]
