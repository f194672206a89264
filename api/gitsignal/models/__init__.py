"""Pydantic models."""

from gitsignal.models.error import ErrorDetail
from gitsignal.models.repo import ParsedRepo, RepoInfo
from gitsignal.models.series import (
    ContributorActivity,
    ContributorWeek,
    SeriesKind,
    TimeSeriesPoint,
    WeeklySeries,
)

__all__ = [
    "ContributorActivity",
    "ContributorWeek",
    "ErrorDetail",
    "ParsedRepo",
    "RepoInfo",
    "SeriesKind",
    "TimeSeriesPoint",
    "WeeklySeries",
]
