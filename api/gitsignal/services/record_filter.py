"""Narrow raw GitHub pages into typed records and the timestamps that count."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gitsignal.models.github_records import (
    CommitActivityItem,
    ContributorStatsItem,
    IssueItem,
    StarItem,
)
from gitsignal.models.series import ContributorActivity, ContributorWeek
from gitsignal.services.github_client import TransientFetchError

ISSUE_TIMESTAMP_FIELDS = ("created_at", "closed_at")

R = TypeVar("R", bound=BaseModel)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_records(items: Iterable[Any], record: Type[R]) -> list[R]:
    """Validate raw items as record; a malformed item fails the whole fetch."""
    out: list[R] = []
    for index, item in enumerate(items):
        try:
            out.append(record.model_validate(item))
        except ValidationError as exc:
            raise TransientFetchError(
                f"Malformed {record.__name__} at index {index}: {exc.error_count()} validation error(s)"
            ) from exc
    return out


def filter_issue_timestamps(issues: Iterable[IssueItem], field: str, horizon: datetime) -> list[datetime]:
    """Timestamps of real issues (not pull requests) whose field is set and at or after horizon."""
    if field not in ISSUE_TIMESTAMP_FIELDS:
        raise ValueError(f"unsupported issue timestamp field: {field}")
    horizon = _utc(horizon)
    out: list[datetime] = []
    for issue in issues:
        if issue.is_pull_request:
            continue
        value = getattr(issue, field)
        if value is None:
            continue
        value = _utc(value)
        if value >= horizon:
            out.append(value)
    return out


def star_timestamps(stars: Iterable[StarItem]) -> list[datetime]:
    return [_utc(star.starred_at) for star in stars if star.starred_at is not None]


def commit_week_totals(items: Iterable[CommitActivityItem]) -> dict[int, int]:
    totals: dict[int, int] = {}
    for item in items:
        totals[item.week] = totals.get(item.week, 0) + item.total
    return totals


def contributor_activities(items: Iterable[ContributorStatsItem]) -> list[ContributorActivity]:
    """Stats entries to per-contributor weekly activity. Ghost authors get a positional id."""
    out: list[ContributorActivity] = []
    for index, item in enumerate(items):
        contributor_id = item.author.login if item.author else f"anonymous-{index}"
        out.append(
            ContributorActivity(
                contributor_id=contributor_id,
                weeks=[ContributorWeek(week=w.w, commit_count=w.c) for w in item.weeks],
            )
        )
    return out
