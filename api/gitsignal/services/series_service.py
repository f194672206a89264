"""Weekly series query: fetch -> filter -> bucket -> assemble, one function per series kind.

Every entry point reads the clock at most once and threads that instant through the
whole computation, so series computed together share their bucket boundaries.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from gitsignal.models.github_records import (
    CommitActivityItem,
    ContributorStatsItem,
    IssueItem,
    StarItem,
)
from gitsignal.models.repo import ParsedRepo
from gitsignal.models.series import (
    RepoSeries,
    SeriesBundle,
    SeriesComparison,
    SeriesKind,
    TimeSeriesPoint,
)
from gitsignal.services.github_client import GitHubClient
from gitsignal.services.record_filter import (
    commit_week_totals,
    contributor_activities,
    filter_issue_timestamps,
    parse_records,
    star_timestamps,
)
from gitsignal.services.repo_service import repo_color
from gitsignal.services.week_buckets import (
    bucket_of,
    current_week,
    iso_utc,
    recency_horizon,
    to_timestamp,
)
from gitsignal.services.week_series import WeekCounts, assemble_series, reduce_contributor_weeks

log = logging.getLogger(__name__)

SeriesBuilder = Callable[[GitHubClient, str, str, datetime, Optional[int]], Awaitable[list[TimeSeriesPoint]]]


def resolve_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


async def commit_series(
    client: GitHubClient, owner: str, repo: str, now: datetime, max_pages: int | None = None
) -> list[TimeSeriesPoint]:
    """Weekly commit totals. Buckets follow the week grid GitHub reports, not the epoch grid."""
    items = parse_records(await client.commit_activity(owner, repo), CommitActivityItem)
    totals = commit_week_totals(items)
    if not totals:
        return []
    anchor = min(totals)
    counts = WeekCounts()
    for week, total in totals.items():
        counts.add(bucket_of(week, anchor), total)
    last = max(current_week(now, anchor), counts.last())
    return assemble_series(counts, anchor, last)


async def contributor_series(
    client: GitHubClient, owner: str, repo: str, now: datetime, max_pages: int | None = None
) -> list[TimeSeriesPoint]:
    items = parse_records(await client.contributor_stats(owner, repo), ContributorStatsItem)
    return reduce_contributor_weeks(contributor_activities(items))


async def star_series(
    client: GitHubClient, owner: str, repo: str, now: datetime, max_pages: int | None = None
) -> list[TimeSeriesPoint]:
    """Stars per epoch-aligned week from the first fetched star to the current week."""
    stars = parse_records(await client.list_stargazers(owner, repo, max_pages=max_pages), StarItem)
    counts = WeekCounts.from_timestamps(to_timestamp(ts) for ts in star_timestamps(stars))
    first = counts.first()
    if first is None:
        return []
    return assemble_series(counts, first, current_week(now))


async def _issue_series(
    client: GitHubClient,
    owner: str,
    repo: str,
    now: datetime,
    max_pages: int | None,
    *,
    state: str,
    sort: str,
    field: str,
) -> list[TimeSeriesPoint]:
    horizon = recency_horizon(now)
    raw = await client.list_issues(
        owner,
        repo,
        state=state,
        since_iso_utc=iso_utc(horizon),
        sort=sort,
        max_pages=max_pages,
    )
    issues = parse_records(raw, IssueItem)
    counts = WeekCounts.from_timestamps(
        to_timestamp(ts) for ts in filter_issue_timestamps(issues, field, horizon)
    )
    return assemble_series(counts, bucket_of(to_timestamp(horizon)), current_week(now))


async def issues_opened_series(
    client: GitHubClient, owner: str, repo: str, now: datetime, max_pages: int | None = None
) -> list[TimeSeriesPoint]:
    return await _issue_series(
        client, owner, repo, now, max_pages, state="all", sort="created", field="created_at"
    )


async def issues_closed_series(
    client: GitHubClient, owner: str, repo: str, now: datetime, max_pages: int | None = None
) -> list[TimeSeriesPoint]:
    return await _issue_series(
        client, owner, repo, now, max_pages, state="closed", sort="updated", field="closed_at"
    )


SERIES_BUILDERS: dict[SeriesKind, SeriesBuilder] = {
    SeriesKind.COMMITS: commit_series,
    SeriesKind.CONTRIBUTORS: contributor_series,
    SeriesKind.STARS: star_series,
    SeriesKind.ISSUES_OPENED: issues_opened_series,
    SeriesKind.ISSUES_CLOSED: issues_closed_series,
}


async def get_weekly_series(
    kind: SeriesKind | str,
    owner: str,
    repo: str,
    *,
    client: GitHubClient,
    now: datetime | None = None,
    max_pages: int | None = None,
) -> list[TimeSeriesPoint]:
    """Dense weekly series of one kind for one repository.

    Raises the client's GitHubFetchError subclasses unchanged; nothing partial is returned.
    """
    kind = SeriesKind(kind)
    now = resolve_now(now)
    points = await SERIES_BUILDERS[kind](client, owner, repo, now, max_pages)
    log.info("weekly_series kind=%s repo=%s/%s points=%s", kind.value, owner, repo, len(points))
    return points


async def _gather_all(coros: Iterable[Awaitable[list[TimeSeriesPoint]]]) -> list[list[TimeSeriesPoint]]:
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def get_series_bundle(
    owner: str,
    repo: str,
    kinds: Sequence[SeriesKind | str],
    *,
    client: GitHubClient,
    now: datetime | None = None,
    max_pages: int | None = None,
) -> SeriesBundle:
    """Several kinds for one repository, concurrently, at one shared instant."""
    now = resolve_now(now)
    resolved = list(dict.fromkeys(SeriesKind(k) for k in kinds))
    results = await _gather_all(
        get_weekly_series(kind, owner, repo, client=client, now=now, max_pages=max_pages)
        for kind in resolved
    )
    return SeriesBundle(
        owner=owner,
        repo=repo,
        generated_at=iso_utc(now),
        series=dict(zip(resolved, results)),
    )


async def compare_repos(
    kind: SeriesKind | str,
    repos: Sequence[ParsedRepo],
    *,
    client: GitHubClient,
    now: datetime | None = None,
    max_pages: int | None = None,
) -> SeriesComparison:
    """One kind for several repositories, each computed independently, colored by position."""
    kind = SeriesKind(kind)
    now = resolve_now(now)
    results = await _gather_all(
        get_weekly_series(kind, r.owner, r.name, client=client, now=now, max_pages=max_pages)
        for r in repos
    )
    return SeriesComparison(
        kind=kind,
        generated_at=iso_utc(now),
        repos=[
            RepoSeries(owner=r.owner, repo=r.name, color=repo_color(index), points=points)
            for index, (r, points) in enumerate(zip(repos, results))
        ],
    )
