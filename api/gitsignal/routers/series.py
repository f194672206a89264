"""Weekly series routes: one kind, a bundle of kinds, and a multi-repo comparison."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from gitsignal.models.error import ErrorDetail
from gitsignal.models.series import SeriesBundle, SeriesComparison, SeriesKind, WeeklySeries
from gitsignal.routers.deps import get_client, get_now
from gitsignal.services import series_service
from gitsignal.services.github_client import GitHubClient
from gitsignal.services.repo_service import parse_repo_list
from gitsignal.services.week_buckets import iso_utc

router = APIRouter()

MAX_COMPARE_REPOS = 6

_ERROR_RESPONSES = {
    202: {"model": ErrorDetail, "description": "GitHub is still computing stats; retry later"},
    404: {"model": ErrorDetail},
    429: {"model": ErrorDetail},
    502: {"model": ErrorDetail},
}


def _parse_kinds(raw: str) -> list[SeriesKind]:
    kinds: list[SeriesKind] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        try:
            kinds.append(SeriesKind(value))
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Unknown series kind: {value}") from None
    if not kinds:
        raise HTTPException(status_code=422, detail="At least one series kind is required")
    return kinds


@router.get(
    "/repos/{owner}/{repo}/series/{kind}",
    response_model=WeeklySeries,
    responses=_ERROR_RESPONSES,
)
async def get_series(
    owner: str,
    repo: str,
    kind: SeriesKind,
    max_pages: Optional[int] = Query(None, ge=1, le=50, description="Page ceiling for paginated kinds."),
    client: GitHubClient = Depends(get_client),
    now: Optional[datetime] = Depends(get_now),
) -> WeeklySeries:
    """Dense weekly series of one kind for one repository."""
    now = series_service.resolve_now(now)
    points = await series_service.get_weekly_series(
        kind, owner, repo, client=client, now=now, max_pages=max_pages
    )
    return WeeklySeries(owner=owner, repo=repo, kind=kind, generated_at=iso_utc(now), points=points)


@router.get("/repos/{owner}/{repo}/series", response_model=SeriesBundle, responses=_ERROR_RESPONSES)
async def get_series_bundle(
    owner: str,
    repo: str,
    kinds: str = Query(
        ",".join(k.value for k in SeriesKind),
        description="Comma separated series kinds.",
    ),
    max_pages: Optional[int] = Query(None, ge=1, le=50),
    client: GitHubClient = Depends(get_client),
    now: Optional[datetime] = Depends(get_now),
) -> SeriesBundle:
    """Several series kinds for one repository computed at one instant."""
    return await series_service.get_series_bundle(
        owner, repo, _parse_kinds(kinds), client=client, now=now, max_pages=max_pages
    )


@router.get("/series/{kind}/compare", response_model=SeriesComparison, responses=_ERROR_RESPONSES)
async def compare_series(
    kind: SeriesKind,
    repos: str = Query(..., min_length=3, description="Comma separated owner/repo or GitHub URLs."),
    max_pages: Optional[int] = Query(None, ge=1, le=50),
    client: GitHubClient = Depends(get_client),
    now: Optional[datetime] = Depends(get_now),
) -> SeriesComparison:
    try:
        parsed = parse_repo_list(repos)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if not parsed:
        raise HTTPException(status_code=422, detail="At least one repository is required")
    if len(parsed) > MAX_COMPARE_REPOS:
        raise HTTPException(status_code=422, detail=f"At most {MAX_COMPARE_REPOS} repositories can be compared")
    return await series_service.compare_repos(kind, parsed, client=client, now=now, max_pages=max_pages)
