from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from gitsignal.models.error import ErrorDetail
from gitsignal.models.repo import ParsedRepo, RepoInfo
from gitsignal.routers.deps import get_client
from gitsignal.services import repo_service
from gitsignal.services.github_client import GitHubClient

router = APIRouter()


@router.get("/repos/parse", response_model=ParsedRepo, responses={422: {"model": ErrorDetail}})
async def parse_repo(
    text: str = Query(..., alias="input", min_length=1, description="GitHub URL or owner/repo."),
) -> ParsedRepo:
    parsed = repo_service.parse_repo_input(text)
    if parsed is None:
        raise HTTPException(status_code=422, detail="Not a GitHub repository URL or owner/repo")
    return parsed


@router.get(
    "/repos/{owner}/{repo}",
    response_model=RepoInfo,
    responses={404: {"model": ErrorDetail}, 429: {"model": ErrorDetail}, 502: {"model": ErrorDetail}},
)
async def get_repo(owner: str, repo: str, client: GitHubClient = Depends(get_client)) -> RepoInfo:
    """Basic repository information (stars, forks, open issues, language)."""
    return await repo_service.fetch_repo_info(owner, repo, client=client)
