"""Repository models for GET /api/repos/{owner}/{repo} and repo input parsing."""

from typing import Optional

from pydantic import BaseModel


class RepoInfo(BaseModel):
    owner: str
    name: str
    full_name: str
    description: Optional[str] = None
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    language: Optional[str] = None
    updated_at: Optional[str] = None


class ParsedRepo(BaseModel):
    """owner/name pair parsed from a GitHub URL or an owner/repo string."""

    owner: str
    name: str
