"""Repository lookup helpers: input parsing, basic info, chart colors."""

from __future__ import annotations

import re
from typing import Optional

from gitsignal.models.repo import ParsedRepo, RepoInfo
from gitsignal.services.github_client import GitHubClient, TransientFetchError

_URL_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.)?github\.com/([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$",
    re.IGNORECASE,
)
_SHORT_PATTERN = re.compile(r"^([^/]+)/([^/]+)$")

REPO_COLORS = (
    "#8b5cf6",  # violet
    "#06b6d4",  # cyan
    "#f59e0b",  # amber
    "#10b981",  # emerald
    "#f43f5e",  # rose
    "#6366f1",  # indigo
)


def parse_repo_input(text: str) -> Optional[ParsedRepo]:
    """Parse 'https://github.com/owner/repo[.git][/...]' or 'owner/repo'. None when neither matches."""
    trimmed = (text or "").strip()
    match = _URL_PATTERN.search(trimmed) or _SHORT_PATTERN.match(trimmed)
    if not match:
        return None
    owner, name = match.group(1).strip(), match.group(2).strip()
    if not owner or not name:
        return None
    return ParsedRepo(owner=owner, name=name)


def parse_repo_list(raw: str) -> list[ParsedRepo]:
    """Comma separated repo inputs; raises ValueError naming the first unparseable entry."""
    out: list[ParsedRepo] = []
    for chunk in raw.split(","):
        if not chunk.strip():
            continue
        parsed = parse_repo_input(chunk)
        if parsed is None:
            raise ValueError(f"Not a GitHub repository: {chunk.strip()}")
        out.append(parsed)
    return out


def repo_color(index: int) -> str:
    return REPO_COLORS[index % len(REPO_COLORS)]


async def fetch_repo_info(owner: str, repo: str, *, client: GitHubClient) -> RepoInfo:
    data = await client.get_repo(owner, repo)
    try:
        return RepoInfo(
            owner=(data.get("owner") or {}).get("login") or owner,
            name=data.get("name") or repo,
            full_name=data.get("full_name") or f"{owner}/{repo}",
            description=data.get("description"),
            stars=int(data.get("stargazers_count") or 0),
            forks=int(data.get("forks_count") or 0),
            open_issues=int(data.get("open_issues_count") or 0),
            language=data.get("language"),
            updated_at=data.get("updated_at"),
        )
    except (TypeError, ValueError) as exc:
        raise TransientFetchError(f"Unexpected repository payload for {owner}/{repo}: {exc}") from exc
